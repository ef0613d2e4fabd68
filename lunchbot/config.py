from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    channel_access_token: str = ""
    channel_secret: str = ""
    database_url: str = "sqlite:///./lunchbot.db"
    host: str = "0.0.0.0"
    port: int = 3000
    timezone: str = "Asia/Taipei"
    sampler_max_attempts: int = 1000
    line_api_base_url: str = "https://api.line.me/v2/bot"
    log_level: str = "INFO"
    debug: bool = False

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
