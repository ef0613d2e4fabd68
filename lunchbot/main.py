from fastapi import FastAPI

from lunchbot import __version__
from lunchbot.config import settings
from lunchbot.database import init_db
from lunchbot.logging_config import get_logger, setup_logging
from lunchbot.routers import webhook

setup_logging(settings.log_level)

logger = get_logger("main")

app = FastAPI(
    title="lunchbot",
    description="LINE bot that remembers where a chat likes to eat and picks one",
    version=__version__,
)

app.include_router(webhook.router)


@app.on_event("startup")
def create_tables() -> None:
    init_db()
    logger.info("Database ready")
