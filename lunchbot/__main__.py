import uvicorn

from lunchbot.config import settings


def main() -> None:
    uvicorn.run("lunchbot.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
