import base64
import hashlib
import hmac
import random
from datetime import date
from unittest.mock import AsyncMock, Mock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from lunchbot.config import settings
from lunchbot.database import Base, get_db
from lunchbot.main import app
from lunchbot.services.command_service import CommandService
from lunchbot.services.line_service import LineService, get_line_service
from lunchbot.services.shop_store import ShopStore

CHANNEL_SECRET = "test-channel-secret"

# 2024-01-03 is a Wednesday (weekday index 3)
WEDNESDAY = date(2024, 1, 3)


@pytest.fixture
def db_session():
    """In-memory sqlite session with the schema created."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def store(db_session):
    return ShopStore(db_session)


@pytest.fixture
def commands(store):
    return CommandService(store, today=lambda: WEDNESDAY, rng=random.Random(42), max_attempts=200)


@pytest.fixture
def line_service():
    service = Mock(spec=LineService)
    service.reply_text = AsyncMock(return_value=True)
    return service


@pytest.fixture
def client(db_session, line_service, monkeypatch):
    monkeypatch.setattr(settings, "channel_secret", CHANNEL_SECRET)
    app.dependency_overrides[get_db] = lambda: db_session
    app.dependency_overrides[get_line_service] = lambda: line_service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def sign(body: bytes, secret: str = CHANNEL_SECRET) -> str:
    return base64.b64encode(hmac.new(secret.encode("utf-8"), body, hashlib.sha256).digest()).decode("utf-8")
