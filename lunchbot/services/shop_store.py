from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from lunchbot.logging_config import get_logger
from lunchbot.models import Shop
from lunchbot.models.shop import NAME_MAX_LENGTH
from lunchbot.services.result import DUPLICATE, EMPTY_NAME, NAME_TOO_LONG, NOT_FOUND, Result

logger = get_logger("shop_store")


class ShopStore:
    """Shop records of every conversation, always queried by conversation_id."""

    def __init__(self, db: Session):
        self.db = db

    def list_shops(self, conversation_id: str) -> list[Shop]:
        return self.db.query(Shop).filter(Shop.conversation_id == conversation_id).order_by(Shop.id).all()

    def get_shop(self, conversation_id: str, name: str) -> Optional[Shop]:
        return self.db.query(Shop).filter(Shop.conversation_id == conversation_id, Shop.name == name).first()

    def create_shop(self, conversation_id: str, name: str, closed_days: list[int], rate: float) -> Result[Shop]:
        if not name:
            return Result.failure("Shop name is empty", EMPTY_NAME)
        if len(name) > NAME_MAX_LENGTH:
            return Result.failure(f"Shop name longer than {NAME_MAX_LENGTH}", NAME_TOO_LONG)
        if self.get_shop(conversation_id, name):
            return Result.failure(f"Shop '{name}' already exists", DUPLICATE)

        # A concurrent add of the same name surfaces as IntegrityError from the unique index.
        shop = Shop(conversation_id=conversation_id, name=name, closed_days=list(closed_days), rate=rate)
        self.db.add(shop)
        self.db.flush()
        logger.info("Shop created", extra={"context": {"conversation_id": conversation_id, "name": name}})
        return Result.success(shop)

    def update_shop(self, conversation_id: str, name: str, closed_days: list[int], rate: float) -> Result[Shop]:
        if not name:
            return Result.failure("Shop name is empty", EMPTY_NAME)

        matched = (
            self.db.query(Shop)
            .filter(Shop.conversation_id == conversation_id, Shop.name == name)
            .update(
                {
                    Shop.closed_days: list(closed_days),
                    Shop.rate: rate,
                    Shop.updated_at: datetime.now(timezone.utc),
                },
                synchronize_session="fetch",
            )
        )
        if not matched:
            return Result.failure(f"Shop '{name}' not found", NOT_FOUND)

        self.db.flush()
        return Result.success(self.get_shop(conversation_id, name))

    def delete_shop(self, conversation_id: str, name: str) -> Result[str]:
        if not name:
            return Result.failure("Shop name is empty", EMPTY_NAME)

        deleted = (
            self.db.query(Shop)
            .filter(Shop.conversation_id == conversation_id, Shop.name == name)
            .delete(synchronize_session="fetch")
        )
        if not deleted:
            return Result.failure(f"Shop '{name}' not found", NOT_FOUND)
        return Result.success(name)

    def delete_all(self, conversation_id: str) -> int:
        deleted = (
            self.db.query(Shop)
            .filter(Shop.conversation_id == conversation_id)
            .delete(synchronize_session="fetch")
        )
        logger.info(
            "Conversation shops cleared",
            extra={"context": {"conversation_id": conversation_id, "deleted": deleted}},
        )
        return deleted
