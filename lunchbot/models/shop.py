from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, Float, Integer, Text, UniqueConstraint

from lunchbot.database import Base

NAME_MAX_LENGTH = 30


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Shop(Base):
    __tablename__ = "shops"
    __table_args__ = (UniqueConstraint("name", "conversation_id", name="uq_shops_name_conversation"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)
    conversation_id = Column(Text, nullable=False, index=True)  # LINE groupId / roomId / userId
    closed_days = Column(JSON, nullable=False, default=list)  # 0 = Sunday .. 6 = Saturday
    rate = Column(Float, nullable=False, default=1.0)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    def is_closed_on(self, weekday: int) -> bool:
        return weekday in (self.closed_days or [])

    def __repr__(self) -> str:
        return f"<Shop {self.conversation_id}/{self.name} closed={self.closed_days} rate={self.rate}>"
