from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class LineSource(BaseModel):
    type: str = "user"  # user, group, room
    userId: Optional[str] = None
    groupId: Optional[str] = None
    roomId: Optional[str] = None

    @property
    def conversation_id(self) -> Optional[str]:
        return self.groupId or self.roomId or self.userId

    @property
    def is_group(self) -> bool:
        return self.type in ("group", "room") or bool(self.groupId or self.roomId)


class LineMessage(BaseModel):
    id: Optional[str] = None
    type: str  # text, image, sticker, ...
    text: Optional[str] = None

    model_config = ConfigDict(extra="allow")


class LineEvent(BaseModel):
    type: str  # message, follow, unfollow, join, leave, ...
    source: LineSource = Field(default_factory=LineSource)
    replyToken: Optional[str] = None
    message: Optional[LineMessage] = None
    webhookEventId: Optional[str] = None

    model_config = ConfigDict(extra="allow")

    @property
    def text(self) -> Optional[str]:
        if self.type != "message" or self.message is None or self.message.type != "text":
            return None
        return self.message.text


class LineWebhookBody(BaseModel):
    destination: Optional[str] = None
    events: list[LineEvent] = Field(default_factory=list)


class WebhookResponse(BaseModel):
    success: bool
    message: Optional[str] = None
    processed: int = 0
