from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Request
from pydantic import ValidationError
from sqlalchemy.orm import Session

from lunchbot.config import settings
from lunchbot.database import get_db
from lunchbot.logging_config import get_logger
from lunchbot.schemas.line import LineEvent, LineWebhookBody, WebhookResponse
from lunchbot.services.command_service import CommandService
from lunchbot.services.line_service import LineService, SignatureError, get_line_service, verify_signature
from lunchbot.services.shop_store import ShopStore

logger = get_logger("webhook")

router = APIRouter()

# The bot was blocked or removed from the group; no reply token comes with these.
CONVERSATION_ENDED_EVENTS = {"unfollow", "leave"}

NON_POST_METHODS = ["GET", "HEAD", "PUT", "PATCH", "DELETE", "OPTIONS", "TRACE", "CONNECT"]


def get_command_service(db: Session = Depends(get_db)) -> CommandService:
    return CommandService(ShopStore(db))


async def process_event(
    db: Session,
    event: LineEvent,
    commands: CommandService,
    line_service: LineService,
) -> bool:
    """
    Handle one webhook event in its own transaction.

    Returns True when the event was acted on. A failing event is rolled
    back and logged without a reply; other events are unaffected.
    """
    conversation_id = event.source.conversation_id
    if not conversation_id:
        logger.warning("Event without source id skipped", extra={"context": {"type": event.type}})
        return False

    reply = ""
    try:
        if event.type in CONVERSATION_ENDED_EVENTS:
            commands.end_conversation(conversation_id)
        elif event.text is not None:
            reply = commands.handle_text(conversation_id, event.text, is_group=event.source.is_group)
        else:
            return False
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(
            f"Event handling failed: {e}",
            exc_info=True,
            extra={"context": {"conversation_id": conversation_id, "type": event.type}},
        )
        return False

    if reply:
        await line_service.reply_text(event.replyToken, reply)
    return True


@router.post("/", response_model=WebhookResponse)
@router.post("/webhook", response_model=WebhookResponse)
async def handle_line_webhook(
    request: Request,
    x_line_signature: Optional[str] = Header(default=None),
    db: Session = Depends(get_db),
    commands: CommandService = Depends(get_command_service),
    line_service: LineService = Depends(get_line_service),
):
    """
    LINE webhook:
    - verify x-line-signature against the raw body
    - run text commands of every message event and reply
    - drop the shops of conversations the bot left
    """
    body = await request.body()

    try:
        verify_signature(settings.channel_secret, body, x_line_signature)
    except SignatureError as e:
        logger.warning(f"Webhook rejected: {e.message}")
        raise HTTPException(status_code=400, detail="Invalid signature")

    try:
        payload = LineWebhookBody.model_validate_json(body)
    except ValidationError as e:
        logger.warning(f"Invalid webhook payload: {e}")
        raise HTTPException(status_code=400, detail="Invalid payload")

    logger.info("Webhook received", extra={"context": {"events": len(payload.events)}})

    processed = 0
    for event in payload.events:
        if await process_event(db, event, commands, line_service):
            processed += 1

    return WebhookResponse(success=True, message="OK", processed=processed)


@router.api_route("/", methods=NON_POST_METHODS, include_in_schema=False)
@router.api_route("/webhook", methods=NON_POST_METHODS, include_in_schema=False)
async def reject_non_post():
    raise HTTPException(status_code=404, detail="Not Found")
