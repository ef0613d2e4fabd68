import base64
import hashlib
import hmac
from typing import Optional

import httpx

from lunchbot.config import settings
from lunchbot.logging_config import get_logger

logger = get_logger("line_service")

MAX_TEXT_LENGTH = 5000


class SignatureError(Exception):
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


def compute_signature(secret: str, body: bytes) -> str:
    """Base64 HMAC-SHA256 of the raw request body, as LINE sends in x-line-signature."""
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).digest()
    return base64.b64encode(digest).decode("utf-8")


def verify_signature(secret: str, body: bytes, signature: Optional[str]) -> None:
    """Raise SignatureError unless signature matches body."""
    if not secret:
        raise SignatureError("Channel secret is not configured")
    if not signature:
        raise SignatureError("Missing x-line-signature header")
    if not hmac.compare_digest(compute_signature(secret, body), signature):
        raise SignatureError("Signature mismatch")


class LineService:
    """Service for replying through the LINE Messaging API."""

    def __init__(self, channel_access_token: str, base_url: Optional[str] = None):
        self.channel_access_token = channel_access_token
        self.base_url = (base_url or settings.line_api_base_url).rstrip("/")

    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.channel_access_token}",
            "Content-Type": "application/json",
        }

    async def reply_text(self, reply_token: Optional[str], text: str) -> bool:
        """Reply to one event. Failures are logged, never raised."""
        if not reply_token or not text:
            return False

        if len(text) > MAX_TEXT_LENGTH:
            text = text[: MAX_TEXT_LENGTH - 1] + "…"

        payload = {"replyToken": reply_token, "messages": [{"type": "text", "text": text}]}
        try:
            async with httpx.AsyncClient(timeout=15.0) as client:
                response = await client.post(f"{self.base_url}/message/reply", headers=self._headers(), json=payload)
        except httpx.HTTPError as e:
            logger.error(f"LINE reply request failed: {e}")
            return False

        if response.status_code >= 400:
            logger.error(
                "LINE reply rejected",
                extra={"context": {"status": response.status_code, "body": response.text[:500]}},
            )
            return False
        return True


def get_line_service() -> LineService:
    """FastAPI dependency."""
    return LineService(settings.channel_access_token)
