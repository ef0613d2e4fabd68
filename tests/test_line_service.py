import asyncio
from unittest.mock import AsyncMock, MagicMock, Mock, patch

import httpx
import pytest

from lunchbot.services.line_service import (
    MAX_TEXT_LENGTH,
    LineService,
    SignatureError,
    compute_signature,
    verify_signature,
)
from tests.conftest import sign


class TestVerifySignature:
    def test_matching_signature(self):
        body = b'{"events":[]}'
        verify_signature("secret", body, sign(body, "secret"))

    def test_known_digest(self):
        # base64(HMAC-SHA256("secret", "{}"))
        assert compute_signature("secret", b"{}") == "dzJZAsrKgS3CWXM6rNBGtzgXNyx3e42VtAJkdHRRbhM="

    def test_mismatch(self):
        body = b'{"events":[]}'
        with pytest.raises(SignatureError):
            verify_signature("secret", body, sign(body, "other"))

    def test_body_tampered(self):
        with pytest.raises(SignatureError):
            verify_signature("secret", b'{"events":[1]}', sign(b'{"events":[]}', "secret"))

    def test_missing_header(self):
        with pytest.raises(SignatureError):
            verify_signature("secret", b"{}", None)

    def test_missing_secret(self):
        with pytest.raises(SignatureError):
            verify_signature("", b"{}", sign(b"{}", ""))


def _mock_async_client(mock_client_class, response=None, error=None):
    client = MagicMock()
    client.post = AsyncMock(return_value=response, side_effect=error)
    mock_client_class.return_value.__aenter__.return_value = client
    return client


class TestReplyText:
    @patch("lunchbot.services.line_service.httpx.AsyncClient")
    def test_posts_reply(self, mock_client_class):
        client = _mock_async_client(mock_client_class, Mock(status_code=200, text="{}"))
        service = LineService("token", base_url="https://line.test/v2/bot")

        assert asyncio.run(service.reply_text("reply-token", "hello")) is True

        client.post.assert_awaited_once()
        url = client.post.call_args.args[0]
        kwargs = client.post.call_args.kwargs
        assert url == "https://line.test/v2/bot/message/reply"
        assert kwargs["headers"]["Authorization"] == "Bearer token"
        assert kwargs["json"] == {"replyToken": "reply-token", "messages": [{"type": "text", "text": "hello"}]}

    @patch("lunchbot.services.line_service.httpx.AsyncClient")
    def test_skips_empty_text_or_token(self, mock_client_class):
        service = LineService("token")
        assert asyncio.run(service.reply_text("reply-token", "")) is False
        assert asyncio.run(service.reply_text(None, "hello")) is False
        mock_client_class.assert_not_called()

    @patch("lunchbot.services.line_service.httpx.AsyncClient")
    def test_truncates_long_text(self, mock_client_class):
        client = _mock_async_client(mock_client_class, Mock(status_code=200, text="{}"))
        asyncio.run(LineService("token").reply_text("reply-token", "a" * (MAX_TEXT_LENGTH + 10)))
        sent = client.post.call_args.kwargs["json"]["messages"][0]["text"]
        assert len(sent) == MAX_TEXT_LENGTH

    @patch("lunchbot.services.line_service.httpx.AsyncClient")
    def test_api_error_is_not_raised(self, mock_client_class):
        _mock_async_client(mock_client_class, Mock(status_code=400, text="Invalid reply token"))
        assert asyncio.run(LineService("token").reply_text("reply-token", "hello")) is False

    @patch("lunchbot.services.line_service.httpx.AsyncClient")
    def test_network_error_is_not_raised(self, mock_client_class):
        _mock_async_client(mock_client_class, error=httpx.ConnectError("down"))
        assert asyncio.run(LineService("token").reply_text("reply-token", "hello")) is False
