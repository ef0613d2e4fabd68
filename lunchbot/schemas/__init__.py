from lunchbot.schemas.line import LineEvent, LineMessage, LineSource, LineWebhookBody, WebhookResponse

__all__ = ["LineEvent", "LineMessage", "LineSource", "LineWebhookBody", "WebhookResponse"]
