import aiohttp

from common.errors import DeliveryError
from notifiers.base import BaseNotifier


class WebhookNotifier(BaseNotifier):
    """Slack-compatible incoming webhook. An empty URL disables the channel."""

    name = "webhook"

    def __init__(self, url: str) -> None:
        self.url = url

    async def deliver(self, session: aiohttp.ClientSession, text: str) -> bool:
        if not self.url:
            return False

        status, body = await self._post_json(session, self.url, {"text": text})
        if status >= 300:
            snippet = body.replace("\n", " ")[:200]
            raise DeliveryError(f"webhook returned {status}: {snippet}")
        return True
