import aiohttp

from common.config import TELEGRAM_API_URL
from common.errors import DeliveryError, NotifierConfigError
from notifiers.base import BaseNotifier


class TelegramNotifier(BaseNotifier):
    name = "telegram"

    def __init__(self, token: str, chat_id: str, api_url: str = TELEGRAM_API_URL) -> None:
        self.token = token
        self.chat_id = chat_id
        self.api_url = api_url.rstrip("/")

    async def deliver(self, session: aiohttp.ClientSession, text: str) -> bool:
        if not self.token or not self.chat_id:
            raise NotifierConfigError("TELEGRAM_BOT_TOKEN or TELEGRAM_CHAT_ID not set")

        url = f"{self.api_url}/bot{self.token}/sendMessage"
        status, body = await self._post_json(
            session, url, {"chat_id": self.chat_id, "text": text}
        )
        if status != 200:
            snippet = body.replace("\n", " ")[:200]
            raise DeliveryError(f"telegram returned {status}: {snippet}")
        return True
