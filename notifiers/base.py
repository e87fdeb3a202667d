import asyncio
from abc import ABC, abstractmethod

import aiohttp

from common.errors import DeliveryError


class BaseNotifier(ABC):
    name: str

    @abstractmethod
    async def deliver(self, session: aiohttp.ClientSession, text: str) -> bool:
        """
        Sends text to the channel.

        Returns True when delivered and False when the channel is disabled.
        Raises NotifierConfigError or DeliveryError on failure.
        """
        raise NotImplementedError

    async def _post_json(
        self, session: aiohttp.ClientSession, url: str, payload: dict
    ) -> tuple[int, str]:
        try:
            async with session.post(url, json=payload) as response:
                return response.status, await response.text(errors="replace")
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise DeliveryError(f"{self.name} request failed: {exc}") from exc
