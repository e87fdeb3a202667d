import asyncio
import json
import math
from abc import ABC, abstractmethod
from typing import Any, Dict, Sequence

import aiohttp

from common.assets import TrackedAsset
from common.config import COINGECKO_API_URL
from common.errors import QuoteFetchError

VS_CURRENCY = "usd"


class BaseQuoteSource(ABC):
    name: str

    @abstractmethod
    async def fetch_quote(
        self, session: aiohttp.ClientSession, assets: Sequence[TrackedAsset]
    ) -> Dict[str, float]:
        """
        Returns the USD price of every tracked asset:
        {
            'bitcoin': 65000.12,
            'ethereum': 3400.5,
        }
        Raises QuoteFetchError when any tracked asset has no price.
        """
        raise NotImplementedError


class CoinGeckoQuoteSource(BaseQuoteSource):
    name = "coingecko"

    def __init__(self, api_url: str = COINGECKO_API_URL) -> None:
        self.api_url = api_url.rstrip("/") + "/simple/price"
        self.headers = {
            "Accept": "application/json",
        }

    async def fetch_quote(
        self, session: aiohttp.ClientSession, assets: Sequence[TrackedAsset]
    ) -> Dict[str, float]:
        params = {
            "ids": ",".join(asset.coin_id for asset in assets),
            "vs_currencies": VS_CURRENCY,
        }
        try:
            async with session.get(self.api_url, params=params, headers=self.headers) as response:
                status = response.status
                text = await response.text(errors="replace")
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise QuoteFetchError(f"Request to {self.name} failed: {exc}") from exc

        if status != 200:
            snippet = text.replace("\n", " ")[:200]
            raise QuoteFetchError(f"{self.name} returned {status}: {snippet}")

        try:
            data = json.loads(text)
        except ValueError as exc:
            raise QuoteFetchError(f"{self.name} returned invalid JSON: {exc}") from exc

        return self.parse_quote(data, assets)

    def parse_quote(self, data: Any, assets: Sequence[TrackedAsset]) -> Dict[str, float]:
        if not isinstance(data, dict):
            raise QuoteFetchError(f"Unexpected {self.name} payload: {type(data).__name__}")

        prices = {}
        for asset in assets:
            entry = data.get(asset.coin_id)
            price = entry.get(VS_CURRENCY) if isinstance(entry, dict) else None
            # bool is an int subclass
            if isinstance(price, bool) or not isinstance(price, (int, float)):
                raise QuoteFetchError(f"missing usd for {asset.coin_id}")
            try:
                price = float(price)
            except OverflowError:
                price = math.inf
            if not math.isfinite(price):
                raise QuoteFetchError(f"non-finite usd price for {asset.coin_id}: {price}")
            prices[asset.coin_id] = price
        return prices
