from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Sequence

import aiohttp

from apps.tracker.formatter import format_message
from common.assets import TrackedAsset
from common.errors import NotifierError, QuoteFetchError, StorageError
from common.logger import get_logger
from db.database import PriceDatabase
from notifiers.base import BaseNotifier
from parsers.coingecko import BaseQuoteSource

logger = get_logger("apps.tracker.pipeline")

SENT = "sent"
SKIPPED = "skipped"
FAILED = "failed"


@dataclass
class CycleResult:
    last_prices: Dict[str, float]
    prices: Optional[Dict[str, float]] = None
    persisted: bool = False
    message: Optional[str] = None
    deliveries: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.persisted and FAILED not in self.deliveries.values()


class PriceTracker:
    """
    One fetch -> persist -> format -> notify cycle.

    The tracker holds no state between cycles: the previous prices come in
    as an argument and go out in CycleResult.last_prices.
    """

    def __init__(
        self,
        assets: Sequence[TrackedAsset],
        source: BaseQuoteSource,
        database: PriceDatabase,
        notifiers: Sequence[BaseNotifier],
        show_changes: bool = True,
    ) -> None:
        self.assets = tuple(assets)
        self.source = source
        self.database = database
        self.notifiers = list(notifiers)
        self.show_changes = show_changes

    async def run_cycle(
        self,
        session: aiohttp.ClientSession,
        last_prices: Optional[Mapping[str, float]] = None,
    ) -> CycleResult:
        previous = dict(last_prices or {})

        try:
            prices = await self.source.fetch_quote(session, self.assets)
        except QuoteFetchError as exc:
            logger.error("fetch error: %s", exc)
            return CycleResult(last_prices=previous)

        result = CycleResult(last_prices=dict(prices), prices=prices)

        try:
            self.database.save_prices(prices)
        except StorageError as exc:
            logger.error("save error: %s", exc)
            return result
        result.persisted = True

        result.message = format_message(
            prices,
            self.assets,
            last_prices=previous if self.show_changes else None,
        )
        result.deliveries = await self.notify_all(session, result.message)

        if result.ok:
            logger.info("Prices pushed successfully")
        return result

    async def notify_all(self, session: aiohttp.ClientSession, text: str) -> Dict[str, str]:
        deliveries = {}
        for notifier in self.notifiers:
            try:
                delivered = await notifier.deliver(session, text)
            except NotifierError as exc:
                logger.error("%s error: %s", notifier.name, exc)
                deliveries[notifier.name] = FAILED
                continue

            deliveries[notifier.name] = SENT if delivered else SKIPPED
            if not delivered:
                logger.debug("%s channel disabled, skipped", notifier.name)
        return deliveries
