import asyncio
import sys
from typing import Dict, Optional

import aiohttp

from apps.tracker.pipeline import PriceTracker
from common.config import Config, load_config
from common.errors import ConfigError, StorageError
from common.logger import full_log, get_logger, setup_logging
from db.database import PriceDatabase
from notifiers.registry import build_notifiers
from parsers.coingecko import CoinGeckoQuoteSource

logger = get_logger("apps.tracker")


def build_tracker(config: Config, database: PriceDatabase) -> PriceTracker:
    return PriceTracker(
        assets=config.assets,
        source=CoinGeckoQuoteSource(api_url=config.price_api_url),
        database=database,
        notifiers=build_notifiers(config),
        show_changes=config.show_price_changes,
    )


async def run_tracker_loop(
    tracker: PriceTracker,
    session: aiohttp.ClientSession,
    interval_sec: float,
    max_cycles: Optional[int] = None,
) -> Dict[str, float]:
    """
    Runs a cycle right away, then one per interval_sec, anchored to the start.

    Ticks missed while a slow cycle was running are dropped, not replayed.
    """
    loop = asyncio.get_running_loop()
    next_tick = loop.time()
    last_prices: Dict[str, float] = {}
    cycles = 0

    while True:
        try:
            result = await tracker.run_cycle(session, last_prices)
            last_prices = result.last_prices
        except asyncio.CancelledError:
            raise
        except Exception:
            full_log(logger=logger, where="/run_tracker_loop")

        cycles += 1
        if max_cycles is not None and cycles >= max_cycles:
            return last_prices

        next_tick += interval_sec
        now = loop.time()
        if now > next_tick:
            missed = int((now - next_tick) // interval_sec) + 1
            next_tick += missed * interval_sec
            logger.warning("Cycle overran the interval, skipped %d tick(s)", missed)
        await asyncio.sleep(next_tick - now)


async def run_tracker(config: Config, database: PriceDatabase) -> None:
    tracker = build_tracker(config, database)
    async with aiohttp.ClientSession() as session:
        await run_tracker_loop(tracker, session, config.fetch_interval_sec)


def main() -> int:
    try:
        config = load_config()
    except ConfigError as exc:
        logger.error("Config load failed: %s", exc)
        return 1

    setup_logging(config.log_level, config.log_dir)
    logger.info(
        "Starting crypto tracker: %s every %ss",
        ", ".join(asset.coin_id for asset in config.assets),
        config.fetch_interval_sec,
    )

    database = PriceDatabase(config.db_path)
    try:
        database.connect_to_db()
    except StorageError as exc:
        logger.error("DB init failed: %s", exc)
        return 1

    try:
        asyncio.run(run_tracker(config, database))
    except KeyboardInterrupt:
        logger.info("Crypto tracker stopped")
    finally:
        database.close_connection()
    return 0


if __name__ == "__main__":
    sys.exit(main())
