from dataclasses import dataclass

from common.errors import ConfigError


@dataclass(frozen=True)
class TrackedAsset:
    coin_id: str
    symbol: str


DEFAULT_ASSETS: tuple[TrackedAsset, ...] = (
    TrackedAsset("bitcoin", "BTC"),
    TrackedAsset("ethereum", "ETH"),
    TrackedAsset("binancecoin", "BNB"),
)


def parse_assets(raw: str) -> tuple[TrackedAsset, ...]:
    """
    Parses "bitcoin:BTC,ethereum:ETH" into an ordered asset table.

    A bare id ("solana") gets its upper-cased id as display symbol.
    """
    entries = []
    for chunk in raw.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        coin_id, _, symbol = chunk.partition(":")
        entries.append((coin_id, symbol))
    return build_assets(entries)


def build_assets(entries) -> tuple[TrackedAsset, ...]:
    assets = []
    seen = set()
    for coin_id, symbol in entries:
        if not isinstance(coin_id, str) or not coin_id.strip():
            raise ConfigError(f"Invalid asset id: {coin_id!r}")
        coin_id = coin_id.strip().lower()
        symbol = (symbol or "").strip() or coin_id.upper()
        if coin_id in seen:
            raise ConfigError(f"Asset {coin_id} is listed twice")
        seen.add(coin_id)
        assets.append(TrackedAsset(coin_id, symbol))

    if not assets:
        raise ConfigError("At least one tracked asset is required")
    return tuple(assets)
