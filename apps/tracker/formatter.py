from datetime import datetime
from typing import Mapping, Sequence

from common.assets import TrackedAsset

HEADER = "📊 Crypto Prices (USD)"


def format_message(
    prices: Mapping[str, float],
    assets: Sequence[TrackedAsset],
    last_prices: Mapping[str, float] | None = None,
    now: datetime | None = None,
) -> str:
    """
    Renders one line per tracked asset, in tracked order:

        BTC: $65000.12 (+5.00)

    The change suffix is shown only when a positive previous price is known.
    """
    if now is None:
        now = datetime.now()
    last_prices = last_prices or {}

    lines = [HEADER, f"Time: {now.strftime('%Y-%m-%d %H:%M:%S')}", ""]
    for asset in assets:
        price = prices[asset.coin_id]
        line = f"{asset.symbol}: ${price:.2f}"

        previous = last_prices.get(asset.coin_id)
        if previous is not None and previous > 0:
            line += f" ({price - previous:+.2f})"
        lines.append(line)

    return "\n".join(lines)
