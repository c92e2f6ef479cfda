"""OHLC bucketing for a single resolution.

The bucket is chosen from the trade's block timestamp alone, so a trade always
lands in the bucket its time belongs to regardless of arrival order. A new
bucket opens at the previous trade's price (the LatestCandle pointer), or at
the trade's own price for the very first trade.
"""
from dataclasses import dataclass

from src.px_common.ids import candle_id
from src.px_projection.domain.models import Candle, LatestCandle, candle_with_trade


@dataclass(frozen=True)
class CandleResolution:
    label: str
    seconds: int

    def bucket_start(self, timestamp: int) -> int:
        return timestamp - (timestamp % self.seconds)

    def candle_id_for(self, timestamp: int) -> str:
        return candle_id(self.label, self.bucket_start(timestamp))


ONE_MINUTE = CandleResolution("1m", 60)

RESOLUTIONS: dict[str, CandleResolution] = {
    "1m": ONE_MINUTE,
    "5m": CandleResolution("5m", 300),
    "15m": CandleResolution("15m", 900),
    "1h": CandleResolution("1h", 3600),
    "1d": CandleResolution("1d", 86400),
}


def resolution_for(label: str) -> CandleResolution:
    try:
        return RESOLUTIONS[label]
    except KeyError:
        raise ValueError(f"Unsupported candle resolution: {label}") from None


def open_candle(
    resolution: CandleResolution,
    timestamp: int,
    price: int,
    amount: int,
    latest: LatestCandle | None,
) -> Candle:
    """First trade of a bucket."""
    open_price = latest.close_price if latest is not None else price
    bucket = resolution.bucket_start(timestamp)
    return Candle(
        id=candle_id(resolution.label, bucket),
        resolution=resolution.label,
        timestamp=bucket,
        open_price=open_price,
        high_price=max(open_price, price),
        low_price=min(open_price, price),
        close_price=price,
        volume=amount,
    )


def apply_trade(
    resolution: CandleResolution,
    existing: Candle | None,
    latest: LatestCandle | None,
    timestamp: int,
    price: int,
    amount: int,
) -> tuple[Candle, LatestCandle]:
    """Fold one trade into its bucket; returns (candle, new latest pointer)."""
    if existing is None:
        candle = open_candle(resolution, timestamp, price, amount, latest)
    else:
        candle = candle_with_trade(existing, price, amount)
    pointer = LatestCandle(id=resolution.label, close_price=price, timestamp=timestamp)
    return candle, pointer
