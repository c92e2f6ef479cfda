"""Arithmetic invariants checked before anything is written.

Violations mean a bug or an ordering breach upstream; they are raised, never clamped.
"""
import logging

from src.px_common.errors import CandleRangeError, NegativeOrderAmountError
from src.px_projection.domain.models import Candle, Order

logger = logging.getLogger(__name__)


def remaining_after_fill(order: Order, traded: int) -> int:
    """order.amount - traded, refusing to go below zero."""
    new_amount = order.amount - traded
    if new_amount < 0:
        logger.error(
            "Fill underflow: order=%s remaining=%d traded=%d", order.id, order.amount, traded
        )
        raise NegativeOrderAmountError(order.id, order.amount, traded)
    return new_amount


def verify_candle(candle: Candle) -> None:
    """low <= min(open, close) and high >= max(open, close); volume non-negative."""
    lo = min(candle.open_price, candle.close_price)
    hi = max(candle.open_price, candle.close_price)
    if candle.low_price > lo:
        raise CandleRangeError(candle.id, f"low {candle.low_price} > min(open, close) {lo}")
    if candle.high_price < hi:
        raise CandleRangeError(candle.id, f"high {candle.high_price} < max(open, close) {hi}")
    if candle.volume < 0:
        raise CandleRangeError(candle.id, f"negative volume {candle.volume}")
