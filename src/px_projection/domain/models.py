"""Projected entities — pure dataclasses, no SQLAlchemy dependency.

Entities are frozen; every mutation goes through a named update function that
lists the fields it changes. Fields not named there carry over unchanged.
"""
from dataclasses import dataclass, replace

from src.px_common.enums import FundingEventType, MarginEventType, OrderStatus


@dataclass(frozen=True)
class MarginEvent:
    id: str
    trader: str
    amount: int
    event_type: MarginEventType
    timestamp: int
    tx_hash: str


@dataclass(frozen=True)
class Order:
    id: str
    trader: str
    is_buy: bool
    price: int
    initial_amount: int  # immutable
    amount: int  # remaining, never increases
    status: OrderStatus
    timestamp: int

    @property
    def is_open(self) -> bool:
        return self.status == OrderStatus.OPEN


@dataclass(frozen=True)
class Trade:
    id: str
    buyer: str
    seller: str
    price: int
    amount: int
    timestamp: int
    tx_hash: str
    buy_order_id: str
    sell_order_id: str


@dataclass(frozen=True)
class Position:
    id: str  # == trader
    trader: str
    size: int  # signed: >0 long, <0 short
    entry_price: int


@dataclass(frozen=True)
class FundingEvent:
    """GLOBAL_UPDATE sets cumulative_rate only; USER_PAID sets trader + payment only."""

    id: str
    event_type: FundingEventType
    timestamp: int
    trader: str | None = None
    cumulative_rate: int | None = None
    payment: int | None = None


@dataclass(frozen=True)
class Liquidation:
    id: str
    trader: str
    liquidator: str
    amount: int
    fee: int
    timestamp: int
    tx_hash: str


@dataclass(frozen=True)
class Candle:
    id: str  # "{resolution}-{timestamp}"
    resolution: str
    timestamp: int  # bucket start
    open_price: int
    high_price: int
    low_price: int
    close_price: int
    volume: int


@dataclass(frozen=True)
class LatestCandle:
    """Last traded price per resolution; only seeds the next bucket's open."""

    id: str  # resolution label
    close_price: int
    timestamp: int


@dataclass(frozen=True)
class Checkpoint:
    """Last event applied for one exchange."""

    id: str  # exchange address
    block_number: int
    log_index: int
    event_id: str

    @property
    def position(self) -> tuple[int, int]:
        return (self.block_number, self.log_index)


# ---------------------------------------------------------------------------
# Field-level updates
# ---------------------------------------------------------------------------


def order_with_fill(order: Order, new_amount: int) -> Order:
    """Remaining amount after a trade; FILLED exactly when nothing is left."""
    return replace(
        order,
        amount=new_amount,
        status=OrderStatus.FILLED if new_amount == 0 else OrderStatus.OPEN,
    )


def order_removed(order: Order) -> Order:
    """Close an order on removal.

    status is the lifecycle source of truth; amount is forced to 0 so that
    open-order views can filter on amount alone.
    """
    return replace(
        order,
        status=OrderStatus.FILLED if order.amount == 0 else OrderStatus.CANCELLED,
        amount=0,
    )


def position_with_size(position: Position, size: int) -> Position:
    return replace(position, size=size)


def candle_with_trade(candle: Candle, price: int, amount: int) -> Candle:
    return replace(
        candle,
        high_price=max(candle.high_price, price),
        low_price=min(candle.low_price, price),
        close_price=price,
        volume=candle.volume + amount,
    )
