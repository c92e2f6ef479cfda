"""Typed chain events — pure dataclasses, no decoding concerns."""
from dataclasses import dataclass
from typing import Union

from src.px_common.enums import EventType
from src.px_common.ids import event_entity_id


@dataclass(frozen=True)
class MarginParams:
    trader: str
    amount: int


@dataclass(frozen=True)
class OrderPlacedParams:
    id: int
    trader: str
    is_buy: bool
    price: int
    amount: int


@dataclass(frozen=True)
class OrderRemovedParams:
    id: int


@dataclass(frozen=True)
class TradeExecutedParams:
    buy_order_id: int
    sell_order_id: int
    buyer: str
    seller: str
    price: int
    amount: int


@dataclass(frozen=True)
class PositionUpdatedParams:
    trader: str
    size: int  # signed: >0 long, <0 short
    entry_price: int


@dataclass(frozen=True)
class FundingUpdatedParams:
    cumulative_funding_rate: int  # signed


@dataclass(frozen=True)
class FundingPaidParams:
    trader: str
    amount: int  # signed: >0 paid by trader


@dataclass(frozen=True)
class LiquidatedParams:
    trader: str
    liquidator: str
    amount: int
    fee: int


EventParams = Union[
    MarginParams,
    OrderPlacedParams,
    OrderRemovedParams,
    TradeExecutedParams,
    PositionUpdatedParams,
    FundingUpdatedParams,
    FundingPaidParams,
    LiquidatedParams,
]


@dataclass(frozen=True)
class ChainEvent:
    """One decoded log from the exchange contract, in (block, log_index) order."""

    event_type: EventType
    params: EventParams
    tx_hash: str
    log_index: int
    block_number: int
    block_timestamp: int  # seconds since epoch
    exchange: str = ""

    @property
    def event_id(self) -> str:
        return event_entity_id(self.tx_hash, self.log_index)

    @property
    def position(self) -> tuple[int, int]:
        return (self.block_number, self.log_index)
