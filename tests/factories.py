"""Event builders shared by the unit tests."""
from typing import Any

from src.px_common.enums import EventType
from src.px_events.domain.models import (
    ChainEvent,
    EventParams,
    FundingPaidParams,
    FundingUpdatedParams,
    LiquidatedParams,
    MarginParams,
    OrderPlacedParams,
    OrderRemovedParams,
    PositionUpdatedParams,
    TradeExecutedParams,
)

EXCHANGE = "0x5fbdb2315678afecb367f032d93f642f64180aa3"
ALICE = "0x" + "a1" * 20
BOB = "0x" + "b2" * 20
CAROL = "0x" + "c3" * 20


class EventFactory:
    """Builds events at strictly increasing (block, log_index) positions."""

    def __init__(self, start_block: int = 100) -> None:
        self._block = start_block

    def make(
        self,
        event_type: EventType,
        params: EventParams,
        ts: int = 1000,
        block: int | None = None,
        log_index: int = 0,
        tx_hash: str | None = None,
    ) -> ChainEvent:
        if block is None:
            self._block += 1
            block = self._block
        return ChainEvent(
            event_type=event_type,
            params=params,
            tx_hash=tx_hash or f"0x{block:08x}",
            log_index=log_index,
            block_number=block,
            block_timestamp=ts,
            exchange=EXCHANGE,
        )

    def deposit(self, trader: str = ALICE, amount: int = 1_000, **kw: Any) -> ChainEvent:
        return self.make(EventType.MARGIN_DEPOSITED, MarginParams(trader, amount), **kw)

    def withdraw(self, trader: str = ALICE, amount: int = 1_000, **kw: Any) -> ChainEvent:
        return self.make(EventType.MARGIN_WITHDRAWN, MarginParams(trader, amount), **kw)

    def place(
        self,
        order_id: int,
        amount: int = 10,
        price: int = 100,
        is_buy: bool = True,
        trader: str = ALICE,
        **kw: Any,
    ) -> ChainEvent:
        return self.make(
            EventType.ORDER_PLACED,
            OrderPlacedParams(id=order_id, trader=trader, is_buy=is_buy, price=price, amount=amount),
            **kw,
        )

    def remove(self, order_id: int, **kw: Any) -> ChainEvent:
        return self.make(EventType.ORDER_REMOVED, OrderRemovedParams(id=order_id), **kw)

    def trade(
        self,
        buy_order_id: int,
        sell_order_id: int,
        amount: int = 10,
        price: int = 100,
        buyer: str = ALICE,
        seller: str = BOB,
        **kw: Any,
    ) -> ChainEvent:
        return self.make(
            EventType.TRADE_EXECUTED,
            TradeExecutedParams(
                buy_order_id=buy_order_id,
                sell_order_id=sell_order_id,
                buyer=buyer,
                seller=seller,
                price=price,
                amount=amount,
            ),
            **kw,
        )

    def position(
        self, trader: str = ALICE, size: int = 0, entry_price: int = 100, **kw: Any
    ) -> ChainEvent:
        return self.make(
            EventType.POSITION_UPDATED,
            PositionUpdatedParams(trader=trader, size=size, entry_price=entry_price),
            **kw,
        )

    def funding_updated(self, rate: int, **kw: Any) -> ChainEvent:
        return self.make(EventType.FUNDING_UPDATED, FundingUpdatedParams(rate), **kw)

    def funding_paid(self, trader: str = ALICE, amount: int = 5, **kw: Any) -> ChainEvent:
        return self.make(EventType.FUNDING_PAID, FundingPaidParams(trader, amount), **kw)

    def liquidated(
        self,
        trader: str = ALICE,
        amount: int = 5,
        fee: int = 1,
        liquidator: str = CAROL,
        **kw: Any,
    ) -> ChainEvent:
        return self.make(
            EventType.LIQUIDATED,
            LiquidatedParams(trader=trader, liquidator=liquidator, amount=amount, fee=fee),
            **kw,
        )
