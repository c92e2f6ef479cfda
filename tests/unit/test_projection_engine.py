"""Unit tests for ProjectionEngine: ordering, exactly-once, atomicity, scenarios."""
from typing import Any

import pytest

from src.px_common.enums import Collection, OrderStatus
from src.px_common.errors import NegativeOrderAmountError, StoreUnavailableError
from src.px_projection.engine.engine import ProjectionEngine
from src.px_store.infrastructure.memory_store import InMemoryEntityStore
from tests.factories import ALICE, BOB, EXCHANGE, EventFactory


class _FailingStore(InMemoryEntityStore):
    """Raises on the N-th set() call, simulating a store outage mid-event."""

    def __init__(self, fail_on: int) -> None:
        super().__init__()
        self.fail_on = fail_on
        self.calls = 0

    async def set(self, collection: Collection, entity: Any) -> None:
        self.calls += 1
        if self.calls == self.fail_on:
            raise StoreUnavailableError("connection reset")
        await super().set(collection, entity)


class TestFullFillScenario:
    async def test_matching_orders_fill_and_open_first_candle(
        self, engine: ProjectionEngine, store: InMemoryEntityStore, events: EventFactory
    ) -> None:
        await engine.apply(events.place(1, amount=10, price=100, is_buy=True, trader=ALICE))
        await engine.apply(events.place(2, amount=10, price=100, is_buy=False, trader=BOB))
        await engine.apply(events.trade(1, 2, amount=10, price=100, ts=1000))

        buy = await store.get(Collection.ORDERS, "1")
        sell = await store.get(Collection.ORDERS, "2")
        assert buy.status == OrderStatus.FILLED and buy.amount == 0
        assert sell.status == OrderStatus.FILLED and sell.amount == 0
        assert store.count(Collection.TRADES) == 1

        candle = await store.get(Collection.CANDLES, "1m-960")
        assert candle.timestamp == 960
        assert (candle.open_price, candle.high_price, candle.low_price, candle.close_price) == (
            100, 100, 100, 100,
        )
        assert candle.volume == 10

    async def test_trade_row_references_both_orders(
        self, engine: ProjectionEngine, store: InMemoryEntityStore, events: EventFactory
    ) -> None:
        ev = events.trade(1, 2, amount=3, price=101, ts=1234)
        await engine.apply(ev)
        trade = await store.get(Collection.TRADES, ev.event_id)
        assert trade.id == f"{ev.tx_hash}-{ev.log_index}"
        assert trade.buy_order_id == "1"
        assert trade.sell_order_id == "2"
        assert trade.timestamp == 1234


class TestOrderConservation:
    @pytest.mark.parametrize("fills", [[10], [3, 3, 4], [1, 2, 3], [0, 5, 0], [9, 1]])
    async def test_traded_plus_remaining_equals_initial(
        self,
        engine: ProjectionEngine,
        store: InMemoryEntityStore,
        events: EventFactory,
        fills: list[int],
    ) -> None:
        await engine.apply(events.place(1, amount=10, is_buy=True))
        await engine.apply(events.place(2, amount=100, is_buy=False, trader=BOB))
        traded = 0
        for i, qty in enumerate(fills):
            await engine.apply(events.trade(1, 2, amount=qty, ts=1000 + i))
            traded += qty
            order = await store.get(Collection.ORDERS, "1")
            assert traded + order.amount == order.initial_amount
            assert (order.status == OrderStatus.FILLED) == (order.amount == 0)

    async def test_overfill_is_a_consistency_fault(
        self, engine: ProjectionEngine, store: InMemoryEntityStore, events: EventFactory
    ) -> None:
        await engine.apply(events.place(1, amount=5))
        before = store.dump()
        with pytest.raises(NegativeOrderAmountError):
            await engine.apply(events.trade(1, 2, amount=6))
        # nothing from the rejected event leaked: no trade, no candle, no checkpoint move
        assert store.dump() == before


class TestExactlyOnce:
    async def test_reapplying_same_trade_is_a_noop(
        self, engine: ProjectionEngine, store: InMemoryEntityStore, events: EventFactory
    ) -> None:
        await engine.apply(events.place(1, amount=10))
        await engine.apply(events.place(2, amount=10, is_buy=False, trader=BOB))
        trade = events.trade(1, 2, amount=4, ts=1000)
        assert await engine.apply(trade) is True
        once = store.dump()

        assert await engine.apply(trade) is False
        assert store.dump() == once
        order = await store.get(Collection.ORDERS, "1")
        assert order.amount == 6
        candle = await store.get(Collection.CANDLES, "1m-960")
        assert candle.volume == 4

    async def test_replay_of_whole_history_after_restart(
        self, store: InMemoryEntityStore, events: EventFactory
    ) -> None:
        history = [
            events.place(1, amount=10),
            events.place(2, amount=10, is_buy=False, trader=BOB),
            events.trade(1, 2, amount=7, ts=1000),
            events.deposit(amount=50),
        ]
        first = ProjectionEngine(store, exchange=EXCHANGE)
        assert await first.apply_batch(history) == 4
        snapshot = store.dump()

        # a new engine instance resumes from the stored checkpoint
        restarted = ProjectionEngine(store, exchange=EXCHANGE)
        assert await restarted.apply_batch(history) == 0
        assert store.dump() == snapshot

    async def test_checkpoint_tracks_last_applied_event(
        self, engine: ProjectionEngine, events: EventFactory
    ) -> None:
        ev = events.deposit()
        await engine.apply(ev)
        cp = await engine.checkpoint()
        assert cp is not None
        assert cp.position == ev.position
        assert cp.event_id == ev.event_id

    async def test_multiple_logs_in_one_block(
        self, engine: ProjectionEngine, store: InMemoryEntityStore, events: EventFactory
    ) -> None:
        a = events.deposit(block=500, log_index=0, tx_hash="0xfeed")
        b = events.withdraw(block=500, log_index=1, tx_hash="0xfeed")
        assert await engine.apply_batch([a, b]) == 2
        assert store.count(Collection.MARGIN_EVENTS) == 2
        assert await store.get(Collection.MARGIN_EVENTS, "0xfeed-1") is not None

    async def test_foreign_contract_events_are_ignored(
        self, engine: ProjectionEngine, store: InMemoryEntityStore, events: EventFactory
    ) -> None:
        from dataclasses import replace

        ev = replace(events.deposit(), exchange="0x" + "99" * 20)
        assert await engine.apply(ev) is False
        assert store.count(Collection.MARGIN_EVENTS) == 0


class TestAtomicity:
    async def test_store_failure_mid_event_leaves_no_partial_state(
        self, events: EventFactory
    ) -> None:
        store = _FailingStore(fail_on=4)
        engine = ProjectionEngine(store, exchange=EXCHANGE)
        await engine.apply(events.place(1, amount=10))  # set #1 order, #2 checkpoint
        before = store.dump()

        trade = events.trade(1, 2, amount=4)
        with pytest.raises(StoreUnavailableError):
            await engine.apply(trade)  # trade row (#3) lands, candle (#4) fails
        assert store.dump() == before

        # after recovery the same event is delivered again and applies cleanly
        store.fail_on = 0
        assert await engine.apply(trade) is True
        order = await store.get(Collection.ORDERS, "1")
        assert order.amount == 6
        assert store.count(Collection.TRADES) == 1


class TestEdgeValues:
    async def test_zero_price_and_zero_amount_trade_are_processed(
        self, engine: ProjectionEngine, store: InMemoryEntityStore, events: EventFactory
    ) -> None:
        await engine.apply(events.place(1, amount=10))
        await engine.apply(events.trade(1, 2, amount=0, price=0, ts=60))
        order = await store.get(Collection.ORDERS, "1")
        assert order.amount == 10
        assert order.status == OrderStatus.OPEN
        candle = await store.get(Collection.CANDLES, "1m-60")
        assert candle.low_price == 0
        assert candle.volume == 0
