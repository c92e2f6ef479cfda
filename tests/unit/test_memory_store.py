"""Tests for InMemoryEntityStore and StagedWrites."""
import pytest

from src.px_common.enums import Collection, OrderStatus
from src.px_projection.domain.models import Order, Position
from src.px_projection.engine.staging import StagedWrites
from src.px_store.infrastructure.memory_store import InMemoryEntityStore


def _make_order(order_id: str = "1", amount: int = 10) -> Order:
    return Order(
        id=order_id,
        trader="0xabc",
        is_buy=True,
        price=100,
        initial_amount=10,
        amount=amount,
        status=OrderStatus.OPEN,
        timestamp=0,
    )


class TestInMemoryEntityStore:
    async def test_get_missing_returns_none(self) -> None:
        assert await InMemoryEntityStore().get(Collection.ORDERS, "1") is None

    async def test_set_replaces_by_id(self) -> None:
        store = InMemoryEntityStore()
        await store.set(Collection.ORDERS, _make_order(amount=10))
        await store.set(Collection.ORDERS, _make_order(amount=4))
        assert store.count(Collection.ORDERS) == 1
        assert (await store.get(Collection.ORDERS, "1")).amount == 4

    async def test_collections_are_separate(self) -> None:
        store = InMemoryEntityStore()
        await store.set(Collection.POSITIONS, Position("1", "0xabc", 3, 100))
        assert await store.get(Collection.ORDERS, "1") is None

    async def test_all_sorted_by_id(self) -> None:
        store = InMemoryEntityStore()
        for oid in ("b", "a", "c"):
            await store.set(Collection.ORDERS, _make_order(oid))
        assert [o.id for o in store.all(Collection.ORDERS)] == ["a", "b", "c"]

    async def test_atomic_commits_on_success(self) -> None:
        store = InMemoryEntityStore()
        async with store.atomic():
            await store.set(Collection.ORDERS, _make_order())
        assert store.count(Collection.ORDERS) == 1

    async def test_atomic_rolls_back_on_error(self) -> None:
        store = InMemoryEntityStore()
        await store.set(Collection.ORDERS, _make_order("1"))
        with pytest.raises(RuntimeError):
            async with store.atomic():
                await store.set(Collection.ORDERS, _make_order("1", amount=0))
                await store.set(Collection.ORDERS, _make_order("2"))
                raise RuntimeError("boom")
        assert store.count(Collection.ORDERS) == 1
        assert (await store.get(Collection.ORDERS, "1")).amount == 10

    async def test_inner_failure_keeps_outer_writes(self) -> None:
        store = InMemoryEntityStore()
        async with store.atomic():
            await store.set(Collection.ORDERS, _make_order("1", amount=5))
            with pytest.raises(RuntimeError):
                async with store.atomic():
                    await store.set(Collection.ORDERS, _make_order("1", amount=0))
                    raise RuntimeError("boom")
        assert (await store.get(Collection.ORDERS, "1")).amount == 5

    async def test_outer_failure_undoes_committed_inner_block(self) -> None:
        store = InMemoryEntityStore()
        with pytest.raises(RuntimeError):
            async with store.atomic():
                async with store.atomic():
                    await store.set(Collection.ORDERS, _make_order("1"))
                raise RuntimeError("boom")
        assert store.count(Collection.ORDERS) == 0

    async def test_journal_cleared_after_block(self) -> None:
        store = InMemoryEntityStore()
        async with store.atomic():
            await store.set(Collection.ORDERS, _make_order("1"))
        await store.set(Collection.ORDERS, _make_order("2"))
        assert store._journals == []


class TestStagedWrites:
    async def test_reads_fall_through_to_store(self) -> None:
        store = InMemoryEntityStore()
        await store.set(Collection.ORDERS, _make_order())
        staged = StagedWrites(store)
        assert (await staged.get(Collection.ORDERS, "1")).amount == 10

    async def test_staged_write_shadows_store_until_flush(self) -> None:
        store = InMemoryEntityStore()
        await store.set(Collection.ORDERS, _make_order())
        staged = StagedWrites(store)
        await staged.set(Collection.ORDERS, _make_order(amount=3))
        assert (await staged.get(Collection.ORDERS, "1")).amount == 3
        assert (await store.get(Collection.ORDERS, "1")).amount == 10
        assert len(staged) == 1
