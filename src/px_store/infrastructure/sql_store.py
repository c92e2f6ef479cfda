# src/px_store/infrastructure/sql_store.py
"""SqlEntityStore — raw SQL implementation of EntityStoreProtocol.

Every set() is an upsert on the primary key (full replace). atomic() opens a
SAVEPOINT so one event's writes commit or roll back together.
"""
import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.px_common.enums import (
    Collection,
    FundingEventType,
    MarginEventType,
    OrderStatus,
)
from src.px_common.errors import DataConsistencyError, StoreUnavailableError
from src.px_projection.domain.models import (
    Candle,
    Checkpoint,
    FundingEvent,
    LatestCandle,
    Liquidation,
    MarginEvent,
    Order,
    Position,
    Trade,
)

logger = logging.getLogger(__name__)


def _int(v: Any) -> int:
    # NUMERIC columns come back as Decimal
    return int(v)


def _opt_int(v: Any) -> int | None:
    return None if v is None else int(v)


# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _margin_to_row(e: MarginEvent) -> dict[str, Any]:
    return {
        "id": e.id,
        "trader": e.trader,
        "amount": e.amount,
        "event_type": e.event_type.value,
        "timestamp": e.timestamp,
        "tx_hash": e.tx_hash,
    }


def _row_to_margin(row: Any) -> MarginEvent:
    return MarginEvent(
        id=row.id,
        trader=row.trader,
        amount=_int(row.amount),
        event_type=MarginEventType(row.event_type),
        timestamp=_int(row.timestamp),
        tx_hash=row.tx_hash,
    )


def _order_to_row(o: Order) -> dict[str, Any]:
    return {
        "id": o.id,
        "trader": o.trader,
        "is_buy": o.is_buy,
        "price": o.price,
        "initial_amount": o.initial_amount,
        "amount": o.amount,
        "status": o.status.value,
        "timestamp": o.timestamp,
    }


def _row_to_order(row: Any) -> Order:
    return Order(
        id=row.id,
        trader=row.trader,
        is_buy=bool(row.is_buy),
        price=_int(row.price),
        initial_amount=_int(row.initial_amount),
        amount=_int(row.amount),
        status=OrderStatus(row.status),
        timestamp=_int(row.timestamp),
    )


def _trade_to_row(t: Trade) -> dict[str, Any]:
    return {
        "id": t.id,
        "buyer": t.buyer,
        "seller": t.seller,
        "price": t.price,
        "amount": t.amount,
        "timestamp": t.timestamp,
        "tx_hash": t.tx_hash,
        "buy_order_id": t.buy_order_id,
        "sell_order_id": t.sell_order_id,
    }


def _row_to_trade(row: Any) -> Trade:
    return Trade(
        id=row.id,
        buyer=row.buyer,
        seller=row.seller,
        price=_int(row.price),
        amount=_int(row.amount),
        timestamp=_int(row.timestamp),
        tx_hash=row.tx_hash,
        buy_order_id=row.buy_order_id,
        sell_order_id=row.sell_order_id,
    )


def _position_to_row(p: Position) -> dict[str, Any]:
    return {"id": p.id, "trader": p.trader, "size": p.size, "entry_price": p.entry_price}


def _row_to_position(row: Any) -> Position:
    return Position(
        id=row.id,
        trader=row.trader,
        size=_int(row.size),
        entry_price=_int(row.entry_price),
    )


def _funding_to_row(f: FundingEvent) -> dict[str, Any]:
    return {
        "id": f.id,
        "event_type": f.event_type.value,
        "trader": f.trader,
        "cumulative_rate": f.cumulative_rate,
        "payment": f.payment,
        "timestamp": f.timestamp,
    }


def _row_to_funding(row: Any) -> FundingEvent:
    return FundingEvent(
        id=row.id,
        event_type=FundingEventType(row.event_type),
        trader=row.trader,
        cumulative_rate=_opt_int(row.cumulative_rate),
        payment=_opt_int(row.payment),
        timestamp=_int(row.timestamp),
    )


def _liquidation_to_row(q: Liquidation) -> dict[str, Any]:
    return {
        "id": q.id,
        "trader": q.trader,
        "liquidator": q.liquidator,
        "amount": q.amount,
        "fee": q.fee,
        "timestamp": q.timestamp,
        "tx_hash": q.tx_hash,
    }


def _row_to_liquidation(row: Any) -> Liquidation:
    return Liquidation(
        id=row.id,
        trader=row.trader,
        liquidator=row.liquidator,
        amount=_int(row.amount),
        fee=_int(row.fee),
        timestamp=_int(row.timestamp),
        tx_hash=row.tx_hash,
    )


def _candle_to_row(c: Candle) -> dict[str, Any]:
    return {
        "id": c.id,
        "resolution": c.resolution,
        "timestamp": c.timestamp,
        "open_price": c.open_price,
        "high_price": c.high_price,
        "low_price": c.low_price,
        "close_price": c.close_price,
        "volume": c.volume,
    }


def _row_to_candle(row: Any) -> Candle:
    return Candle(
        id=row.id,
        resolution=row.resolution,
        timestamp=_int(row.timestamp),
        open_price=_int(row.open_price),
        high_price=_int(row.high_price),
        low_price=_int(row.low_price),
        close_price=_int(row.close_price),
        volume=_int(row.volume),
    )


def _latest_to_row(lc: LatestCandle) -> dict[str, Any]:
    return {"id": lc.id, "close_price": lc.close_price, "timestamp": lc.timestamp}


def _row_to_latest(row: Any) -> LatestCandle:
    return LatestCandle(
        id=row.id, close_price=_int(row.close_price), timestamp=_int(row.timestamp)
    )


def _checkpoint_to_row(cp: Checkpoint) -> dict[str, Any]:
    return {
        "id": cp.id,
        "block_number": cp.block_number,
        "log_index": cp.log_index,
        "event_id": cp.event_id,
    }


def _row_to_checkpoint(row: Any) -> Checkpoint:
    return Checkpoint(
        id=row.id,
        block_number=_int(row.block_number),
        log_index=_int(row.log_index),
        event_id=row.event_id,
    )


# ---------------------------------------------------------------------------
# Per-collection SQL
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class _TableSpec:
    table: str
    columns: tuple[str, ...]
    to_row: Callable[[Any], dict[str, Any]]
    from_row: Callable[[Any], Any]

    @property
    def select_sql(self) -> Any:
        return text(f"SELECT {', '.join(self.columns)} FROM {self.table} WHERE id = :id")

    @property
    def upsert_sql(self) -> Any:
        cols = ", ".join(self.columns)
        params = ", ".join(f":{c}" for c in self.columns)
        updates = ", ".join(f"{c} = EXCLUDED.{c}" for c in self.columns if c != "id")
        return text(
            f"INSERT INTO {self.table} ({cols}) VALUES ({params}) "
            f"ON CONFLICT (id) DO UPDATE SET {updates}"
        )


TABLES: dict[Collection, _TableSpec] = {
    Collection.MARGIN_EVENTS: _TableSpec(
        "margin_events",
        ("id", "trader", "amount", "event_type", "timestamp", "tx_hash"),
        _margin_to_row,
        _row_to_margin,
    ),
    Collection.ORDERS: _TableSpec(
        "orders",
        ("id", "trader", "is_buy", "price", "initial_amount", "amount", "status", "timestamp"),
        _order_to_row,
        _row_to_order,
    ),
    Collection.TRADES: _TableSpec(
        "trades",
        (
            "id", "buyer", "seller", "price", "amount", "timestamp",
            "tx_hash", "buy_order_id", "sell_order_id",
        ),
        _trade_to_row,
        _row_to_trade,
    ),
    Collection.POSITIONS: _TableSpec(
        "positions",
        ("id", "trader", "size", "entry_price"),
        _position_to_row,
        _row_to_position,
    ),
    Collection.FUNDING_EVENTS: _TableSpec(
        "funding_events",
        ("id", "event_type", "trader", "cumulative_rate", "payment", "timestamp"),
        _funding_to_row,
        _row_to_funding,
    ),
    Collection.LIQUIDATIONS: _TableSpec(
        "liquidations",
        ("id", "trader", "liquidator", "amount", "fee", "timestamp", "tx_hash"),
        _liquidation_to_row,
        _row_to_liquidation,
    ),
    Collection.CANDLES: _TableSpec(
        "candles",
        (
            "id", "resolution", "timestamp", "open_price", "high_price",
            "low_price", "close_price", "volume",
        ),
        _candle_to_row,
        _row_to_candle,
    ),
    Collection.LATEST_CANDLE: _TableSpec(
        "latest_candle",
        ("id", "close_price", "timestamp"),
        _latest_to_row,
        _row_to_latest,
    ),
    Collection.CHECKPOINTS: _TableSpec(
        "checkpoints",
        ("id", "block_number", "log_index", "event_id"),
        _checkpoint_to_row,
        _row_to_checkpoint,
    ),
}


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


class SqlEntityStore:
    """Concrete EntityStoreProtocol over one AsyncSession."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def get(self, collection: Collection, entity_id: str) -> Any | None:
        table = TABLES[collection]
        try:
            result = await self._db.execute(table.select_sql, {"id": entity_id})
        except DBAPIError as exc:
            raise StoreUnavailableError(f"get {table.table}/{entity_id}: {exc}") from exc
        row = result.fetchone()
        return table.from_row(row) if row else None

    async def set(self, collection: Collection, entity: Any) -> None:
        table = TABLES[collection]
        try:
            await self._db.execute(table.upsert_sql, table.to_row(entity))
        except IntegrityError as exc:
            # CHECK constraints mirror the projection invariants
            logger.error("Constraint violation writing %s/%s: %s", table.table, entity.id, exc.orig)
            raise DataConsistencyError(f"{table.table}/{entity.id} violates {exc.orig}") from exc
        except DBAPIError as exc:
            raise StoreUnavailableError(f"set {table.table}/{entity.id}: {exc}") from exc

    @asynccontextmanager
    async def atomic(self) -> AsyncIterator[None]:
        async with self._db.begin_nested():
            yield

    async def commit(self) -> None:
        """Make everything applied so far durable."""
        try:
            await self._db.commit()
        except DBAPIError as exc:
            logger.error("Commit failed: %s", exc)
            raise StoreUnavailableError(f"commit: {exc}") from exc
