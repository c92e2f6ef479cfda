# src/px_query/infrastructure/repository.py
"""Read-only queries over projected collections."""
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.px_common.errors import InvalidCursorError

# amount = 0 means closed (filled or cancelled); status stays the lifecycle truth.
_OPEN_ORDERS_SQL = text("""
    SELECT id, trader, is_buy, price, initial_amount, amount, status, timestamp
    FROM orders
    WHERE amount <> 0
      AND (CAST(:trader AS TEXT) IS NULL OR trader = :trader)
    ORDER BY timestamp DESC, id DESC
    LIMIT :limit
""")

_GET_ORDER_SQL = text("""
    SELECT id, trader, is_buy, price, initial_amount, amount, status, timestamp
    FROM orders WHERE id = :id
""")

# Keyset on (timestamp, id), the same key as ORDER BY; ids alone are not time-ordered.
_LIST_TRADES_SQL = text("""
    SELECT id, buyer, seller, price, amount, timestamp, tx_hash,
           buy_order_id, sell_order_id
    FROM trades
    WHERE (CAST(:trader AS TEXT) IS NULL OR buyer = :trader OR seller = :trader)
      AND (CAST(:cursor_ts AS BIGINT) IS NULL OR (timestamp, id) < (:cursor_ts, :cursor_id))
    ORDER BY timestamp DESC, id DESC
    LIMIT :limit
""")

_LIST_CANDLES_SQL = text("""
    SELECT id, resolution, timestamp, open_price, high_price, low_price,
           close_price, volume
    FROM candles
    WHERE resolution = :resolution
    ORDER BY timestamp DESC
    LIMIT :limit
""")

_GET_POSITION_SQL = text("""
    SELECT trader, size, entry_price FROM positions WHERE id = :trader
""")

_LIST_MARGIN_SQL = text("""
    SELECT id, trader, amount, event_type, timestamp, tx_hash
    FROM margin_events
    WHERE trader = :trader
    ORDER BY timestamp DESC, id DESC
    LIMIT :limit
""")

_LIST_FUNDING_SQL = text("""
    SELECT id, event_type, trader, cumulative_rate, payment, timestamp
    FROM funding_events
    WHERE (CAST(:trader AS TEXT) IS NULL OR trader = :trader)
    ORDER BY timestamp DESC, id DESC
    LIMIT :limit
""")

_LIST_LIQUIDATIONS_SQL = text("""
    SELECT id, trader, liquidator, amount, fee, timestamp, tx_hash
    FROM liquidations
    WHERE (CAST(:trader AS TEXT) IS NULL OR trader = :trader)
    ORDER BY timestamp DESC, id DESC
    LIMIT :limit
""")


def _num(v: Any) -> str | None:
    # uint256 does not survive a JSON number round trip; expose as decimal string
    return None if v is None else str(int(v))


def encode_trade_cursor(timestamp: int, trade_id: str) -> str:
    return f"{timestamp}:{trade_id}"


def decode_trade_cursor(cursor: str) -> tuple[int, str]:
    """Inverse of encode_trade_cursor; raises InvalidCursorError on anything else."""
    ts, sep, trade_id = cursor.partition(":")
    if not sep or not trade_id or not ts.isdigit():
        raise InvalidCursorError(cursor)
    return int(ts), trade_id


class ProjectionQueries:
    async def list_open_orders(
        self, trader: str | None, limit: int, db: AsyncSession
    ) -> list[dict[str, Any]]:
        rows = (
            await db.execute(_OPEN_ORDERS_SQL, {"trader": trader, "limit": limit})
        ).fetchall()
        return [_order_row(r) for r in rows]

    async def get_order(self, order_id: str, db: AsyncSession) -> dict[str, Any] | None:
        row = (await db.execute(_GET_ORDER_SQL, {"id": order_id})).fetchone()
        return _order_row(row) if row else None

    async def list_trades(
        self,
        trader: str | None,
        limit: int,
        cursor: tuple[int, str] | None,
        db: AsyncSession,
    ) -> list[dict[str, Any]]:
        """Newest first; `cursor` is the (timestamp, id) of the last row already seen."""
        cursor_ts, cursor_id = cursor if cursor is not None else (None, None)
        rows = (
            await db.execute(
                _LIST_TRADES_SQL,
                {
                    "trader": trader,
                    "limit": limit,
                    "cursor_ts": cursor_ts,
                    "cursor_id": cursor_id,
                },
            )
        ).fetchall()
        return [
            {
                "id": r.id,
                "buyer": r.buyer,
                "seller": r.seller,
                "price": _num(r.price),
                "amount": _num(r.amount),
                "timestamp": int(r.timestamp),
                "tx_hash": r.tx_hash,
                "buy_order_id": r.buy_order_id,
                "sell_order_id": r.sell_order_id,
            }
            for r in rows
        ]

    async def list_candles(
        self, resolution: str, limit: int, db: AsyncSession
    ) -> list[dict[str, Any]]:
        rows = (
            await db.execute(_LIST_CANDLES_SQL, {"resolution": resolution, "limit": limit})
        ).fetchall()
        return [
            {
                "id": r.id,
                "resolution": r.resolution,
                "timestamp": int(r.timestamp),
                "open": _num(r.open_price),
                "high": _num(r.high_price),
                "low": _num(r.low_price),
                "close": _num(r.close_price),
                "volume": _num(r.volume),
            }
            for r in rows
        ]

    async def get_position(self, trader: str, db: AsyncSession) -> dict[str, Any] | None:
        row = (await db.execute(_GET_POSITION_SQL, {"trader": trader})).fetchone()
        if row is None:
            return None
        return {
            "trader": row.trader,
            "size": _num(row.size),
            "entry_price": _num(row.entry_price),
        }

    async def list_margin_events(
        self, trader: str, limit: int, db: AsyncSession
    ) -> list[dict[str, Any]]:
        rows = (
            await db.execute(_LIST_MARGIN_SQL, {"trader": trader, "limit": limit})
        ).fetchall()
        return [
            {
                "id": r.id,
                "trader": r.trader,
                "amount": _num(r.amount),
                "event_type": r.event_type,
                "timestamp": int(r.timestamp),
                "tx_hash": r.tx_hash,
            }
            for r in rows
        ]

    async def list_funding_events(
        self, trader: str | None, limit: int, db: AsyncSession
    ) -> list[dict[str, Any]]:
        rows = (
            await db.execute(_LIST_FUNDING_SQL, {"trader": trader, "limit": limit})
        ).fetchall()
        return [
            {
                "id": r.id,
                "event_type": r.event_type,
                "trader": r.trader,
                "cumulative_rate": _num(r.cumulative_rate),
                "payment": _num(r.payment),
                "timestamp": int(r.timestamp),
            }
            for r in rows
        ]

    async def list_liquidations(
        self, trader: str | None, limit: int, db: AsyncSession
    ) -> list[dict[str, Any]]:
        rows = (
            await db.execute(_LIST_LIQUIDATIONS_SQL, {"trader": trader, "limit": limit})
        ).fetchall()
        return [
            {
                "id": r.id,
                "trader": r.trader,
                "liquidator": r.liquidator,
                "amount": _num(r.amount),
                "fee": _num(r.fee),
                "timestamp": int(r.timestamp),
                "tx_hash": r.tx_hash,
            }
            for r in rows
        ]


def _order_row(row: Any) -> dict[str, Any]:
    return {
        "id": row.id,
        "trader": row.trader,
        "is_buy": bool(row.is_buy),
        "price": _num(row.price),
        "initial_amount": _num(row.initial_amount),
        "amount": _num(row.amount),
        "status": row.status,
        "timestamp": int(row.timestamp),
    }
