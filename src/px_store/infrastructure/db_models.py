# src/px_store/infrastructure/db_models.py
"""SQLAlchemy ORM models for projected collections (DDL reference only — queries use raw SQL).

Quantities are on-chain uint256/int256 values, hence NUMERIC(78, 0).
DO NOT add/remove columns here without a corresponding migration.
"""
from sqlalchemy import BigInteger, Boolean, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from src.px_common.database import Base

_UINT = Numeric(78, 0)


class MarginEventORM(Base):
    __tablename__ = "margin_events"

    id: Mapped[str] = mapped_column(String(80), primary_key=True)
    trader: Mapped[str] = mapped_column(String(42), nullable=False)
    amount: Mapped[int] = mapped_column(_UINT, nullable=False)
    event_type: Mapped[str] = mapped_column(String(10), nullable=False)
    timestamp: Mapped[int] = mapped_column(BigInteger, nullable=False)
    tx_hash: Mapped[str] = mapped_column(String(66), nullable=False)


class OrderORM(Base):
    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(String(80), primary_key=True)
    trader: Mapped[str] = mapped_column(String(42), nullable=False)
    is_buy: Mapped[bool] = mapped_column(Boolean, nullable=False)
    price: Mapped[int] = mapped_column(_UINT, nullable=False)
    initial_amount: Mapped[int] = mapped_column(_UINT, nullable=False)
    amount: Mapped[int] = mapped_column(_UINT, nullable=False)
    status: Mapped[str] = mapped_column(String(10), nullable=False, default="OPEN")
    timestamp: Mapped[int] = mapped_column(BigInteger, nullable=False)


class TradeORM(Base):
    __tablename__ = "trades"

    id: Mapped[str] = mapped_column(String(80), primary_key=True)
    buyer: Mapped[str] = mapped_column(String(42), nullable=False)
    seller: Mapped[str] = mapped_column(String(42), nullable=False)
    price: Mapped[int] = mapped_column(_UINT, nullable=False)
    amount: Mapped[int] = mapped_column(_UINT, nullable=False)
    timestamp: Mapped[int] = mapped_column(BigInteger, nullable=False)
    tx_hash: Mapped[str] = mapped_column(String(66), nullable=False)
    buy_order_id: Mapped[str] = mapped_column(String(80), nullable=False)
    sell_order_id: Mapped[str] = mapped_column(String(80), nullable=False)


class PositionORM(Base):
    __tablename__ = "positions"

    id: Mapped[str] = mapped_column(String(42), primary_key=True)
    trader: Mapped[str] = mapped_column(String(42), nullable=False)
    size: Mapped[int] = mapped_column(_UINT, nullable=False)
    entry_price: Mapped[int] = mapped_column(_UINT, nullable=False)


class FundingEventORM(Base):
    __tablename__ = "funding_events"

    id: Mapped[str] = mapped_column(String(80), primary_key=True)
    event_type: Mapped[str] = mapped_column(String(15), nullable=False)
    trader: Mapped[str | None] = mapped_column(String(42), nullable=True)
    cumulative_rate: Mapped[int | None] = mapped_column(_UINT, nullable=True)
    payment: Mapped[int | None] = mapped_column(_UINT, nullable=True)
    timestamp: Mapped[int] = mapped_column(BigInteger, nullable=False)


class LiquidationORM(Base):
    __tablename__ = "liquidations"

    id: Mapped[str] = mapped_column(String(80), primary_key=True)
    trader: Mapped[str] = mapped_column(String(42), nullable=False)
    liquidator: Mapped[str] = mapped_column(String(42), nullable=False)
    amount: Mapped[int] = mapped_column(_UINT, nullable=False)
    fee: Mapped[int] = mapped_column(_UINT, nullable=False)
    timestamp: Mapped[int] = mapped_column(BigInteger, nullable=False)
    tx_hash: Mapped[str] = mapped_column(String(66), nullable=False)


class CandleORM(Base):
    __tablename__ = "candles"

    id: Mapped[str] = mapped_column(String(40), primary_key=True)
    resolution: Mapped[str] = mapped_column(String(8), nullable=False)
    timestamp: Mapped[int] = mapped_column(BigInteger, nullable=False)
    open_price: Mapped[int] = mapped_column(_UINT, nullable=False)
    high_price: Mapped[int] = mapped_column(_UINT, nullable=False)
    low_price: Mapped[int] = mapped_column(_UINT, nullable=False)
    close_price: Mapped[int] = mapped_column(_UINT, nullable=False)
    volume: Mapped[int] = mapped_column(_UINT, nullable=False)


class LatestCandleORM(Base):
    __tablename__ = "latest_candle"

    id: Mapped[str] = mapped_column(String(8), primary_key=True)
    close_price: Mapped[int] = mapped_column(_UINT, nullable=False)
    timestamp: Mapped[int] = mapped_column(BigInteger, nullable=False)


class CheckpointORM(Base):
    __tablename__ = "checkpoints"

    id: Mapped[str] = mapped_column(String(42), primary_key=True)
    block_number: Mapped[int] = mapped_column(BigInteger, nullable=False)
    log_index: Mapped[int] = mapped_column(Integer, nullable=False)
    event_id: Mapped[str] = mapped_column(String(80), nullable=False)
