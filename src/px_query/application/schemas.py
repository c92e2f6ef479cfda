# src/px_query/application/schemas.py
"""Pydantic schemas for the read API. Quantities are decimal strings."""
from pydantic import BaseModel


class OrderResponse(BaseModel):
    id: str
    trader: str
    is_buy: bool
    price: str
    initial_amount: str
    amount: str
    status: str
    timestamp: int


class TradeResponse(BaseModel):
    id: str
    buyer: str
    seller: str
    price: str
    amount: str
    timestamp: int
    tx_hash: str
    buy_order_id: str
    sell_order_id: str


class TradeListResponse(BaseModel):
    items: list[TradeResponse]
    has_more: bool
    next_cursor: str | None


class CandleResponse(BaseModel):
    id: str
    resolution: str
    timestamp: int
    open: str
    high: str
    low: str
    close: str
    volume: str


class PositionResponse(BaseModel):
    trader: str
    size: str
    entry_price: str


class MarginEventResponse(BaseModel):
    id: str
    trader: str
    amount: str
    event_type: str
    timestamp: int
    tx_hash: str


class FundingEventResponse(BaseModel):
    id: str
    event_type: str
    trader: str | None
    cumulative_rate: str | None
    payment: str | None
    timestamp: int


class LiquidationResponse(BaseModel):
    id: str
    trader: str
    liquidator: str
    amount: str
    fee: str
    timestamp: int
    tx_hash: str
