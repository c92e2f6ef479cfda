"""Global enums — must match DB CHECK constraints exactly."""

from enum import Enum


class EventType(str, Enum):
    """Exchange contract events consumed by the projection."""
    MARGIN_DEPOSITED = "MarginDeposited"
    MARGIN_WITHDRAWN = "MarginWithdrawn"
    ORDER_PLACED = "OrderPlaced"
    ORDER_REMOVED = "OrderRemoved"
    TRADE_EXECUTED = "TradeExecuted"
    POSITION_UPDATED = "PositionUpdated"
    FUNDING_UPDATED = "FundingUpdated"
    FUNDING_PAID = "FundingPaid"
    LIQUIDATED = "Liquidated"


class OrderStatus(str, Enum):
    OPEN = "OPEN"
    FILLED = "FILLED"
    CANCELLED = "CANCELLED"


class MarginEventType(str, Enum):
    DEPOSIT = "DEPOSIT"
    WITHDRAW = "WITHDRAW"


class FundingEventType(str, Enum):
    """GLOBAL_UPDATE carries cumulative_rate; USER_PAID carries trader + payment."""
    GLOBAL_UPDATE = "GLOBAL_UPDATE"
    USER_PAID = "USER_PAID"


class Collection(str, Enum):
    """Entity collections reachable through the entity store."""
    MARGIN_EVENTS = "margin_events"
    ORDERS = "orders"
    TRADES = "trades"
    POSITIONS = "positions"
    FUNDING_EVENTS = "funding_events"
    LIQUIDATIONS = "liquidations"
    CANDLES = "candles"
    LATEST_CANDLE = "latest_candle"
    CHECKPOINTS = "checkpoints"
