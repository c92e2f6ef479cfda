"""Decode raw log payloads (as emitted by the chain reader) into ChainEvent.

uint256/int256 values routinely exceed what JSON numbers carry exactly, so every
integer field also accepts a decimal or 0x-hex string.
"""
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationError

from src.px_common.enums import EventType
from src.px_common.errors import EventDecodeError, UnknownEventTypeError
from src.px_common.ids import is_address, normalize_address
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


def _to_int(v: Any) -> Any:
    if isinstance(v, bool):
        raise ValueError("boolean is not an integer")
    if isinstance(v, str):
        s = v.strip()
        neg = s.startswith("-")
        body = s[1:] if neg else s
        value = int(body, 16) if body.lower().startswith("0x") else int(body, 10)
        return -value if neg else value
    return v


def _to_address(v: Any) -> str:
    if not isinstance(v, str):
        raise ValueError("address must be a string")
    addr = normalize_address(v)
    if not is_address(addr):
        raise ValueError(f"not a 20-byte hex address: {v}")
    return addr


BigInt = Annotated[int, BeforeValidator(_to_int)]
Address = Annotated[str, BeforeValidator(_to_address)]


class _Params(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


class MarginPayload(_Params):
    trader: Address
    amount: BigInt = Field(ge=0)


class OrderPlacedPayload(_Params):
    id: BigInt = Field(ge=0)
    trader: Address
    is_buy: bool = Field(alias="isBuy")
    price: BigInt = Field(ge=0)
    amount: BigInt = Field(ge=0)


class OrderRemovedPayload(_Params):
    id: BigInt = Field(ge=0)


class TradeExecutedPayload(_Params):
    buy_order_id: BigInt = Field(alias="buyOrderId", ge=0)
    sell_order_id: BigInt = Field(alias="sellOrderId", ge=0)
    buyer: Address
    seller: Address
    price: BigInt = Field(ge=0)
    amount: BigInt = Field(ge=0)


class PositionUpdatedPayload(_Params):
    trader: Address
    size: BigInt
    entry_price: BigInt = Field(alias="entryPrice", ge=0)


class FundingUpdatedPayload(_Params):
    cumulative_funding_rate: BigInt = Field(alias="cumulativeFundingRate")


class FundingPaidPayload(_Params):
    trader: Address
    amount: BigInt


class LiquidatedPayload(_Params):
    trader: Address
    liquidator: Address
    amount: BigInt = Field(ge=0)
    fee: BigInt = Field(ge=0)


class RawLog(BaseModel):
    """Envelope common to every event."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    event: str
    params: dict[str, Any]
    transaction_hash: str = Field(alias="transactionHash", min_length=1)
    log_index: BigInt = Field(alias="logIndex", ge=0)
    block_number: BigInt = Field(alias="blockNumber", ge=0)
    block_timestamp: BigInt = Field(alias="blockTimestamp", ge=0)
    address: str = ""


_PAYLOADS: dict[EventType, type[_Params]] = {
    EventType.MARGIN_DEPOSITED: MarginPayload,
    EventType.MARGIN_WITHDRAWN: MarginPayload,
    EventType.ORDER_PLACED: OrderPlacedPayload,
    EventType.ORDER_REMOVED: OrderRemovedPayload,
    EventType.TRADE_EXECUTED: TradeExecutedPayload,
    EventType.POSITION_UPDATED: PositionUpdatedPayload,
    EventType.FUNDING_UPDATED: FundingUpdatedPayload,
    EventType.FUNDING_PAID: FundingPaidPayload,
    EventType.LIQUIDATED: LiquidatedPayload,
}


def _to_params(event_type: EventType, p: Any) -> EventParams:
    if event_type in (EventType.MARGIN_DEPOSITED, EventType.MARGIN_WITHDRAWN):
        return MarginParams(trader=p.trader, amount=p.amount)
    if event_type == EventType.ORDER_PLACED:
        return OrderPlacedParams(
            id=p.id, trader=p.trader, is_buy=p.is_buy, price=p.price, amount=p.amount
        )
    if event_type == EventType.ORDER_REMOVED:
        return OrderRemovedParams(id=p.id)
    if event_type == EventType.TRADE_EXECUTED:
        return TradeExecutedParams(
            buy_order_id=p.buy_order_id,
            sell_order_id=p.sell_order_id,
            buyer=p.buyer,
            seller=p.seller,
            price=p.price,
            amount=p.amount,
        )
    if event_type == EventType.POSITION_UPDATED:
        return PositionUpdatedParams(trader=p.trader, size=p.size, entry_price=p.entry_price)
    if event_type == EventType.FUNDING_UPDATED:
        return FundingUpdatedParams(cumulative_funding_rate=p.cumulative_funding_rate)
    if event_type == EventType.FUNDING_PAID:
        return FundingPaidParams(trader=p.trader, amount=p.amount)
    return LiquidatedParams(
        trader=p.trader, liquidator=p.liquidator, amount=p.amount, fee=p.fee
    )


def decode_event(raw: dict[str, Any]) -> ChainEvent:
    """Validate one raw log dict and build the typed ChainEvent."""
    name = raw.get("event") if isinstance(raw, dict) else None
    try:
        event_type = EventType(name)
    except ValueError:
        raise UnknownEventTypeError(str(name)) from None

    try:
        envelope = RawLog.model_validate(raw)
        payload = _PAYLOADS[event_type].model_validate(envelope.params)
    except ValidationError as exc:
        raise EventDecodeError(f"{event_type.value}: {exc.errors()[0]['msg']}") from exc

    exchange = normalize_address(envelope.address) if envelope.address else ""
    if exchange and not is_address(exchange):
        raise EventDecodeError(f"{event_type.value}: emitter is not an address: {envelope.address}")

    return ChainEvent(
        event_type=event_type,
        params=_to_params(event_type, payload),
        tx_hash=envelope.transaction_hash.lower(),
        log_index=envelope.log_index,
        block_number=envelope.block_number,
        block_timestamp=envelope.block_timestamp,
        exchange=exchange,
    )
