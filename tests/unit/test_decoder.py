"""Tests for decode_event: raw log dicts -> typed ChainEvent."""
from typing import Any

import pytest

from src.px_common.enums import EventType
from src.px_common.errors import EventDecodeError, UnknownEventTypeError
from src.px_events.application.decoder import decode_event
from src.px_events.domain.models import (
    FundingUpdatedParams,
    MarginParams,
    OrderPlacedParams,
    PositionUpdatedParams,
    TradeExecutedParams,
)

TRADER = "0x" + "AB" * 20


def _raw(event: str, params: dict[str, Any], **overrides: Any) -> dict[str, Any]:
    raw: dict[str, Any] = {
        "event": event,
        "params": params,
        "transactionHash": "0xDEADBEEF",
        "logIndex": 2,
        "blockNumber": 1234,
        "blockTimestamp": 1_700_000_000,
        "address": "0x" + "5F" * 20,
    }
    raw.update(overrides)
    return raw


class TestEnvelope:
    def test_envelope_fields(self) -> None:
        ev = decode_event(_raw("MarginDeposited", {"trader": TRADER, "amount": 10}))
        assert ev.event_type == EventType.MARGIN_DEPOSITED
        assert ev.tx_hash == "0xdeadbeef"
        assert ev.log_index == 2
        assert ev.block_number == 1234
        assert ev.block_timestamp == 1_700_000_000
        assert ev.exchange == "0x" + "5f" * 20
        assert ev.event_id == "0xdeadbeef-2"
        assert ev.position == (1234, 2)

    def test_missing_address_leaves_exchange_empty(self) -> None:
        raw = _raw("OrderRemoved", {"id": 1})
        del raw["address"]
        assert decode_event(raw).exchange == ""

    def test_unknown_event(self) -> None:
        with pytest.raises(UnknownEventTypeError):
            decode_event(_raw("Swapped", {}))

    def test_missing_envelope_field(self) -> None:
        raw = _raw("OrderRemoved", {"id": 1})
        del raw["logIndex"]
        with pytest.raises(EventDecodeError):
            decode_event(raw)


class TestPayloads:
    def test_margin_address_normalized(self) -> None:
        ev = decode_event(_raw("MarginWithdrawn", {"trader": TRADER, "amount": "5"}))
        assert ev.params == MarginParams(trader=TRADER.lower(), amount=5)

    def test_order_placed_aliases(self) -> None:
        ev = decode_event(
            _raw(
                "OrderPlaced",
                {"id": "0x10", "trader": TRADER, "isBuy": False, "price": "100", "amount": 3},
            )
        )
        assert ev.params == OrderPlacedParams(
            id=16, trader=TRADER.lower(), is_buy=False, price=100, amount=3
        )

    def test_uint256_beyond_json_precision(self) -> None:
        big = 2**255 + 7
        ev = decode_event(
            _raw(
                "TradeExecuted",
                {
                    "buyOrderId": 1,
                    "sellOrderId": 2,
                    "buyer": TRADER,
                    "seller": TRADER,
                    "price": str(big),
                    "amount": hex(big),
                },
            )
        )
        assert isinstance(ev.params, TradeExecutedParams)
        assert ev.params.price == big
        assert ev.params.amount == big

    def test_signed_values(self) -> None:
        ev = decode_event(
            _raw("PositionUpdated", {"trader": TRADER, "size": "-0x8", "entryPrice": 250})
        )
        assert ev.params == PositionUpdatedParams(trader=TRADER.lower(), size=-8, entry_price=250)

        ev = decode_event(_raw("FundingUpdated", {"cumulativeFundingRate": "-42"}))
        assert ev.params == FundingUpdatedParams(cumulative_funding_rate=-42)

    def test_negative_unsigned_rejected(self) -> None:
        with pytest.raises(EventDecodeError):
            decode_event(_raw("MarginDeposited", {"trader": TRADER, "amount": -1}))

    def test_missing_param_rejected(self) -> None:
        with pytest.raises(EventDecodeError):
            decode_event(_raw("Liquidated", {"trader": TRADER, "amount": 1, "fee": 0}))

    def test_boolean_is_not_an_integer(self) -> None:
        with pytest.raises(EventDecodeError):
            decode_event(_raw("OrderRemoved", {"id": True}))


class TestAddresses:
    @pytest.mark.parametrize("bad", ["bob", "0x1234", "0x" + "zz" * 20, 42])
    def test_malformed_trader_rejected(self, bad: object) -> None:
        with pytest.raises(EventDecodeError):
            decode_event(_raw("MarginDeposited", {"trader": bad, "amount": 1}))

    def test_unprefixed_address_gets_prefix(self) -> None:
        ev = decode_event(_raw("MarginDeposited", {"trader": "AB" * 20, "amount": 1}))
        assert ev.params.trader == "0x" + "ab" * 20

    def test_malformed_emitter_rejected(self) -> None:
        with pytest.raises(EventDecodeError):
            decode_event(_raw("OrderRemoved", {"id": 1}, address="exchange"))
