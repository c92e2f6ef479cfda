"""Deterministic entity ids derived from the event itself.

Never counters: a redelivered event must land on the same rows.
"""
import re

_ADDRESS_RE = re.compile(r"^0x[a-fA-F0-9]{40}$")


def event_entity_id(tx_hash: str, log_index: int) -> str:
    """Id for append-only rows: unique per log, sortable within a transaction."""
    return f"{tx_hash}-{log_index}"


def order_key(order_id: int | str) -> str:
    """Exchange-assigned numeric order id as a store key."""
    return str(order_id)


def candle_id(resolution: str, bucket_start: int) -> str:
    return f"{resolution}-{bucket_start}"


def normalize_address(address: str) -> str:
    """Lower-case hex address with a 0x prefix."""
    addr = address.strip()
    if not addr.lower().startswith("0x"):
        addr = f"0x{addr}"
    return "0x" + addr[2:].lower()


def is_address(value: str) -> bool:
    """True for a 0x-prefixed 20-byte hex string (any case)."""
    return _ADDRESS_RE.match(value) is not None
