"""Typed view of the exchange ABI, validated once at startup.

The indexer only needs to know that every event it projects is declared by the
contract; handlers never look at the ABI.
"""
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from src.px_common.enums import EventType
from src.px_common.errors import InvalidAbiError, MissingCapabilityError

REQUIRED_EVENTS: frozenset[str] = frozenset(e.value for e in EventType)


@dataclass(frozen=True)
class ExchangeCapabilities:
    events: frozenset[str]
    functions: frozenset[str]

    @classmethod
    def from_abi(
        cls,
        abi: Any,
        required_events: Iterable[str] = REQUIRED_EVENTS,
    ) -> "ExchangeCapabilities":
        if not isinstance(abi, list):
            raise InvalidAbiError(f"expected a list of entries, got {type(abi).__name__}")
        events: set[str] = set()
        functions: set[str] = set()
        for entry in abi:
            if not isinstance(entry, dict):
                raise InvalidAbiError(f"entry is not an object: {entry!r}")
            kind = entry.get("type")
            name = entry.get("name")
            if not isinstance(name, str):
                continue
            if kind == "event":
                events.add(name)
            elif kind == "function":
                functions.add(name)
        caps = cls(events=frozenset(events), functions=frozenset(functions))
        caps.require_events(required_events)
        return caps

    def require_events(self, names: Iterable[str]) -> None:
        missing = sorted(n for n in names if n not in self.events)
        if missing:
            raise MissingCapabilityError([f"event {n}" for n in missing])

    def require_functions(self, names: Iterable[str]) -> None:
        missing = sorted(n for n in names if n not in self.functions)
        if missing:
            raise MissingCapabilityError([f"function {n}" for n in missing])
