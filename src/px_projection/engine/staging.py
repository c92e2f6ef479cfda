"""Per-event write buffer.

Handlers read and write through StagedWrites; reads see the event's own earlier
writes, and nothing reaches the store until the whole event has been computed.
"""
from typing import Any

from src.px_common.enums import Collection
from src.px_store.domain.repository import EntityAccess


class StagedWrites:
    def __init__(self, store: EntityAccess) -> None:
        self._store = store
        self._pending: dict[tuple[Collection, str], Any] = {}

    async def get(self, collection: Collection, entity_id: str) -> Any | None:
        key = (collection, entity_id)
        if key in self._pending:
            return self._pending[key]
        return await self._store.get(collection, entity_id)

    async def set(self, collection: Collection, entity: Any) -> None:
        self._pending[(collection, entity.id)] = entity

    @property
    def writes(self) -> list[tuple[Collection, Any]]:
        """Final value per (collection, id), in first-write order."""
        return [(c, e) for (c, _), e in self._pending.items()]

    def __len__(self) -> int:
        return len(self._pending)
