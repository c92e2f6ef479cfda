"""In-memory entity store: one dict per collection.

Used by tests and by single-process replays that do not need durability.
"""
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from src.px_common.enums import Collection

_ABSENT = object()


class InMemoryEntityStore:
    """Concrete EntityStoreProtocol backed by plain dicts."""

    def __init__(self) -> None:
        self._data: dict[Collection, dict[str, Any]] = {c: {} for c in Collection}
        # one undo journal per open atomic() block: (collection, id) -> prior value
        self._journals: list[dict[tuple[Collection, str], Any]] = []

    async def get(self, collection: Collection, entity_id: str) -> Any | None:
        return self._data[collection].get(entity_id)

    async def set(self, collection: Collection, entity: Any) -> None:
        rows = self._data[collection]
        if self._journals:
            self._journals[-1].setdefault((collection, entity.id), rows.get(entity.id, _ABSENT))
        rows[entity.id] = entity

    @asynccontextmanager
    async def atomic(self) -> AsyncIterator[None]:
        """All-or-nothing: undoes the block's writes if it raises.

        Only the keys written inside the block are journaled.
        """
        journal: dict[tuple[Collection, str], Any] = {}
        self._journals.append(journal)
        try:
            yield
        except BaseException:
            self._journals.pop()
            for (collection, entity_id), prior in journal.items():
                if prior is _ABSENT:
                    self._data[collection].pop(entity_id, None)
                else:
                    self._data[collection][entity_id] = prior
            raise
        self._journals.pop()
        if self._journals:
            for key, prior in journal.items():
                self._journals[-1].setdefault(key, prior)

    def all(self, collection: Collection) -> list[Any]:
        """Rows of one collection, sorted by id."""
        rows = self._data[collection]
        return [rows[k] for k in sorted(rows)]

    def count(self, collection: Collection) -> int:
        return len(self._data[collection])

    def dump(self) -> dict[Collection, dict[str, Any]]:
        """Shallow copy of every collection (entities are immutable)."""
        return {c: dict(rows) for c, rows in self._data.items()}
