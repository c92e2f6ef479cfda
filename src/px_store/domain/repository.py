# src/px_store/domain/repository.py
"""Entity store Protocol — the only persistence contract the projection needs.

get/set by id over named collections; set is a full-replace upsert. One event's
writes are grouped by atomic().
"""
from contextlib import AbstractAsyncContextManager
from typing import Any, Protocol

from src.px_common.enums import Collection


class EntityAccess(Protocol):
    async def get(self, collection: Collection, entity_id: str) -> Any | None: ...

    async def set(self, collection: Collection, entity: Any) -> None: ...


class EntityStoreProtocol(EntityAccess, Protocol):
    def atomic(self) -> AbstractAsyncContextManager[None]: ...
