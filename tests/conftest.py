"""Shared test fixtures."""

import pytest

from src.px_projection.engine.engine import ProjectionEngine
from src.px_store.infrastructure.memory_store import InMemoryEntityStore
from tests.factories import EXCHANGE, EventFactory


@pytest.fixture
def store() -> InMemoryEntityStore:
    return InMemoryEntityStore()


@pytest.fixture
def engine(store: InMemoryEntityStore) -> ProjectionEngine:
    return ProjectionEngine(store, exchange=EXCHANGE)


@pytest.fixture
def events() -> EventFactory:
    return EventFactory()
