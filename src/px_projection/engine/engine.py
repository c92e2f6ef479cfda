"""ProjectionEngine — folds ordered exchange events into the entity store.

One engine per exchange deployment. Events are applied strictly one at a time
in (block_number, log_index) order; each event's writes plus the advanced
checkpoint are committed inside a single store.atomic() block.
"""
import asyncio
import logging
from collections.abc import Iterable

from src.px_common.enums import Collection
from src.px_common.errors import DataConsistencyError
from src.px_common.ids import normalize_address
from src.px_events.domain.models import ChainEvent
from src.px_projection.domain.candles import ONE_MINUTE, CandleResolution
from src.px_projection.domain.models import Checkpoint
from src.px_projection.engine.staging import StagedWrites
from src.px_projection.handlers.service import dispatch_event
from src.px_store.domain.repository import EntityStoreProtocol

logger = logging.getLogger(__name__)


class ProjectionEngine:
    def __init__(
        self,
        store: EntityStoreProtocol,
        exchange: str,
        resolution: CandleResolution = ONE_MINUTE,
    ) -> None:
        self._store = store
        self._exchange = normalize_address(exchange)
        self._resolution = resolution
        self._lock = asyncio.Lock()
        self._checkpoint: Checkpoint | None = None
        self._checkpoint_loaded = False

    @property
    def exchange(self) -> str:
        return self._exchange

    @property
    def resolution(self) -> CandleResolution:
        return self._resolution

    async def checkpoint(self) -> Checkpoint | None:
        """Last applied event; lazily loaded from the store on first use."""
        if not self._checkpoint_loaded:
            self._checkpoint = await self._store.get(Collection.CHECKPOINTS, self._exchange)
            self._checkpoint_loaded = True
            if self._checkpoint is not None:
                logger.info(
                    "Resuming %s after block=%d log_index=%d",
                    self._exchange,
                    self._checkpoint.block_number,
                    self._checkpoint.log_index,
                )
        return self._checkpoint

    async def apply(self, event: ChainEvent) -> bool:
        """Apply one event. Returns False when it was skipped as already applied."""
        async with self._lock:
            return await self._apply_inner(event)

    async def apply_batch(self, events: Iterable[ChainEvent]) -> int:
        """Apply events in the given order; returns how many were newly applied."""
        applied = 0
        for event in events:
            if await self.apply(event):
                applied += 1
        return applied

    async def _apply_inner(self, event: ChainEvent) -> bool:
        if event.exchange and normalize_address(event.exchange) != self._exchange:
            logger.debug("Ignoring %s from foreign contract %s", event.event_id, event.exchange)
            return False

        cp = await self.checkpoint()
        if cp is not None and event.position <= cp.position:
            logger.warning(
                "Skipping redelivered event %s at %s (checkpoint %s)",
                event.event_id,
                event.position,
                cp.position,
            )
            return False

        staged = StagedWrites(self._store)
        try:
            await dispatch_event(event, staged, self._resolution)
        except DataConsistencyError as exc:
            logger.error(
                "Event %s (%s) rejected: %s", event.event_id, event.event_type.value, exc.message
            )
            raise

        new_cp = Checkpoint(
            id=self._exchange,
            block_number=event.block_number,
            log_index=event.log_index,
            event_id=event.event_id,
        )
        await staged.set(Collection.CHECKPOINTS, new_cp)

        async with self._store.atomic():
            for collection, entity in staged.writes:
                await self._store.set(collection, entity)

        self._checkpoint = new_cp
        logger.debug(
            "Applied %s %s block=%d log_index=%d writes=%d",
            event.event_type.value,
            event.event_id,
            event.block_number,
            event.log_index,
            len(staged),
        )
        return True
