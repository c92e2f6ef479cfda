"""Margin deposits and withdrawals -> append-only MarginEvent rows."""
from src.px_common.enums import Collection, EventType, MarginEventType
from src.px_events.domain.models import ChainEvent, MarginParams
from src.px_projection.domain.models import MarginEvent
from src.px_store.domain.repository import EntityAccess

_EVENT_TYPES = {
    EventType.MARGIN_DEPOSITED: MarginEventType.DEPOSIT,
    EventType.MARGIN_WITHDRAWN: MarginEventType.WITHDRAW,
}


async def handle_margin(event: ChainEvent, store: EntityAccess) -> None:
    """No read-before-write: a redelivery rewrites the same row with the same content."""
    params: MarginParams = event.params  # type: ignore[assignment]
    await store.set(
        Collection.MARGIN_EVENTS,
        MarginEvent(
            id=event.event_id,
            trader=params.trader,
            amount=params.amount,
            event_type=_EVENT_TYPES[event.event_type],
            timestamp=event.block_timestamp,
            tx_hash=event.tx_hash,
        ),
    )
