"""Funding ledger rows. Neither variant touches Position."""
from src.px_common.enums import Collection, FundingEventType
from src.px_events.domain.models import ChainEvent, FundingPaidParams, FundingUpdatedParams
from src.px_projection.domain.models import FundingEvent
from src.px_store.domain.repository import EntityAccess


async def handle_funding_updated(event: ChainEvent, store: EntityAccess) -> None:
    params: FundingUpdatedParams = event.params  # type: ignore[assignment]
    await store.set(
        Collection.FUNDING_EVENTS,
        FundingEvent(
            id=event.event_id,
            event_type=FundingEventType.GLOBAL_UPDATE,
            timestamp=event.block_timestamp,
            cumulative_rate=params.cumulative_funding_rate,
        ),
    )


async def handle_funding_paid(event: ChainEvent, store: EntityAccess) -> None:
    params: FundingPaidParams = event.params  # type: ignore[assignment]
    await store.set(
        Collection.FUNDING_EVENTS,
        FundingEvent(
            id=event.event_id,
            event_type=FundingEventType.USER_PAID,
            timestamp=event.block_timestamp,
            trader=params.trader,
            payment=params.amount,
        ),
    )
