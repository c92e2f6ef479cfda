"""PositionUpdated: last write wins, no merge with prior state."""
from src.px_common.enums import Collection
from src.px_events.domain.models import ChainEvent, PositionUpdatedParams
from src.px_projection.domain.models import Position
from src.px_store.domain.repository import EntityAccess


async def handle_position_updated(event: ChainEvent, store: EntityAccess) -> None:
    params: PositionUpdatedParams = event.params  # type: ignore[assignment]
    await store.set(
        Collection.POSITIONS,
        Position(
            id=params.trader,
            trader=params.trader,
            size=params.size,
            entry_price=params.entry_price,
        ),
    )
