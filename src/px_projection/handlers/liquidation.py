"""Liquidated: ledger row, then shrink the trader's position toward zero."""
import logging

from src.px_common.enums import Collection
from src.px_events.domain.models import ChainEvent, LiquidatedParams
from src.px_projection.domain.models import Liquidation, Position, position_with_size
from src.px_store.domain.repository import EntityAccess

logger = logging.getLogger(__name__)


def reduce_toward_zero(size: int, amount: int) -> int:
    """Magnitude reduction clamped at zero: a position never flips side here.

    A flat position stays flat.
    """
    if size > 0:
        return max(size - amount, 0)
    if size < 0:
        return min(size + amount, 0)
    return 0


async def handle_liquidated(event: ChainEvent, store: EntityAccess) -> None:
    params: LiquidatedParams = event.params  # type: ignore[assignment]
    await store.set(
        Collection.LIQUIDATIONS,
        Liquidation(
            id=event.event_id,
            trader=params.trader,
            liquidator=params.liquidator,
            amount=params.amount,
            fee=params.fee,
            timestamp=event.block_timestamp,
            tx_hash=event.tx_hash,
        ),
    )

    position: Position | None = await store.get(Collection.POSITIONS, params.trader)
    if position is None:
        logger.warning(
            "Liquidation %s for trader %s without a position", event.event_id, params.trader
        )
        return
    new_size = reduce_toward_zero(position.size, params.amount)
    if abs(position.size) < params.amount:
        logger.warning(
            "Liquidation %s overshoots position of %s: size=%d amount=%d, clamped to 0",
            event.event_id,
            params.trader,
            position.size,
            params.amount,
        )
    await store.set(Collection.POSITIONS, position_with_size(position, new_size))
