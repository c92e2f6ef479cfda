"""Order lifecycle: placement, removal, and per-side fill bookkeeping."""
import logging

from src.px_common.enums import Collection, OrderStatus
from src.px_common.ids import order_key
from src.px_events.domain.models import ChainEvent, OrderPlacedParams, OrderRemovedParams
from src.px_projection.domain.invariants import remaining_after_fill
from src.px_projection.domain.models import Order, order_removed, order_with_fill
from src.px_store.domain.repository import EntityAccess

logger = logging.getLogger(__name__)


async def handle_order_placed(event: ChainEvent, store: EntityAccess) -> None:
    params: OrderPlacedParams = event.params  # type: ignore[assignment]
    await store.set(
        Collection.ORDERS,
        Order(
            id=order_key(params.id),
            trader=params.trader,
            is_buy=params.is_buy,
            price=params.price,
            initial_amount=params.amount,
            amount=params.amount,
            status=OrderStatus.OPEN,
            timestamp=event.block_timestamp,
        ),
    )


async def handle_order_removed(event: ChainEvent, store: EntityAccess) -> None:
    """Close an OPEN order; unknown ids and already-closed orders are left as they are."""
    params: OrderRemovedParams = event.params  # type: ignore[assignment]
    order: Order | None = await store.get(Collection.ORDERS, order_key(params.id))
    if order is None:
        logger.warning("OrderRemoved for unknown order %s (event %s)", params.id, event.event_id)
        return
    if not order.is_open:
        logger.warning(
            "OrderRemoved for closed order %s (status=%s, event %s)",
            order.id,
            order.status.value,
            event.event_id,
        )
        return
    await store.set(Collection.ORDERS, order_removed(order))


async def apply_fill(order_id: int, traded: int, event: ChainEvent, store: EntityAccess) -> None:
    """Decrement one side of a trade.

    Missing or already-closed orders are skipped; an OPEN order that would go
    negative raises NegativeOrderAmountError.
    """
    key = order_key(order_id)
    order: Order | None = await store.get(Collection.ORDERS, key)
    if order is None:
        logger.warning("Trade %s references unknown order %s", event.event_id, key)
        return
    if not order.is_open:
        logger.warning(
            "Trade %s references closed order %s (status=%s)",
            event.event_id,
            key,
            order.status.value,
        )
        return
    await store.set(Collection.ORDERS, order_with_fill(order, remaining_after_fill(order, traded)))
