"""Event dispatcher — maps EventType to the handler that projects it."""
from src.px_common.enums import EventType
from src.px_common.errors import UnknownEventTypeError
from src.px_events.domain.models import ChainEvent
from src.px_projection.domain.candles import CandleResolution
from src.px_projection.handlers.funding import handle_funding_paid, handle_funding_updated
from src.px_projection.handlers.liquidation import handle_liquidated
from src.px_projection.handlers.margin import handle_margin
from src.px_projection.handlers.orders import handle_order_placed, handle_order_removed
from src.px_projection.handlers.positions import handle_position_updated
from src.px_projection.handlers.trades import handle_trade_executed
from src.px_store.domain.repository import EntityAccess


async def dispatch_event(
    event: ChainEvent,
    store: EntityAccess,
    resolution: CandleResolution,
) -> None:
    """Apply one event's effects through `store`."""
    et = event.event_type
    if et in (EventType.MARGIN_DEPOSITED, EventType.MARGIN_WITHDRAWN):
        await handle_margin(event, store)
    elif et == EventType.ORDER_PLACED:
        await handle_order_placed(event, store)
    elif et == EventType.ORDER_REMOVED:
        await handle_order_removed(event, store)
    elif et == EventType.TRADE_EXECUTED:
        await handle_trade_executed(event, store, resolution)
    elif et == EventType.POSITION_UPDATED:
        await handle_position_updated(event, store)
    elif et == EventType.FUNDING_UPDATED:
        await handle_funding_updated(event, store)
    elif et == EventType.FUNDING_PAID:
        await handle_funding_paid(event, store)
    elif et == EventType.LIQUIDATED:
        await handle_liquidated(event, store)
    else:
        raise UnknownEventTypeError(str(et))
