"""TradeExecuted: immutable Trade row, candle update, both order sides."""
import logging

from src.px_common.enums import Collection
from src.px_common.ids import order_key
from src.px_events.domain.models import ChainEvent, TradeExecutedParams
from src.px_projection.domain.candles import CandleResolution, apply_trade
from src.px_projection.domain.invariants import verify_candle
from src.px_projection.domain.models import Candle, LatestCandle, Trade
from src.px_projection.handlers.orders import apply_fill
from src.px_store.domain.repository import EntityAccess

logger = logging.getLogger(__name__)


async def update_candle(
    resolution: CandleResolution,
    timestamp: int,
    price: int,
    amount: int,
    store: EntityAccess,
) -> Candle:
    bucket_id = resolution.candle_id_for(timestamp)
    existing: Candle | None = await store.get(Collection.CANDLES, bucket_id)
    latest: LatestCandle | None = None
    if existing is None:
        latest = await store.get(Collection.LATEST_CANDLE, resolution.label)
    candle, pointer = apply_trade(resolution, existing, latest, timestamp, price, amount)
    verify_candle(candle)
    await store.set(Collection.CANDLES, candle)
    await store.set(Collection.LATEST_CANDLE, pointer)
    logger.debug(
        "Candle %s %s: o=%d h=%d l=%d c=%d v=%d",
        candle.id,
        "opened" if existing is None else "updated",
        candle.open_price,
        candle.high_price,
        candle.low_price,
        candle.close_price,
        candle.volume,
    )
    return candle


async def handle_trade_executed(
    event: ChainEvent,
    store: EntityAccess,
    resolution: CandleResolution,
) -> None:
    params: TradeExecutedParams = event.params  # type: ignore[assignment]

    # 1. Trade row
    await store.set(
        Collection.TRADES,
        Trade(
            id=event.event_id,
            buyer=params.buyer,
            seller=params.seller,
            price=params.price,
            amount=params.amount,
            timestamp=event.block_timestamp,
            tx_hash=event.tx_hash,
            buy_order_id=order_key(params.buy_order_id),
            sell_order_id=order_key(params.sell_order_id),
        ),
    )

    # 2. Candle bucket + latest pointer
    await update_candle(resolution, event.block_timestamp, params.price, params.amount, store)

    # 3-4. Remaining amounts on both sides
    await apply_fill(params.buy_order_id, params.amount, event, store)
    await apply_fill(params.sell_order_id, params.amount, event, store)
