# src/px_query/api/router.py
"""Read API over the projected exchange state."""
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.px_common.errors import OrderNotFoundError, PositionNotFoundError
from src.px_common.ids import normalize_address
from src.px_common.response import ApiResponse, success_response
from src.px_query.api.dependencies import get_db_session
from src.px_query.api.request_log import request_id_of
from src.px_query.application.schemas import (
    CandleResponse,
    FundingEventResponse,
    LiquidationResponse,
    MarginEventResponse,
    OrderResponse,
    PositionResponse,
    TradeListResponse,
    TradeResponse,
)
from src.px_query.infrastructure.repository import (
    ProjectionQueries,
    decode_trade_cursor,
    encode_trade_cursor,
)

router = APIRouter(tags=["projection"])
_repo = ProjectionQueries()

DbSession = Annotated[AsyncSession, Depends(get_db_session)]


def _addr(trader: str | None) -> str | None:
    return normalize_address(trader) if trader else None


@router.get("/orders/open")
async def list_open_orders(
    request: Request,
    db: DbSession,
    trader: str | None = Query(None),
    limit: int = Query(50, ge=1, le=500),
) -> ApiResponse:
    items = await _repo.list_open_orders(_addr(trader), limit, db)
    return success_response(
        [OrderResponse(**o).model_dump() for o in items], request_id_of(request)
    )


@router.get("/orders/{order_id}")
async def get_order(order_id: str, request: Request, db: DbSession) -> ApiResponse:
    order = await _repo.get_order(order_id, db)
    if order is None:
        raise OrderNotFoundError(order_id)
    return success_response(OrderResponse(**order).model_dump(), request_id_of(request))


@router.get("/trades")
async def list_trades(
    request: Request,
    db: DbSession,
    trader: str | None = Query(None),
    limit: int = Query(20, ge=1, le=100),
    cursor: str | None = Query(None),
) -> ApiResponse:
    after = decode_trade_cursor(cursor) if cursor else None
    items = await _repo.list_trades(_addr(trader), limit + 1, after, db)
    has_more = len(items) > limit
    if has_more:
        items = items[:limit]
    next_cursor = (
        encode_trade_cursor(items[-1]["timestamp"], items[-1]["id"])
        if has_more and items
        else None
    )
    data = TradeListResponse(
        items=[TradeResponse(**t) for t in items],
        has_more=has_more,
        next_cursor=next_cursor,
    )
    return success_response(data.model_dump(), request_id_of(request))


@router.get("/candles")
async def list_candles(
    request: Request,
    db: DbSession,
    resolution: str = Query("1m"),
    limit: int = Query(100, ge=1, le=1000),
) -> ApiResponse:
    items = await _repo.list_candles(resolution, limit, db)
    return success_response(
        [CandleResponse(**c).model_dump() for c in items], request_id_of(request)
    )


@router.get("/positions/{trader}")
async def get_position(trader: str, request: Request, db: DbSession) -> ApiResponse:
    address = normalize_address(trader)
    position = await _repo.get_position(address, db)
    if position is None:
        raise PositionNotFoundError(address)
    return success_response(PositionResponse(**position).model_dump(), request_id_of(request))


@router.get("/margin-events")
async def list_margin_events(
    request: Request,
    db: DbSession,
    trader: str = Query(...),
    limit: int = Query(50, ge=1, le=500),
) -> ApiResponse:
    items = await _repo.list_margin_events(normalize_address(trader), limit, db)
    return success_response(
        [MarginEventResponse(**m).model_dump() for m in items], request_id_of(request)
    )


@router.get("/funding-events")
async def list_funding_events(
    request: Request,
    db: DbSession,
    trader: str | None = Query(None),
    limit: int = Query(50, ge=1, le=500),
) -> ApiResponse:
    items = await _repo.list_funding_events(_addr(trader), limit, db)
    return success_response(
        [FundingEventResponse(**f).model_dump() for f in items], request_id_of(request)
    )


@router.get("/liquidations")
async def list_liquidations(
    request: Request,
    db: DbSession,
    trader: str | None = Query(None),
    limit: int = Query(50, ge=1, le=500),
) -> ApiResponse:
    items = await _repo.list_liquidations(_addr(trader), limit, db)
    return success_response(
        [LiquidationResponse(**q).model_dump() for q in items], request_id_of(request)
    )
