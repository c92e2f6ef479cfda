"""FastAPI application entry point — read API over the projected state.

Run with: uvicorn src.main:app --port 8000
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text

from config.settings import Settings, get_settings
from src.px_common.database import build_engine, build_session_factory
from src.px_common.errors import AppError
from src.px_common.response import error_response
from src.px_query.api.request_log import RequestLogMiddleware, request_id_of
from src.px_query.api.router import router as projection_router


def create_app(settings: Settings) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Startup: build the engine and verify the DB. Shutdown: dispose."""
        engine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        app.state.session_factory = build_session_factory(engine)
        yield
        await engine.dispose()

    app = FastAPI(
        title=settings.APP_NAME,
        version="0.1.0",
        lifespan=lifespan,
    )
    app.add_middleware(RequestLogMiddleware)

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        resp = error_response(exc.code, exc.message, request_id_of(request))
        return JSONResponse(
            status_code=exc.http_status,
            content=resp.model_dump(),
        )

    app.include_router(projection_router, prefix="/api/v1")

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok", "version": "0.1.0", "exchange": settings.EXCHANGE_ADDRESS}

    return app


_settings = get_settings()
logging.basicConfig(level=_settings.LOG_LEVEL)
app = create_app(_settings)
