"""Replay host: Settings -> SQL store -> ProjectionEngine -> events file.

Run with: python -m src.px_ingest.runner
"""
import json
import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from pathlib import Path

import uvloop

from config.settings import Settings, get_settings
from src.px_common.database import build_engine, build_session_factory
from src.px_events.domain.abi import ExchangeCapabilities
from src.px_events.domain.models import ChainEvent
from src.px_ingest.source import JsonLinesEventSource
from src.px_projection.domain.candles import resolution_for
from src.px_projection.engine.engine import ProjectionEngine
from src.px_store.infrastructure.sql_store import SqlEntityStore

logger = logging.getLogger(__name__)


@dataclass
class ReplayReport:
    read: int = 0
    applied: int = 0

    @property
    def skipped(self) -> int:
        return self.read - self.applied


async def run_replay(
    events: Iterable[ChainEvent],
    engine: ProjectionEngine,
    commit: Callable[[], Awaitable[None]] | None = None,
    commit_every: int = 500,
) -> ReplayReport:
    """Apply every event in order. `commit` (if given) makes progress durable."""
    report = ReplayReport()
    for event in events:
        report.read += 1
        if await engine.apply(event):
            report.applied += 1
        if commit is not None and report.read % commit_every == 0:
            await commit()
    if commit is not None:
        await commit()
    logger.info(
        "Replay finished for %s: read=%d applied=%d skipped=%d",
        engine.exchange,
        report.read,
        report.applied,
        report.skipped,
    )
    return report


def load_capabilities(abi_path: str) -> ExchangeCapabilities:
    """Parse and validate the exchange ABI once, before any event is read."""
    with Path(abi_path).open(encoding="utf-8") as fh:
        abi = json.load(fh)
    # Foundry/hardhat artifacts wrap the ABI in an object
    if isinstance(abi, dict) and "abi" in abi:
        abi = abi["abi"]
    return ExchangeCapabilities.from_abi(abi)


async def main(settings: Settings) -> ReplayReport:
    if settings.EXCHANGE_ABI_PATH:
        caps = load_capabilities(settings.EXCHANGE_ABI_PATH)
        logger.info("Exchange ABI declares %d events", len(caps.events))

    db_engine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)
    factory = build_session_factory(db_engine)
    try:
        async with factory() as session:
            store = SqlEntityStore(session)
            engine = ProjectionEngine(
                store,
                exchange=settings.EXCHANGE_ADDRESS,
                resolution=resolution_for(settings.CANDLE_RESOLUTION),
            )
            logger.info("Replaying %s into %s", settings.EVENT_LOG_PATH, settings.EXCHANGE_ADDRESS)
            return await run_replay(
                JsonLinesEventSource(settings.EVENT_LOG_PATH, settings.REDELIVERY_WINDOW_BLOCKS),
                engine,
                commit=store.commit,
            )
    finally:
        await db_engine.dispose()


if __name__ == "__main__":
    _settings = get_settings()
    logging.basicConfig(level=_settings.LOG_LEVEL)
    uvloop.run(main(_settings))
