"""JSON-lines event source: one raw log object per line, in chain order."""
import json
import logging
from collections.abc import Iterator
from pathlib import Path

from src.px_common.errors import EventDecodeError, EventOutOfOrderError
from src.px_events.application.decoder import decode_event
from src.px_events.domain.models import ChainEvent

logger = logging.getLogger(__name__)


class JsonLinesEventSource:
    """Yields decoded events; a position that moves backwards must be a redelivery.

    Only events from the last `redelivery_blocks` blocks below the high-water
    mark are remembered, so memory stays bounded on long files. A backwards
    event older than that window is reported as out of order.
    """

    def __init__(self, path: str | Path, redelivery_blocks: int = 64) -> None:
        self._path = Path(path)
        self._redelivery_blocks = redelivery_blocks

    def __iter__(self) -> Iterator[ChainEvent]:
        high_water: tuple[int, int] | None = None
        seen: dict[int, set[str]] = {}  # block -> event ids
        with self._path.open(encoding="utf-8") as fh:
            for lineno, line in enumerate(fh, start=1):
                if not line.strip():
                    continue
                try:
                    raw = json.loads(line)
                except json.JSONDecodeError as exc:
                    raise EventDecodeError(f"{self._path}:{lineno}: {exc.msg}") from exc
                event = decode_event(raw)
                if high_water is not None and event.position < high_water:
                    if event.event_id not in seen.get(event.block_number, ()):
                        raise EventOutOfOrderError(high_water, event.position)
                    logger.debug("Redelivery of %s at line %d", event.event_id, lineno)
                else:
                    if high_water is None or event.block_number > high_water[0]:
                        self._forget_before(seen, event.block_number - self._redelivery_blocks)
                    high_water = event.position
                seen.setdefault(event.block_number, set()).add(event.event_id)
                yield event

    @staticmethod
    def _forget_before(seen: dict[int, set[str]], block: int) -> None:
        for old in [b for b in seen if b < block]:
            del seen[old]
