"""Tests for JsonLinesEventSource."""
import json
from pathlib import Path
from typing import Any

import pytest

from src.px_common.errors import EventDecodeError, EventOutOfOrderError
from src.px_ingest.source import JsonLinesEventSource


def _line(block: int, log_index: int, order_id: int = 1) -> dict[str, Any]:
    return {
        "event": "OrderRemoved",
        "params": {"id": order_id},
        "transactionHash": f"0x{block:04x}",
        "logIndex": log_index,
        "blockNumber": block,
        "blockTimestamp": block * 12,
    }


def _write(path: Path, lines: list[Any]) -> Path:
    path.write_text(
        "\n".join(x if isinstance(x, str) else json.dumps(x) for x in lines) + "\n",
        encoding="utf-8",
    )
    return path


class TestJsonLinesEventSource:
    def test_reads_in_order_skipping_blank_lines(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "ev.jsonl", [_line(1, 0), "", _line(1, 1), _line(2, 0)])
        events = list(JsonLinesEventSource(path))
        assert [e.position for e in events] == [(1, 0), (1, 1), (2, 0)]

    def test_redelivery_passes_through(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "ev.jsonl", [_line(1, 0), _line(2, 0), _line(1, 0)])
        assert len(list(JsonLinesEventSource(path))) == 3

    def test_backwards_unknown_event_is_out_of_order(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "ev.jsonl", [_line(2, 0), _line(1, 5)])
        with pytest.raises(EventOutOfOrderError):
            list(JsonLinesEventSource(path))

    def test_bad_json(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "ev.jsonl", [_line(1, 0), "{not json"])
        with pytest.raises(EventDecodeError) as exc:
            list(JsonLinesEventSource(path))
        assert ":2:" in exc.value.message

    def test_redelivery_within_window(self, tmp_path: Path) -> None:
        lines = [_line(1, 0), _line(3, 0), _line(5, 0), _line(1, 0)]
        path = _write(tmp_path / "ev.jsonl", lines)
        assert len(list(JsonLinesEventSource(path, redelivery_blocks=4))) == 4

    def test_redelivery_older_than_window_is_out_of_order(self, tmp_path: Path) -> None:
        lines = [_line(1, 0), _line(3, 0), _line(10, 0), _line(1, 0)]
        path = _write(tmp_path / "ev.jsonl", lines)
        with pytest.raises(EventOutOfOrderError):
            list(JsonLinesEventSource(path, redelivery_blocks=4))

    def test_same_block_redelivery_with_zero_window(self, tmp_path: Path) -> None:
        lines = [_line(7, 0), _line(7, 1), _line(7, 0)]
        path = _write(tmp_path / "ev.jsonl", lines)
        assert len(list(JsonLinesEventSource(path, redelivery_blocks=0))) == 3
