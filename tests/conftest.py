from __future__ import annotations

import json
from collections.abc import Callable, Sequence
from pathlib import Path

import pytest

from mcp_invocation_logs.core.models import RawLogEvent

REQUEST_ID = "11111111-1111-1111-1111-111111111111"


@pytest.fixture
def make_events() -> Callable[..., list[RawLogEvent]]:
    """Build events on one stream with sortable ids and 1s-spaced timestamps."""

    def _make(
        messages: Sequence[str],
        *,
        stream: str = "2024/01/01/[$LATEST]aaaa",
        first_id: int = 1,
        first_ts: int = 1_700_000_000_000,
        runtime: str = "",
    ) -> list[RawLogEvent]:
        return [
            RawLogEvent(
                event_id=f"{first_id + i:056d}",
                log_stream=stream,
                timestamp=first_ts + i * 1000,
                message=message,
                runtime=runtime,
            )
            for i, message in enumerate(messages)
        ]

    return _make


@pytest.fixture
def complete_messages() -> list[str]:
    return [
        f"START RequestId: {REQUEST_ID} Version: $LATEST\n",
        f"2022-01-01T00:00:00.000Z\t{REQUEST_ID}\tINFO\thello world\n",
        f"END RequestId: {REQUEST_ID}\n",
        f"REPORT RequestId: {REQUEST_ID}\tDuration: 12.3 ms\tBilled Duration: 13 ms"
        "\tMemory Size: 128 MB\tMax Memory Used: 45 MB\t\n",
    ]


@pytest.fixture
def write_export() -> Callable[[Path, list[RawLogEvent]], None]:
    def _write(path: Path, events: list[RawLogEvent]) -> None:
        doc = {
            "events": [
                {
                    "logStreamName": e.log_stream,
                    "timestamp": e.timestamp,
                    "message": e.message,
                    "ingestionTime": e.timestamp + 5,
                    "eventId": e.event_id,
                }
                for e in events
            ]
        }
        path.write_text(json.dumps(doc), encoding="utf-8")

    return _write
