"""Core data models for invocation log interpretation."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any


class LogLevel(str, Enum):
    """Semantic level assigned to a classified log line."""

    START = "START"
    END = "END"
    REPORT = "REPORT"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"


# Aggregate severity of an invocation only moves up this ladder.
SEVERITY_RANK: dict[LogLevel, int] = {
    LogLevel.INFO: 0,
    LogLevel.WARN: 1,
    LogLevel.ERROR: 2,
}


@dataclass(frozen=True, slots=True)
class RawLogEvent:
    """Log event as returned by the retrieval client (never mutated)."""

    event_id: str
    log_stream: str
    timestamp: int  # epoch milliseconds, UTC
    message: str
    runtime: str = ""  # runtime-family hint, e.g. "nodejs18.x"

    @classmethod
    def from_cloudwatch(cls, event: Mapping[str, Any], *, runtime: str = "") -> RawLogEvent:
        """Build an event from a CloudWatch ``FilterLogEvents`` record."""
        return cls(
            event_id=str(event["eventId"]),
            log_stream=str(event.get("logStreamName") or ""),
            timestamp=int(event.get("timestamp") or 0),
            message=str(event.get("message") or ""),
            runtime=runtime,
        )


@dataclass(frozen=True, slots=True)
class InvocationMetadata:
    """Per-line extras lifted from REPORT lines and failure markers.

    Quantities are kept as the raw strings printed by the platform
    (``"12.3"`` for ``Duration: 12.3 ms``); units are implied by the field.
    """

    duration: str | None = None  # ms
    memory_size: str | None = None  # MB
    memory_used: str | None = None  # MB
    xray_trace_id: str | None = None
    is_failed: bool = False


@dataclass(frozen=True, slots=True)
class ClassifiedLine:
    """A normalized event after the matcher cascade ran over it."""

    event_id: str
    message: str
    timestamp: int
    level: LogLevel
    log_stream: str
    request_id: str | None = None
    meta: InvocationMetadata | None = None

    @property
    def is_failed(self) -> bool:
        return self.meta is not None and self.meta.is_failed


@dataclass(frozen=True, slots=True)
class Invocation:
    """Reconstructed record of one execution, built from its log lines."""

    logs: tuple[str, ...] = ()
    request_id: str | None = None
    log_stream: str | None = None
    first_line_time: int | None = None
    start_time: int | None = None
    end_time: int | None = None
    duration: str | None = None
    memory_size: str | None = None
    memory_used: str | None = None
    xray_trace_id: str | None = None
    level: LogLevel = LogLevel.INFO
    failed: bool = False

    @property
    def is_complete(self) -> bool:
        """True when both the START and the REPORT boundary were seen."""
        return self.start_time is not None and self.end_time is not None
