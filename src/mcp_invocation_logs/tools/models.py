"""JSON-facing schemas for tool output."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from ..core.models import Invocation
from ..core.time_window import from_epoch_ms


def _iso(ms: int | None) -> str | None:
    return from_epoch_ms(ms).isoformat() if ms is not None else None


class InvocationOut(BaseModel):
    request_id: str | None = Field(default=None, description="Platform request id.")
    log_stream: str | None = Field(default=None, description="Stream the lines came from.")
    level: str = Field(description="Aggregate severity: info, warn or error.")
    failed: bool = Field(default=False, description="A timeout, crash or traceback was seen.")
    complete: bool = Field(description="Both START and REPORT boundaries were seen.")
    first_line_time: str | None = None
    start_time: str | None = None
    end_time: str | None = None
    duration_ms: str | None = Field(default=None, description="As printed in REPORT.")
    memory_size_mb: str | None = None
    memory_used_mb: str | None = None
    xray_trace_id: str | None = None
    logs: list[str] = Field(default_factory=list)

    @classmethod
    def from_invocation(cls, inv: Invocation, *, include_logs: bool = True) -> InvocationOut:
        return cls(
            request_id=inv.request_id,
            log_stream=inv.log_stream,
            level=inv.level.value.lower(),
            failed=inv.failed,
            complete=inv.is_complete,
            first_line_time=_iso(inv.first_line_time),
            start_time=_iso(inv.start_time),
            end_time=_iso(inv.end_time),
            duration_ms=inv.duration,
            memory_size_mb=inv.memory_size,
            memory_used_mb=inv.memory_used,
            xray_trace_id=inv.xray_trace_id,
            logs=list(inv.logs) if include_logs else [],
        )


class InvocationsResult(BaseModel):
    count: int
    total: int = Field(description="Invocations before level filtering and limit.")
    invocations: list[InvocationOut] = Field(default_factory=list)
    window_start: datetime | None = None
    window_end: datetime | None = None
