"""Reconstruct invocations from the classified line sequence.

The grouper is a left fold over lines sorted by (log stream, event id).
``step`` is pure: it takes the current state and one line and returns the new
state plus any invocations that line closed. An invocation may lack its
START (history truncated), its REPORT (still running, crashed, report evicted)
or both; partial records are emitted rather than dropped.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field, replace

from .models import SEVERITY_RANK, ClassifiedLine, Invocation, LogLevel


@dataclass(frozen=True, slots=True)
class GroupState:
    """Fold state: the invocation being accumulated."""

    current: Invocation = field(default_factory=Invocation)

    @property
    def is_empty(self) -> bool:
        return not self.current.logs


def escalate(current: LogLevel, line_level: LogLevel) -> LogLevel:
    """Raise the aggregate level to the line's severity, never lowering it."""
    rank = SEVERITY_RANK.get(line_level)
    if rank is None or rank <= SEVERITY_RANK[current]:
        return current
    return line_level


def _append(inv: Invocation, line: ClassifiedLine) -> Invocation:
    """Add a body line and backfill identity fields that are still unset."""
    return replace(
        inv,
        logs=inv.logs + (line.message,),
        request_id=inv.request_id if inv.request_id is not None else line.request_id,
        log_stream=inv.log_stream if inv.log_stream is not None else line.log_stream,
        first_line_time=(
            inv.first_line_time if inv.first_line_time is not None else line.timestamp
        ),
        failed=inv.failed or line.is_failed,
    )


def _open(line: ClassifiedLine) -> Invocation:
    return Invocation(
        logs=(line.message,),
        request_id=line.request_id,
        log_stream=line.log_stream,
        first_line_time=line.timestamp,
        start_time=line.timestamp,
        failed=line.is_failed,
    )


def _close(inv: Invocation, line: ClassifiedLine) -> Invocation:
    inv = _append(inv, line)
    meta = line.meta
    if meta is None:
        return replace(inv, end_time=line.timestamp)
    return replace(
        inv,
        end_time=line.timestamp,
        duration=meta.duration,
        memory_size=meta.memory_size,
        memory_used=meta.memory_used,
        xray_trace_id=meta.xray_trace_id,
    )


def step(state: GroupState, line: ClassifiedLine) -> tuple[GroupState, tuple[Invocation, ...]]:
    """Fold one line into the state.

    Returns the new state and the invocations flushed by this line, oldest
    first (at most two: a stream change followed by a REPORT).
    """
    emitted: list[Invocation] = []
    current = state.current

    if current.logs and line.log_stream != current.log_stream:
        emitted.append(current)
        current = Invocation()

    if line.level is LogLevel.START:
        if current.logs:
            emitted.append(current)
        current = _open(line)
    elif line.level is LogLevel.REPORT:
        emitted.append(_close(current, line))
        current = Invocation()
    else:
        current = _append(current, line)
        current = replace(current, level=escalate(current.level, line.level))

    return GroupState(current=current), tuple(emitted)


def finish(state: GroupState) -> tuple[Invocation, ...]:
    """Flush a trailing, incomplete invocation at end of input."""
    if state.is_empty:
        return ()
    return (state.current,)


def group_lines(lines: Iterable[ClassifiedLine]) -> list[Invocation]:
    """Fold a classified, (stream, id)-ordered sequence into invocations in flush order."""
    state = GroupState()
    out: list[Invocation] = []
    for line in lines:
        state, emitted = step(state, line)
        out.extend(emitted)
    out.extend(finish(state))
    return out
