from __future__ import annotations

from mcp_invocation_logs.core.grouping import GroupState, escalate, finish, group_lines, step
from mcp_invocation_logs.core.models import ClassifiedLine, InvocationMetadata, LogLevel

_counter = iter(range(1, 10_000))


def _line(
    level: LogLevel,
    message: str = "m",
    *,
    stream: str = "a",
    ts: int = 0,
    request_id: str | None = None,
    meta: InvocationMetadata | None = None,
) -> ClassifiedLine:
    return ClassifiedLine(
        event_id=str(next(_counter)),
        message=message,
        timestamp=ts,
        level=level,
        log_stream=stream,
        request_id=request_id,
        meta=meta,
    )


def test_step_start_opens_invocation() -> None:
    state, emitted = step(GroupState(), _line(LogLevel.START, "start", ts=5, request_id="r1"))
    assert emitted == ()
    assert state.current.logs == ("start",)
    assert state.current.request_id == "r1"
    assert state.current.start_time == 5
    assert state.current.first_line_time == 5


def test_step_report_always_closes() -> None:
    state, _ = step(GroupState(), _line(LogLevel.START, ts=1, request_id="r1"))
    meta = InvocationMetadata(duration="1", memory_size="128", memory_used="20", xray_trace_id="t")
    state, emitted = step(state, _line(LogLevel.REPORT, "report", ts=9, request_id="r1", meta=meta))

    assert state.is_empty
    assert len(emitted) == 1
    inv = emitted[0]
    assert inv.end_time == 9
    assert inv.start_time == 1
    assert (inv.duration, inv.memory_size, inv.memory_used, inv.xray_trace_id) == (
        "1",
        "128",
        "20",
        "t",
    )
    assert inv.is_complete


def test_step_is_pure() -> None:
    state, _ = step(GroupState(), _line(LogLevel.INFO, "one"))
    again, _ = step(state, _line(LogLevel.INFO, "two"))
    assert state.current.logs == ("one",)
    assert again.current.logs == ("one", "two")


def test_second_start_flushes_previous() -> None:
    state, _ = step(GroupState(), _line(LogLevel.START, "s1", request_id="r1"))
    state, _ = step(state, _line(LogLevel.INFO, "body"))
    state, emitted = step(state, _line(LogLevel.START, "s2", request_id="r2"))

    assert [inv.logs for inv in emitted] == [("s1", "body")]
    assert state.current.request_id == "r2"


def test_stream_change_then_report_emits_two() -> None:
    state, _ = step(GroupState(), _line(LogLevel.INFO, "a-body", stream="a"))
    state, emitted = step(
        state, _line(LogLevel.REPORT, "b-report", stream="b", meta=InvocationMetadata())
    )

    assert [inv.log_stream for inv in emitted] == ["a", "b"]
    assert [inv.logs for inv in emitted] == [("a-body",), ("b-report",)]
    assert state.is_empty


def test_body_lines_backfill_identity() -> None:
    lines = [
        _line(LogLevel.INFO, "x", ts=3),
        _line(LogLevel.INFO, "y", ts=4, request_id="r9"),
        _line(LogLevel.INFO, "z", ts=5, request_id="other"),
    ]
    (inv,) = group_lines(lines)
    assert inv.request_id == "r9"
    assert inv.first_line_time == 3
    assert inv.start_time is None
    assert inv.end_time is None
    assert not inv.is_complete


def test_escalation_never_downgrades() -> None:
    levels = [LogLevel.INFO, LogLevel.WARN, LogLevel.INFO, LogLevel.ERROR, LogLevel.WARN, LogLevel.END]
    state = GroupState()
    seen = []
    for level in levels:
        state, _ = step(state, _line(level))
        seen.append(state.current.level)
    assert seen == [
        LogLevel.INFO,
        LogLevel.WARN,
        LogLevel.WARN,
        LogLevel.ERROR,
        LogLevel.ERROR,
        LogLevel.ERROR,
    ]


def test_escalate_ignores_boundary_levels() -> None:
    assert escalate(LogLevel.WARN, LogLevel.END) is LogLevel.WARN
    assert escalate(LogLevel.INFO, LogLevel.ERROR) is LogLevel.ERROR
    assert escalate(LogLevel.ERROR, LogLevel.INFO) is LogLevel.ERROR


def test_failure_flag_is_carried() -> None:
    lines = [
        _line(LogLevel.START),
        _line(LogLevel.ERROR, "timed out", meta=InvocationMetadata(is_failed=True)),
        _line(LogLevel.REPORT, meta=InvocationMetadata()),
    ]
    (inv,) = group_lines(lines)
    assert inv.failed
    assert inv.level == LogLevel.ERROR


def test_finish_flushes_only_non_empty() -> None:
    assert finish(GroupState()) == ()
    state, _ = step(GroupState(), _line(LogLevel.START, "dangling"))
    (inv,) = finish(state)
    assert inv.logs == ("dangling",)


def test_group_lines_empty() -> None:
    assert group_lines([]) == []
