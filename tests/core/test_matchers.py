from __future__ import annotations

import pytest

from mcp_invocation_logs.core.matchers import (
    ExitedEarlyMatcher,
    MatcherCascade,
    NodeConsoleMatcher,
    PythonLoggingMatcher,
    PythonTracebackMatcher,
    ReportMatcher,
    TimestampedMessageMatcher,
    default_cascade,
)
from mcp_invocation_logs.core.matchers.markers import end_matcher, start_matcher
from mcp_invocation_logs.core.matchers.platform import (
    module_initialization_error_matcher,
    unknown_application_error_matcher,
)
from mcp_invocation_logs.core.models import LogLevel
from mcp_invocation_logs.core.runtime import RuntimeFamily

RID = "184b0c52-84d2-4c63-b4ef-93db5bb2189c"


def test_start_marker_takes_fixed_width_id() -> None:
    m = start_matcher().match(f"START RequestId: {RID} Version: $LATEST")
    assert m is not None
    assert m.level == LogLevel.START
    assert m.request_id == RID
    assert m.message is None


def test_end_marker() -> None:
    m = end_matcher().match(f"END RequestId: {RID}")
    assert m is not None
    assert m.level == LogLevel.END
    assert m.request_id == RID


def test_start_matcher_ignores_other_lines() -> None:
    assert start_matcher().match(f"END RequestId: {RID}") is None


def test_report_fields() -> None:
    line = (
        f"REPORT RequestId: {RID}\tDuration: 2.63 ms\tBilled Duration: 100 ms\t"
        "Memory Size: 1024 MB\tMax Memory Used: 58 MB\tInit Duration: 2.22 ms\t\n"
        "XRAY TraceId: 1-61f96332-54eba86c47245db57214005f\tSegmentId: 246eafc77f3a0d33"
    )
    m = ReportMatcher().match(line)
    assert m is not None
    assert m.level == LogLevel.REPORT
    assert m.request_id == RID
    assert m.meta is not None
    assert m.meta.duration == "2.63"
    assert m.meta.memory_size == "1024"
    assert m.meta.memory_used == "58"
    assert m.meta.xray_trace_id == "1-61f96332-54eba86c47245db57214005f"


def test_report_missing_and_malformed_segments_only_lose_their_field() -> None:
    m = ReportMatcher().match(f"REPORT RequestId: {RID}\tDuration\tMemory Size: 128 MB")
    assert m is not None
    assert m.meta is not None
    assert m.meta.duration is None
    assert m.meta.memory_size == "128"
    assert m.meta.memory_used is None
    assert m.meta.xray_trace_id is None


def test_platform_error_banners() -> None:
    m = unknown_application_error_matcher().match("Unknown application error occurred")
    assert m is not None and m.level == LogLevel.ERROR
    m = module_initialization_error_matcher().match("module initialization error: boom")
    assert m is not None and m.level == LogLevel.ERROR


def test_exited_early() -> None:
    m = ExitedEarlyMatcher().match(f"RequestId: {RID} Process exited before completing request")
    assert m is not None
    assert m.level == LogLevel.ERROR
    assert m.request_id == RID
    assert m.message == "Process exited before completing request"
    assert m.meta is not None and m.meta.is_failed


def test_exited_early_requires_a_request_id() -> None:
    assert ExitedEarlyMatcher().match("RequestId: nope something happened") is None


def test_timeout_line() -> None:
    line = "2022-01-01T00:00:00.000Z abcdefab-abcd-abcd-abcd-abcdefabcdef Task timed out after 6.00 seconds"
    m = TimestampedMessageMatcher().match(line)
    assert m is not None
    assert m.level == LogLevel.ERROR
    assert m.message == "Task timed out after 6.00 seconds"
    assert m.request_id == "abcdefab-abcd-abcd-abcd-abcdefabcdef"
    assert m.meta is not None and m.meta.is_failed


def test_timestamped_plain_message_is_info() -> None:
    m = TimestampedMessageMatcher().match(f"2018-01-05T23:48:40.404Z {RID} hello there")
    assert m is not None
    assert m.level == LogLevel.INFO
    assert m.message == "hello there"
    assert m.meta is not None and not m.meta.is_failed


@pytest.mark.parametrize(
    ("column", "expected"),
    [("INFO", LogLevel.INFO), ("WARN", LogLevel.WARN), ("ERROR", LogLevel.ERROR)],
)
def test_node_console_levels(column: str, expected: LogLevel) -> None:
    m = NodeConsoleMatcher().match(f"2019-11-12T20:00:30.183Z\t{RID}\t{column}\tsome\ttext")
    assert m is not None
    assert m.level == expected
    assert m.request_id == RID
    assert m.message == "some\ttext"


def test_node_console_without_level_column() -> None:
    m = NodeConsoleMatcher().match(f"2019-11-12T20:00:30.183Z\t{RID}\tlog hello")
    assert m is not None
    assert m.level == LogLevel.INFO
    assert m.message == "log hello"


def test_node_console_undefined_request_id() -> None:
    m = NodeConsoleMatcher().match("2019-11-12T20:45:05.363Z\tundefined\tERROR\tUncaught Exception")
    assert m is not None
    assert m.level == LogLevel.ERROR
    assert m.request_id is None
    assert m.message == "Uncaught Exception"


@pytest.mark.parametrize(
    ("tag", "expected"),
    [
        ("[INFO]", LogLevel.INFO),
        ("[WARNING]", LogLevel.WARN),
        ("[ERROR]", LogLevel.ERROR),
        ("[CRITICAL]", LogLevel.ERROR),
    ],
)
def test_python_logging_tags(tag: str, expected: LogLevel) -> None:
    m = PythonLoggingMatcher().match(f"{tag}\t2019-11-12T20:00:30.183Z\t{RID}\tthis is it")
    assert m is not None
    assert m.level == expected
    assert m.request_id == RID
    assert m.message == f"{tag} this is it"


def test_python_logging_accepts_timestamp_without_millis() -> None:
    m = PythonLoggingMatcher().match(f"[ERROR]\t2019-11-12T20:00:30Z\t{RID}\tboom")
    assert m is not None
    assert m.level == LogLevel.ERROR


def test_python_traceback_needs_surrounding_whitespace() -> None:
    hit = PythonTracebackMatcher().match("[ERROR] KeyError: 'x' Traceback (most recent call last): File")
    assert hit is not None
    assert hit.level == LogLevel.ERROR
    assert hit.meta is not None and hit.meta.is_failed
    assert PythonTracebackMatcher().match("Traceback (most recent call last): File") is None


def test_cascade_first_match_wins() -> None:
    cascade = default_cascade(RuntimeFamily.GENERIC)
    m = cascade.match(f"START RequestId: {RID} Version: $LATEST")
    assert m is not None and m.level == LogLevel.START


def test_cascade_family_matchers_are_scoped() -> None:
    line = f"2019-11-12T20:00:30.184Z\t{RID}\tWARN\twarn hello"
    assert default_cascade(RuntimeFamily.GENERIC).match(line) is None
    assert default_cascade(RuntimeFamily.PYTHON).match(line) is None
    m = default_cascade(RuntimeFamily.NODE).match(line)
    assert m is not None and m.level == LogLevel.WARN


def test_cascade_stops_on_matcher_exception() -> None:
    class Broken:
        def match(self, message: str):
            raise RuntimeError("boom")

    cascade = MatcherCascade(matchers=[Broken(), start_matcher()])
    assert cascade.match(f"START RequestId: {RID}") is None
