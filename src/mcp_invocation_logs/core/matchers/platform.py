"""Runtime-agnostic failure and message patterns."""

from __future__ import annotations

from dataclasses import dataclass

from ..models import InvocationMetadata, LogLevel
from .base import LineMatch, is_request_id, is_timestamp

TIMEOUT_PREFIX = "Task timed out after"


@dataclass(frozen=True, slots=True)
class PrefixErrorMatcher:
    """Flag platform error banners such as ``Unknown application error occurred``."""

    prefix: str

    def match(self, message: str) -> LineMatch | None:
        if not message.startswith(self.prefix):
            return None
        return LineMatch(level=LogLevel.ERROR, meta=InvocationMetadata())


def unknown_application_error_matcher() -> PrefixErrorMatcher:
    return PrefixErrorMatcher(prefix="Unknown application error occurred")


def module_initialization_error_matcher() -> PrefixErrorMatcher:
    return PrefixErrorMatcher(prefix="module initialization error")


@dataclass(frozen=True, slots=True)
class ExitedEarlyMatcher:
    """Runtime exited before completing the request.

    RequestId: 80925099-25b1-4a56-8f76-e0eda7ebb6d3 Error: Runtime exited with error: signal: aborted
    RequestId: 80925099-25b1-4a56-8f76-e0eda7ebb6d3 Process exited before completing request
    """

    def match(self, message: str) -> LineMatch | None:
        parts = message.split(" ")
        if len(parts) < 3 or parts[0] != "RequestId:" or not is_request_id(parts[1]):
            return None
        return LineMatch(
            level=LogLevel.ERROR,
            message=" ".join(parts[2:]),
            request_id=parts[1],
            meta=InvocationMetadata(is_failed=True),
        )


@dataclass(frozen=True, slots=True)
class TimestampedMessageMatcher:
    """``<timestamp> <request id> <message>``, including the timeout notice.

    2018-01-05T23:48:40.404Z f0fc759e-f272-11e7-87bd-577699d45526 Task timed out after 6.00 seconds
    """

    def match(self, message: str) -> LineMatch | None:
        parts = message.split(" ")
        if len(parts) < 3 or not is_timestamp(parts[0]) or not is_request_id(parts[1]):
            return None
        text = " ".join(parts[2:])
        timed_out = text.startswith(TIMEOUT_PREFIX)
        return LineMatch(
            level=LogLevel.ERROR if timed_out else LogLevel.INFO,
            message=text,
            request_id=parts[1],
            meta=InvocationMetadata(is_failed=timed_out),
        )
