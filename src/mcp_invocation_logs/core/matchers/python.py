"""Lines written by the Python runtimes' logging bootstrap."""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..models import InvocationMetadata, LogLevel
from .base import LineMatch, is_request_id, is_timestamp

_TAGS = {
    "[INFO]": LogLevel.INFO,
    "[WARNING]": LogLevel.WARN,
    "[ERROR]": LogLevel.ERROR,
    "[CRITICAL]": LogLevel.ERROR,
}


@dataclass(frozen=True, slots=True)
class PythonLoggingMatcher:
    """Parse ``[TAG]\\t<timestamp>\\t<request id>\\t<message>`` lines."""

    def match(self, message: str) -> LineMatch | None:
        parts = message.split("\t")
        if len(parts) < 4 or not is_timestamp(parts[1], loose=True) or not is_request_id(parts[2]):
            return None
        tag = parts[0]
        rest = "\t".join(parts[3:])
        return LineMatch(
            level=_TAGS.get(tag, LogLevel.INFO),
            message=f"{tag} {rest}",
            request_id=parts[2],
        )


@dataclass(frozen=True, slots=True)
class PythonTracebackMatcher:
    """Flag uncaught exceptions reported with a traceback header."""

    _re = re.compile(r"\sTraceback \(most recent call last\):\s")

    def match(self, message: str) -> LineMatch | None:
        if self._re.search(message) is None:
            return None
        return LineMatch(level=LogLevel.ERROR, meta=InvocationMetadata(is_failed=True))
