"""Matcher interface and shared token patterns."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Protocol

from ..models import InvocationMetadata, LogLevel

# 2019-11-12T20:00:30.183Z
ISO_TIMESTAMP_MS = re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z")
# 2019-11-12T20:00:30Z / 2019-11-12T20:00:30.1Z
ISO_TIMESTAMP_LOOSE = re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d{1,3})?Z")
REQUEST_ID = re.compile(r"[0-9a-fA-F-]{36}")
REQUEST_ID_WIDTH = 36


def is_timestamp(token: str, *, loose: bool = False) -> bool:
    pattern = ISO_TIMESTAMP_LOOSE if loose else ISO_TIMESTAMP_MS
    return pattern.fullmatch(token) is not None


def is_request_id(token: str) -> bool:
    return REQUEST_ID.fullmatch(token) is not None


@dataclass(frozen=True, slots=True)
class LineMatch:
    """Definite result of a matcher that recognized a line.

    ``message`` is None when the line text is kept as-is.
    """

    level: LogLevel
    message: str | None = None
    request_id: str | None = None
    meta: InvocationMetadata | None = None


class LineMatcher(Protocol):
    """Matcher interface: return LineMatch if the line is recognized, else None."""

    def match(self, message: str) -> LineMatch | None:
        """Classify a trimmed log message."""
        ...
