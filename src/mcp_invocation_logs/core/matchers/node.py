"""Tab-separated console lines written by the Node.js runtimes."""

from __future__ import annotations

from dataclasses import dataclass

from ..models import LogLevel
from .base import LineMatch, is_request_id, is_timestamp

_LEVELS = {
    "INFO": LogLevel.INFO,
    "WARN": LogLevel.WARN,
    "ERROR": LogLevel.ERROR,
}


@dataclass(frozen=True, slots=True)
class NodeConsoleMatcher:
    """Parse ``<timestamp>\\t<request id>\\t[LEVEL\\t]<message>`` lines.

    Older runtimes omit the level column, and uncaught errors outside a
    request print ``undefined`` in place of the request id.
    """

    def match(self, message: str) -> LineMatch | None:
        parts = message.split("\t")
        if len(parts) < 3 or not is_timestamp(parts[0]):
            return None

        request_id = parts[1] if is_request_id(parts[1]) else None
        level = _LEVELS.get(parts[2])
        if level is None:
            return LineMatch(
                level=LogLevel.INFO,
                message="\t".join(parts[2:]),
                request_id=request_id,
            )
        return LineMatch(level=level, message="\t".join(parts[3:]), request_id=request_id)
