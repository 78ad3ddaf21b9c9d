"""Platform boundary markers: START, END and REPORT."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..models import InvocationMetadata, LogLevel
from .base import REQUEST_ID_WIDTH, LineMatch


@dataclass(frozen=True, slots=True)
class BoundaryMarkerMatcher:
    """Match ``<KIND> RequestId: <id> ...`` and take the fixed-width id after the prefix."""

    prefix: str
    level: LogLevel

    def request_id(self, message: str) -> str:
        start = len(self.prefix)
        return message[start : start + REQUEST_ID_WIDTH]

    def match(self, message: str) -> LineMatch | None:
        # START RequestId: 184b0c52-84d2-4c63-b4ef-93db5bb2189c Version: $LATEST
        # END RequestId: 184b0c52-84d2-4c63-b4ef-93db5bb2189c
        if not message.startswith(self.prefix):
            return None
        return LineMatch(level=self.level, request_id=self.request_id(message))


def start_matcher() -> BoundaryMarkerMatcher:
    return BoundaryMarkerMatcher(prefix="START RequestId: ", level=LogLevel.START)


def end_matcher() -> BoundaryMarkerMatcher:
    return BoundaryMarkerMatcher(prefix="END RequestId: ", level=LogLevel.END)


# segment prefix -> (metadata field, index of the value in the space-split segment)
REPORT_FIELDS: dict[str, tuple[str, int]] = {
    "Duration": ("duration", 1),
    "Memory Size": ("memory_size", 2),
    "Max Memory Used": ("memory_used", 3),
    "XRAY TraceId": ("xray_trace_id", 2),
}


@dataclass(frozen=True, slots=True)
class ReportMatcher:
    """Parse the REPORT summary line into invocation metadata.

    REPORT RequestId: <id>\\tDuration: 2.63 ms\\tBilled Duration: 100 ms\\t
    Memory Size: 1024 MB\\tMax Memory Used: 58 MB\\tInit Duration: 2.22 ms
    """

    prefix: str = "REPORT RequestId: "
    fields: dict[str, tuple[str, int]] = field(default_factory=lambda: dict(REPORT_FIELDS))

    def _extract(self, message: str) -> dict[str, str]:
        found: dict[str, str] = {}
        for part in message.split("\t"):
            part = part.strip()
            for seg_prefix, (name, index) in self.fields.items():
                if not part.startswith(seg_prefix):
                    continue
                tokens = part.split(" ")
                # A short segment only loses its own field.
                if index < len(tokens) and tokens[index]:
                    found[name] = tokens[index]
                break
        return found

    def match(self, message: str) -> LineMatch | None:
        if not message.startswith(self.prefix):
            return None
        start = len(self.prefix)
        return LineMatch(
            level=LogLevel.REPORT,
            request_id=message[start : start + REQUEST_ID_WIDTH],
            meta=InvocationMetadata(**self._extract(message)),
        )
