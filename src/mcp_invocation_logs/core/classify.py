"""Line classification: one ClassifiedLine per normalized event."""

from __future__ import annotations

from collections.abc import Iterable

from .matchers import MatcherCascade, default_cascade
from .models import ClassifiedLine, LogLevel, RawLogEvent
from .runtime import RuntimeFamily


def classify_event(event: RawLogEvent, cascade: MatcherCascade) -> ClassifiedLine:
    """Run the cascade over one event; unrecognized lines stay INFO and verbatim."""
    message = event.message.strip()
    found = cascade.match(message)
    if found is None:
        return ClassifiedLine(
            event_id=event.event_id,
            message=message,
            timestamp=event.timestamp,
            level=LogLevel.INFO,
            log_stream=event.log_stream,
        )
    return ClassifiedLine(
        event_id=event.event_id,
        message=found.message if found.message is not None else message,
        timestamp=event.timestamp,
        level=found.level,
        log_stream=event.log_stream,
        request_id=found.request_id,
        meta=found.meta,
    )


def classify_events(
    events: Iterable[RawLogEvent],
    *,
    family: RuntimeFamily = RuntimeFamily.GENERIC,
    cascade: MatcherCascade | None = None,
) -> list[ClassifiedLine]:
    """Classify a normalized batch with the cascade for its runtime family."""
    cascade = cascade or default_cascade(family)
    return [classify_event(e, cascade) for e in events]
