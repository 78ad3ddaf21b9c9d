"""Event deduplication and ordering."""

from __future__ import annotations

from collections.abc import Iterable

from .models import RawLogEvent


def sort_key(event: RawLogEvent) -> tuple[str, str]:
    """Composite (log stream, event id) key.

    Event ids carry the platform's per-stream ordering; timestamps collide at
    millisecond resolution and are not used.
    """
    return event.log_stream, event.event_id


def dedupe_events(events: Iterable[RawLogEvent]) -> list[RawLogEvent]:
    """Drop repeated event ids, keeping the first occurrence."""
    seen: set[str] = set()
    out: list[RawLogEvent] = []
    for event in events:
        if event.event_id in seen:
            continue
        seen.add(event.event_id)
        out.append(event)
    return out


def normalize_events(events: Iterable[RawLogEvent]) -> list[RawLogEvent]:
    """Deduplicate by event id and stable-sort by (log stream, event id)."""
    return sorted(dedupe_events(events), key=sort_key)
