"""Time-window helpers for log retrieval.

Converts user-friendly selectors into the epoch-millisecond bounds the log
retrieval API expects.
"""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta

DEFAULT_LOOKBACK_SECONDS = 60


def parse_iso_dt(s: str) -> datetime:
    """Parse ISO8601 datetime. If tz is missing, assume UTC."""
    dt = datetime.fromisoformat(s.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def to_epoch_ms(dt: datetime) -> int:
    """Convert a datetime to UTC epoch milliseconds (naive means UTC)."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return int(dt.timestamp() * 1000)


def from_epoch_ms(ms: int) -> datetime:
    return datetime.fromtimestamp(ms / 1000, tz=UTC)


def range_for_date(s: str) -> tuple[datetime, datetime]:
    """Return the UTC day window for an ISO date string."""
    d = date.fromisoformat(s)
    start = datetime(d.year, d.month, d.day, tzinfo=UTC)
    end = start + timedelta(days=1)
    return start, end


def range_for_hour(s: str) -> tuple[datetime, datetime]:
    """Return the UTC hour window for a YYYY-MM-DDTHH selector."""
    base = datetime.fromisoformat(s)
    if base.tzinfo is None:
        base = base.replace(tzinfo=UTC)
    start = base.astimezone(UTC).replace(minute=0, second=0, microsecond=0)
    end = start + timedelta(hours=1)
    return start, end


def resolve_time_window(
    *,
    since: str | None = None,
    until: str | None = None,
    date_: str | None = None,
    hour: str | None = None,
    lookback_seconds: int | None = None,
    now: datetime | None = None,
) -> tuple[int, int | None]:
    """Resolve a fetch window as ``(start_ms, end_ms)``.

    Precedence: date/hour selectors, then explicit since/until, then a
    lookback from ``now``. ``end_ms`` is None for an open-ended window.
    """
    if date_:
        start, end = range_for_date(date_)
        return to_epoch_ms(start), to_epoch_ms(end)
    if hour:
        start, end = range_for_hour(hour)
        return to_epoch_ms(start), to_epoch_ms(end)

    now = now or datetime.now(UTC)
    if since:
        s = parse_iso_dt(since)
        u = parse_iso_dt(until) if until else None
        if u is not None and s >= u:
            raise ValueError("since must be < until")
        return to_epoch_ms(s), (to_epoch_ms(u) if u is not None else None)
    if until:
        raise ValueError("until requires since")

    if lookback_seconds is None:
        lookback_seconds = DEFAULT_LOOKBACK_SECONDS
    if lookback_seconds < 0:
        raise ValueError("lookback_seconds must be >= 0")
    return to_epoch_ms(now - timedelta(seconds=lookback_seconds)), None
