"""Raw event sources: exported log files, CloudWatch Logs, and the poll buffer.

Everything here sits in front of :func:`parse_invocations`; the engine itself
never performs I/O.
"""

from __future__ import annotations

import asyncio
import gzip
import json
import logging
import os
from collections.abc import Iterable, Mapping
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import aiofiles
import boto3
from aiofiles.threadpool import wrap
from botocore.exceptions import ClientError

from .models import Invocation, RawLogEvent
from .pipeline import parse_invocations
from .time_window import DEFAULT_LOOKBACK_SECONDS

logger = logging.getLogger(__name__)

LOG_GROUP_PREFIX = "/aws/lambda/"
DEFAULT_FETCH_LIMIT = 10_000  # FilterLogEvents page maximum
LOOKBACK_ENV = "INVOCATION_LOGS_LOOKBACK_SECONDS"
FETCH_LIMIT_ENV = "INVOCATION_LOGS_FETCH_LIMIT"


def _int_env(name: str, default: int, *, minimum: int) -> int:
    env = os.getenv(name)
    if not env:
        return default
    try:
        value = int(env)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer") from exc
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return value


def resolve_lookback_seconds(lookback_seconds: int | None) -> int:
    if lookback_seconds is not None:
        if lookback_seconds < 0:
            raise ValueError("lookback_seconds must be >= 0")
        return lookback_seconds
    return _int_env(LOOKBACK_ENV, DEFAULT_LOOKBACK_SECONDS, minimum=0)


def resolve_fetch_limit(limit: int | None) -> int:
    if limit is not None:
        if not 1 <= limit <= DEFAULT_FETCH_LIMIT:
            raise ValueError(f"limit must be between 1 and {DEFAULT_FETCH_LIMIT}")
        return limit
    value = _int_env(FETCH_LIMIT_ENV, DEFAULT_FETCH_LIMIT, minimum=1)
    return min(value, DEFAULT_FETCH_LIMIT)


def log_group_name(function_name: str) -> str:
    """Log group a function writes to."""
    return f"{LOG_GROUP_PREFIX}{function_name}"


# ---------------------------------------------------------------------------
# Exported files
# ---------------------------------------------------------------------------


@asynccontextmanager
async def _open_text(path: Path, *, encoding: str = "utf-8"):
    """Open an export for async text reading (plain or gzip)."""
    if path.suffix.lower() == ".gz":
        f = gzip.open(path, mode="rt", encoding=encoding, errors="replace")
        af = wrap(f)
        try:
            yield af
        finally:
            await af.close()
    else:
        async with aiofiles.open(path, encoding=encoding, errors="replace") as f:
            yield f


def _records_from_text(text: str) -> list[Mapping[str, Any]]:
    """Accept ``{"events": [...]}``, a bare JSON array, or JSON lines."""
    stripped = text.strip()
    if not stripped:
        return []
    try:
        doc = json.loads(stripped)
    except json.JSONDecodeError:
        doc = None

    if isinstance(doc, dict) and isinstance(doc.get("events"), list):
        return doc["events"]
    if isinstance(doc, list):
        return doc
    if isinstance(doc, dict):
        return [doc]

    records: list[Mapping[str, Any]] = []
    for line_no, line in enumerate(stripped.splitlines(), start=1):
        line = line.strip()
        if not line:
            continue
        try:
            records.append(json.loads(line))
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON on line {line_no}: {exc.msg}") from exc
    return records


def events_from_records(
    records: Iterable[Mapping[str, Any]], *, runtime: str = ""
) -> list[RawLogEvent]:
    """Convert CloudWatch-shaped event dicts into RawLogEvent values."""
    out: list[RawLogEvent] = []
    for i, record in enumerate(records):
        if not isinstance(record, Mapping) or "eventId" not in record:
            raise ValueError(f"Event #{i} is not a log event object (missing eventId)")
        out.append(RawLogEvent.from_cloudwatch(record, runtime=runtime))
    return out


async def load_events(path: str | Path, *, runtime: str = "") -> list[RawLogEvent]:
    """Read raw events from an ``aws logs filter-log-events`` export."""
    p = Path(path)
    if not p.is_file():
        raise FileNotFoundError(f"Log export not found: {p}")
    async with _open_text(p) as f:
        text = await f.read()
    events = events_from_records(_records_from_text(text), runtime=runtime)
    logger.debug("loaded %d events from %s", len(events), p)
    return events


# ---------------------------------------------------------------------------
# CloudWatch Logs / Lambda
# ---------------------------------------------------------------------------


def _client(service: str, region: str | None) -> Any:
    return boto3.client(service, region_name=region) if region else boto3.client(service)


def _fetch_pages(
    client: Any,
    *,
    group: str,
    start_ms: int,
    end_ms: int | None,
    limit: int,
    max_pages: int | None,
) -> list[dict[str, Any]]:
    """Follow ``nextToken`` until the window is exhausted."""
    kwargs: dict[str, Any] = {"logGroupName": group, "startTime": start_ms, "limit": limit}
    if end_ms is not None:
        kwargs["endTime"] = end_ms

    events: list[dict[str, Any]] = []
    pages = 0
    while True:
        resp = client.filter_log_events(**kwargs)
        pages += 1
        events.extend(resp.get("events", []))
        token = resp.get("nextToken")
        if not token or (max_pages is not None and pages >= max_pages):
            break
        kwargs["nextToken"] = token
    logger.debug("fetched %d events from %s in %d page(s)", len(events), group, pages)
    return events


async def fetch_events(
    function_name: str,
    *,
    start_ms: int,
    end_ms: int | None = None,
    limit: int | None = None,
    max_pages: int | None = None,
    runtime: str = "",
    client: Any | None = None,
    region: str | None = None,
) -> list[RawLogEvent]:
    """Fetch a function's log events in ``[start_ms, end_ms)`` across all streams."""
    group = log_group_name(function_name)
    limit_resolved = resolve_fetch_limit(limit)
    client = client or _client("logs", region)
    try:
        records = await asyncio.to_thread(
            _fetch_pages,
            client,
            group=group,
            start_ms=start_ms,
            end_ms=end_ms,
            limit=limit_resolved,
            max_pages=max_pages,
        )
    except ClientError as exc:
        logger.warning("FilterLogEvents failed for %s: %s", group, exc)
        raise
    return events_from_records(records, runtime=runtime)


async def get_function_runtime(
    function_name: str,
    *,
    client: Any | None = None,
    region: str | None = None,
) -> str:
    """Return the configured runtime identifier (empty for container images)."""
    client = client or _client("lambda", region)
    try:
        resp = await asyncio.to_thread(client.get_function, FunctionName=function_name)
    except ClientError as exc:
        logger.warning("GetFunction failed for %s: %s", function_name, exc)
        raise
    return str(resp.get("Configuration", {}).get("Runtime") or "")


class EventBuffer:
    """Cumulative, deduplicated event set maintained across polls.

    Each poll's page is merged in; re-running the engine on the growing set
    never contradicts invocations it already closed.
    """

    def __init__(self, *, runtime: str = "") -> None:
        self.runtime = runtime
        self._events: dict[str, RawLogEvent] = {}

    def __len__(self) -> int:
        return len(self._events)

    def add(self, events: Iterable[RawLogEvent]) -> int:
        """Merge a page of events; return how many were new."""
        added = 0
        for event in events:
            if event.event_id in self._events:
                continue
            self._events[event.event_id] = event
            added += 1
        return added

    def events(self) -> list[RawLogEvent]:
        return list(self._events.values())

    def invocations(self) -> list[Invocation]:
        return parse_invocations(self._events.values(), runtime=self.runtime or None)
