"""MCP tool implementations.

This module contains the *implementation* behind the exposed MCP tools.
Keep this layer thin: validate inputs, translate them into core calls, and
return JSON-serializable data structures.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime
from typing import Any

from mcp_invocation_logs.core.models import Invocation, LogLevel
from mcp_invocation_logs.core.pipeline import parse_invocations
from mcp_invocation_logs.core.sources import (
    fetch_events,
    get_function_runtime,
    load_events,
    resolve_lookback_seconds,
)
from mcp_invocation_logs.core.time_window import from_epoch_ms, resolve_time_window

from .models import InvocationOut, InvocationsResult

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 50
HARD_LIMIT = 1000
ALL_LEVELS = ["INFO", "WARN", "ERROR"]
LEVEL_ALIASES = {"WARNING": "WARN", "ERR": "ERROR", "CRITICAL": "ERROR"}


def _parse_levels(levels: Sequence[str] | None) -> set[LogLevel] | None:
    """Parse user-supplied severity names into aggregate levels."""
    if not levels:
        return None
    out: set[LogLevel] = set()
    for s in levels:
        name = s.strip().upper()
        if not name:
            continue
        name = LEVEL_ALIASES.get(name, name)
        if name not in ALL_LEVELS:
            valid = ", ".join(ALL_LEVELS)
            raise ValueError(
                f"Unknown invocation level '{s}'. Valid values: {valid}. "
                "Tip: levels is case-insensitive (e.g., 'error', 'WARN')."
            )
        out.add(LogLevel(name))
    return out or None


def _resolve_limit(limit: int | None) -> int:
    if limit is None:
        return DEFAULT_LIMIT
    if limit <= 0:
        raise ValueError("limit must be > 0")
    return min(limit, HARD_LIMIT)


def _select(
    invocations: Sequence[Invocation],
    *,
    levels: set[LogLevel] | None,
    failed_only: bool,
    limit: int,
) -> list[Invocation]:
    out: list[Invocation] = []
    for inv in invocations:
        if levels is not None and inv.level not in levels:
            continue
        if failed_only and not inv.failed:
            continue
        out.append(inv)
        if len(out) >= limit:
            break
    return out


def _result(
    invocations: Sequence[Invocation],
    *,
    levels: Sequence[str] | None,
    failed_only: bool,
    limit: int | None,
    include_logs: bool,
    window_start: datetime | None = None,
    window_end: datetime | None = None,
) -> dict[str, Any]:
    selected = _select(
        invocations,
        levels=_parse_levels(levels),
        failed_only=failed_only,
        limit=_resolve_limit(limit),
    )
    result = InvocationsResult(
        count=len(selected),
        total=len(invocations),
        invocations=[InvocationOut.from_invocation(i, include_logs=include_logs) for i in selected],
        window_start=window_start,
        window_end=window_end,
    )
    return result.model_dump(mode="json")


async def parse_invocation_file_impl(
    *,
    log_path: str,
    runtime: str | None = None,
    levels: Sequence[str] | None = None,
    failed_only: bool = False,
    limit: int | None = None,
    include_logs: bool = True,
) -> dict[str, Any]:
    """Implementation for the `parse_invocation_file` MCP tool."""
    events = await load_events(log_path, runtime=runtime or "")
    invocations = parse_invocations(events, runtime=runtime)
    return _result(
        invocations,
        levels=levels,
        failed_only=failed_only,
        limit=limit,
        include_logs=include_logs,
    )


async def recent_invocations_impl(
    *,
    function_name: str,
    runtime: str | None = None,
    since: str | None = None,
    until: str | None = None,
    date: str | None = None,
    hour: str | None = None,
    lookback_seconds: int | None = None,
    levels: Sequence[str] | None = None,
    failed_only: bool = False,
    limit: int | None = None,
    include_logs: bool = True,
    region: str | None = None,
    logs_client: Any | None = None,
    lambda_client: Any | None = None,
) -> dict[str, Any]:
    """Implementation for the `recent_invocations` MCP tool.

    Notes
    -----
    - Window precedence: date/hour selectors, then explicit since/until, then lookback_seconds
      (falls back to INVOCATION_LOGS_LOOKBACK_SECONDS, default 60).
    - When runtime is omitted it is read from the function configuration.
    """
    if not function_name.strip():
        raise ValueError("function_name must not be empty")

    start_ms, end_ms = resolve_time_window(
        since=since,
        until=until,
        date_=date,
        hour=hour,
        lookback_seconds=(
            None if (since or date or hour) else resolve_lookback_seconds(lookback_seconds)
        ),
    )

    if runtime is None:
        runtime = await get_function_runtime(function_name, client=lambda_client, region=region)
        logger.debug("resolved runtime for %s: %r", function_name, runtime)

    events = await fetch_events(
        function_name,
        start_ms=start_ms,
        end_ms=end_ms,
        runtime=runtime,
        client=logs_client,
        region=region,
    )
    invocations = parse_invocations(events, runtime=runtime)
    return _result(
        invocations,
        levels=levels,
        failed_only=failed_only,
        limit=limit,
        include_logs=include_logs,
        window_start=from_epoch_ms(start_ms),
        window_end=from_epoch_ms(end_ms) if end_ms is not None else None,
    )
