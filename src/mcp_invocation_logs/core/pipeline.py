"""Raw events in, ordered invocations out."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .aggregate import sort_invocations
from .classify import classify_events
from .grouping import group_lines
from .models import Invocation, RawLogEvent
from .normalize import normalize_events
from .runtime import batch_runtime_family

logger = logging.getLogger(__name__)


def parse_invocations(
    events: Iterable[RawLogEvent],
    *,
    runtime: str | None = None,
) -> list[Invocation]:
    """Turn a batch of raw log events into invocations, most recent first.

    Pure and idempotent: feeding the cumulative event set of repeated polls
    yields a result consistent with every earlier run. ``runtime`` overrides the
    per-event runtime hint; it is resolved to a family once per batch.
    """
    normalized = normalize_events(events)
    family = batch_runtime_family(normalized, runtime=runtime)
    lines = classify_events(normalized, family=family)
    invocations = sort_invocations(group_lines(lines))
    logger.debug(
        "parsed %d events (%s) into %d invocations",
        len(normalized),
        family.value,
        len(invocations),
    )
    return invocations
