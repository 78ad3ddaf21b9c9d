"""Runtime-family dispatch."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

from .models import RawLogEvent


class RuntimeFamily(str, Enum):
    """Coarse execution environment, selects the family-specific matchers."""

    GENERIC = "generic"  # no hint available
    NODE = "nodejs"
    PYTHON = "python"
    OTHER = "other"


def resolve_runtime_family(runtime: str | None) -> RuntimeFamily:
    """Map a runtime identifier (``nodejs18.x``, ``python3.12``...) to its family."""
    hint = (runtime or "").strip().lower()
    if not hint:
        return RuntimeFamily.GENERIC
    if hint.startswith(RuntimeFamily.NODE.value):
        return RuntimeFamily.NODE
    if hint.startswith(RuntimeFamily.PYTHON.value):
        return RuntimeFamily.PYTHON
    return RuntimeFamily.OTHER


def batch_runtime_family(
    events: Iterable[RawLogEvent], *, runtime: str | None = None
) -> RuntimeFamily:
    """Resolve the family once for a whole batch.

    An explicit ``runtime`` wins; otherwise the first event carrying a hint
    decides.
    """
    if runtime:
        return resolve_runtime_family(runtime)
    for event in events:
        if event.runtime:
            return resolve_runtime_family(event.runtime)
    return RuntimeFamily.GENERIC
