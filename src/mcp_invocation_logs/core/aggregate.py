"""Presentation order for reconstructed invocations."""

from __future__ import annotations

from collections.abc import Iterable

from .models import Invocation


def sort_invocations(invocations: Iterable[Invocation]) -> list[Invocation]:
    """Most recent first by first-line time; ties keep their flush order."""
    return sorted(invocations, key=lambda inv: inv.first_line_time or 0, reverse=True)
