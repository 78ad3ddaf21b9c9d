"""Invocation log interpretation engine.

raw events -> normalize -> classify -> group -> sort
"""

from __future__ import annotations

from .aggregate import sort_invocations
from .classify import classify_event, classify_events
from .grouping import GroupState, finish, group_lines, step
from .models import ClassifiedLine, Invocation, InvocationMetadata, LogLevel, RawLogEvent
from .normalize import normalize_events
from .pipeline import parse_invocations
from .runtime import RuntimeFamily, resolve_runtime_family

__all__ = [
    "ClassifiedLine",
    "GroupState",
    "Invocation",
    "InvocationMetadata",
    "LogLevel",
    "RawLogEvent",
    "RuntimeFamily",
    "classify_event",
    "classify_events",
    "finish",
    "group_lines",
    "normalize_events",
    "parse_invocations",
    "resolve_runtime_family",
    "sort_invocations",
    "step",
]
