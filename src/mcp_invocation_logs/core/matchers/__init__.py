"""Line matchers and the per-runtime matcher cascade.

Matchers are evaluated in priority order and the first match wins:
boundary markers, platform failure/message patterns, then the runtime
family's own console formats.
"""

from __future__ import annotations

from ..runtime import RuntimeFamily
from .base import LineMatch, LineMatcher
from .composite import MatcherCascade
from .markers import BoundaryMarkerMatcher, ReportMatcher, end_matcher, start_matcher
from .node import NodeConsoleMatcher
from .platform import (
    ExitedEarlyMatcher,
    PrefixErrorMatcher,
    TimestampedMessageMatcher,
    module_initialization_error_matcher,
    unknown_application_error_matcher,
)
from .python import PythonLoggingMatcher, PythonTracebackMatcher


def common_matchers() -> list[LineMatcher]:
    """Matchers applied to every runtime, in priority order."""
    return [
        start_matcher(),
        end_matcher(),
        ReportMatcher(),
        unknown_application_error_matcher(),
        module_initialization_error_matcher(),
        ExitedEarlyMatcher(),
        TimestampedMessageMatcher(),
    ]


def default_cascade(family: RuntimeFamily) -> MatcherCascade:
    """Matcher chain for a runtime family (first match wins)."""
    matchers = common_matchers()
    if family is RuntimeFamily.NODE:
        matchers.append(NodeConsoleMatcher())
    elif family is RuntimeFamily.PYTHON:
        matchers.extend([PythonLoggingMatcher(), PythonTracebackMatcher()])
    return MatcherCascade(matchers=matchers)


__all__ = [
    "BoundaryMarkerMatcher",
    "ExitedEarlyMatcher",
    "LineMatch",
    "LineMatcher",
    "MatcherCascade",
    "NodeConsoleMatcher",
    "PrefixErrorMatcher",
    "PythonLoggingMatcher",
    "PythonTracebackMatcher",
    "ReportMatcher",
    "TimestampedMessageMatcher",
    "common_matchers",
    "default_cascade",
]
