"""Turn serverless function log events into per-invocation records."""

from __future__ import annotations

from .core import Invocation, LogLevel, RawLogEvent, parse_invocations

__all__ = ["Invocation", "LogLevel", "RawLogEvent", "parse_invocations"]
__version__ = "0.1.0"
