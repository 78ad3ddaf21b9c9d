"""Matcher composition utilities."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from .base import LineMatch, LineMatcher

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MatcherCascade:
    """Try matchers in order and return the first match.

    A matcher that raises ends the cascade for that line: the line is left
    unclassified instead of failing the batch.
    """

    matchers: Sequence[LineMatcher]

    def match(self, message: str) -> LineMatch | None:
        """Return the first successful match from the configured matchers."""
        for m in self.matchers:
            try:
                out = m.match(message)
            except Exception:
                logger.debug("matcher %s failed on %r", type(m).__name__, message, exc_info=True)
                return None
            if out is not None:
                return out
        return None
