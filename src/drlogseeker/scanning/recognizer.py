"""Format recognition: decide which report dialect a text is written in."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from ..logging_config import get_logger
from .dialects import DIALECT_MATCHERS, DialectMatcher, MarkerHit
from .models import Dialect

logger = get_logger(__name__)


@dataclass(frozen=True)
class Recognition:
    """The winning dialect and every marker it found."""

    dialect: Dialect
    hits: tuple[MarkerHit, ...]

    @property
    def parsed_hits(self) -> tuple[MarkerHit, ...]:
        return tuple(h for h in self.hits if h.parsed)


class FormatRecognizer:
    """Tries dialect matchers in fixed priority order.

    The first dialect with at least one marker line wins and later dialects
    are not consulted, so a file is never parsed as two dialects.
    """

    def __init__(self, matchers: Sequence[DialectMatcher] = DIALECT_MATCHERS):
        if not matchers:
            raise ValueError("FormatRecognizer needs at least one matcher")
        self.matchers = tuple(matchers)

    @property
    def priority(self) -> tuple[Dialect, ...]:
        return tuple(m.dialect for m in self.matchers)

    def recognize(self, lines: Sequence[str]) -> Optional[Recognition]:
        """
        Find the first dialect whose marker pattern matches.

        Args:
            lines: Decoded report lines

        Returns:
            Recognition, or None if no dialect matched any line
        """
        for matcher in self.matchers:
            hits = matcher.find(lines)
            if hits:
                logger.debug(f"Recognized {matcher.dialect.value} dialect ({len(hits)} markers)")
                return Recognition(dialect=matcher.dialect, hits=tuple(hits))
        return None
