"""Dialect matchers: the single source of truth for DR report patterns.

Adding a new dialect:
  1. Add a member to ``Dialect`` in models.py.
  2. Add a DialectMatcher entry to DIALECT_MATCHERS below, at its priority.

A marker is a line that *starts* with one of the dialect's labels, followed
by ``:`` or ``=`` and the value. Per-track table rows such as
``DR9   -0.50 dB   -13.42 dB   03:58   01-Intro.flac`` have no separator after
the label and are not markers.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from decimal import (
    ROUND_DOWN,
    ROUND_FLOOR,
    ROUND_HALF_EVEN,
    ROUND_HALF_UP,
    Decimal,
    InvalidOperation,
    localcontext,
)
from typing import Iterable, Optional

from .models import Dialect


@dataclass(frozen=True)
class MarkerHit:
    """A DR marker line found in a report.

    ``value`` is None when the marker carried something unparseable
    (``ERR``, ``-``, ``n/a``).
    """

    dialect: Dialect
    line_number: int
    token: str
    value: Optional[Decimal]

    @property
    def parsed(self) -> bool:
        return self.value is not None


@dataclass(frozen=True)
class DialectMatcher:
    """Everything the recognizer needs to know about one report dialect."""

    dialect: Dialect

    # Label alternatives, most specific first. Matched case-insensitively at
    # the start of a line (after optional whitespace).
    labels: tuple[str, ...]

    # Separators allowed between label and value
    separators: str = ":="

    _pattern: re.Pattern = field(init=False, default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        alternation = "|".join(f"(?:{label})" for label in self.labels)
        pattern = re.compile(
            rf"^\s*(?:{alternation})\s*[{re.escape(self.separators)}]\s*(?P<value>.*?)\s*$",
            re.IGNORECASE,
        )
        object.__setattr__(self, "_pattern", pattern)

    def match_line(self, line: str, line_number: int = 0) -> Optional[MarkerHit]:
        m = self._pattern.match(line)
        if m is None:
            return None
        token = extract_token(m.group("value"))
        return MarkerHit(
            dialect=self.dialect,
            line_number=line_number,
            token=token or m.group("value"),
            value=parse_number(token) if token else None,
        )

    def find(self, lines: Iterable[str]) -> list[MarkerHit]:
        """All marker lines of this dialect, in file order."""
        hits = []
        for number, line in enumerate(lines, start=1):
            hit = self.match_line(line, number)
            if hit is not None:
                hits.append(hit)
        return hits


# ── Dialect table (priority order) ─────────────────────────────────

ENGLISH = DialectMatcher(
    dialect=Dialect.ENGLISH,
    labels=(
        r"official\s+dr\s+value",
        r"dr\s+value",
        r"dynamic\s+range(?:\s+value)?",
        r"dr",
    ),
)

RUSSIAN = DialectMatcher(
    dialect=Dialect.RUSSIAN,
    labels=(
        r"(?:официальное|реальное|итоговое)\s+значение\s+dr",
        r"значение\s+dr",
        r"динамический\s+диапазон",
    ),
)

DIALECT_MATCHERS: tuple[DialectMatcher, ...] = (ENGLISH, RUSSIAN)


def get_matcher(dialect: Dialect) -> DialectMatcher:
    for matcher in DIALECT_MATCHERS:
        if matcher.dialect is dialect:
            return matcher
    raise KeyError(dialect)


# ── Numeric tokens ─────────────────────────────────────────────────

# Optional "DR" prefix, then a signed number. Space-like grouping is only
# taken when every group after the first has exactly three digits, so
# "7 12" yields "7". Anything after the number (units, comments) is ignored.
_TOKEN_RE = re.compile(
    r"^(?:dr\s*)?(?P<num>[-+\u2212]?"
    r"(?:\d{1,3}(?:[\u00a0\u202f\u2009' _]\d{3})+(?!\d)|\d+)"
    r"(?:[.,]\d+)*)",
    re.IGNORECASE,
)
_GROUPING_CHARS = re.compile(r"['_\u00a0\u202f\u2009 ]")
_COMMA_THOUSANDS = re.compile(r"[-+]?\d{1,3}(?:,\d{3})+")
_DOT_THOUSANDS = re.compile(r"[-+]?\d{1,3}(?:\.\d{3}){2,}")
_PLAIN_NUMBER = re.compile(r"[-+]?\d+(?:\.\d+)?")

_ROUNDING_MODES = {
    "half_away_from_zero": ROUND_HALF_UP,
    "half_even": ROUND_HALF_EVEN,
    "floor": ROUND_FLOOR,
    "truncate": ROUND_DOWN,
}


def extract_token(text: str) -> str:
    """Pull the numeric token off the front of a marker's value text."""
    m = _TOKEN_RE.match(text.strip())
    if m is None:
        return ""
    return m.group("num")


def parse_number(token: str) -> Optional[Decimal]:
    """Parse a DR token into a Decimal.

    Accepts decimal points and decimal commas (``9.6``, ``9,6``) and
    thousands grouping (``1,234``, ``1 234``, ``1.234.567``). A single comma
    followed by exactly three digits is read as grouping.

    Returns:
        The value, or None if the token is not a number
    """
    t = _GROUPING_CHARS.sub("", token.strip()).replace("\u2212", "-")
    if not t:
        return None

    if "," in t and "." in t:
        # Whichever separator comes last is the decimal one
        if t.rfind(",") > t.rfind("."):
            t = t.replace(".", "").replace(",", ".")
        else:
            t = t.replace(",", "")
    elif "," in t:
        if _COMMA_THOUSANDS.fullmatch(t):
            t = t.replace(",", "")
        elif t.count(",") == 1:
            t = t.replace(",", ".")
        else:
            return None
    elif t.count(".") > 1:
        if not _DOT_THOUSANDS.fullmatch(t):
            return None
        t = t.replace(".", "")

    if not _PLAIN_NUMBER.fullmatch(t):
        return None
    try:
        return Decimal(t)
    except InvalidOperation:
        return None


def round_dr(value: Decimal, rule: str = "half_away_from_zero") -> int:
    """Round a DR value to an integer under the named rule.

    Total over any finite Decimal: precision grows with the number of integer
    digits, so long grouped tokens round exactly and are clamped later.
    """
    try:
        mode = _ROUNDING_MODES[rule]
    except KeyError:
        raise ValueError(f"Unknown rounding rule: {rule!r}")
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + 2)
        return int(value.quantize(Decimal(1), rounding=mode))
