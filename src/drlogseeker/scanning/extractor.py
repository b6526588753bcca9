"""TextExtractor: turns a candidate file's bytes into a ParsedReport.

Pipeline for one file:
    1. Read raw bytes (size-limited). Any I/O problem -> Failure(UNREADABLE).
    2. Decode permissively: BOM sniffing, strict UTF-8, then the policy's
       fallback codec with replacement. Decoding never fails.
    3. Empty or whitespace-only text -> Failure(EMPTY_FILE).
    4. Recognize the dialect (or use the one supplied) and collect markers.
    5. Round every parseable marker, clamp to [0, 14], and check agreement.

Nothing here raises for per-file problems; every outcome is a ParsedReport.
"""

from __future__ import annotations

import codecs
from typing import Optional, Sequence, Union

from ..classifier import clamp
from ..config import DEFAULT_POLICY, ParsePolicy
from ..exceptions import FileAccessError
from ..file_ops import safe_read_bytes
from ..logging_config import get_logger
from .dialects import DialectMatcher, MarkerHit, round_dr
from .models import CandidateFile, Dialect, FailureReason, ParsedReport
from .recognizer import FormatRecognizer

logger = get_logger(__name__)

# Longest BOMs first: the UTF-32-LE BOM starts with the UTF-16-LE one
_BOMS: tuple[tuple[bytes, str], ...] = (
    (codecs.BOM_UTF32_LE, "utf-32-le"),
    (codecs.BOM_UTF32_BE, "utf-32-be"),
    (codecs.BOM_UTF8, "utf-8"),
    (codecs.BOM_UTF16_LE, "utf-16-le"),
    (codecs.BOM_UTF16_BE, "utf-16-be"),
)


def decode_content(data: bytes, fallback_encoding: str = DEFAULT_POLICY.fallback_encoding) -> str:
    """Decode report bytes without ever failing.

    Args:
        data: Raw file content
        fallback_encoding: Codec for content that is not valid UTF-8

    Returns:
        Decoded text; undecodable sequences become U+FFFD
    """
    for bom, encoding in _BOMS:
        if data.startswith(bom):
            return data[len(bom):].decode(encoding, errors="replace")
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return data.decode(fallback_encoding, errors="replace")


class TextExtractor:
    """Extracts a DR value from report content.

    Attributes:
        policy: Rounding, ambiguity and decoding policy
        recognizer: Dialect recognizer used when no matcher is supplied
        max_bytes: Files larger than this are reported unreadable
    """

    def __init__(
        self,
        policy: ParsePolicy = DEFAULT_POLICY,
        recognizer: Optional[FormatRecognizer] = None,
        max_bytes: Optional[int] = None,
    ) -> None:
        self.policy = policy
        self.recognizer = recognizer or FormatRecognizer()
        self.max_bytes = max_bytes

    def extract_file(self, candidate: CandidateFile) -> ParsedReport:
        """Read and parse one candidate file."""
        try:
            data = safe_read_bytes(candidate.path, max_bytes=self.max_bytes)
        except FileAccessError as e:
            logger.debug(f"Unreadable {candidate.path}: {e.reason}")
            return ParsedReport.failure(FailureReason.UNREADABLE, e.reason)
        return self.extract(data)

    def extract(
        self,
        content: Union[bytes, str],
        matcher: Optional[DialectMatcher] = None,
    ) -> ParsedReport:
        """
        Parse report content.

        Args:
            content: Raw bytes or already-decoded text
            matcher: Parse as this dialect only; None lets the recognizer choose

        Returns:
            ParsedReport (success or failure, never raises for bad content)
        """
        if isinstance(content, bytes):
            if not content:
                return ParsedReport.failure(FailureReason.EMPTY_FILE, "File is empty")
            text = decode_content(content, self.policy.fallback_encoding)
        else:
            text = content

        if not text.strip():
            return ParsedReport.failure(FailureReason.EMPTY_FILE, "File has no text content")

        lines = text.splitlines()
        if matcher is not None:
            dialect = matcher.dialect
            hits: Sequence[MarkerHit] = matcher.find(lines)
        else:
            recognition = self.recognizer.recognize(lines)
            if recognition is None:
                return ParsedReport.failure(
                    FailureReason.NO_MATCH_FOUND, "No DR marker in any known report format"
                )
            dialect = recognition.dialect
            hits = recognition.hits

        if not hits:
            return ParsedReport.failure(
                FailureReason.NO_MATCH_FOUND, f"No {dialect.value} DR marker found"
            )
        return self.resolve(dialect, hits)

    def resolve(self, dialect: Dialect, hits: Sequence[MarkerHit]) -> ParsedReport:
        """Reduce a dialect's markers to a single value or a failure."""
        parsed = [h for h in hits if h.value is not None]
        if not parsed:
            first = hits[0]
            return ParsedReport.failure(
                FailureReason.NO_MATCH_FOUND,
                f"DR marker on line {first.line_number} has no readable value '{first.token}'",
            )

        rounded = [round_dr(h.value, self.policy.rounding) for h in parsed]  # type: ignore[arg-type]
        banded = [clamp(v) for v in rounded]

        compared = banded if self.policy.compare_clamped else rounded
        if max(compared) - min(compared) > self.policy.ambiguity_tolerance:
            distinct = sorted(set(compared))
            lines = ", ".join(str(h.line_number) for h in parsed)
            return ParsedReport.failure(
                FailureReason.AMBIGUOUS_MATCH,
                f"Conflicting DR values {', '.join(map(str, distinct))} (lines {lines})",
            )

        return ParsedReport.success(
            dr_value=banded[0],
            dialect=dialect,
            unclamped_value=rounded[0],
            token=parsed[0].token,
        )
