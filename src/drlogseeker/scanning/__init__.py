"""DR log discovery, parsing, and scan coordination."""

from .coordinator import ProgressCallback, ScanCoordinator, ScanHandle, scan
from .dialects import (
    DIALECT_MATCHERS,
    DialectMatcher,
    MarkerHit,
    get_matcher,
    parse_number,
    round_dr,
)
from .discovery import DirectoryWalker, discover, resolve_root
from .extractor import TextExtractor, decode_content
from .models import (
    CandidateFile,
    Dialect,
    FailureReason,
    ParsedReport,
    ScanEntry,
    ScanReport,
    ScanState,
    ScanSummary,
    SubtreeFailure,
)
from .recognizer import FormatRecognizer, Recognition

__all__ = [
    # Models
    "CandidateFile",
    "Dialect",
    "FailureReason",
    "ParsedReport",
    "ScanEntry",
    "ScanReport",
    "ScanState",
    "ScanSummary",
    "SubtreeFailure",
    # Dialects
    "DIALECT_MATCHERS",
    "DialectMatcher",
    "MarkerHit",
    "get_matcher",
    "parse_number",
    "round_dr",
    # Recognition / extraction
    "FormatRecognizer",
    "Recognition",
    "TextExtractor",
    "decode_content",
    # Discovery
    "DirectoryWalker",
    "discover",
    "resolve_root",
    # Coordination
    "ProgressCallback",
    "ScanCoordinator",
    "ScanHandle",
    "scan",
]
