"""
drlogseeker - Dynamic Range log triage

Finds DR Meter reports (English and Russian formats) in a music collection,
extracts each album's DR value, and bands it onto the 0-14 color scale so
thousands of logs can be sorted into good and bad masters in one pass.
"""

__version__ = "0.3.0"

from .classifier import ColorTier, DRBand, classify
from .config import ParsePolicy, ScanConfig, load_config
from .pruning import select_prune_candidates
from .scanning import (
    CandidateFile,
    Dialect,
    FailureReason,
    ParsedReport,
    ScanCoordinator,
    ScanEntry,
    ScanHandle,
    ScanReport,
    ScanState,
    scan,
)

__all__ = [
    "scan",  # Main entry point
    "ScanCoordinator",  # Streaming / cancellable scans
    "ScanHandle",
    "ScanReport",
    "ScanEntry",
    "ScanState",
    "CandidateFile",
    "ParsedReport",
    "Dialect",
    "FailureReason",
    "classify",
    "DRBand",
    "ColorTier",
    "ScanConfig",
    "ParsePolicy",
    "load_config",
    "select_prune_candidates",
]
