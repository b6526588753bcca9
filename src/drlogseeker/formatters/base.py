"""Base formatter interface for drlogseeker output rendering."""

from abc import ABC, abstractmethod

from ..scanning.models import ScanReport


class BaseFormatter(ABC):
    """Abstract base class for output formatters."""

    @abstractmethod
    def render(self, report: ScanReport) -> None:
        """Render the report to stdout/stderr as appropriate."""

    @abstractmethod
    def format(self, report: ScanReport) -> str:
        """Return formatted string representation of the report."""
