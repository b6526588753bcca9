"""Quiet formatter: one ``path<TAB>value`` line per file."""

from ..scanning.models import ScanReport
from .base import BaseFormatter


class QuietFormatter(BaseFormatter):
    """Render file paths with their DR value, or ERR, one per line."""

    def render(self, report: ScanReport) -> None:
        text = self.format(report)
        if text:
            print(text)

    def format(self, report: ScanReport) -> str:
        lines = []
        for entry in report.entries:
            value = str(entry.band.value) if entry.band is not None else "ERR"
            lines.append(f"{entry.candidate.path}\t{value}")
        return "\n".join(lines)
