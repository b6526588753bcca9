"""JSON formatter for drlogseeker."""

import json

from ..statistics import band_histogram, dr_summary
from ..scanning.models import ScanReport
from .base import BaseFormatter


class JsonFormatter(BaseFormatter):
    """Render the report as JSON."""

    def render(self, report: ScanReport) -> None:
        print(self.format(report))

    def format(self, report: ScanReport) -> str:
        data = report.to_dict()
        data["statistics"] = {
            **dr_summary(report).to_dict(),
            "histogram": [int(n) for n in band_histogram(report)],
        }
        return json.dumps(data, indent=2, ensure_ascii=False)
