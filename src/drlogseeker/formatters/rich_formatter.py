"""Rich terminal formatter for drlogseeker."""

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..classifier import ColorTier
from ..scanning.models import ScanEntry, ScanReport, ScanState
from ..statistics import dr_summary, tier_counts
from .base import BaseFormatter


def _tier_style(tier: ColorTier) -> str:
    return f"bold {tier.hex}"


def _dr_cell(entry: ScanEntry) -> Text:
    if entry.band is None:
        return Text("ERR", style="dim red")
    label = f"DR{entry.band.value}"
    if entry.band.clamped:
        label += f" (raw {entry.band.raw_value})"
    return Text(label, style=_tier_style(entry.band.tier))


def _status_label(report: ScanReport) -> str:
    if report.status is ScanState.COMPLETED:
        return "[green]complete[/green]"
    elif report.status is ScanState.CANCELLED:
        return "[yellow]cancelled (partial results)[/yellow]"
    elif report.status is ScanState.FATALLY_FAILED:
        return "[red bold]failed[/red bold]"
    return f"[dim]{report.status.value}[/dim]"


class RichFormatter(BaseFormatter):
    """Rich terminal output: result table followed by a summary panel."""

    def __init__(self, console: Optional[Console] = None, show_failures: bool = True):
        self.console = console or Console()
        self.show_failures = show_failures

    def render(self, report: ScanReport) -> None:
        if report.status is ScanState.FATALLY_FAILED:
            self.console.print(
                f"[red bold]Cannot scan {escape(str(report.root))}:[/red bold] "
                f"{escape(report.fatal_error or '')}"
            )
            return
        self._print_table(report)
        self._print_summary(report)

    def format(self, report: ScanReport) -> str:
        # Rich output goes directly to console; return empty string
        self.render(report)
        return ""

    def _print_table(self, report: ScanReport) -> None:
        entries = report.ranked()
        if not self.show_failures:
            entries = [e for e in entries if e.band is not None]
        if not entries:
            self.console.print("[yellow]No report files found.[/yellow]")
            return

        table = Table(show_header=True, header_style="bold cyan", expand=False)
        table.add_column("DR", justify="right", no_wrap=True)
        table.add_column("File", style="bold")
        table.add_column("Folder", style="dim")
        table.add_column("Format / reason", style="dim")

        for entry in entries:
            if entry.band is not None and entry.parsed.dialect is not None:
                note = entry.parsed.dialect.value
            else:
                reason = entry.parsed.reason.value if entry.parsed.reason else ""
                note = f"{reason}: {entry.parsed.detail}" if entry.parsed.detail else reason
            table.add_row(
                _dr_cell(entry),
                Text(entry.candidate.name),
                Text(str(entry.candidate.path.parent)),
                Text(note),
            )
        self.console.print(table)

    def _print_summary(self, report: ScanReport) -> None:
        s = report.summary
        stats = dr_summary(report)

        lines = [
            f"Status: {_status_label(report)}",
            f"Files scanned: [bold]{s.total}[/bold]   "
            f"with DR value: [green]{s.succeeded}[/green]   "
            f"failed: [red]{s.failed}[/red]",
        ]
        if s.clamped:
            lines.append(f"Out-of-range values clamped: [yellow]{s.clamped}[/yellow]")
        if stats.count:
            lines.append(
                f"DR mean {stats.mean}  median {stats.median}  "
                f"range {stats.minimum}-{stats.maximum}"
            )
            tiers = "  ".join(
                f"[{_tier_style(tier)}]{tier.value}[/]={count}"
                for tier, count in tier_counts(report).items()
                if count
            )
            lines.append(f"Tiers: {tiers}")
        if s.failed_by_reason:
            reasons = ", ".join(f"{k}={v}" for k, v in s.failed_by_reason.items())
            lines.append(f"Failures: {reasons}")
        for failure in report.subtree_failures:
            lines.append(
                f"[red]Inaccessible:[/red] {escape(str(failure.path))} ({escape(failure.detail)})"
            )

        self.console.print(
            Panel("\n".join(lines), title="[bold cyan]DR Scan Summary[/bold cyan]", expand=False)
        )
