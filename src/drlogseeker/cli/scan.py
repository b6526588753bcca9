"""Main scan command."""

from pathlib import Path
from typing import List, Optional

import typer
from rich.markup import escape

from ..exceptions import DRLogSeekerError
from ..formatters import RichFormatter, get_formatter
from ..logging_config import setup_logging
from ..scanning import ScanState
from . import app
from ._common import console, resolve_config, run_scan

# Exit codes
EXIT_FATAL = 2
EXIT_INTERRUPTED = 130


@app.command()
def scan(
    path: Path = typer.Argument(
        ...,
        help="Folder to search for DR logs",
        file_okay=False,
        dir_okay=True,
    ),
    ext: Optional[List[str]] = typer.Option(
        None,
        "--ext",
        "-e",
        help="File suffix to treat as a candidate log (repeatable; default .txt and .log)",
    ),
    workers: Optional[int] = typer.Option(
        None,
        "--workers",
        "-w",
        help="Parallel workers (default: CPU count)",
        min=1,
    ),
    follow_symlinks: Optional[bool] = typer.Option(
        None,
        "--follow-symlinks/--no-follow-symlinks",
        help="Descend into symlinked folders",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="TOML config file",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    fmt: str = typer.Option(
        "rich",
        "--format",
        "-f",
        help="Output format: rich, json, quiet",
    ),
    hide_failures: bool = typer.Option(
        False,
        "--hide-failures",
        help="Only list files that produced a DR value (rich format)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Errors only, no progress bar"),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Also write logs here"),
) -> None:
    """
    Scan a folder tree for DR Meter logs and show each file's DR value.

    Every candidate file is listed exactly once: with its DR band, or with
    the reason no value could be read.
    """
    setup_logging(verbose=verbose, quiet=quiet, log_file=str(log_file) if log_file else None)

    try:
        formatter = (
            RichFormatter(console=console, show_failures=not hide_failures)
            if fmt == "rich"
            else get_formatter(fmt)
        )
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--format")

    try:
        cfg = resolve_config(config, ext, workers, follow_symlinks)
    except DRLogSeekerError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    report = run_scan(cfg, path, show_progress=fmt == "rich" and not quiet)
    formatter.render(report)

    if report.status is ScanState.FATALLY_FAILED:
        raise typer.Exit(EXIT_FATAL)
    if report.status is ScanState.CANCELLED:
        raise typer.Exit(EXIT_INTERRUPTED)
