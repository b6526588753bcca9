"""List files an external tool may prune."""

import os
from pathlib import Path
from typing import List, Optional

import typer
from rich.markup import escape

from ..exceptions import DRLogSeekerError
from ..logging_config import setup_logging
from ..pruning import parent_dirs_emptied_by, select_prune_candidates
from ..scanning import ScanState
from . import app
from ._common import err_console, resolve_config, run_scan
from .scan import EXIT_FATAL, EXIT_INTERRUPTED


@app.command("prune-list")
def prune_list(
    path: Path = typer.Argument(..., help="Folder to search for DR logs", file_okay=False),
    below: int = typer.Option(
        ...,
        "--below",
        "-b",
        help="Select files whose DR band is below this value",
        min=0,
        max=15,
    ),
    no_failures: bool = typer.Option(
        False,
        "--no-failures",
        help="Do not select files that produced no DR value",
    ),
    with_folders: bool = typer.Option(
        False,
        "--with-folders",
        help="Also list parent folders that would be left empty",
    ),
    ext: Optional[List[str]] = typer.Option(None, "--ext", "-e", help="Candidate file suffix"),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", min=1),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", exists=True, file_okay=True, dir_okay=False
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """
    Print the paths of files below a DR threshold, one per line.

    Nothing is deleted. Pipe the output into the tool of your choice after
    reviewing it. Folder lines end with a path separator.
    """
    setup_logging(verbose=verbose, quiet=not verbose)

    try:
        cfg = resolve_config(config, ext, workers)
    except DRLogSeekerError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    report = run_scan(cfg, path, show_progress=False)
    if report.status is ScanState.FATALLY_FAILED:
        err_console.print(
            f"[red bold]Cannot scan {escape(str(report.root))}:[/red bold] "
            f"{escape(report.fatal_error or '')}"
        )
        raise typer.Exit(EXIT_FATAL)

    selection = select_prune_candidates(report, below, include_failures=not no_failures)
    for selected in selection.paths:
        typer.echo(str(selected))
    if with_folders:
        for folder in parent_dirs_emptied_by(selection.paths):
            typer.echo(f"{folder}{os.sep}")

    err_console.print(
        f"[dim]{len(selection)} of {report.summary.total} files selected (DR below {below})[/dim]"
    )
    if report.status is ScanState.CANCELLED:
        raise typer.Exit(EXIT_INTERRUPTED)
