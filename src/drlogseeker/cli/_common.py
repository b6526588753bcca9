"""Shared CLI helpers."""

from pathlib import Path
from typing import List, Optional

from rich.console import Console

from ..config import ScanConfig, load_config
from ..scanning import ScanCoordinator, ScanReport
from .progress import ScanProgress

console = Console()
err_console = Console(stderr=True)


def resolve_config(
    config: Optional[Path] = None,
    extensions: Optional[List[str]] = None,
    workers: Optional[int] = None,
    follow_symlinks: Optional[bool] = None,
) -> ScanConfig:
    """Build a ScanConfig from CLI options layered over config files and env."""
    overrides = {}
    if extensions:
        overrides["extensions"] = tuple(extensions)
    if workers is not None:
        overrides["worker_count"] = workers
    if follow_symlinks is not None:
        overrides["follow_symlinks"] = follow_symlinks
    return load_config(config_file=config, **overrides)


def run_scan(config: ScanConfig, path: Path, show_progress: bool = True) -> ScanReport:
    """Run a scan with an optional live progress bar.

    Ctrl+C cancels the scan; files already being read finish and the
    partial report is returned.
    """
    handle = ScanCoordinator(config).start(path)
    try:
        if show_progress:
            with ScanProgress(err_console) as progress:
                for _ in handle.stream():
                    progress.update(*handle.progress)
        else:
            for _ in handle.stream():
                pass
    except KeyboardInterrupt:
        handle.cancel()
        err_console.print("[yellow]Interrupted: finishing in-flight files...[/yellow]")
    return handle.wait()
