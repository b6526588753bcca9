"""CLI entry point: registers all subcommands."""

from typing import Optional

import typer

from .. import __version__
from ._common import console

app = typer.Typer(
    name="drlogseeker",
    help="drlogseeker - triage DR Meter logs into good and bad masters",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"drlogseeker {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """Scan folders for DR Meter reports and band their DR values."""


# Import subcommands to register them
from .scan import scan as _scan  # noqa: F401, E402
from .prune import prune_list as _prune_list  # noqa: F401, E402
