"""
ablsense CLI - Progress ABL index analyzer.

Checks FOR/FIND/CAN-FIND statements against the indexes of Data
Dictionary (.df) exports and suggests the missing ones.

Usage:
    ablsense analyze close.p orders.zip --schema sports.df
    ablsense suggest src.zip -s sports.df > new-indexes.df
    ablsense statements close.p
    ablsense tables sports.df
"""

from __future__ import annotations

import logging
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from ablsense import __version__
from ablsense.cli.commands import analyze, inspect

app = typer.Typer(
    name="ablsense",
    help="Index analyzer for Progress ABL programs and .df schemas",
    no_args_is_help=True,
)

console = Console()
error_console = Console(stderr=True)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"ablsense version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log progress to stderr."),
    ] = False,
) -> None:
    """ablsense - Progress ABL index analyzer."""
    if verbose:
        logging.basicConfig(
            level=logging.INFO,
            format="%(message)s",
            handlers=[RichHandler(console=error_console, show_path=False)],
        )


analyze.register(app)
inspect.register(app)


if __name__ == "__main__":
    app()
