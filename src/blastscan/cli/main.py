"""
Main CLI entry point for blastscan.

Provides commands for each use of blastn in place of profile search:
- classify: Convert blastn hits for model classification
- coverage: Convert blastn hits for coverage determination
- seeds: Plan realignment around the longest ungapped blastn segment
"""

from __future__ import annotations

import typer
from rich import print as rprint

from blastscan import __version__

app = typer.Typer(
    name="blastscan",
    help="Convert blastn hit summaries into profile-search hit tables",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        rprint(f"blastscan version {__version__}")
        raise typer.Exit


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """
    blastscan: blastn as a fast stand-in for covariance-model search.

    Translates blastn HSP summaries into the tblout formats that downstream
    classification and coverage steps already read.
    """


# Import subcommands
from blastscan.cli import convert, seeds

# Register subcommands
app.command(name="classify")(convert.classify)
app.command(name="coverage")(convert.coverage)
app.command(name="seeds")(seeds.seeds)


if __name__ == "__main__":
    app()
