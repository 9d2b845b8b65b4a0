"""
Shared CLI utilities for blastscan commands.
"""

from __future__ import annotations

import logging
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.progress import (
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)

from blastscan.core.exceptions import BlastscanError
from blastscan.core.io_utils import load_seq_lengths, seq_lengths_from_fasta
from blastscan.models.config import ConversionConfig


def setup_logging(verbose: bool = False, console: Console | None = None) -> None:
    """Route package logging through rich; DEBUG when verbose, WARNING otherwise."""
    handler = RichHandler(console=console, show_time=False, show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s"))

    pkg_logger = logging.getLogger("blastscan")
    pkg_logger.handlers.clear()
    pkg_logger.addHandler(handler)
    pkg_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    pkg_logger.propagate = False


@contextmanager
def spinner_progress(
    description: str,
    console: Console | None = None,
    quiet: bool = False,
) -> Generator[Progress, None, None]:
    """Context manager for spinner-style progress display.

    The spinner is suppressed when quiet mode is enabled.

    Example:
        >>> with spinner_progress("Converting...", console, quiet) as progress:
        ...     pass
    """
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=console,
        disable=quiet,
    ) as progress:
        progress.add_task(description=description, total=None)
        yield progress


class QuietConsole:
    """Console wrapper that suppresses output in quiet mode.

    Example:
        >>> qc = QuietConsole(Console(), quiet=True)
        >>> qc.print("This won't be shown")
    """

    def __init__(self, console: Console, quiet: bool = False):
        self._console = console
        self._quiet = quiet

    @property
    def console(self) -> Console:
        """The wrapped Console, for output that ignores quiet mode."""
        return self._console

    def print(self, *args: Any, **kwargs: Any) -> None:
        if not self._quiet:
            self._console.print(*args, **kwargs)

    def __getattr__(self, name: str) -> Any:
        return getattr(self._console, name)


def report_error(console: Console, error: BlastscanError) -> None:
    """Print a blastscan error and its suggestion."""
    console.print(f"[red]Error: {escape(error.message)}[/red]")
    if error.suggestion:
        console.print(f"[dim]Suggestion: {escape(error.suggestion)}[/dim]")


def resolve_seq_lengths(seq_lengths: Path | None, fasta: Path | None) -> dict[str, int]:
    """Load sequence lengths from exactly one of a TSV table or a FASTA file.

    Raises:
        typer.BadParameter: If neither or both sources are given.
    """
    if (seq_lengths is None) == (fasta is None):
        msg = "Provide exactly one of --seq-lengths or --fasta"
        raise typer.BadParameter(msg)
    if seq_lengths is not None:
        return load_seq_lengths(seq_lengths)
    return seq_lengths_from_fasta(fasta)


def build_config(
    config_path: Path | None,
    min_bitscore: float | None = None,
    keep: bool = False,
    overhang: int | None = None,
) -> ConversionConfig:
    """Load the YAML config if given and apply command-line overrides."""
    config = ConversionConfig.from_yaml(config_path) if config_path else ConversionConfig()
    return config.with_overrides(
        min_bitscore=min_bitscore,
        keep=True if keep else None,
        overhang=overhang,
    )
