"""
Conversion commands: blastn summary to profile-search style tables.

- classify: one cmscan --trmF3 style tblout with scores summed per
  model/sequence/strand
- coverage: per-model cmsearch --tblout style tables plus indel files for
  sequences already assigned to a model
"""

from __future__ import annotations

from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from blastscan.cli.utils import (
    QuietConsole,
    build_config,
    report_error,
    resolve_seq_lengths,
    setup_logging,
    spinner_progress,
)
from blastscan.core.conversion import convert_for_classification, convert_for_coverage
from blastscan.core.exceptions import BlastscanError
from blastscan.core.io_utils import load_assignments
from blastscan.core.parsers import ReaderStats

console = Console()


def _stats_table(title: str, stats: ReaderStats) -> Table:
    table = Table(title=title, show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Summary lines", f"{stats.lines:,}")
    table.add_row("HSPs read", f"{stats.hsp_blocks:,}")
    table.add_row("HSPs converted", f"{stats.emitted:,}")
    table.add_row("Below minimum bit score", f"{stats.below_threshold:,}")
    table.add_row("No-hit ranges skipped", f"{stats.skipped_ranges:,}")
    return table


def classify(
    summary: Path = typer.Argument(
        ...,
        help="blastn summary file from parse_blast.pl --program n",
        exists=True,
        dir_okay=False,
    ),
    out_root: Path = typer.Option(
        ...,
        "--out-root",
        "-o",
        help="Output root; writes <root>.blastn.r1.tblout",
    ),
    seq_lengths: Path | None = typer.Option(
        None,
        "--seq-lengths",
        "-l",
        help="TSV with columns seq_name, length",
        exists=True,
        dir_okay=False,
    ),
    fasta: Path | None = typer.Option(
        None,
        "--fasta",
        help="Query FASTA (optionally gzipped) to compute lengths from",
        exists=True,
        dir_okay=False,
    ),
    min_bitscore: float | None = typer.Option(
        None,
        "--min-bitscore",
        help="Minimum bit score for an HSP to be converted (default 50.0)",
        min=0.0,
    ),
    keep: bool = typer.Option(
        False,
        "--keep",
        help="Keep the intermediate pretblout file",
    ),
    config_file: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="YAML configuration file",
        exists=True,
        dir_okay=False,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress progress output (for scripting)",
    ),
) -> None:
    """
    Convert a blastn summary for classification.

    Every HSP at or above the minimum bit score is written as one line;
    the first line of each model/sequence/strand carries the summed score
    of all its HSPs and later lines carry 0.0.

    Example:

        blastscan classify r1.blastn.summary.txt \\
            --seq-lengths seq_lengths.tsv \\
            --out-root results/run1
    """
    setup_logging(verbose, console)
    out = QuietConsole(console, quiet=quiet)

    try:
        config = build_config(config_file, min_bitscore=min_bitscore, keep=keep)
        lengths = resolve_seq_lengths(seq_lengths, fasta)
        with spinner_progress("Converting blastn summary...", console, quiet):
            result = convert_for_classification(summary, lengths, out_root, config)
    except typer.BadParameter as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1) from None
    except BlastscanError as e:
        report_error(console, e)
        raise typer.Exit(code=1) from None
    except ValidationError as e:
        console.print(f"[red]Error: Invalid configuration: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from None

    out.print(_stats_table("Classification conversion", result.stats))
    out.print(f"[green]Wrote[/green] {result.tblout_path} ({result.triples:,} triples)")
    if result.pretblout_path is not None:
        out.print(f"[dim]Kept {result.pretblout_path}[/dim]")


def coverage(
    summary: Path = typer.Argument(
        ...,
        help="blastn summary file from parse_blast.pl --program n",
        exists=True,
        dir_okay=False,
    ),
    assignments: Path = typer.Option(
        ...,
        "--assignments",
        "-a",
        help="TSV with columns seq_name, model_name",
        exists=True,
        dir_okay=False,
    ),
    out_root: Path = typer.Option(
        ...,
        "--out-root",
        "-o",
        help="Output root; writes <root>.search.r2.<model>.{tblout,indel}",
    ),
    seq_lengths: Path | None = typer.Option(
        None,
        "--seq-lengths",
        "-l",
        help="TSV with columns seq_name, length",
        exists=True,
        dir_okay=False,
    ),
    fasta: Path | None = typer.Option(
        None,
        "--fasta",
        help="Query FASTA (optionally gzipped) to compute lengths from",
        exists=True,
        dir_okay=False,
    ),
    min_bitscore: float | None = typer.Option(
        None,
        "--min-bitscore",
        help="Minimum bit score for an HSP to be converted (default 50.0)",
        min=0.0,
    ),
    config_file: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="YAML configuration file",
        exists=True,
        dir_okay=False,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress progress output (for scripting)",
    ),
) -> None:
    """
    Convert a blastn summary for coverage determination.

    Only HSPs of a sequence against the model it was assigned to are kept.

    Example:

        blastscan coverage r2.blastn.summary.txt \\
            --assignments assignments.tsv \\
            --fasta seqs.fa \\
            --out-root results/run1
    """
    setup_logging(verbose, console)
    out = QuietConsole(console, quiet=quiet)

    try:
        config = build_config(config_file, min_bitscore=min_bitscore)
        lengths = resolve_seq_lengths(seq_lengths, fasta)
        seq_to_model, model_names = load_assignments(assignments)
        with spinner_progress("Filtering assigned hits...", console, quiet):
            result = convert_for_coverage(
                summary, lengths, seq_to_model, model_names, out_root, config
            )
    except typer.BadParameter as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1) from None
    except BlastscanError as e:
        report_error(console, e)
        raise typer.Exit(code=1) from None
    except ValidationError as e:
        console.print(f"[red]Error: Invalid configuration: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from None

    out.print(_stats_table("Coverage conversion", result.stats))
    out.print(
        f"[green]Wrote[/green] {result.kept:,} hits for {len(result.tblout_paths)} models "
        f"({result.dropped:,} unassigned pairs dropped)"
    )
    for model, path in result.tblout_paths.items():
        out.print(f"  {model}: {path}, {result.indel_paths[model]}")
