"""
Seed command: plan realignment of regions outside the blastn seed.
"""

from __future__ import annotations

from pathlib import Path

import polars as pl
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
)
from blastscan.core.exceptions import BlastscanError
from blastscan.core.seeds import SeedPlan, plan_seeds_from_indel_file

console = Console()


def _plan_table(plan: SeedPlan) -> Table:
    table = Table(title=f"Seeds for {plan.model_name}")
    table.add_column("Sequence", style="cyan")
    table.add_column("Model seed")
    table.add_column("Sequence seed")
    table.add_column("Length", justify="right")
    table.add_column("Subsequences")
    for seq_name, seed in plan.seeds.items():
        subseqs = plan.seq_to_subseqs.get(seq_name) or ["[dim]none[/dim]"]
        table.add_row(
            seq_name,
            str(seed.model_segment),
            str(seed.sequence_segment),
            str(seed.sequence_segment.length),
            ", ".join(subseqs),
        )
    return table


def plan_to_dataframe(plan: SeedPlan) -> pl.DataFrame:
    """One row per planned subsequence."""
    return pl.DataFrame(
        {
            "subseq_name": [s.name for s in plan.subsequences],
            "start": [s.start for s in plan.subsequences],
            "stop": [s.stop for s in plan.subsequences],
            "source": [s.source for s in plan.subsequences],
        },
        schema={"subseq_name": pl.Utf8, "start": pl.Int64, "stop": pl.Int64, "source": pl.Utf8},
    )


def seeds(
    indel_file: Path = typer.Argument(
        ...,
        help="Per-model indel file written by the coverage command",
        exists=True,
        dir_okay=False,
    ),
    model: str = typer.Option(
        ...,
        "--model",
        "-m",
        help="Model the indel file was written for",
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
    overhang: int | None = typer.Option(
        None,
        "--overhang",
        help="Nucleotides of overlap between realigned flanks and the seed (default 100)",
        min=1,
    ),
    output: Path | None = typer.Option(
        None,
        "--output",
        help="Write the subsequence plan as TSV",
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
        help="Suppress table output (for scripting)",
    ),
) -> None:
    """
    Find the ungapped seed of each sequence and plan flanking subsequences.

    Example:

        blastscan seeds results/run1.search.r2.NC_045512.indel \\
            --model NC_045512 --seq-lengths seq_lengths.tsv \\
            --output subseqs.tsv
    """
    setup_logging(verbose, console)
    out = QuietConsole(console, quiet=quiet)

    try:
        config = build_config(config_file, overhang=overhang)
        lengths = resolve_seq_lengths(seq_lengths, fasta)
        plan = plan_seeds_from_indel_file(indel_file, lengths, model, config.overhang)
    except typer.BadParameter as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1) from None
    except BlastscanError as e:
        report_error(console, e)
        raise typer.Exit(code=1) from None
    except ValidationError as e:
        console.print(f"[red]Error: Invalid configuration: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from None

    out.print(_plan_table(plan))
    if output is not None:
        plan_to_dataframe(plan).write_csv(output, separator="\t")
        out.print(f"[green]Wrote[/green] {len(plan.subsequences):,} subsequences to {output}")
