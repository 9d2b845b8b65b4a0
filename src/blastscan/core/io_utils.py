"""
Loaders for the collaborator inputs of a conversion run.

Sequence lengths and model assignments are produced by the wider pipeline.
They arrive here either as small tab-separated tables or, for lengths, as
the FASTA file the queries came from.
"""

from __future__ import annotations

import gzip
import logging
from pathlib import Path

import polars as pl

from blastscan.core.exceptions import CollaboratorTableError

logger = logging.getLogger(__name__)

SEQ_LENGTH_COLUMNS = ("seq_name", "length")
ASSIGNMENT_COLUMNS = ("seq_name", "model_name")


def _read_table(path: Path, columns: tuple[str, ...]) -> pl.DataFrame:
    try:
        df = pl.read_csv(path, separator="\t", infer_schema=False)
    except (pl.exceptions.ComputeError, pl.exceptions.NoDataError) as e:
        raise CollaboratorTableError(str(path), str(e), columns) from e

    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise CollaboratorTableError(
            str(path), f"missing columns {missing}, found {df.columns}", columns
        )
    df = df.select(columns)
    if df.null_count().sum_horizontal().item() > 0:
        raise CollaboratorTableError(str(path), "table contains empty cells", columns)
    duplicated = df.filter(pl.col("seq_name").is_duplicated())["seq_name"].unique().to_list()
    if duplicated:
        raise CollaboratorTableError(
            str(path), f"duplicate sequence names: {sorted(duplicated)[:5]}", columns
        )
    return df


def load_seq_lengths(path: Path) -> dict[str, int]:
    """
    Load expected sequence lengths from a TSV file.

    Expected format (tab-separated, with header):
        seq_name	length
        MN908947.3	29903

    Raises:
        CollaboratorTableError: If the table is malformed.
    """
    df = _read_table(path, SEQ_LENGTH_COLUMNS).with_columns(
        pl.col("length").str.strip_chars().cast(pl.Int64, strict=False)
    )
    if df["length"].null_count() > 0:
        raise CollaboratorTableError(str(path), "length column must be integers", SEQ_LENGTH_COLUMNS)
    if (df["length"] < 1).any():
        raise CollaboratorTableError(str(path), "lengths must be positive", SEQ_LENGTH_COLUMNS)

    lengths = dict(zip(df["seq_name"].to_list(), df["length"].to_list(), strict=True))
    logger.info("Loaded %d sequence lengths from %s", len(lengths), path)
    return lengths


def seq_lengths_from_fasta(path: Path) -> dict[str, int]:
    """
    Compute sequence lengths from a FASTA file, optionally gzipped.

    The sequence name is the first word of the header line.

    Raises:
        CollaboratorTableError: If the file has sequence data before a
            header or repeats a sequence name.
    """
    if str(path).endswith(".gz"):
        open_func = gzip.open
        mode = "rt"
    else:
        open_func = open
        mode = "r"

    lengths: dict[str, int] = {}
    name: str | None = None
    with open_func(path, mode) as handle:
        for line in handle:
            if line.startswith(">"):
                words = line[1:].split()
                if not words:
                    raise CollaboratorTableError(str(path), "empty FASTA header", ("FASTA",))
                name = words[0]
                if name in lengths:
                    raise CollaboratorTableError(
                        str(path), f"duplicate sequence name {name}", ("FASTA",)
                    )
                lengths[name] = 0
            elif line.strip():
                if name is None:
                    raise CollaboratorTableError(
                        str(path), "sequence data before first header", ("FASTA",)
                    )
                lengths[name] += len(line.strip())

    logger.info("Read lengths of %d sequences from %s", len(lengths), path)
    return lengths


def load_assignments(path: Path) -> tuple[dict[str, str], list[str]]:
    """
    Load sequence-to-model assignments from a TSV file.

    Expected format (tab-separated, with header):
        seq_name	model_name
        MN908947.3	NC_045512

    Returns:
        Tuple of (seq_to_model, model_names). Models are listed in order of
        first appearance.

    Raises:
        CollaboratorTableError: If the table is malformed.
    """
    df = _read_table(path, ASSIGNMENT_COLUMNS)
    seq_to_model = dict(
        zip(df["seq_name"].to_list(), df["model_name"].to_list(), strict=True)
    )
    model_names = df["model_name"].unique(maintain_order=True).to_list()
    logger.info(
        "Loaded %d assignments to %d models from %s",
        len(seq_to_model),
        len(model_names),
        path,
    )
    return seq_to_model, model_names
