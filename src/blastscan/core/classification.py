"""
Classification-mode output: per-HSP lines and summed scores per triple.

The profile-search tool being emulated reports one hit per model, sequence
and strand, so its top-scoring line decides the winning model. blastn can
instead split one biological match into several HSPs. Conversion therefore
runs in two passes:

1. ScoreAggregator writes each HSP as a pretblout line and adds its score to
   the running sum for its (model, sequence, strand) triple.
2. FormatCompactor re-reads the pretblout once. The first line of each
   triple receives the full sum and every later line receives 0.0.

Two passes are required because a triple's total is not known until every
HSP in the summary has been seen.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path
from typing import TextIO

from blastscan.core.constants import (
    OVERLAP_PLACEHOLDER,
    TRMF3_HEADER,
    TRMF3_LINE_FORMAT,
    TRMF3_NUM_COLUMNS,
)
from blastscan.core.exceptions import PretbloutFormatError, UnknownScoreTripleError
from blastscan.models.hits import HitRecord, ScoreTriple

logger = logging.getLogger(__name__)


def format_trmf3_line(
    model: str,
    sequence: str,
    bitscore: float,
    start: int,
    stop: int,
    strand: str,
    bounds: str,
    seq_len: int | str,
    overlap: str = OVERLAP_PLACEHOLDER,
) -> str:
    """Format one cmscan --trmF3 style line (bounds without leading padding)."""
    return TRMF3_LINE_FORMAT % (
        model,
        sequence,
        bitscore,
        start,
        stop,
        strand,
        f"    {bounds}",
        overlap,
        seq_len,
    )


class ScoreAggregate:
    """
    Summed bit scores keyed by (model, sequence, strand).

    Each entry is handed out once: ``take`` returns the current sum and
    zeroes it, so later reads of the same triple see 0.0.
    """

    def __init__(self) -> None:
        self._sums: dict[ScoreTriple, float] = {}

    def add(self, triple: ScoreTriple, bitscore: float) -> None:
        self._sums[triple] = self._sums.get(triple, 0.0) + bitscore

    def take(self, triple: ScoreTriple) -> float:
        """
        Return the sum for ``triple`` and reset it to zero.

        Raises:
            KeyError: If the triple was never added.
        """
        value = self._sums[triple]
        self._sums[triple] = 0.0
        return value

    def get(self, triple: ScoreTriple) -> float | None:
        return self._sums.get(triple)

    def __contains__(self, triple: object) -> bool:
        return triple in self._sums

    def __len__(self) -> int:
        return len(self._sums)

    def __iter__(self) -> Iterator[ScoreTriple]:
        return iter(self._sums)


class ScoreAggregator:
    """
    First pass: write per-HSP pretblout lines and accumulate scores.

    Example:
        >>> with path.open("w") as fh:
        ...     aggregator = ScoreAggregator(fh)
        ...     for hit in reader:
        ...         aggregator.add(hit)
        >>> aggregator.aggregate
    """

    def __init__(self, handle: TextIO, aggregate: ScoreAggregate | None = None) -> None:
        self.handle = handle
        self.aggregate = aggregate if aggregate is not None else ScoreAggregate()
        self.lines_written = 0
        self.handle.write(TRMF3_HEADER)

    def add(self, hit: HitRecord) -> None:
        self.handle.write(
            format_trmf3_line(
                hit.model,
                hit.sequence,
                hit.bitscore,
                hit.seq_start,
                hit.seq_stop,
                hit.seq_strand,
                hit.boundary_markers,
                hit.sequence_length,
            )
        )
        self.aggregate.add(hit.triple, hit.bitscore)
        self.lines_written += 1


class FormatCompactor:
    """
    Second pass: substitute summed scores into the pretblout lines.

    Comment lines are copied verbatim. Data lines keep every column except
    the score, which becomes the triple's sum on its first line and 0.0
    afterwards.
    """

    def __init__(self, aggregate: ScoreAggregate) -> None:
        self.aggregate = aggregate

    def compact(self, pretblout_path: Path, out: TextIO) -> int:
        """
        Write the tblout for ``pretblout_path`` to ``out``.

        Returns:
            Number of data lines written.

        Raises:
            PretbloutFormatError: If a data line does not have 9 columns.
            UnknownScoreTripleError: If a line's triple has no summed score.
        """
        path = str(pretblout_path)
        nwritten = 0
        with pretblout_path.open("r") as handle:
            for line_num, raw in enumerate(handle, start=1):
                line = raw.rstrip("\n")
                if line.startswith("#"):
                    out.write(line + "\n")
                    continue

                tokens = line.split()
                if len(tokens) != TRMF3_NUM_COLUMNS:
                    raise PretbloutFormatError(
                        path,
                        line_num,
                        line,
                        f"expected {TRMF3_NUM_COLUMNS} whitespace-delimited tokens, "
                        f"got {len(tokens)}",
                    )
                model, seq, _bitsc, start, stop, strand, bounds, ovp, seqlen = tokens
                triple = ScoreTriple(model, seq, strand)
                if triple not in self.aggregate:
                    raise UnknownScoreTripleError(model, seq, strand, line_num, line)
                try:
                    start_pos, stop_pos = int(start), int(stop)
                except ValueError as e:
                    raise PretbloutFormatError(
                        path, line_num, line, "start and end must be integers"
                    ) from e

                out.write(
                    format_trmf3_line(
                        model,
                        seq,
                        self.aggregate.take(triple),
                        start_pos,
                        stop_pos,
                        strand,
                        bounds,
                        seqlen,
                        overlap=ovp,
                    )
                )
                nwritten += 1

        logger.debug("Compacted %d pretblout lines from %s", nwritten, path)
        return nwritten
