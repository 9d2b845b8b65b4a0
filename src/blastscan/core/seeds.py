"""
Plan which parts of each sequence still need profile alignment.

The longest ungapped piece of a sequence's top blastn hit is trusted as a
seed. Only the flanks outside the seed, each extended ``overhang``
nucleotides into it, are realigned. When the two flanks would overlap the
whole sequence is realigned instead.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import NamedTuple

from blastscan.core.constants import DEFAULT_OVERHANG, INDEL_NUM_COLUMNS
from blastscan.core.coords import Segment
from blastscan.core.exceptions import CoordsFormatError, IndelError, IndelFileFormatError
from blastscan.core.indels import reconstruct_ungapped

logger = logging.getLogger(__name__)


class Seed(NamedTuple):
    """Longest ungapped segment of a sequence's top hit."""

    model_segment: Segment
    sequence_segment: Segment


class Subsequence(NamedTuple):
    """A region of a source sequence to fetch and realign."""

    name: str
    start: int
    stop: int
    source: str

    @property
    def length(self) -> int:
        return self.stop - self.start + 1


@dataclass
class SeedPlan:
    """Seeds and subsequences planned from one indel file."""

    model_name: str
    seeds: dict[str, Seed] = field(default_factory=dict)
    subsequences: list[Subsequence] = field(default_factory=list)
    seq_to_subseqs: dict[str, list[str]] = field(default_factory=dict)

    @property
    def fully_covered(self) -> list[str]:
        """Sequences whose seed spans the whole sequence."""
        return [name for name in self.seeds if not self.seq_to_subseqs.get(name)]


def plan_subsequences(
    seq_name: str,
    seq_len: int,
    seed_segment: Segment,
    overhang: int = DEFAULT_OVERHANG,
) -> list[Subsequence]:
    """
    Return the flanking regions of ``seq_name`` to realign around a seed.

    Example:
        >>> plan_subsequences("S1", 1000, Segment(201, 800, "+"), overhang=100)
        [Subsequence(name='S1/1-300', ...), Subsequence(name='S1/701-1000', ...)]
    """
    start, stop = seed_segment.start, seed_segment.stop
    if start == 1 and stop == seq_len:
        return []

    stop_5p = start + overhang - 1
    start_3p = stop - overhang + 1
    if stop_5p > start_3p:
        return [Subsequence(f"{seq_name}/1-{seq_len}", 1, seq_len, seq_name)]

    subseqs = []
    if start != 1:
        subseqs.append(Subsequence(f"{seq_name}/1-{stop_5p}", 1, stop_5p, seq_name))
    if stop != seq_len:
        subseqs.append(
            Subsequence(f"{seq_name}/{start_3p}-{seq_len}", start_3p, seq_len, seq_name)
        )
    return subseqs


def plan_seeds_from_indel_file(
    indel_path: Path,
    seq_lengths: Mapping[str, int],
    model_name: str,
    overhang: int = DEFAULT_OVERHANG,
) -> SeedPlan:
    """
    Read a coverage indel file and plan seeds and subsequences.

    Only the first line for each sequence is used; lines are written in
    blastn hit order so this is the top hit.

    Raises:
        IndelFileFormatError: If a line is malformed, names an unexpected
            model or sequence, or carries inconsistent indel tokens.
    """
    path = str(indel_path)
    plan = SeedPlan(model_name=model_name)

    with indel_path.open("r") as handle:
        for line_num, raw in enumerate(handle, start=1):
            line = raw.rstrip("\n")
            if line.startswith("#"):
                continue
            tokens = line.split()
            if len(tokens) != INDEL_NUM_COLUMNS:
                raise IndelFileFormatError(
                    path,
                    line_num,
                    line,
                    f"expected {INDEL_NUM_COLUMNS} tokens, got {len(tokens)}",
                )
            mdl_name, seq_name, mdl_coords, _mdl_len, seq_coords, _seq_len, ins, dels = tokens
            if seq_name not in seq_lengths:
                raise IndelFileFormatError(
                    path, line_num, line, f"unrecognized sequence {seq_name}"
                )
            if mdl_name != model_name:
                raise IndelFileFormatError(
                    path,
                    line_num,
                    line,
                    f"unexpected model {mdl_name} (expected {model_name})",
                )
            if seq_name in plan.seeds:
                continue

            try:
                mdl_span = Segment.parse(mdl_coords)
                seq_span = Segment.parse(seq_coords)
            except CoordsFormatError as e:
                raise IndelFileFormatError(path, line_num, line, e.message) from e

            try:
                mdl_seed, seq_seed = reconstruct_ungapped(mdl_span, seq_span, ins, dels).longest()
            except IndelError as e:
                raise IndelFileFormatError(path, line_num, line, e.message) from e
            plan.seeds[seq_name] = Seed(mdl_seed, seq_seed)

            subseqs = plan_subsequences(seq_name, seq_lengths[seq_name], seq_seed, overhang)
            plan.subsequences.extend(subseqs)
            plan.seq_to_subseqs[seq_name] = [s.name for s in subseqs]

    logger.info(
        "Planned %d seeds and %d subsequences for model %s from %s",
        len(plan.seeds),
        len(plan.subsequences),
        model_name,
        path,
    )
    return plan
