"""
Coverage-determination output.

After classification each sequence is assigned to one model. The coverage
pass keeps only the HSPs of a sequence against its assigned model and
writes, per model, a cmsearch ``--tblout`` style hit table plus an indel
file that later lets the seed planner rebuild the ungapped alignment.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TextIO

from blastscan.core.constants import BLASTNULL, COVERAGE_TBLOUT_FORMAT, INDEL_LINE_FORMAT
from blastscan.core.coords import Segment
from blastscan.core.exceptions import MissingSubjectLengthError, UnexpectedModelError
from blastscan.models.hits import HitRecord

logger = logging.getLogger(__name__)


def format_coverage_tblout_line(hit: HitRecord) -> str:
    return COVERAGE_TBLOUT_FORMAT % (
        hit.sequence,
        hit.model,
        hit.model_start,
        hit.model_stop,
        hit.seq_start,
        hit.seq_stop,
        hit.seq_strand,
        hit.bitscore,
        hit.evalue if hit.evalue is not None else "-",
    )


def format_indel_line(hit: HitRecord) -> str:
    """
    Format the indel line of a coverage hit.

    Model coordinates are always written on the + strand; sequence
    coordinates carry the hit strand.

    Raises:
        MissingSubjectLengthError: If the HSP had no HLEN line.
    """
    if hit.subject_length is None:
        raise MissingSubjectLengthError(hit.model, hit.sequence, hit.hsp)
    return INDEL_LINE_FORMAT % (
        hit.model,
        hit.sequence,
        Segment.create(hit.model_start, hit.model_stop, "+"),
        hit.subject_length,
        Segment.create(hit.seq_start, hit.seq_stop, hit.seq_strand),
        hit.sequence_length,
        hit.insert_tokens or BLASTNULL,
        hit.delete_tokens or BLASTNULL,
    )


class CoverageFilter:
    """
    Route HSPs of assigned sequence/model pairs to per-model outputs.

    Args:
        seq_to_model: Model each sequence was classified to.
        tblout_handles: Open hit-table handle per model name.
        indel_handles: Open indel handle per model name.
    """

    def __init__(
        self,
        seq_to_model: Mapping[str, str],
        tblout_handles: Mapping[str, TextIO],
        indel_handles: Mapping[str, TextIO],
    ) -> None:
        self.seq_to_model = seq_to_model
        self.tblout_handles = tblout_handles
        self.indel_handles = indel_handles
        self.kept = 0
        self.dropped = 0

    def add(self, hit: HitRecord) -> bool:
        """
        Write ``hit`` if its sequence is assigned to its model.

        Returns:
            True if the hit was written, False if it was dropped.

        Raises:
            UnexpectedModelError: If the assigned model has no output handles.
            MissingSubjectLengthError: If the hit has no subject length.
        """
        assigned = self.seq_to_model.get(hit.sequence)
        if assigned is None or assigned != hit.model:
            self.dropped += 1
            return False
        if assigned not in self.tblout_handles or assigned not in self.indel_handles:
            raise UnexpectedModelError(assigned, hit.sequence)

        indel_line = format_indel_line(hit)
        self.tblout_handles[assigned].write(format_coverage_tblout_line(hit))
        self.indel_handles[assigned].write(indel_line)
        self.kept += 1
        return True
