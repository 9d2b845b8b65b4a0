"""
Rebuild the ungapped pieces of a blastn alignment from its indel tokens.

The summarizer describes each gap with a token ``Q<seqpos>:S<mdlpos><op><len>``
where ``op`` is ``+`` for an insert (extra sequence residues after
``seqpos``) and ``-`` for a delete (model residues missing after
``seqpos``). Walking inserts and deletes in alignment order splits the HSP
into segments that align without gaps in both frames.
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import NamedTuple

from blastscan.core.constants import BLASTNULL
from blastscan.core.coords import Segment, max_length_segment
from blastscan.core.exceptions import (
    IndelOrderError,
    IndelTokenError,
    SegmentLengthMismatchError,
)

logger = logging.getLogger(__name__)

_TOKEN_PATTERN = re.compile(r"^Q(\d+):S(\d+)([+-])(\d+)$")


class IndelKind(str, Enum):
    INSERT = "+"
    DELETE = "-"


class IndelToken(NamedTuple):
    """One parsed insert or delete."""

    seq_pos: int
    mdl_pos: int
    length: int
    kind: IndelKind
    raw: str

    def __str__(self) -> str:
        return self.raw


class UngappedAlignment(NamedTuple):
    """Parallel ungapped segments in model and sequence coordinates."""

    model_segments: list[Segment]
    sequence_segments: list[Segment]

    def longest(self) -> tuple[Segment, Segment]:
        """
        Return the longest ungapped segment in each frame.

        Raises:
            SegmentLengthMismatchError: If the two longest segments differ in length.
        """
        mdl = max_length_segment(self.model_segments)
        seq = max_length_segment(self.sequence_segments)
        if mdl.length != seq.length:
            raise SegmentLengthMismatchError(
                "for the longest segment",
                (mdl.start, mdl.stop),
                (seq.start, seq.stop),
            )
        return mdl, seq


def parse_indel_token(token: str, kind: IndelKind) -> IndelToken:
    """
    Parse one ``Q<seq>:S<mdl><op><len>`` token.

    Raises:
        IndelTokenError: If the token is malformed or its op does not match ``kind``.
    """
    match = _TOKEN_PATTERN.match(token)
    if match is None:
        raise IndelTokenError(token, "not of the form Q<seq>:S<mdl><+|-><len>")
    seq_pos, mdl_pos, op, length = match.groups()
    if op != kind.value:
        expected = "insert" if kind is IndelKind.INSERT else "delete"
        raise IndelTokenError(token, f"expected {expected} token with {kind.value!r}")
    return IndelToken(int(seq_pos), int(mdl_pos), int(length), kind, token)


def split_indel_tokens(value: str | None, kind: IndelKind) -> list[IndelToken]:
    """Parse a ``;``-separated token string. None, empty and BLASTNULL give []."""
    if value is None or value in ("", BLASTNULL):
        return []
    parts = value.split(";")
    if parts[-1] == "":
        parts.pop()
    return [parse_indel_token(part, kind) for part in parts]


def _span(start: int, stop: int) -> Segment:
    return Segment(start, stop, "+")


def reconstruct_ungapped(
    model_span: Segment,
    sequence_span: Segment,
    insert_tokens: str | None,
    delete_tokens: str | None,
) -> UngappedAlignment:
    """
    Split an HSP into its ungapped segments.

    Args:
        model_span: Aligned region of the model, on the + strand.
        sequence_span: Aligned region of the sequence, on the + strand.
        insert_tokens: Raw INS descriptor (None or BLASTNULL for no inserts).
        delete_tokens: Raw DEL descriptor (None or BLASTNULL for no deletes).

    Returns:
        UngappedAlignment with one model and one sequence segment per piece.

    Raises:
        IndelError: If a token is malformed, tokens cannot be ordered, a
            span is not on the + strand, or segment lengths disagree.
    """
    for name, span in (("model", model_span), ("sequence", sequence_span)):
        if span.strand != "+":
            raise IndelTokenError(str(span), f"{name} span must be on the + strand")

    inserts = split_indel_tokens(insert_tokens, IndelKind.INSERT)
    deletes = split_indel_tokens(delete_tokens, IndelKind.DELETE)

    mdl_segments: list[Segment] = []
    seq_segments: list[Segment] = []
    mdl_cursor = model_span.start
    seq_cursor = sequence_span.start
    ins_idx = 0
    del_idx = 0

    while ins_idx < len(inserts) or del_idx < len(deletes):
        ins = inserts[ins_idx] if ins_idx < len(inserts) else None
        dlt = deletes[del_idx] if del_idx < len(deletes) else None

        if ins is not None and dlt is not None:
            if ins.seq_pos == dlt.seq_pos and ins.mdl_pos == dlt.mdl_pos:
                raise IndelOrderError(ins.raw, dlt.raw, "have identical positions")
            if ins.seq_pos < dlt.seq_pos and ins.mdl_pos <= dlt.mdl_pos:
                take_insert = True
            elif dlt.seq_pos < ins.seq_pos and dlt.mdl_pos <= ins.mdl_pos:
                take_insert = False
            else:
                raise IndelOrderError(ins.raw, dlt.raw, "cannot be ordered")
        else:
            take_insert = ins is not None

        token = ins if take_insert else dlt
        mdl_seg = _span(mdl_cursor, token.mdl_pos)
        seq_seg = _span(seq_cursor, token.seq_pos)
        if token.mdl_pos - mdl_cursor != token.seq_pos - seq_cursor:
            raise SegmentLengthMismatchError(
                f"before {token.raw}",
                (mdl_seg.start, mdl_seg.stop),
                (seq_seg.start, seq_seg.stop),
            )
        mdl_segments.append(mdl_seg)
        seq_segments.append(seq_seg)

        if take_insert:
            mdl_cursor = token.mdl_pos + 1
            seq_cursor = token.seq_pos + token.length + 1
            ins_idx += 1
        else:
            mdl_cursor = token.mdl_pos + token.length + 1
            seq_cursor = token.seq_pos + 1
            del_idx += 1

    final_mdl = (mdl_cursor, model_span.stop)
    final_seq = (seq_cursor, sequence_span.stop)
    if (
        mdl_cursor > model_span.stop
        or seq_cursor > sequence_span.stop
        or model_span.stop - mdl_cursor != sequence_span.stop - seq_cursor
    ):
        raise SegmentLengthMismatchError("at the final segment", final_mdl, final_seq)
    mdl_segments.append(_span(*final_mdl))
    seq_segments.append(_span(*final_seq))

    logger.debug(
        "Reconstructed %d ungapped segments from %d inserts and %d deletes",
        len(mdl_segments),
        len(inserts),
        len(deletes),
    )
    return UngappedAlignment(mdl_segments, seq_segments)
