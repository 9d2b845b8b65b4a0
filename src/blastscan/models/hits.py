"""
Pydantic models for converted blastn HSPs.

A HitRecord is one blastn HSP after the summary reader has validated it. It
keeps the coordinates exactly as blastn reported them and exposes the
profile-search view of the same hit (model frame always positive, strand
carried by the sequence) through properties.
"""

from __future__ import annotations

from typing import Literal, NamedTuple

from pydantic import BaseModel, Field

Strand = Literal["+", "-"]


class ScoreTriple(NamedTuple):
    """Key of the summed-score table."""

    model: str
    sequence: str
    strand: str


class HitRecord(BaseModel):
    """
    Single blastn HSP of a query sequence against a model sequence.

    Attributes:
        query_accession: Query (sequence) accession, from QACC
        query_length: Query length from QLEN, None if the line was absent
        sequence_length: Expected length of the query sequence
        subject_accession: Subject (model) accession, from HACC
        subject_length: Subject length from HLEN, None if absent
        hsp: HSP ordinal within the query/subject block
        bitscore: HSP bit score
        evalue: E-value, kept verbatim
        query_strand: Always "+" when present; the summary reader rejects "-"
        subject_strand: "+" or "-"
        query_range: (start, stop) on the query as reported
        subject_range: (start, stop) on the subject as reported
        insert_tokens: Raw INS descriptor, None if absent
        delete_tokens: Raw DEL descriptor, None if absent
        stop_tokens: Raw STOP descriptor, None if absent
    """

    query_accession: str
    query_length: int | None = Field(default=None, ge=0)
    sequence_length: int = Field(ge=0)
    subject_accession: str
    subject_length: int | None = Field(default=None, ge=0)
    hsp: int | None = None
    bitscore: float = Field(ge=0)
    evalue: str | None = None
    query_strand: Strand | None = None
    subject_strand: Strand
    query_range: tuple[int, int]
    subject_range: tuple[int, int]
    insert_tokens: str | None = None
    delete_tokens: str | None = None
    stop_tokens: str | None = None

    model_config = {"frozen": True}

    @property
    def model(self) -> str:
        return self.subject_accession

    @property
    def sequence(self) -> str:
        return self.query_accession

    @property
    def seq_strand(self) -> str:
        """
        Strand of the hit in profile-search terms.

        blastn reverse complements the subject and keeps the query positive;
        the emulated tool keeps the model positive and reverse complements
        the sequence. A minus-strand subject therefore becomes a minus-strand
        sequence hit.
        """
        return self.subject_strand

    @property
    def seq_start(self) -> int:
        if self.subject_strand == "+":
            return self.query_range[0]
        return self.query_range[1]

    @property
    def seq_stop(self) -> int:
        if self.subject_strand == "+":
            return self.query_range[1]
        return self.query_range[0]

    @property
    def model_start(self) -> int:
        if self.subject_strand == "+":
            return self.subject_range[0]
        return self.subject_range[1]

    @property
    def model_stop(self) -> int:
        if self.subject_strand == "+":
            return self.subject_range[1]
        return self.subject_range[0]

    @property
    def boundary_markers(self) -> str:
        """Two-character flag: '[' when the hit starts at position 1, ']' when it ends at the sequence end."""
        left = "[" if self.seq_start == 1 else "."
        right = "]" if self.seq_stop == self.sequence_length else "."
        return left + right

    @property
    def triple(self) -> ScoreTriple:
        return ScoreTriple(self.model, self.sequence, self.seq_strand)
