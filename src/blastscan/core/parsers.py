"""
Streaming parser for blastn summary files.

The summarizer (parse_blast.pl --program n) turns blastn output into a flat
stream of ``KEY<TAB>VALUE`` lines, one query/subject block at a time, each
block closed by an ``END_MATCH`` line:

    QACC      query accession
    QDEF      ignored
    QLEN      query length
    MATCH     ignored
    HACC      subject accession
    HDEF      ignored
    SLEN      ignored
    --- per HSP ---
    HSP       HSP ordinal
    BITSCORE  bit score
    RAWSCORE  ignored
    EVALUE    e-value
    HLEN      subject length
    IDENT     ignored
    GAPS      ignored
    QSTRAND   query strand
    SSTRAND   subject strand
    STOP      stop codon descriptor
    DEL       delete descriptor
    MAXDE     ignored
    INS       insert descriptor
    MAXIN     ignored
    QRANGE    query range
    SRANGE    subject range, closes the HSP
    --- per HSP ---
    END_MATCH

Fields are only accepted once their predecessors have been seen. The reader
never attempts to recover from an out-of-order or unparsable line.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import ClassVar

from blastscan.core.constants import (
    BITSCORE_TOLERANCE,
    BLASTNULL,
    DEFAULT_MIN_BITSCORE,
    END_MATCH,
    IGNORED_SUMMARY_KEYS,
    NO_HIT_RANGE,
)
from blastscan.core.exceptions import (
    EmptySummaryFileError,
    FieldOrderError,
    FieldValueError,
    MalformedSummaryLineError,
    QueryLengthMismatchError,
    QueryStrandError,
    UnrecognizedSequenceError,
)
from blastscan.models.hits import HitRecord

logger = logging.getLogger(__name__)


class SummaryField(str, Enum):
    """Keys of the summary stream that the converter stores."""

    QACC = "QACC"
    QLEN = "QLEN"
    HACC = "HACC"
    HLEN = "HLEN"
    HSP = "HSP"
    BITSCORE = "BITSCORE"
    EVALUE = "EVALUE"
    QSTRAND = "QSTRAND"
    SSTRAND = "SSTRAND"
    STOP = "STOP"
    DEL = "DEL"
    INS = "INS"
    QRANGE = "QRANGE"
    SRANGE = "SRANGE"


F = SummaryField

_HSP_CORE = (F.QACC, F.HACC, F.HSP, F.BITSCORE)
_HSP_STRANDED = (*_HSP_CORE, F.QSTRAND, F.SSTRAND)

# Fields that must already be present when each key is read.
# QRANGE and SRANGE only need QACC: the summarizer sometimes writes ranges
# for blocks whose HSP lines were never printed.
FIELD_PREREQUISITES: dict[SummaryField, tuple[SummaryField, ...]] = {
    F.QACC: (),
    F.QLEN: (F.QACC,),
    F.HACC: (F.QACC,),
    F.HLEN: (F.QACC, F.HACC),
    F.HSP: (F.QACC, F.HACC),
    F.BITSCORE: (F.QACC, F.HACC, F.HSP),
    F.EVALUE: _HSP_CORE,
    F.QSTRAND: _HSP_CORE,
    F.SSTRAND: _HSP_CORE,
    F.STOP: _HSP_STRANDED,
    F.DEL: _HSP_STRANDED,
    F.INS: _HSP_STRANDED,
    F.QRANGE: (F.QACC,),
    F.SRANGE: (F.QACC,),
}

# Retain sets for the two kinds of reset
RETAIN_QUERY_AND_SUBJECT = frozenset({F.QACC, F.HACC})
RETAIN_QUERY = frozenset({F.QACC})


class HitAccumulator:
    """
    Values of the HSP currently being read.

    Insertion order of ``values`` is the order in which fields were accepted,
    which doubles as the checklist consulted before accepting a new field.
    """

    def __init__(self) -> None:
        self.values: dict[SummaryField, object] = {}

    def has(self, field: SummaryField) -> bool:
        return field in self.values

    def get(self, field: SummaryField) -> object | None:
        return self.values.get(field)

    def missing(self, field: SummaryField) -> list[SummaryField]:
        """Prerequisites of ``field`` that have not been seen yet."""
        return [p for p in FIELD_PREREQUISITES[field] if p not in self.values]

    def set(self, field: SummaryField, value: object) -> None:
        self.values[field] = value

    def reset(self, retain: frozenset[SummaryField]) -> None:
        """Drop every field not in ``retain``."""
        self.values = {k: v for k, v in self.values.items() if k in retain}

    @property
    def seen(self) -> tuple[SummaryField, ...]:
        return tuple(self.values)


@dataclass
class ReaderStats:
    """Counts collected while reading one summary stream."""

    lines: int = 0
    hsp_blocks: int = 0
    emitted: int = 0
    below_threshold: int = 0
    skipped_ranges: int = 0


class SummaryRecordReader:
    """
    Stream validated HitRecords from a blastn summary file.

    A record is produced for every SRANGE line that closes an HSP with both
    ranges present and a bit score at or above ``min_bitscore``.

    Example:
        >>> reader = SummaryRecordReader(Path("r1.blastn.summary.txt"), {"SEQ1": 1000})
        >>> for hit in reader:
        ...     print(hit.model, hit.sequence, hit.bitscore)
    """

    INTEGER_PATTERN: ClassVar[re.Pattern] = re.compile(r"^\d+$")
    BITSCORE_PATTERN: ClassVar[re.Pattern] = re.compile(r"^\d+(?:\.\d+(?:e[+-]\d+)?)?$")
    STRAND_PATTERN: ClassVar[re.Pattern] = re.compile(r"^[+-]$")
    RANGE_PATTERN: ClassVar[re.Pattern] = re.compile(r"^(\d+)\.\.(\d+)$")

    def __init__(
        self,
        summary_path: Path,
        seq_lengths: Mapping[str, int],
        min_bitscore: float = DEFAULT_MIN_BITSCORE,
    ) -> None:
        """
        Initialize the reader.

        Args:
            summary_path: Summary file written by the blastn summarizer.
            seq_lengths: Expected length of every query sequence.
            min_bitscore: Minimum bit score for an HSP to be emitted.

        Raises:
            EmptySummaryFileError: If the file is missing or empty.
        """
        self.summary_path = summary_path
        self.seq_lengths = seq_lengths
        self.min_bitscore = min_bitscore
        self.stats = ReaderStats()
        self._validate_path()

    def _validate_path(self) -> None:
        if not self.summary_path.is_file() or self.summary_path.stat().st_size == 0:
            raise EmptySummaryFileError(str(self.summary_path))

    def __iter__(self) -> Iterator[HitRecord]:
        with self.summary_path.open("r") as handle:
            yield from self.iter_lines(handle)

    def iter_lines(self, lines: Iterable[str]) -> Iterator[HitRecord]:
        """Parse an iterable of summary lines, yielding emitted records."""
        self.stats = ReaderStats()
        acc = HitAccumulator()
        threshold = self.min_bitscore - BITSCORE_TOLERANCE

        for line_num, raw in enumerate(lines, start=1):
            line = raw.rstrip("\n")
            self.stats.lines = line_num

            if line == END_MATCH:
                # a query may hit several subjects, keep only the query
                acc.reset(RETAIN_QUERY)
                continue

            tokens = line.split("\t")
            if len(tokens) != 2:
                raise MalformedSummaryLineError(
                    str(self.summary_path), line_num, line, len(tokens)
                )
            key, value = tokens

            try:
                field = SummaryField(key)
            except ValueError:
                if key not in IGNORED_SUMMARY_KEYS:
                    logger.debug("Ignoring unknown summary key %s at line %d", key, line_num)
                continue

            missing = acc.missing(field)
            if missing:
                raise FieldOrderError(
                    str(self.summary_path),
                    line_num,
                    line,
                    key,
                    [m.value for m in missing],
                )

            if field is F.SRANGE:
                hit = self._close_hsp(acc, value, threshold, line_num, line)
                acc.reset(RETAIN_QUERY_AND_SUBJECT)
                if hit is not None:
                    self.stats.emitted += 1
                    yield hit
            else:
                self._accept(acc, field, value, line_num, line)

        logger.info(
            "Read %d summary lines from %s: %d HSPs, %d converted, "
            "%d below %.1f bits, %d ranges skipped",
            self.stats.lines,
            self.summary_path,
            self.stats.hsp_blocks,
            self.stats.emitted,
            self.stats.below_threshold,
            self.min_bitscore,
            self.stats.skipped_ranges,
        )

    def _accept(
        self,
        acc: HitAccumulator,
        field: SummaryField,
        value: str,
        line_num: int,
        line: str,
    ) -> None:
        """Validate and store one non-terminal field."""
        path = str(self.summary_path)

        if field is F.QACC:
            if value not in self.seq_lengths:
                raise UnrecognizedSequenceError(path, line_num, line, value)
            acc.set(field, value)

        elif field is F.QLEN:
            qlen = self._parse_int(field, value, line_num, line)
            expected = self.seq_lengths[acc.get(F.QACC)]
            if qlen != expected:
                raise QueryLengthMismatchError(
                    path, line_num, line, str(acc.get(F.QACC)), qlen, expected
                )
            acc.set(field, qlen)

        elif field in (F.HACC, F.EVALUE):
            acc.set(field, value)

        elif field in (F.HLEN, F.HSP):
            acc.set(field, self._parse_int(field, value, line_num, line))
            if field is F.HSP:
                self.stats.hsp_blocks += 1

        elif field is F.BITSCORE:
            if not self.BITSCORE_PATTERN.match(value):
                raise FieldValueError(path, line_num, line, field.value, value)
            acc.set(field, float(value))

        elif field in (F.QSTRAND, F.SSTRAND):
            if not self.STRAND_PATTERN.match(value):
                raise FieldValueError(path, line_num, line, field.value, value)
            if field is F.QSTRAND and value != "+":
                raise QueryStrandError(path, line_num, line, value)
            acc.set(field, value)

        elif field in (F.STOP, F.DEL, F.INS):
            if value not in ("", BLASTNULL):
                acc.set(field, value)

        elif field is F.QRANGE:
            # no-hit blocks and ranges without a BITSCORE are known
            # summarizer quirks and are passed over silently
            if value == NO_HIT_RANGE or not acc.has(F.BITSCORE):
                self.stats.skipped_ranges += 1
                return
            acc.set(field, self._parse_range(field, value, line_num, line))

    def _close_hsp(
        self,
        acc: HitAccumulator,
        value: str,
        threshold: float,
        line_num: int,
        line: str,
    ) -> HitRecord | None:
        """Handle an SRANGE line; return a record if the HSP qualifies."""
        if value == NO_HIT_RANGE or not acc.has(F.BITSCORE):
            self.stats.skipped_ranges += 1
            return None

        subject_range = self._parse_range(F.SRANGE, value, line_num, line)
        bitscore = acc.get(F.BITSCORE)
        if bitscore < threshold:
            self.stats.below_threshold += 1
            return None

        missing = [f.value for f in (F.QRANGE, F.SSTRAND) if not acc.has(f)]
        if missing:
            raise FieldOrderError(str(self.summary_path), line_num, line, "SRANGE", missing)

        return HitRecord(
            query_accession=acc.get(F.QACC),
            query_length=acc.get(F.QLEN),
            sequence_length=self.seq_lengths[acc.get(F.QACC)],
            subject_accession=acc.get(F.HACC),
            subject_length=acc.get(F.HLEN),
            hsp=acc.get(F.HSP),
            bitscore=bitscore,
            evalue=acc.get(F.EVALUE),
            query_strand=acc.get(F.QSTRAND),
            subject_strand=acc.get(F.SSTRAND),
            query_range=acc.get(F.QRANGE),
            subject_range=subject_range,
            insert_tokens=acc.get(F.INS),
            delete_tokens=acc.get(F.DEL),
            stop_tokens=acc.get(F.STOP),
        )

    def _parse_int(self, field: SummaryField, value: str, line_num: int, line: str) -> int:
        if not self.INTEGER_PATTERN.match(value):
            raise FieldValueError(str(self.summary_path), line_num, line, field.value, value)
        return int(value)

    def _parse_range(
        self, field: SummaryField, value: str, line_num: int, line: str
    ) -> tuple[int, int]:
        match = self.RANGE_PATTERN.match(value)
        if match is None:
            raise FieldValueError(str(self.summary_path), line_num, line, field.value, value)
        return int(match.group(1)), int(match.group(2))
