"""
Coordinate segment helpers.

Segments are written as ``<start>..<stop>:<strand>`` (e.g. ``5..7513:+``) and
multi-segment coordinates join segments with commas. This is the notation the
coverage indel files use and the one the seed planner reads back.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from typing import NamedTuple

from blastscan.core.exceptions import CoordsFormatError

_SEGMENT_PATTERN = re.compile(r"^<?(\d+)\.\.>?(\d+):([+-])$")


class Segment(NamedTuple):
    """One contiguous span in a single coordinate frame."""

    start: int
    stop: int
    strand: str

    @classmethod
    def parse(cls, token: str) -> Segment:
        """
        Parse a single coords segment token.

        Leading ``<`` and ``>`` truncation markers are accepted and dropped.

        Raises:
            CoordsFormatError: If the token is not a valid segment.
        """
        match = _SEGMENT_PATTERN.match(token)
        if match is None:
            raise CoordsFormatError(token)
        return cls(int(match.group(1)), int(match.group(2)), match.group(3))

    @classmethod
    def create(cls, start: int, stop: int, strand: str) -> Segment:
        """Create a validated segment."""
        if start < 1:
            raise CoordsFormatError(str(start), "start is invalid")
        if stop < 1:
            raise CoordsFormatError(str(stop), "stop is invalid")
        if strand not in ("+", "-"):
            raise CoordsFormatError(strand, "strand is invalid")
        return cls(start, stop, strand)

    @property
    def length(self) -> int:
        """Number of positions covered; an empty span such as 11..10:+ is 0."""
        step = 1 if self.strand == "+" else -1
        if self.stop == self.start - step:
            return 0
        return abs(self.stop - self.start) + 1

    def __str__(self) -> str:
        return f"{self.start}..{self.stop}:{self.strand}"


def format_coords(segments: Iterable[Segment]) -> str:
    """Join segments into a comma-separated coords string."""
    return ",".join(str(s) for s in segments)


def parse_coords(coords: str) -> list[Segment]:
    """Split a comma-separated coords string into segments."""
    if not coords:
        raise CoordsFormatError(coords, "coords string is empty")
    return [Segment.parse(tok) for tok in coords.split(",")]


def coords_length(segments: Iterable[Segment]) -> int:
    return sum(s.length for s in segments)


def max_length_segment(segments: Sequence[Segment]) -> Segment:
    """
    Return the longest segment, preferring the earliest on ties.

    Raises:
        CoordsFormatError: If no segments are given.
    """
    if not segments:
        raise CoordsFormatError("", "no segments to choose from")
    best = segments[0]
    for segment in segments[1:]:
        if segment.length > best.length:
            best = segment
    return best
