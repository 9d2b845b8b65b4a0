"""
Core conversion logic.

This module contains the summary reader, the classification and coverage
writers, indel reconstruction and seed planning.
"""

from blastscan.core.classification import FormatCompactor, ScoreAggregate, ScoreAggregator
from blastscan.core.coverage import CoverageFilter
from blastscan.core.indels import reconstruct_ungapped
from blastscan.core.parsers import SummaryRecordReader

__all__ = [
    "CoverageFilter",
    "FormatCompactor",
    "ScoreAggregate",
    "ScoreAggregator",
    "SummaryRecordReader",
    "reconstruct_ungapped",
]
