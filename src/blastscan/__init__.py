"""
blastscan: blastn hit summaries as profile-search hit tables.

Converts the per-HSP summaries of a blastn search into cmscan and cmsearch
style tblout files so an annotation pipeline can use blastn as a fast
stand-in for covariance-model search.
"""

__version__ = "0.1.0"

from blastscan.core.conversion import convert_for_classification, convert_for_coverage
from blastscan.core.parsers import SummaryRecordReader
from blastscan.models.config import ConversionConfig
from blastscan.models.hits import HitRecord

__all__ = [
    "ConversionConfig",
    "HitRecord",
    "SummaryRecordReader",
    "__version__",
    "convert_for_classification",
    "convert_for_coverage",
]
