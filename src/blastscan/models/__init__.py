"""
Pydantic data models for blastscan.
"""

from blastscan.models.config import ConversionConfig
from blastscan.models.hits import HitRecord, ScoreTriple

__all__ = [
    "ConversionConfig",
    "HitRecord",
    "ScoreTriple",
]
