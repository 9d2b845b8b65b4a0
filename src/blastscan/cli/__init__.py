"""
CLI commands for blastscan.

Provides the command-line interface for classification and coverage
conversion and for seed planning.
"""

__all__ = ["convert", "main", "seeds", "utils"]
