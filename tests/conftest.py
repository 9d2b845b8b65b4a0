"""
Shared pytest fixtures for blastscan tests.

Provides small blastn summary streams, collaborator tables and temporary
directories for unit and integration testing.
"""

from __future__ import annotations

import tempfile
from pathlib import Path

import pytest

from tests.factories import SummaryLine, block_header, hsp_lines, summary_text


# =============================================================================
# Summary Stream Fixtures
# =============================================================================


@pytest.fixture
def seq_lengths() -> dict[str, int]:
    """Expected lengths of the query sequences."""
    return {"SEQ1": 1000, "SEQ2": 500}


@pytest.fixture
def summary_lines() -> list[SummaryLine]:
    """
    SEQ1 has two MODEL1 HSPs (120.5 and 80.2) and one minus-strand MODEL2
    HSP. SEQ2 has a below-threshold and a full-length MODEL1 HSP.
    """
    return [
        *block_header("SEQ1", 1000, "MODEL1"),
        *hsp_lines(1, "120.5", "1..400", "11..410", evalue="1e-30"),
        *hsp_lines(2, "80.2", "500..1000", "600..1100", evalue="2e-18"),
        "END_MATCH",
        ("HACC", "MODEL2"),
        *hsp_lines(1, "60.0", "100..300", "900..700", sstrand="-", evalue="3e-10"),
        "END_MATCH",
        *block_header("SEQ2", 500, "MODEL1"),
        *hsp_lines(1, "30.0", "1..100", "1..100", evalue="0.5"),
        *hsp_lines(2, "400.0", "1..500", "101..600", evalue="0.0"),
        "END_MATCH",
    ]


@pytest.fixture
def summary_file(temp_dir: Path, summary_lines: list[SummaryLine]) -> Path:
    """Summary stream written to disk."""
    path = temp_dir / "r1.blastn.summary.txt"
    path.write_text(summary_text(summary_lines))
    return path


@pytest.fixture
def seq_lengths_file(temp_dir: Path, seq_lengths: dict[str, int]) -> Path:
    """Sequence-length table as TSV."""
    path = temp_dir / "seq_lengths.tsv"
    rows = ["seq_name\tlength"] + [f"{k}\t{v}" for k, v in seq_lengths.items()]
    path.write_text("\n".join(rows) + "\n")
    return path


@pytest.fixture
def assignments_file(temp_dir: Path) -> Path:
    """SEQ1 and SEQ2 both assigned to MODEL1."""
    path = temp_dir / "assignments.tsv"
    path.write_text("seq_name\tmodel_name\nSEQ1\tMODEL1\nSEQ2\tMODEL1\n")
    return path


# =============================================================================
# Temporary File Fixtures
# =============================================================================


@pytest.fixture
def temp_dir() -> Path:
    """Temporary directory that is cleaned up after tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)
