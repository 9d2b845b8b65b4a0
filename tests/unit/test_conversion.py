"""Unit tests for the conversion drivers."""

from __future__ import annotations

from pathlib import Path

import pytest

from blastscan.core.conversion import (
    convert_for_classification,
    convert_for_coverage,
    output_path,
)
from blastscan.core.exceptions import (
    EmptySummaryFileError,
    MalformedSummaryLineError,
    MissingSubjectLengthError,
    UnexpectedModelError,
)
from blastscan.models.config import ConversionConfig
from tests.factories import block_header, hsp_lines, summary_text


def data_rows(path: Path) -> list[list[str]]:
    return [line.split() for line in path.read_text().splitlines() if not line.startswith("#")]


class TestOutputPath:
    def test_suffix_appended_to_root(self, temp_dir):
        assert output_path(temp_dir / "run1", ".blastn.r1.tblout") == (
            temp_dir / "run1.blastn.r1.tblout"
        )


class TestConvertForClassification:
    """Tests for the two-pass classification conversion."""

    def test_tblout_scores_summed(self, summary_file, seq_lengths, temp_dir):
        """The first line of each triple carries the sum, later lines 0.0."""
        result = convert_for_classification(summary_file, seq_lengths, temp_dir / "run")

        rows = data_rows(result.tblout_path)
        assert [(r[0], r[1], r[2], r[5]) for r in rows] == [
            ("MODEL1", "SEQ1", "200.7", "+"),
            ("MODEL1", "SEQ1", "0.0", "+"),
            ("MODEL2", "SEQ1", "60.0", "-"),
            ("MODEL1", "SEQ2", "400.0", "+"),
        ]
        assert result.triples == 3
        assert result.stats.emitted == 4

    def test_pretblout_removed_by_default(self, summary_file, seq_lengths, temp_dir):
        result = convert_for_classification(summary_file, seq_lengths, temp_dir / "run")

        assert result.pretblout_path is None
        assert not (temp_dir / "run.blastn.r1.pretblout").exists()
        assert result.tblout_path == temp_dir / "run.blastn.r1.tblout"

    def test_pretblout_kept(self, summary_file, seq_lengths, temp_dir):
        """With keep set the per-HSP scores stay on disk."""
        config = ConversionConfig(keep=True)
        result = convert_for_classification(
            summary_file, seq_lengths, temp_dir / "run", config
        )

        assert result.pretblout_path is not None
        assert [r[2] for r in data_rows(result.pretblout_path)] == [
            "120.5", "80.2", "60.0", "400.0",
        ]

    def test_min_bitscore_from_config(self, summary_file, seq_lengths, temp_dir):
        config = ConversionConfig(min_bitscore=25.0)
        result = convert_for_classification(
            summary_file, seq_lengths, temp_dir / "run", config
        )
        rows = data_rows(result.tblout_path)
        assert [r[2] for r in rows if r[1] == "SEQ2"] == ["430.0", "0.0"]

    def test_creates_output_directory(self, summary_file, seq_lengths, temp_dir):
        result = convert_for_classification(
            summary_file, seq_lengths, temp_dir / "nested" / "run"
        )
        assert result.tblout_path.exists()

    def test_partial_outputs_removed_on_error(self, temp_dir, seq_lengths):
        """A fatal line leaves no output files behind."""
        summary = temp_dir / "summary.txt"
        summary.write_text(
            summary_text(
                [
                    *block_header("SEQ1", 1000, "MODEL1"),
                    *hsp_lines(1, "120.5", "1..400", "11..410"),
                    "END_MATCH",
                    "garbage",
                ]
            )
        )
        with pytest.raises(MalformedSummaryLineError):
            convert_for_classification(summary, seq_lengths, temp_dir / "run")

        assert not (temp_dir / "run.blastn.r1.pretblout").exists()
        assert not (temp_dir / "run.blastn.r1.tblout").exists()

    def test_empty_summary_writes_nothing(self, temp_dir, seq_lengths):
        summary = temp_dir / "summary.txt"
        summary.write_text("")
        with pytest.raises(EmptySummaryFileError):
            convert_for_classification(summary, seq_lengths, temp_dir / "run")
        assert list(temp_dir.glob("run.*")) == []


class TestConvertForCoverage:
    """Tests for the per-model coverage conversion."""

    def test_only_assigned_pairs_written(self, summary_file, seq_lengths, temp_dir):
        """SEQ1/MODEL1 is kept and SEQ1/MODEL2 is dropped."""
        result = convert_for_coverage(
            summary_file,
            seq_lengths,
            {"SEQ1": "MODEL1", "SEQ2": "MODEL1"},
            ["MODEL1", "MODEL2"],
            temp_dir / "run",
        )

        model1 = data_rows(result.tblout_paths["MODEL1"])
        assert [(r[0], r[2]) for r in model1] == [
            ("SEQ1", "MODEL1"),
            ("SEQ1", "MODEL1"),
            ("SEQ2", "MODEL1"),
        ]
        assert result.tblout_paths["MODEL2"].read_text() == ""
        assert result.indel_paths["MODEL2"].read_text() == ""
        assert result.kept == 3
        assert result.dropped == 1

    def test_indel_file_lines(self, summary_file, seq_lengths, temp_dir):
        result = convert_for_coverage(
            summary_file, seq_lengths, {"SEQ2": "MODEL1"}, ["MODEL1"], temp_dir / "run"
        )
        assert result.indel_paths["MODEL1"] == temp_dir / "run.search.r2.MODEL1.indel"
        assert data_rows(result.indel_paths["MODEL1"]) == [
            ["MODEL1", "SEQ2", "101..600:+", "1200", "1..500:+", "500", "BLASTNULL", "BLASTNULL"],
        ]

    def test_assignment_to_unlisted_model(self, summary_file, seq_lengths, temp_dir):
        with pytest.raises(UnexpectedModelError):
            convert_for_coverage(
                summary_file, seq_lengths, {"SEQ1": "MODEL3"}, ["MODEL1"], temp_dir / "run"
            )
        assert list(temp_dir.glob("run.*")) == []

    def test_partial_outputs_removed_on_error(self, temp_dir, seq_lengths):
        """An assigned hit without HLEN aborts the run and removes its files."""
        summary = temp_dir / "summary.txt"
        summary.write_text(
            summary_text(
                [
                    *block_header("SEQ1", 1000, "MODEL1"),
                    *hsp_lines(1, "120.5", "1..400", "11..410"),
                    *hsp_lines(2, "80.2", "500..1000", "600..1100", hlen=None),
                    "END_MATCH",
                ]
            )
        )
        with pytest.raises(MissingSubjectLengthError):
            convert_for_coverage(
                summary, seq_lengths, {"SEQ1": "MODEL1"}, ["MODEL1"], temp_dir / "run"
            )
        assert list(temp_dir.glob("run.*")) == []
