"""Unit tests for collaborator-table loaders."""

from __future__ import annotations

import gzip

import pytest

from blastscan.core.exceptions import CollaboratorTableError
from blastscan.core.io_utils import load_assignments, load_seq_lengths, seq_lengths_from_fasta


class TestLoadSeqLengths:
    """Tests for the sequence-length TSV."""

    def test_load(self, seq_lengths_file, seq_lengths):
        assert load_seq_lengths(seq_lengths_file) == seq_lengths

    def test_numeric_looking_names_stay_strings(self, temp_dir):
        path = temp_dir / "lengths.tsv"
        path.write_text("seq_name\tlength\n00123\t50\n")
        assert load_seq_lengths(path) == {"00123": 50}

    def test_extra_columns_ignored(self, temp_dir):
        path = temp_dir / "lengths.tsv"
        path.write_text("seq_name\tlength\tnote\nS1\t10\tx\n")
        assert load_seq_lengths(path) == {"S1": 10}

    def test_missing_column(self, temp_dir):
        path = temp_dir / "lengths.tsv"
        path.write_text("name\tlength\nS1\t10\n")
        with pytest.raises(CollaboratorTableError, match="missing columns"):
            load_seq_lengths(path)

    def test_non_integer_length(self, temp_dir):
        path = temp_dir / "lengths.tsv"
        path.write_text("seq_name\tlength\nS1\tten\n")
        with pytest.raises(CollaboratorTableError, match="integers"):
            load_seq_lengths(path)

    def test_duplicate_names(self, temp_dir):
        path = temp_dir / "lengths.tsv"
        path.write_text("seq_name\tlength\nS1\t10\nS1\t12\n")
        with pytest.raises(CollaboratorTableError, match="duplicate"):
            load_seq_lengths(path)


class TestSeqLengthsFromFasta:
    """Tests for computing lengths from FASTA."""

    def test_plain_fasta(self, temp_dir):
        path = temp_dir / "seqs.fa"
        path.write_text(">S1 first\nACGT\nACG\n>S2\nAAAAA\n\n")
        assert seq_lengths_from_fasta(path) == {"S1": 7, "S2": 5}

    def test_gzipped_fasta(self, temp_dir):
        path = temp_dir / "seqs.fa.gz"
        with gzip.open(path, "wt") as fh:
            fh.write(">S1\nACGTACGT\n")
        assert seq_lengths_from_fasta(path) == {"S1": 8}

    def test_sequence_before_header(self, temp_dir):
        path = temp_dir / "seqs.fa"
        path.write_text("ACGT\n>S1\nACGT\n")
        with pytest.raises(CollaboratorTableError, match="before first header"):
            seq_lengths_from_fasta(path)

    def test_duplicate_names(self, temp_dir):
        path = temp_dir / "seqs.fa"
        path.write_text(">S1\nACGT\n>S1\nACGT\n")
        with pytest.raises(CollaboratorTableError, match="duplicate"):
            seq_lengths_from_fasta(path)


class TestLoadAssignments:
    """Tests for the sequence-to-model table."""

    def test_load(self, temp_dir):
        path = temp_dir / "assign.tsv"
        path.write_text("seq_name\tmodel_name\nS1\tM2\nS2\tM1\nS3\tM2\n")
        seq_to_model, models = load_assignments(path)

        assert seq_to_model == {"S1": "M2", "S2": "M1", "S3": "M2"}
        assert models == ["M2", "M1"]

    def test_sequence_assigned_twice(self, temp_dir):
        path = temp_dir / "assign.tsv"
        path.write_text("seq_name\tmodel_name\nS1\tM1\nS1\tM2\n")
        with pytest.raises(CollaboratorTableError):
            load_assignments(path)
