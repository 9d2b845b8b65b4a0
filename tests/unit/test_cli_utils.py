"""Unit tests for shared CLI utilities."""

from __future__ import annotations

import logging
from io import StringIO

import pytest
import typer
from rich.console import Console

from blastscan.cli.utils import (
    QuietConsole,
    build_config,
    report_error,
    resolve_seq_lengths,
    setup_logging,
)
from blastscan.core.exceptions import BlastscanError


class TestQuietConsole:
    """Tests for the quiet-mode console wrapper."""

    def test_quiet_suppresses_print(self):
        buffer = StringIO()
        qc = QuietConsole(Console(file=buffer), quiet=True)
        qc.print("hidden")
        assert buffer.getvalue() == ""

    def test_prints_when_not_quiet(self):
        buffer = StringIO()
        qc = QuietConsole(Console(file=buffer), quiet=False)
        qc.print("shown")
        assert "shown" in buffer.getvalue()

    def test_delegates_attributes(self):
        console = Console(file=StringIO())
        assert QuietConsole(console, quiet=True).console is console


class TestReportError:
    def test_message_and_suggestion(self):
        buffer = StringIO()
        report_error(Console(file=buffer, width=200), BlastscanError("Broken", "Fix it"))
        output = buffer.getvalue()
        assert "Error: Broken" in output
        assert "Suggestion: Fix it" in output


class TestResolveSeqLengths:
    """Tests for choosing the sequence-length source."""

    def test_from_table(self, seq_lengths_file, seq_lengths):
        assert resolve_seq_lengths(seq_lengths_file, None) == seq_lengths

    def test_from_fasta(self, temp_dir):
        fasta = temp_dir / "seqs.fa"
        fasta.write_text(">S1\nACGT\n")
        assert resolve_seq_lengths(None, fasta) == {"S1": 4}

    def test_neither(self):
        with pytest.raises(typer.BadParameter):
            resolve_seq_lengths(None, None)

    def test_both(self, seq_lengths_file, temp_dir):
        with pytest.raises(typer.BadParameter):
            resolve_seq_lengths(seq_lengths_file, temp_dir / "seqs.fa")


class TestBuildConfig:
    """Tests for combining YAML config with command-line overrides."""

    def test_defaults(self):
        config = build_config(None)
        assert config.min_bitscore == 50.0
        assert config.keep is False

    def test_cli_overrides_yaml(self, temp_dir):
        path = temp_dir / "config.yaml"
        path.write_text("min_bitscore: 80.0\noverhang: 30\n")
        config = build_config(path, min_bitscore=90.0, keep=True)
        assert config.min_bitscore == 90.0
        assert config.overhang == 30
        assert config.keep is True

    def test_keep_flag_off_leaves_yaml_value(self, temp_dir):
        path = temp_dir / "config.yaml"
        path.write_text("keep: true\n")
        assert build_config(path, keep=False).keep is True


class TestSetupLogging:
    def test_verbose_sets_debug(self):
        setup_logging(verbose=True, console=Console(file=StringIO()))
        assert logging.getLogger("blastscan").level == logging.DEBUG

    def test_default_is_warning(self):
        setup_logging(verbose=False, console=Console(file=StringIO()))
        assert logging.getLogger("blastscan").level == logging.WARNING
