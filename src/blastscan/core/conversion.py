"""
Drivers that turn one blastn summary into profile-search style outputs.

Each driver opens every output file before the summary is scanned and
closes them together when it finishes. If any error is raised, every file
the run created is removed before the error propagates, so downstream steps
never see a partial table.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import TextIO

from blastscan.core.classification import FormatCompactor, ScoreAggregator
from blastscan.core.constants import (
    COVERAGE_INDEL_SUFFIX,
    COVERAGE_TBLOUT_SUFFIX,
    PRETBLOUT_SUFFIX,
    TBLOUT_SUFFIX,
)
from blastscan.core.coverage import CoverageFilter
from blastscan.core.exceptions import UnexpectedModelError
from blastscan.core.parsers import ReaderStats, SummaryRecordReader
from blastscan.models.config import ConversionConfig

logger = logging.getLogger(__name__)


@dataclass
class ClassificationResult:
    """Outputs of a classification-mode conversion."""

    tblout_path: Path
    pretblout_path: Path | None
    stats: ReaderStats
    triples: int


@dataclass
class CoverageResult:
    """Outputs of a coverage-mode conversion."""

    tblout_paths: dict[str, Path] = field(default_factory=dict)
    indel_paths: dict[str, Path] = field(default_factory=dict)
    stats: ReaderStats = field(default_factory=ReaderStats)
    kept: int = 0
    dropped: int = 0


def output_path(out_root: Path, suffix: str) -> Path:
    return out_root.parent / f"{out_root.name}{suffix}"


class _OutputFiles:
    """Track output files opened during a run so they can be removed on failure."""

    def __init__(self, stack: ExitStack) -> None:
        self.stack = stack
        self.paths: list[Path] = []

    def open(self, path: Path) -> TextIO:
        path.parent.mkdir(parents=True, exist_ok=True)
        handle = self.stack.enter_context(path.open("w"))
        self.paths.append(path)
        return handle


@contextmanager
def _output_files() -> Iterator[_OutputFiles]:
    created: list[Path] = []
    try:
        with ExitStack() as stack:
            outputs = _OutputFiles(stack)
            created = outputs.paths
            yield outputs
    except BaseException:
        for path in created:
            path.unlink(missing_ok=True)
            logger.debug("Removed partial output %s", path)
        raise


def convert_for_classification(
    summary_path: Path,
    seq_lengths: Mapping[str, int],
    out_root: Path,
    config: ConversionConfig | None = None,
) -> ClassificationResult:
    """
    Write a cmscan --trmF3 style tblout with scores summed per triple.

    Pass one writes ``<out_root>.blastn.r1.pretblout`` while summing scores;
    pass two rewrites it as ``<out_root>.blastn.r1.tblout``.

    Raises:
        BlastscanError: On any parse or consistency violation.
    """
    config = config or ConversionConfig()
    reader = SummaryRecordReader(summary_path, seq_lengths, config.min_bitscore)
    pretblout_path = output_path(out_root, PRETBLOUT_SUFFIX)
    tblout_path = output_path(out_root, TBLOUT_SUFFIX)

    with _output_files() as outputs:
        with outputs.open(pretblout_path) as pretblout:
            aggregator = ScoreAggregator(pretblout)
            for hit in reader:
                aggregator.add(hit)

        tblout = outputs.open(tblout_path)
        FormatCompactor(aggregator.aggregate).compact(pretblout_path, tblout)

    if not config.keep:
        pretblout_path.unlink(missing_ok=True)

    logger.info(
        "Wrote %d hits for %d model/sequence/strand triples to %s",
        aggregator.lines_written,
        len(aggregator.aggregate),
        tblout_path,
    )
    return ClassificationResult(
        tblout_path=tblout_path,
        pretblout_path=pretblout_path if config.keep else None,
        stats=reader.stats,
        triples=len(aggregator.aggregate),
    )


def convert_for_coverage(
    summary_path: Path,
    seq_lengths: Mapping[str, int],
    seq_to_model: Mapping[str, str],
    model_names: Sequence[str],
    out_root: Path,
    config: ConversionConfig | None = None,
) -> CoverageResult:
    """
    Write per-model tblout and indel files for assigned sequence/model pairs.

    Raises:
        UnexpectedModelError: If a sequence is assigned to a model that is
            not in ``model_names``.
        BlastscanError: On any other parse or consistency violation.
    """
    config = config or ConversionConfig()
    for seq_name, model in seq_to_model.items():
        if model not in model_names:
            raise UnexpectedModelError(model, seq_name)

    reader = SummaryRecordReader(summary_path, seq_lengths, config.min_bitscore)
    result = CoverageResult()

    with _output_files() as outputs:
        tblout_handles: dict[str, TextIO] = {}
        indel_handles: dict[str, TextIO] = {}
        for model in model_names:
            tblout_path = output_path(out_root, COVERAGE_TBLOUT_SUFFIX.format(model=model))
            indel_path = output_path(out_root, COVERAGE_INDEL_SUFFIX.format(model=model))
            tblout_handles[model] = outputs.open(tblout_path)
            indel_handles[model] = outputs.open(indel_path)
            result.tblout_paths[model] = tblout_path
            result.indel_paths[model] = indel_path

        coverage = CoverageFilter(seq_to_model, tblout_handles, indel_handles)
        for hit in reader:
            coverage.add(hit)

    result.stats = reader.stats
    result.kept = coverage.kept
    result.dropped = coverage.dropped
    logger.info(
        "Wrote %d coverage hits for %d models, dropped %d unassigned pairs",
        result.kept,
        len(model_names),
        result.dropped,
    )
    return result
