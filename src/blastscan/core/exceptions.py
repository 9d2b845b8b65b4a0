"""
Custom exceptions with actionable guidance.

Every parse or consistency violation in blastscan is fatal. The converted
files are trusted unconditionally by the downstream classification and
coverage steps, so nothing here is recovered locally: each error names the
offending line, its raw content and the rule that was broken, then
propagates to the caller.
"""

from __future__ import annotations


class BlastscanError(Exception):
    """Base exception for blastscan errors."""

    def __init__(self, message: str, suggestion: str | None = None):
        self.message = message
        self.suggestion = suggestion
        super().__init__(self.full_message)

    @property
    def full_message(self) -> str:
        if self.suggestion:
            return f"{self.message}\n\nSuggestion: {self.suggestion}"
        return self.message


# =============================================================================
# Summary stream errors
# =============================================================================


class SummaryFormatError(BlastscanError):
    """Base class for errors in the blastn summary key/value stream."""

    def __init__(
        self,
        path: str,
        line_num: int,
        line: str,
        rule: str,
        suggestion: str | None = None,
    ):
        super().__init__(
            message=(
                f"Error reading blastn summary '{path}' at line {line_num}: "
                f"{rule}\n  line: {line!r}"
            ),
            suggestion=suggestion
            or (
                "The summary file is expected to come unmodified from "
                "parse_blast.pl --program n. Regenerate it from the blastn output."
            ),
        )
        self.path = path
        self.line_num = line_num
        self.line = line
        self.rule = rule


class EmptySummaryFileError(BlastscanError):
    """Raised when the summary file is missing or empty."""

    def __init__(self, path: str):
        super().__init__(
            message=f"blastn summary file does not exist or is empty: {path}",
            suggestion=(
                "Check that blastn and the summarizer completed successfully "
                "and that the summary was written to the expected location."
            ),
        )
        self.path = path


class MalformedSummaryLineError(SummaryFormatError):
    """Raised when a line is not exactly two tab-separated tokens."""

    def __init__(self, path: str, line_num: int, line: str, ntokens: int):
        super().__init__(
            path,
            line_num,
            line,
            f"expected exactly 2 tab-delimited tokens, got {ntokens}",
        )
        self.ntokens = ntokens


class FieldOrderError(SummaryFormatError):
    """Raised when a field appears before one of its required predecessors."""

    def __init__(self, path: str, line_num: int, line: str, key: str, missing: list[str]):
        super().__init__(
            path,
            line_num,
            line,
            f"read {key} line before {', '.join(missing)} line(s)",
        )
        self.key = key
        self.missing = missing


class FieldValueError(SummaryFormatError):
    """Raised when a field value cannot be parsed."""

    def __init__(self, path: str, line_num: int, line: str, key: str, value: str):
        super().__init__(
            path,
            line_num,
            line,
            f"unable to parse {key} value {value!r}",
        )
        self.key = key
        self.value = value


class UnrecognizedSequenceError(SummaryFormatError):
    """Raised when a query accession is not in the expected-length table."""

    def __init__(self, path: str, line_num: int, line: str, seq_name: str):
        super().__init__(
            path,
            line_num,
            line,
            f"unrecognized sequence name {seq_name}",
            suggestion=(
                "The blastn queries must be the same sequences whose lengths "
                "were supplied. Check that the sequence file and the length "
                "table were built from the same input."
            ),
        )
        self.seq_name = seq_name


class QueryLengthMismatchError(SummaryFormatError):
    """Raised when QLEN disagrees with the expected sequence length."""

    def __init__(
        self,
        path: str,
        line_num: int,
        line: str,
        seq_name: str,
        observed: int,
        expected: int,
    ):
        super().__init__(
            path,
            line_num,
            line,
            f"read query length {observed} for {seq_name}, but expected {expected}",
        )
        self.seq_name = seq_name
        self.observed = observed
        self.expected = expected


class QueryStrandError(SummaryFormatError):
    """Raised when a query strand other than + is reported."""

    def __init__(self, path: str, line_num: int, line: str, strand: str):
        super().__init__(
            path,
            line_num,
            line,
            f"query strand is {strand!r}, queries are never reverse complemented",
            suggestion=(
                "Run blastn with -strand plus on the query side, or extend the "
                "converter if reverse-complemented queries are now searched."
            ),
        )
        self.strand = strand


# =============================================================================
# Score aggregation errors
# =============================================================================


class PretbloutFormatError(BlastscanError):
    """Raised when a pretblout data line cannot be parsed."""

    def __init__(self, path: str, line_num: int, line: str, rule: str):
        super().__init__(
            message=(
                f"Unable to parse pretblout '{path}' line {line_num}: {rule}"
                f"\n  line: {line!r}"
            ),
            suggestion="The pretblout file must not be edited between the two passes.",
        )
        self.path = path
        self.line_num = line_num
        self.line = line


class UnknownScoreTripleError(BlastscanError):
    """Raised when a pretblout line names a triple with no aggregated score."""

    def __init__(self, model: str, seq_name: str, strand: str, line_num: int, line: str):
        super().__init__(
            message=(
                f"Model/sequence/strand trio not in score table: model:{model}, "
                f"seq:{seq_name}, strand:{strand} on line {line_num}\n  line: {line!r}"
            ),
            suggestion=(
                "Summed scores only exist for hits written during the same run. "
                "Do not reuse a pretblout file from a different run."
            ),
        )
        self.model = model
        self.seq_name = seq_name
        self.strand = strand


# =============================================================================
# Coverage errors
# =============================================================================


class UnexpectedModelError(BlastscanError):
    """Raised when an assigned model has no coverage output files."""

    def __init__(self, model: str, seq_name: str):
        super().__init__(
            message=(
                f"Sequence {seq_name} is assigned to model {model}, "
                f"which is not in the list of models to process"
            ),
            suggestion="Include every assigned model in the model-name list.",
        )
        self.model = model
        self.seq_name = seq_name


class MissingSubjectLengthError(BlastscanError):
    """Raised when an HSP written to an indel file has no subject length."""

    def __init__(self, model: str, seq_name: str, hsp: int | None):
        super().__init__(
            message=(
                f"No HLEN line was read for HSP {hsp} of {seq_name} to {model}; "
                f"cannot write its indel line"
            ),
            suggestion="Regenerate the summary with a summarizer that reports HLEN.",
        )
        self.model = model
        self.seq_name = seq_name


# =============================================================================
# Indel reconstruction errors
# =============================================================================


class IndelError(BlastscanError):
    """Base class for ungapped-alignment reconstruction errors."""


class IndelTokenError(IndelError):
    """Raised when an insert or delete token cannot be parsed."""

    def __init__(self, token: str, reason: str):
        super().__init__(
            message=f"Unable to parse indel token {token!r}: {reason}",
            suggestion=(
                "Tokens must look like Q<seqpos>:S<mdlpos>+<len> for inserts "
                "and Q<seqpos>:S<mdlpos>-<len> for deletes."
            ),
        )
        self.token = token


class IndelOrderError(IndelError):
    """Raised when insert and delete tokens cannot be ordered."""

    def __init__(self, ins_token: str, del_token: str, reason: str):
        super().__init__(
            message=(
                f"Insert and delete tokens {reason}: {ins_token} and {del_token}"
            ),
        )
        self.ins_token = ins_token
        self.del_token = del_token


class SegmentLengthMismatchError(IndelError):
    """Raised when an ungapped segment has different lengths in the two frames."""

    def __init__(self, where: str, mdl_span: tuple[int, int], seq_span: tuple[int, int]):
        super().__init__(
            message=(
                f"Ungapped segment lengths don't match {where}: "
                f"mdl: {mdl_span[0]}..{mdl_span[1]}, seq: {seq_span[0]}..{seq_span[1]}"
            ),
        )
        self.mdl_span = mdl_span
        self.seq_span = seq_span


class CoordsFormatError(BlastscanError):
    """Raised when a coordinate segment string or value is invalid."""

    def __init__(self, value: str, reason: str = "unable to parse coords segment"):
        super().__init__(message=f"{reason}: {value!r}")
        self.value = value


class IndelFileFormatError(BlastscanError):
    """Raised when a coverage indel file line is malformed."""

    def __init__(self, path: str, line_num: int, line: str, rule: str):
        super().__init__(
            message=f"Error reading indel file '{path}' at line {line_num}: {rule}\n  line: {line!r}",
        )
        self.path = path
        self.line_num = line_num
        self.line = line


# =============================================================================
# Configuration errors
# =============================================================================


class ConfigurationError(BlastscanError):
    """Raised when configuration is invalid."""


class CollaboratorTableError(ConfigurationError):
    """Raised when a sequence-length or assignment table is malformed."""

    def __init__(self, path: str, problem: str, expected_columns: tuple[str, ...]):
        super().__init__(
            message=f"Invalid table '{path}': {problem}",
            suggestion=(
                "Provide a tab-separated file with header columns: "
                + ", ".join(expected_columns)
            ),
        )
        self.path = path
