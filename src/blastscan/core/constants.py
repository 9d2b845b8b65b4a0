"""
Constants used throughout the blastscan package.

Centralizes sentinel tokens, output layouts and default values so that the
reader, the writers and the downstream consumers agree on one definition.
"""

from __future__ import annotations

# =============================================================================
# Summary Stream Tokens
# =============================================================================

# Line that closes one query/subject block in the summary stream
END_MATCH = "END_MATCH"

# Summarizer token for an absent insert/delete/stop descriptor
BLASTNULL = "BLASTNULL"

# Range value reported for a block without hits
NO_HIT_RANGE = ".."

# Keys written by the summarizer that the converter does not use
IGNORED_SUMMARY_KEYS = frozenset(
    {
        "QDEF",
        "MATCH",
        "HDEF",
        "SLEN",
        "RAWSCORE",
        "IDENT",
        "GAPS",
        "FRAME",
        "MAXDE",
        "MAXIN",
        "QSTOP",
        "HSTOP",
    }
)

# =============================================================================
# Scoring Defaults
# =============================================================================

# Minimum bit score for an HSP to be converted
DEFAULT_MIN_BITSCORE = 50.0

# Tolerance subtracted from the minimum before comparing
BITSCORE_TOLERANCE = 0.000001

# Nucleotides of overlap between a realigned flank and the blastn seed
DEFAULT_OVERHANG = 100

# =============================================================================
# Output Layouts
# =============================================================================

# cmscan --trmF3 style line shared by the pretblout and tblout files
TRMF3_LINE_FORMAT = "%-30s  %-30s  %8.1f  %9d  %9d  %6s  %6s  %3s  %11s\n"

TRMF3_HEADER = "%-30s  %-30s  %8s  %9s  %9s  %6s  %6s  %3s  %11s\n" % (
    "#modelname/subject",
    "sequence/query",
    "bitscore",
    "start",
    "end",
    "strand",
    "bounds",
    "ovp",
    "seqlen",
)

TRMF3_NUM_COLUMNS = 9

# Overlap column is never computed by the fast path
OVERLAP_PLACEHOLDER = "?"

# cmsearch --tblout style line written per coverage hit
COVERAGE_TBLOUT_FORMAT = (
    "%-s  -  %-s  -  blastn  %d  %d  %d  %d  %s  -  -  -  0.0  %8.1f  %s  ?  -\n"
)

# One line per coverage hit in the per-model indel file
INDEL_LINE_FORMAT = "%s  %s  %s  %s  %s  %s  %s  %s\n"

INDEL_NUM_COLUMNS = 8

# =============================================================================
# Output File Naming
# =============================================================================

PRETBLOUT_SUFFIX = ".blastn.r1.pretblout"
TBLOUT_SUFFIX = ".blastn.r1.tblout"
COVERAGE_TBLOUT_SUFFIX = ".search.r2.{model}.tblout"
COVERAGE_INDEL_SUFFIX = ".search.r2.{model}.indel"
