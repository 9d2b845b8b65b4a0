"""
Test data factories for blastn summary streams.

Builds key/value summary lines in the order the summarizer writes them so
tests can describe HSPs compactly.
"""

from __future__ import annotations

SummaryLine = tuple[str, str] | str


def summary_text(lines: list[SummaryLine]) -> str:
    """Render (key, value) pairs and bare END_MATCH lines as a summary stream."""
    rendered = []
    for line in lines:
        if isinstance(line, tuple):
            rendered.append(f"{line[0]}\t{line[1]}")
        else:
            rendered.append(line)
    return "\n".join(rendered) + "\n"


def hsp_lines(
    hsp: int,
    bitscore: str,
    qrange: str,
    srange: str,
    sstrand: str = "+",
    evalue: str = "1e-30",
    hlen: str | None = "1200",
    ins: str | None = None,
    dels: str | None = None,
) -> list[tuple[str, str]]:
    """Key/value lines of one HSP, closed by its SRANGE line."""
    lines = [
        ("HSP", str(hsp)),
        ("BITSCORE", bitscore),
        ("RAWSCORE", "240"),
        ("EVALUE", evalue),
    ]
    if hlen is not None:
        lines.append(("HLEN", hlen))
    lines += [
        ("IDENT", "390/400"),
        ("GAPS", "0/400"),
        ("QSTRAND", "+"),
        ("SSTRAND", sstrand),
    ]
    if dels is not None:
        lines.append(("DEL", dels))
    if ins is not None:
        lines.append(("INS", ins))
    lines += [("QRANGE", qrange), ("SRANGE", srange)]
    return lines


def block_header(query: str, qlen: int, subject: str) -> list[tuple[str, str]]:
    """Lines opening a query/subject block."""
    return [
        ("QACC", query),
        ("QDEF", f"{query} description"),
        ("QLEN", str(qlen)),
        ("MATCH", "1"),
        ("HACC", subject),
        ("HDEF", f"{subject} description"),
        ("SLEN", "1200"),
    ]
