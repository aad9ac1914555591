"""Plain-text table rendering of ranked candidates."""

from __future__ import annotations

from deprank.models import Candidate

_HEADERS = ("Filename", "Lines", "Dependents", "PageRank")
_RANK_DIGITS = 6


def format_table(candidates: list[Candidate]) -> str:
    """Render candidates as a pipe-delimited table.

    Args:
        candidates: Candidates in output order.

    Returns:
        Header, rule and one row per candidate (no trailing newline).
    """
    rows = [
        [
            candidate.key,
            str(candidate.lines),
            str(candidate.dependents),
            f"{candidate.weight:.{_RANK_DIGITS}f}",
        ]
        for candidate in candidates
    ]
    widths = [
        max([len(header), *(len(row[col]) for row in rows)])
        for col, header in enumerate(_HEADERS)
    ]

    header = _format_row(list(_HEADERS), widths)
    lines = [header, "-" * len(header)]
    lines.extend(_format_row(row, widths) for row in rows)
    return "\n".join(lines)


def _format_row(cells: list[str], widths: list[int]) -> str:
    padded = [cell.ljust(width) for cell, width in zip(cells, widths)]
    return f"| {' | '.join(padded)} |"
