"""Output-size selection over ranked candidates."""

from __future__ import annotations

from deprank.models import Candidate


def select_candidates(
    candidates: list[Candidate],
    *,
    max_files: int | None = None,
) -> list[Candidate]:
    """Keep the first candidates up to a limit.

    Args:
        candidates: Candidates in final output order.
        max_files: Maximum number of candidates to keep. None means all.

    Returns:
        The leading candidates (the input list itself when nothing is cut).
    """
    if max_files is None or max_files >= len(candidates):
        return candidates
    return candidates[:max_files]
