"""Dependency-first ordering of ranked candidates."""

from __future__ import annotations

from collections.abc import Iterator

from deprank.graph import rank_key
from deprank.models import Candidate


def sort_in_dependency_order(
    indexed: dict[str, Candidate],
    ranked: list[Candidate],
) -> list[Candidate]:
    """Reorder ranked candidates so each one follows its dependencies.

    Candidates are visited depth-first in rank order. Before a candidate is
    emitted, its not-yet-seen dependencies are visited, heaviest first. A
    single ``seen`` set is shared by the whole traversal, so every candidate
    is emitted once and a cycle is cut at the member reached first.

    Args:
        indexed: Candidate lookup by key.
        ranked: Candidates in rank order.

    Returns:
        The same candidates in dependency-first order.
    """
    seen: set[str] = set()
    ordered: list[Candidate] = []
    # Each frame is (remaining siblings, candidate to emit once they are done).
    stack: list[tuple[Iterator[Candidate], Candidate | None]] = [(iter(ranked), None)]

    while stack:
        siblings, owner = stack[-1]
        for source in siblings:
            if source.key in seen:
                continue
            pending = _pending_dependencies(indexed, source, seen)
            seen.add(source.key)
            stack.append((iter(pending), source))
            break
        else:
            stack.pop()
            if owner is not None:
                ordered.append(owner)

    return ordered


def _pending_dependencies(
    indexed: dict[str, Candidate], source: Candidate, seen: set[str]
) -> list[Candidate]:
    """Unseen known dependencies of source, deduplicated, in rank order."""
    pending: dict[str, Candidate] = {}
    for target in source.dependencies:
        if target in seen or target in pending:
            continue
        dependency = indexed.get(target)
        if dependency is not None:
            pending[target] = dependency
    return sorted(pending.values(), key=rank_key)
