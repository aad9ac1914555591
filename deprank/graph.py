"""Dependency graph construction and PageRank ranking."""

from __future__ import annotations

import logging

import networkx as nx

from deprank.errors import ConvergenceError
from deprank.models import Candidate

logger = logging.getLogger(__name__)

DAMPING = 0.85
TOLERANCE = 0.00001
MAX_ITERATIONS = 10_000


def build_graph(candidates: list[Candidate]) -> nx.MultiDiGraph:
    """Build the weighted dependency multigraph over candidates.

    Nodes are candidate keys carrying the candidate under the ``candidate``
    attribute. Every dependency is one edge weighted by the source's line
    count, so repeated imports of the same file become parallel edges.
    Targets that are not candidates still get a node, without a
    ``candidate`` attribute.

    Args:
        candidates: Candidates with filtered dependencies.

    Returns:
        The dependency MultiDiGraph.
    """
    graph = nx.MultiDiGraph()
    for candidate in candidates:
        graph.add_node(candidate.key, candidate=candidate)
    for candidate in candidates:
        for target in candidate.dependencies:
            graph.add_edge(candidate.key, target, weight=candidate.lines)
    return graph


def link_candidates(graph: nx.MultiDiGraph) -> None:
    """Fill in each candidate's links and outbound from its out-edges.

    ``links[target]`` ends up as the target's share of the candidate's
    outbound weight. Source line counts cancel out, so the share is the
    fraction of the candidate's edges pointing at target. A candidate with
    zero lines keeps ``outbound == 0`` and is treated as dangling.
    """
    for key, candidate in graph.nodes(data="candidate"):
        if candidate is None:
            continue
        for _, target, lines in graph.out_edges(key, data="weight"):
            candidate.outbound += lines
            candidate.links[target] = candidate.links.get(target, 0) + lines
        if candidate.outbound > 0:
            for target, value in candidate.links.items():
                candidate.links[target] = value / candidate.outbound


def power_step(
    candidates: list[Candidate],
    indexed: dict[str, Candidate],
    *,
    alpha: float = DAMPING,
) -> float:
    """Run one PageRank iteration in place and return the L1 change.

    Mass held by dangling candidates is spread uniformly, as is the
    teleport share ``1 - alpha``. Links to keys missing from indexed are
    dropped.
    """
    inverse = 1 / len(candidates)
    collected: dict[str, float] = {}
    leaked = 0.0

    for candidate in candidates:
        collected[candidate.key] = candidate.weight
        if candidate.outbound == 0:
            leaked += candidate.weight
        candidate.weight = 0.0

    leaked *= alpha

    for candidate in candidates:
        for target, share in candidate.links.items():
            resolved = indexed.get(target)
            if resolved is not None:
                resolved.weight += alpha * collected[candidate.key] * share
        candidate.weight += (1 - alpha) * inverse + leaked * inverse

    return sum(abs(c.weight - collected[c.key]) for c in candidates)


def rank_key(candidate: Candidate) -> tuple[float, int]:
    """Sort key: heavier first, then more dependents first."""
    return (-candidate.weight, -candidate.dependents)


def rank_candidates(
    candidates: list[Candidate],
    *,
    alpha: float = DAMPING,
    epsilon: float = TOLERANCE,
    max_iterations: int = MAX_ITERATIONS,
) -> list[Candidate]:
    """Apply PageRank to the candidates and return them by rank.

    Mutates each candidate's links, outbound and weight. Ties in weight
    are broken by dependents, then by input order.

    Args:
        candidates: Candidates from the builder.
        alpha: Damping factor.
        epsilon: Stop once the L1 change of one iteration is at most this.
        max_iterations: Ceiling on iterations.

    Returns:
        A new list sorted by rank descending.

    Raises:
        ConvergenceError: If max_iterations is reached first.
    """
    if not candidates:
        return []

    graph = build_graph(candidates)
    link_candidates(graph)
    indexed = {candidate.key: candidate for candidate in candidates}

    inverse = 1 / len(candidates)
    for candidate in candidates:
        candidate.weight = inverse

    delta = 1.0
    iterations = 0
    while delta > epsilon:
        if iterations >= max_iterations:
            raise ConvergenceError(iterations, delta)
        delta = power_step(candidates, indexed, alpha=alpha)
        iterations += 1

    logger.debug(
        "PageRank converged after %d iterations (delta=%.3g)", iterations, delta
    )
    return sorted(candidates, key=rank_key)
