"""End-to-end ranking run: discover, build, rank, optionally reorder."""

from __future__ import annotations

import logging

from deprank.builder import build_candidates, matches_extension
from deprank.errors import DiscoveryError
from deprank.graph import rank_candidates
from deprank.models import Candidate, Module, Options
from deprank.ordering import sort_in_dependency_order
from deprank.provider import ModuleGraphProvider, TreeSitterProvider

logger = logging.getLogger(__name__)


def find_modules(options: Options, provider: ModuleGraphProvider) -> list[Module]:
    """Discover modules and keep those with a recognized extension.

    Raises:
        DiscoveryError: If no paths are configured or the provider fails.
    """
    if not options.paths:
        raise DiscoveryError(".", "no paths to search")
    modules = provider.discover(options.paths, options.provider_options)
    kept = [m for m in modules if matches_extension(m.key, options.extensions)]
    logger.debug("Kept %d of %d modules", len(kept), len(modules))
    return kept


def rank_paths(
    options: Options, provider: ModuleGraphProvider | None = None
) -> list[Candidate]:
    """Rank every source file under options.paths.

    Args:
        options: Run configuration.
        provider: Module graph provider; defaults to TreeSitterProvider.

    Returns:
        Candidates by rank, or in dependency-first order when
        ``options.deps_first`` is set.

    Raises:
        DiscoveryError: If discovery fails.
        LineCountError: If a file cannot be read.
        ConvergenceError: If PageRank does not converge.
    """
    provider = provider or TreeSitterProvider()
    modules = find_modules(options, provider)
    candidates = build_candidates(
        modules, extensions=options.extensions, fast=options.fast
    )
    ranked = rank_candidates(candidates)
    if not options.deps_first:
        return ranked
    indexed = {candidate.key: candidate for candidate in candidates}
    return sort_in_dependency_order(indexed, ranked)
