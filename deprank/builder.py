"""Candidate construction: line counts, extension filtering, dependents."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from pathlib import Path

from deprank.errors import LineCountError
from deprank.languages import supported_extensions
from deprank.models import Candidate, Module

logger = logging.getLogger(__name__)

_LINE_BREAK = re.compile(rb"\r\n|\r|\n")


def count_lines(path: str) -> int:
    """Count the line terminators in a file.

    ``\\r\\n``, a lone ``\\r`` and ``\\n`` each end one line. A trailing
    line without a terminator is not counted.

    Raises:
        LineCountError: If the file cannot be read.
    """
    try:
        content = Path(path).read_bytes()
    except OSError as exc:
        raise LineCountError(path, exc.strerror or str(exc)) from exc
    return sum(1 for _ in _LINE_BREAK.finditer(content))


def matches_extension(key: str, extensions: Iterable[str] | None) -> bool:
    """Check whether key ends with one of extensions (default: all supported)."""
    suffixes = tuple(supported_extensions() if extensions is None else extensions)
    return key.endswith(suffixes)


def build_candidates(
    modules: list[Module],
    *,
    extensions: list[str] | None = None,
    fast: bool = False,
) -> list[Candidate]:
    """Create one candidate per module and count dependents.

    Args:
        modules: Modules from a module graph provider.
        extensions: Dependency targets must end with one of these. None
            means every extension the provider supports.
        fast: Count lines in a process pool instead of sequentially.

    Returns:
        Candidates in module order.

    Raises:
        LineCountError: If any file cannot be read.
    """
    if fast:
        from deprank.parallel import count_lines_parallel

        line_counts = count_lines_parallel([m.key for m in modules])
    else:
        line_counts = {m.key: count_lines(m.key) for m in modules}

    suffixes = tuple(supported_extensions() if extensions is None else extensions)
    candidates = [
        Candidate(
            key=module.key,
            module=module,
            lines=line_counts[module.key],
            dependencies=[
                dep.target
                for dep in module.dependencies
                if dep.target.endswith(suffixes)
            ],
        )
        for module in modules
    ]
    count_dependents(candidates)
    return candidates


def count_dependents(candidates: list[Candidate]) -> None:
    """Set each candidate's dependents from the other candidates' raw edges.

    Raw module edges are counted, so an edge the extension filter drops
    from ``dependencies`` still makes its target a dependent. Mutates
    candidates in place.
    """
    indexed = {candidate.key: candidate for candidate in candidates}
    for candidate in candidates:
        for dep in candidate.module.dependencies:
            if dep.target == candidate.key:
                continue
            target = indexed.get(dep.target)
            if target is not None:
                target.dependents += 1
    logger.debug("Built %d candidates", len(candidates))
