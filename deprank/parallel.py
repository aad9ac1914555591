"""Parallel line counting for the --fast flag."""

from __future__ import annotations

import os
from concurrent.futures import ProcessPoolExecutor, as_completed

from deprank.builder import count_lines
from deprank.errors import LineCountError


def count_lines_parallel(
    paths: list[str],
    *,
    max_workers: int | None = None,
) -> dict[str, int]:
    """Count lines of many files using ProcessPoolExecutor.

    All counts are collected before returning; the first unreadable file
    aborts the whole batch.

    Args:
        paths: Files to count.
        max_workers: Maximum number of worker processes.

    Returns:
        Mapping of path to line count.

    Raises:
        LineCountError: If any file cannot be read.
    """
    if not paths:
        return {}
    if max_workers is None:
        max_workers = min(os.cpu_count() or 1, len(paths))

    counts: dict[str, int] = {}
    with ProcessPoolExecutor(max_workers=max_workers) as executor:
        # Workers may not share our working directory.
        futures = {
            executor.submit(count_lines, os.path.abspath(path)): path for path in paths
        }
        for future in as_completed(futures):
            try:
                counts[futures[future]] = future.result()
            except LineCountError as exc:
                raise LineCountError(futures[future], exc.reason) from exc
    return counts
