"""Source file discovery with gitignore support."""

from __future__ import annotations

import os
import subprocess
from pathlib import Path

import pathspec

from deprank.errors import DiscoveryError
from deprank.languages import TreeSitterLanguage, language_for_extension

SKIP_DIRS: frozenset[str] = frozenset(
    {
        "__pycache__",
        "node_modules",
        "bower_components",
        "jspm_packages",
        "coverage",
        ".git",
        ".hg",
        ".svn",
        "venv",
        ".venv",
        "env",
        ".env",
        "build",
        "dist",
        ".tox",
        ".mypy_cache",
        ".ruff_cache",
        ".pytest_cache",
        "egg-info",
    }
)


def _git_ls_files(root: Path) -> set[str] | None:
    """Return the set of git-tracked and untracked-but-not-ignored files.

    Uses ``git ls-files --cached --others --exclude-standard`` to respect
    all gitignore files (root, subdirectory, and global).

    Returns:
        Set of root-relative file paths, or None if git is unavailable
        or the directory is not the top of a git repository.
    """
    if not (root / ".git").exists():
        return None
    try:
        result = subprocess.run(
            ["git", "ls-files", "--cached", "--others", "--exclude-standard"],
            cwd=root,
            capture_output=True,
            text=True,
            timeout=10,
            check=False,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return None
    if result.returncode != 0:
        return None
    return set(result.stdout.splitlines())


def _matches_language(
    lang: TreeSitterLanguage | None, language_filter: str | None
) -> bool:
    if lang is None:
        return False
    return not language_filter or lang.name == language_filter


def discover_files(
    root: Path,
    *,
    extra_ignores: list[str] | None = None,
    language_filter: str | None = None,
) -> list[tuple[Path, str]]:
    """Walk root and return (relative_path, language_name) for parseable files.

    Args:
        root: Directory to search.
        extra_ignores: Additional gitignore-style patterns to exclude.
        language_filter: If set, only return files matching this language name.

    Returns:
        List of (relative_path, language_name) tuples, sorted by path.
    """
    git_files = _git_ls_files(root)
    gitignore = _load_gitignore(root) if git_files is None else None

    extra_spec = None
    if extra_ignores:
        extra_spec = pathspec.PathSpec.from_lines("gitignore", extra_ignores)

    results: list[tuple[Path, str]] = []

    for dirpath, dirnames, filenames in os.walk(root, followlinks=False):
        # Prune skip dirs and hidden dirs in-place to prevent descent
        dirnames[:] = sorted(
            d for d in dirnames if d not in SKIP_DIRS and not d.startswith(".")
        )

        rel_dir = Path(dirpath).relative_to(root)

        for fname in sorted(filenames):
            if fname.startswith("."):
                continue

            full_path = Path(dirpath) / fname
            if full_path.is_symlink():
                continue

            rel = rel_dir / fname

            if git_files is not None:
                if rel.as_posix() not in git_files:
                    continue
            elif gitignore and gitignore.match_file(rel.as_posix()):
                continue

            if extra_spec and extra_spec.match_file(rel.as_posix()):
                continue

            lang = language_for_extension(Path(fname).suffix)
            if not _matches_language(lang, language_filter):
                continue

            results.append((rel, lang.name))

    results.sort()
    return results


def discover_paths(
    paths: list[str],
    *,
    extra_ignores: list[str] | None = None,
    language_filter: str | None = None,
) -> list[tuple[Path, str]]:
    """Discover parseable files under several roots.

    A root may be a directory (searched recursively) or a single file
    (kept when its extension is supported). Returned paths are the root
    joined with the file's relative path, so they keep the form the caller
    used (relative roots give relative paths).

    Args:
        paths: Root directories or files.
        extra_ignores: Additional gitignore-style patterns to exclude.
        language_filter: If set, only return files matching this language name.

    Returns:
        List of (path, language_name) tuples, in root order then path order,
        without duplicates.

    Raises:
        DiscoveryError: If no paths are given or a path does not exist.
    """
    if not paths:
        raise DiscoveryError(".", "no paths to search")

    seen: set[str] = set()
    results: list[tuple[Path, str]] = []
    for raw in paths:
        root = Path(raw)
        if root.is_file():
            lang = language_for_extension(root.suffix)
            found = []
            if _matches_language(lang, language_filter):
                found.append((root, lang.name))
        elif root.is_dir():
            found = [
                (root / rel, lang_name)
                for rel, lang_name in discover_files(
                    root,
                    extra_ignores=extra_ignores,
                    language_filter=language_filter,
                )
            ]
        else:
            raise DiscoveryError(raw, "no such file or directory")

        for path, lang_name in found:
            key = os.path.normpath(path)
            if key in seen:
                continue
            seen.add(key)
            results.append((Path(key), lang_name))
    return results


def _load_gitignore(root: Path) -> pathspec.PathSpec:
    """Load .gitignore from root, returning a PathSpec matcher."""
    gitignore_path = root / ".gitignore"
    if gitignore_path.is_file():
        lines = gitignore_path.read_text(encoding="utf-8").splitlines()
        return pathspec.PathSpec.from_lines("gitignore", lines)
    return pathspec.PathSpec.from_lines("gitignore", [])
