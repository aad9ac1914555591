"""Language registry for tree-sitter grammars and import queries."""

from __future__ import annotations

import functools
from dataclasses import dataclass
from importlib import resources
from typing import TYPE_CHECKING

from tree_sitter_language_pack import get_language, get_parser

if TYPE_CHECKING:
    from tree_sitter import Language, Parser, Query


@functools.cache
def _cached_parser(name: str) -> Parser:
    """Return a cached tree-sitter Parser for the given grammar."""
    return get_parser(name)


@functools.cache
def _cached_import_query(grammar: str, query_name: str) -> Query:
    """Return a cached compiled import query for the given grammar."""
    from tree_sitter import Query as TSQuery

    scm_text = _load_query_file(query_name)
    return TSQuery(get_language(grammar), scm_text)


@dataclass(frozen=True)
class TreeSitterLanguage:
    """A tree-sitter grammar with the query that finds its imports.

    ``name`` is the user-facing language name, ``grammar`` the name known to
    tree_sitter_language_pack, and ``query_name`` the .scm file (without
    suffix) in the queries package.
    """

    name: str
    grammar: str
    query_name: str
    extensions: tuple[str, ...]

    def get_language(self) -> Language:
        """Get the tree-sitter Language object."""
        return get_language(self.grammar)

    def get_parser(self) -> Parser:
        """Get a configured tree-sitter Parser (cached)."""
        return _cached_parser(self.grammar)

    def get_import_query(self) -> Query:
        """Load and compile the import query for this language (cached)."""
        return _cached_import_query(self.grammar, self.query_name)


LANGUAGES: dict[str, TreeSitterLanguage] = {
    "python": TreeSitterLanguage(
        name="python",
        grammar="python",
        query_name="python",
        extensions=(".py",),
    ),
    "javascript": TreeSitterLanguage(
        name="javascript",
        grammar="javascript",
        query_name="javascript",
        extensions=(".js", ".mjs", ".cjs", ".jsx"),
    ),
    "typescript": TreeSitterLanguage(
        name="typescript",
        grammar="typescript",
        query_name="javascript",
        extensions=(".ts", ".mts", ".cts"),
    ),
    "tsx": TreeSitterLanguage(
        name="tsx",
        grammar="tsx",
        query_name="javascript",
        extensions=(".tsx",),
    ),
}

EXTENSION_MAP: dict[str, str] = {
    ext: lang.name for lang in LANGUAGES.values() for ext in lang.extensions
}

# Extensions a relative JS/TS specifier may omit, in resolution order.
SCRIPT_EXTENSIONS: tuple[str, ...] = tuple(
    ext
    for name in ("javascript", "typescript", "tsx")
    for ext in LANGUAGES[name].extensions
)


def _load_query_file(query_name: str) -> str:
    """Load a .scm query file from the queries package.

    Args:
        query_name: The .scm filename without suffix.

    Returns:
        The query file contents as a string.

    Raises:
        FileNotFoundError: If no query file exists with that name.
    """
    query_path = resources.files("deprank.queries").joinpath(f"{query_name}.scm")
    return query_path.read_text(encoding="utf-8")


def language_for_extension(ext: str) -> TreeSitterLanguage | None:
    """Look up a language config by file extension.

    Args:
        ext: File extension including the dot (e.g., ".py").

    Returns:
        The TreeSitterLanguage config, or None if unsupported.
    """
    lang_name = EXTENSION_MAP.get(ext)
    if lang_name is None:
        return None
    return LANGUAGES.get(lang_name)


def supported_extensions() -> list[str]:
    """Return every extension the registry can parse, in registry order."""
    return list(EXTENSION_MAP)
