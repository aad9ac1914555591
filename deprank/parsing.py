"""Tree-sitter parsing and import extraction."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from tree_sitter import Node, QueryCursor

from deprank.languages import TreeSitterLanguage

logger = logging.getLogger(__name__)

_REQUIRE_CALLEES = frozenset({"require"})


@dataclass(frozen=True)
class ImportRecord:
    """One import as written in the source.

    ``level`` counts the leading dots of a Python relative import and is 0
    otherwise. ``names`` holds the names of a Python ``from ... import``.
    """

    specifier: str
    level: int = 0
    names: tuple[str, ...] = ()


def extract_imports(
    file_path: Path, language: TreeSitterLanguage
) -> list[ImportRecord]:
    """Parse a file and return its imports in source order.

    Args:
        file_path: Path to the source file.
        language: The tree-sitter language configuration.

    Returns:
        List of ImportRecord, one per imported module or require call.
        Repeated imports of the same module are kept.

    Raises:
        OSError: If file_path cannot be read.
    """
    source = file_path.read_bytes()
    if not source:
        return []

    tree = language.get_parser().parse(source)
    if tree.root_node.has_error:
        logger.warning("Syntax errors in %s; imports may be incomplete", file_path)

    cursor = QueryCursor(language.get_import_query())
    matches = cursor.matches(tree.root_node)

    found: list[tuple[int, int, ImportRecord]] = []
    for _pattern_idx, match_dict in matches:
        if "import" in match_dict:
            node = match_dict["import"][0]
            for offset, record in enumerate(_python_imports(node)):
                found.append((node.start_byte, offset, record))
            continue

        source_nodes = match_dict.get("source", [])
        if not source_nodes:
            continue
        callee_nodes = match_dict.get("callee")
        if callee_nodes and _text(callee_nodes[0]) not in _REQUIRE_CALLEES:
            continue
        specifier = _unquote(_text(source_nodes[0]))
        if specifier:
            found.append(
                (source_nodes[0].start_byte, 0, ImportRecord(specifier=specifier))
            )

    found.sort(key=lambda item: (item[0], item[1]))
    return [record for _start, _offset, record in found]


def _python_imports(node: Node) -> list[ImportRecord]:
    """Turn an import_statement or import_from_statement into records."""
    if node.type == "import_statement":
        return [
            ImportRecord(specifier=_text(_unalias(child)))
            for child in node.children_by_field_name("name")
        ]

    module_node = node.child_by_field_name("module_name")
    if module_node is None:
        return []

    level = 0
    specifier = _text(module_node)
    if module_node.type == "relative_import":
        specifier = ""
        for child in module_node.children:
            if child.type == "import_prefix":
                level = _text(child).count(".")
            elif child.type == "dotted_name":
                specifier = _text(child)

    names = tuple(
        _text(_unalias(child)) for child in node.children_by_field_name("name")
    )
    return [ImportRecord(specifier=specifier, level=level, names=names)]


def _unalias(node: Node) -> Node:
    """Return the imported name of an ``x as y`` clause."""
    if node.type == "aliased_import":
        name = node.child_by_field_name("name")
        if name is not None:
            return name
    return node


def _text(node: Node) -> str:
    return node.text.decode("utf-8", errors="replace")


def _unquote(literal: str) -> str:
    """Strip the quotes from a string literal's source text."""
    if len(literal) >= 2 and literal[0] == literal[-1] and literal[0] in "'\"`":
        return literal[1:-1]
    return literal
