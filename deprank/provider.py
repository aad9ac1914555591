"""Module graph providers: turn root paths into modules with resolved edges."""

from __future__ import annotations

import logging
import os
import posixpath
from pathlib import Path
from typing import Any, Protocol

from deprank.discovery import discover_paths
from deprank.errors import DiscoveryError
from deprank.languages import LANGUAGES, SCRIPT_EXTENSIONS
from deprank.models import Dependency, DiscoveryOptions, Module
from deprank.parsing import ImportRecord, extract_imports

logger = logging.getLogger(__name__)


class ModuleGraphProvider(Protocol):
    """Anything that can produce a static module graph for a set of roots."""

    def discover(self, paths: list[str], options: Any = None) -> list[Module]:
        """Return every module under paths with its resolved dependencies.

        Raises:
            DiscoveryError: If the paths cannot be searched or read.
        """
        ...


def _join(base: str, *parts: str) -> str:
    """Join path parts into a normalized posix key."""
    return Path(os.path.normpath(os.path.join(base, *parts))).as_posix()


class ImportResolver:
    """Resolve import records to keys of discovered files.

    Only files in ``keys`` can be targets; package imports, the standard
    library and missing files resolve to nothing.
    """

    def __init__(self, keys: set[str], python_roots: list[str]) -> None:
        self.keys = keys
        self.python_roots = python_roots

    def resolve(self, importer: str, language: str, record: ImportRecord) -> list[str]:
        if language == "python":
            return self._resolve_python(importer, record)
        return self._resolve_script(importer, record.specifier)

    def _resolve_script(self, importer: str, specifier: str) -> list[str]:
        if not specifier.startswith((".", "/")):
            return []
        base = _join(posixpath.dirname(importer) or ".", specifier)
        candidates = [base]
        candidates.extend(base + ext for ext in SCRIPT_EXTENSIONS)
        candidates.extend(f"{base}/index{ext}" for ext in SCRIPT_EXTENSIONS)
        for candidate in candidates:
            if candidate in self.keys:
                return [candidate]
        return []

    def _resolve_python(self, importer: str, record: ImportRecord) -> list[str]:
        parts = record.specifier.split(".") if record.specifier else []
        if record.level:
            base = posixpath.dirname(importer)
            for _ in range(record.level - 1):
                base = posixpath.dirname(base)
            bases = [base or "."]
        else:
            bases = self.python_roots

        for base in bases:
            targets = self._resolve_python_in(base, parts, record.names)
            if targets:
                return targets
        return []

    def _resolve_python_in(
        self, base: str, parts: list[str], names: tuple[str, ...]
    ) -> list[str]:
        if not names:
            # ``import a.b.c`` depends on the most specific module that exists.
            for end in range(len(parts), 0, -1):
                target = self._python_file(base, parts[:end])
                if target is not None:
                    return [target]
            return []

        targets: list[str] = []
        needs_module = False
        for name in names:
            submodule = self._python_file(base, [*parts, name])
            if submodule is not None:
                targets.append(submodule)
            else:
                needs_module = True
        if needs_module:
            module = self._python_file(base, parts)
            if module is not None:
                targets.insert(0, module)
        return targets

    def _python_file(self, base: str, parts: list[str]) -> str | None:
        if parts:
            candidates = [
                _join(base, *parts) + ".py",
                _join(base, *parts, "__init__.py"),
            ]
        else:
            candidates = [_join(base, "__init__.py")]
        for candidate in candidates:
            if candidate in self.keys:
                return candidate
        return None


def _python_roots(paths: list[str]) -> list[str]:
    """Directories absolute Python imports are resolved against."""
    roots: list[str] = []
    for raw in paths:
        root = Path(raw)
        base = _join(str(root.parent)) if root.is_file() else _join(raw)
        for candidate in (base, _join(base, "src")):
            if candidate not in roots:
                roots.append(candidate)
    return roots


class TreeSitterProvider:
    """Discover source files and resolve their imports with tree-sitter."""

    def discover(
        self, paths: list[str], options: DiscoveryOptions | None = None
    ) -> list[Module]:
        """Return one Module per discovered file, edges in source order.

        Args:
            paths: Root directories or files.
            options: Exclude patterns and language filter.

        Returns:
            Modules keyed by normalized posix path.

        Raises:
            DiscoveryError: If a root is missing or a file cannot be read.
        """
        options = options or DiscoveryOptions()
        files = discover_paths(
            paths,
            extra_ignores=list(options.extra_ignores),
            language_filter=options.language,
        )
        keys = {path.as_posix() for path, _ in files}
        resolver = ImportResolver(keys, _python_roots(paths))

        modules: list[Module] = []
        for path, lang_name in files:
            key = path.as_posix()
            try:
                records = extract_imports(path, LANGUAGES[lang_name])
            except OSError as exc:
                raise DiscoveryError(key, str(exc)) from exc

            dependencies: list[Dependency] = []
            for record in records:
                specifier = "." * record.level + record.specifier
                targets = resolver.resolve(key, lang_name, record)
                if not targets:
                    logger.debug("%s: unresolved import %r", key, specifier)
                dependencies.extend(
                    Dependency(target=target, specifier=specifier) for target in targets
                )
            modules.append(Module(key=key, dependencies=dependencies))

        logger.debug("Discovered %d modules under %s", len(modules), ", ".join(paths))
        return modules
