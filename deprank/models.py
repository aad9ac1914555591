"""Core data structures for deprank."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Dependency:
    """A resolved import edge: the importing module depends on target."""

    target: str
    specifier: str = ""


@dataclass(frozen=True)
class Module:
    """A source file as returned by a module graph provider."""

    key: str
    dependencies: list[Dependency] = field(default_factory=list)


@dataclass(eq=False)
class Candidate:
    """A ranking node for one source file.

    ``links``, ``outbound`` and ``weight`` are only written by the rank
    solver; everything else is fixed once the candidate set is built.
    """

    key: str
    module: Module
    lines: int
    dependencies: list[str] = field(default_factory=list)
    dependents: int = 0
    links: dict[str, float] = field(default_factory=dict)
    outbound: float = 0.0
    weight: float = 0.0


@dataclass(frozen=True)
class DiscoveryOptions:
    """Options understood by the tree-sitter module graph provider."""

    extra_ignores: tuple[str, ...] = ()
    language: str | None = None


@dataclass
class Options:
    """Configuration for a single ranking run."""

    paths: list[str]
    extensions: list[str] | None = None
    deps_first: bool = False
    provider_options: Any = None
    fast: bool = False
