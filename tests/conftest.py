"""Shared test fixtures for deprank."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from deprank.builder import count_dependents
from deprank.models import Candidate, Dependency, Module

CandidateFactory = Callable[[dict[str, tuple[int, list[str]]]], list[Candidate]]

# key -> (lines, dependency keys) for the reference JavaScript project.
GOLDEN_GRAPH: dict[str, tuple[int, list[str]]] = {
    "fixtures/concepts.js": (4, ["fixtures/todo.js", "fixtures/user/index.js"]),
    "fixtures/core.js": (3, []),
    "fixtures/index.js": (4, ["fixtures/concepts.js", "fixtures/utils.js"]),
    "fixtures/todo.js": (6, ["fixtures/utils.js"]),
    "fixtures/user/index.js": (1, ["fixtures/user/user.js"]),
    "fixtures/user/user.js": (4, ["fixtures/utils.js"]),
    "fixtures/utils.js": (4, ["fixtures/core.js"]),
}

GOLDEN_RANKING: list[tuple[str, int, int, float]] = [
    ("fixtures/core.js", 3, 1, 0.284098),
    ("fixtures/utils.js", 4, 3, 0.268437),
    ("fixtures/user/user.js", 4, 1, 0.132253),
    ("fixtures/todo.js", 6, 1, 0.089796),
    ("fixtures/user/index.js", 1, 1, 0.089796),
    ("fixtures/concepts.js", 4, 1, 0.079694),
    ("fixtures/index.js", 4, 0, 0.055926),
]

GOLDEN_TABLE = """\
| Filename               | Lines | Dependents | PageRank |
----------------------------------------------------------
| fixtures/core.js       | 3     | 1          | 0.284098 |
| fixtures/utils.js      | 4     | 3          | 0.268437 |
| fixtures/user/user.js  | 4     | 1          | 0.132253 |
| fixtures/todo.js       | 6     | 1          | 0.089796 |
| fixtures/user/index.js | 1     | 1          | 0.089796 |
| fixtures/concepts.js   | 4     | 1          | 0.079694 |
| fixtures/index.js      | 4     | 0          | 0.055926 |"""

_JS_SOURCES: dict[str, str] = {
    "core.js": """\
export function core() {
  return 'core';
}
""",
    "utils.js": """\
import { core } from './core';

export const util = () => core();
export const other = 1;
""",
    "user/user.js": """\
import { util } from '../utils';

export class User {}
export const name = util();
""",
    "todo.js": """\
const { util } = require('./utils');

export function todo() {
  return util();
}

""",
    "user/index.js": """\
export * from './user';
""",
    "concepts.js": """\
import { todo } from './todo';
import { User } from './user';

export const concepts = [todo, User];
""",
    "index.js": """\
import { concepts } from './concepts';
import { util } from './utils';

export default { concepts, util };
""",
}


def make_candidates(graph: dict[str, tuple[int, list[str]]]) -> list[Candidate]:
    """Build candidates straight from a key -> (lines, deps) mapping."""
    candidates = []
    for key, (lines, deps) in graph.items():
        module = Module(key=key, dependencies=[Dependency(target=d) for d in deps])
        candidates.append(
            Candidate(key=key, module=module, lines=lines, dependencies=list(deps))
        )
    count_dependents(candidates)
    return candidates


@pytest.fixture()
def candidate_factory() -> CandidateFactory:
    """Factory turning a key -> (lines, deps) mapping into candidates."""
    return make_candidates


@pytest.fixture()
def golden_candidates() -> list[Candidate]:
    """Candidates for the reference seven-file JavaScript project."""
    return make_candidates(GOLDEN_GRAPH)


@pytest.fixture()
def js_repo(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Write the reference JavaScript project to tmp_path/fixtures.

    The working directory is switched to tmp_path so keys come out as
    ``fixtures/<file>``.
    """
    root = tmp_path / "fixtures"
    for rel, source in _JS_SOURCES.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(source, encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    return root


@pytest.fixture()
def python_repo(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create a small Python package with absolute and relative imports."""
    root = tmp_path / "proj"
    pkg = root / "app"
    pkg.mkdir(parents=True)
    (pkg / "__init__.py").write_text("", encoding="utf-8")
    (pkg / "models.py").write_text(
        '''\
class User:
    """A user model."""

    def __init__(self, name: str) -> None:
        self.name = name
''',
        encoding="utf-8",
    )
    (pkg / "utils.py").write_text(
        """\
import os


def format_name(name: str) -> str:
    return name.strip().title()
""",
        encoding="utf-8",
    )
    (pkg / "service.py").write_text(
        """\
from .models import User
from . import utils


def make(name: str) -> User:
    return User(utils.format_name(name))
""",
        encoding="utf-8",
    )
    (root / "main.py").write_text(
        """\
import app.service
from app.models import User
from app import utils


def run() -> None:
    user = app.service.make("alice")
    print(user.name, utils, User)
""",
        encoding="utf-8",
    )
    monkeypatch.chdir(tmp_path)
    return root
