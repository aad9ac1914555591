"""Tests for the CLI entry point."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from deprank.cli import app
from deprank.errors import ConvergenceError
from tests.conftest import GOLDEN_TABLE

runner = CliRunner()


class TestCLI:
    """Tests for the deprank CLI."""

    def test_ranks_reference_project(self, js_repo: Path) -> None:
        result = runner.invoke(app, ["fixtures"])
        assert result.exit_code == 0
        assert result.stdout == GOLDEN_TABLE + "\n"

    def test_default_path_is_cwd(
        self, js_repo: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(js_repo)
        result = runner.invoke(app, [])
        assert result.exit_code == 0
        assert "| core.js " in result.stdout

    def test_max_files(self, js_repo: Path) -> None:
        result = runner.invoke(app, ["fixtures", "--max-files", "2"])
        assert result.exit_code == 0
        rows = result.stdout.splitlines()[2:]
        assert len(rows) == 2
        assert rows[0].startswith("| fixtures/core.js ")

    def test_deps_first(self, js_repo: Path) -> None:
        result = runner.invoke(app, ["fixtures", "--deps-first"])
        assert result.exit_code == 0
        keys = [row.split("|")[1].strip() for row in result.stdout.splitlines()[2:]]
        assert keys.index("fixtures/core.js") < keys.index("fixtures/utils.js")
        assert keys.index("fixtures/utils.js") < keys.index("fixtures/index.js")

    def test_extension_without_dot(self, js_repo: Path) -> None:
        (js_repo / "tool.py").write_text("import os\n", encoding="utf-8")
        result = runner.invoke(app, ["fixtures", "--ext", "py"])
        assert result.exit_code == 0
        assert "fixtures/tool.py" in result.stdout
        assert "core.js" not in result.stdout

    def test_exclude(self, js_repo: Path) -> None:
        result = runner.invoke(app, ["fixtures", "--exclude", "user/"])
        assert result.exit_code == 0
        assert "user/" not in result.stdout

    def test_language_filter(self, js_repo: Path) -> None:
        result = runner.invoke(app, ["fixtures", "--language", "javascript"])
        assert result.exit_code == 0
        assert "fixtures/core.js" in result.stdout

    def test_unsupported_language(self, js_repo: Path) -> None:
        result = runner.invoke(app, ["fixtures", "--language", "cobol"])
        assert result.exit_code == 1
        assert "unsupported language" in result.output

    def test_missing_path(self, tmp_path: Path) -> None:
        result = runner.invoke(app, [str(tmp_path / "nope")])
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_empty_directory(self, tmp_path: Path) -> None:
        (tmp_path / "readme.txt").write_text("hello", encoding="utf-8")
        result = runner.invoke(app, [str(tmp_path)])
        assert result.exit_code == 1
        assert "No source files found." in result.output

    def test_fast(self, js_repo: Path) -> None:
        result = runner.invoke(app, ["fixtures", "--fast"])
        assert result.exit_code == 0
        assert result.stdout == GOLDEN_TABLE + "\n"

    def test_convergence_error_reported(self, js_repo: Path) -> None:
        with patch(
            "deprank.cli.rank_paths",
            side_effect=ConvergenceError(10_000, 0.5),
        ):
            result = runner.invoke(app, ["fixtures"])
        assert result.exit_code == 1
        assert "did not converge" in result.output

    def test_programming_error_not_swallowed(self, js_repo: Path) -> None:
        with patch("deprank.cli.rank_paths", side_effect=TypeError("bug")):
            result = runner.invoke(app, ["fixtures"])
        assert result.exit_code == 1
        assert isinstance(result.exception, TypeError)
