"""Tests for ``skillmatrix compile``.

Verifies:
    - The index is written next to the matrix by default.
    - ``--output`` writes to a custom path.
    - The written index is valid JSON with the expected header.
    - Invalid and unloadable documents exit 1 and 2 without writing.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from skillmatrix.cli.main import cli
from skillmatrix.core.compiler import ResolvedIndex


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click CliRunner for invoking commands."""
    return CliRunner()


class TestCompile:
    def test_default_output_path(self, runner: CliRunner, matrix_file: Path) -> None:
        result = runner.invoke(cli, ["compile", "-m", str(matrix_file)])
        assert result.exit_code == 0
        out = matrix_file.parent / "skills-index.json"
        assert out.exists()
        assert "Compiled 12 skills" in result.output

    def test_custom_output(self, runner: CliRunner, matrix_file: Path, tmp_path: Path) -> None:
        out = tmp_path / "build" / "index.json"
        result = runner.invoke(cli, ["compile", "-m", str(matrix_file), "-o", str(out)])
        assert result.exit_code == 0
        data = json.loads(out.read_text())
        assert data["generated_by"] == "skillmatrix"
        assert "redux" in data["skills"]

    def test_output_reads_back(self, runner: CliRunner, matrix_file: Path, tmp_path: Path) -> None:
        out = tmp_path / "index.json"
        runner.invoke(cli, ["compile", "-m", str(matrix_file), "-o", str(out)])
        index = ResolvedIndex.read(out)
        assert index.resolve_alias("rq") == "react-query"

    def test_invalid_matrix(self, runner: CliRunner, invalid_matrix_file: Path, tmp_path: Path) -> None:
        out = tmp_path / "index.json"
        result = runner.invoke(cli, ["compile", "-m", str(invalid_matrix_file), "-o", str(out)])
        assert result.exit_code == 1
        assert not out.exists()

    def test_broken_matrix(self, runner: CliRunner, broken_matrix_file: Path, tmp_path: Path) -> None:
        out = tmp_path / "index.json"
        result = runner.invoke(cli, ["compile", "-m", str(broken_matrix_file), "-o", str(out)])
        assert result.exit_code == 2
        assert not out.exists()
