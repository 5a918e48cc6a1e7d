"""Tests for ``skillmatrix check``."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from skillmatrix.cli.main import cli


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click CliRunner for invoking commands."""
    return CliRunner()


class TestCheck:
    def test_valid_selection(self, runner: CliRunner, matrix_file: Path) -> None:
        result = runner.invoke(
            cli, ["check", "-s", "react", "-s", "zustand", "-s", "vitest", "-m", str(matrix_file)]
        )
        assert result.exit_code == 0
        assert "Selection is valid" in result.output

    def test_invalid_selection(self, runner: CliRunner, matrix_file: Path) -> None:
        result = runner.invoke(
            cli, ["check", "-s", "react", "-s", "vue", "-m", str(matrix_file)]
        )
        assert result.exit_code == 1
        assert "Selection is invalid" in result.output

    def test_json_output(self, runner: CliRunner, matrix_file: Path) -> None:
        result = runner.invoke(
            cli,
            ["check", "-s", "vue", "-s", "rq", "-m", str(matrix_file), "--format", "json"],
        )
        data = json.loads(result.output)
        assert data["valid"] is False
        assert [e["type"] for e in data["errors"]] == ["missing_requirement"]
        assert data["errors"][0]["skills"] == ["react-query", "react", "react-native"]

    def test_warnings_do_not_fail(self, runner: CliRunner, matrix_file: Path) -> None:
        result = runner.invoke(
            cli, ["check", "-s", "react", "-m", str(matrix_file), "--format", "json"]
        )
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert {w["type"] for w in data["warnings"]} == {"missing_recommendation"}
