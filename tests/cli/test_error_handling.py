"""Tests for CLI error handling shared by every command.

Verifies:
    - Query commands exit 2 when the matrix cannot be loaded.
    - Query commands exit 1 when the matrix is invalid.
    - Compile warnings are logged, not fatal.
    - ``--verbose`` and ``--help`` work at the group level.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from skillmatrix.cli.main import cli


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click CliRunner for invoking commands."""
    return CliRunner()


QUERY_COMMANDS = [
    ["describe", "react"],
    ["options", "framework"],
    ["check", "-s", "react"],
]


class TestLoadFailures:
    @pytest.mark.parametrize("args", QUERY_COMMANDS)
    def test_missing_matrix_exits_two(
        self, runner: CliRunner, tmp_path: Path, args: list[str]
    ) -> None:
        result = runner.invoke(cli, args + ["-m", str(tmp_path / "absent.yaml")])
        assert result.exit_code == 2
        assert "Error" in result.output

    @pytest.mark.parametrize("args", QUERY_COMMANDS)
    def test_invalid_matrix_exits_one(
        self, runner: CliRunner, invalid_matrix_file: Path, args: list[str]
    ) -> None:
        result = runner.invoke(cli, args + ["-m", str(invalid_matrix_file)])
        assert result.exit_code == 1

    def test_default_matrix_missing(self, runner: CliRunner) -> None:
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["check"])
        assert result.exit_code == 2
        assert "skills-matrix.yaml" in result.output


class TestGroupOptions:
    def test_help_lists_commands(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        for command in ("validate", "compile", "describe", "options", "check"):
            assert command in result.output

    def test_verbose_flag(self, runner: CliRunner, matrix_file: Path) -> None:
        result = runner.invoke(cli, ["-v", "validate", "-m", str(matrix_file)])
        assert result.exit_code == 0

    def test_warnings_do_not_block_queries(
        self, runner: CliRunner, warning_matrix_file: Path
    ) -> None:
        result = runner.invoke(cli, ["describe", "swr", "-m", str(warning_matrix_file)])
        assert result.exit_code == 0
