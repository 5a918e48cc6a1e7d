"""Shared fixtures for CLI tests.

Provides matrix documents in the states the commands must handle: valid,
valid with warnings, invalid, and unparseable.
"""

from __future__ import annotations

from pathlib import Path

import pytest

WARNING_MATRIX = """\
version: "1.0"
categories:
  data:
    name: Data
skills:
  swr:
    category: data
relationships:
  recommends:
    - when: swr
      suggest: [swr]
"""

INVALID_MATRIX = """\
version: "1.0"
categories:
  data:
    name: Data
skills:
  swr:
    category: data
relationships:
  requires:
    - skill: swr
      needs: [react]
"""


@pytest.fixture
def warning_matrix_file(tmp_path: Path) -> Path:
    """A matrix that compiles but carries a self-recommendation warning."""
    path = tmp_path / "warn.yaml"
    path.write_text(WARNING_MATRIX)
    return path


@pytest.fixture
def invalid_matrix_file(tmp_path: Path) -> Path:
    """A matrix whose requirement names an unknown skill."""
    path = tmp_path / "invalid.yaml"
    path.write_text(INVALID_MATRIX)
    return path


@pytest.fixture
def broken_matrix_file(tmp_path: Path) -> Path:
    """A file that is not valid YAML."""
    path = tmp_path / "broken.yaml"
    path.write_text("version: [1.0\nskills: {\n")
    return path
