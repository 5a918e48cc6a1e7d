"""Defaults and environment variable names for the SkillMatrix CLI."""

from __future__ import annotations

DEFAULT_MATRIX_FILENAME = "skills-matrix.yaml"
DEFAULT_INDEX_FILENAME = "skills-index.json"

ENV_MATRIX_PATH = "SKILLMATRIX_MATRIX"
ENV_CACHE_PATH = "SKILLMATRIX_CACHE"

# Bumped whenever the serialized index layout changes.
INDEX_FORMAT_VERSION = "1.0"
