"""Shared options and index loading for SkillMatrix subcommands.

Exit Codes (all commands):
    0 Success.
    1 The matrix, the selection, or the requested skill is invalid.
    2 The matrix document could not be loaded.
"""

from __future__ import annotations

import sys
from typing import Callable

import click

from skillmatrix.config import DEFAULT_MATRIX_FILENAME, ENV_CACHE_PATH, ENV_MATRIX_PATH
from skillmatrix.core.compiler import ResolvedIndex, load_index
from skillmatrix.core.validator import ValidationIssue
from skillmatrix.exceptions import MatrixLoadError, MatrixValidationError

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_LOAD_ERROR = 2


def matrix_option(func: Callable) -> Callable:
    """``--matrix/-m``: path to the matrix document."""
    return click.option(
        "--matrix", "-m", "matrix_path",
        type=click.Path(dir_okay=False),
        envvar=ENV_MATRIX_PATH,
        default=DEFAULT_MATRIX_FILENAME,
        show_default=True,
        help=f"Skills matrix document (env: {ENV_MATRIX_PATH}).",
    )(func)


def cache_option(func: Callable) -> Callable:
    """``--cache``: optional compiled-index cache file."""
    return click.option(
        "--cache", "cache_path",
        type=click.Path(dir_okay=False),
        envvar=ENV_CACHE_PATH,
        default=None,
        help=f"Reuse a compiled index cache when fresh (env: {ENV_CACHE_PATH}).",
    )(func)


def selection_option(func: Callable) -> Callable:
    """``--select/-s``: a selected skill id or alias; repeatable."""
    return click.option(
        "--select", "-s", "selected",
        multiple=True,
        help="Selected skill id or alias (repeatable).",
    )(func)


def fail_load(exc: MatrixLoadError) -> None:
    """Report an unloadable document and exit with code 2."""
    click.echo(f"Error: {exc}", err=True)
    sys.exit(EXIT_LOAD_ERROR)


def fail_invalid(issues: list[ValidationIssue]) -> None:
    """Report an invalid document and exit with code 1."""
    from skillmatrix.cli.output import print_issues
    print_issues(issues)
    sys.exit(EXIT_INVALID)


def load_or_exit(matrix_path: str, cache_path: str | None) -> ResolvedIndex:
    """Load the compiled index, exiting with the documented code on failure."""
    try:
        index, _ = load_index(matrix_path, cache_path)
    except MatrixLoadError as exc:
        fail_load(exc)
    except MatrixValidationError as exc:
        fail_invalid(exc.issues)
    return index
