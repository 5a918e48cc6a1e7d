"""``skillmatrix compile`` - Compile the matrix into a JSON index file.

Validates the document, merges every rule into a skill-centric index and
writes it as deterministic JSON. The file records the digest of the source
document, so it can be reused as a ``--cache`` by the query commands.

Exit Codes:
    0 Index written.
    1 The document is invalid.
    2 The document could not be loaded.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from skillmatrix.cli.common import EXIT_OK, fail_invalid, fail_load, matrix_option
from skillmatrix.config import DEFAULT_INDEX_FILENAME
from skillmatrix.core.compiler import compile_path
from skillmatrix.exceptions import MatrixLoadError, MatrixValidationError


@click.command("compile")
@matrix_option
@click.option(
    "--output", "-o",
    type=click.Path(dir_okay=False),
    default=None,
    help=f"Output path for the index (default: <matrix dir>/{DEFAULT_INDEX_FILENAME}).",
)
def compile_command(matrix_path: str, output: str | None) -> None:
    """Compile the skills matrix into a JSON index.

    Exit code 0 on success, 1 if the document is invalid, 2 if it cannot
    be loaded.
    """
    try:
        index, _ = compile_path(matrix_path)
    except MatrixLoadError as exc:
        fail_load(exc)
    except MatrixValidationError as exc:
        fail_invalid(exc.issues)

    out_path = Path(output) if output else Path(matrix_path).parent / DEFAULT_INDEX_FILENAME
    index.write(out_path)

    from skillmatrix.cli.output import print_compile_summary
    print_compile_summary(index, str(out_path))
    sys.exit(EXIT_OK)
