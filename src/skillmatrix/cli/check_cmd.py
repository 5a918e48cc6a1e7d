"""``skillmatrix check`` - Validate a complete selection.

Reports conflicts, category exclusivity violations, unmet requirements and
empty required categories as errors; recommendations not taken up,
discouraged combinations and unused setup skills as warnings.

Exit Codes:
    0 The selection is valid (warnings allowed).
    1 The selection has errors, or the document is invalid.
    2 The document could not be loaded.
"""

from __future__ import annotations

import json
import sys

import click

from skillmatrix.cli.common import (
    EXIT_INVALID,
    EXIT_OK,
    cache_option,
    load_or_exit,
    matrix_option,
    selection_option,
)
from skillmatrix.core.query import Selection, validate_selection


@click.command("check")
@selection_option
@matrix_option
@cache_option
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
def check_command(
    selected: tuple[str, ...],
    matrix_path: str,
    cache_path: str | None,
    output_format: str,
) -> None:
    """Check that the ``--select`` skills form a valid combination."""
    index = load_or_exit(matrix_path, cache_path)
    result = validate_selection(index, Selection(index, selected))

    if output_format == "json":
        click.echo(json.dumps({
            "valid": result.valid,
            "errors": [
                {"type": i.type.value, "message": i.message, "skills": list(i.skills)}
                for i in result.errors
            ],
            "warnings": [
                {"type": i.type.value, "message": i.message, "skills": list(i.skills)}
                for i in result.warnings
            ],
        }, indent=2))
    else:
        from skillmatrix.cli.output import print_selection_validation
        print_selection_validation(result)
    sys.exit(EXIT_OK if result.valid else EXIT_INVALID)
