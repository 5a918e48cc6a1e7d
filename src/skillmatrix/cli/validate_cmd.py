"""``skillmatrix validate`` - Check the matrix document and list every issue.

Loads the document, runs every validation check and prints all issues found,
errors and warnings alike, so authors can fix a batch of problems per run.

Exit Codes:
    0 No errors (warnings allowed unless ``--strict``).
    1 At least one error, or a warning under ``--strict``.
    2 The document could not be loaded.
"""

from __future__ import annotations

import json
import sys

import click

from skillmatrix.cli.common import EXIT_INVALID, EXIT_OK, fail_load, matrix_option
from skillmatrix.core.model import load_model
from skillmatrix.core.validator import validate_model
from skillmatrix.exceptions import MatrixLoadError


@click.command("validate")
@matrix_option
@click.option(
    "--strict", is_flag=True,
    help="Treat warnings as errors.",
)
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
def validate_command(matrix_path: str, strict: bool, output_format: str) -> None:
    """Validate the skills matrix document.

    Reports unknown references, circular requirements, undersized rules and
    contradictory rules. Exit code 0 if valid, 1 if invalid, 2 if the
    document cannot be loaded.
    """
    try:
        model = load_model(matrix_path)
    except MatrixLoadError as exc:
        fail_load(exc)

    report = validate_model(model)

    if output_format == "json":
        click.echo(json.dumps({
            "valid": report.ok,
            "issues": [
                {
                    "kind": issue.kind.value,
                    "severity": issue.severity.value,
                    "message": issue.message,
                    "location": issue.location,
                    "skills": list(issue.skills),
                }
                for issue in report.issues
            ],
        }, indent=2))
    else:
        from skillmatrix.cli.output import print_issues
        print_issues(report.issues)

    failed = not report.ok or (strict and bool(report.warnings))
    sys.exit(EXIT_INVALID if failed else EXIT_OK)
