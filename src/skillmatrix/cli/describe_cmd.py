"""``skillmatrix describe <skill>`` - Show everything known about one skill.

Accepts a full skill id or an alias.

Exit Codes:
    0 Skill found.
    1 Unknown skill, or the document is invalid.
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
)
from skillmatrix.core.query import describe_skill


@click.command("describe")
@click.argument("skill")
@matrix_option
@cache_option
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
def describe_command(
    skill: str, matrix_path: str, cache_path: str | None, output_format: str
) -> None:
    """Describe SKILL: its conflicts, requirements, recommendations and alternatives."""
    index = load_or_exit(matrix_path, cache_path)
    resolved = describe_skill(index, skill)

    if resolved is None:
        if output_format == "json":
            click.echo(json.dumps({"error": f"Unknown skill: {skill}"}))
        else:
            click.echo(f"Error: Unknown skill: {skill}")
        sys.exit(EXIT_INVALID)

    from skillmatrix.cli.output import print_skill_detail, skill_to_json
    if output_format == "json":
        click.echo(json.dumps(skill_to_json(resolved), indent=2))
    else:
        print_skill_detail(index, resolved)
    sys.exit(EXIT_OK)
