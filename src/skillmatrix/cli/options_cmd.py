"""``skillmatrix options <category>`` - List a category's skills given a selection.

Shows, for each member of CATEGORY, whether it is selected, disabled (and
why), recommended, or discouraged given the ``--select`` skills. This is
the same view the setup wizard renders for one step.

Exit Codes:
    0 Listing printed.
    1 Unknown category, or the document is invalid.
    2 The document could not be loaded.
"""

from __future__ import annotations

import json
import sys
from dataclasses import asdict

import click

from skillmatrix.cli.common import (
    EXIT_INVALID,
    EXIT_OK,
    cache_option,
    load_or_exit,
    matrix_option,
    selection_option,
)
from skillmatrix.core.query import Selection, category_all_disabled, skills_in_category


@click.command("options")
@click.argument("category")
@selection_option
@matrix_option
@cache_option
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
def options_command(
    category: str,
    selected: tuple[str, ...],
    matrix_path: str,
    cache_path: str | None,
    output_format: str,
) -> None:
    """List the skills of CATEGORY with their state for the given selection."""
    index = load_or_exit(matrix_path, cache_path)
    if category not in index.categories:
        click.echo(f"Error: Unknown category: {category}")
        sys.exit(EXIT_INVALID)

    selection = Selection(index, selected)
    options = skills_in_category(index, selection, category)
    availability = category_all_disabled(index, selection, category)

    if output_format == "json":
        click.echo(json.dumps({
            "category": category,
            "all_disabled": availability.disabled,
            "reason": availability.reason,
            "options": [asdict(option) for option in options],
        }, indent=2))
    else:
        from skillmatrix.cli.output import print_skill_options
        print_skill_options(index.categories[category].name, options, availability)
    sys.exit(EXIT_OK)
