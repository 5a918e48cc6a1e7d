"""SkillMatrix CLI: author-side tooling for the skills compatibility matrix.

Entry point for the ``skillmatrix`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    validate   Check the matrix document and list every issue.
    compile    Compile the matrix into a JSON index file.
    describe   Show everything the index knows about one skill.
    options    List a category's skills given a selection.
    check      Validate a complete selection.

Usage::

    skillmatrix validate
    skillmatrix compile -o skills-index.json
    skillmatrix describe zustand --format json
    skillmatrix options state -s react -s zustand
    skillmatrix -v check -m ./skills-matrix.yaml -s react -s react-query
"""

from __future__ import annotations

import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from skillmatrix import __version__
from skillmatrix.cli.check_cmd import check_command
from skillmatrix.cli.compile_cmd import compile_command
from skillmatrix.cli.describe_cmd import describe_command
from skillmatrix.cli.options_cmd import options_command
from skillmatrix.cli.validate_cmd import validate_command


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Log debug output.")
def cli(verbose: bool) -> None:
    """SkillMatrix: compatibility rules for toolchain skill selection.

    Validate and compile the skills relationship matrix, and query which
    skills conflict, require, or recommend one another.
    """
    _configure_logging(verbose)


# Register all subcommands
cli.add_command(validate_command)
cli.add_command(compile_command)
cli.add_command(describe_command)
cli.add_command(options_command)
cli.add_command(check_command)
