"""Rich output formatting helpers for the SkillMatrix CLI.

Provides consistent, severity-colored terminal output for validation
issues, resolved skills, category listings and selection checks.

Color Mapping:
    ERROR = bold red, WARNING = yellow, disabled = dim, recommended = green
"""

from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from skillmatrix.core.compiler import ResolvedIndex, ResolvedSkill
from skillmatrix.core.model import RequirementMode
from skillmatrix.core.query import (
    CategoryAvailability,
    SelectionValidation,
    SkillOption,
)
from skillmatrix.core.validator import Severity, ValidationIssue

_SEVERITY_STYLES: dict[Severity, str] = {
    Severity.ERROR: "bold red",
    Severity.WARNING: "yellow",
}

console = Console()


def severity_style(severity: Severity) -> str:
    """Return the Rich style string for a given severity level."""
    return _SEVERITY_STYLES.get(severity, "white")


def print_issues(issues: list[ValidationIssue]) -> None:
    """Print a table of validation issues followed by a one-line summary.

    Args:
        issues: Issues from ``validate_model`` or a ``MatrixValidationError``.
    """
    if not issues:
        console.print("[green]Skills matrix is valid. No issues found.[/green]")
        return

    table = Table(title="Validation Issues", show_header=True, header_style="bold")
    table.add_column("Severity", justify="center")
    table.add_column("Kind", style="dim")
    table.add_column("Message")
    table.add_column("Location", style="dim")
    for issue in issues:
        table.add_row(
            Text(issue.severity.name, style=severity_style(issue.severity)),
            issue.kind.value,
            issue.message,
            issue.location or "-",
        )
    console.print(table)

    errors = sum(1 for i in issues if i.is_error)
    warnings = len(issues) - errors
    parts = []
    if errors:
        parts.append(f"[red]{errors} error(s)[/red]")
    if warnings:
        parts.append(f"[yellow]{warnings} warning(s)[/yellow]")
    console.print(" | ".join(parts))


def print_compile_summary(index: ResolvedIndex, out_path: str) -> None:
    """Print the size of a freshly compiled index and where it was written."""
    conflict_pairs = sum(len(s.conflicts_with) for s in index) // 2
    requirements = sum(len(s.requires) for s in index)
    console.print(Panel(
        f"[bold green]Compiled {len(index)} skills[/bold green] in "
        f"{len(index.categories)} categories",
        title="Skills Index",
    ))
    console.print(f"  Conflict pairs: [bold]{conflict_pairs}[/bold]")
    console.print(f"  Requirements:   [bold]{requirements}[/bold]")
    console.print(f"  Source digest:  [dim]{index.source_digest}[/dim]")
    console.print(f"\nIndex written to: {out_path}")


def print_skill_detail(index: ResolvedIndex, skill: ResolvedSkill) -> None:
    """Print every relation of one resolved skill."""
    header = Text.assemble(
        ("Skill: ", "bold"), (skill.name, ""),
        ("  Id: ", "bold"), (skill.id, "dim"),
        ("  Category: ", "bold"), (skill.category, ""),
    )
    console.print(Panel(header, title="Skill"))
    if skill.alias:
        console.print(f"  Alias: {skill.alias}")
    if skill.description:
        console.print(f"  {skill.description}")

    name = index.display_name
    rows: list[tuple[str, str, str]] = []
    for c in skill.conflicts_with:
        rows.append(("conflicts with", name(c.skill_id), f"{c.reason} ({c.origin.value})"))
    for r in skill.requires:
        joiner = " or " if r.mode is RequirementMode.ANY_OF else ", "
        rows.append(("requires", joiner.join(name(s) for s in r.skill_ids), r.reason))
    for sid in skill.required_by:
        rows.append(("required by", name(sid), ""))
    for rec in skill.recommends:
        rows.append(("recommends", name(rec.skill_id), f"{rec.reason} ({rec.strength.value})"))
    for rec in skill.recommended_by:
        rows.append(("recommended by", name(rec.skill_id), f"{rec.reason} ({rec.strength.value})"))
    for alt in skill.alternatives:
        rows.append(("alternative", name(alt.skill_id), alt.purpose))
    for d in skill.discourages:
        rows.append(("discourages", name(d.skill_id), d.reason))
    for sid in skill.provides_setup_for:
        rows.append(("sets up", name(sid), ""))

    if not rows:
        console.print("[dim]No relationships.[/dim]")
        return
    table = Table(title="Relationships", show_header=True)
    table.add_column("Relation", style="bold")
    table.add_column("Skill")
    table.add_column("Reason", style="dim")
    for row in rows:
        table.add_row(*row)
    console.print(table)


def skill_to_json(skill: ResolvedSkill) -> dict[str, Any]:
    """Convert a resolved skill to a JSON-serializable dict."""
    return {
        "id": skill.id,
        "name": skill.name,
        "category": skill.category,
        "alias": skill.alias,
        "description": skill.description,
        "conflicts_with": [
            {"skill_id": c.skill_id, "reason": c.reason, "origin": c.origin.value}
            for c in skill.conflicts_with
        ],
        "requires": [
            {"mode": r.mode.value, "skill_ids": list(r.skill_ids), "reason": r.reason}
            for r in skill.requires
        ],
        "required_by": list(skill.required_by),
        "recommends": [
            {"skill_id": r.skill_id, "strength": r.strength.value, "reason": r.reason}
            for r in skill.recommends
        ],
        "recommended_by": [
            {"skill_id": r.skill_id, "strength": r.strength.value, "reason": r.reason}
            for r in skill.recommended_by
        ],
        "alternatives": list(skill.alternative_ids),
        "discourages": [{"skill_id": d.skill_id, "reason": d.reason} for d in skill.discourages],
        "provides_setup_for": list(skill.provides_setup_for),
    }


def print_skill_options(
    title: str,
    options: list[SkillOption],
    availability: CategoryAvailability,
) -> None:
    """Print a category listing with each skill's live state."""
    if availability.disabled:
        console.print(f"[dim]All options unavailable: {availability.reason}[/dim]")

    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("Skill", style="bold")
    table.add_column("Id", style="dim")
    table.add_column("Status", justify="center")
    table.add_column("Notes")
    for option in options:
        if option.selected:
            status = Text("SELECTED", style="bold cyan")
        elif option.disabled:
            status = Text("DISABLED", style="dim")
        elif option.recommended:
            status = Text("RECOMMENDED", style="bold green")
        else:
            status = Text("available", style="")
        notes = []
        if option.disabled_reason:
            notes.append(option.disabled_reason)
        notes.extend(option.recommended_reasons)
        if option.discouraged_reason:
            notes.append(f"warning: {option.discouraged_reason}")
        table.add_row(option.name, option.skill_id, status, "; ".join(notes))
    console.print(table)


def print_selection_validation(result: SelectionValidation) -> None:
    """Print the outcome of a full selection check."""
    if result.valid:
        console.print(Panel("[bold green]Selection is valid[/bold green]", title="Selection"))
    else:
        console.print(Panel("[bold red]Selection is invalid[/bold red]", title="Selection"))
    for issue in result.errors:
        console.print(f"  [red]- {issue.message}[/red]")
    for issue in result.warnings:
        console.print(f"  [yellow]! {issue.message}[/yellow]")
