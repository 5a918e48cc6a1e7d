"""Consistency validation for an authored relationship model.

``validate_model`` runs every check and collects all issues; it never stops
at the first problem, so authors can fix a batch of mistakes per run.

Checks performed:

1. **Reference integrity:** every skill id named by an alias, category
   membership, rule, alternative group, suggested stack or setup link
   exists in the skill table.
2. **Acyclic requirements:** the ``skill -> required skill`` graph has no
   cycle (see ``find_cycles``).
3. **Rule size:** conflict rules name at least two distinct skills;
   requirement rules need at least one skill.
4. **Contradictions:** a skill that requires a skill it explicitly conflicts
   with can never be selected (warning).
5. **Categories:** every skill belongs to a defined category, listed
   members agree with the skill's own category, parents exist.
"""

from __future__ import annotations

import logging
from collections import defaultdict

from skillmatrix.core.model.models import RelationshipModel
from skillmatrix.core.validator.cycles import find_cycles
from skillmatrix.core.validator.issues import (
    IssueKind,
    Severity,
    ValidationIssue,
    ValidationReport,
)

logger = logging.getLogger(__name__)


class _Collector:
    """Accumulates issues and resolves references against the model."""

    def __init__(self, model: RelationshipModel) -> None:
        self.model = model
        self.issues: list[ValidationIssue] = []

    def add(
        self,
        kind: IssueKind,
        severity: Severity,
        message: str,
        location: str = "",
        skills: tuple[str, ...] = (),
    ) -> None:
        self.issues.append(ValidationIssue(kind, severity, message, location, skills))

    def ref(self, ref: str, context: str, location: str) -> str | None:
        """Resolve a reference, reporting it if it names no known skill."""
        skill_id = self.model.resolve(ref)
        if skill_id in self.model.skills:
            return skill_id
        self.add(
            IssueKind.UNKNOWN_SKILL,
            Severity.ERROR,
            f"{context} references unknown skill {ref!r}",
            location,
            (ref,),
        )
        return None

    def refs(self, refs, context: str, location: str) -> list[str]:
        resolved = (self.ref(r, context, location) for r in refs)
        return [r for r in resolved if r is not None]


# ---------------------------------------------------------------------------
# Individual checks
# ---------------------------------------------------------------------------


def _check_aliases(c: _Collector) -> None:
    for alias, target in c.model.aliases.items():
        if alias in c.model.skills and alias != target:
            c.add(
                IssueKind.ALIAS_SHADOW,
                Severity.ERROR,
                f"Alias {alias!r} shadows the skill id {alias!r} "
                f"(it points at {target!r})",
                f"skill_aliases.{alias}",
                (alias, target),
            )
        if target not in c.model.skills:
            c.add(
                IssueKind.UNKNOWN_SKILL,
                Severity.ERROR,
                f"Alias {alias!r} points at unknown skill {target!r}",
                f"skill_aliases.{alias}",
                (target,),
            )


def _check_categories(c: _Collector) -> None:
    model = c.model
    for category in model.categories.values():
        location = f"categories.{category.id}"
        if category.parent is not None and category.parent not in model.categories:
            c.add(
                IssueKind.UNKNOWN_CATEGORY,
                Severity.ERROR,
                f"Category {category.id!r} has unknown parent {category.parent!r}",
                location,
            )
        for member in c.refs(category.members, f"Category {category.id!r}", location):
            owner = model.skills[member].category
            if owner != category.id:
                c.add(
                    IssueKind.MEMBERSHIP_MISMATCH,
                    Severity.ERROR,
                    f"Category {category.id!r} lists {member!r}, but that skill "
                    f"belongs to category {owner!r}",
                    location,
                    (member,),
                )

    for skill in model.skills.values():
        location = f"skills.{skill.id}"
        if skill.category is None:
            c.add(
                IssueKind.MISSING_CATEGORY,
                Severity.ERROR,
                f"Skill {skill.id!r} has no category",
                location,
                (skill.id,),
            )
        elif skill.category not in model.categories:
            c.add(
                IssueKind.UNKNOWN_CATEGORY,
                Severity.ERROR,
                f"Skill {skill.id!r} names unknown category {skill.category!r}",
                location,
                (skill.id,),
            )
        c.refs(skill.provides_setup_for, f"Setup skill {skill.id!r}", location)


def _check_conflicts(c: _Collector) -> None:
    for rule in c.model.conflicts:
        members = set(c.refs(rule.skills, "Conflict rule", rule.location))
        distinct = {c.model.resolve(ref) for ref in rule.skills}
        if len(distinct) < 2:
            c.add(
                IssueKind.UNDERSIZED_RULE,
                Severity.ERROR,
                f"Conflict rule needs at least two distinct skills, got "
                f"{len(distinct)} ({rule.reason!r})",
                rule.location,
                tuple(sorted(members)),
            )

    for rule in c.model.discourages:
        c.refs(rule.skills, "Discourage rule", rule.location)
        if len({c.model.resolve(ref) for ref in rule.skills}) < 2:
            c.add(
                IssueKind.UNDERSIZED_RULE,
                Severity.WARNING,
                f"Discourage rule has fewer than two distinct skills ({rule.reason!r})",
                rule.location,
            )


def _check_requirements(c: _Collector) -> None:
    for rule in c.model.requires:
        c.ref(rule.skill, "Requirement rule", rule.location)
        if not rule.needs:
            c.add(
                IssueKind.EMPTY_REQUIREMENT,
                Severity.ERROR,
                f"Requirement rule for {rule.skill!r} needs no skills",
                rule.location,
                (rule.skill,),
            )
        c.refs(rule.needs, f"Requirement rule for {rule.skill!r}", rule.location)


def _check_recommendations(c: _Collector) -> None:
    for rule in c.model.recommends:
        trigger = c.ref(rule.when, "Recommendation rule", rule.location)
        if not rule.suggest:
            c.add(
                IssueKind.UNDERSIZED_RULE,
                Severity.WARNING,
                f"Recommendation rule for {rule.when!r} suggests nothing",
                rule.location,
            )
        for suggestion in rule.suggest:
            target = c.ref(
                suggestion.skill, f"Recommendation rule for {rule.when!r}", rule.location
            )
            if target is not None and target == trigger:
                c.add(
                    IssueKind.SELF_RECOMMENDATION,
                    Severity.WARNING,
                    f"Skill {trigger!r} recommends itself",
                    rule.location,
                    (trigger,),
                )


def _check_alternatives(c: _Collector) -> None:
    for group in c.model.alternatives:
        c.refs(group.skills, f"Alternative group {group.purpose!r}", group.location)
        if len({c.model.resolve(ref) for ref in group.skills}) < 2:
            c.add(
                IssueKind.UNDERSIZED_RULE,
                Severity.WARNING,
                f"Alternative group {group.purpose!r} has fewer than two skills",
                group.location,
            )


def _check_stacks(c: _Collector) -> None:
    for stack in c.model.suggested_stacks:
        for subcategories in stack.skills.values():
            c.refs(subcategories.values(), f"Suggested stack {stack.id!r}", stack.location)


def _check_cycles(c: _Collector) -> None:
    graph: dict[str, list[str]] = defaultdict(list)
    for rule in c.model.requires:
        subject = c.model.resolve(rule.skill)
        for need in rule.needs:
            target = c.model.resolve(need)
            if target not in graph[subject]:
                graph[subject].append(target)

    for cycle in find_cycles(graph):
        c.add(
            IssueKind.REQUIREMENT_CYCLE,
            Severity.ERROR,
            f"Circular requirement: {' -> '.join(cycle)}",
            "relationships.requires",
            tuple(cycle),
        )


def _check_contradictions(c: _Collector) -> None:
    conflicting: set[frozenset[str]] = set()
    for rule in c.model.conflicts:
        members = {c.model.resolve(ref) for ref in rule.skills}
        for a in members:
            for b in members:
                if a != b:
                    conflicting.add(frozenset((a, b)))

    for rule in c.model.requires:
        subject = c.model.resolve(rule.skill)
        for need in rule.needs:
            target = c.model.resolve(need)
            if frozenset((subject, target)) in conflicting:
                c.add(
                    IssueKind.CONTRADICTORY_RULE,
                    Severity.WARNING,
                    f"Skill {subject!r} requires {target!r} but also conflicts "
                    f"with it; the requirement can never be met through {target!r}",
                    rule.location,
                    (subject, target),
                )


_CHECKS = (
    _check_aliases,
    _check_categories,
    _check_conflicts,
    _check_requirements,
    _check_recommendations,
    _check_alternatives,
    _check_stacks,
    _check_cycles,
    _check_contradictions,
)


def validate_model(model: RelationshipModel) -> ValidationReport:
    """Certify that an authored model is internally consistent.

    Args:
        model: The loaded relationship model.

    Returns:
        A ``ValidationReport`` holding every issue found. ``report.ok`` is
        False if any issue has ERROR severity.
    """
    collector = _Collector(model)
    for check in _CHECKS:
        check(collector)

    report = ValidationReport(collector.issues)
    logger.debug(
        "Validated %s: %d error(s), %d warning(s)",
        model.source_path or "<model>", len(report.errors), len(report.warnings),
    )
    return report
