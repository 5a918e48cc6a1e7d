"""Merge step: compile the group-centric model into a skill-centric index.

Authors think in groups (a conflict set, a requirement rule); the wizard
thinks per skill ("can I pick this one?"). Compilation runs once per session
and precomputes, for every skill, all relations it takes part in:

1. Start an empty entry per skill.
2. Fold explicit conflict rules in, one entry per unordered pair, on both
   sides. The first rule to name a pair provides its reason.
3. Synthesize all-pairs conflicts for each exclusive category. A pair that
   is already explicit keeps the explicit reason. A pair where one member
   requires the other is not made to conflict. Alternative groups never
   lift exclusivity: alternatives such as zustand and redux are usually
   the very members an exclusive category keeps apart.
4. Requirement rules add ``requires`` on the subject and ``required_by`` on
   every named skill.
5. Recommendation rules add ``recommends`` on the trigger and
   ``recommended_by`` on every suggested skill.
6. Alternative groups add every other member to each member.

Discourage rules compile like conflicts (symmetric pairs) into
``discourages``. The result is frozen.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

from skillmatrix.core.compiler.resolved import (
    ConflictOrigin,
    ConflictRelation,
    Recommendation,
    ResolvedIndex,
    ResolvedSkill,
    ResolvedStack,
    SkillAlternative,
    SkillRelation,
    SkillRequirement,
)
from skillmatrix.core.model.loader import load_model
from skillmatrix.core.model.models import RelationshipModel
from skillmatrix.core.validator import ValidationIssue, validate_model
from skillmatrix.exceptions import MatrixValidationError

logger = logging.getLogger(__name__)


@dataclass
class _Entry:
    """Mutable accumulator for one skill while compiling."""

    conflicts_with: list[ConflictRelation] = field(default_factory=list)
    requires: list[SkillRequirement] = field(default_factory=list)
    required_by: list[str] = field(default_factory=list)
    recommends: list[Recommendation] = field(default_factory=list)
    recommended_by: list[Recommendation] = field(default_factory=list)
    alternatives: list[SkillAlternative] = field(default_factory=list)
    discourages: list[SkillRelation] = field(default_factory=list)


def _unique(ids: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(ids))


def _pairs(members: list[str]) -> Iterable[tuple[str, str]]:
    for i, a in enumerate(members):
        for b in members[i + 1:]:
            yield a, b


def _compile_conflicts(model: RelationshipModel, entries: dict[str, _Entry]) -> None:
    resolve = model.resolve
    pairs: dict[frozenset[str], tuple[str, str, str, ConflictOrigin]] = {}

    for rule in model.conflicts:
        for a, b in _pairs(_unique(resolve(ref) for ref in rule.skills)):
            pairs.setdefault(frozenset((a, b)), (a, b, rule.reason, ConflictOrigin.EXPLICIT))

    # A requirement between two members of an exclusive category overrides
    # the exclusivity for that pair.
    required_pairs = {
        frozenset((resolve(rule.skill), resolve(need)))
        for rule in model.requires
        for need in rule.needs
    }
    for category in model.categories.values():
        if not category.exclusive:
            continue
        for a, b in _pairs(list(model.category_members(category.id))):
            key = frozenset((a, b))
            if key in pairs or key in required_pairs:
                continue
            pairs[key] = (a, b, category.conflict_reason, ConflictOrigin.CATEGORY)

    for a, b, reason, origin in pairs.values():
        entries[a].conflicts_with.append(ConflictRelation(b, reason, origin))
        entries[b].conflicts_with.append(ConflictRelation(a, reason, origin))


def _compile_discourages(model: RelationshipModel, entries: dict[str, _Entry]) -> None:
    seen: set[frozenset[str]] = set()
    for rule in model.discourages:
        for a, b in _pairs(_unique(model.resolve(ref) for ref in rule.skills)):
            key = frozenset((a, b))
            if key in seen:
                continue
            seen.add(key)
            entries[a].discourages.append(SkillRelation(b, rule.reason))
            entries[b].discourages.append(SkillRelation(a, rule.reason))


def _compile_requirements(model: RelationshipModel, entries: dict[str, _Entry]) -> None:
    for rule in model.requires:
        subject = model.resolve(rule.skill)
        needs = tuple(_unique(model.resolve(ref) for ref in rule.needs))
        entries[subject].requires.append(SkillRequirement(rule.mode, needs, rule.reason))
        for need in needs:
            if subject not in entries[need].required_by:
                entries[need].required_by.append(subject)


def _compile_recommendations(model: RelationshipModel, entries: dict[str, _Entry]) -> None:
    seen: set[tuple[str, str]] = set()
    for rule in model.recommends:
        trigger = model.resolve(rule.when)
        for suggestion in rule.suggest:
            target = model.resolve(suggestion.skill)
            if (trigger, target) in seen:
                continue
            seen.add((trigger, target))
            entries[trigger].recommends.append(
                Recommendation(target, suggestion.strength, rule.reason)
            )
            entries[target].recommended_by.append(
                Recommendation(trigger, suggestion.strength, rule.reason)
            )


def _compile_alternatives(model: RelationshipModel, entries: dict[str, _Entry]) -> None:
    for group in model.alternatives:
        members = _unique(model.resolve(ref) for ref in group.skills)
        for member in members:
            existing = {alt.skill_id for alt in entries[member].alternatives}
            for other in members:
                if other != member and other not in existing:
                    entries[member].alternatives.append(SkillAlternative(other, group.purpose))
                    existing.add(other)


def _compile_stacks(model: RelationshipModel) -> tuple[ResolvedStack, ...]:
    stacks = []
    for stack in model.suggested_stacks:
        resolved: dict[str, dict[str, str]] = {}
        all_ids: list[str] = []
        for category, subcategories in stack.skills.items():
            resolved[category] = {}
            for subcategory, ref in subcategories.items():
                skill_id = model.resolve(ref)
                resolved[category][subcategory] = skill_id
                all_ids.append(skill_id)
        stacks.append(ResolvedStack(
            id=stack.id,
            name=stack.name,
            description=stack.description,
            audience=stack.audience,
            skills=resolved,
            all_skill_ids=tuple(_unique(all_ids)),
            philosophy=stack.philosophy,
        ))
    return tuple(stacks)


def compile_model(model: RelationshipModel, validate: bool = True) -> ResolvedIndex:
    """Compile a relationship model into a frozen ``ResolvedIndex``.

    Args:
        model: The authored model.
        validate: Run ``validate_model`` first and refuse invalid models.
            Only pass False for a model that has already been validated.

    Returns:
        The compiled index.

    Raises:
        MatrixValidationError: If the model has error-severity issues.
    """
    if validate:
        report = validate_model(model)
        if not report.ok:
            raise MatrixValidationError(report.issues)

    entries = {skill_id: _Entry() for skill_id in model.skills}
    _compile_conflicts(model, entries)
    _compile_requirements(model, entries)
    _compile_recommendations(model, entries)
    _compile_alternatives(model, entries)
    _compile_discourages(model, entries)

    aliases_reverse = {target: alias for alias, target in model.aliases.items()}
    skills: dict[str, ResolvedSkill] = {}
    for skill_id, skill in model.skills.items():
        entry = entries[skill_id]
        skills[skill_id] = ResolvedSkill(
            id=skill.id,
            name=skill.name,
            category=skill.category or "",
            alias=aliases_reverse.get(skill_id),
            description=skill.description,
            author=skill.author,
            tags=skill.tags,
            conflicts_with=tuple(entry.conflicts_with),
            requires=tuple(entry.requires),
            required_by=tuple(entry.required_by),
            recommends=tuple(entry.recommends),
            recommended_by=tuple(entry.recommended_by),
            alternatives=tuple(entry.alternatives),
            discourages=tuple(entry.discourages),
            provides_setup_for=tuple(model.resolve(ref) for ref in skill.provides_setup_for),
        )

    index = ResolvedIndex(
        version=model.version,
        skills=skills,
        categories=model.categories,
        members={cat_id: model.category_members(cat_id) for cat_id in model.categories},
        aliases=model.aliases,
        suggested_stacks=_compile_stacks(model),
        generated_at=datetime.now(timezone.utc).isoformat(),
        source_digest=model.source_digest,
    )
    logger.debug(
        "Compiled %d skills (%d conflict pairs)",
        len(skills), sum(len(s.conflicts_with) for s in skills.values()) // 2,
    )
    return index


def compile_path(path: Path | str) -> tuple[ResolvedIndex, list[ValidationIssue]]:
    """Load, validate and compile a matrix document in one call.

    Args:
        path: Path to ``skills-matrix.yaml``.

    Returns:
        ``(index, issues)`` where ``issues`` holds any non-fatal warnings.

    Raises:
        MatrixLoadError: If the document cannot be read or parsed.
        MatrixValidationError: If validation finds any error; carries every
            issue, warnings included.
    """
    model = load_model(path)
    report = validate_model(model)
    if not report.ok:
        logger.debug("Refusing to compile %s: %d error(s)", path, len(report.errors))
        raise MatrixValidationError(report.issues)
    for issue in report.warnings:
        logger.warning("%s: %s", issue.location or path, issue.message)
    return compile_model(model, validate=False), report.issues
