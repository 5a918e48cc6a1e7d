"""Query engine: stateless questions over a compiled index and a selection.

Every function here is pure. It reads one ``ResolvedIndex`` entry (plus the
entries of the skills it names) and the caller's selection, and never
mutates either, so repeated calls with the same inputs return equal
results. Cost is bounded by the relations on one skill, never by the total
number of rules.

Nothing here raises for ordinary outcomes. An unknown candidate id is
reported as disabled with an explanatory reason.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Container, Iterable, Union

from skillmatrix.core.compiler.resolved import (
    ConflictOrigin,
    ResolvedIndex,
    ResolvedSkill,
    SkillRequirement,
)
from skillmatrix.core.model.models import RequirementMode
from skillmatrix.core.query.models import (
    CategoryAvailability,
    DisableKind,
    DisableResult,
    DiscourageResult,
    RecommendationReason,
    RecommendResult,
    SelectionIssue,
    SelectionIssueType,
    SelectionValidation,
    SkillOption,
)
from skillmatrix.core.query.selection import Selection

logger = logging.getLogger(__name__)

SelectionLike = Union[Selection, Iterable[str]]


def _normalize(
    index: ResolvedIndex, selection: SelectionLike
) -> tuple[tuple[str, ...], Container[str]]:
    """Return the selection as (ordered full ids, membership container)."""
    if isinstance(selection, Selection):
        return selection.ids, selection
    ordered = tuple(dict.fromkeys(index.resolve_alias(ref) for ref in selection))
    return ordered, frozenset(ordered)


def _names(index: ResolvedIndex, skill_ids: Iterable[str], joiner: str) -> str:
    return joiner.join(index.display_name(sid) for sid in skill_ids)


def _requirement_failure(
    index: ResolvedIndex, requirement: SkillRequirement, selected: Container[str]
) -> tuple[str, tuple[str, ...]]:
    """Explain an unmet requirement. Returns (reason, missing ids)."""
    if requirement.mode is RequirementMode.ANY_OF:
        missing = requirement.skill_ids
        needed = _names(index, missing, " or ")
    else:
        missing = requirement.missing(selected)
        needed = _names(index, missing, ", ")
    if requirement.reason:
        return f"{requirement.reason} (requires {needed})", missing
    return f"Requires {needed}", missing


# ---------------------------------------------------------------------------
# Single-skill queries
# ---------------------------------------------------------------------------


def resolve_alias(index: ResolvedIndex, alias_or_id: str) -> str:
    """Map an alias to its full skill id; other input is returned unchanged."""
    return index.resolve_alias(alias_or_id)


def describe_skill(index: ResolvedIndex, skill_id: str) -> ResolvedSkill | None:
    """Return everything known about one skill, or None if it is unknown."""
    return index.get(skill_id)


def is_disabled(
    index: ResolvedIndex, selection: SelectionLike, skill_id: str
) -> DisableResult:
    """Decide whether ``skill_id`` may be selected given ``selection``.

    A skill is disabled when a skill it conflicts with is selected, or when
    one of its requirements is not satisfied. Conflicts are checked first
    and the first matching conflict, in compiled order (explicit rules before
    category exclusivity), provides the reason. A requirement failure is only
    reported when no conflict applies.

    Args:
        index: The compiled index.
        selection: Currently selected ids or aliases.
        skill_id: Candidate skill id or alias.

    Returns:
        A ``DisableResult``; unpacks as ``(disabled, reason)``.
    """
    skill = index.get(skill_id)
    if skill is None:
        logger.debug("is_disabled: unknown skill %r", skill_id)
        return DisableResult(
            disabled=True,
            reason=f"Unknown skill: {skill_id}",
            kind=DisableKind.UNKNOWN,
        )

    _, selected = _normalize(index, selection)

    for relation in skill.conflicts_with:
        if relation.skill_id in selected:
            return DisableResult(
                disabled=True,
                reason=relation.reason,
                kind=DisableKind.CONFLICT,
                blocking=(relation.skill_id,),
                detail=f"{relation.reason} (conflicts with "
                f"{index.display_name(relation.skill_id)})",
                alternatives=skill.alternative_ids,
            )

    for requirement in skill.requires:
        if not requirement.is_satisfied(selected):
            reason, missing = _requirement_failure(index, requirement, selected)
            return DisableResult(
                disabled=True,
                reason=reason,
                kind=DisableKind.REQUIREMENT,
                blocking=missing,
                detail=reason,
                alternatives=skill.alternative_ids,
            )

    return DisableResult(disabled=False)


def is_recommended(
    index: ResolvedIndex, selection: SelectionLike, skill_id: str
) -> RecommendResult:
    """Decide whether ``skill_id`` should be suggested given ``selection``.

    Reads the candidate's ``recommended_by`` edges, so the cost is the
    number of skills that recommend it. Every selected recommender
    contributes one reason, in the order the recommenders were authored.

    Returns:
        A ``RecommendResult``; unpacks as ``(recommended, messages)``.
    """
    skill = index.get(skill_id)
    if skill is None:
        return RecommendResult(recommended=False)

    _, selected = _normalize(index, selection)
    reasons = tuple(
        RecommendationReason(
            skill_id=rec.skill_id,
            name=index.display_name(rec.skill_id),
            strength=rec.strength,
            reason=rec.reason,
        )
        for rec in skill.recommended_by
        if rec.skill_id in selected
    )
    return RecommendResult(recommended=bool(reasons), reasons=reasons)


def is_discouraged(
    index: ResolvedIndex, selection: SelectionLike, skill_id: str
) -> DiscourageResult:
    """Decide whether selecting ``skill_id`` alongside ``selection`` is unusual."""
    skill = index.get(skill_id)
    if skill is None:
        return DiscourageResult(discouraged=False)

    _, selected = _normalize(index, selection)
    for relation in skill.discourages:
        if relation.skill_id in selected:
            return DiscourageResult(
                discouraged=True, reason=relation.reason, skill_id=relation.skill_id
            )
    return DiscourageResult(discouraged=False)


# ---------------------------------------------------------------------------
# Category queries
# ---------------------------------------------------------------------------


def skills_in_category(
    index: ResolvedIndex, selection: SelectionLike, category_id: str
) -> list[SkillOption]:
    """List one category's skills with their live state.

    Iterates only the category's own members, in authored order. An
    unknown category yields an empty list.
    """
    _, selected = _normalize(index, selection)
    options: list[SkillOption] = []
    for skill_id in index.category_members(category_id):
        skill = index.skills[skill_id]
        disabled = is_disabled(index, selected, skill_id)
        recommended = is_recommended(index, selected, skill_id)
        discouraged = is_discouraged(index, selected, skill_id)
        options.append(SkillOption(
            skill_id=skill_id,
            name=skill.name,
            disabled=disabled.disabled,
            recommended=recommended.recommended,
            alias=skill.alias,
            description=skill.description,
            disabled_reason=disabled.detail,
            recommended_reasons=tuple(recommended.messages),
            discouraged=discouraged.discouraged,
            discouraged_reason=discouraged.reason,
            selected=skill_id in selected,
            alternatives=skill.alternative_ids,
        ))
    return options


def category_all_disabled(
    index: ResolvedIndex, selection: SelectionLike, category_id: str
) -> CategoryAvailability:
    """Report whether every member of a category is disabled.

    When they all are, the first member's reason is returned without its
    parenthesised detail, e.g. ``"Select a framework first"``.
    """
    members = index.category_members(category_id)
    if not members:
        return CategoryAvailability(disabled=False)

    _, selected = _normalize(index, selection)
    reasons = []
    for skill_id in members:
        result = is_disabled(index, selected, skill_id)
        if not result.disabled:
            return CategoryAvailability(disabled=False)
        reasons.append(result.reason)

    short = (reasons[0] or "").split(" (")[0] or "requirements not met"
    return CategoryAvailability(disabled=True, reason=short)


# ---------------------------------------------------------------------------
# Whole-selection validation
# ---------------------------------------------------------------------------


def validate_selection(index: ResolvedIndex, selection: SelectionLike) -> SelectionValidation:
    """Validate a complete selection, e.g. before the wizard writes it out.

    Errors: unknown skills, explicit conflicts, category exclusivity
    violations, unmet requirements, and required categories left empty.
    Warnings: recommendations not taken up (unless blocked by a conflict),
    discouraged combinations, and setup skills without any usage skill.
    """
    ordered, selected = _normalize(index, selection)
    errors: list[SelectionIssue] = []
    warnings: list[SelectionIssue] = []
    name = index.display_name

    known = []
    for skill_id in ordered:
        if skill_id in index.skills:
            known.append(skill_id)
        else:
            errors.append(SelectionIssue(
                SelectionIssueType.UNKNOWN_SKILL, f"Unknown skill: {skill_id}", (skill_id,)
            ))

    # Conflicts, explicit ones individually, category ones grouped.
    exclusive_hits: dict[str, list[str]] = defaultdict(list)
    for i, a in enumerate(known):
        skill_a = index.skills[a]
        for b in known[i + 1:]:
            relation = skill_a.conflict_with(b)
            if relation is None:
                continue
            if relation.origin is ConflictOrigin.EXPLICIT:
                errors.append(SelectionIssue(
                    SelectionIssueType.CONFLICT,
                    f"{name(a)} conflicts with {name(b)}: {relation.reason}",
                    (a, b),
                ))
            else:
                hits = exclusive_hits[skill_a.category]
                for sid in (a, b):
                    if sid not in hits:
                        hits.append(sid)
    for category_id, skill_ids in exclusive_hits.items():
        category = index.categories.get(category_id)
        label = category.name if category is not None else category_id
        errors.append(SelectionIssue(
            SelectionIssueType.CATEGORY_EXCLUSIVE,
            f'Category "{label}" only allows one selection, but multiple '
            f"selected: {_names(index, skill_ids, ', ')}",
            tuple(skill_ids),
        ))

    for skill_id in known:
        for requirement in index.skills[skill_id].requires:
            if requirement.is_satisfied(selected):
                continue
            if requirement.mode is RequirementMode.ANY_OF:
                message = f"{name(skill_id)} requires one of: " + _names(
                    index, requirement.skill_ids, ", "
                )
                involved = requirement.skill_ids
            else:
                involved = requirement.missing(selected)
                message = f"{name(skill_id)} requires: " + _names(index, involved, ", ")
            errors.append(SelectionIssue(
                SelectionIssueType.MISSING_REQUIREMENT, message, (skill_id,) + tuple(involved)
            ))

    for category in index.categories.values():
        if not category.required:
            continue
        members = index.category_members(category.id)
        if members and not any(sid in selected for sid in members):
            errors.append(SelectionIssue(
                SelectionIssueType.MISSING_REQUIRED_CATEGORY,
                f'Category "{category.name}" requires a selection',
                members,
            ))

    for skill_id in known:
        for rec in index.skills[skill_id].recommends:
            if rec.skill_id in selected or rec.skill_id not in index.skills:
                continue
            target = index.skills[rec.skill_id]
            if any(c.skill_id in selected for c in target.conflicts_with):
                continue
            suffix = f": {rec.reason}" if rec.reason else ""
            warnings.append(SelectionIssue(
                SelectionIssueType.MISSING_RECOMMENDATION,
                f"{name(skill_id)} recommends {target.name}{suffix}",
                (skill_id, rec.skill_id),
            ))

    for i, a in enumerate(known):
        for relation in index.skills[a].discourages:
            if relation.skill_id in selected and relation.skill_id not in known[:i]:
                warnings.append(SelectionIssue(
                    SelectionIssueType.DISCOURAGED,
                    f"{name(a)} with {name(relation.skill_id)} is not recommended: "
                    f"{relation.reason}",
                    (a, relation.skill_id),
                ))

    for skill_id in known:
        usage = index.skills[skill_id].provides_setup_for
        if usage and not any(u in selected for u in usage):
            warnings.append(SelectionIssue(
                SelectionIssueType.UNUSED_SETUP,
                f'Setup skill "{name(skill_id)}" selected but no corresponding '
                f"usage skills: {_names(index, usage, ', ')}",
                (skill_id,) + usage,
            ))

    return SelectionValidation(
        valid=not errors, errors=tuple(errors), warnings=tuple(warnings)
    )
