"""Skill-centric resolved index produced by the compiler.

Every relationship a skill takes part in is precomputed onto that skill's
``ResolvedSkill`` entry, including the inverse edges (``required_by``,
``recommended_by``), so the query engine answers any question about one
skill by reading that one entry. All containers are tuples or read-only
mappings: the index is immutable once built and may be shared freely
between threads.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Container, Iterator, Mapping

from skillmatrix.core.model.models import Category, RequirementMode, Strength


class ConflictOrigin(str, Enum):
    """Where a compiled conflict came from."""

    EXPLICIT = "explicit"
    CATEGORY = "category"


# ---------------------------------------------------------------------------
# Relation records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ConflictRelation:
    """``skill_id`` may not be selected together with the owning skill."""

    skill_id: str
    reason: str
    origin: ConflictOrigin = ConflictOrigin.EXPLICIT


@dataclass(frozen=True)
class SkillRelation:
    """A generic relation to another skill with explanatory text."""

    skill_id: str
    reason: str


@dataclass(frozen=True)
class SkillRequirement:
    """One requirement of the owning skill: ``mode`` over ``skill_ids``."""

    mode: RequirementMode
    skill_ids: tuple[str, ...]
    reason: str = ""

    def missing(self, selected: Container[str]) -> tuple[str, ...]:
        """Return the required ids absent from ``selected``."""
        return tuple(sid for sid in self.skill_ids if sid not in selected)

    def is_satisfied(self, selected: Container[str]) -> bool:
        """ALL: every id selected. ANY_OF: at least one id selected."""
        if self.mode is RequirementMode.ANY_OF:
            return any(sid in selected for sid in self.skill_ids)
        return all(sid in selected for sid in self.skill_ids)


@dataclass(frozen=True)
class Recommendation:
    """A recommendation edge; ``skill_id`` is the other end of the edge."""

    skill_id: str
    strength: Strength
    reason: str = ""


@dataclass(frozen=True)
class SkillAlternative:
    """Another skill serving the same ``purpose``."""

    skill_id: str
    purpose: str = ""


# ---------------------------------------------------------------------------
# ResolvedSkill and ResolvedStack
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ResolvedSkill:
    """Everything known about one skill, precomputed.

    Attributes:
        id: Full skill id.
        name: Display name.
        category: Owning category id.
        alias: Short alias from ``skill_aliases``, if any.
        conflicts_with: Skills that may not be co-selected, explicit rules
            first, then category exclusivity.
        requires: Requirements this skill must satisfy to be selectable.
        required_by: Skills that list this one in a requirement.
        recommends: Skills this one recommends when selected.
        recommended_by: Skills that recommend this one.
        alternatives: Interchangeable skills.
        discourages: Skills that produce a warning when co-selected.
        provides_setup_for: Usage skills this setup skill configures.
    """

    id: str
    name: str
    category: str
    alias: str | None = None
    description: str = ""
    author: str = ""
    tags: tuple[str, ...] = ()
    conflicts_with: tuple[ConflictRelation, ...] = ()
    requires: tuple[SkillRequirement, ...] = ()
    required_by: tuple[str, ...] = ()
    recommends: tuple[Recommendation, ...] = ()
    recommended_by: tuple[Recommendation, ...] = ()
    alternatives: tuple[SkillAlternative, ...] = ()
    discourages: tuple[SkillRelation, ...] = ()
    provides_setup_for: tuple[str, ...] = ()

    @property
    def alternative_ids(self) -> tuple[str, ...]:
        return tuple(alt.skill_id for alt in self.alternatives)

    def conflict_with(self, skill_id: str) -> ConflictRelation | None:
        """Return the conflict entry against ``skill_id``, if any."""
        for relation in self.conflicts_with:
            if relation.skill_id == skill_id:
                return relation
        return None


@dataclass(frozen=True)
class ResolvedStack:
    """A suggested stack with every alias resolved to a full skill id."""

    id: str
    name: str
    description: str = ""
    audience: tuple[str, ...] = ()
    skills: Mapping[str, Mapping[str, str]] = field(default_factory=dict)
    all_skill_ids: tuple[str, ...] = ()
    philosophy: str = ""


# ---------------------------------------------------------------------------
# ResolvedIndex
# ---------------------------------------------------------------------------


class ResolvedIndex:
    """The compiled, read-only, skill-centric index.

    Lookups by skill id, alias or category are dictionary reads; nothing in
    this class scans the full skill universe except the explicit iteration
    helpers.

    Serialization (``to_dict``, ``to_json``, ``write``, ``from_dict``,
    ``from_json``, ``read``) is attached from ``skillmatrix.core.compiler.cache``.
    """

    def __init__(
        self,
        *,
        version: str,
        skills: Mapping[str, ResolvedSkill],
        categories: Mapping[str, Category],
        members: Mapping[str, tuple[str, ...]],
        aliases: Mapping[str, str],
        suggested_stacks: tuple[ResolvedStack, ...] = (),
        generated_at: str = "",
        source_digest: str | None = None,
    ) -> None:
        self._version = version
        self._skills = MappingProxyType(dict(skills))
        self._categories = MappingProxyType(dict(categories))
        self._members = MappingProxyType({k: tuple(v) for k, v in members.items()})
        self._aliases = MappingProxyType(dict(aliases))
        self._aliases_reverse = MappingProxyType(
            {target: alias for alias, target in aliases.items()}
        )
        self._stacks = tuple(suggested_stacks)
        self._generated_at = generated_at
        self._source_digest = source_digest

    # -- Read-only views ----------------------------------------------------

    @property
    def version(self) -> str:
        return self._version

    @property
    def skills(self) -> Mapping[str, ResolvedSkill]:
        return self._skills

    @property
    def categories(self) -> Mapping[str, Category]:
        return self._categories

    @property
    def members(self) -> Mapping[str, tuple[str, ...]]:
        return self._members

    @property
    def aliases(self) -> Mapping[str, str]:
        return self._aliases

    @property
    def aliases_reverse(self) -> Mapping[str, str]:
        return self._aliases_reverse

    @property
    def suggested_stacks(self) -> tuple[ResolvedStack, ...]:
        return self._stacks

    @property
    def generated_at(self) -> str:
        return self._generated_at

    @property
    def source_digest(self) -> str | None:
        return self._source_digest

    # -- Lookups ------------------------------------------------------------

    def resolve_alias(self, alias_or_id: str) -> str:
        """Map an alias to its full id; other input is returned unchanged."""
        return self._aliases.get(alias_or_id, alias_or_id)

    def get(self, alias_or_id: str) -> ResolvedSkill | None:
        """Return the resolved skill for an id or alias, or None."""
        return self._skills.get(self.resolve_alias(alias_or_id))

    def display_name(self, skill_id: str) -> str:
        skill = self._skills.get(skill_id)
        return skill.name if skill is not None else skill_id

    def category_members(self, category_id: str) -> tuple[str, ...]:
        """Member skill ids of one category; empty for unknown categories."""
        return self._members.get(category_id, ())

    def get_stack(self, stack_id: str) -> ResolvedStack | None:
        for stack in self._stacks:
            if stack.id == stack_id:
                return stack
        return None

    def top_level_categories(self) -> list[str]:
        """Ids of categories without a parent, sorted by ``order``."""
        top = [c for c in self._categories.values() if c.parent is None]
        return [c.id for c in sorted(top, key=lambda c: c.order)]

    def subcategories(self, parent_id: str) -> list[str]:
        """Ids of categories whose parent is ``parent_id``, sorted by ``order``."""
        subs = [c for c in self._categories.values() if c.parent == parent_id]
        return [c.id for c in sorted(subs, key=lambda c: c.order)]

    # -- Container protocol -------------------------------------------------

    def __contains__(self, alias_or_id: object) -> bool:
        return isinstance(alias_or_id, str) and self.resolve_alias(alias_or_id) in self._skills

    def __iter__(self) -> Iterator[ResolvedSkill]:
        return iter(self._skills.values())

    def __len__(self) -> int:
        return len(self._skills)

    def __repr__(self) -> str:
        return (
            f"ResolvedIndex(version={self._version!r}, skills={len(self._skills)}, "
            f"categories={len(self._categories)})"
        )
