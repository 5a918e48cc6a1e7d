"""Authored relationship model: skills, categories, and relationship rules.

These types mirror the human-editable ``skills-matrix.yaml`` document. They
are group-centric (a conflict rule names a set of skills, a requirement rule
names a subject and what it needs) and carry no query behavior. The compiler
turns them into the skill-centric ``ResolvedIndex``.

Rule references may use either a full skill id or a short alias from the
``skill_aliases`` table; ``RelationshipModel.resolve`` maps one to the other.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class RequirementMode(str, Enum):
    """How a requirement rule's ``needs`` list must be satisfied.

    - **ALL**: every listed skill must be selected (AND).
    - **ANY_OF**: at least one listed skill must be selected (OR).
    """

    ALL = "all"
    ANY_OF = "any_of"


class Strength(str, Enum):
    """Strength of a recommendation. Purely advisory in both cases."""

    WEAK = "weak"
    STRONG = "strong"


# ---------------------------------------------------------------------------
# Skills and categories
# ---------------------------------------------------------------------------

_AUTHOR_SUFFIX_RE = re.compile(r"\s*\(@[\w.-]+\)$")


def display_name_from_id(skill_id: str) -> str:
    """Derive a display name from a skill id.

    ``"frontend/state-zustand (@vince)"`` becomes ``"State Zustand"``.
    """
    tail = skill_id.rsplit("/", 1)[-1]
    tail = _AUTHOR_SUFFIX_RE.sub("", tail).strip()
    return " ".join(word[:1].upper() + word[1:] for word in tail.split("-") if word)


@dataclass(frozen=True)
class Skill:
    """One selectable capability.

    Attributes:
        id: Unique identifier, e.g. ``"zustand (@vince)"``.
        name: Human-readable display name.
        category: Id of the owning category. Filled from a category's
            ``members`` list by the loader when omitted on the skill.
        description: Short description shown next to the option.
        author: Author handle.
        tags: Free-form tags for search.
        provides_setup_for: Usage skills this setup skill configures.
    """

    id: str
    name: str
    category: str | None = None
    description: str = ""
    author: str = ""
    tags: tuple[str, ...] = ()
    provides_setup_for: tuple[str, ...] = ()


@dataclass(frozen=True)
class Category:
    """A named grouping of skills.

    When ``exclusive`` is set, every pair of members conflicts unless one of
    them requires the other.
    """

    id: str
    name: str
    exclusive: bool = True
    description: str = ""
    parent: str | None = None
    required: bool = False
    order: int = 0
    members: tuple[str, ...] = ()
    exclusive_reason: str | None = None

    @property
    def conflict_reason(self) -> str:
        """Reason text attached to exclusivity-derived conflicts."""
        if self.exclusive_reason:
            return self.exclusive_reason
        return f"{self.name.lower()} — choose one"


# ---------------------------------------------------------------------------
# Relationship rules
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ConflictRule:
    """At most one of ``skills`` may be selected at a time."""

    skills: tuple[str, ...]
    reason: str
    location: str = field(default="", compare=False)


@dataclass(frozen=True)
class DiscourageRule:
    """Selecting more than one of ``skills`` is allowed but warned about."""

    skills: tuple[str, ...]
    reason: str
    location: str = field(default="", compare=False)


@dataclass(frozen=True)
class RequirementRule:
    """``skill`` may only be selected once ``needs`` is satisfied."""

    skill: str
    needs: tuple[str, ...]
    mode: RequirementMode = RequirementMode.ALL
    reason: str = ""
    location: str = field(default="", compare=False)


@dataclass(frozen=True)
class Suggestion:
    """One suggested skill inside a recommendation rule."""

    skill: str
    strength: Strength = Strength.WEAK


@dataclass(frozen=True)
class RecommendationRule:
    """When ``when`` is selected, highlight every skill in ``suggest``."""

    when: str
    suggest: tuple[Suggestion, ...]
    reason: str = ""
    location: str = field(default="", compare=False)


@dataclass(frozen=True)
class AlternativeGroup:
    """Skills considered interchangeable for ``purpose``."""

    purpose: str
    skills: tuple[str, ...]
    location: str = field(default="", compare=False)


@dataclass(frozen=True)
class SuggestedStack:
    """A pre-configured combination of skills for quick setup.

    ``skills`` maps ``category -> subcategory -> skill reference``.
    """

    id: str
    name: str
    description: str = ""
    audience: tuple[str, ...] = ()
    skills: Mapping[str, Mapping[str, str]] = field(default_factory=dict)
    philosophy: str = ""
    location: str = field(default="", compare=False)


# ---------------------------------------------------------------------------
# RelationshipModel: the whole authored document
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RelationshipModel:
    """The authored, group-centric source of truth.

    Attributes:
        version: Schema version of the authored document.
        categories: Category definitions keyed by id, in authored order.
        skills: Skill definitions keyed by full id, in authored order.
        aliases: Short alias -> full skill id.
        conflicts: Mutual-exclusion rules.
        discourages: Advisory mutual-exclusion rules.
        requires: Requirement rules.
        recommends: Recommendation rules.
        alternatives: Alternative groups.
        suggested_stacks: Pre-configured stacks.
        source_path: Where the document was read from, if anywhere.
        source_digest: ``sha256:<hex>`` digest of the document text.
    """

    version: str = "1.0.0"
    categories: Mapping[str, Category] = field(default_factory=dict)
    skills: Mapping[str, Skill] = field(default_factory=dict)
    aliases: Mapping[str, str] = field(default_factory=dict)
    conflicts: tuple[ConflictRule, ...] = ()
    discourages: tuple[DiscourageRule, ...] = ()
    requires: tuple[RequirementRule, ...] = ()
    recommends: tuple[RecommendationRule, ...] = ()
    alternatives: tuple[AlternativeGroup, ...] = ()
    suggested_stacks: tuple[SuggestedStack, ...] = ()
    source_path: str | None = None
    source_digest: str | None = None

    def resolve(self, ref: str) -> str:
        """Map an alias or id to a full skill id.

        Returns the input unchanged when it is not an alias.
        """
        return self.aliases.get(ref, ref)

    def category_members(self, category_id: str) -> tuple[str, ...]:
        """Return the member skill ids of a category, in authored order.

        Explicit ``members`` entries come first, followed by skills that name
        the category themselves. Duplicates are dropped.
        """
        seen: dict[str, None] = {}
        category = self.categories.get(category_id)
        if category is not None:
            for ref in category.members:
                seen.setdefault(self.resolve(ref), None)
        for skill in self.skills.values():
            if skill.category == category_id:
                seen.setdefault(skill.id, None)
        return tuple(seen)
