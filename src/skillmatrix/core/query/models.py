"""Result types returned by the query engine.

A blocked selection is an ordinary outcome, so every query returns a value
object with a boolean verdict plus the explanation the wizard renders
verbatim. ``DisableResult`` and ``RecommendResult`` also unpack like the
plain ``(bool, reason)`` pairs callers often want::

    disabled, reason = is_disabled(index, selection, "redux")
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from skillmatrix.core.model.models import Strength


class DisableKind(str, Enum):
    """Why a skill is disabled."""

    CONFLICT = "conflict"
    REQUIREMENT = "requirement"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class DisableResult:
    """Outcome of ``is_disabled``.

    Attributes:
        disabled: True if the skill may not be selected right now.
        reason: The conflict rule's text verbatim, or text naming the unmet
            requirement. None when not disabled.
        kind: Which check disabled the skill.
        blocking: For a conflict, the selected skill it conflicts with; for
            a requirement, the required skills that are missing.
        detail: ``reason`` with the blocking skills spelled out by name,
            e.g. ``"choose one (conflicts with Zustand)"``.
        alternatives: Interchangeable skills the user could consider.
    """

    disabled: bool
    reason: str | None = None
    kind: DisableKind | None = None
    blocking: tuple[str, ...] = ()
    detail: str | None = None
    alternatives: tuple[str, ...] = ()

    def __iter__(self) -> Iterator:
        yield self.disabled
        yield self.reason


@dataclass(frozen=True)
class RecommendationReason:
    """One selected skill that recommends the candidate."""

    skill_id: str
    name: str
    strength: Strength
    reason: str = ""

    @property
    def message(self) -> str:
        if self.reason:
            return f"{self.reason} (recommended by {self.name})"
        return f"Recommended by {self.name}"


@dataclass(frozen=True)
class RecommendResult:
    """Outcome of ``is_recommended``; one entry per contributing selection."""

    recommended: bool
    reasons: tuple[RecommendationReason, ...] = ()

    @property
    def strength(self) -> Strength | None:
        """The strongest contributing recommendation, if any."""
        if not self.reasons:
            return None
        if any(r.strength is Strength.STRONG for r in self.reasons):
            return Strength.STRONG
        return Strength.WEAK

    @property
    def messages(self) -> list[str]:
        return [r.message for r in self.reasons]

    def __iter__(self) -> Iterator:
        yield self.recommended
        yield self.messages


@dataclass(frozen=True)
class DiscourageResult:
    """Outcome of ``is_discouraged``. Advisory: never blocks selection."""

    discouraged: bool
    reason: str | None = None
    skill_id: str | None = None


@dataclass(frozen=True)
class SkillOption:
    """One row of a category listing, with its live state."""

    skill_id: str
    name: str
    disabled: bool
    recommended: bool
    alias: str | None = None
    description: str = ""
    disabled_reason: str | None = None
    recommended_reasons: tuple[str, ...] = ()
    discouraged: bool = False
    discouraged_reason: str | None = None
    selected: bool = False
    alternatives: tuple[str, ...] = ()


@dataclass(frozen=True)
class CategoryAvailability:
    """Whether every member of a category is currently disabled."""

    disabled: bool
    reason: str | None = None


class SelectionIssueType(str, Enum):
    """Classification of problems found by ``validate_selection``."""

    CONFLICT = "conflict"
    MISSING_REQUIREMENT = "missing_requirement"
    CATEGORY_EXCLUSIVE = "category_exclusive"
    MISSING_REQUIRED_CATEGORY = "missing_required_category"
    UNKNOWN_SKILL = "unknown_skill"
    MISSING_RECOMMENDATION = "missing_recommendation"
    DISCOURAGED = "discouraged"
    UNUSED_SETUP = "unused_setup"


@dataclass(frozen=True)
class SelectionIssue:
    """One error or warning about a complete selection."""

    type: SelectionIssueType
    message: str
    skills: tuple[str, ...] = ()


@dataclass(frozen=True)
class SelectionValidation:
    """Outcome of ``validate_selection``."""

    valid: bool
    errors: tuple[SelectionIssue, ...] = ()
    warnings: tuple[SelectionIssue, ...] = ()
