"""Query engine: answers the wizard's per-skill questions from a compiled index.

All public names are re-exported here so callers can write
``from skillmatrix.core.query import is_disabled``.
"""

from skillmatrix.core.query.engine import (
    category_all_disabled,
    describe_skill,
    is_disabled,
    is_discouraged,
    is_recommended,
    resolve_alias,
    skills_in_category,
    validate_selection,
)
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

__all__ = [
    "CategoryAvailability",
    "DisableKind",
    "DisableResult",
    "DiscourageResult",
    "RecommendationReason",
    "RecommendResult",
    "Selection",
    "SelectionIssue",
    "SelectionIssueType",
    "SelectionValidation",
    "SkillOption",
    "category_all_disabled",
    "describe_skill",
    "is_disabled",
    "is_discouraged",
    "is_recommended",
    "resolve_alias",
    "skills_in_category",
    "validate_selection",
]
