"""Relationship model: the authored skills matrix and its YAML loader.

The model is the group-centric source of truth a human edits. It has no
query behavior of its own; ``skillmatrix.core.validator`` certifies it and
``skillmatrix.core.compiler`` turns it into a skill-centric index.
"""

from skillmatrix.core.model.models import (
    AlternativeGroup,
    Category,
    ConflictRule,
    DiscourageRule,
    RecommendationRule,
    RelationshipModel,
    RequirementMode,
    RequirementRule,
    Skill,
    Strength,
    SuggestedStack,
    Suggestion,
    display_name_from_id,
)
from skillmatrix.core.model.loader import compute_digest, load_model, parse_model

__all__ = [
    "AlternativeGroup",
    "Category",
    "ConflictRule",
    "DiscourageRule",
    "RecommendationRule",
    "RelationshipModel",
    "RequirementMode",
    "RequirementRule",
    "Skill",
    "Strength",
    "SuggestedStack",
    "Suggestion",
    "compute_digest",
    "display_name_from_id",
    "load_model",
    "parse_model",
]
