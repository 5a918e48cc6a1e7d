"""Model validation: reference integrity, requirement cycles, rule sanity.

All public names are re-exported here so callers can write
``from skillmatrix.core.validator import validate_model``.
"""

from skillmatrix.core.validator.cycles import find_cycles
from skillmatrix.core.validator.issues import (
    IssueKind,
    Severity,
    ValidationIssue,
    ValidationReport,
)
from skillmatrix.core.validator.validator import validate_model

__all__ = [
    "IssueKind",
    "Severity",
    "ValidationIssue",
    "ValidationReport",
    "find_cycles",
    "validate_model",
]
