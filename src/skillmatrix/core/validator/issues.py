"""Validation issue types reported against an authored relationship model."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Severity(str, Enum):
    """Whether an issue blocks compilation (ERROR) or is advisory (WARNING)."""

    ERROR = "error"
    WARNING = "warning"


class IssueKind(str, Enum):
    """Machine-readable classification of a validation issue."""

    UNKNOWN_SKILL = "unknown_skill"
    UNKNOWN_CATEGORY = "unknown_category"
    MISSING_CATEGORY = "missing_category"
    MEMBERSHIP_MISMATCH = "membership_mismatch"
    ALIAS_SHADOW = "alias_shadow"
    REQUIREMENT_CYCLE = "requirement_cycle"
    UNDERSIZED_RULE = "undersized_rule"
    EMPTY_REQUIREMENT = "empty_requirement"
    CONTRADICTORY_RULE = "contradictory_rule"
    SELF_RECOMMENDATION = "self_recommendation"


@dataclass(frozen=True)
class ValidationIssue:
    """A single problem found in the authored model.

    Attributes:
        kind: Issue classification.
        severity: ERROR blocks compilation; WARNING does not.
        message: Human-readable description, printed verbatim by the CLI.
        location: Where the offending rule was authored, e.g.
            ``"relationships.requires[2] (line 41)"``. Empty if unknown.
        skills: Skill ids involved (for a cycle, the full cycle path).
    """

    kind: IssueKind
    severity: Severity
    message: str
    location: str = ""
    skills: tuple[str, ...] = ()

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR


@dataclass
class ValidationReport:
    """All issues found by ``validate_model``, in discovery order."""

    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True when no error-severity issue exists (warnings allowed)."""
        return not any(issue.is_error for issue in self.issues)

    @property
    def errors(self) -> list[ValidationIssue]:
        return [issue for issue in self.issues if issue.is_error]

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [issue for issue in self.issues if not issue.is_error]

    def of_kind(self, kind: IssueKind) -> list[ValidationIssue]:
        """Return the issues of one kind."""
        return [issue for issue in self.issues if issue.kind is kind]
