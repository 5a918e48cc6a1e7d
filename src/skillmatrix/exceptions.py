"""SkillMatrix exception hierarchy.

All public exceptions inherit from SkillMatrixError, giving callers a single
base class to catch when they want to handle any SkillMatrix-specific failure
without swallowing unrelated errors.

Queries never raise: a blocked selection is an ordinary outcome and is
reported through result objects, not exceptions.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from skillmatrix.core.validator.issues import ValidationIssue


class SkillMatrixError(Exception):
    """Base exception for all SkillMatrix errors."""


class MatrixLoadError(SkillMatrixError):
    """Raised when the relationship document cannot be loaded.

    Covers unreadable files, malformed YAML, values of the wrong shape and
    unknown keys. Carries the file path and, where known, the 1-based line
    of the offending node.
    """

    def __init__(
        self,
        message: str,
        path: Path | str | None = None,
        line: int | None = None,
    ) -> None:
        self.message = message
        self.path = str(path) if path is not None else None
        self.line = line
        super().__init__(self._format())

    def _format(self) -> str:
        if self.path and self.line:
            return f"{self.path}:{self.line}: {self.message}"
        if self.path:
            return f"{self.path}: {self.message}"
        return self.message


class MatrixValidationError(SkillMatrixError):
    """Raised when the relationship model fails validation.

    Every issue found is carried in ``issues`` (errors and warnings alike)
    so authors can fix a batch of problems per run.
    """

    def __init__(self, issues: Sequence["ValidationIssue"]) -> None:
        self.issues = list(issues)
        errors = [i for i in self.issues if i.is_error]
        super().__init__(
            f"Skills matrix is invalid: {len(errors)} error(s), "
            f"{len(self.issues) - len(errors)} warning(s)"
        )


class IndexCacheError(SkillMatrixError):
    """Raised when a cached compiled index cannot be read back.

    Covers corrupted JSON and cache files written by an incompatible
    schema version.
    """
