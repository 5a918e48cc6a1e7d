"""Caller-owned selection set.

The wizard owns the selection and mutates it between queries; the engine
only reads it. ``Selection`` keeps insertion order, drops duplicates,
resolves aliases through the index it was created with, and answers
membership in O(1). Query functions accept a ``Selection`` or any iterable
of ids.

A ``Selection`` belongs to one session and must not be shared across
threads; the index it reads may be.
"""

from __future__ import annotations

from typing import Iterable, Iterator

from skillmatrix.core.compiler.resolved import ResolvedIndex


class Selection:
    """Ordered, unique collection of selected skill ids."""

    def __init__(
        self,
        index: ResolvedIndex | None = None,
        skill_ids: Iterable[str] = (),
    ) -> None:
        self._index = index
        self._ids: dict[str, None] = {}
        for skill_id in skill_ids:
            self.add(skill_id)

    def _resolve(self, ref: str) -> str:
        return self._index.resolve_alias(ref) if self._index is not None else ref

    def add(self, ref: str) -> str:
        """Select a skill by id or alias. Returns the stored full id."""
        skill_id = self._resolve(ref)
        self._ids.setdefault(skill_id, None)
        return skill_id

    def remove(self, ref: str) -> None:
        """Deselect a skill.

        Raises:
            KeyError: If the skill is not selected.
        """
        del self._ids[self._resolve(ref)]

    def discard(self, ref: str) -> None:
        """Deselect a skill if it is selected."""
        self._ids.pop(self._resolve(ref), None)

    def clear(self) -> None:
        self._ids.clear()

    @property
    def ids(self) -> tuple[str, ...]:
        """Selected ids in the order they were chosen."""
        return tuple(self._ids)

    def __contains__(self, ref: object) -> bool:
        return isinstance(ref, str) and self._resolve(ref) in self._ids

    def __iter__(self) -> Iterator[str]:
        return iter(tuple(self._ids))

    def __len__(self) -> int:
        return len(self._ids)

    def __repr__(self) -> str:
        return f"Selection({list(self._ids)!r})"
