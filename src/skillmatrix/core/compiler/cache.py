"""Index serialization and the on-disk compiled-index cache.

These functions are attached to ``ResolvedIndex`` as methods and
classmethods at import time (in ``__init__.py``), keeping the data class
focused while presenting one API to callers.

Determinism guarantee: ``to_json()`` sorts every dictionary key, so two
indexes compiled from the same document serialize identically apart from
``generated_at``.

Cache invalidation: the serialized index records the ``sha256`` digest of
the document it was compiled from. ``load_index`` reuses a cache file only
when that digest matches the current document.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from skillmatrix.config import INDEX_FORMAT_VERSION
from skillmatrix.core.compiler.compiler import compile_path
from skillmatrix.core.compiler.resolved import (
    ConflictOrigin,
    ConflictRelation,
    Recommendation,
    ResolvedIndex,
    ResolvedSkill,
    ResolvedStack,
    SkillAlternative,
    SkillRelation,
    SkillRequirement,
)
from skillmatrix.core.model.loader import compute_digest
from skillmatrix.core.model.models import Category, RequirementMode, Strength
from skillmatrix.core.validator import ValidationIssue
from skillmatrix.exceptions import IndexCacheError, MatrixLoadError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------


def _skill_to_dict(skill: ResolvedSkill) -> dict[str, Any]:
    return {
        "name": skill.name,
        "category": skill.category,
        "alias": skill.alias,
        "description": skill.description,
        "author": skill.author,
        "tags": list(skill.tags),
        "conflicts_with": [
            {"skill_id": c.skill_id, "reason": c.reason, "origin": c.origin.value}
            for c in skill.conflicts_with
        ],
        "requires": [
            {"mode": r.mode.value, "skill_ids": list(r.skill_ids), "reason": r.reason}
            for r in skill.requires
        ],
        "required_by": list(skill.required_by),
        "recommends": [
            {"skill_id": r.skill_id, "strength": r.strength.value, "reason": r.reason}
            for r in skill.recommends
        ],
        "recommended_by": [
            {"skill_id": r.skill_id, "strength": r.strength.value, "reason": r.reason}
            for r in skill.recommended_by
        ],
        "alternatives": [
            {"skill_id": a.skill_id, "purpose": a.purpose} for a in skill.alternatives
        ],
        "discourages": [
            {"skill_id": d.skill_id, "reason": d.reason} for d in skill.discourages
        ],
        "provides_setup_for": list(skill.provides_setup_for),
    }


def _category_to_dict(category: Category) -> dict[str, Any]:
    return {
        "name": category.name,
        "description": category.description,
        "exclusive": category.exclusive,
        "required": category.required,
        "order": category.order,
        "parent": category.parent,
        "members": list(category.members),
        "exclusive_reason": category.exclusive_reason,
    }


def _to_dict(self: ResolvedIndex) -> dict[str, Any]:
    """Serialize the index to a JSON-ready dict."""
    return {
        "index_version": INDEX_FORMAT_VERSION,
        "generated_by": "skillmatrix",
        "generated_at": self.generated_at,
        "source_digest": self.source_digest,
        "version": self.version,
        "categories": {cid: _category_to_dict(c) for cid, c in self.categories.items()},
        "members": {cid: list(ids) for cid, ids in self.members.items()},
        "aliases": dict(self.aliases),
        "skills": {sid: _skill_to_dict(s) for sid, s in self.skills.items()},
        "suggested_stacks": [
            {
                "id": stack.id,
                "name": stack.name,
                "description": stack.description,
                "audience": list(stack.audience),
                "skills": {k: dict(v) for k, v in stack.skills.items()},
                "all_skill_ids": list(stack.all_skill_ids),
                "philosophy": stack.philosophy,
            }
            for stack in self.suggested_stacks
        ],
    }


def _to_json(self: ResolvedIndex, indent: int = 2) -> str:
    """Serialize to a deterministic JSON string."""
    return json.dumps(self.to_dict(), indent=indent, sort_keys=True)


def _write(self: ResolvedIndex, path: Path) -> None:
    """Write the index to disk as JSON, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(self.to_json(), encoding="utf-8")


# ---------------------------------------------------------------------------
# Deserialization
# ---------------------------------------------------------------------------


def _skill_from_dict(skill_id: str, data: dict[str, Any]) -> ResolvedSkill:
    return ResolvedSkill(
        id=skill_id,
        name=data["name"],
        category=data["category"],
        alias=data.get("alias"),
        description=data.get("description", ""),
        author=data.get("author", ""),
        tags=tuple(data.get("tags", [])),
        conflicts_with=tuple(
            ConflictRelation(c["skill_id"], c["reason"], ConflictOrigin(c["origin"]))
            for c in data.get("conflicts_with", [])
        ),
        requires=tuple(
            SkillRequirement(RequirementMode(r["mode"]), tuple(r["skill_ids"]), r.get("reason", ""))
            for r in data.get("requires", [])
        ),
        required_by=tuple(data.get("required_by", [])),
        recommends=tuple(
            Recommendation(r["skill_id"], Strength(r["strength"]), r.get("reason", ""))
            for r in data.get("recommends", [])
        ),
        recommended_by=tuple(
            Recommendation(r["skill_id"], Strength(r["strength"]), r.get("reason", ""))
            for r in data.get("recommended_by", [])
        ),
        alternatives=tuple(
            SkillAlternative(a["skill_id"], a.get("purpose", ""))
            for a in data.get("alternatives", [])
        ),
        discourages=tuple(
            SkillRelation(d["skill_id"], d["reason"]) for d in data.get("discourages", [])
        ),
        provides_setup_for=tuple(data.get("provides_setup_for", [])),
    )


def _from_dict(cls: type, data: dict[str, Any]) -> ResolvedIndex:
    """Rebuild an index from the dict produced by ``to_dict()``.

    Raises:
        IndexCacheError: If the data was written by another index format
            version or is missing required fields.
    """
    found = data.get("index_version") if isinstance(data, dict) else None
    if found != INDEX_FORMAT_VERSION:
        raise IndexCacheError(
            f"Unsupported index format {found!r} (expected {INDEX_FORMAT_VERSION!r})"
        )
    try:
        categories = {
            cid: Category(
                id=cid,
                name=c["name"],
                exclusive=c["exclusive"],
                description=c.get("description", ""),
                parent=c.get("parent"),
                required=c.get("required", False),
                order=c.get("order", 0),
                members=tuple(c.get("members", [])),
                exclusive_reason=c.get("exclusive_reason"),
            )
            for cid, c in data["categories"].items()
        }
        skills = {sid: _skill_from_dict(sid, s) for sid, s in data["skills"].items()}
        stacks = tuple(
            ResolvedStack(
                id=s["id"],
                name=s["name"],
                description=s.get("description", ""),
                audience=tuple(s.get("audience", [])),
                skills=s.get("skills", {}),
                all_skill_ids=tuple(s.get("all_skill_ids", [])),
                philosophy=s.get("philosophy", ""),
            )
            for s in data.get("suggested_stacks", [])
        )
        return cls(
            version=data["version"],
            skills=skills,
            categories=categories,
            members={cid: tuple(ids) for cid, ids in data["members"].items()},
            aliases=data.get("aliases", {}),
            suggested_stacks=stacks,
            generated_at=data.get("generated_at", ""),
            source_digest=data.get("source_digest"),
        )
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise IndexCacheError(f"Malformed index data: {exc!r}") from exc


def _from_json(cls: type, json_str: str) -> ResolvedIndex:
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as exc:
        raise IndexCacheError(f"Index is not valid JSON: {exc}") from exc
    return cls.from_dict(data)


def _read(cls: type, path: Path) -> ResolvedIndex:
    """Read an index from disk.

    Raises:
        FileNotFoundError: If the file does not exist.
        IndexCacheError: If the file is not a readable index.
    """
    return cls.from_json(Path(path).read_text(encoding="utf-8"))


# ---------------------------------------------------------------------------
# Cache-aware loading
# ---------------------------------------------------------------------------


def load_index(
    matrix_path: Path | str,
    cache_path: Path | str | None = None,
) -> tuple[ResolvedIndex, list[ValidationIssue]]:
    """Return a compiled index, reusing a fresh cache file when possible.

    When ``cache_path`` names an index compiled from the current contents of
    ``matrix_path`` it is read back instead of recompiling. Otherwise the
    document is compiled and, if ``cache_path`` is given, the cache is
    rewritten. A cache hit reports no issues: warnings were reported when
    the cache was written.

    Raises:
        MatrixLoadError: If the matrix document cannot be read or parsed.
        MatrixValidationError: If the matrix document is invalid.
    """
    matrix_path = Path(matrix_path)
    if cache_path is not None:
        cache_path = Path(cache_path)
        try:
            digest = compute_digest(matrix_path.read_bytes())
        except OSError as exc:
            raise MatrixLoadError(f"cannot read file: {exc}", path=matrix_path) from exc
        if cache_path.exists():
            try:
                cached = ResolvedIndex.read(cache_path)
            except (OSError, IndexCacheError):
                logger.warning("Ignoring unreadable index cache: %s", cache_path, exc_info=True)
            else:
                if cached.source_digest == digest:
                    logger.debug("Using cached index: %s", cache_path)
                    return cached, []
                logger.debug("Index cache is stale: %s", cache_path)

    index, issues = compile_path(matrix_path)
    if cache_path is not None:
        index.write(cache_path)
        logger.debug("Wrote index cache: %s", cache_path)
    return index, issues
