"""Load ``skills-matrix.yaml`` into a ``RelationshipModel``.

The document is parsed twice: ``yaml.compose`` yields the node tree so every
key can be traced back to its source line, and ``yaml.safe_load`` yields the
plain data that is converted into model types. Any structural problem raises
``MatrixLoadError`` with ``path:line`` context. Unknown keys are rejected so
authoring typos surface at load time instead of being silently ignored.

Referential checks (unknown skill ids, cycles, and so on) are the validator's
job; the loader only certifies shape.
"""

from __future__ import annotations

import dataclasses
import hashlib
import logging
from pathlib import Path
from typing import Any, Iterable

import yaml

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
from skillmatrix.exceptions import MatrixLoadError

logger = logging.getLogger(__name__)

_TOP_LEVEL_KEYS = frozenset({
    "version", "categories", "skills", "skill_aliases",
    "relationships", "suggested_stacks",
})
_REQUIRED_TOP_LEVEL_KEYS = ("version", "categories", "skills")
_RELATIONSHIP_KEYS = frozenset({
    "conflicts", "discourages", "requires", "recommends", "alternatives",
})
_CATEGORY_KEYS = frozenset({
    "id", "name", "description", "exclusive", "required", "order",
    "parent", "members", "exclusive_reason",
})
_SKILL_KEYS = frozenset({
    "name", "category", "description", "author", "tags",
    "provides_setup_for",
})
_CONFLICT_KEYS = frozenset({"skills", "reason"})
_REQUIRE_KEYS = frozenset({"skill", "needs", "needs_any", "mode", "reason"})
_RECOMMEND_KEYS = frozenset({"when", "suggest", "reason", "strength"})
_SUGGESTION_KEYS = frozenset({"skill", "strength"})
_ALTERNATIVE_KEYS = frozenset({"purpose", "skills"})
_STACK_KEYS = frozenset({
    "id", "name", "description", "audience", "skills", "philosophy",
})

Path_ = tuple[Any, ...]


def compute_digest(content: str | bytes) -> str:
    """Return the ``sha256:<hex>`` digest of a matrix document."""
    if isinstance(content, str):
        content = content.encode("utf-8")
    return f"sha256:{hashlib.sha256(content).hexdigest()}"


def _format_path(path: Path_) -> str:
    out = ""
    for part in path:
        if isinstance(part, int):
            out += f"[{part}]"
        else:
            out += f".{part}" if out else str(part)
    return out or "<document>"


def _line_map(
    node: yaml.Node,
    source: str,
    path: Path_ = (),
    lines: dict | None = None,
) -> dict:
    """Map every key/index path in the node tree to its 1-based line.

    Raises:
        MatrixLoadError: If a key appears twice in the same mapping.
    """
    if lines is None:
        lines = {}
    lines.setdefault(path, node.start_mark.line + 1)
    if isinstance(node, yaml.MappingNode):
        for key_node, value_node in node.value:
            child = path + (str(key_node.value),)
            line = key_node.start_mark.line + 1
            if child in lines and key_node.value != "<<":
                raise MatrixLoadError(
                    f"{_format_path(child)}: duplicate key {key_node.value!r} "
                    f"(first defined on line {lines[child]})",
                    path=source,
                    line=line,
                )
            lines[child] = line
            _line_map(value_node, source, child, lines)
    elif isinstance(node, yaml.SequenceNode):
        for index, item in enumerate(node.value):
            _line_map(item, source, path + (index,), lines)
    return lines


class _Reader:
    """Shape checks that report ``path:line`` context on failure."""

    def __init__(self, source: str, lines: dict) -> None:
        self.source = source
        self.lines = lines

    def line_of(self, path: Path_) -> int | None:
        while path:
            if path in self.lines:
                return self.lines[path]
            path = path[:-1]
        return self.lines.get(())

    def location(self, path: Path_) -> str:
        line = self.line_of(path)
        where = _format_path(path)
        return f"{where} (line {line})" if line else where

    def fail(self, path: Path_, message: str) -> MatrixLoadError:
        return MatrixLoadError(
            f"{_format_path(path)}: {message}",
            path=self.source,
            line=self.line_of(path),
        )

    def mapping(self, value: Any, path: Path_) -> dict:
        if value is None:
            return {}
        if not isinstance(value, dict):
            raise self.fail(path, f"expected a mapping, got {type(value).__name__}")
        return value

    def sequence(self, value: Any, path: Path_) -> list:
        if value is None:
            return []
        if not isinstance(value, list):
            raise self.fail(path, f"expected a list, got {type(value).__name__}")
        return value

    def reject_unknown(self, data: dict, allowed: Iterable[str], path: Path_) -> None:
        allowed = frozenset(allowed)
        for key in data:
            if key not in allowed:
                raise self.fail(
                    path + (str(key),),
                    f"unknown key {key!r} (expected one of: {', '.join(sorted(allowed))})",
                )

    def string(self, data: dict, key: str, path: Path_, default: str | None = None) -> str:
        if key not in data or data[key] is None:
            if default is None:
                raise self.fail(path, f"missing required key {key!r}")
            return default
        value = data[key]
        if isinstance(value, bool) or not isinstance(value, (str, int, float)):
            raise self.fail(path + (key,), f"expected a string, got {type(value).__name__}")
        return str(value)

    def string_list(self, data: dict, key: str, path: Path_, required: bool = False) -> tuple[str, ...]:
        if key not in data or data[key] is None:
            if required:
                raise self.fail(path, f"missing required key {key!r}")
            return ()
        items = self.sequence(data[key], path + (key,))
        out = []
        for index, item in enumerate(items):
            if isinstance(item, bool) or not isinstance(item, (str, int, float)):
                raise self.fail(path + (key, index), "expected a string")
            out.append(str(item))
        return tuple(out)

    def boolean(self, data: dict, key: str, path: Path_, default: bool) -> bool:
        value = data.get(key, default)
        if not isinstance(value, bool):
            raise self.fail(path + (key,), f"expected true or false, got {value!r}")
        return value

    def integer(self, data: dict, key: str, path: Path_, default: int) -> int:
        value = data.get(key, default)
        if isinstance(value, bool) or not isinstance(value, int):
            raise self.fail(path + (key,), f"expected an integer, got {value!r}")
        return value


# ---------------------------------------------------------------------------
# Section parsers
# ---------------------------------------------------------------------------


def _parse_categories(reader: _Reader, raw: Any) -> dict[str, Category]:
    path: Path_ = ("categories",)
    categories: dict[str, Category] = {}
    for cat_id, body in reader.mapping(raw, path).items():
        cat_path = path + (str(cat_id),)
        data = reader.mapping(body, cat_path)
        reader.reject_unknown(data, _CATEGORY_KEYS, cat_path)
        declared_id = reader.string(data, "id", cat_path, default=str(cat_id))
        if declared_id != str(cat_id):
            raise reader.fail(
                cat_path + ("id",),
                f"category id {declared_id!r} does not match its key {cat_id!r}",
            )
        categories[str(cat_id)] = Category(
            id=str(cat_id),
            name=reader.string(data, "name", cat_path),
            exclusive=reader.boolean(data, "exclusive", cat_path, True),
            description=reader.string(data, "description", cat_path, default=""),
            parent=reader.string(data, "parent", cat_path, default="") or None,
            required=reader.boolean(data, "required", cat_path, False),
            order=reader.integer(data, "order", cat_path, 0),
            members=reader.string_list(data, "members", cat_path),
            exclusive_reason=reader.string(
                data, "exclusive_reason", cat_path, default=""
            ) or None,
        )
    return categories


def _parse_skills(reader: _Reader, raw: Any) -> dict[str, Skill]:
    path: Path_ = ("skills",)
    skills: dict[str, Skill] = {}
    for skill_id, body in reader.mapping(raw, path).items():
        skill_path = path + (str(skill_id),)
        data = reader.mapping(body, skill_path)
        reader.reject_unknown(data, _SKILL_KEYS, skill_path)
        skills[str(skill_id)] = Skill(
            id=str(skill_id),
            name=reader.string(
                data, "name", skill_path, default=display_name_from_id(str(skill_id))
            ),
            category=reader.string(data, "category", skill_path, default="") or None,
            description=reader.string(data, "description", skill_path, default=""),
            author=reader.string(data, "author", skill_path, default=""),
            tags=reader.string_list(data, "tags", skill_path),
            provides_setup_for=reader.string_list(data, "provides_setup_for", skill_path),
        )
    return skills


def _parse_aliases(reader: _Reader, raw: Any) -> dict[str, str]:
    path: Path_ = ("skill_aliases",)
    aliases: dict[str, str] = {}
    for alias, target in reader.mapping(raw, path).items():
        if not isinstance(target, str):
            raise reader.fail(path + (str(alias),), "alias target must be a string")
        aliases[str(alias)] = target
    return aliases


def _parse_mode(reader: _Reader, data: dict, path: Path_) -> RequirementMode:
    needs_any = reader.boolean(data, "needs_any", path, False)
    if "mode" not in data:
        return RequirementMode.ANY_OF if needs_any else RequirementMode.ALL
    raw = str(data["mode"]).strip().lower().replace("-", "_")
    try:
        mode = RequirementMode(raw)
    except ValueError:
        raise reader.fail(
            path + ("mode",), f"unknown requirement mode {data['mode']!r} (expected all or any_of)"
        ) from None
    if "needs_any" in data and needs_any != (mode is RequirementMode.ANY_OF):
        raise reader.fail(path, "'needs_any' contradicts 'mode'")
    return mode


def _parse_strength(reader: _Reader, value: Any, path: Path_) -> Strength:
    try:
        return Strength(str(value).strip().lower())
    except ValueError:
        raise reader.fail(
            path, f"unknown strength {value!r} (expected weak or strong)"
        ) from None


def _parse_suggestions(
    reader: _Reader, raw: Any, path: Path_, default: Strength
) -> tuple[Suggestion, ...]:
    suggestions = []
    for index, item in enumerate(reader.sequence(raw, path)):
        item_path = path + (index,)
        if isinstance(item, str):
            suggestions.append(Suggestion(skill=item, strength=default))
            continue
        data = reader.mapping(item, item_path)
        reader.reject_unknown(data, _SUGGESTION_KEYS, item_path)
        strength = default
        if "strength" in data:
            strength = _parse_strength(reader, data["strength"], item_path + ("strength",))
        suggestions.append(
            Suggestion(skill=reader.string(data, "skill", item_path), strength=strength)
        )
    return tuple(suggestions)


def _parse_relationships(reader: _Reader, raw: Any) -> dict[str, tuple]:
    root: Path_ = ("relationships",)
    data = reader.mapping(raw, root)
    reader.reject_unknown(data, _RELATIONSHIP_KEYS, root)

    conflicts = []
    for index, item in enumerate(reader.sequence(data.get("conflicts"), root + ("conflicts",))):
        path = root + ("conflicts", index)
        rule = reader.mapping(item, path)
        reader.reject_unknown(rule, _CONFLICT_KEYS, path)
        conflicts.append(ConflictRule(
            skills=reader.string_list(rule, "skills", path, required=True),
            reason=reader.string(rule, "reason", path),
            location=reader.location(path),
        ))

    discourages = []
    for index, item in enumerate(reader.sequence(data.get("discourages"), root + ("discourages",))):
        path = root + ("discourages", index)
        rule = reader.mapping(item, path)
        reader.reject_unknown(rule, _CONFLICT_KEYS, path)
        discourages.append(DiscourageRule(
            skills=reader.string_list(rule, "skills", path, required=True),
            reason=reader.string(rule, "reason", path),
            location=reader.location(path),
        ))

    requires = []
    for index, item in enumerate(reader.sequence(data.get("requires"), root + ("requires",))):
        path = root + ("requires", index)
        rule = reader.mapping(item, path)
        reader.reject_unknown(rule, _REQUIRE_KEYS, path)
        requires.append(RequirementRule(
            skill=reader.string(rule, "skill", path),
            needs=reader.string_list(rule, "needs", path, required=True),
            mode=_parse_mode(reader, rule, path),
            reason=reader.string(rule, "reason", path, default=""),
            location=reader.location(path),
        ))

    recommends = []
    for index, item in enumerate(reader.sequence(data.get("recommends"), root + ("recommends",))):
        path = root + ("recommends", index)
        rule = reader.mapping(item, path)
        reader.reject_unknown(rule, _RECOMMEND_KEYS, path)
        default = Strength.WEAK
        if "strength" in rule:
            default = _parse_strength(reader, rule["strength"], path + ("strength",))
        if "suggest" not in rule:
            raise reader.fail(path, "missing required key 'suggest'")
        recommends.append(RecommendationRule(
            when=reader.string(rule, "when", path),
            suggest=_parse_suggestions(reader, rule["suggest"], path + ("suggest",), default),
            reason=reader.string(rule, "reason", path, default=""),
            location=reader.location(path),
        ))

    alternatives = []
    for index, item in enumerate(reader.sequence(data.get("alternatives"), root + ("alternatives",))):
        path = root + ("alternatives", index)
        group = reader.mapping(item, path)
        reader.reject_unknown(group, _ALTERNATIVE_KEYS, path)
        alternatives.append(AlternativeGroup(
            purpose=reader.string(group, "purpose", path, default=""),
            skills=reader.string_list(group, "skills", path, required=True),
            location=reader.location(path),
        ))

    return {
        "conflicts": tuple(conflicts),
        "discourages": tuple(discourages),
        "requires": tuple(requires),
        "recommends": tuple(recommends),
        "alternatives": tuple(alternatives),
    }


def _parse_stacks(reader: _Reader, raw: Any) -> tuple[SuggestedStack, ...]:
    root: Path_ = ("suggested_stacks",)
    stacks = []
    for index, item in enumerate(reader.sequence(raw, root)):
        path = root + (index,)
        data = reader.mapping(item, path)
        reader.reject_unknown(data, _STACK_KEYS, path)
        selections: dict[str, dict[str, str]] = {}
        for category, subcategories in reader.mapping(data.get("skills"), path + ("skills",)).items():
            sub_path = path + ("skills", str(category))
            selections[str(category)] = {
                str(sub): str(ref)
                for sub, ref in reader.mapping(subcategories, sub_path).items()
            }
        stacks.append(SuggestedStack(
            id=reader.string(data, "id", path),
            name=reader.string(data, "name", path),
            description=reader.string(data, "description", path, default=""),
            audience=reader.string_list(data, "audience", path),
            skills=selections,
            philosophy=reader.string(data, "philosophy", path, default=""),
            location=reader.location(path),
        ))
    return tuple(stacks)


def _fill_categories_from_members(
    skills: dict[str, Skill],
    categories: dict[str, Category],
    aliases: dict[str, str],
) -> dict[str, Skill]:
    """Give category-less skills the first category that lists them."""
    filled = dict(skills)
    for category in categories.values():
        for ref in category.members:
            skill = filled.get(aliases.get(ref, ref))
            if skill is not None and skill.category is None:
                filled[skill.id] = dataclasses.replace(skill, category=category.id)
    return filled


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_model(text: str, source: str = "<string>") -> RelationshipModel:
    """Parse a matrix document from text.

    Args:
        text: YAML document text.
        source: Name used in error messages (usually the file path).

    Returns:
        The parsed ``RelationshipModel``.

    Raises:
        MatrixLoadError: If the document is malformed.
    """
    try:
        root_node = yaml.compose(text, Loader=yaml.SafeLoader)
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        mark = getattr(exc, "problem_mark", None)
        line = mark.line + 1 if mark is not None else None
        problem = getattr(exc, "problem", None) or str(exc)
        raise MatrixLoadError(f"invalid YAML: {problem}", path=source, line=line) from exc

    if root_node is None or data is None:
        raise MatrixLoadError("document is empty", path=source)

    reader = _Reader(source, _line_map(root_node, source))
    if not isinstance(data, dict):
        raise reader.fail((), "top level must be a mapping")
    reader.reject_unknown(data, _TOP_LEVEL_KEYS, ())
    missing = [key for key in _REQUIRED_TOP_LEVEL_KEYS if key not in data]
    if missing:
        raise MatrixLoadError(
            f"missing required top-level keys: {', '.join(missing)}", path=source, line=1
        )

    categories = _parse_categories(reader, data["categories"])
    aliases = _parse_aliases(reader, data.get("skill_aliases"))
    skills = _fill_categories_from_members(
        _parse_skills(reader, data["skills"]), categories, aliases
    )
    relationships = _parse_relationships(reader, data.get("relationships"))

    model = RelationshipModel(
        version=reader.string(data, "version", ()),
        categories=categories,
        skills=skills,
        aliases=aliases,
        suggested_stacks=_parse_stacks(reader, data.get("suggested_stacks")),
        source_path=None if source == "<string>" else source,
        source_digest=compute_digest(text),
        **relationships,
    )
    logger.debug(
        "Parsed %s: %d skills, %d categories, %d conflict rules, %d requirement rules",
        source, len(skills), len(categories),
        len(model.conflicts), len(model.requires),
    )
    return model


def load_model(path: Path | str) -> RelationshipModel:
    """Read and parse a matrix document from disk.

    Raises:
        MatrixLoadError: If the file cannot be read or is malformed.
    """
    path = Path(path)
    try:
        text = path.read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise MatrixLoadError(f"cannot read file: {exc}", path=path) from exc
    logger.debug("Loading skills matrix: %s", path)
    return parse_model(text, source=str(path))
