"""Property-based tests for the compiled index and the query engine.

Verifies, over randomly generated relationship models, that:
- Conflicts are symmetric and carry the same reason on both sides
- Inverse edges (required_by, recommended_by) mirror the forward edges
- Compilation is deterministic (modulo the timestamp)
- is_disabled agrees with a direct reading of the authored rules
- Exclusive categories yield all-pairs conflicts unless a requirement links the pair
- A requirement cycle is always rejected
"""
from __future__ import annotations

import dataclasses

import pytest
from hypothesis import assume, given, settings
from hypothesis import strategies as st

from skillmatrix.core.compiler import compile_model
from skillmatrix.core.model import (
    Category,
    ConflictRule,
    RecommendationRule,
    RelationshipModel,
    RequirementMode,
    RequirementRule,
    Skill,
    Strength,
    Suggestion,
    display_name_from_id,
)
from skillmatrix.core.query import is_disabled
from skillmatrix.core.validator import IssueKind, validate_model
from skillmatrix.exceptions import MatrixValidationError


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------


@st.composite
def relationship_models(draw: st.DrawFn) -> RelationshipModel:
    """Generate a valid model. Requirements only point at lower-numbered skills."""
    n = draw(st.integers(min_value=2, max_value=8))
    ids = [f"skill-{i}" for i in range(n)]
    k = draw(st.integers(min_value=1, max_value=3))

    categories = {
        f"cat-{c}": Category(id=f"cat-{c}", name=f"Cat {c}", exclusive=draw(st.booleans()))
        for c in range(k)
    }
    skills = {
        sid: Skill(
            id=sid,
            name=display_name_from_id(sid),
            category=f"cat-{draw(st.integers(min_value=0, max_value=k - 1))}",
        )
        for sid in ids
    }

    pairs = st.tuples(st.sampled_from(ids), st.sampled_from(ids)).filter(
        lambda p: p[0] != p[1]
    )
    conflicts = tuple(
        ConflictRule(skills=pair, reason=f"conflict {i}")
        for i, pair in enumerate(draw(st.lists(pairs, max_size=6)))
    )

    requires = []
    for i in range(1, n):
        if draw(st.booleans()):
            needs = draw(st.lists(st.sampled_from(ids[:i]), min_size=1, max_size=3, unique=True))
            requires.append(RequirementRule(
                skill=ids[i],
                needs=tuple(needs),
                mode=draw(st.sampled_from(list(RequirementMode))),
            ))

    recommends = tuple(
        RecommendationRule(
            when=a,
            suggest=(Suggestion(b, draw(st.sampled_from(list(Strength)))),),
        )
        for a, b in draw(st.lists(pairs, max_size=6))
    )

    return RelationshipModel(
        version="1.0",
        categories=categories,
        skills=skills,
        conflicts=conflicts,
        requires=tuple(requires),
        recommends=recommends,
    )


def _required_pairs(model: RelationshipModel) -> set[frozenset[str]]:
    return {frozenset((r.skill, need)) for r in model.requires for need in r.needs}


def _expected_conflicts(model: RelationshipModel, skill_id: str) -> set[str]:
    """Conflict partners of ``skill_id`` read straight from the authored rules."""
    partners = set()
    for rule in model.conflicts:
        if skill_id in rule.skills:
            partners.update(s for s in rule.skills if s != skill_id)
    category = model.categories[model.skills[skill_id].category]
    if category.exclusive:
        linked = _required_pairs(model)
        for other in model.category_members(category.id):
            if other != skill_id and frozenset((skill_id, other)) not in linked:
                partners.add(other)
    return partners


def _requirements_met(model: RelationshipModel, skill_id: str, selected: set[str]) -> bool:
    for rule in model.requires:
        if rule.skill != skill_id:
            continue
        if rule.mode is RequirementMode.ANY_OF:
            if not any(n in selected for n in rule.needs):
                return False
        elif not all(n in selected for n in rule.needs):
            return False
    return True


# ---------------------------------------------------------------------------
# Symmetry and inverse consistency
# ---------------------------------------------------------------------------


class TestIndexShape:
    """Compiled relations are mirrored wherever the model implies a mirror."""

    @given(model=relationship_models())
    @settings(max_examples=60)
    def test_conflicts_symmetric(self, model: RelationshipModel) -> None:
        index = compile_model(model)
        for skill in index:
            for relation in skill.conflicts_with:
                mirror = index.skills[relation.skill_id].conflict_with(skill.id)
                assert mirror is not None
                assert mirror.reason == relation.reason

    @given(model=relationship_models())
    @settings(max_examples=60)
    def test_requirement_inverse(self, model: RelationshipModel) -> None:
        index = compile_model(model)
        for skill in index:
            for requirement in skill.requires:
                for needed in requirement.skill_ids:
                    assert skill.id in index.skills[needed].required_by
            for dependent in skill.required_by:
                needed_ids = {
                    sid for r in index.skills[dependent].requires for sid in r.skill_ids
                }
                assert skill.id in needed_ids

    @given(model=relationship_models())
    @settings(max_examples=60)
    def test_recommendation_inverse(self, model: RelationshipModel) -> None:
        index = compile_model(model)
        for skill in index:
            for rec in skill.recommends:
                back = [r for r in index.skills[rec.skill_id].recommended_by if r.skill_id == skill.id]
                assert len(back) == 1
                assert back[0].strength is rec.strength

    @given(model=relationship_models())
    @settings(max_examples=40)
    def test_compile_is_deterministic(self, model: RelationshipModel) -> None:
        first = compile_model(model).to_dict()
        second = compile_model(model).to_dict()
        first.pop("generated_at")
        second.pop("generated_at")
        assert first == second


# ---------------------------------------------------------------------------
# Query agreement with the authored rules
# ---------------------------------------------------------------------------


class TestDisabledAgreesWithRules:
    """is_disabled reports exactly what the authored rules imply."""

    @given(model=relationship_models(), data=st.data())
    @settings(max_examples=80)
    def test_no_false_negatives_or_positives(self, model: RelationshipModel, data) -> None:
        index = compile_model(model)
        selected = data.draw(st.sets(st.sampled_from(sorted(model.skills))))
        for skill_id in model.skills:
            blocked = bool(_expected_conflicts(model, skill_id) & selected)
            expected = blocked or not _requirements_met(model, skill_id, selected)
            assert is_disabled(index, selected, skill_id).disabled is expected

    @given(model=relationship_models())
    @settings(max_examples=60)
    def test_exclusive_category_pairs_conflict(self, model: RelationshipModel) -> None:
        index = compile_model(model)
        linked = _required_pairs(model)
        for category in model.categories.values():
            if not category.exclusive:
                continue
            members = model.category_members(category.id)
            for a in members:
                for b in members:
                    if a != b and frozenset((a, b)) not in linked:
                        assert index.skills[a].conflict_with(b) is not None


# ---------------------------------------------------------------------------
# Acyclic guarantee
# ---------------------------------------------------------------------------


class TestAcyclicGuarantee:
    @given(model=relationship_models())
    @settings(max_examples=40)
    def test_generated_models_are_valid(self, model: RelationshipModel) -> None:
        report = validate_model(model)
        assert report.ok
        assert report.of_kind(IssueKind.REQUIREMENT_CYCLE) == []

    @given(model=relationship_models())
    @settings(max_examples=40)
    def test_back_edge_is_rejected(self, model: RelationshipModel) -> None:
        assume(model.requires)
        rule = model.requires[0]
        back = RequirementRule(skill=rule.needs[0], needs=(rule.skill,))
        cyclic = dataclasses.replace(model, requires=model.requires + (back,))

        assert validate_model(cyclic).of_kind(IssueKind.REQUIREMENT_CYCLE)
        with pytest.raises(MatrixValidationError):
            compile_model(cyclic)
