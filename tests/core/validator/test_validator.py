"""Tests for relationship model validation.

Each test builds a small document exhibiting one defect and checks the
issue kind, severity and message. The shared matrix must validate cleanly.
"""

from __future__ import annotations

import textwrap

from skillmatrix.core.model import parse_model
from skillmatrix.core.validator import IssueKind, Severity, validate_model

HEADER = textwrap.dedent("""\
    version: "1.0"
    categories:
      framework:
        name: Framework
      data:
        name: Data
        exclusive: false
    skills:
      react:
        category: framework
      vue:
        category: framework
      react-query:
        category: data
      swr:
        category: data
""")


def _validate(relationships: str = "", extra: str = ""):
    doc = HEADER + extra + textwrap.dedent(relationships)
    return validate_model(parse_model(doc))


class TestCleanModel:
    def test_shared_matrix_is_valid(self, model) -> None:
        report = validate_model(model)
        assert report.ok
        assert report.issues == []

    def test_header_is_valid(self) -> None:
        assert _validate().ok


class TestReferenceIntegrity:
    """Every name a rule uses must exist in the skill table."""

    def test_unknown_skill_in_conflict(self) -> None:
        report = _validate("""\
            relationships:
              conflicts:
                - skills: [react, angular]
                  reason: nope
        """)
        assert not report.ok
        [issue] = report.of_kind(IssueKind.UNKNOWN_SKILL)
        assert issue.severity is Severity.ERROR
        assert "'angular'" in issue.message
        assert issue.location.startswith("relationships.conflicts[0]")

    def test_unknown_skill_in_requirement(self) -> None:
        report = _validate("""\
            relationships:
              requires:
                - skill: react-query
                  needs: [preact]
        """)
        assert [i.skills for i in report.of_kind(IssueKind.UNKNOWN_SKILL)] == [("preact",)]

    def test_unknown_recommendation_target(self) -> None:
        report = _validate("""\
            relationships:
              recommends:
                - when: react
                  suggest: [jotai]
        """)
        assert not report.ok

    def test_unknown_alias_target(self) -> None:
        report = _validate(extra="skill_aliases:\n  ng: angular\n")
        [issue] = report.of_kind(IssueKind.UNKNOWN_SKILL)
        assert "Alias 'ng'" in issue.message

    def test_alias_shadowing_skill_id(self) -> None:
        report = _validate(extra="skill_aliases:\n  react: vue\n")
        assert report.of_kind(IssueKind.ALIAS_SHADOW)

    def test_aliases_resolve_in_rules(self) -> None:
        report = _validate(
            """\
            relationships:
              conflicts:
                - skills: [rq, swr]
                  reason: same job
            """,
            extra="skill_aliases:\n  rq: react-query\n",
        )
        assert report.ok

    def test_unknown_stack_skill(self) -> None:
        report = _validate(extra=textwrap.dedent("""\
            suggested_stacks:
              - id: s
                name: S
                skills:
                  frontend:
                    framework: svelte
        """))
        assert report.of_kind(IssueKind.UNKNOWN_SKILL)


class TestCategories:
    def test_skill_without_category(self) -> None:
        report = _validate(extra="  orphan:\n    name: Orphan\n")
        [issue] = report.of_kind(IssueKind.MISSING_CATEGORY)
        assert issue.skills == ("orphan",)

    def test_skill_with_unknown_category(self) -> None:
        report = _validate(extra="  orphan:\n    category: nowhere\n")
        assert report.of_kind(IssueKind.UNKNOWN_CATEGORY)

    def test_membership_mismatch(self) -> None:
        doc = textwrap.dedent("""\
            version: "1.0"
            categories:
              framework:
                name: Framework
                members: [react, swr]
              data:
                name: Data
            skills:
              react:
                category: framework
              swr:
                category: data
        """)
        report = validate_model(parse_model(doc))
        [issue] = report.of_kind(IssueKind.MEMBERSHIP_MISMATCH)
        assert issue.skills == ("swr",)

    def test_unknown_parent(self) -> None:
        doc = textwrap.dedent("""\
            version: "1.0"
            categories:
              unit:
                name: Unit
                parent: testing
            skills:
              jest:
                category: unit
        """)
        report = validate_model(parse_model(doc))
        assert report.of_kind(IssueKind.UNKNOWN_CATEGORY)


class TestRuleSanity:
    def test_single_skill_conflict_is_error(self) -> None:
        report = _validate("""\
            relationships:
              conflicts:
                - skills: [react]
                  reason: lonely
        """)
        [issue] = report.of_kind(IssueKind.UNDERSIZED_RULE)
        assert issue.severity is Severity.ERROR

    def test_duplicate_skill_conflict_is_error(self) -> None:
        report = _validate("""\
            relationships:
              conflicts:
                - skills: [react, react]
                  reason: twice
        """)
        assert not report.ok

    def test_undersized_discourage_is_warning(self) -> None:
        report = _validate("""\
            relationships:
              discourages:
                - skills: [react]
                  reason: lonely
        """)
        assert report.ok
        [issue] = report.warnings
        assert issue.kind is IssueKind.UNDERSIZED_RULE

    def test_empty_requirement(self) -> None:
        report = _validate("""\
            relationships:
              requires:
                - skill: react-query
                  needs: []
        """)
        assert report.of_kind(IssueKind.EMPTY_REQUIREMENT)
        assert not report.ok

    def test_self_recommendation_warns(self) -> None:
        report = _validate("""\
            relationships:
              recommends:
                - when: react
                  suggest: [react]
        """)
        assert report.ok
        assert report.of_kind(IssueKind.SELF_RECOMMENDATION)

    def test_single_member_alternative_warns(self) -> None:
        report = _validate("""\
            relationships:
              alternatives:
                - purpose: caching
                  skills: [swr]
        """)
        assert report.ok
        assert report.of_kind(IssueKind.UNDERSIZED_RULE)


class TestCycles:
    def test_two_skill_cycle_is_error(self) -> None:
        report = _validate("""\
            relationships:
              requires:
                - skill: react-query
                  needs: [swr]
                - skill: swr
                  needs: [react-query]
        """)
        [issue] = report.of_kind(IssueKind.REQUIREMENT_CYCLE)
        assert issue.severity is Severity.ERROR
        assert issue.message == "Circular requirement: react-query -> swr -> react-query"
        assert issue.skills == ("react-query", "swr", "react-query")

    def test_any_of_edges_count(self) -> None:
        """An any-of requirement still contributes edges to the graph."""
        report = _validate("""\
            relationships:
              requires:
                - skill: react-query
                  needs: [react, swr]
                  needs_any: true
                - skill: swr
                  needs: [react-query]
        """)
        assert report.of_kind(IssueKind.REQUIREMENT_CYCLE)

    def test_chain_without_cycle(self) -> None:
        report = _validate("""\
            relationships:
              requires:
                - skill: react-query
                  needs: [swr]
                - skill: swr
                  needs: [react]
        """)
        assert report.ok


class TestContradictions:
    def test_requires_and_conflicts(self) -> None:
        report = _validate("""\
            relationships:
              conflicts:
                - skills: [react-query, swr]
                  reason: same job
              requires:
                - skill: react-query
                  needs: [swr]
        """)
        [issue] = report.of_kind(IssueKind.CONTRADICTORY_RULE)
        assert issue.severity is Severity.WARNING
        assert report.ok

    def test_category_exclusivity_is_not_a_contradiction(self) -> None:
        """A requirement inside an exclusive category overrides exclusivity."""
        report = _validate("""\
            relationships:
              requires:
                - skill: vue
                  needs: [react]
        """)
        assert report.of_kind(IssueKind.CONTRADICTORY_RULE) == []


class TestCollectsEverything:
    def test_multiple_issues_in_one_run(self) -> None:
        report = _validate("""\
            relationships:
              conflicts:
                - skills: [react, angular]
                  reason: nope
              requires:
                - skill: svelte
                  needs: [react]
                - skill: react-query
                  needs: [swr]
                - skill: swr
                  needs: [react-query]
        """)
        kinds = {issue.kind for issue in report.errors}
        assert kinds == {IssueKind.UNKNOWN_SKILL, IssueKind.REQUIREMENT_CYCLE}
        assert len(report.of_kind(IssueKind.UNKNOWN_SKILL)) == 2
