"""Tests for guidelint.checks.naming: filename conventions."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from guidelint.catalog import NamingPolicy, apply_config
from guidelint.checks import check_filename, naming_problems
from guidelint.checks.naming import allowed_suffixes
from guidelint.document import LineRange
from guidelint.linter import lint_text

if TYPE_CHECKING:
    from guidelint.catalog import RuleCatalog


class TestCheckFilename:
    """Tests for check_filename(): one violation per offending file."""

    def test_conforming_documentation_name(self, catalog: RuleCatalog) -> None:
        path = "docs/webapp_deployment_architecture_documentation.md"
        assert check_filename(path, catalog, "documentation") == []

    def test_bad_name_is_single_violation(self, catalog: RuleCatalog) -> None:
        violations = check_filename("docs/WebApp-Deployment.md", catalog, "documentation")
        assert len(violations) == 1
        violation = violations[0]
        assert violation.rule_id == "filename-convention"
        assert violation.is_fatal
        assert violation.line_range == LineRange(1, 1)
        assert "snake_case" in violation.message
        assert "_documentation" in violation.message

    def test_plan_root_needs_plan_suffix(self, catalog: RuleCatalog) -> None:
        violations = check_filename("plans/rollout_documentation.md", catalog, "plan")
        assert len(violations) == 1
        assert "_plan" in violations[0].message

    def test_plan_root_accepts_plan_suffix(self, catalog: RuleCatalog) -> None:
        assert check_filename("plans/rollout_plan.md", catalog, "plan") == []

    def test_disabled_rule(self, catalog: RuleCatalog) -> None:
        quiet = apply_config(
            catalog, {"version": 1, "rules": {"filename-convention": {"enabled": False}}}
        )
        assert check_filename("docs/Bad Name.md", quiet, "documentation") == []


class TestAllowedSuffixes:
    def test_nearest_root_wins(self) -> None:
        naming = NamingPolicy()
        assert allowed_suffixes("docs/plans/x.md", naming) == naming.plan_suffixes
        assert allowed_suffixes("plans/docs/x.md", naming) == naming.documentation_suffixes

    def test_doc_type_follows_same_root(self, catalog: RuleCatalog) -> None:
        report = lint_text("plans/docs/exporter.md", "# Exporter\n", catalog)
        assert report.doc_type == "documentation"
        naming = [v for v in report.violations if v.rule_id == "filename-convention"]
        assert len(naming) == 1
        assert "_documentation" in naming[0].message
        assert "plan-phase-missing" not in {v.rule_id for v in report.violations}

    def test_outside_roots_allows_every_suffix(self) -> None:
        naming = NamingPolicy()
        assert allowed_suffixes("notes/x.md", naming) == naming.all_suffixes

    def test_custom_suffix(self) -> None:
        naming = NamingPolicy(documentation_suffixes=("_documentation", "_runbook"))
        assert naming_problems("docs/oncall_runbook.md", naming) == []


@pytest.mark.parametrize(
    ("name", "problems"),
    [
        ("docs/api_reference_documentation.md", 0),
        ("docs/api_reference.md", 1),
        ("docs/API_reference_documentation.md", 1),
        ("docs/API-Reference.md", 2),
    ],
)
def test_naming_problem_count(name: str, problems: int) -> None:
    assert len(naming_problems(name, NamingPolicy())) == problems
