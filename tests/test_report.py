"""Tests for guidelint.report: violations, ordering and verdicts."""

from __future__ import annotations

from guidelint.document import LineRange
from guidelint.report import (
    MAX_EXCERPT_LENGTH,
    VERDICT_COMPLETE,
    VERDICT_DRAFT,
    Violation,
    build_report,
    make_excerpt,
)


def _violation(
    rule_id: str, line: int, severity: str = "fatal", category: str = "naming"
) -> Violation:
    return Violation(
        rule_id=rule_id,
        category=category,
        severity=severity,
        line_range=LineRange(line, line),
        excerpt="",
        message=rule_id,
    )


class TestBuildReport:
    """Tests for build_report(): ordering, counts and the verdict."""

    def test_empty_is_complete(self) -> None:
        report = build_report("a.md", "documentation", [])
        assert report.verdict == VERDICT_COMPLETE
        assert report.violations == ()
        assert dict(report.counts) == {}

    def test_warnings_only_is_complete(self) -> None:
        report = build_report("a.md", "plan", [_violation("w", 3, severity="warning")])
        assert report.verdict == VERDICT_COMPLETE
        assert report.warning_count == 1
        assert report.fatal_count == 0

    def test_one_fatal_is_draft(self) -> None:
        violations = [
            _violation("w1", 1, severity="warning"),
            _violation("f", 9),
            _violation("w2", 2, severity="warning"),
        ]
        report = build_report("a.md", "plan", violations)
        assert report.verdict == VERDICT_DRAFT
        assert not report.is_complete
        assert report.fatal_count == 1

    def test_sorted_by_line_then_rule(self) -> None:
        violations = [_violation("b", 5), _violation("a", 5), _violation("c", 1)]
        report = build_report("a.md", "plan", violations)
        assert [(v.line, v.rule_id) for v in report.violations] == [(1, "c"), (5, "a"), (5, "b")]

    def test_duplicates_are_kept(self) -> None:
        report = build_report("a.md", "plan", [_violation("a", 1), _violation("a", 1)])
        assert len(report.violations) == 2

    def test_counts_by_category(self) -> None:
        violations = [
            _violation("a", 1, category="table-shape"),
            _violation("b", 2, category="table-shape"),
            _violation("c", 3, category="code-block"),
        ]
        report = build_report("a.md", "plan", violations)
        assert dict(report.counts) == {"code-block": 1, "table-shape": 2}


class TestMakeExcerpt:
    def test_collapses_whitespace(self) -> None:
        assert make_excerpt("  a\n\tb  ") == "a b"

    def test_clips_long_text(self) -> None:
        excerpt = make_excerpt("x" * 500)
        assert len(excerpt) == MAX_EXCERPT_LENGTH
        assert excerpt.endswith("...")
