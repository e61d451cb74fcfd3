"""Report builder: Violation records and the per-document verdict."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

from guidelint.catalog.rules import SEVERITY_FATAL, SEVERITY_WARNING

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from guidelint.catalog.rules import Rule
    from guidelint.document.model import LineRange

VERDICT_COMPLETE = "complete"
VERDICT_DRAFT = "draft"

# Longest excerpt kept on a violation.
MAX_EXCERPT_LENGTH = 120


@dataclass(frozen=True)
class Violation:
    """A single finding against one rule."""

    rule_id: str
    category: str
    severity: str  # "fatal" | "warning"
    line_range: LineRange
    excerpt: str
    message: str

    @property
    def is_fatal(self) -> bool:
        return self.severity == SEVERITY_FATAL

    @property
    def line(self) -> int:
        return self.line_range.start


@dataclass(frozen=True)
class Report:
    """Aggregate lint result for one document."""

    document_path: str
    doc_type: str
    verdict: str  # "complete" | "draft"
    violations: tuple[Violation, ...]
    counts: Mapping[str, int]

    @property
    def fatal_count(self) -> int:
        return sum(1 for v in self.violations if v.severity == SEVERITY_FATAL)

    @property
    def warning_count(self) -> int:
        return sum(1 for v in self.violations if v.severity == SEVERITY_WARNING)

    @property
    def is_complete(self) -> bool:
        return self.verdict == VERDICT_COMPLETE


def make_excerpt(text: str) -> str:
    """Collapse whitespace and clip *text* for display."""
    excerpt = " ".join(text.split())
    if len(excerpt) > MAX_EXCERPT_LENGTH:
        excerpt = excerpt[: MAX_EXCERPT_LENGTH - 3] + "..."
    return excerpt


def violation_for(
    rule: Rule, line_range: LineRange, excerpt: str, **values: object
) -> Violation:
    """Build a Violation for *rule*, rendering its message with *values*."""
    return Violation(
        rule_id=rule.id,
        category=rule.category,
        severity=rule.severity,
        line_range=line_range,
        excerpt=make_excerpt(excerpt),
        message=rule.render(**values),
    )


def build_report(
    document_path: str, doc_type: str, violations: Iterable[Violation]
) -> Report:
    """Merge violation sequences into one Report.

    Violations are sorted by ``(line, rule_id)``; nothing is deduplicated.
    The verdict is Draft iff at least one violation is fatal.
    """
    ordered = tuple(
        sorted(violations, key=lambda v: (v.line_range.start, v.rule_id, v.line_range.end))
    )
    verdict = VERDICT_DRAFT if any(v.is_fatal for v in ordered) else VERDICT_COMPLETE
    counts = Counter(v.category for v in ordered)
    return Report(
        document_path=document_path,
        doc_type=doc_type,
        verdict=verdict,
        violations=ordered,
        counts=MappingProxyType(dict(sorted(counts.items()))),
    )
