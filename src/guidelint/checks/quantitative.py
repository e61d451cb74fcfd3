"""Quantitative evaluator: atomic actions per objective and verification coverage.

Both checks approximate numeric target bands from the plan guidelines, so
they only ever emit warnings.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from guidelint.checks.structure import section_end
from guidelint.document.model import BLOCK_HEADING, LineRange
from guidelint.report import violation_for

if TYPE_CHECKING:
    from guidelint.catalog.rules import RuleCatalog
    from guidelint.document.model import Block, Document
    from guidelint.report import Violation

VERIFICATION_MARKER = "**Verification"

# Lines after a checklist item searched for its verification marker.
VERIFICATION_LOOKAHEAD = 3

DEFAULT_MIN_ACTIONS = 5
DEFAULT_MIN_COVERAGE = 0.5


def _direct_checklist(document: Document, index: int) -> bool:
    """True if heading ``blocks[index]`` has checklist items before any sub-heading."""
    for block in document.blocks[index + 1 :]:
        if block.kind == BLOCK_HEADING:
            return False
        if block.is_checklist_item:
            return True
    return False


def objective_counts(document: Document) -> list[tuple[Block, int]]:
    """Return ``(heading, checklist item count)`` for every objective heading.

    An objective is a heading whose own content holds at least one checklist
    item; its count spans everything up to the next heading of equal or
    higher level.
    """
    counts: list[tuple[Block, int]] = []
    for index, block in enumerate(document.blocks):
        if block.kind != BLOCK_HEADING or not _direct_checklist(document, index):
            continue
        end = section_end(document, index)
        total = sum(1 for b in document.blocks[index + 1 : end] if b.is_checklist_item)
        counts.append((block, total))
    return counts


def has_verification(document: Document, item: Block) -> bool:
    last = min(item.line_range.end + VERIFICATION_LOOKAHEAD, document.line_count)
    return any(
        VERIFICATION_MARKER in document.line(num)
        for num in range(item.line_range.start, last + 1)
    )


def verification_coverage(document: Document) -> float | None:
    """Fraction of checklist items carrying a verification marker, None without items."""
    items = document.checklist_items
    if not items:
        return None
    covered = sum(1 for item in items if has_verification(document, item))
    return covered / len(items)


def check_quantitative(document: Document, catalog: RuleCatalog) -> list[Violation]:
    """Emit warnings for objectives below the action minimum and low verification coverage."""
    violations: list[Violation] = []

    minimum_rule = catalog.active("plan-objective-action-minimum", document.doc_type)
    if minimum_rule is not None:
        minimum = int(
            minimum_rule.threshold if minimum_rule.threshold is not None else DEFAULT_MIN_ACTIONS
        )
        for heading, total in objective_counts(document):
            if total < minimum:
                start = heading.line_range.start
                violations.append(
                    violation_for(
                        minimum_rule,
                        LineRange(start, start),
                        heading.content,
                        match=heading.content,
                        detail=total,
                        threshold=minimum,
                    )
                )

    coverage_rule = catalog.active("plan-verification-coverage", document.doc_type)
    if coverage_rule is not None:
        coverage = verification_coverage(document)
        threshold = (
            coverage_rule.threshold
            if coverage_rule.threshold is not None
            else DEFAULT_MIN_COVERAGE
        )
        if coverage is not None and coverage < threshold:
            first = document.checklist_items[0].line_range.start
            violations.append(
                violation_for(
                    coverage_rule,
                    LineRange(first, first),
                    document.line(first),
                    detail=f"{coverage:.0%}",
                    threshold=f"{threshold:.0%}",
                )
            )
    return violations
