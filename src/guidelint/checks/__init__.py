"""Rule evaluators: forbidden phrases, structure, naming, quantitative minimums.

Every evaluator takes an immutable :class:`~guidelint.document.model.Document`
and a :class:`~guidelint.catalog.rules.RuleCatalog` and returns a list of
violations without side effects, so evaluators can run in any order.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from guidelint.checks.forbidden import check_forbidden_phrases, is_truncated_identifier
from guidelint.checks.naming import check_filename, check_naming, naming_problems
from guidelint.checks.quantitative import (
    check_quantitative,
    objective_counts,
    verification_coverage,
)
from guidelint.checks.structure import check_anomalies, check_structure, phase_number

if TYPE_CHECKING:
    from collections.abc import Callable

    from guidelint.catalog.rules import RuleCatalog
    from guidelint.document.model import Document
    from guidelint.report import Violation

    Evaluator = Callable[[Document, RuleCatalog], list[Violation]]

EVALUATORS: tuple[Evaluator, ...] = (
    check_anomalies,
    check_forbidden_phrases,
    check_structure,
    check_naming,
    check_quantitative,
)


def run_checks(document: Document, catalog: RuleCatalog) -> list[Violation]:
    """Run every evaluator over *document* and concatenate their findings."""
    violations: list[Violation] = []
    for evaluator in EVALUATORS:
        violations.extend(evaluator(document, catalog))
    return violations


__all__ = [
    "EVALUATORS",
    "check_anomalies",
    "check_filename",
    "check_forbidden_phrases",
    "check_naming",
    "check_quantitative",
    "check_structure",
    "is_truncated_identifier",
    "naming_problems",
    "objective_counts",
    "phase_number",
    "run_checks",
    "verification_coverage",
]
