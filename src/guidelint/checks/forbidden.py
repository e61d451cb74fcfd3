"""Forbidden-phrase evaluator: scan raw text for tiered phrase rules."""

from __future__ import annotations

import logging
import re
from bisect import bisect_right
from typing import TYPE_CHECKING

from guidelint.catalog.rules import CATEGORY_FORBIDDEN_PHRASE, REFINEMENT_TRUNCATED_IDENTIFIER
from guidelint.document.model import LineRange
from guidelint.report import violation_for

if TYPE_CHECKING:
    from collections.abc import Callable

    from guidelint.catalog.rules import RuleCatalog
    from guidelint.document.model import Document
    from guidelint.report import Violation

logger = logging.getLogger(__name__)

# Shortest alphanumeric run that makes an adjacent ellipsis a truncation.
MIN_TRUNCATED_RUN = 6

_PATH_SEPARATORS = frozenset("/\\")
_ALNUM_TAIL_RE = re.compile(r"[A-Za-z0-9]+$")
_ALNUM_HEAD_RE = re.compile(r"^[A-Za-z0-9]+")
_CONTEXT_WINDOW = 64
_NEWLINE_RE = re.compile("\n")


def is_truncated_identifier(text: str, start: int, end: int) -> bool:
    """Return True if the ellipsis at ``text[start:end]`` shortens a value.

    The match counts as a truncation when it touches, with no whitespace in
    between, either a path separator or an alphanumeric run of at least
    :data:`MIN_TRUNCATED_RUN` characters (``gpkey_abc123def456...``,
    ``src/.../main.py``).
    """
    before = text[max(0, start - _CONTEXT_WINDOW) : start]
    after = text[end : end + _CONTEXT_WINDOW]

    if (before and before[-1] in _PATH_SEPARATORS) or (after and after[0] in _PATH_SEPARATORS):
        return True

    tail = _ALNUM_TAIL_RE.search(before)
    if tail is not None and len(tail.group(0)) >= MIN_TRUNCATED_RUN:
        return True
    head = _ALNUM_HEAD_RE.search(after)
    return head is not None and len(head.group(0)) >= MIN_TRUNCATED_RUN


REFINEMENTS: dict[str, Callable[[str, int, int], bool]] = {
    REFINEMENT_TRUNCATED_IDENTIFIER: is_truncated_identifier,
}


def _line_starts(text: str) -> list[int]:
    """Offsets at which each line of *text* begins, consistent with split_lines()."""
    starts = [0]
    starts.extend(match.end() for match in _NEWLINE_RE.finditer(text))
    if starts[-1] == len(text):
        starts.pop()
    return starts


def check_forbidden_phrases(document: Document, catalog: RuleCatalog) -> list[Violation]:
    """Report every unsuppressed forbidden-phrase match in *document*.

    Rules flagged ``code_exempt`` ignore matches that start inside a fenced
    code block.  Matches of different rules at the same place are all kept.
    """
    text = document.raw_text
    if not text:
        return []

    starts = _line_starts(text)
    code_lines: set[int] = set()
    for block in document.code_blocks:
        code_lines.update(range(block.line_range.start, block.line_range.end + 1))

    violations: list[Violation] = []
    for rule in catalog.by_category(CATEGORY_FORBIDDEN_PHRASE):
        if not rule.applies_to(document.doc_type) or rule.pattern is None:
            continue
        refine = REFINEMENTS.get(rule.refinement) if rule.refinement else None

        for match in rule.pattern.finditer(text):
            if match.end() == match.start():
                continue
            first = bisect_right(starts, match.start())
            if rule.code_exempt and first in code_lines:
                continue
            if refine is not None and refine(text, match.start(), match.end()):
                logger.debug(
                    "%s:%d: %s suppressed by %s", document.path, first, rule.id, rule.refinement
                )
                continue
            last = bisect_right(starts, match.end() - 1)
            violations.append(
                violation_for(
                    rule,
                    LineRange(first, last),
                    document.line(first),
                    match=" ".join(match.group(0).split()),
                )
            )
    return violations
