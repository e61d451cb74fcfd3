"""Structural evaluator: required sections, heading nesting, plan phases, tables, code blocks."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from guidelint.catalog.rules import DOC_TYPE_PLAN
from guidelint.document.model import BLOCK_HEADING, LineRange
from guidelint.report import violation_for

if TYPE_CHECKING:
    from guidelint.catalog.rules import RuleCatalog
    from guidelint.document.model import Block, Document
    from guidelint.report import Violation

# Trailing markers must appear within this many non-blank lines of the end.
FOOTER_WINDOW = 10

REQUIRED_PHASES: tuple[int, ...] = tuple(range(1, 10))

_STATUS_RE = re.compile(r"(?<![A-Za-z])Status[*_]*\s*:", re.IGNORECASE)
_LAST_UPDATED_RE = re.compile(r"(?<![A-Za-z])Last[ \t]+Updated[*_]*\s*:", re.IGNORECASE)

_ROMAN: dict[str, int] = {
    "0": 0, "i": 1, "ii": 2, "iii": 3, "iv": 4, "v": 5,
    "vi": 6, "vii": 7, "viii": 8, "ix": 9,
}
_WORDS: dict[str, int] = {
    "zero": 0, "one": 1, "two": 2, "three": 3, "four": 4, "five": 5,
    "six": 6, "seven": 7, "eight": 8, "nine": 9,
}
_PHASE_RE = re.compile(
    r"\bphase\s+(\d+|[ivx]+|zero|one|two|three|four|five|six|seven|eight|nine)\b",
    re.IGNORECASE,
)
_PHASE_STATUS_RE = re.compile(
    r"\b(?:done|complete[d]?|in[ -]progress|not applicable|n/a|pending|blocked)\b"
    r"|✅|✔|\U0001f6a7|⏳|\[[ xX]\]",
    re.IGNORECASE,
)
_NOT_APPLICABLE_RE = re.compile(r"not\s+applicable|\bn/a\b", re.IGNORECASE)
_WORD_RE = re.compile(r"[A-Za-z0-9]{2,}")


def roman(number: int) -> str:
    for key, value in _ROMAN.items():
        if value == number:
            return key.upper()
    return str(number)


def phase_number(heading: str) -> int | None:
    """Return the phase number named in *heading*, or None."""
    match = _PHASE_RE.search(heading)
    if match is None:
        return None
    token = match.group(1).lower()
    if token.isdigit():
        return int(token)
    if token in _WORDS:
        return _WORDS[token]
    return _ROMAN.get(token)


def section_end(document: Document, index: int) -> int:
    """Index of the first block after the section opened by heading ``blocks[index]``."""
    level = document.blocks[index].level or 1
    for pos in range(index + 1, len(document.blocks)):
        block = document.blocks[pos]
        if block.kind == BLOCK_HEADING and (block.level or 1) <= level:
            return pos
    return len(document.blocks)


# ---------------------------------------------------------------------------
# Individual checks
# ---------------------------------------------------------------------------


def _check_title(document: Document, catalog: RuleCatalog) -> list[Violation]:
    rule = catalog.active("doc-title-missing", document.doc_type)
    if rule is None or any(h.level == 1 for h in document.headings):
        return []
    return [violation_for(rule, LineRange(1, 1), document.line(1))]


def _check_footer(document: Document, catalog: RuleCatalog) -> list[Violation]:
    tail = [
        (num, line)
        for num, line in enumerate(document.lines, 1)
        if line.strip()
    ][-FOOTER_WINDOW:]
    anchor = LineRange(max(document.line_count, 1), max(document.line_count, 1))

    violations: list[Violation] = []
    for rule_id, pattern in (
        ("doc-status-missing", _STATUS_RE),
        ("doc-last-updated-missing", _LAST_UPDATED_RE),
    ):
        rule = catalog.active(rule_id, document.doc_type)
        if rule is None:
            continue
        if not any(pattern.search(line) for _, line in tail):
            violations.append(violation_for(rule, anchor, document.line(anchor.start)))
    return violations


def _check_heading_levels(document: Document, catalog: RuleCatalog) -> list[Violation]:
    rule = catalog.active("heading-level-skipped", document.doc_type)
    if rule is None:
        return []

    violations: list[Violation] = []
    previous: int | None = None
    for heading in document.headings:
        level = heading.level or 1
        if previous is not None and level > previous + 1:
            start = heading.line_range.start
            violations.append(
                violation_for(
                    rule,
                    LineRange(start, start),
                    document.line(start),
                    match=heading.content,
                    previous=previous,
                    level=level,
                )
            )
        previous = level
    return violations


def _section_text(document: Document, index: int) -> str:
    end = section_end(document, index)
    return "\n".join(b.content for b in document.blocks[index + 1 : end])


def _check_plan_phases(document: Document, catalog: RuleCatalog) -> list[Violation]:
    if document.doc_type != DOC_TYPE_PLAN:
        return []
    missing_rule = catalog.active("plan-phase-missing", document.doc_type)
    unmarked_rule = catalog.active("plan-phase-status-unmarked", document.doc_type)
    rationale_rule = catalog.active("plan-phase-na-without-rationale", document.doc_type)

    found: dict[int, int] = {}  # phase number -> block index of first heading
    for index, block in enumerate(document.blocks):
        if block.kind != BLOCK_HEADING:
            continue
        number = phase_number(block.content)
        if number is not None and number not in found:
            found[number] = index

    violations: list[Violation] = []
    if missing_rule is not None:
        anchor = LineRange(max(document.line_count, 1), max(document.line_count, 1))
        for number in REQUIRED_PHASES:
            if number not in found:
                violations.append(
                    violation_for(
                        missing_rule, anchor, document.line(anchor.start),
                        match=f"Phase {roman(number)}",
                    )
                )

    for number, index in sorted(found.items()):
        heading = document.blocks[index]
        start = heading.line_range.start
        body = _section_text(document, index)
        text = f"{heading.content}\n{body}"

        if unmarked_rule is not None and not _PHASE_STATUS_RE.search(text):
            violations.append(
                violation_for(
                    unmarked_rule, LineRange(start, start), heading.content,
                    match=heading.content,
                )
            )

        if rationale_rule is not None and _NOT_APPLICABLE_RE.search(text):
            remainder = _NOT_APPLICABLE_RE.sub(" ", body)
            words = [w for w in _WORD_RE.findall(remainder) if w.lower() != "status"]
            if len(words) < 3:
                violations.append(
                    violation_for(
                        rationale_rule, LineRange(start, start), heading.content,
                        match=heading.content,
                    )
                )
    return violations


def _row_line(table: Block, row_index: int) -> LineRange:
    # Header and separator occupy the first two lines of the block.
    line = table.line_range.start + 2 + row_index
    return LineRange(line, line)


def _empty_columns(cells: tuple[str, ...]) -> list[int]:
    return [pos for pos, cell in enumerate(cells, 1) if not cell.strip()]


def _check_tables(document: Document, catalog: RuleCatalog) -> list[Violation]:
    doc_type = document.doc_type
    header_only = catalog.active("table-header-only", doc_type)
    empty_cell = catalog.active("table-empty-cell", doc_type)
    mismatch = catalog.active("table-column-mismatch", doc_type)

    violations: list[Violation] = []
    for table in document.tables:
        start = table.line_range.start
        if header_only is not None and not table.rows:
            violations.append(
                violation_for(header_only, LineRange(start, start), document.line(start))
            )

        if empty_cell is not None:
            empty = _empty_columns(table.header_cells)
            if empty:
                violations.append(
                    violation_for(
                        empty_cell, LineRange(start, start), document.line(start),
                        detail=", ".join(map(str, empty)),
                    )
                )

        for row_index, row in enumerate(table.rows):
            where = _row_line(table, row_index)
            if mismatch is not None and len(row) != len(table.header_cells):
                violations.append(
                    violation_for(
                        mismatch, where, document.line(where.start),
                        detail=len(row), expected=len(table.header_cells),
                    )
                )
            if empty_cell is not None:
                empty = _empty_columns(row)
                if empty:
                    violations.append(
                        violation_for(
                            empty_cell, where, document.line(where.start),
                            detail=", ".join(map(str, empty)),
                        )
                    )
    return violations


def _check_code_blocks(document: Document, catalog: RuleCatalog) -> list[Violation]:
    rule = catalog.active("code-block-language-missing", document.doc_type)
    if rule is None:
        return []
    violations: list[Violation] = []
    for block in document.code_blocks:
        if not block.language_tag:
            start = block.line_range.start
            violations.append(violation_for(rule, LineRange(start, start), document.line(start)))
    return violations


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def check_anomalies(document: Document, catalog: RuleCatalog) -> list[Violation]:
    """Turn parser anomalies into ``parse-anomaly`` warnings."""
    rule = catalog.active("parse-anomaly", document.doc_type)
    if rule is None:
        return []
    return [
        violation_for(
            rule,
            anomaly.line_range,
            document.line(anomaly.line_range.start),
            detail=anomaly.detail,
        )
        for anomaly in document.anomalies
    ]


def check_structure(document: Document, catalog: RuleCatalog) -> list[Violation]:
    """Run every structural and required-section check for *document*."""
    return (
        _check_title(document, catalog)
        + _check_footer(document, catalog)
        + _check_heading_levels(document, catalog)
        + _check_plan_phases(document, catalog)
        + _check_tables(document, catalog)
        + _check_code_blocks(document, catalog)
    )
