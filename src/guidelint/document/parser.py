"""Markdown parser: raw text -> Document with line-partitioned blocks.

The parser is deliberately forgiving.  Anything it cannot classify becomes
a paragraph, and questionable input is recorded as a :class:`ParseAnomaly`
instead of raising.
"""

from __future__ import annotations

import re
from dataclasses import replace
from pathlib import PurePath

from guidelint.catalog.rules import (
    DOC_TYPE_DOCUMENTATION,
    DOC_TYPE_GUIDELINE,
    DOC_TYPE_PLAN,
    NamingPolicy,
)
from guidelint.document.model import (
    BLOCK_CODE,
    BLOCK_HEADING,
    BLOCK_LIST_ITEM,
    BLOCK_PARAGRAPH,
    BLOCK_TABLE,
    Block,
    Document,
    LineRange,
    ParseAnomaly,
    split_lines,
)

_HEADING_RE = re.compile(r"^(#{1,6})[ \t]+(\S.*)$")
_HEADING_CLOSE_RE = re.compile(r"\s+#+\s*$")
_HASH_NO_SPACE_RE = re.compile(r"^#{1,6}[^#\s]")
_FENCE_OPEN_RE = re.compile(r"^\s{0,3}(`{3,})(.*)$")
_FENCE_CLOSE_RE = re.compile(r"^\s{0,3}(`{3,})\s*$")
_SEPARATOR_RE = re.compile(r"^[\s|:-]+$")
_LIST_RE = re.compile(r"^\s*(?:[-*+]|\d+[.)])(?:\s+|$)")
_CHECKLIST_RE = re.compile(r"^\s*(?:[-*+]|\d+[.)])\s+\[([ xX])\]")
_CELL_SPLIT_RE = re.compile(r"(?<!\\)\|")

# Filename stem suffix -> document type.
_SUFFIX_DOC_TYPES: tuple[tuple[str, str], ...] = (
    ("_documentation", DOC_TYPE_DOCUMENTATION),
    ("_plan", DOC_TYPE_PLAN),
    ("_guidelines", DOC_TYPE_GUIDELINE),
    ("_skill", DOC_TYPE_GUIDELINE),
)


# ---------------------------------------------------------------------------
# Line classification helpers
# ---------------------------------------------------------------------------


def _has_pipe(line: str) -> bool:
    return _CELL_SPLIT_RE.search(line) is not None


def _is_separator(line: str) -> bool:
    return bool(_SEPARATOR_RE.match(line)) and "-" in line and "|" in line


def _is_table_start(lines: list[str], idx: int) -> bool:
    return (
        idx + 1 < len(lines)
        and _has_pipe(lines[idx])
        and _is_separator(lines[idx + 1])
    )


def _is_table_row(line: str) -> bool:
    return bool(line.strip()) and _has_pipe(line) and not _FENCE_OPEN_RE.match(line)


def _starts_block(lines: list[str], idx: int) -> bool:
    line = lines[idx]
    return bool(
        _FENCE_OPEN_RE.match(line)
        or _HEADING_RE.match(line)
        or _LIST_RE.match(line)
        or _is_table_start(lines, idx)
    )


def split_cells(line: str) -> tuple[str, ...]:
    """Split a table row into stripped cell strings; ``\\|`` is not a delimiter."""
    row = line.strip()
    if row.startswith("|"):
        row = row[1:]
    if row.endswith("|") and not row.endswith("\\|"):
        row = row[:-1]
    return tuple(cell.strip().replace("\\|", "|") for cell in _CELL_SPLIT_RE.split(row))


# ---------------------------------------------------------------------------
# Block scanners (each returns the index just past the block)
# ---------------------------------------------------------------------------


def _scan_code(
    lines: list[str],
    idx: int,
    match: re.Match[str],
    blocks: list[Block],
    anomalies: list[ParseAnomaly],
) -> int:
    fence_len = len(match.group(1))
    language_tag = match.group(2).strip()

    end = idx + 1
    while end < len(lines):
        close = _FENCE_CLOSE_RE.match(lines[end])
        if close is not None and len(close.group(1)) >= fence_len:
            break
        end += 1

    if end >= len(lines):
        # Unterminated fence: swallow the rest of the file.
        anomalies.append(
            ParseAnomaly(
                line_range=LineRange(idx + 1, len(lines)),
                detail=f"code fence opened at line {idx + 1} is never closed",
            )
        )
        body = lines[idx + 1 :]
        last = len(lines) - 1
    else:
        body = lines[idx + 1 : end]
        last = end

    blocks.append(
        Block(
            kind=BLOCK_CODE,
            line_range=LineRange(idx + 1, last + 1),
            content="\n".join(body),
            language_tag=language_tag,
        )
    )
    return last + 1


def _scan_table(lines: list[str], idx: int, blocks: list[Block]) -> int:
    header = split_cells(lines[idx])
    rows: list[tuple[str, ...]] = []
    end = idx + 2
    while end < len(lines) and _is_table_row(lines[end]):
        rows.append(split_cells(lines[end]))
        end += 1

    blocks.append(
        Block(
            kind=BLOCK_TABLE,
            line_range=LineRange(idx + 1, end),
            content="\n".join(lines[idx:end]),
            header_cells=header,
            rows=tuple(rows),
        )
    )
    return end


def _scan_list_item(lines: list[str], idx: int, blocks: list[Block]) -> int:
    checklist = _CHECKLIST_RE.match(lines[idx])
    checked = None if checklist is None else checklist.group(1) in "xX"

    # Indented, non-marker lines continue the item.
    end = idx + 1
    while (
        end < len(lines)
        and lines[end].strip()
        and lines[end][0] in " \t"
        and not _LIST_RE.match(lines[end])
        and not _FENCE_OPEN_RE.match(lines[end])
    ):
        end += 1

    blocks.append(
        Block(
            kind=BLOCK_LIST_ITEM,
            line_range=LineRange(idx + 1, end),
            content="\n".join(lines[idx:end]),
            checked=checked,
        )
    )
    return end


def _scan_paragraph(
    lines: list[str], idx: int, blocks: list[Block], anomalies: list[ParseAnomaly]
) -> int:
    end = idx + 1
    while end < len(lines) and lines[end].strip() and not _starts_block(lines, end):
        end += 1

    for offset, line in enumerate(lines[idx:end]):
        if _HASH_NO_SPACE_RE.match(line):
            line_no = idx + offset + 1
            anomalies.append(
                ParseAnomaly(
                    line_range=LineRange(line_no, line_no),
                    detail="line starts with '#' but has no space; treated as text",
                )
            )

    blocks.append(
        Block(
            kind=BLOCK_PARAGRAPH,
            line_range=LineRange(idx + 1, end),
            content="\n".join(lines[idx:end]),
        )
    )
    return end


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_blocks(text: str) -> tuple[tuple[Block, ...], tuple[ParseAnomaly, ...]]:
    """Split *text* into blocks that partition its lines.

    Blank lines are attached to the preceding block; blank lines at the
    very top of the file form an empty paragraph.
    """
    lines = split_lines(text)
    blocks: list[Block] = []
    anomalies: list[ParseAnomaly] = []

    idx = 0
    while idx < len(lines):
        line = lines[idx]

        if not line.strip():
            end = idx
            while end < len(lines) and not lines[end].strip():
                end += 1
            if blocks:
                last = blocks[-1]
                blocks[-1] = replace(last, line_range=LineRange(last.line_range.start, end))
            else:
                blocks.append(Block(kind=BLOCK_PARAGRAPH, line_range=LineRange(1, end), content=""))
            idx = end
            continue

        fence = _FENCE_OPEN_RE.match(line)
        if fence is not None:
            idx = _scan_code(lines, idx, fence, blocks, anomalies)
            continue

        heading = _HEADING_RE.match(line)
        if heading is not None:
            title = _HEADING_CLOSE_RE.sub("", heading.group(2)).strip()
            blocks.append(
                Block(
                    kind=BLOCK_HEADING,
                    line_range=LineRange(idx + 1, idx + 1),
                    content=title,
                    level=len(heading.group(1)),
                )
            )
            idx += 1
            continue

        if _is_table_start(lines, idx):
            idx = _scan_table(lines, idx, blocks)
            continue

        if _LIST_RE.match(line):
            idx = _scan_list_item(lines, idx, blocks)
            continue

        idx = _scan_paragraph(lines, idx, blocks, anomalies)

    return tuple(blocks), tuple(anomalies)


def infer_doc_type(path: str | PurePath, naming: NamingPolicy | None = None) -> str:
    """Infer the document type from the filename suffix, then from its nearest root folder."""
    pure = PurePath(path)
    stem = pure.stem.lower()
    for suffix, doc_type in _SUFFIX_DOC_TYPES:
        if stem.endswith(suffix):
            return doc_type

    policy = naming or NamingPolicy()
    for part in reversed(pure.parent.parts):
        if part in policy.plan_roots:
            return DOC_TYPE_PLAN
        if part in policy.documentation_roots:
            return DOC_TYPE_DOCUMENTATION
    return DOC_TYPE_DOCUMENTATION


def parse_document(
    path: str | PurePath,
    text: str,
    *,
    doc_type: str | None = None,
    naming: NamingPolicy | None = None,
) -> Document:
    """Parse *text* into a Document.  Never raises on malformed Markdown."""
    blocks, anomalies = parse_blocks(text)
    return Document(
        path=str(path),
        doc_type=doc_type or infer_doc_type(path, naming),
        blocks=blocks,
        raw_text=text,
        anomalies=anomalies,
    )
