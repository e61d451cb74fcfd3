"""Structural document model: LineRange, Block, ParseAnomaly, Document."""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

BLOCK_HEADING = "heading"
BLOCK_PARAGRAPH = "paragraph"
BLOCK_TABLE = "table"
BLOCK_CODE = "code"
BLOCK_LIST_ITEM = "list_item"
VALID_BLOCK_KINDS: frozenset[str] = frozenset(
    {BLOCK_HEADING, BLOCK_PARAGRAPH, BLOCK_TABLE, BLOCK_CODE, BLOCK_LIST_ITEM}
)


def split_lines(text: str) -> list[str]:
    """Split *text* into lines on ``\\n`` only.

    Unlike :meth:`str.splitlines`, form feeds, NEL and the Unicode line
    separators stay inside their line, so line numbers match editors.
    A ``\\r`` before the newline is dropped.
    """
    lines = [line.removesuffix("\r") for line in text.split("\n")]
    if lines[-1] == "":
        lines.pop()
    return lines


@dataclass(frozen=True, order=True)
class LineRange:
    """Inclusive, 1-based range of source lines."""

    start: int
    end: int

    def __contains__(self, line: object) -> bool:
        return isinstance(line, int) and self.start <= line <= self.end

    def __len__(self) -> int:
        return self.end - self.start + 1

    def __str__(self) -> str:
        if self.start == self.end:
            return str(self.start)
        return f"{self.start}-{self.end}"


@dataclass(frozen=True)
class Block:
    """A structural unit of a Markdown document.

    Only the fields relevant to ``kind`` are populated: ``level`` for
    headings, ``language_tag`` for code blocks, ``header_cells``/``rows``
    for tables, ``checked`` for checklist items.
    """

    kind: str
    line_range: LineRange
    content: str
    level: int | None = None
    language_tag: str | None = None
    header_cells: tuple[str, ...] = ()
    rows: tuple[tuple[str, ...], ...] = ()
    checked: bool | None = None

    @property
    def is_checklist_item(self) -> bool:
        return self.kind == BLOCK_LIST_ITEM and self.checked is not None


@dataclass(frozen=True)
class ParseAnomaly:
    """Input the parser could only classify conservatively."""

    line_range: LineRange
    detail: str


@dataclass(frozen=True)
class Document:
    """A parsed Markdown file; immutable once built."""

    path: str
    doc_type: str
    blocks: tuple[Block, ...]
    raw_text: str
    anomalies: tuple[ParseAnomaly, ...] = ()

    @cached_property
    def lines(self) -> tuple[str, ...]:
        return tuple(split_lines(self.raw_text))

    @property
    def line_count(self) -> int:
        return len(self.lines)

    def line(self, number: int) -> str:
        """Return source line *number* (1-based), or '' when out of range."""
        if 1 <= number <= len(self.lines):
            return self.lines[number - 1]
        return ""

    def iter_kind(self, kind: str) -> Iterator[Block]:
        return (b for b in self.blocks if b.kind == kind)

    @property
    def headings(self) -> tuple[Block, ...]:
        return tuple(self.iter_kind(BLOCK_HEADING))

    @property
    def tables(self) -> tuple[Block, ...]:
        return tuple(self.iter_kind(BLOCK_TABLE))

    @property
    def code_blocks(self) -> tuple[Block, ...]:
        return tuple(self.iter_kind(BLOCK_CODE))

    @property
    def checklist_items(self) -> tuple[Block, ...]:
        return tuple(b for b in self.blocks if b.is_checklist_item)

    def in_code_block(self, line: int) -> bool:
        """Return True if *line* lies inside a fenced code block, fences included."""
        return any(line in b.line_range for b in self.code_blocks)
