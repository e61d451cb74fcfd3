"""Document domain: structural Markdown model and parser."""

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
from guidelint.document.parser import (
    infer_doc_type,
    parse_blocks,
    parse_document,
    split_cells,
)

__all__ = [
    "BLOCK_CODE",
    "BLOCK_HEADING",
    "BLOCK_LIST_ITEM",
    "BLOCK_PARAGRAPH",
    "BLOCK_TABLE",
    "Block",
    "Document",
    "LineRange",
    "ParseAnomaly",
    "infer_doc_type",
    "parse_blocks",
    "parse_document",
    "split_cells",
    "split_lines",
]
