"""Naming evaluator: filename prefix/suffix convention per root folder."""

from __future__ import annotations

import re
from pathlib import PurePath
from typing import TYPE_CHECKING

from guidelint.document.model import LineRange
from guidelint.report import violation_for

if TYPE_CHECKING:
    from guidelint.catalog.rules import NamingPolicy, RuleCatalog
    from guidelint.document.model import Document
    from guidelint.report import Violation

_STEM_RE = re.compile(r"^[a-z0-9_]+$")


def allowed_suffixes(path: str | PurePath, naming: NamingPolicy) -> tuple[str, ...]:
    """Suffixes registered for the nearest documentation or plan root above *path*.

    Files outside any known root may use any registered suffix.
    """
    for part in reversed(PurePath(path).parent.parts):
        if part in naming.plan_roots:
            return naming.plan_suffixes
        if part in naming.documentation_roots:
            return naming.documentation_suffixes
    return naming.all_suffixes


def naming_problems(path: str | PurePath, naming: NamingPolicy) -> list[str]:
    """Return human-readable problems with the filename of *path* (empty if valid)."""
    stem = PurePath(path).stem
    problems: list[str] = []
    if not _STEM_RE.match(stem):
        problems.append("name must be lowercase snake_case (a-z, 0-9, _)")
    suffixes = allowed_suffixes(path, naming)
    if not stem.endswith(suffixes):
        problems.append(f"name must end with one of {', '.join(suffixes)}")
    return problems


def check_filename(
    path: str | PurePath, catalog: RuleCatalog, doc_type: str
) -> list[Violation]:
    """Validate the filename of *path*; independent of file content.

    All problems are folded into a single ``filename-convention`` violation.
    """
    rule = catalog.active("filename-convention", doc_type)
    if rule is None:
        return []
    problems = naming_problems(path, catalog.naming)
    if not problems:
        return []
    name = PurePath(path).name
    return [violation_for(rule, LineRange(1, 1), name, match=name, detail="; ".join(problems))]


def check_naming(document: Document, catalog: RuleCatalog) -> list[Violation]:
    return check_filename(document.path, catalog, document.doc_type)
