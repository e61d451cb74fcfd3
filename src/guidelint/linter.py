"""Linter orchestrator: discover files, lint each one, format results."""

from __future__ import annotations

import json
import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from guidelint.catalog.rules import SEVERITY_FATAL, SEVERITY_WARNING
from guidelint.checks import check_filename, run_checks
from guidelint.document.model import LineRange
from guidelint.document.parser import infer_doc_type, parse_document
from guidelint.report import build_report, violation_for

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from guidelint.catalog.rules import RuleCatalog
    from guidelint.report import Report, Violation

logger = logging.getLogger(__name__)

# Directories never descended into during discovery.
_EXCLUDE_DIRS = frozenset({".git", "node_modules", "__pycache__", ".venv", "venv"})

EXIT_CLEAN = 0
EXIT_DRAFT = 1
EXIT_CONFIG_ERROR = 2


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass
class LintResult:
    """Result of linting a set of files."""

    reports: list[Report] = field(default_factory=list)
    rules_evaluated: int = 0
    catalog_version: str = ""
    elapsed_ms: float = 0.0

    @property
    def files_linted(self) -> int:
        return len(self.reports)

    @property
    def violations(self) -> list[tuple[str, Violation]]:
        return [(r.document_path, v) for r in self.reports for v in r.violations]

    @property
    def draft_count(self) -> int:
        return sum(1 for r in self.reports if not r.is_complete)

    @property
    def exit_code(self) -> int:
        return EXIT_DRAFT if self.draft_count else EXIT_CLEAN


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------


def discover_markdown(paths: Iterable[Path]) -> list[Path]:
    """Expand *paths* into a sorted, de-duplicated list of Markdown files.

    Files are kept as given whatever their extension (a missing file is
    kept too and reported as unreadable later).  Directories are searched
    recursively for ``*.md``.
    """
    found: dict[str, Path] = {}
    for path in paths:
        if path.is_dir():
            for md_path in sorted(path.rglob("*.md")):
                rel_parts = md_path.relative_to(path).parts
                if any(part in _EXCLUDE_DIRS for part in rel_parts):
                    continue
                if md_path.is_file():
                    found.setdefault(str(md_path), md_path)
        else:
            found.setdefault(str(path), path)

    files = [found[key] for key in sorted(found)]
    logger.debug("Discovered %d markdown file(s)", len(files))
    return files


# ---------------------------------------------------------------------------
# Per-file pipeline
# ---------------------------------------------------------------------------


def lint_text(
    path: str | Path,
    text: str,
    catalog: RuleCatalog,
    *,
    doc_type: str | None = None,
) -> Report:
    """Parse *text* as the content of *path* and evaluate every rule."""
    document = parse_document(path, text, doc_type=doc_type, naming=catalog.naming)
    return build_report(document.path, document.doc_type, run_checks(document, catalog))


def lint_file(path: Path, catalog: RuleCatalog, *, doc_type: str | None = None) -> Report:
    """Lint one file.  Read failures become an ``io-unreadable`` violation."""
    start = time.monotonic()
    try:
        text = path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        resolved_type = doc_type or infer_doc_type(path, catalog.naming)
        logger.debug("Cannot read %s: %s", path, exc)
        violations: list[Violation] = []
        rule = catalog.active("io-unreadable", resolved_type)
        if rule is not None:
            detail = exc.strerror if isinstance(exc, OSError) and exc.strerror else str(exc)
            violations.append(violation_for(rule, LineRange(1, 1), str(path), detail=detail))
        violations.extend(check_filename(path, catalog, resolved_type))
        return build_report(str(path), resolved_type, violations)

    report = lint_text(path, text, catalog, doc_type=doc_type)
    logger.debug(
        "Linted %s in %.1fms (%d violation(s))",
        path,
        (time.monotonic() - start) * 1000,
        len(report.violations),
    )
    return report


def lint_paths(
    paths: Iterable[Path],
    catalog: RuleCatalog,
    *,
    doc_type: str | None = None,
    jobs: int | None = None,
) -> LintResult:
    """Discover and lint every Markdown file under *paths*.

    Parameters
    ----------
    paths:
        Files and/or directories.
    catalog:
        The rule catalog for this run.
    doc_type:
        Force a document type for every file instead of inferring it.
    jobs:
        Worker threads.  ``None`` picks a default from the CPU count;
        ``1`` lints sequentially.

    Returns
    -------
    LintResult
        One report per file, in discovery order.
    """
    start = time.monotonic()
    files = discover_markdown(paths)

    workers = jobs if jobs is not None else min(len(files), os.cpu_count() or 4)
    if workers > 1 and len(files) > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            reports = list(
                executor.map(lambda p: lint_file(p, catalog, doc_type=doc_type), files)
            )
    else:
        reports = [lint_file(p, catalog, doc_type=doc_type) for p in files]

    return LintResult(
        reports=reports,
        rules_evaluated=len(catalog.enabled_rules()),
        catalog_version=catalog.version,
        elapsed_ms=(time.monotonic() - start) * 1000,
    )


# ---------------------------------------------------------------------------
# Formatters
# ---------------------------------------------------------------------------


def format_text(result: LintResult) -> str:
    """Format a LintResult as one line per violation.

    Format: ``path:line: [SEVERITY] rule_id — message``.
    Returns an empty string when there are no violations.
    """
    lines: list[str] = []
    for path, v in result.violations:
        lines.append(f"{path}:{v.line}: [{v.severity.upper()}] {v.rule_id} — {v.message}")
    return "\n".join(lines)


def violation_record(path: str, violation: Violation) -> dict[str, object]:
    return {
        "path": path,
        "line": violation.line_range.start,
        "end_line": violation.line_range.end,
        "severity": violation.severity,
        "rule_id": violation.rule_id,
        "category": violation.category,
        "message": violation.message,
        "excerpt": violation.excerpt,
    }


def format_json(result: LintResult) -> str:
    """Format a LintResult as structured JSON.

    Returns a JSON string with a ``violations`` array (one record per
    violation), a ``files`` array with per-file verdicts, and a ``summary``
    object.  Timing is left out so output is reproducible.
    """
    output: dict[str, object] = {
        "violations": [violation_record(path, v) for path, v in result.violations],
        "files": [
            {
                "path": r.document_path,
                "doc_type": r.doc_type,
                "verdict": r.verdict,
                "fatal": r.fatal_count,
                "warnings": r.warning_count,
                "counts": dict(r.counts),
            }
            for r in result.reports
        ],
        "summary": {
            "catalog_version": result.catalog_version,
            "rules_evaluated": result.rules_evaluated,
            "files_linted": result.files_linted,
            "drafts": result.draft_count,
            "violations_count": len(result.violations),
        },
    }
    return json.dumps(output, indent=2)


_SEVERITY_STYLES: dict[str, tuple[str, str]] = {
    SEVERITY_FATAL: ("✗", "bold red"),
    SEVERITY_WARNING: ("!", "yellow"),
}


def format_rich(result: LintResult, *, width: int = 100, color: bool = True) -> str:
    """Render a LintResult for a terminal using Rich.

    ANSI styling is emitted only when *color* is set.

    Example output::

        docs/api_documentation.md  DRAFT
          3  ✗ forbidden-phrase-tier1-todo  Incomplete Marker 'TODO' found; ...
        plans/rollout_plan.md  COMPLETE

        1 of 2 file(s) draft, 1 violation(s) (84 rules, catalog 2.3.0, 0.1s)
    """
    from io import StringIO

    from rich.console import Console
    from rich.table import Table
    from rich.text import Text

    buf = StringIO()
    console = Console(
        file=buf, force_terminal=color, no_color=not color, highlight=False, width=width
    )

    for report in result.reports:
        header = Text()
        header.append(report.document_path, style="bold")
        header.append("  ")
        if report.is_complete:
            header.append("COMPLETE", style="bold green")
        else:
            header.append("DRAFT", style="bold red")
        console.print(header)

        if report.violations:
            table = Table(show_header=False, box=None, padding=(0, 1))
            table.add_column("line", justify="right", style="dim")
            table.add_column("severity")
            table.add_column("rule", style="cyan")
            table.add_column("message")
            for v in report.violations:
                indicator, style = _SEVERITY_STYLES.get(v.severity, ("?", "white"))
                table.add_row(str(v.line), Text(indicator, style=style), v.rule_id, v.message)
            console.print(table)

    elapsed_s = result.elapsed_ms / 1000
    summary = (
        f"{result.draft_count} of {result.files_linted} file(s) draft, "
        f"{len(result.violations)} violation(s) "
        f"({result.rules_evaluated} rules, catalog {result.catalog_version}, {elapsed_s:.1f}s)"
    )
    console.print()
    console.print(summary, style="bold red" if result.draft_count else "bold green")
    return buf.getvalue().rstrip("\n")
