"""Shared test fixtures for guidelint."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from guidelint.catalog import default_catalog

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from guidelint.catalog import RuleCatalog


CLEAN_PLAN = (
    "# Exporter Rollout Plan\n"
    "\n"
    "## Phase I: Requirements\n"
    "\n"
    "Status: Done\n"
    "\n"
    "| Requirement | Owner |\n"
    "|-------------|-------|\n"
    "| Export CSV reports | Data team |\n"
    "| Retain logs for 30 days | Platform team |\n"
    "\n"
    "## Phase II: Architecture\n"
    "\n"
    "Status: Done\n"
    "\n"
    "```python\n"
    "def total(values: list[int]) -> int:\n"
    "    return sum(values)\n"
    "```\n"
    "\n"
    "## Phase III: Data Model\n"
    "\n"
    "Status: In Progress\n"
    "\n"
    "## Phase IV: Implementation\n"
    "\n"
    "Status: In Progress\n"
    "\n"
    "### Objective: Build the exporter\n"
    "\n"
    "- [x] Create `src/exporter/csv_writer.py` with the `write_rows` function\n"
    "  **Verification**: `python -m pytest tests/test_csv_writer.py`\n"
    "- [x] Add the `--format csv` option to `src/exporter/cli.py`\n"
    "  **Verification**: `python -m exporter --help`\n"
    "- [ ] Register the exporter in `src/exporter/__init__.py`\n"
    "  **Verification**: `python -c 'import exporter'`\n"
    "- [ ] Describe the option in `docs/exporter_documentation.md`\n"
    "  **Verification**: `grep -n 'format csv' docs/exporter_documentation.md`\n"
    "- [ ] Tag release `v1.4.0` in git\n"
    "  **Verification**: `git tag --list v1.4.0`\n"
    "\n"
    "## Phase V: Testing\n"
    "\n"
    "Status: Pending\n"
    "\n"
    "## Phase VI: Security\n"
    "\n"
    "Status: Not Applicable. The exporter runs offline and reads no credentials.\n"
    "\n"
    "## Phase VII: Observability\n"
    "\n"
    "Status: Pending\n"
    "\n"
    "## Phase VIII: Deployment\n"
    "\n"
    "Status: Pending\n"
    "\n"
    "## Phase IX: Documentation\n"
    "\n"
    "Status: Pending\n"
)

CLEAN_DOCUMENTATION = (
    "# Exporter Architecture\n"
    "\n"
    "## Overview\n"
    "\n"
    "The exporter converts report rows into CSV files.\n"
    "\n"
    "## Components\n"
    "\n"
    "| Component | Responsibility |\n"
    "|-----------|----------------|\n"
    "| `csv_writer` | Serialises rows |\n"
    "| `cli` | Parses arguments |\n"
    "\n"
    "```bash\n"
    "python -m exporter --format csv\n"
    "```\n"
    "\n"
    "**Status:** Complete\n"
    "**Last Updated:** 2026-10-01\n"
)


@pytest.fixture()
def catalog() -> RuleCatalog:
    """The built-in rule catalog."""
    return default_catalog()


@pytest.fixture()
def clean_plan_text() -> str:
    return CLEAN_PLAN


@pytest.fixture()
def clean_documentation_text() -> str:
    return CLEAN_DOCUMENTATION


@pytest.fixture()
def write_md(tmp_path: Path) -> Callable[[str, str], Path]:
    """Return a helper that writes *content* to ``tmp_path / relpath``."""

    def _write(relpath: str, content: str) -> Path:
        path = tmp_path / relpath
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write
