"""Tests for the `guidelint lint` and `guidelint rules` CLI commands."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from click.testing import CliRunner

from guidelint import __version__
from guidelint.cli import main

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    import pytest


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _clean_tree(
    write_md: Callable[[str, str], Path], plan_text: str, documentation_text: str
) -> None:
    write_md("plans/exporter_rollout_plan.md", plan_text)
    write_md("docs/exporter_architecture_documentation.md", documentation_text)


# ---------------------------------------------------------------------------
# lint
# ---------------------------------------------------------------------------


class TestLintCommand:
    """Tests for the `guidelint lint` CLI command."""

    def test_clean_tree_exit_zero(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        write_md: Callable[[str, str], Path],
        clean_plan_text: str,
        clean_documentation_text: str,
    ) -> None:
        """Every document complete -> exit 0, no output in text format."""
        monkeypatch.chdir(tmp_path)
        _clean_tree(write_md, clean_plan_text, clean_documentation_text)
        result = CliRunner().invoke(main, ["lint", "plans", "docs"])
        assert result.exit_code == 0, result.output
        assert result.output == ""

    def test_draft_exit_one(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        write_md: Callable[[str, str], Path],
    ) -> None:
        """A fatal violation -> exit 1 with one text line per violation."""
        monkeypatch.chdir(tmp_path)
        write_md("docs/draft_documentation.md", "# Draft\n\nTBD\n")
        result = CliRunner().invoke(main, ["lint", "docs"])
        assert result.exit_code == 1, result.output
        assert "forbidden-phrase-tier1-tbd" in result.output
        assert "[FATAL]" in result.output

    def test_warning_only_exit_zero(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        write_md: Callable[[str, str], Path],
        clean_documentation_text: str,
    ) -> None:
        """Warnings never make a document a draft."""
        monkeypatch.chdir(tmp_path)
        text = clean_documentation_text.replace(
            "| `cli` | Parses arguments |", "| `cli` | Parses arguments | extra |"
        )
        write_md("docs/exporter_architecture_documentation.md", text)
        result = CliRunner().invoke(main, ["lint", "docs"])
        assert result.exit_code == 0, result.output
        assert "table-column-mismatch" in result.output

    def test_format_json(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        write_md: Callable[[str, str], Path],
    ) -> None:
        """--format json -> valid JSON with violations, files and summary."""
        monkeypatch.chdir(tmp_path)
        write_md("docs/draft_documentation.md", "# Draft\n\nTBD\n")
        result = CliRunner().invoke(main, ["lint", "docs", "--format", "json"])
        assert result.exit_code == 1, result.output
        parsed = json.loads(result.output)
        assert parsed["summary"]["drafts"] == 1
        assert parsed["files"][0]["verdict"] == "draft"
        assert {v["rule_id"] for v in parsed["violations"]} >= {"forbidden-phrase-tier1-tbd"}

    def test_format_json_idempotent(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        write_md: Callable[[str, str], Path],
    ) -> None:
        """Two runs over unchanged input print identical JSON."""
        monkeypatch.chdir(tmp_path)
        write_md("docs/draft_documentation.md", "# Draft\n\nTBD\n")
        runner = CliRunner()
        first = runner.invoke(main, ["lint", "docs", "--format", "json"])
        second = runner.invoke(main, ["lint", "docs", "--format", "json"])
        assert first.output == second.output

    def test_format_rich(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        write_md: Callable[[str, str], Path],
        clean_documentation_text: str,
    ) -> None:
        """--format rich -> per-file verdict and summary line."""
        monkeypatch.chdir(tmp_path)
        write_md("docs/exporter_architecture_documentation.md", clean_documentation_text)
        result = CliRunner().invoke(main, ["lint", "docs", "--format", "rich"])
        assert result.exit_code == 0, result.output
        assert "COMPLETE" in result.output
        assert "file(s) draft" in result.output

    def test_missing_file_reported(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """A missing path is an io-unreadable violation, not a crash."""
        monkeypatch.chdir(tmp_path)
        result = CliRunner().invoke(main, ["lint", "docs/absent_documentation.md"])
        assert result.exit_code == 1, result.output
        assert "io-unreadable" in result.output

    def test_forced_doc_type(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        write_md: Callable[[str, str], Path],
    ) -> None:
        """--doc-type plan applies plan rules to a documentation-named file."""
        monkeypatch.chdir(tmp_path)
        write_md("notes_documentation.md", "# Notes\n")
        result = CliRunner().invoke(main, ["lint", "notes_documentation.md", "--doc-type", "plan"])
        assert result.exit_code == 1, result.output
        assert "plan-phase-missing" in result.output

    def test_sequential_jobs(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        write_md: Callable[[str, str], Path],
        clean_plan_text: str,
        clean_documentation_text: str,
    ) -> None:
        """--jobs 1 lints without a worker pool."""
        monkeypatch.chdir(tmp_path)
        _clean_tree(write_md, clean_plan_text, clean_documentation_text)
        result = CliRunner().invoke(main, ["lint", "plans", "docs", "--jobs", "1"])
        assert result.exit_code == 0, result.output

    def test_requires_paths(self) -> None:
        result = CliRunner().invoke(main, ["lint"])
        assert result.exit_code == 2


class TestLintConfig:
    """Override file handling for `guidelint lint`."""

    def test_override_disables_rule(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        write_md: Callable[[str, str], Path],
        clean_documentation_text: str,
    ) -> None:
        """.guidelint.yml in the cwd is picked up automatically."""
        monkeypatch.chdir(tmp_path)
        text = clean_documentation_text.replace("```bash", "```")
        write_md("docs/exporter_architecture_documentation.md", text)

        failing = CliRunner().invoke(main, ["lint", "docs"])
        assert failing.exit_code == 1, failing.output

        (tmp_path / ".guidelint.yml").write_text(
            "version: 1\nrules:\n  code-block-language-missing:\n    enabled: false\n"
        )
        result = CliRunner().invoke(main, ["lint", "docs"])
        assert result.exit_code == 0, result.output

    def test_explicit_config(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        write_md: Callable[[str, str], Path],
        clean_documentation_text: str,
    ) -> None:
        """--config points at an override file anywhere."""
        monkeypatch.chdir(tmp_path)
        write_md("docs/exporter_architecture_documentation.md", clean_documentation_text)
        config = tmp_path / "conf" / "lint.yml"
        config.parent.mkdir()
        config.write_text(
            "version: 1\nforbidden_phrases:\n  - phrase: converts\n    tier: 4\n"
        )
        result = CliRunner().invoke(main, ["lint", "docs", "--config", str(config)])
        assert result.exit_code == 1, result.output
        assert "forbidden-phrase-tier4-converts" in result.output

    def test_invalid_config_exit_two(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        write_md: Callable[[str, str], Path],
        clean_documentation_text: str,
    ) -> None:
        """A malformed override file -> exit 2 and nothing is linted."""
        monkeypatch.chdir(tmp_path)
        write_md("docs/exporter_architecture_documentation.md", clean_documentation_text)
        (tmp_path / ".guidelint.yml").write_text("version: 1\nrules:\n  no-such-rule: {}\n")
        result = CliRunner().invoke(main, ["lint", "docs"])
        assert result.exit_code == 2
        assert "unknown rule id" in result.output

    def test_duplicate_phrase_exit_two(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        write_md: Callable[[str, str], Path],
        clean_documentation_text: str,
    ) -> None:
        """An added phrase colliding with a built-in id -> exit 2."""
        monkeypatch.chdir(tmp_path)
        write_md("docs/exporter_architecture_documentation.md", clean_documentation_text)
        (tmp_path / ".guidelint.yml").write_text(
            "version: 1\nforbidden_phrases:\n  - phrase: just\n    tier: 4\n"
        )
        result = CliRunner().invoke(main, ["lint", "docs"])
        assert result.exit_code == 2
        assert "Duplicate rule id" in result.output


# ---------------------------------------------------------------------------
# rules / global options
# ---------------------------------------------------------------------------


class TestRulesCommand:
    """Tests for the `guidelint rules` CLI command."""

    def test_lists_catalog(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        result = CliRunner().invoke(main, ["rules"])
        assert result.exit_code == 0, result.output
        assert result.output.startswith("Catalog 2.3.0:")
        assert "forbidden-phrase-tier1-todo" in result.output

    def test_json_category_filter(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        result = CliRunner().invoke(main, ["rules", "--json", "--category", "table-shape"])
        assert result.exit_code == 0, result.output
        parsed = json.loads(result.output)
        assert {r["id"] for r in parsed["rules"]} == {
            "table-column-mismatch",
            "table-empty-cell",
            "table-header-only",
        }

    def test_disabled_rule_marked(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".guidelint.yml").write_text(
            "version: 1\nrules:\n  table-header-only:\n    enabled: false\n"
        )
        result = CliRunner().invoke(main, ["rules", "--category", "table-shape"])
        assert result.exit_code == 0, result.output
        assert "table-header-only  [table-shape, fatal]  (disabled)" in result.output


class TestGlobalOptions:
    """Options on the guidelint group itself."""

    def test_version(self) -> None:
        result = CliRunner().invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_verbose_flag_accepted(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        result = CliRunner().invoke(main, ["-v", "rules"])
        assert result.exit_code == 0, result.output
