"""guidelint CLI entry point."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click

from guidelint import __version__
from guidelint.catalog.rules import VALID_CATEGORIES, VALID_DOC_TYPES

if TYPE_CHECKING:
    from guidelint.catalog.rules import RuleCatalog

_LOG_FORMAT = "%(levelname)s | %(name)s | %(message)s"


@click.group()
@click.version_option(version=__version__, prog_name="guidelint")
@click.option("--verbose", "-v", is_flag=True, help="Debug logging on stderr.")
@click.pass_context
def main(ctx: click.Context, *, verbose: bool) -> None:
    """guidelint - compliance linter for documentation and plan Markdown."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    if verbose:
        logging.basicConfig(level=logging.WARNING, format=_LOG_FORMAT, stream=sys.stderr)
        logging.getLogger("guidelint").setLevel(logging.DEBUG)


def _load_catalog_or_exit(config: Path | None) -> RuleCatalog:
    """Load the effective catalog; exit 2 on ConfigError."""
    from guidelint.catalog import ConfigError, find_config, load_catalog

    config_path = config if config is not None else find_config()
    try:
        return load_catalog(config_path)
    except ConfigError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)


_CONFIG_OPTION = click.option(
    "--config",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Override file (default: .guidelint.yml in the current directory, if present).",
)


@main.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path(path_type=Path))
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["text", "json", "rich"]),
    default="text",
    help="Output format.",
)
@_CONFIG_OPTION
@click.option(
    "--doc-type",
    type=click.Choice(sorted(VALID_DOC_TYPES)),
    default=None,
    help="Treat every file as this document type instead of inferring it.",
)
@click.option(
    "--jobs",
    "-j",
    type=click.IntRange(min=1),
    default=None,
    help="Files linted in parallel (default: CPU count).",
)
def lint(
    *,
    paths: tuple[Path, ...],
    fmt: str,
    config: Path | None,
    doc_type: str | None,
    jobs: int | None,
) -> None:
    """Lint Markdown files or directories against the guideline rules.

    Exit codes: 0 = every document complete, 1 = at least one draft,
    2 = configuration error.
    """
    from guidelint.linter import format_json, format_rich, format_text, lint_paths

    catalog = _load_catalog_or_exit(config)
    result = lint_paths(paths, catalog, doc_type=doc_type, jobs=jobs)

    formatters = {
        "text": format_text,
        "json": format_json,
        "rich": format_rich,
    }
    output = formatters[fmt](result)
    if output:
        click.echo(output)

    sys.exit(result.exit_code)


@main.command()
@_CONFIG_OPTION
@click.option(
    "--category",
    type=click.Choice(sorted(VALID_CATEGORIES)),
    default=None,
    help="Only list rules of this category.",
)
@click.option("--json", "output_json", is_flag=True, help="Output as JSON.")
def rules(*, config: Path | None, category: str | None, output_json: bool) -> None:
    """List the effective rule catalog."""
    from guidelint.catalog import describe_rules

    catalog = _load_catalog_or_exit(config)
    selected = catalog.by_category(category) if category else tuple(catalog)
    described = describe_rules(selected)

    if output_json:
        click.echo(
            json.dumps({"catalog_version": catalog.version, "rules": described}, indent=2)
        )
        return

    click.echo(f"Catalog {catalog.version}: {len(described)} rule(s)")
    for item in described:
        state = "" if item["enabled"] else "  (disabled)"
        click.echo(f"  {item['id']}  [{item['category']}, {item['severity']}]{state}")
