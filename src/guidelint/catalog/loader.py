"""Override file loader: parse .guidelint.yml and apply it to a catalog."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import yaml

from guidelint.catalog.builtin import default_catalog, make_phrase_rule, phrase_slug
from guidelint.catalog.rules import (
    CATEGORY_QUANTITATIVE_MINIMUM,
    SEVERITY_FATAL,
    TIER_NAMES,
    VALID_SEVERITIES,
    ConfigError,
    NamingPolicy,
    Rule,
    RuleCatalog,
    compile_pattern,
    override_rule,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = ".guidelint.yml"
SUPPORTED_CONFIG_VERSIONS: frozenset[int] = frozenset({1})

_TOP_LEVEL_KEYS = frozenset({"version", "rules", "forbidden_phrases", "naming"})
_OVERRIDE_KEYS = frozenset({"enabled", "severity"})
_PHRASE_KEYS = frozenset({"phrase", "tier", "id", "pattern", "code_exempt"})
_NAMING_KEYS = frozenset(
    {"documentation_roots", "documentation_suffixes", "plan_roots", "plan_suffixes"}
)


# ---------------------------------------------------------------------------
# Field parsing
# ---------------------------------------------------------------------------


def _parse_severity(raw: object, context: str) -> str:
    severity = str(raw).strip().lower()
    if severity not in VALID_SEVERITIES:
        msg = f"{context}: invalid severity '{raw}', must be one of {sorted(VALID_SEVERITIES)}"
        raise ConfigError(msg)
    return severity


def _parse_rule_overrides(
    data: object, catalog: RuleCatalog
) -> dict[str, tuple[bool | None, str | None]]:
    """Parse the ``rules:`` mapping of rule id -> {enabled, severity}."""
    if not isinstance(data, dict):
        msg = "config: 'rules' must be a mapping of rule id to override"
        raise ConfigError(msg)

    overrides: dict[str, tuple[bool | None, str | None]] = {}
    for rule_id, body in data.items():
        rule_id = str(rule_id)
        context = f"config: rule '{rule_id}'"
        if rule_id not in catalog:
            msg = f"{context}: unknown rule id"
            raise ConfigError(msg)
        if not isinstance(body, dict):
            msg = f"{context}: override must be a mapping with 'enabled' and/or 'severity'"
            raise ConfigError(msg)
        unknown = set(body) - _OVERRIDE_KEYS
        if unknown:
            msg = f"{context}: unknown override keys {sorted(str(k) for k in unknown)}"
            raise ConfigError(msg)

        enabled_raw = body.get("enabled")
        if enabled_raw is not None and not isinstance(enabled_raw, bool):
            msg = f"{context}: 'enabled' must be true or false"
            raise ConfigError(msg)
        severity_raw = body.get("severity")
        severity = _parse_severity(severity_raw, context) if severity_raw is not None else None
        rule = catalog.get(rule_id)
        if (
            severity == SEVERITY_FATAL
            and rule is not None
            and rule.category == CATEGORY_QUANTITATIVE_MINIMUM
        ):
            msg = f"{context}: quantitative minimums are advisory and cannot be fatal"
            raise ConfigError(msg)
        overrides[rule_id] = (enabled_raw, severity)
    return overrides


def _parse_phrases(data: object) -> list[Rule]:
    """Parse the ``forbidden_phrases:`` list into additional phrase rules."""
    if not isinstance(data, list):
        msg = "config: 'forbidden_phrases' must be a list"
        raise ConfigError(msg)

    rules: list[Rule] = []
    for idx, item in enumerate(data):
        context = f"config: forbidden_phrases[{idx}]"
        if not isinstance(item, dict):
            msg = f"{context} must be a mapping"
            raise ConfigError(msg)
        unknown = set(item) - _PHRASE_KEYS
        if unknown:
            msg = f"{context}: unknown keys {sorted(str(k) for k in unknown)}"
            raise ConfigError(msg)

        phrase = item.get("phrase")
        if not isinstance(phrase, str) or not phrase.strip():
            msg = f"{context}: missing required 'phrase' field"
            raise ConfigError(msg)

        tier = item.get("tier")
        if isinstance(tier, bool) or not isinstance(tier, int) or tier not in TIER_NAMES:
            msg = f"{context}: 'tier' must be one of {sorted(TIER_NAMES)}"
            raise ConfigError(msg)

        pattern_raw = item.get("pattern")
        pattern = None
        if pattern_raw is not None:
            pattern = compile_pattern(str(pattern_raw), context)

        code_exempt = item.get("code_exempt")
        if code_exempt is not None and not isinstance(code_exempt, bool):
            msg = f"{context}: 'code_exempt' must be true or false"
            raise ConfigError(msg)

        rule_id = item.get("id")
        if rule_id is not None and not str(rule_id).strip():
            msg = f"{context}: 'id' must be a non-empty string"
            raise ConfigError(msg)
        if not phrase_slug(phrase) and rule_id is None:
            msg = f"{context}: phrase {phrase!r} needs an explicit 'id'"
            raise ConfigError(msg)

        rules.append(
            make_phrase_rule(
                tier,
                phrase,
                pattern=pattern,
                rule_id=str(rule_id) if rule_id is not None else None,
                code_exempt=code_exempt,
            )
        )
    return rules


def _string_tuple(raw: object, context: str) -> tuple[str, ...]:
    if isinstance(raw, str):
        return (raw,)
    if not isinstance(raw, list) or not all(isinstance(x, str) for x in raw):
        msg = f"{context} must be a string or a list of strings"
        raise ConfigError(msg)
    return tuple(raw)


def _parse_naming(data: object, base: NamingPolicy) -> NamingPolicy:
    """Parse the ``naming:`` block; roots replace, suffixes extend the defaults."""
    if not isinstance(data, dict):
        msg = "config: 'naming' must be a mapping"
        raise ConfigError(msg)
    unknown = set(data) - _NAMING_KEYS
    if unknown:
        msg = f"config: naming: unknown keys {sorted(str(k) for k in unknown)}"
        raise ConfigError(msg)

    def _suffixes(key: str, current: tuple[str, ...]) -> tuple[str, ...]:
        if key not in data:
            return current
        extra = _string_tuple(data[key], f"config: naming.{key}")
        for suffix in extra:
            if not suffix.startswith("_"):
                msg = f"config: naming.{key}: suffix '{suffix}' must start with '_'"
                raise ConfigError(msg)
        return tuple(dict.fromkeys(current + extra))

    def _roots(key: str, current: tuple[str, ...]) -> tuple[str, ...]:
        if key not in data:
            return current
        return _string_tuple(data[key], f"config: naming.{key}")

    return NamingPolicy(
        documentation_roots=_roots("documentation_roots", base.documentation_roots),
        documentation_suffixes=_suffixes("documentation_suffixes", base.documentation_suffixes),
        plan_roots=_roots("plan_roots", base.plan_roots),
        plan_suffixes=_suffixes("plan_suffixes", base.plan_suffixes),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def apply_config(catalog: RuleCatalog, data: object) -> RuleCatalog:
    """Return a new catalog with the parsed config *data* applied.

    Added phrases are registered first so that the ``rules:`` block can
    override them too.

    Raises
    ------
    ConfigError
        On any schema problem in *data*.
    """
    if data is None:
        return catalog
    if not isinstance(data, dict):
        msg = "config must be a YAML mapping"
        raise ConfigError(msg)

    if "version" not in data and not set(data) & _TOP_LEVEL_KEYS:
        # Bare form: the whole file maps rule id to {enabled, severity}.
        data = {"version": 1, "rules": data}

    unknown = set(data) - _TOP_LEVEL_KEYS
    if unknown:
        msg = f"config: unknown top-level keys {sorted(str(k) for k in unknown)}"
        raise ConfigError(msg)

    version = data.get("version")
    if version is None:
        msg = "config: missing required 'version' field"
        raise ConfigError(msg)
    if version not in SUPPORTED_CONFIG_VERSIONS:
        expected = sorted(SUPPORTED_CONFIG_VERSIONS)
        msg = f"config: unsupported version {version}, expected one of {expected}"
        raise ConfigError(msg)

    rules: list[Rule] = list(catalog)
    if "forbidden_phrases" in data:
        added = _parse_phrases(data["forbidden_phrases"])
        logger.info("Registering %d additional forbidden phrase(s)", len(added))
        rules.extend(added)

    naming = catalog.naming
    if "naming" in data:
        naming = _parse_naming(data["naming"], catalog.naming)

    # Rebuild first so duplicate ids from added phrases fail before overrides.
    extended = catalog.with_rules(rules, naming=naming)

    if "rules" in data:
        overrides = _parse_rule_overrides(data["rules"], extended)
        logger.info("Applying %d rule override(s)", len(overrides))
        rules = [
            override_rule(rule, enabled=overrides[rule.id][0], severity=overrides[rule.id][1])
            if rule.id in overrides
            else rule
            for rule in extended
        ]
        extended = extended.with_rules(rules)

    return extended


def read_config(config_path: Path) -> object:
    """Read and parse a YAML config file, raising ConfigError on failure."""
    try:
        with config_path.open("r", encoding="utf-8-sig") as fh:
            return yaml.safe_load(fh)
    except OSError as exc:
        msg = f"Cannot read config file {config_path}: {exc}"
        raise ConfigError(msg) from exc
    except yaml.YAMLError as exc:
        msg = f"Invalid YAML in config file {config_path}: {exc}"
        raise ConfigError(msg) from exc


def find_config(start: Path | None = None) -> Path | None:
    """Return ``.guidelint.yml`` in *start* (default: cwd) if it exists."""
    candidate = (start or Path.cwd()) / DEFAULT_CONFIG_NAME
    return candidate if candidate.is_file() else None


def load_catalog(
    config_path: Path | None = None,
    *,
    base: RuleCatalog | None = None,
) -> RuleCatalog:
    """Build the effective catalog: built-in rules plus an optional override file.

    Parameters
    ----------
    config_path:
        Optional path to an override file.  When *None* no overrides apply.
    base:
        Catalog to start from.  Defaults to :func:`default_catalog`.

    Raises
    ------
    ConfigError
        When the built-in catalog or the override file is invalid.
    """
    catalog = base if base is not None else default_catalog()
    if config_path is None:
        return catalog

    logger.debug("Loading config from %s", config_path)
    return apply_config(catalog, read_config(config_path))


def describe_rules(rules: Iterable[Rule]) -> list[dict[str, object]]:
    """Return a JSON-ready description of *rules*, sorted by id."""
    return [
        {
            "id": rule.id,
            "category": rule.category,
            "severity": rule.severity,
            "enabled": rule.enabled,
            "tier": rule.tier,
            "doc_types": sorted(rule.doc_types),
            "description": rule.description,
        }
        for rule in sorted(rules, key=lambda r: r.id)
    ]
