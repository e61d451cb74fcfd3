"""Rule model and immutable catalog: Rule, NamingPolicy, RuleCatalog, build_catalog."""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

SEVERITY_FATAL = "fatal"
SEVERITY_WARNING = "warning"
VALID_SEVERITIES: frozenset[str] = frozenset({SEVERITY_FATAL, SEVERITY_WARNING})

CATEGORY_FORBIDDEN_PHRASE = "forbidden-phrase"
CATEGORY_REQUIRED_SECTION = "required-section"
CATEGORY_TABLE_SHAPE = "table-shape"
CATEGORY_NAMING = "naming"
CATEGORY_CODE_BLOCK = "code-block"
CATEGORY_QUANTITATIVE_MINIMUM = "quantitative-minimum"
CATEGORY_STRUCTURAL_FORMAT = "structural-format"
VALID_CATEGORIES: frozenset[str] = frozenset(
    {
        CATEGORY_FORBIDDEN_PHRASE,
        CATEGORY_REQUIRED_SECTION,
        CATEGORY_TABLE_SHAPE,
        CATEGORY_NAMING,
        CATEGORY_CODE_BLOCK,
        CATEGORY_QUANTITATIVE_MINIMUM,
        CATEGORY_STRUCTURAL_FORMAT,
    }
)

DOC_TYPE_DOCUMENTATION = "documentation"
DOC_TYPE_PLAN = "plan"
DOC_TYPE_GUIDELINE = "guideline"
VALID_DOC_TYPES: frozenset[str] = frozenset(
    {DOC_TYPE_DOCUMENTATION, DOC_TYPE_PLAN, DOC_TYPE_GUIDELINE}
)

# Tiers 1-5 of the forbidden-phrase list.
TIER_NAMES: dict[int, str] = {
    1: "Incomplete Marker",
    2: "Vague Reference",
    3: "Vague Quantifier",
    4: "False Simplicity",
    5: "Ambiguous Instruction",
}

REFINEMENT_TRUNCATED_IDENTIFIER = "truncated-identifier"
VALID_REFINEMENTS: frozenset[str] = frozenset({REFINEMENT_TRUNCATED_IDENTIFIER})


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(Exception):
    """Raised when the rule catalog or an override file is malformed."""


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Rule:
    """A single enforceable check.

    Forbidden-phrase rules carry a compiled ``pattern``.  Every other
    category is a structural predicate owned by the evaluator that looks
    the rule up by ``id``; ``threshold`` and ``doc_types`` parameterise it.
    """

    id: str
    category: str
    severity: str
    message: str
    description: str = ""
    pattern: re.Pattern[str] | None = None
    tier: int | None = None
    refinement: str | None = None
    code_exempt: bool = False
    enabled: bool = True
    doc_types: frozenset[str] = VALID_DOC_TYPES
    threshold: float | None = None

    @property
    def is_fatal(self) -> bool:
        return self.severity == SEVERITY_FATAL

    def applies_to(self, doc_type: str) -> bool:
        """Return True if this rule is enabled for documents of *doc_type*."""
        return self.enabled and doc_type in self.doc_types

    def render(self, **values: object) -> str:
        """Fill the message template; unknown placeholders are left as-is."""
        try:
            return self.message.format(**values)
        except (KeyError, IndexError):
            return self.message


@dataclass(frozen=True)
class NamingPolicy:
    """Filename suffixes allowed under documentation and plan roots."""

    documentation_roots: tuple[str, ...] = ("docs", "documentation")
    documentation_suffixes: tuple[str, ...] = ("_documentation", "_guidelines", "_skill")
    plan_roots: tuple[str, ...] = ("plans", "plan")
    plan_suffixes: tuple[str, ...] = ("_plan",)

    @property
    def all_suffixes(self) -> tuple[str, ...]:
        return tuple(dict.fromkeys(self.documentation_suffixes + self.plan_suffixes))


@dataclass(frozen=True)
class RuleCatalog:
    """Versioned, read-only set of rules applied by one lint run."""

    version: str
    rules: Mapping[str, Rule]
    naming: NamingPolicy = field(default_factory=NamingPolicy)

    def __len__(self) -> int:
        return len(self.rules)

    def __iter__(self) -> Iterator[Rule]:
        return iter(self.rules.values())

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self.rules

    def get(self, rule_id: str) -> Rule | None:
        return self.rules.get(rule_id)

    def active(self, rule_id: str, doc_type: str) -> Rule | None:
        """Return the rule when it exists and applies to *doc_type*, else None."""
        rule = self.rules.get(rule_id)
        if rule is None or not rule.applies_to(doc_type):
            return None
        return rule

    def by_category(self, category: str) -> tuple[Rule, ...]:
        return tuple(r for r in self.rules.values() if r.category == category)

    def enabled_rules(self) -> tuple[Rule, ...]:
        return tuple(r for r in self.rules.values() if r.enabled)

    def with_rules(
        self, rules: Iterable[Rule], *, naming: NamingPolicy | None = None
    ) -> RuleCatalog:
        """Return a new catalog with *rules* replacing this one's."""
        return build_catalog(
            rules,
            version=self.version,
            naming=naming if naming is not None else self.naming,
        )


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

_WORD_CHAR_RE = re.compile(r"[A-Za-z0-9]")


def compile_phrase(phrase: str) -> re.Pattern[str]:
    """Compile a forbidden phrase into a case-insensitive matcher.

    Single-token phrases are bounded by non-alphanumerics on any side that
    starts or ends with a letter or digit (``etc.`` matches ``etc.`` but
    not ``fetc.``).  Multi-word phrases match as substrings, with any run
    of whitespace, newlines included, between words.
    """
    words = phrase.split()
    if not words:
        msg = "forbidden phrase must not be empty"
        raise ConfigError(msg)

    if len(words) > 1:
        body = r"\s+".join(re.escape(w) for w in words)
        return re.compile(body, re.IGNORECASE)

    token = words[0]
    body = re.escape(token)
    if _WORD_CHAR_RE.match(token[0]):
        body = r"(?<![A-Za-z0-9])" + body
    if _WORD_CHAR_RE.match(token[-1]):
        body += r"(?![A-Za-z0-9])"
    return re.compile(body, re.IGNORECASE)


def compile_pattern(pattern: str, context: str) -> re.Pattern[str]:
    """Compile a user-supplied regex, raising ConfigError on failure."""
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error as exc:
        msg = f"{context}: invalid pattern {pattern!r}: {exc}"
        raise ConfigError(msg) from exc


def validate_rule(rule: Rule) -> None:
    """Raise ConfigError if *rule* has an invalid field."""
    if not rule.id or not rule.id.strip():
        msg = "rule id must be a non-empty string"
        raise ConfigError(msg)
    if rule.category not in VALID_CATEGORIES:
        msg = (
            f"rule '{rule.id}': invalid category '{rule.category}', "
            f"must be one of {sorted(VALID_CATEGORIES)}"
        )
        raise ConfigError(msg)
    if rule.severity not in VALID_SEVERITIES:
        msg = (
            f"rule '{rule.id}': invalid severity '{rule.severity}', "
            f"must be one of {sorted(VALID_SEVERITIES)}"
        )
        raise ConfigError(msg)
    if rule.category == CATEGORY_FORBIDDEN_PHRASE:
        if rule.pattern is None:
            msg = f"rule '{rule.id}': forbidden-phrase rules need a pattern"
            raise ConfigError(msg)
        if rule.tier not in TIER_NAMES:
            msg = f"rule '{rule.id}': tier must be one of {sorted(TIER_NAMES)}"
            raise ConfigError(msg)
    if rule.refinement is not None and rule.refinement not in VALID_REFINEMENTS:
        msg = f"rule '{rule.id}': unknown refinement '{rule.refinement}'"
        raise ConfigError(msg)
    unknown_types = rule.doc_types - VALID_DOC_TYPES
    if unknown_types:
        msg = f"rule '{rule.id}': unknown doc types {sorted(unknown_types)}"
        raise ConfigError(msg)


def build_catalog(
    rules: Iterable[Rule],
    *,
    version: str,
    naming: NamingPolicy | None = None,
) -> RuleCatalog:
    """Validate *rules* and freeze them into a RuleCatalog.

    Raises
    ------
    ConfigError
        On a duplicate rule id or an invalid rule field.
    """
    table: dict[str, Rule] = {}
    for rule in rules:
        validate_rule(rule)
        if rule.id in table:
            msg = f"Duplicate rule id '{rule.id}'"
            raise ConfigError(msg)
        table[rule.id] = rule

    return RuleCatalog(
        version=version,
        rules=MappingProxyType(table),
        naming=naming if naming is not None else NamingPolicy(),
    )


def override_rule(rule: Rule, *, enabled: bool | None, severity: str | None) -> Rule:
    """Return a copy of *rule* with the given fields replaced."""
    changes: dict[str, object] = {}
    if enabled is not None:
        changes["enabled"] = enabled
    if severity is not None:
        changes["severity"] = severity
    return replace(rule, **changes) if changes else rule
