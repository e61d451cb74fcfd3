"""Built-in rule catalog transcribed from the documentation and plan guidelines."""

from __future__ import annotations

import re

from guidelint.catalog.rules import (
    CATEGORY_CODE_BLOCK,
    CATEGORY_FORBIDDEN_PHRASE,
    CATEGORY_NAMING,
    CATEGORY_QUANTITATIVE_MINIMUM,
    CATEGORY_REQUIRED_SECTION,
    CATEGORY_STRUCTURAL_FORMAT,
    CATEGORY_TABLE_SHAPE,
    DOC_TYPE_DOCUMENTATION,
    DOC_TYPE_GUIDELINE,
    DOC_TYPE_PLAN,
    REFINEMENT_TRUNCATED_IDENTIFIER,
    SEVERITY_FATAL,
    SEVERITY_WARNING,
    TIER_NAMES,
    NamingPolicy,
    Rule,
    RuleCatalog,
    build_catalog,
    compile_phrase,
)

# Guideline version the built-in rules were transcribed from.
CATALOG_VERSION = "2.3.0"

# Tiers whose matches are ignored inside fenced code blocks.
CODE_EXEMPT_TIERS: frozenset[int] = frozenset({3, 4, 5})

_TIER_HINTS: dict[int, str] = {
    1: "replace the marker with the finished content",
    2: "name the exact section, file or value instead of pointing elsewhere",
    3: "enumerate every item explicitly",
    4: "state the concrete steps instead of asserting simplicity",
    5: "state the exact condition and the exact action",
}

# (tier, phrase, explicit regex or None, slug override or None)
_FORBIDDEN_PHRASES: list[tuple[int, str, str | None, str | None]] = [
    # Tier 1: Incomplete Markers
    # Uppercase TODO counts anywhere; other casings only as a word.
    (1, "TODO", r"(?-i:TODO)|(?<![A-Za-z0-9])todos?(?![A-Za-z0-9])", None),
    (1, "TBD", None, None),
    (1, "FIXME", None, None),
    (1, "XXX", None, None),
    (1, "to be determined", None, None),
    (1, "to be decided", None, None),
    (1, "placeholder", None, None),
    (1, "fill in later", None, None),
    (1, "coming soon", None, None),
    (1, "not yet defined", None, None),
    # Tier 2: Vague References
    (2, "see above", None, None),
    (2, "see below", None, None),
    (2, "as mentioned", None, None),
    (2, "as discussed", None, None),
    (2, "as described earlier", None, None),
    (2, "mentioned earlier", None, None),
    (2, "the usual way", None, None),
    (2, "the relevant files", None, None),
    (2, "similar to the above", None, None),
    (2, "same as before", None, None),
    # Tier 3: Vague Quantifiers
    (3, "etc.", None, "etc"),
    (3, "...", None, "ellipsis"),
    (3, "…", None, "unicode-ellipsis"),
    (3, "and so on", None, None),
    (3, "and so forth", None, None),
    (3, "and more", None, None),
    (3, "various", None, None),
    (3, "several", None, None),
    (3, "a few", None, None),
    (3, "numerous", None, None),
    (3, "a number of", None, None),
    (3, "some kind of", None, None),
    # Tier 4: False Simplicity
    (4, "simply", None, None),
    (4, "just", None, None),
    (4, "merely", None, None),
    (4, "obviously", None, None),
    (4, "clearly", None, None),
    (4, "of course", None, None),
    (4, "trivial", None, None),
    (4, "trivially", None, None),
    (4, "straightforward", None, None),
    (4, "easy", None, None),
    (4, "easily", None, None),
    # Tier 5: Ambiguous Instructions
    (5, "as needed", None, None),
    (5, "as appropriate", None, None),
    (5, "if necessary", None, None),
    (5, "if needed", None, None),
    (5, "if possible", None, None),
    (5, "when possible", None, None),
    (5, "where applicable", None, None),
    (5, "handle appropriately", None, None),
    (5, "accordingly", None, None),
    (5, "and/or", None, "and-or"),
    (5, "should probably", None, None),
    (5, "might want to", None, None),
    (5, "feel free to", None, None),
    (5, "or similar", None, None),
]

# Phrases whose matches go through the truncated-identifier refinement.
_ELLIPSIS_SLUGS = frozenset({"ellipsis", "unicode-ellipsis"})

_SLUG_RE = re.compile(r"[^a-z0-9]+")


def phrase_slug(phrase: str) -> str:
    """Turn a phrase into the tail of a rule id: ``"see above"`` -> ``"see-above"``."""
    return _SLUG_RE.sub("-", phrase.lower()).strip("-")


def phrase_rule_id(tier: int, slug: str) -> str:
    return f"forbidden-phrase-tier{tier}-{slug}"


def make_phrase_rule(
    tier: int,
    phrase: str,
    *,
    pattern: re.Pattern[str] | None = None,
    slug: str | None = None,
    rule_id: str | None = None,
    code_exempt: bool | None = None,
    refinement: str | None = None,
) -> Rule:
    """Build one forbidden-phrase Rule for *phrase* in *tier*."""
    slug = slug or phrase_slug(phrase)
    return Rule(
        id=rule_id or phrase_rule_id(tier, slug),
        category=CATEGORY_FORBIDDEN_PHRASE,
        severity=SEVERITY_FATAL,
        message=f"{TIER_NAMES[tier]} '{{match}}' found; {_TIER_HINTS[tier]}",
        description=f"Tier {tier} ({TIER_NAMES[tier]}): {phrase!r}",
        pattern=pattern if pattern is not None else compile_phrase(phrase),
        tier=tier,
        refinement=refinement,
        code_exempt=(tier in CODE_EXEMPT_TIERS) if code_exempt is None else code_exempt,
    )


def _phrase_rules() -> list[Rule]:
    rules: list[Rule] = []
    for tier, phrase, regex, slug in _FORBIDDEN_PHRASES:
        rules.append(
            make_phrase_rule(
                tier,
                phrase,
                pattern=re.compile(regex, re.IGNORECASE) if regex is not None else None,
                slug=slug,
                refinement=REFINEMENT_TRUNCATED_IDENTIFIER if slug in _ELLIPSIS_SLUGS else None,
            )
        )
    return rules


_DOCUMENTATION_ONLY = frozenset({DOC_TYPE_DOCUMENTATION})
_TITLED = frozenset({DOC_TYPE_DOCUMENTATION, DOC_TYPE_GUIDELINE})
_PLAN_ONLY = frozenset({DOC_TYPE_PLAN})

_STRUCTURAL_RULES: list[Rule] = [
    Rule(
        id="io-unreadable",
        category=CATEGORY_STRUCTURAL_FORMAT,
        severity=SEVERITY_FATAL,
        message="File could not be read: {detail}",
        description="Target file is missing or unreadable",
    ),
    Rule(
        id="parse-anomaly",
        category=CATEGORY_STRUCTURAL_FORMAT,
        severity=SEVERITY_WARNING,
        message="Markdown could not be classified cleanly: {detail}",
        description="Parser fell back to a conservative interpretation",
    ),
    Rule(
        id="heading-level-skipped",
        category=CATEGORY_STRUCTURAL_FORMAT,
        severity=SEVERITY_FATAL,
        message="Heading '{match}' jumps from H{previous} to H{level}; add the missing level",
        description="Heading levels must nest without skipping",
    ),
    Rule(
        id="doc-title-missing",
        category=CATEGORY_REQUIRED_SECTION,
        severity=SEVERITY_FATAL,
        message="Document has no H1 title (Section 7.1)",
        description="Documentation starts with a single H1 title",
        doc_types=_TITLED,
    ),
    Rule(
        id="doc-status-missing",
        category=CATEGORY_REQUIRED_SECTION,
        severity=SEVERITY_FATAL,
        message="No 'Status:' marker line at the end of the document (Section 7.2)",
        description="Documentation ends with a Status marker",
        doc_types=_DOCUMENTATION_ONLY,
    ),
    Rule(
        id="doc-last-updated-missing",
        category=CATEGORY_REQUIRED_SECTION,
        severity=SEVERITY_FATAL,
        message="No 'Last Updated:' marker line at the end of the document (Section 7.2)",
        description="Documentation ends with a Last Updated marker",
        doc_types=_DOCUMENTATION_ONLY,
    ),
    Rule(
        id="plan-phase-missing",
        category=CATEGORY_REQUIRED_SECTION,
        severity=SEVERITY_FATAL,
        message=(
            "Plan has no heading for {match}; mark it done, in progress "
            "or Not Applicable instead of omitting it (Section 4)"
        ),
        description="Every plan carries Phase I through Phase IX",
        doc_types=_PLAN_ONLY,
    ),
    Rule(
        id="plan-phase-status-unmarked",
        category=CATEGORY_REQUIRED_SECTION,
        severity=SEVERITY_WARNING,
        message="'{match}' has no status marker (done, in progress or Not Applicable)",
        description="Each phase section states its status",
        doc_types=_PLAN_ONLY,
    ),
    Rule(
        id="plan-phase-na-without-rationale",
        category=CATEGORY_REQUIRED_SECTION,
        severity=SEVERITY_WARNING,
        message="'{match}' is marked Not Applicable without a rationale",
        description="Not Applicable phases explain why",
        doc_types=_PLAN_ONLY,
    ),
    Rule(
        id="table-header-only",
        category=CATEGORY_TABLE_SHAPE,
        severity=SEVERITY_FATAL,
        message="Table has a header row but no data rows (Section 3.2)",
        description="Tables carry at least one data row",
    ),
    Rule(
        id="table-empty-cell",
        category=CATEGORY_TABLE_SHAPE,
        severity=SEVERITY_FATAL,
        message="Table row has empty cells in column(s) {detail}; write '-' or 'N/A' instead",
        description="Table cells are never blank",
    ),
    Rule(
        id="table-column-mismatch",
        category=CATEGORY_TABLE_SHAPE,
        severity=SEVERITY_WARNING,
        message="Table row has {detail} cells but the header has {expected}",
        description="Table rows match the header width",
    ),
    Rule(
        id="code-block-language-missing",
        category=CATEGORY_CODE_BLOCK,
        severity=SEVERITY_FATAL,
        message="Code block has no language tag (Section 13.2)",
        description="Fenced code blocks declare a language",
    ),
    Rule(
        id="filename-convention",
        category=CATEGORY_NAMING,
        severity=SEVERITY_FATAL,
        message="Filename '{match}' breaks the naming convention: {detail} (Section 12)",
        description="Lowercase snake_case stem with a registered suffix",
    ),
    Rule(
        id="plan-objective-action-minimum",
        category=CATEGORY_QUANTITATIVE_MINIMUM,
        severity=SEVERITY_WARNING,
        message=(
            "Objective '{match}' has {detail} checklist item(s); "
            "the minimum is {threshold} atomic actions (Section 10)"
        ),
        description="Objectives break down into enough atomic actions",
        doc_types=_PLAN_ONLY,
        threshold=5,
    ),
    Rule(
        id="plan-verification-coverage",
        category=CATEGORY_QUANTITATIVE_MINIMUM,
        severity=SEVERITY_WARNING,
        message=(
            "Only {detail} of checklist items carry a **Verification** command; "
            "the minimum is {threshold} (Section 11.5)"
        ),
        description="Checklist items are paired with verification commands",
        doc_types=_PLAN_ONLY,
        threshold=0.5,
    ),
]


def builtin_rules() -> list[Rule]:
    """Return every built-in rule, phrase rules first."""
    return _phrase_rules() + list(_STRUCTURAL_RULES)


def default_catalog() -> RuleCatalog:
    """Build the catalog shipped with this guideline version."""
    return build_catalog(builtin_rules(), version=CATALOG_VERSION, naming=NamingPolicy())
