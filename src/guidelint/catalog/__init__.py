"""Rule catalog domain: rule model, built-in rules, override loader."""

from guidelint.catalog.builtin import (
    CATALOG_VERSION,
    builtin_rules,
    default_catalog,
    make_phrase_rule,
)
from guidelint.catalog.loader import (
    DEFAULT_CONFIG_NAME,
    apply_config,
    describe_rules,
    find_config,
    load_catalog,
    read_config,
)
from guidelint.catalog.rules import (
    SEVERITY_FATAL,
    SEVERITY_WARNING,
    VALID_CATEGORIES,
    VALID_DOC_TYPES,
    ConfigError,
    NamingPolicy,
    Rule,
    RuleCatalog,
    build_catalog,
    compile_phrase,
)

__all__ = [
    "CATALOG_VERSION",
    "DEFAULT_CONFIG_NAME",
    "SEVERITY_FATAL",
    "SEVERITY_WARNING",
    "VALID_CATEGORIES",
    "VALID_DOC_TYPES",
    "ConfigError",
    "NamingPolicy",
    "Rule",
    "RuleCatalog",
    "apply_config",
    "build_catalog",
    "builtin_rules",
    "compile_phrase",
    "default_catalog",
    "describe_rules",
    "find_config",
    "load_catalog",
    "make_phrase_rule",
    "read_config",
]
