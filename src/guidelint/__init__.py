"""guidelint - compliance linter for LLM-authored documentation and plans."""

__version__ = "0.1.0"
