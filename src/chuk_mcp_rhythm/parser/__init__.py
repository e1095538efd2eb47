"""
Parsing pipeline - builds a ScoreModel from a token stream.

The pipeline:
    Token stream (tokenizer or fixture file)
    → TreeBuilder (one pass, depth stack + stack modes)
    → normalized DurationNode forest
    → ScoreModel (with diagnostics)
"""

# Diagnostics and errors first (no circular dependencies)
from chuk_mcp_rhythm.parser.diagnostics import IssueSeverity, ParseIssue, ParseReport
from chuk_mcp_rhythm.parser.errors import (
    InvalidInstrumentTypeError,
    MalformedTokenError,
    ParserError,
)


def __getattr__(name: str):
    """Lazy imports for the builder to avoid circular dependencies."""
    if name in ("StackMode", "TreeBuilder", "parse"):
        from chuk_mcp_rhythm.parser.builder import StackMode, TreeBuilder, parse

        return {
            "StackMode": StackMode,
            "TreeBuilder": TreeBuilder,
            "parse": parse,
        }[name]
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    # Builder (lazy loaded)
    "StackMode",
    "TreeBuilder",
    "parse",
    # Diagnostics
    "IssueSeverity",
    "ParseIssue",
    "ParseReport",
    # Errors
    "InvalidInstrumentTypeError",
    "MalformedTokenError",
    "ParserError",
]
