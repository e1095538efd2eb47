"""
CHUK Rhythm - compiles depth-annotated token streams into rhythm trees.

Quick start:
    from chuk_mcp_rhythm import parse

    score = parse(tokens)
    for root in score.duration_nodes:
        for leaf in root.iter_leaves():
            print(leaf.offset, leaf.duration, leaf.components)
"""

from chuk_mcp_rhythm.core import DURATION_ZERO, Duration, DurationSpan, SpanRelationship
from chuk_mcp_rhythm.models import InstrumentType, ScoreModel
from chuk_mcp_rhythm.parser import ParseReport, TreeBuilder, parse
from chuk_mcp_rhythm.tree import DurationNode, NodeStack

__version__ = "0.1.0"

__all__ = [
    "DURATION_ZERO",
    "Duration",
    "DurationNode",
    "DurationSpan",
    "InstrumentType",
    "NodeStack",
    "ParseReport",
    "ScoreModel",
    "SpanRelationship",
    "TreeBuilder",
    "parse",
]
