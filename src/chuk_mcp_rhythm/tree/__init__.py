"""
Rhythm tree construction.

This module provides:
- DurationNode: Tree node with beat weight, duration, offset and components
- NodeStack: Open-container stack used while building trees
"""

from chuk_mcp_rhythm.tree.node import DurationNode
from chuk_mcp_rhythm.tree.stack import NodeStack

__all__ = [
    "DurationNode",
    "NodeStack",
]
