"""
MCP tool implementations.

Tools:
- parsing - Token stream parsing and span queries
"""

from chuk_mcp_rhythm.tools.parsing import register_parsing_tools

__all__ = [
    "register_parsing_tools",
]
