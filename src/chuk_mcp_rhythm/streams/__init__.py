"""
Token stream fixtures - materialized tokenizer output on disk.

The tokenizer itself is upstream; these files let a score be parsed
without it, and give tests and tools named example streams.
"""

from chuk_mcp_rhythm.streams.loader import TokenStream, TokenStreamLoader, TokenStreamMetadata

__all__ = [
    "TokenStream",
    "TokenStreamLoader",
    "TokenStreamMetadata",
]
