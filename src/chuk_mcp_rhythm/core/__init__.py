"""
Core time primitives.

These are the invariants the rhythm tree is built on:
- Duration: Exact rational musical time (lengths and offsets)
- DurationSpan: Closed interval of musical time
- SpanRelationship: Disjoint / adjacent / overlapping classification
"""

from chuk_mcp_rhythm.core.duration import DURATION_ZERO, Duration
from chuk_mcp_rhythm.core.span import DurationSpan, SpanRelationship, span_of

__all__ = [
    # Duration
    "Duration",
    "DURATION_ZERO",
    # Span
    "DurationSpan",
    "SpanRelationship",
    "span_of",
]
