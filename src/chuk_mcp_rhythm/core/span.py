"""
DurationSpan - closed intervals over Duration and how they relate.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from chuk_mcp_rhythm.core.duration import DURATION_ZERO, Duration

if TYPE_CHECKING:
    from chuk_mcp_rhythm.tree.node import DurationNode


class SpanRelationship(str, Enum):
    """How two spans touch."""

    NONE = "none"  # Disjoint
    ADJACENT = "adjacent"  # Share exactly one boundary point
    OVERLAPPING = "overlapping"  # Partial overlap or containment


@dataclass(frozen=True)
class DurationSpan:
    """
    A closed interval [start, stop] of musical time.

    The total duration is derived and always equals stop - start.

    Examples:
        DurationSpan(Duration(0), Duration(4))
        DurationSpan.between(Duration(4), Duration(0))  # same span
        DurationSpan.from_duration(Duration(4), start=Duration(0))
    """

    start: Duration = DURATION_ZERO
    stop: Duration = DURATION_ZERO
    duration: Duration = field(init=False)

    def __post_init__(self) -> None:
        if self.start > self.stop:
            raise ValueError(f"Span start {self.start} is after stop {self.stop}")
        object.__setattr__(self, "duration", self.stop - self.start)

    @classmethod
    def between(cls, duration: Duration, other: Duration) -> DurationSpan:
        """Create a span from two durations given in either order."""
        start, stop = sorted((duration, other))
        return cls(start, stop)

    @classmethod
    def from_duration(cls, duration: Duration, start: Duration = DURATION_ZERO) -> DurationSpan:
        """Create a span from its total duration and where it starts."""
        return cls(start, start + duration)

    def relationship(self, other: DurationSpan) -> SpanRelationship:
        """
        Classify how this span relates to another.

        Spans that only share a boundary point are ADJACENT. Spans that
        start at the same point always overlap. The result is symmetric.
        """
        if self.start < other.start:
            return self._relate_ordered(self, other)
        if other.start < self.start:
            return self._relate_ordered(other, self)
        return SpanRelationship.OVERLAPPING

    @staticmethod
    def _relate_ordered(first: DurationSpan, second: DurationSpan) -> SpanRelationship:
        if first.stop < second.start:
            return SpanRelationship.NONE
        if first.stop > second.start:
            return SpanRelationship.OVERLAPPING
        return SpanRelationship.ADJACENT

    def contains(self, duration: Duration) -> bool:
        """Return True if a point in time lies within this span (inclusive)."""
        return self.start <= duration <= self.stop

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for serialization."""
        return {"start": str(self.start), "stop": str(self.stop), "duration": str(self.duration)}

    def __str__(self) -> str:
        return f"start: {self.start}; stop: {self.stop}; total: {self.duration}"


def span_of(nodes: Iterable[DurationNode]) -> DurationSpan:
    """
    Get the smallest span covering every node in a collection.

    Returns the empty span at zero for an empty collection.
    """
    spans = [node.span for node in nodes]
    if not spans:
        return DurationSpan()
    start = min(span.start for span in spans)
    stop = max(span.stop for span in spans)
    return DurationSpan(start, stop)
