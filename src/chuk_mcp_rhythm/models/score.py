"""
Score model - the aggregate the tree builder produces.

The renderer consumes this read-only:
- Measures with absolute offsets, durations and 1-based numbers
- The forest of normalized rhythm trees, in token order
- Tempo and rehearsal markings
- The performer -> instrument -> type table (declaration order preserved)
- Diagnostics for everything the parse dropped or could not honour
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from chuk_mcp_rhythm.core.duration import DURATION_ZERO, Duration
from chuk_mcp_rhythm.core.span import DurationSpan, SpanRelationship, span_of
from chuk_mcp_rhythm.models.components import InstrumentType
from chuk_mcp_rhythm.parser.diagnostics import ParseReport
from chuk_mcp_rhythm.tree.node import DurationNode


@dataclass
class Measure:
    """A bar: where it starts and how long it lasts."""

    number: int  # 1-based
    offset: Duration
    duration: Duration = DURATION_ZERO

    @property
    def span(self) -> DurationSpan:
        return DurationSpan.from_duration(self.duration, self.offset)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {"number": self.number, "offset": str(self.offset), "duration": str(self.duration)}


@dataclass(frozen=True)
class TempoMarking:
    """A tempo change: `value` beats per minute of `subdivision_value` notes."""

    value: int
    subdivision_value: int
    offset: Duration

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "value": self.value,
            "subdivision_value": self.subdivision_value,
            "offset": str(self.offset),
        }


@dataclass(frozen=True)
class RehearsalMarking:
    """A rehearsal letter or number."""

    index: int  # 0-based, in order of appearance
    type: str
    offset: Duration

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {"index": self.index, "type": self.type, "offset": str(self.offset)}


@dataclass
class ScoreModel:
    """
    The complete parsed score.

    Built once by the tree builder and read-only afterwards.
    """

    title: str = ""
    metadata: dict[str, str] = field(default_factory=dict)
    measures: list[Measure] = field(default_factory=list)
    duration_nodes: list[DurationNode] = field(default_factory=list)
    tempo_markings: list[TempoMarking] = field(default_factory=list)
    rehearsal_markings: list[RehearsalMarking] = field(default_factory=list)

    # Performer id -> instrument id -> type, both levels in declaration order
    instrument_types_by_performer: dict[str, dict[str, InstrumentType]] = field(
        default_factory=dict
    )

    diagnostics: ParseReport = field(default_factory=ParseReport)

    @property
    def performer_ids(self) -> list[str]:
        """Performer ids in declaration order."""
        return list(self.instrument_types_by_performer)

    def instruments_for(self, performer_id: str) -> dict[str, InstrumentType]:
        """Instrument ids and types declared for a performer (empty if none)."""
        return dict(self.instrument_types_by_performer.get(performer_id, {}))

    @property
    def total_duration(self) -> Duration:
        """End of the latest measure or rhythm tree, whichever is later."""
        ends = [m.offset + m.duration for m in self.measures]
        ends.extend(node.offset + node.duration for node in self.duration_nodes)
        return max(ends, default=DURATION_ZERO)

    def measure_at(self, offset: Duration) -> Measure | None:
        """
        Get the measure sounding at an offset.

        A boundary offset belongs to the measure that starts there.
        """
        found: Measure | None = None
        for measure in self.measures:
            if measure.offset <= offset:
                found = measure
            else:
                break
        if found is not None and offset > found.offset + found.duration:
            return None
        return found

    def nodes_in_span(self, span: DurationSpan) -> list[DurationNode]:
        """Root nodes whose time overlaps a span (touching is not enough)."""
        return [
            node
            for node in self.duration_nodes
            if node.span.relationship(span) == SpanRelationship.OVERLAPPING
        ]

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary for JSON serialization."""
        return {
            "title": self.title,
            "metadata": dict(self.metadata),
            "measures": [m.to_dict() for m in self.measures],
            "duration_nodes": [n.to_dict() for n in self.duration_nodes],
            "tempo_markings": [t.to_dict() for t in self.tempo_markings],
            "rehearsal_markings": [r.to_dict() for r in self.rehearsal_markings],
            "performers": {
                performer_id: {iid: itype.value for iid, itype in instruments.items()}
                for performer_id, instruments in self.instrument_types_by_performer.items()
            },
            "diagnostics": self.diagnostics.to_dict(),
        }

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    def summary(self) -> dict[str, Any]:
        """Generate a summary for quick inspection."""
        leaves = [leaf for node in self.duration_nodes for leaf in node.iter_leaves()]
        return {
            "title": self.title,
            "total_measures": len(self.measures),
            "total_duration": str(self.total_duration),
            "root_nodes": len(self.duration_nodes),
            "leaves": len(leaves),
            "components": sum(len(leaf.components) for leaf in leaves),
            "performers": self.performer_ids,
            "span": span_of(self.duration_nodes).to_dict(),
            "issues": {
                "errors": len(self.diagnostics.errors),
                "warnings": len(self.diagnostics.warnings),
            },
        }
