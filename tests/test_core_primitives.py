"""
Tests for core time primitives.

Tests cover:
- Duration (duration.py)
- DurationSpan, SpanRelationship, span_of (span.py)
"""

from fractions import Fraction

import pytest

from chuk_mcp_rhythm.core import (
    DURATION_ZERO,
    Duration,
    DurationSpan,
    SpanRelationship,
    span_of,
)
from chuk_mcp_rhythm.tree import DurationNode


def span(start: str, stop: str) -> DurationSpan:
    return DurationSpan(Duration.parse(start), Duration.parse(stop))


class TestDuration:
    """Tests for Duration class."""

    def test_create_from_int(self) -> None:
        """Integers are converted to fractions."""
        d = Duration(3)
        assert d.value == Fraction(3)
        assert isinstance(d.value, Fraction)

    def test_zero_constant(self) -> None:
        """DURATION_ZERO is zero and falsy."""
        assert DURATION_ZERO == Duration(0)
        assert DURATION_ZERO is Duration.ZERO
        assert not DURATION_ZERO

    def test_negative_rejected(self) -> None:
        """Durations cannot be negative."""
        with pytest.raises(ValueError, match="non-negative"):
            Duration(-1)

    def test_add(self) -> None:
        """Adding durations works."""
        assert Duration(Fraction(1, 3)) + Duration(Fraction(2, 3)) == Duration(1)

    def test_subtract(self) -> None:
        """Subtraction down to zero is allowed."""
        assert Duration(3) - Duration(1) == Duration(2)
        assert Duration(3) - Duration(3) == DURATION_ZERO

    def test_subtract_negative_raises(self) -> None:
        """Subtraction that would go negative is a caller error."""
        with pytest.raises(ValueError, match="negative"):
            Duration(1) - Duration(2)

    def test_scale(self) -> None:
        """Durations scale by ints and fractions."""
        assert Duration(4) * Fraction(1, 3) == Duration(Fraction(4, 3))
        assert 2 * Duration(Fraction(3, 8)) == Duration(Fraction(3, 4))
        assert Duration(3) / 2 == Duration(Fraction(3, 2))

    def test_ordering(self) -> None:
        """Durations are totally ordered."""
        assert Duration(1) < Duration(2)
        assert Duration(2) >= Duration(2)
        assert sorted([Duration(3), Duration(1), Duration(2)]) == [
            Duration(1),
            Duration(2),
            Duration(3),
        ]

    def test_hashable(self) -> None:
        """Durations are hashable for use in sets."""
        assert len({Duration(1), Duration(Fraction(2, 2)), Duration(2)}) == 2

    def test_parse_string(self) -> None:
        """Parse 'n/d' and integer strings."""
        assert Duration.parse("3/16") == Duration(Fraction(3, 16))
        assert Duration.parse(" 4 ") == Duration(4)

    def test_parse_pair(self) -> None:
        """Parse [numerator, denominator] pairs."""
        assert Duration.parse([3, 8]) == Duration(Fraction(3, 8))

    def test_parse_invalid(self) -> None:
        """Invalid inputs raise ValueError."""
        with pytest.raises(ValueError):
            Duration.parse("three")
        with pytest.raises(ValueError):
            Duration.parse("1/0")
        with pytest.raises(ValueError):
            Duration.parse([1, 0])
        with pytest.raises(ValueError):
            Duration.parse(True)

    def test_str_and_float(self) -> None:
        """String form is the fraction; float conversion works."""
        assert str(Duration(Fraction(3, 4))) == "3/4"
        assert float(Duration(Fraction(3, 4))) == 0.75


class TestDurationSpan:
    """Tests for DurationSpan class."""

    def test_derived_duration(self) -> None:
        """Duration is stop minus start."""
        s = span("1", "5/2")
        assert s.duration == Duration(Fraction(3, 2))

    def test_default_is_empty(self) -> None:
        """Default span is empty at zero."""
        s = DurationSpan()
        assert s.start == DURATION_ZERO
        assert s.duration == DURATION_ZERO

    def test_between_sorts(self) -> None:
        """Unordered constructor sorts its inputs."""
        s = DurationSpan.between(Duration(4), Duration(1))
        assert s.start == Duration(1)
        assert s.stop == Duration(4)

    def test_from_duration(self) -> None:
        """Construct from total duration and start."""
        s = DurationSpan.from_duration(Duration(2), Duration(3))
        assert s.stop == Duration(5)

    def test_reversed_rejected(self) -> None:
        """Explicit start after stop is rejected."""
        with pytest.raises(ValueError, match="after stop"):
            span("2", "1")

    def test_contains_is_inclusive(self) -> None:
        """Both boundaries are inside the span."""
        s = span("1", "2")
        assert s.contains(Duration(1))
        assert s.contains(Duration(2))
        assert not s.contains(Duration(3))


class TestSpanRelationship:
    """Tests for span relationship classification."""

    def test_disjoint(self) -> None:
        """Separated spans do not touch."""
        assert span("0", "1").relationship(span("2", "3")) == SpanRelationship.NONE

    def test_adjacent(self) -> None:
        """Sharing one boundary point is adjacent."""
        assert span("0", "1").relationship(span("1", "2")) == SpanRelationship.ADJACENT

    def test_partial_overlap(self) -> None:
        """Partially overlapping spans overlap."""
        assert span("0", "2").relationship(span("1", "3")) == SpanRelationship.OVERLAPPING

    def test_containment(self) -> None:
        """A span inside another overlaps it."""
        assert span("0", "4").relationship(span("1", "2")) == SpanRelationship.OVERLAPPING

    def test_same_start(self) -> None:
        """Spans starting together overlap."""
        assert span("1", "2").relationship(span("1", "5")) == SpanRelationship.OVERLAPPING

    @pytest.mark.parametrize(
        ("a", "b"),
        [
            (("0", "1"), ("2", "3")),
            (("0", "1"), ("1", "2")),
            (("0", "2"), ("1", "3")),
            (("0", "4"), ("1", "2")),
            (("1/3", "2/3"), ("2/3", "1")),
        ],
    )
    def test_symmetric(self, a: tuple[str, str], b: tuple[str, str]) -> None:
        """relationship(a, b) == relationship(b, a)."""
        first, second = span(*a), span(*b)
        assert first.relationship(second) == second.relationship(first)


class TestSpanOf:
    """Tests for span_of."""

    def test_empty(self) -> None:
        """No nodes gives the empty span."""
        assert span_of([]) == DurationSpan()

    def test_covers_nodes(self) -> None:
        """Covers from the earliest start to the latest stop."""
        a = DurationNode.root_with_duration(Duration(2), offset=Duration(3))
        b = DurationNode.root_with_duration(Duration(1), offset=Duration(1))
        covered = span_of([a, b])
        assert covered.start == Duration(1)
        assert covered.stop == Duration(5)
