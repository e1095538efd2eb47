"""
Tests for rhythm tree construction.

Tests cover:
- DurationNode structure and normalization (node.py)
- NodeStack (stack.py)
"""

from fractions import Fraction

from chuk_mcp_rhythm.core import DURATION_ZERO, Duration
from chuk_mcp_rhythm.models.components import Pitch
from chuk_mcp_rhythm.tree import DurationNode, NodeStack


def d(value: str) -> Duration:
    return Duration.parse(value)


class TestDurationNodeStructure:
    """Tests for parent/root links and traversal."""

    def test_root_with_duration(self) -> None:
        """Roots carry an absolute duration and are their own root."""
        root = DurationNode.root_with_duration(Duration(4), offset=Duration(2))
        assert root.duration == Duration(4)
        assert root.offset == Duration(2)
        assert root.is_root
        assert root.root is root
        assert root.parent is None
        assert root.depth == 0

    def test_add_child(self) -> None:
        """Children get a beat weight and back-references."""
        root = DurationNode.root_with_duration(Duration(1))
        child = root.add_child(3)
        grandchild = child.add_child(1)

        assert child.beats == 3
        assert child.duration == DURATION_ZERO
        assert child.parent is root
        assert grandchild.parent is child
        assert grandchild.root is root
        assert grandchild.depth == 2
        assert not root.is_leaf
        assert grandchild.is_leaf

    def test_iter_nodes_pre_order(self) -> None:
        """Nodes are yielded parent before children, left to right."""
        root = DurationNode.root_with_duration(Duration(1))
        a = root.add_child(1)
        a1 = a.add_child(1)
        b = root.add_child(1)
        assert list(root.iter_nodes()) == [root, a, a1, b]
        assert list(root.iter_leaves()) == [a1, b]

    def test_path(self) -> None:
        """Paths name child indices from the root."""
        root = DurationNode.root_with_duration(Duration(1))
        root.add_child(1)
        second = root.add_child(1)
        inner = second.add_child(1)
        assert root.path() == "root"
        assert inner.path() == "root/1/0"

    def test_components(self) -> None:
        """Components are kept in attachment order."""
        node = DurationNode()
        first = Pitch(performer_id="vn", instrument_id="vn", values=[60.0])
        second = Pitch(performer_id="vn", instrument_id="vn", values=[62.0])
        node.add_component(first)
        node.add_component(second)
        assert node.components == [first, second]


class TestNormalization:
    """Tests for the match, scale and offset passes."""

    def test_two_equal_children(self) -> None:
        """Equal weights split the parent evenly."""
        root = DurationNode.root_with_duration(Duration(4))
        a = root.add_child(1)
        b = root.add_child(1)
        root.normalize()

        assert a.duration == Duration(2)
        assert b.duration == Duration(2)
        assert a.offset == Duration(0)
        assert b.offset == Duration(2)

    def test_unequal_weights(self) -> None:
        """Children scale by weight over the sum of sibling weights."""
        root = DurationNode.root_with_duration(d("3/4"))
        a = root.add_child(2)
        b = root.add_child(1)
        root.normalize()

        assert a.duration == d("1/2")
        assert b.duration == d("1/4")
        assert b.offset == d("1/2")

    def test_nested_tuplet_is_exact(self) -> None:
        """Deep subdivision stays exact."""
        root = DurationNode.root_with_duration(Duration(1))
        group = root.add_child(1)
        root.add_child(1)
        leaves = [group.add_child(1) for _ in range(3)]
        root.normalize()

        assert [leaf.duration for leaf in leaves] == [d("1/6")] * 3
        assert [leaf.offset for leaf in leaves] == [d("0"), d("1/6"), d("1/3")]
        assert sum((leaf.duration for leaf in leaves), DURATION_ZERO) == group.duration

    def test_offsets_start_at_root_offset(self) -> None:
        """The first child starts where the root starts."""
        root = DurationNode.root_with_duration(Duration(2), offset=Duration(5))
        a = root.add_child(1)
        b = root.add_child(3)
        root.normalize()

        assert a.offset == Duration(5)
        assert b.offset == d("11/2")
        assert b.offset + b.duration == root.offset + root.duration

    def test_children_are_contiguous(self) -> None:
        """Every child starts where its previous sibling stops."""
        root = DurationNode.root_with_duration(d("7/8"))
        for beats in (3, 1, 2, 5):
            child = root.add_child(beats)
            child.add_child(1)
            child.add_child(2)
        root.normalize()

        for node in root.iter_nodes():
            position = node.offset
            for child in node.children:
                assert child.offset == position
                position = position + child.duration
            if node.children:
                assert position == node.offset + node.duration

    def test_scale_by_fraction(self) -> None:
        """child.duration == parent.duration * beats / total."""
        root = DurationNode.root_with_duration(Duration(1))
        children = [root.add_child(beats) for beats in (1, 2, 4)]
        root.scale_durations_of_children()
        assert [c.duration.value for c in children] == [
            Fraction(1, 7),
            Fraction(2, 7),
            Fraction(4, 7),
        ]

    def test_single_leaf_root_unchanged(self) -> None:
        """A root with no children keeps its duration."""
        root = DurationNode.root_with_duration(d("3/8"))
        assert root.normalize() == []
        assert root.duration == d("3/8")

    def test_match_reports_non_positive_weights(self) -> None:
        """Zero or negative weights are reported, not scaled."""
        root = DurationNode.root_with_duration(Duration(1))
        group = root.add_child(1)
        group.add_child(0)
        group.add_child(0)
        problems = root.normalize()

        assert len(problems) == 1
        assert problems[0].startswith("root/0")
        assert group.duration == Duration(1)
        assert all(child.duration == DURATION_ZERO for child in group.children)

    def test_mixed_sign_weights_left_unscaled(self) -> None:
        """A positive beat sum does not hide a negative sibling weight."""
        root = DurationNode.root_with_duration(Duration(4))
        a = root.add_child(2)
        b = root.add_child(-1)
        a.add_child(1)
        problems = root.normalize()

        assert problems == ["root: non-positive beat weights [2, -1]"]
        assert a.duration == DURATION_ZERO
        assert b.duration == DURATION_ZERO
        assert a.children[0].duration == DURATION_ZERO
        assert b.offset == DURATION_ZERO

    def test_to_dict(self) -> None:
        """Serialized trees use fraction strings."""
        root = DurationNode.root_with_duration(Duration(1))
        leaf = root.add_child(1)
        leaf.add_component(Pitch(performer_id="p", instrument_id="i", values=[60.0]))
        root.add_child(2)
        root.normalize()

        data = root.to_dict()
        assert data["duration"] == "1"
        assert data["children"][0]["duration"] == "1/3"
        assert data["children"][1]["offset"] == "1/3"
        assert data["children"][0]["components"][0]["kind"] == "pitch"
        assert "children" not in data["children"][0]


class TestNodeStack:
    """Tests for NodeStack."""

    def test_empty(self) -> None:
        """A new stack has no top."""
        stack = NodeStack()
        assert stack.top is None
        assert len(stack) == 0
        assert not stack

    def test_push_pop(self) -> None:
        """Last pushed is the top."""
        a, b = DurationNode(), DurationNode()
        stack = NodeStack()
        stack.push(a)
        stack.push(b)
        assert stack.top is b
        assert stack.pop() == 1
        assert stack.top is a

    def test_pop_many(self) -> None:
        """Pop several levels at once."""
        stack = NodeStack([DurationNode() for _ in range(3)])
        assert stack.pop(2) == 2
        assert len(stack) == 1

    def test_pop_past_empty(self) -> None:
        """Popping more than the stack holds removes what is there."""
        stack = NodeStack([DurationNode()])
        assert stack.pop(3) == 1
        assert stack.top is None
        assert stack.pop() == 0

    def test_reseed(self) -> None:
        """Reseeding replaces everything with one node."""
        root = DurationNode.root_with_duration(Duration(1))
        stack = NodeStack([DurationNode(), DurationNode()])
        stack.reseed(root)
        assert len(stack) == 1
        assert stack.top is root
