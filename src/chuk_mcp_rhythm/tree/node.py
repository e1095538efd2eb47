"""
DurationNode - the rhythm tree.

A root node carries an absolute duration. Every node below it carries a
raw beat weight until normalization distributes the parent's duration
among its children in proportion to those weights:

    root (4)
    ├── 1      -> 4 * 1/3 = 4/3
    └── 2      -> 4 * 2/3 = 8/3
        ├── 1  -> 8/3 * 1/2 = 4/3
        └── 1  -> 8/3 * 1/2 = 4/3

Normalization runs three passes per root, strictly in this order:
match (validate beat weights), scale (weights -> durations) and
offset (lay children out back to back).
"""

from __future__ import annotations

import weakref
from collections.abc import Iterator
from fractions import Fraction
from typing import TYPE_CHECKING, Any

from chuk_mcp_rhythm.core.duration import DURATION_ZERO, Duration
from chuk_mcp_rhythm.core.span import DurationSpan

if TYPE_CHECKING:
    from chuk_mcp_rhythm.models.components import Component


class DurationNode:
    """
    A node in a rhythm tree.

    Parents own their children. The `parent` and `root` back-references
    are weak and only used for traversal.
    """

    def __init__(
        self,
        beats: int = 1,
        duration: Duration = DURATION_ZERO,
        offset: Duration = DURATION_ZERO,
    ) -> None:
        self.beats = beats
        self.duration = duration
        self.offset = offset
        self.children: list[DurationNode] = []
        self.components: list[Component] = []
        self._parent: weakref.ref[DurationNode] | None = None
        self._root: weakref.ref[DurationNode] | None = None

    @classmethod
    def root_with_duration(
        cls, duration: Duration, offset: Duration = DURATION_ZERO
    ) -> DurationNode:
        """Create a root node whose duration is already absolute."""
        return cls(beats=1, duration=duration, offset=offset)

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------

    @property
    def parent(self) -> DurationNode | None:
        """The immediate ancestor, or None for a root."""
        return self._parent() if self._parent is not None else None

    @property
    def root(self) -> DurationNode:
        """The depth-0 ancestor (a root is its own root)."""
        if self._root is None:
            return self
        root = self._root()
        return root if root is not None else self

    @property
    def is_root(self) -> bool:
        return self._parent is None

    @property
    def is_leaf(self) -> bool:
        return not self.children

    @property
    def depth(self) -> int:
        """Number of ancestors above this node."""
        depth = 0
        node = self.parent
        while node is not None:
            depth += 1
            node = node.parent
        return depth

    @property
    def span(self) -> DurationSpan:
        """The time this node occupies (valid after normalization)."""
        return DurationSpan.from_duration(self.duration, self.offset)

    def add_child(self, beats: int) -> DurationNode:
        """
        Append a beat-weighted child and return it.

        No durations are computed here; see normalize().
        """
        child = DurationNode(beats=beats)
        child._parent = weakref.ref(self)
        child._root = weakref.ref(self.root)
        self.children.append(child)
        return child

    def add_component(self, component: Component) -> None:
        """Decorate this node with a musical event."""
        self.components.append(component)

    def iter_nodes(self) -> Iterator[DurationNode]:
        """Yield this node and all descendants in pre-order."""
        yield self
        for child in self.children:
            yield from child.iter_nodes()

    def iter_leaves(self) -> Iterator[DurationNode]:
        """Yield descendant leaves left to right."""
        for node in self.iter_nodes():
            if node.is_leaf:
                yield node

    # ------------------------------------------------------------------
    # Normalization
    # ------------------------------------------------------------------

    def match_durations_of_tree(self) -> list[str]:
        """
        Check that every internal node's child beat weights can divide it.

        Nothing is changed. Returns one message per internal node whose
        children carry a non-positive weight (and so cannot be scaled
        proportionally).
        """
        problems: list[str] = []
        for node in self.iter_nodes():
            if node.is_leaf:
                continue
            weights = [child.beats for child in node.children]
            if any(weight <= 0 for weight in weights):
                problems.append(f"{node.path()}: non-positive beat weights {weights}")
        return problems

    def scale_durations_of_children(self) -> None:
        """
        Convert each child's beat weight to an absolute duration.

        child.duration = parent.duration * child.beats / sum(sibling beats)

        Children carrying a non-positive weight (the nodes the match pass
        reports) are left unscaled along with their whole subtree.
        """
        if not self.children:
            return
        if any(child.beats <= 0 for child in self.children):
            return
        total_beats = sum(child.beats for child in self.children)
        for child in self.children:
            child.duration = self.duration * Fraction(child.beats, total_beats)
            child.scale_durations_of_children()

    def set_offset_duration_of_children(self) -> None:
        """Place children back to back, starting at this node's offset."""
        position = self.offset
        for child in self.children:
            child.offset = position
            position = position + child.duration
            child.set_offset_duration_of_children()

    def normalize(self) -> list[str]:
        """
        Run match, scale and offset passes over this subtree.

        Returns the findings of the match pass.
        """
        problems = self.match_durations_of_tree()
        self.scale_durations_of_children()
        self.set_offset_duration_of_children()
        return problems

    # ------------------------------------------------------------------
    # Presentation
    # ------------------------------------------------------------------

    def path(self) -> str:
        """Child-index path from the root, e.g. 'root/0/2'."""
        indices: list[str] = []
        node: DurationNode = self
        parent = node.parent
        while parent is not None:
            indices.append(str(parent.children.index(node)))
            node, parent = parent, parent.parent
        return "/".join(["root", *reversed(indices)])

    def to_dict(self) -> dict[str, Any]:
        """Convert the subtree to a dictionary for serialization."""
        d: dict[str, Any] = {
            "beats": self.beats,
            "duration": str(self.duration),
            "offset": str(self.offset),
        }
        if self.components:
            d["components"] = [c.model_dump(mode="json") for c in self.components]
        if self.children:
            d["children"] = [child.to_dict() for child in self.children]
        return d

    def __repr__(self) -> str:
        return (
            f"DurationNode(beats={self.beats}, duration={self.duration}, "
            f"offset={self.offset}, children={len(self.children)})"
        )
