"""
NodeStack - the open-container stack used while building rhythm trees.
"""

from __future__ import annotations

from chuk_mcp_rhythm.tree.node import DurationNode


class NodeStack:
    """
    LIFO of the DurationNodes that new children currently attach to.

    The innermost open container is the top. Nesting depth is tracked by
    the builder, not derived from the stack size.
    """

    def __init__(self, items: list[DurationNode] | None = None) -> None:
        self._items: list[DurationNode] = list(items or [])

    @property
    def top(self) -> DurationNode | None:
        """The innermost open container, or None if the stack is empty."""
        return self._items[-1] if self._items else None

    def push(self, node: DurationNode) -> None:
        """Open a new innermost container."""
        self._items.append(node)

    def pop(self, amount: int = 1) -> int:
        """
        Close up to `amount` innermost containers.

        Returns the number actually removed, which is less than `amount`
        when the stack runs out.
        """
        removed = 0
        while removed < amount and self._items:
            self._items.pop()
            removed += 1
        return removed

    def reseed(self, node: DurationNode) -> None:
        """Replace the whole stack with a single node (a fresh root)."""
        self._items = [node]

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __repr__(self) -> str:
        return f"NodeStack(depth={len(self._items)})"
