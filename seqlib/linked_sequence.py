"""
Linked Sequence
===============
Doubly linked list whose positions are bidirectional but not random
access.  Distances and multi-step advances walk the nodes one at a time,
so any algorithm that runs on it depends only on the position primitives.
"""

from __future__ import annotations

from typing import Any, Iterable, Iterator, List, Optional


class _Node:
    __slots__ = ("value", "prev", "next")

    def __init__(self, value: Any = None):
        self.value = value
        self.prev: Optional[_Node] = None
        self.next: Optional[_Node] = None


class NodePosition:
    """Position naming one node of a ``LinkedSequence`` (or its sentinel)."""

    __slots__ = ("owner", "node")

    trivially_movable = True

    def __init__(self, owner: "LinkedSequence", node: _Node):
        self.owner = owner
        self.node = node

    def read(self) -> Any:
        if self.node is self.owner._sentinel:
            raise IndexError("read past the end of a LinkedSequence")
        return self.node.value

    def write(self, value: Any) -> None:
        if self.node is self.owner._sentinel:
            raise IndexError("write past the end of a LinkedSequence")
        self.node.value = value

    def next(self) -> "NodePosition":
        return NodePosition(self.owner, self.node.next)

    def prev(self) -> "NodePosition":
        return NodePosition(self.owner, self.node.prev)

    def advance(self, n: int) -> "NodePosition":
        node = self.node
        if n >= 0:
            for _ in range(n):
                node = node.next
        else:
            for _ in range(-n):
                node = node.prev
        return NodePosition(self.owner, node)

    def distance_to(self, other: "NodePosition") -> int:
        # Forward walk; *other* must be reachable from self.
        count = 0
        node = self.node
        sentinel = self.owner._sentinel
        while node is not other.node:
            if node is sentinel:
                raise ValueError("position is not reachable by forward stepping")
            node = node.next
            count += 1
        return count

    def swap_with(self, other: "NodePosition") -> None:
        a, b = self.node, other.node
        a.value, b.value = b.value, a.value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NodePosition):
            return NotImplemented
        return self.node is other.node

    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self) -> int:
        return id(self.node)

    def __repr__(self) -> str:
        if self.node is self.owner._sentinel:
            return "NodePosition(<end>)"
        return f"NodePosition({self.node.value!r})"


class LinkedSequence:
    """Circular doubly linked list with a sentinel node marking the end."""

    def __init__(self, items: Iterable[Any] = ()):
        self._sentinel = _Node()
        self._sentinel.prev = self._sentinel
        self._sentinel.next = self._sentinel
        self._size = 0
        self.extend(items)

    def append(self, value: Any) -> None:
        node = _Node(value)
        last = self._sentinel.prev
        node.prev = last
        node.next = self._sentinel
        last.next = node
        self._sentinel.prev = node
        self._size += 1

    def extend(self, items: Iterable[Any]) -> None:
        for item in items:
            self.append(item)

    def begin(self) -> NodePosition:
        return NodePosition(self, self._sentinel.next)

    def end(self) -> NodePosition:
        return NodePosition(self, self._sentinel)

    def position(self, index: int) -> NodePosition:
        if not 0 <= index <= self._size:
            raise IndexError(index)
        return self.begin().advance(index)

    def to_list(self) -> List[Any]:
        return list(self)

    def __iter__(self) -> Iterator[Any]:
        node = self._sentinel.next
        while node is not self._sentinel:
            yield node.value
            node = node.next

    def __len__(self) -> int:
        return self._size

    def __repr__(self) -> str:
        return f"LinkedSequence({self.to_list()!r})"
