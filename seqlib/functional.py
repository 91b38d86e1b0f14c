"""
Functional Helpers
==================
Default comparator / projection objects and small predicate adaptors
shared by every algorithm in the package.
"""

from __future__ import annotations

from typing import Any, Callable

Comparator = Callable[[Any, Any], bool]
Projection = Callable[[Any], Any]


def less(a: Any, b: Any) -> bool:
    """Default strict weak ordering."""
    return a < b


def identity(x: Any) -> Any:
    return x


def not_fn(pred: Comparator) -> Comparator:
    """Logical negation of a binary predicate."""
    def negated(a: Any, b: Any) -> bool:
        return not pred(a, b)
    return negated
