"""
Last-in-first-out container tracking the schema constructs currently open.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any


class Stack:
    """A stack whose pop and peek are safe on an empty stack (they return None)."""

    def __init__(self):
        self._items: list[Any] = []

    def push(self, value: Any) -> None:
        """Push a value onto the top of the stack."""
        self._items.append(value)

    def pop(self) -> Any:
        """Remove and return the top item, or None when the stack is empty."""
        if not self._items:
            return None
        return self._items.pop()

    def peek(self) -> Any:
        """Return the top item without removing it, or None when the stack is empty."""
        if not self._items:
            return None
        return self._items[-1]

    def is_empty(self) -> bool:
        return not self._items

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Any]:
        """Iterate from the top of the stack down to the bottom."""
        return reversed(self._items)

    def __repr__(self) -> str:
        return f"Stack({self._items!r})"
