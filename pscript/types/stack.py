from __future__ import annotations

from typing import Iterator

from pscript.errors import PSStackUnderflow, PSUnmatchedMark
from pscript.types.values import Value, Mark


class OperandStack:
    """LIFO stack of Values. Popping an empty stack raises PSStackUnderflow."""

    __slots__ = ("_items",)

    def __init__(self, items=()):
        self._items: list[Value] = list(items)

    def push(self, value: Value) -> None:
        self._items.append(value)

    def pop(self, name: str | None = None) -> Value:
        if not self._items:
            raise PSStackUnderflow(name)
        return self._items.pop()

    def peek(self, name: str | None = None) -> Value:
        if not self._items:
            raise PSStackUnderflow(name)
        return self._items[-1]

    def clear(self) -> None:
        self._items.clear()

    def take_to_mark(self) -> list[Value]:
        """Remove the nearest Mark and everything above it.

        Returns the values that were above the mark, bottom to top.
        Raises PSUnmatchedMark (leaving the stack untouched) if there is none.
        """
        for pos in range(len(self._items) - 1, -1, -1):
            if isinstance(self._items[pos], Mark):
                taken = self._items[pos + 1:]
                del self._items[pos:]
                return taken
        raise PSUnmatchedMark("--]--")

    def items(self) -> list[Value]:
        """Snapshot, bottom to top."""
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Value]:
        return iter(self._items)

    def __repr__(self):
        return f"OperandStack({self._items!r})"
