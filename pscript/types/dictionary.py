"""Dictionary chain (scope resolver) for pscript.

The chain is one *current* dictionary plus a stack of *enclosing* ones, the
most recently entered last. Lookups check the current dictionary first, then
the enclosing dictionaries from newest to oldest. Definitions always land in
the current dictionary. ``begin``/``end`` move ownership of "current" into
and out of the enclosing stack; no dictionary refers back to another.
"""

from __future__ import annotations

import logging
from io import StringIO
from typing import Optional, Mapping

from pscript.errors import PSStackUnderflow
from pscript.types.values import Value

logger = logging.getLogger(__name__)


class DictChain:
    """Current dictionary plus the saved enclosing dictionaries."""

    __slots__ = ("current", "enclosing")

    def __init__(self, current: Optional[dict[str, Value]] = None):
        self.current: dict[str, Value] = current if current is not None else {}
        self.enclosing: list[dict[str, Value]] = []

    def lookup(self, name: str) -> Optional[Value]:
        """Return the binding of `name`, or None if no dictionary binds it."""
        if name in self.current:
            return self.current[name]
        for frame in reversed(self.enclosing):
            if name in frame:
                return frame[name]
        return None

    def define(self, name: str, value: Value) -> None:
        """Bind `name` in the current dictionary only."""
        self.current[name] = value

    def enter(self, mapping: Mapping[str, Value]) -> None:
        """Save the current dictionary and make `mapping` current."""
        self.enclosing.append(self.current)
        self.current = dict(mapping)
        logger.debug("begin: dictionary depth now %d", self.depth)

    def exit(self) -> None:
        """Discard the current dictionary and restore the newest enclosing one.

        Raises PSStackUnderflow if nothing encloses the current dictionary.
        """
        if not self.enclosing:
            raise PSStackUnderflow("end")
        self.current = self.enclosing.pop()
        logger.debug("end: dictionary depth now %d", self.depth)

    @property
    def depth(self) -> int:
        return len(self.enclosing)

    def _write_vars(self, buffer: StringIO, frame: dict[str, Value]) -> None:
        """Write one dictionary's bindings into the buffer in a compact form."""
        buffer.write("{")
        buffer.write(", ".join(f"{k}: {v!r}" for k, v in frame.items()))
        buffer.write("}")

    def __str__(self) -> str:
        """Current dictionary with an indicator for enclosing ones."""
        with StringIO() as buffer:
            self._write_vars(buffer, self.current)
            if self.enclosing:
                buffer.write(" -> ...")
            return buffer.getvalue()

    def __repr__(self) -> str:
        with StringIO() as buffer:
            buffer.write("<DictChain: ")
            chain = []
            for frame in [self.current, *reversed(self.enclosing)]:
                with StringIO() as frame_buf:
                    self._write_vars(frame_buf, frame)
                    chain.append(frame_buf.getvalue())
            buffer.write(" -> ".join(chain))
            buffer.write(">")
            return buffer.getvalue()
