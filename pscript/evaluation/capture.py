"""Block-capture state machine.

Turns nested ``{ ... }`` token runs into Block values. While idle (depth 0)
the evaluator executes tokens itself; once a ``{`` is seen every token is
buffered verbatim until the matching ``}`` closes the outermost brace.
"""

from __future__ import annotations

import logging
from typing import Optional

from pscript.errors import PSSyntaxError
from pscript.reader.lexer import Token, BLOCK_OPEN, BLOCK_CLOSE
from pscript.types.values import Block

logger = logging.getLogger(__name__)


class BlockCapture:
    __slots__ = ("depth", "buffer")

    def __init__(self):
        self.depth = 0
        self.buffer: list[str] = []

    @property
    def capturing(self) -> bool:
        return self.depth > 0

    def wants(self, token: Token) -> bool:
        """True if `token` must be handled here rather than executed."""
        return self.depth > 0 or token.kind in (BLOCK_OPEN, BLOCK_CLOSE)

    def feed(self, token: Token) -> Optional[Block]:
        """Advance the machine by one token.

        Returns the finished Block when the outermost brace closes, else None.
        Raises PSSyntaxError on a '}' with no open block.
        """
        if token.kind == BLOCK_OPEN:
            self.depth += 1
            self.buffer.append(token.text)
            return None

        if token.kind == BLOCK_CLOSE:
            if self.depth == 0:
                raise PSSyntaxError("}", "no open block")
            self.depth -= 1
            if self.depth > 0:
                self.buffer.append(token.text)
                return None
            # drop the opening '{'
            block = Block(" ".join(self.buffer[1:]))
            self.buffer.clear()
            logger.debug("captured %r", block)
            return block

        self.buffer.append(token.text)
        return None

    def reset(self) -> None:
        """Discard any partially captured block."""
        self.depth = 0
        self.buffer.clear()
