from __future__ import annotations

import logging
import random
from typing import TextIO

from pscript.builtin.operators import operators
from pscript.config import get_random_seed
from pscript.errors import PSSyntaxError
from pscript.evaluation.evaluator import execute
from pscript.state import State
from pscript.types.values import Value

logger = logging.getLogger(__name__)


class Interpreter:
    """
    Owns one interpreter session: operand stack, dictionary chain and the
    block-capture state all persist across calls to `eval`, so code can be
    fed a line at a time.
    """

    def __init__(
        self,
        *,
        rng: random.Random | None = None,
        seed: int | None = None,
        out: TextIO | None = None,
    ):
        if rng is None:
            rng = random.Random(seed if seed is not None else get_random_seed())
        self.state = State(operators=operators(), rng=rng, out=out)

    @property
    def stack(self) -> list[Value]:
        """Operand stack snapshot, bottom to top."""
        return self.state.operand_stack.items()

    @property
    def capturing(self) -> bool:
        return self.state.capture.capturing

    @property
    def prompt(self) -> str:
        if self.capturing:
            return "..> "
        depth = len(self.state.operand_stack)
        return "PS> " if depth == 0 else f"PS<{depth}> "

    def eval(self, code: str) -> list[Value]:
        """Evaluate a program unit; an open block carries over to the next call."""
        execute(code, self.state)
        return self.stack

    def run(self, source: str) -> list[Value]:
        """Evaluate a complete program; an unterminated block is an error."""
        self.eval(source)
        if self.capturing:
            self.reset_capture()
            raise PSSyntaxError("{", "unterminated block")
        return self.stack

    def reset_capture(self) -> None:
        if self.capturing:
            logger.debug("discarding partial block")
        self.state.capture.reset()
