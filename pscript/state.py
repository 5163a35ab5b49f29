from __future__ import annotations

import random
import sys
from dataclasses import dataclass, field
from typing import Any, TextIO

from pscript.evaluation.capture import BlockCapture
from pscript.types.dictionary import DictChain
from pscript.types.stack import OperandStack


@dataclass
class State:
    """Everything one interpreter session mutates.

    Created once per session and threaded explicitly through the evaluator
    and every builtin; nothing here is process-global.
    """
    operand_stack: OperandStack = field(default_factory=OperandStack)
    dictionaries: DictChain = field(default_factory=DictChain)
    capture: BlockCapture = field(default_factory=BlockCapture)
    operators: dict[str, Any] = field(default_factory=dict)
    rng: random.Random = field(default_factory=random.Random)
    out: TextIO | None = None

    @property
    def sink(self) -> TextIO:
        """Where diagnostic operators write; stdout unless redirected."""
        return self.out if self.out is not None else sys.stdout
