"""Core evaluator for the pscript interpreter.

A single re-entrant entry point: source text is lexed into tokens and each
token is stepped against the session State. Named procedures and the
control-flow builtins re-enter `execute_block` on Block source text, so every
side effect lands on the same operand stack and dictionary chain.

Block bodies are re-lexed per call; the token tuple for a given text is
memoised, which never changes what a block does.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Iterable

from pscript.config import get_block_cache_size
from pscript.errors import PSInvalidNumber, PSUndefined
from pscript.reader import lexer
from pscript.reader.lexer import Token, lex
from pscript.state import State
from pscript.types.values import (
    INT32_MAX,
    INT32_MIN,
    Block,
    Float,
    Key,
    Mark,
    Number,
    Value,
)

logger = logging.getLogger(__name__)

_INT_RE = re.compile(r"[+-]?[0-9]+")
_BASE_RE = re.compile(r"[0-9]+")
_DIGITS_RE = re.compile(r"([+-]?)([0-9A-Za-z]+)")


def parse_number(text: str) -> Value:
    """int32 literal -> Number, else float32 literal -> Float."""
    if _INT_RE.fullmatch(text):
        n = int(text)
        if INT32_MIN <= n <= INT32_MAX:
            return Number(n)
    if "_" not in text and text == text.strip():
        try:
            return Float(float(text))
        except ValueError:
            pass
    raise PSInvalidNumber(text)


def parse_radix(text: str) -> Number:
    """Parse ``R#digits`` (R in 2..36) into a Number.

    Malformed literals raise PSUndefined naming the literal.
    """
    base_text, _, digits = text.partition("#")
    if not _BASE_RE.fullmatch(base_text) or not 2 <= int(base_text) <= 36:
        raise PSUndefined(text)
    base = int(base_text)
    m = _DIGITS_RE.fullmatch(digits)
    if m is None or any(int(ch, 36) >= base for ch in m.group(2)):
        raise PSUndefined(text)
    n = int(m.group(2), base)
    if m.group(1) == "-":
        n = -n
    if not INT32_MIN <= n <= INT32_MAX:
        raise PSUndefined(text)
    return Number(n)


def execute(code: str, state: State) -> None:
    """Lex and evaluate a program unit (a REPL line, a file) against `state`."""
    evaluate(lex(code), state)


@lru_cache(maxsize=get_block_cache_size())
def _block_tokens(source: str) -> tuple[Token, ...]:
    return tuple(lex(source))


def execute_block(source: str, state: State) -> None:
    """Evaluate a Block's source text against `state`."""
    evaluate(_block_tokens(source), state)


def evaluate(tokens: Iterable[Token], state: State) -> None:
    for token in tokens:
        if token.kind == lexer.EOI:
            return
        step(token, state)


def step(token: Token, state: State) -> None:
    """Dispatch a single token."""
    if state.capture.wants(token):
        block = state.capture.feed(token)
        if block is not None:
            state.operand_stack.push(block)
        return

    match token.kind:
        case lexer.NUMBER:
            state.operand_stack.push(parse_number(token.text))
        case lexer.RADIX:
            state.operand_stack.push(parse_radix(token.text))
        case lexer.KEY:
            state.operand_stack.push(Key(token.text[1:]))
        case lexer.IDENT:
            call_name(token.text, state)
        case lexer.ARRAY_OPEN:
            state.operand_stack.push(Mark())
        case lexer.ARRAY_CLOSE:
            state.operators["]"](state)
        case _:
            raise PSUndefined(token.text or token.kind)


def call_name(name: str, state: State) -> None:
    """Resolve an identifier: dictionary chain first, then builtins."""
    value = state.dictionaries.lookup(name)
    if value is not None:
        if isinstance(value, Block):
            execute_block(value.source, state)
        else:
            state.operand_stack.push(value.copy())
        return

    op = state.operators.get(name)
    if op is None:
        raise PSUndefined(name)
    op(state)
