"""Builtin operators for the pscript runtime.

This module defines arithmetic, stack manipulation, relational, control
flow, array and dictionary operators, and the table that exposes them to
the evaluator.

Every builtin is wrapped in an Operator that checks the operand stack holds
at least the operator's declared arity before the body runs; a shallow stack
raises PSStackUnderflow without touching anything. Type errors raised by a
body are tagged with the operator name. Operands popped before a failing
coercion are not pushed back.
"""
from __future__ import annotations

import logging
import math

from pscript import OperatorFn
from pscript.errors import PSTypeCheck, PSStackUnderflow, PSUndefined, PSError
from pscript.evaluation.evaluator import execute_block
from pscript.state import State
from pscript.types.values import (
    INT32_MAX,
    INT32_MIN,
    Array,
    Block,
    Bool,
    Dict,
    Float,
    Mark,
    Number,
    to_float32,
)

logger = logging.getLogger(__name__)


class Operator:
    """A named builtin with a fixed minimum operand-stack depth."""

    __slots__ = ("name", "arity", "fn")

    def __init__(self, name: str, arity: int, fn: OperatorFn):
        self.name = name
        self.arity = arity
        self.fn = fn

    @property
    def signature(self) -> str:
        doc = (self.fn.__doc__ or "").strip()
        return doc.splitlines()[0] if doc else self.name

    def __call__(self, state: State) -> None:
        if len(state.operand_stack) < self.arity:
            raise PSStackUnderflow(self.name)
        try:
            self.fn(state)
        except PSTypeCheck as err:
            if err.name is None:
                err.name = self.name
            raise
        except PSError as err:
            logger.debug("%s failed: %s", self.name, err)
            raise

    def __repr__(self):
        return f"Operator({self.name!r}, {self.arity})"


OperatorMap = dict[str, Operator]


def _float_div(a: float, b: float) -> float:
    if b == 0.0:
        if a == 0.0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


# -------------------------------
# Arithmetic
# -------------------------------
def add(state: State) -> None:
    """a b add -> a+b (integers)"""
    stack = state.operand_stack
    b = stack.pop().as_int()
    a = stack.pop().as_int()
    stack.push(Number(a + b))


def sub(state: State) -> None:
    """a b sub -> a-b (integers)"""
    stack = state.operand_stack
    b = stack.pop().as_int()
    a = stack.pop().as_int()
    stack.push(Number(a - b))


def mul(state: State) -> None:
    """a b mul -> a*b (integers, else floats)"""
    stack = state.operand_stack
    b = stack.pop()
    a = stack.pop()
    if isinstance(a, Number) and isinstance(b, Number):
        stack.push(Number(a.value * b.value))
        return
    stack.push(Float(a.as_float() * b.as_float()))


def div(state: State) -> None:
    """a b div -> a/b (always a float)"""
    stack = state.operand_stack
    b = stack.pop().as_float()
    a = stack.pop().as_float()
    stack.push(Float(_float_div(a, b)))


def mod(state: State) -> None:
    """a b mod -> remainder of a/b, sign of a (integers)"""
    stack = state.operand_stack
    b = stack.pop().as_int()
    a = stack.pop().as_int()
    if b == 0:
        raise PSTypeCheck("nonzero int", repr(Number(b)))
    stack.push(Number(int(math.fmod(a, b))))


def neg(state: State) -> None:
    """a neg -> -a (integer)"""
    stack = state.operand_stack
    stack.push(Number(-stack.pop().as_int()))


def sqrt(state: State) -> None:
    """a sqrt -> square root of a as a float"""
    stack = state.operand_stack
    n = stack.pop().as_float()
    stack.push(Float(math.sqrt(n) if n >= 0 else math.nan))


def rand(state: State) -> None:
    """rand -> pseudo-random integer"""
    state.operand_stack.push(Number(state.rng.getrandbits(32)))


def cvi(state: State) -> None:
    """a cvi -> a truncated to an integer"""
    stack = state.operand_stack
    item = stack.pop()
    if isinstance(item, Number):
        stack.push(item)
    elif isinstance(item, Float):
        stack.push(Number(_saturate_int32(item.value)))
    # any other variant is dropped without error


def _saturate_int32(x: float) -> int:
    if math.isnan(x):
        return 0
    if x >= INT32_MAX:
        return INT32_MAX
    if x <= INT32_MIN:
        return INT32_MIN
    return int(x)


# -------------------------------
# Stack
# -------------------------------
def exch(state: State) -> None:
    """a b exch -> b a"""
    stack = state.operand_stack
    b = stack.pop()
    a = stack.pop()
    stack.push(b)
    stack.push(a)


def dup(state: State) -> None:
    """a dup -> a a"""
    stack = state.operand_stack
    a = stack.peek()
    stack.push(a.copy())


def pop(state: State) -> None:
    """a pop -> (discards a)"""
    state.operand_stack.pop()


def clear(state: State) -> None:
    """clear -> (empties the operand stack)"""
    state.operand_stack.clear()


def count(state: State) -> None:
    """count -> n, the stack depth before the call"""
    stack = state.operand_stack
    stack.push(Number(len(stack)))


def pstack(state: State) -> None:
    """pstack -> (prints the stack, top first)"""
    for item in reversed(state.operand_stack.items()):
        print(repr(item), file=state.sink)


def pdict(state: State) -> None:
    """pdict -> (prints the current dictionary)"""
    for name, value in state.dictionaries.current.items():
        print(f"{name}: {value!r}", file=state.sink)


def print_top(state: State) -> None:
    """a = -> (prints and discards a)"""
    print(repr(state.operand_stack.pop()), file=state.sink)


# -------------------------------
# Definitions
# -------------------------------
def define(state: State) -> None:
    """/key value def -> (binds key in the current dictionary)"""
    stack = state.operand_stack
    value = stack.pop()
    name = stack.pop().as_key()
    state.dictionaries.define(name, value)


def load(state: State) -> None:
    """/key load -> value bound to key"""
    name = state.operand_stack.pop().as_key()
    value = state.dictionaries.lookup(name)
    if value is None:
        raise PSUndefined(name)
    state.operand_stack.push(value.copy())


# -------------------------------
# Control flow
# -------------------------------
def exec_block(state: State) -> None:
    """proc exec -> (runs proc)"""
    source = state.operand_stack.pop().as_block()
    execute_block(source, state)


def repeat(state: State) -> None:
    """n proc repeat -> (runs proc n times, index pushed first)"""
    stack = state.operand_stack
    source = stack.pop().as_block()
    n = stack.pop().as_int()
    for i in range(n):
        stack.push(Number(i))
        execute_block(source, state)


def for_loop(state: State) -> None:
    """init incr limit proc for -> (runs proc for each i, i pushed first)"""
    stack = state.operand_stack
    source = stack.pop().as_block()
    limit = stack.pop().as_int()
    increment = stack.pop().as_int()
    init = stack.pop().as_int()
    if increment == 0:
        logger.warning("for: zero increment, loop body skipped")
        return
    stop = limit + 1 if increment > 0 else limit - 1
    for i in range(init, stop, increment):
        stack.push(Number(i))
        execute_block(source, state)


def if_block(state: State) -> None:
    """bool proc if -> (runs proc if bool is true)"""
    stack = state.operand_stack
    source = stack.pop().as_block()
    if stack.pop().as_bool():
        execute_block(source, state)


def ifelse(state: State) -> None:
    """bool then else ifelse -> (runs then or else)"""
    stack = state.operand_stack
    else_source = stack.pop().as_block()
    then_source = stack.pop().as_block()
    cond = stack.pop().as_bool()
    execute_block(then_source if cond else else_source, state)


# -------------------------------
# Booleans and comparison
# -------------------------------
def push_true(state: State) -> None:
    """true -> Bool(true)"""
    state.operand_stack.push(Bool(True))


def push_false(state: State) -> None:
    """false -> Bool(false)"""
    state.operand_stack.push(Bool(False))


def eq(state: State) -> None:
    """a b eq -> bool, structural equality (1 1.0 eq is false)"""
    stack = state.operand_stack
    b = stack.pop()
    a = stack.pop()
    stack.push(Bool(a == b))


def ne(state: State) -> None:
    """a b ne -> bool, structural inequality"""
    stack = state.operand_stack
    b = stack.pop()
    a = stack.pop()
    stack.push(Bool(a != b))


def _compare(state: State, test) -> None:
    stack = state.operand_stack
    b = stack.pop()
    a = stack.pop()
    if isinstance(a, Number) and isinstance(b, Number):
        stack.push(Bool(test(a.value, b.value)))
        return
    stack.push(Bool(test(a.as_float(), b.as_float())))


def lt(state: State) -> None:
    """a b lt -> bool, a < b"""
    _compare(state, lambda a, b: a < b)


def le(state: State) -> None:
    """a b le -> bool, a <= b"""
    _compare(state, lambda a, b: a <= b)


def gt(state: State) -> None:
    """a b gt -> bool, a > b"""
    _compare(state, lambda a, b: a > b)


def ge(state: State) -> None:
    """a b ge -> bool, a >= b"""
    _compare(state, lambda a, b: a >= b)


def logical_not(state: State) -> None:
    """bool not -> negated bool"""
    stack = state.operand_stack
    stack.push(Bool(not stack.pop().as_bool()))


def logical_and(state: State) -> None:
    """a b and -> bool"""
    stack = state.operand_stack
    b = stack.pop().as_bool()
    a = stack.pop().as_bool()
    stack.push(Bool(a and b))


def logical_or(state: State) -> None:
    """a b or -> bool"""
    stack = state.operand_stack
    b = stack.pop().as_bool()
    a = stack.pop().as_bool()
    stack.push(Bool(a or b))


# -------------------------------
# Arrays and dictionaries
# -------------------------------
def mark(state: State) -> None:
    """[ -> mark"""
    state.operand_stack.push(Mark())


def array_close(state: State) -> None:
    """mark v1 ... vn ] -> array"""
    stack = state.operand_stack
    stack.push(Array(stack.take_to_mark()))


def array_length(state: State) -> None:
    """array length -> n"""
    stack = state.operand_stack
    stack.push(Number(len(stack.pop().as_array())))


def get(state: State) -> None:
    """array index get -> element, or dict /key get -> value"""
    stack = state.operand_stack
    index = stack.pop()
    container = stack.pop()
    if isinstance(container, Dict):
        name = index.as_key()
        if name not in container.entries:
            raise PSUndefined(name)
        stack.push(container.entries[name].copy())
        return
    items = container.as_array()
    i = index.as_int()
    if not 0 <= i < len(items):
        raise PSTypeCheck(f"index in 0..{len(items) - 1}", repr(index))
    stack.push(items[i].copy())


def array_forall(state: State) -> None:
    """array proc forall -> (runs proc per element, element pushed first)"""
    stack = state.operand_stack
    source = stack.pop().as_block()
    items = stack.pop().as_array()
    for elem in items:
        stack.push(elem.copy())
        execute_block(source, state)


def new_dict(state: State) -> None:
    """n dict -> empty dictionary (n is a capacity hint)"""
    stack = state.operand_stack
    stack.pop().as_int()
    stack.push(Dict())


def begin(state: State) -> None:
    """dict begin -> (makes dict current)"""
    entries = state.operand_stack.pop().into_dict()
    state.dictionaries.enter(entries)


def end(state: State) -> None:
    """end -> (restores the enclosing dictionary)"""
    state.dictionaries.exit()


def operators() -> OperatorMap:
    """Build the builtin operator table."""
    table = [
        # math
        Operator("add", 2, add),
        Operator("sub", 2, sub),
        Operator("mul", 2, mul),
        Operator("div", 2, div),
        Operator("mod", 2, mod),
        Operator("neg", 1, neg),
        Operator("sqrt", 1, sqrt),
        Operator("rand", 0, rand),
        Operator("cvi", 1, cvi),
        # stack
        Operator("exch", 2, exch),
        Operator("dup", 1, dup),
        Operator("pop", 1, pop),
        Operator("clear", 0, clear),
        Operator("count", 0, count),
        Operator("pstack", 0, pstack),
        Operator("pdict", 0, pdict),
        Operator("=", 1, print_top),
        # def
        Operator("def", 2, define),
        Operator("load", 1, load),
        # control
        Operator("exec", 1, exec_block),
        Operator("repeat", 2, repeat),
        Operator("for", 4, for_loop),
        Operator("if", 2, if_block),
        Operator("ifelse", 3, ifelse),
        # booleans
        Operator("true", 0, push_true),
        Operator("false", 0, push_false),
        Operator("eq", 2, eq),
        Operator("ne", 2, ne),
        Operator("lt", 2, lt),
        Operator("le", 2, le),
        Operator("gt", 2, gt),
        Operator("ge", 2, ge),
        Operator("not", 1, logical_not),
        Operator("and", 2, logical_and),
        Operator("or", 2, logical_or),
        # array
        Operator("[", 0, mark),
        Operator("]", 1, array_close),
        Operator("length", 1, array_length),
        Operator("get", 2, get),
        Operator("forall", 2, array_forall),
        # dict
        Operator("dict", 1, new_dict),
        Operator("begin", 1, begin),
        Operator("end", 0, end),
    ]
    return {op.name: op for op in table}
