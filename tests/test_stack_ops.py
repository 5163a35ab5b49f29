import pytest

from pscript.builtin.operators import operators
from pscript.errors import PSStackUnderflow
from pscript.types.values import Array, Number

ARITY_OPERATORS = sorted((op.name, op.arity) for op in operators().values() if op.arity > 0)


@pytest.mark.parametrize(
    "source,expected",
    [
        ("1 2 exch", [Number(2), Number(1)]),
        ("1 dup", [Number(1), Number(1)]),
        ("1 2 pop", [Number(1)]),
        ("1 2 clear", []),
        ("count", [Number(0)]),
        ("7 8 count", [Number(7), Number(8), Number(2)]),
    ]
)
def test_stack_shuffles(interp, source, expected):
    assert interp.eval(source) == expected


def test_dup_copies_containers(interp):
    interp.eval("[ 1 ] dup")
    first, second = interp.state.operand_stack.items()
    assert first == second == Array([Number(1)])
    assert first is not second


@pytest.mark.parametrize("name,arity", ARITY_OPERATORS)
def test_underflow_leaves_stack_unchanged(interp, name, arity):
    # one operand short of the declared arity
    interp.eval(" ".join(["9"] * (arity - 1)))
    before = interp.stack
    with pytest.raises(PSStackUnderflow) as info:
        interp.state.operators[name](interp.state)
    assert info.value.name == name
    assert str(info.value) == f"/stackunderflow in {name}"
    assert interp.stack == before


def test_underflow_through_evaluator(interp):
    with pytest.raises(PSStackUnderflow):
        interp.eval("1 add")
    assert interp.stack == [Number(1)]


def test_declared_arities():
    table = operators()
    expected = {
        "add": 2, "sub": 2, "mul": 2, "div": 2, "neg": 1, "sqrt": 1, "rand": 0,
        "exch": 2, "dup": 1, "pop": 1, "clear": 0, "count": 0, "pstack": 0, "pdict": 0,
        "def": 2, "exec": 1, "repeat": 2, "for": 4, "if": 2, "ifelse": 3,
        "true": 0, "false": 0, "eq": 2, "ne": 2, "[": 0, "]": 1, "length": 1,
        "forall": 2, "dict": 1, "begin": 1, "end": 0, "cvi": 1,
    }
    for name, arity in expected.items():
        assert table[name].arity == arity, name
