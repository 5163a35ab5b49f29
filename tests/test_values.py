import math

import pytest

from pscript.errors import PSTypeCheck
from pscript.types.values import (
    INT32_MAX,
    INT32_MIN,
    Array,
    Block,
    Bool,
    Dict,
    Float,
    Key,
    Mark,
    Number,
    to_float32,
    wrap_int32,
)


@pytest.mark.parametrize(
    "n,expected",
    [
        (0, 0),
        (INT32_MAX, INT32_MAX),
        (INT32_MAX + 1, INT32_MIN),
        (INT32_MIN - 1, INT32_MAX),
        (1 << 32, 0),
        (-1, -1),
    ]
)
def test_wrap_int32(n, expected):
    assert wrap_int32(n) == expected


def test_float32_rounding_and_overflow():
    assert to_float32(0.1) != 0.1
    assert to_float32(0.5) == 0.5
    assert to_float32(1e40) == math.inf
    assert to_float32(-1e40) == -math.inf


def test_equality_is_variant_sensitive():
    assert Number(1) == Number(1)
    assert Number(1) != Float(1.0)
    assert Bool(True) != Number(1)
    assert Key("a") != Block("a")
    assert Mark() == Mark()
    assert Array([Number(1), Float(2.0)]) == Array([Number(1), Float(2.0)])
    assert Array([Number(1)]) != Array([Float(1.0)])
    assert Dict({"x": Number(1)}) == Dict({"x": Number(1)})


def test_nan_is_never_equal():
    nan = Float(math.nan)
    assert nan != nan
    assert Array([nan]) != Array([nan])
    assert Dict({"x": nan}) != Dict({"x": nan})


@pytest.mark.parametrize("source", ["0 0 div dup eq", "[ 0 0 div ] dup eq", "[ 1 [ 0 0 div ] ] dup ne not"])
def test_nan_values_never_equal_their_copy(interp, source):
    assert interp.eval(source)[-1] == Bool(False)


@pytest.mark.parametrize(
    "value,method,expected",
    [
        (Number(3), "as_int", 3),
        (Number(3), "as_float", 3.0),
        (Float(2.5), "as_float", 2.5),
        (Key("x"), "as_key", "x"),
        (Block("1 2 add"), "as_block", "1 2 add"),
        (Array([Number(1)]), "as_array", [Number(1)]),
        (Bool(False), "as_bool", False),
        (Dict({"a": Number(1)}), "into_dict", {"a": Number(1)}),
    ]
)
def test_coercions_succeed(value, method, expected):
    assert getattr(value, method)() == expected


@pytest.mark.parametrize(
    "value,method,expected_kind",
    [
        (Float(1.0), "as_int", "int"),
        (Key("x"), "as_float", "float"),
        (Number(1), "as_key", "key"),
        (Key("x"), "as_block", "block"),
        (Mark(), "as_array", "array"),
        (Number(0), "as_bool", "bool"),
        (Array(), "into_dict", "dict"),
    ]
)
def test_coercions_fail_with_typecheck(value, method, expected_kind):
    with pytest.raises(PSTypeCheck) as info:
        getattr(value, method)()
    assert info.value.expected == expected_kind
    assert info.value.actual == repr(value)


@pytest.mark.parametrize(
    "value,text",
    [
        (Number(-3), "Number(-3)"),
        (Float(2.0), "Float(2.0)"),
        (Float(0.1), "Float(0.1)"),
        (Bool(True), "Bool(true)"),
        (Key("x"), "Key('x')"),
        (Block("1 add"), "Block('1 add')"),
        (Mark(), "Mark"),
        (Array([Number(1), Mark()]), "Array([Number(1), Mark])"),
        (Dict({"x": Number(1)}), "Dict({'x': Number(1)})"),
    ]
)
def test_debug_forms(value, text):
    assert repr(value) == text


def test_copy_does_not_alias_containers():
    inner = Array([Number(1)])
    outer = Array([inner])
    clone = outer.copy()
    assert clone == outer
    clone.items[0].items.append(Number(2))
    assert inner.items == [Number(1)]
