import pytest

from pscript.errors import PSTypeCheck
from pscript.types.values import Bool, Number


def _numbers(*ns):
    return [Number(n) for n in ns]


@pytest.mark.parametrize(
    "source,expected",
    [
        ("0 5 { add } repeat", _numbers(10)),
        ("3 { } repeat", _numbers(0, 1, 2)),
        ("0 { 1 } repeat", []),
        ("-1 { 1 } repeat", []),
        ("0 1 1 4 { add } for", _numbers(10)),
        ("1 2 7 { } for", _numbers(1, 3, 5, 7)),
        ("10 -3 1 { } for", _numbers(10, 7, 4, 1)),
        ("5 1 1 { } for", []),
        ("1 0 5 { } for", []),
        ("true { 1 } if", _numbers(1)),
        ("false { 1 } if", []),
        ("true { 1 } { 2 } ifelse", _numbers(1)),
        ("false { 1 } { 2 } ifelse", _numbers(2)),
        ("{ 3 4 } exec", _numbers(3, 4)),
        ("{ } exec", []),
    ]
)
def test_control_flow(interp, source, expected):
    assert interp.eval(source) == expected


@pytest.mark.parametrize(
    "source,expected",
    [
        ("1 1 eq", True),
        ("1 2 eq", False),
        ("1 1.0 eq", False),
        ("1 1.0 ne", True),
        ("/a /a eq", True),
        ("{ 1 } { 1 } eq", True),
        ("[ 1 2 ] [ 1 2 ] eq", True),
        ("[ 1 2 ] [ 1 2.0 ] eq", False),
        ("true true eq", True),
        ("1 2 lt", True),
        ("2 2 le", True),
        ("2 1.5 gt", True),
        ("1.5 2 ge", False),
        ("true not", False),
        ("true false and", False),
        ("true false or", True),
    ]
)
def test_comparisons(interp, source, expected):
    assert interp.eval(source) == [Bool(expected)]


@pytest.mark.parametrize(
    "source",
    [
        "1 { 1 } if",
        "/a { 1 } repeat",
        "true 1 if",
        "1 { } { } ifelse",
        "1 1.5 5 { } for",
        "/a 1 lt",
        "1 not",
        "42 exec",
    ]
)
def test_control_flow_typecheck(interp, source):
    with pytest.raises(PSTypeCheck):
        interp.eval(source)


def test_condition_is_popped_before_typecheck(interp):
    with pytest.raises(PSTypeCheck):
        interp.eval("5 1 { 2 } if")
    assert interp.stack == [Number(5)]


def test_zero_increment_runs_nothing(interp, caplog):
    with caplog.at_level("WARNING", logger="pscript"):
        assert interp.eval("1 0 3 { 99 } for") == []
    assert "zero increment" in caplog.text


def test_loop_body_sees_shared_state(interp):
    interp.eval("/total 0 def 1 1 3 { total add /total exch def } for")
    assert interp.eval("total") == _numbers(6)
