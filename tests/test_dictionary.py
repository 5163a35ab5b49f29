import pytest

from pscript.errors import PSStackUnderflow
from pscript.types.dictionary import DictChain
from pscript.types.values import Number


@pytest.fixture
def chain():
    c = DictChain()
    c.define("x", Number(1))
    return c


def test_lookup_missing_is_none(chain):
    assert chain.lookup("nope") is None


def test_define_writes_current_only(chain):
    chain.enter({})
    chain.define("x", Number(2))
    assert chain.lookup("x") == Number(2)
    chain.exit()
    assert chain.lookup("x") == Number(1)


def test_lookup_newest_enclosing_first(chain):
    chain.enter({"x": Number(2)})
    chain.enter({})
    assert chain.lookup("x") == Number(2)
    assert chain.depth == 2


def test_enter_copies_mapping(chain):
    mapping = {"y": Number(5)}
    chain.enter(mapping)
    chain.define("z", Number(6))
    assert "z" not in mapping


def test_exit_restores_previous_current(chain):
    before = chain.current
    chain.enter({"a": Number(1)})
    chain.exit()
    assert chain.current is before
    assert chain.depth == 0


def test_exit_without_enclosing_underflows(chain):
    with pytest.raises(PSStackUnderflow) as info:
        chain.exit()
    assert info.value.name == "end"
    assert chain.lookup("x") == Number(1)


def test_str_and_repr(chain):
    assert str(chain) == "{x: Number(1)}"
    chain.enter({"y": Number(2)})
    assert str(chain) == "{y: Number(2)} -> ..."
    assert repr(chain) == "<DictChain: {y: Number(2)} -> {x: Number(1)}>"
