import io

import pytest

from pscript.evaluation import evaluator
from pscript.interpreter import Interpreter
from pscript.reader.lexer import lex

# Every test runs twice:
# 1) with block bodies memoised by the evaluator's token cache ["memoised"]
# 2) with the cache bypassed so each block call re-lexes its text ["relexed"]
# Both must behave identically; the switch is an autouse fixture so individual
# test files need no changes.


@pytest.fixture(params=["memoised", "relexed"])
def block_cache_mode(request):
    return request.param


@pytest.fixture(autouse=True)
def _force_block_cache_mode(block_cache_mode, monkeypatch):
    if block_cache_mode == "relexed":
        monkeypatch.setattr(evaluator, "_block_tokens", lambda source: tuple(lex(source)))


@pytest.fixture
def out():
    return io.StringIO()


@pytest.fixture
def interp(out):
    """Fresh seeded session whose diagnostic output goes to `out`."""
    return Interpreter(seed=1234, out=out)
