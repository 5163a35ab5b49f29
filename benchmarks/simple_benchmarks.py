from timeit import timeit

from pscript.interpreter import Interpreter
from pscript.types.dictionary import DictChain
from pscript.types.values import Number
from pscript.evaluation import evaluator


def time_interpreter(code: str, rounds: int) -> float:
    """Time a program on a fresh session per round (operand stack cleared)."""
    itp = Interpreter(seed=0)
    # Warmup
    itp.eval(code)

    def run():
        itp.state.operand_stack.clear()
        itp.eval(code)

    return timeit(run, number=rounds)


def time_uncached(code: str, rounds: int) -> float:
    """Same as time_interpreter but with the block token cache emptied per round."""
    itp = Interpreter(seed=0)
    itp.eval(code)

    def run():
        evaluator._block_tokens.cache_clear()
        itp.state.operand_stack.clear()
        itp.eval(code)

    return timeit(run, number=rounds)


# Pure scope benchmark: lookup through a deep dictionary chain

def bench_lookup_chain(n_dicts: int = 1000, n_lookups: int = 10000) -> float:
    chain = DictChain()
    chain.define("answer", Number(42))
    for _ in range(n_dicts):
        chain.enter({})
    # Warmup
    for _ in range(1000):
        chain.lookup("answer")
    # Timed
    return timeit(lambda: chain.lookup("answer"), number=n_lookups)


REPEAT_ADD_CODE = "0 1000 { add } repeat"

FACTORIAL_CODE = r"""
/fact { dup 1 le { pop 1 } { dup 1 sub fact mul } ifelse } def
12 fact
"""

FOR_SUM_CODE = "0 1 1 500 { add } for"

FORALL_CODE = "0 [ 1 2 3 4 5 6 7 8 9 10 ] { add } forall"


def _print_pair(name: str, code: str, rounds: int) -> None:
    tcached = time_interpreter(code, rounds)
    tcold = time_uncached(code, rounds)
    print(f"Benchmark: {name}")
    print(f"  memoised blocks: {tcached:.6f}s  |  re-lexed blocks: {tcold:.6f}s  [rounds={rounds}]")


if __name__ == "__main__":
    print("Benchmark: dictionary chain lookup (1000 enclosing dicts)")
    print(f"  time: {bench_lookup_chain():.6f}s")

    _print_pair("repeat add", REPEAT_ADD_CODE, rounds=50)
    _print_pair("recursive factorial", FACTORIAL_CODE, rounds=500)
    _print_pair("for sum 1..500", FOR_SUM_CODE, rounds=50)
    _print_pair("forall over array", FORALL_CODE, rounds=2000)
