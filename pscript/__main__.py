import argparse
import logging
import sys

from pscript.config import get_log_level
from pscript.errors import PSError
from pscript.interpreter import Interpreter


def run_file(interp: Interpreter, filepath: str, show_stack: bool = False) -> int:
    """Run a whole file; returns the process exit status."""
    try:
        with open(filepath, 'r', encoding='utf-8') as f:
            code = f.read()
    except OSError as e:
        print(f"Error: Could not read file '{filepath}': {e}", file=sys.stderr)
        return 1

    try:
        interp.run(code)
    except PSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if show_stack:
        for item in reversed(interp.stack):
            print(repr(item))
    return 0


def repl(interp: Interpreter) -> int:
    """Interactive loop; errors are reported and the session keeps its state."""
    try:
        import readline as _  # noqa: F401  line editing when available
    except ImportError:
        pass

    while True:
        try:
            line = input(interp.prompt)
        except KeyboardInterrupt:
            print()
            if interp.capturing:
                # abandon the open block, keep the session
                interp.reset_capture()
                continue
            return 0
        except EOFError:
            print()
            return 0
        if not line.strip():
            continue
        if line.strip() == "quit" and not interp.capturing:
            return 0
        try:
            interp.eval(line)
        except PSError as e:
            print(f"Error: {e}", file=sys.stderr)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog="pscript",
        description="A small PostScript-like stack language interpreter.",
    )
    parser.add_argument("filepath", nargs="?", help="Source file to execute; omit for a REPL.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the rand operator.")
    parser.add_argument("--pstack", action="store_true", help="Print the final stack after running a file.")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Logging level (default from PSCRIPT_LOG_LEVEL).",
    )
    args = parser.parse_args(argv)

    level = get_log_level() if args.log_level is None else args.log_level
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    interp = Interpreter(seed=args.seed)
    if args.filepath:
        return run_file(interp, args.filepath, args.pstack)
    return repl(interp)


if __name__ == "__main__":
    sys.exit(main())
