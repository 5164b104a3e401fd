from __future__ import annotations

import sys
import time
import traceback
from pathlib import Path
from typing import Optional, TextIO

from .executor import execute
from .lexer import LexError, tokenize
from .types import BasicRuntimeError
from .utils import debug_py_trace_enabled

def run(src: str, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> str:
    """Tokenize and execute a program; return the success message."""
    lines = tokenize(src)
    return execute(lines, stdin=stdin, stdout=stdout)

def _load_source(arg: str) -> str:
    """
    Resolve CLI input into source text.
    - "-" => read stdin.
    - Otherwise the argument is a path to a program file.
    """

    if arg == "-":
        data = sys.stdin.read()
        if not data:
            raise SystemExit("No input provided on stdin")
        return data

    return Path(arg).read_text(encoding="utf-8")

def _print_py_trace(exc: BaseException) -> None:
    if not debug_py_trace_enabled():
        return

    print("\nPython traceback:", file=sys.stderr)
    print("".join(traceback.format_tb(exc.__traceback__)), file=sys.stderr, end="")

def format_failure(err: BasicRuntimeError) -> str:
    line, column, message = err.as_triple()
    return f"Execution failed at {line}:{column} because: {message}"

def main() -> None:
    timed = False
    arg = None
    it = iter(sys.argv[1:])

    for token in it:
        if token == "--time":
            timed = True
            continue

        if token in ("-h", "--help"):
            print("usage: yarxbi [--time] [PATH | -]")
            return

        if arg is None:
            arg = token
        else:
            raise SystemExit(f"Unexpected argument: {token}")

    if arg is None:
        if sys.stdin.isatty():
            from .repl import repl  # prompt_toolkit is only needed interactively
            repl()
            return
        arg = "-"

    started = time.perf_counter()

    try:
        source = _load_source(arg)
    except OSError as exc:
        print(f"Getting file contents failed with error: {exc}", file=sys.stderr)
        sys.exit(1)

    # Lex errors are reported before any statement runs.
    try:
        lines = tokenize(source)
    except LexError as exc:
        print(f"Error at line {exc.line}: {exc.message}", file=sys.stderr)
        sys.exit(1)

    try:
        # Programs read INPUT from stdin, so a program piped in on stdin
        # leaves nothing for INPUT to consume.
        msg = execute(lines)
    except BasicRuntimeError as exc:
        sys.stdout.flush()
        print(format_failure(exc), file=sys.stderr)
        _print_py_trace(exc)
        sys.exit(1)

    if timed:
        msg = f"{msg} in {time.perf_counter() - started:.6f}s"
    print(msg)

if __name__ == "__main__":
    main()
