"""Interactive line-entry REPL for yarxbi, powered by prompt_toolkit."""

from __future__ import annotations

import os
import re
import sys
import traceback
from typing import Dict

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.shortcuts import clear

from .executor import execute
from .lexer import Lexer, LexError, tokenize, tokenize_line
from .repl_highlight import BasicLexer
from .runner import format_failure
from .types import BasicRuntimeError
from .utils import DEBUG_PY_TRACE_ENV, debug_py_trace_enabled

# Zero-width and invisible characters to strip from input.
_INVISIBLE_RE = re.compile("[\u200b\u200c\u200d\ufeff\u00a0\r]")

_NUMBERED_RE = re.compile(r"\s*(\d+)\s*(.*)$", re.S)

# Slash commands: name => (description, argument_hint).
_SLASH_CMDS = {
    "/run": ("Run the stored program", ""),
    "/list": ("List the stored program", ""),
    "/new": ("Erase the stored program", ""),
    "/clear": ("Clear the terminal screen", ""),
    "/py-traceback": ("Toggle Python traceback on errors", "[on|off]"),
}

Program = Dict[int, str]


class _ReplCompleter(Completer):
    """Autocomplete slash commands and statement keywords."""

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        if text.startswith("/"):
            for cmd, (desc, hint) in _SLASH_CMDS.items():
                if cmd.startswith(text):
                    yield Completion(
                        cmd,
                        start_position=-len(text),
                        display_meta=desc,
                    )
            return

        word = document.get_word_before_cursor()
        if not word or not word.isupper():
            return

        for keyword in Lexer.KEYWORDS:
            if keyword.startswith(word) and keyword != word:
                yield Completion(keyword, start_position=-len(word))


def _normalize(text: str) -> str:
    """Strip invisible characters from input."""
    return _INVISIBLE_RE.sub("", text)


def _report(exc: Exception) -> None:
    if isinstance(exc, BasicRuntimeError):
        print(format_failure(exc), file=sys.stderr)
    else:
        print(f"Error: {exc}", file=sys.stderr)

    if debug_py_trace_enabled():
        print("\nPython traceback:", file=sys.stderr)
        print("".join(traceback.format_tb(exc.__traceback__)), file=sys.stderr, end="")


def program_source(program: Program) -> str:
    return "\n".join(program[number] for number in sorted(program))


def store_line(program: Program, text: str) -> bool:
    """Store, replace or delete a numbered line. Returns False if unnumbered."""
    match = _NUMBERED_RE.match(text)
    if match is None:
        return False

    number = int(match.group(1))
    if not match.group(2).strip():
        program.pop(number, None)
        return True

    # Reject lines that would not lex now rather than at /run time.
    tokenize_line(text)
    program[number] = text.strip()
    return True


def run_stored(program: Program) -> None:
    try:
        msg = execute(tokenize(program_source(program)))
    except (LexError, BasicRuntimeError) as exc:
        sys.stdout.flush()
        _report(exc)
        return

    print(msg)


def run_immediate(text: str) -> None:
    """Execute an unnumbered statement as a one-line program."""
    try:
        execute([tokenize_line(f"0 {text}")])
    except (LexError, BasicRuntimeError) as exc:
        sys.stdout.flush()
        _report(exc)
        return

    print()


def handle_slash(line: str, program: Program) -> bool:
    """Handle slash commands. Returns True if the line was a command."""
    stripped = line.strip()
    if not stripped.startswith("/"):
        return False

    parts = stripped.split(None, 1)
    cmd = parts[0]
    arg = parts[1] if len(parts) > 1 else ""

    if cmd == "/run":
        run_stored(program)
        return True

    if cmd == "/list":
        for number in sorted(program):
            print(program[number])
        return True

    if cmd == "/new":
        program.clear()
        print("Program erased.")
        return True

    if cmd == "/clear":
        clear()
        return True

    if cmd == "/py-traceback":
        if arg.lower() in ("on", "1", "true", "yes"):
            os.environ[DEBUG_PY_TRACE_ENV] = "1"
        elif arg.lower() in ("off", "0", "false", "no"):
            os.environ.pop(DEBUG_PY_TRACE_ENV, None)
        elif arg == "":
            # Toggle.
            if debug_py_trace_enabled():
                os.environ.pop(DEBUG_PY_TRACE_ENV, None)
            else:
                os.environ[DEBUG_PY_TRACE_ENV] = "1"
        else:
            print("Usage: /py-traceback [on|off]", file=sys.stderr)
            return True

        state = "on" if debug_py_trace_enabled() else "off"
        print(f"Python traceback: {state}")
        return True

    print(f"Unknown command: {cmd}", file=sys.stderr)
    return True


def repl() -> None:
    """Interactive line-entry loop with prompt_toolkit."""
    program: Program = {}

    session: PromptSession[str] = PromptSession(
        history=InMemoryHistory(),
        lexer=BasicLexer(),
        completer=_ReplCompleter(),
        complete_while_typing=True,
    )

    print("yarxbi repl (Ctrl-D to exit, / for commands)")

    while True:
        try:
            text = session.prompt("] ")
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print("KeyboardInterrupt")
            continue

        text = _normalize(text)
        if not text.strip():
            continue

        if handle_slash(text, program):
            continue

        try:
            if store_line(program, text):
                continue
        except LexError as exc:
            _report(exc)
            continue

        run_immediate(text)
