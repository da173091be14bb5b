"""Interactive REPL and script runner for Ember, powered by prompt_toolkit."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.history import InMemoryHistory

from .environment import Environment
from .errors import EmberSyntaxError
from .interpreter import Interpreter
from .parser import parse_source
from .types import Error, Object

PROMPT = '>> '


def repl_eval(text: str, interpreter: Interpreter, env: Environment) -> Optional[Object]:
    """Run one REPL input against the session environment.

    Lexer and parser errors propagate as EmberSyntaxError; runtime failures
    come back as an Error value.
    """
    program = parse_source(text)
    return interpreter.run(program, env)


def report(result: Optional[Object]) -> None:
    if result is None:
        return
    if isinstance(result, Error):
        print(f"Error: {result.inspect()}", file=sys.stderr)
        return
    print(result.inspect())


def repl(interpreter: Optional[Interpreter] = None) -> None:
    """Interactive read-eval-print loop.

    The interpreter's global environment lives for the whole session;
    ``/reset`` replaces it with a fresh one. Ctrl-C abandons the current
    input or evaluation, Ctrl-D exits.
    """
    if interpreter is None:
        interpreter = Interpreter()
    session: PromptSession[str] = PromptSession(history=InMemoryHistory())

    print("ember repl - Ctrl-D to exit, /reset for a fresh environment")

    while True:
        try:
            text = session.prompt(PROMPT)
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print("KeyboardInterrupt")
            continue

        if not text.strip():
            continue
        if text.strip() == '/reset':
            interpreter.global_env = Environment()
            print("Environment reset.")
            continue

        try:
            result = repl_eval(text, interpreter, interpreter.global_env)
        except EmberSyntaxError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            continue
        except KeyboardInterrupt:
            print("KeyboardInterrupt")
            continue
        # print output has no trailing newline; keep the echo on its own line
        sys.stdout.flush()
        report(result)


def run_script(path: Path, interpreter: Optional[Interpreter] = None) -> int:
    """Run a script file in the interpreter's global environment; returns an exit status."""
    if interpreter is None:
        interpreter = Interpreter()
    source = path.read_text(encoding='utf-8')
    try:
        program = parse_source(source)
    except EmberSyntaxError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    result = interpreter.run(program)
    if isinstance(result, Error):
        print(f"Runtime error: {result.inspect()}", file=sys.stderr)
        return 1
    return 0
