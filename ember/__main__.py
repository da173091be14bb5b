"""CLI entry point for the Ember interpreter.

Usage:
    python -m ember [-v|-vv|-vvv] [--debug-file FILE] [script]

Options:
  -v              Increase debug verbosity (can be repeated)
  --debug-file    Write the debug trace to FILE instead of stderr

Without a script an interactive REPL is started. With a script, the file is
parsed and run once; a syntax or runtime error exits with status 1.
"""

import argparse
import sys
from pathlib import Path

from .interpreter import Interpreter
from .repl import repl, run_script


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Ember language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--debug-file', metavar='FILE', help='write the debug trace to FILE instead of stderr')
    parser.add_argument('script', nargs='?', help='Ember script (.em) to execute')
    args = parser.parse_args(argv)

    interpreter = Interpreter(debug_level=args.v, debug_file=args.debug_file)
    try:
        if not args.script:
            repl(interpreter)
            return
        script = Path(args.script)
        if not script.exists():
            print(f"Error: file {script} not found", file=sys.stderr)
            sys.exit(1)
        status = run_script(script, interpreter)
    finally:
        interpreter.close()
    if status:
        sys.exit(status)


if __name__ == '__main__':
    main()
