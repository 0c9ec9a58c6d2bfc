"""
Ember command line: run a script file or start an interactive session.

    ember script.lisp
    ember --debug-on-error
    ember --trace --log-level DEBUG script.lisp
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from ember import __version__
from ember.config import load_config
from ember.errors import EmberError, EmberSyntaxError
from ember.interpreter import Interpreter
from ember.logging_config import setup_logging
from ember.reader.parser import lex
from ember.values import to_string

logger = logging.getLogger(__name__)

PROMPT = "> "
CONTINUATION_PROMPT = ". "


def create_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ember",
        description="Ember, an embeddable Lisp runtime",
    )
    parser.add_argument("script", nargs="?", help="script file to run; omit for an interactive session")
    parser.add_argument("--trace", action="store_true", default=None, help="trace every evaluation")
    parser.add_argument(
        "--debug-on-error",
        action="store_true",
        default=None,
        help="enter the debugger when an evaluation fails",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="logging level (default: EMBER_LOG_LEVEL or WARNING)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def needs_more_input(text: str) -> bool:
    """True while `text` has unclosed parentheses or an unterminated string or comment."""
    depth = 0
    try:
        for kind, _ in lex(text):
            if kind in ("lparen", "vector"):
                depth += 1
            elif kind == "rparen":
                depth -= 1
    except EmberSyntaxError:
        return True
    return depth > 0


def run_file(interp: Interpreter, path: Path) -> int:
    try:
        source = path.read_text(encoding="utf-8")
    except OSError as e:
        print(f"Cannot read {path}: {e}", file=sys.stderr)
        return 2
    try:
        interp.eval(source)
    except EmberError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


def run_interactive(interp: Interpreter) -> int:
    print(f"Ember {__version__}. (quit) or end of input leaves.")
    while True:
        try:
            text = input(PROMPT)
            while needs_more_input(text):
                text += "\n" + input(CONTINUATION_PROMPT)
        except EOFError:
            print()
            return 0
        except KeyboardInterrupt:
            print()
            continue
        if not text.strip():
            continue
        try:
            print(to_string(interp.eval(text)))
        except EmberError as e:
            print(f"Error: {e}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = create_arg_parser().parse_args(argv)
    config = load_config(
        trace=args.trace,
        debug_on_error=args.debug_on_error,
        interactive=args.script is None or None,
        log_level=args.log_level,
    )
    setup_logging(config.log_level)
    logger.debug("Starting with %s", config)

    interp = Interpreter(config)
    if args.script is not None:
        return run_file(interp, Path(args.script))
    return run_interactive(interp)


if __name__ == "__main__":
    sys.exit(main())
