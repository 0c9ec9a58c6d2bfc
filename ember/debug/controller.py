"""Pause, inspect and resume evaluation.

The DebugController is consulted by the evaluator around every evaluation
while it is watching (see `watching`). It can pause on a frame, run a small
command loop on that frame, and then tell the evaluator how to carry on:
keep going, stop again at the next evaluation (single step), stop when
control is back in the enclosing frame (step out), or use a substitute value
in place of the paused evaluation's result.

Only one pause is ever outstanding: while paused, the evaluator's Python
stack is frozen underneath the command loop, and expressions typed at the
prompt run with debugger entry suppressed.
"""

from __future__ import annotations

import logging
import sys
from typing import Callable, Optional, TextIO, TYPE_CHECKING

from ember import LispValue, SExpression
from ember.errors import EmberError
from ember.debug.line_source import ConsoleLineSource, LineSource
from ember.types.environment import Environment
from ember.types.nil import Nil
from ember.types.pair import Pair
from ember.types.symbol import Symbol
from ember.values import to_string

if TYPE_CHECKING:
    from ember.runtime_context import RuntimeContext

logger = logging.getLogger(__name__)


class _Unset:
    __slots__ = ()

    def __repr__(self):
        return "<unset>"


# Returned by the hooks when the evaluator should carry on normally
UNSET = _Unset()

Reader = Callable[[str], list[SExpression]]

HELP_TEXT = """\
Ember Debugger
--------------
{p}?        - show this command summary
{p}b        - show the environment stack
{p}c        - continue, exiting the debugger
{p}d        - do a full dump of the environment stack
{p}e on/off - enable/disable debug on error
{p}f frame# - do a full dump of a single environment frame
{p}q        - quit
{p}r sexpr  - return from the current evaluation with the specified value
{p}s        - single step (run to the next evaluation)
{p}t on/off - enable/disable tracing
{p}u        - continue until the enclosing environment frame is returned to
"""


def _default_reader(text: str) -> list[SExpression]:
    from ember.reader.parser import read_all
    return read_all(text)


def _is_compound(expr: SExpression) -> bool:
    return isinstance(expr, (Pair, Symbol))


class DebugController:
    def __init__(
        self,
        context: Optional[RuntimeContext] = None,
        line_source: Optional[LineSource] = None,
        output: Optional[TextIO] = None,
        reader: Optional[Reader] = None,
        command_prefix: str = ":",
        prompt: str = "D> ",
    ):
        self.context = context
        self.line_source: LineSource = line_source if line_source is not None else ConsoleLineSource()
        # None means "whatever sys.stdout is when we print"
        self.output: Optional[TextIO] = output
        self.reader: Reader = reader if reader is not None else _default_reader
        self.command_prefix = command_prefix
        self.prompt = prompt

        self.trace: bool = False
        self.break_on_error: bool = False
        self.single_step: bool = False
        self.current_frame: Optional[Environment] = None
        self.paused_frame: Optional[Environment] = None
        self.in_repl_eval: bool = False
        self._override: LispValue = UNSET
        self.depth: int = 0

    # --- State ---

    @property
    def interactive(self) -> bool:
        return self.context is not None and self.context.interactive

    @property
    def watching(self) -> bool:
        """True when the evaluator has to route evaluations through the hooks."""
        return (
            self.trace
            or self.single_step
            or self.current_frame is not None
            or (self.break_on_error and self.interactive)
        )

    def take_override(self) -> LispValue:
        value, self._override = self._override, UNSET
        return value

    def _print(self, text: str = "") -> None:
        print(text, file=self.output if self.output is not None else sys.stdout)

    # --- Evaluator hooks ---

    def before_eval(self, expr: SExpression, env: Environment) -> LispValue:
        """Called before evaluating `expr`; returns a substitute value or UNSET."""
        if self.in_repl_eval or not _is_compound(expr):
            return UNSET
        if self.single_step:
            self.single_step = False
            self._print(f"{env.dump_header()}: {to_string(expr)}")
            return self.pause(env)
        if self.current_frame is not None and env is self.current_frame.outer:
            self.current_frame = None
            self._print(f"{env.dump_header()}: {to_string(expr)}")
            return self.pause(env)
        if self.trace:
            self._print(f"{'  ' * (self.depth - 1)}{to_string(expr)}")
        return UNSET

    def after_eval(self, expr: SExpression, result: LispValue) -> None:
        if self.trace and not self.in_repl_eval and _is_compound(expr):
            self._print(f"{'  ' * (self.depth - 1)}=> {to_string(result)}")

    def intercept(self, err: EmberError, env: Environment) -> LispValue:
        """Give the debugger a chance at a failure raised while evaluating in `env`.

        Returns the recovery value installed with the return command; otherwise
        re-raises `err`, marked so enclosing evaluations let it through.
        """
        if err.intercepted or self.in_repl_eval or not (self.break_on_error and self.interactive):
            raise err
        err.intercepted = True
        logger.debug("Break on error in frame %s: %s", env.label, err)
        self._print(f"ERROR!  {err}")
        value = self.pause(env)
        if value is UNSET:
            raise err
        return value

    def enter(self, env: Environment) -> LispValue:
        """Explicit debugger entry on `env`; returns the override or Nil."""
        if self.in_repl_eval:
            self._print("Already in the debugger.")
            return Nil
        self._print("Debugger")
        value = self.pause(env)
        return Nil if value is UNSET else value

    def pause(self, env: Environment) -> LispValue:
        """Run the command loop on `env`, then hand back any pending override."""
        logger.debug("Debugger paused in frame %s", env.label)
        self.paused_frame = env
        try:
            self.repl(env)
        finally:
            self.paused_frame = None
        return self.take_override()

    # --- Command loop ---

    def repl(self, env: Environment) -> None:
        self._print(env.dump_header())
        while True:
            line = self.line_source.read_line(self.prompt)
            if line is None:
                self._continue()
                return
            line = line.strip()
            if not line:
                continue
            if line.startswith(self.command_prefix):
                if self._dispatch(line[len(self.command_prefix):].strip(), env):
                    return
            else:
                self._eval_and_print(line, env)

    def _dispatch(self, command: str, env: Environment) -> bool:
        """Run one prefixed command; True ends the session."""
        tokens = command.split()
        if not tokens:
            self._print(f"Missing command, {self.command_prefix}? lists them.")
            return False
        match tokens[0]:
            case "?":
                self._print(HELP_TEXT.format(p=self.command_prefix))
            case "b":
                self._print(env.dump_headers())
                self._print()
            case "c":
                self._continue()
                return True
            case "d":
                self._print(env.dump())
            case "e":
                state = self._on_off(tokens)
                if state is not None:
                    self.break_on_error = state
            case "f":
                self._dump_frame(tokens, env)
            case "q":
                logger.debug("Quit requested from the debugger")
                raise SystemExit(0)
            case "r":
                source = command[1:].strip()
                if not source:
                    self._print("Missing value.")
                    return False
                try:
                    value = self.eval_in_frame(source, env)
                except EmberError as e:
                    self._print(f"Error in evaluation: {e}")
                    return False
                self._override = value
                self.current_frame = None
                self.single_step = False
                return True
            case "s":
                self.single_step = True
                return True
            case "t":
                state = self._on_off(tokens)
                if state is not None:
                    self.trace = state
            case "u":
                if env.outer is not None:
                    self.current_frame = env
                    return True
                self._print("Already at top frame.")
            case _:
                self._print(f"Unknown command: {tokens[0]}")
        return False

    def _continue(self) -> None:
        self.current_frame = None
        self.single_step = False

    def _on_off(self, tokens: list[str]) -> Optional[bool]:
        if len(tokens) != 2:
            self._print("Missing on/off.")
            return None
        if tokens[1] == "on":
            return True
        if tokens[1] == "off":
            return False
        self._print("on/off expected.")
        return None

    def _dump_frame(self, tokens: list[str], env: Environment) -> None:
        if len(tokens) != 2:
            self._print("Missing frame number.")
            return
        try:
            number = int(tokens[1])
        except ValueError:
            self._print(f"Bad frame number: '{tokens[1]}'.")
            return
        try:
            self._print(env.dump_single_frame(number))
        except EmberError as e:
            self._print(str(e))

    def eval_in_frame(self, source: str, env: Environment) -> LispValue:
        """Read and evaluate `source` in `env` with debugger entry suppressed."""
        from ember.evaluation.evaluator import evaluate

        saved = self.in_repl_eval
        self.in_repl_eval = True
        try:
            result: LispValue = Nil
            for form in self.reader(source):
                result = evaluate(form, env)
            return result
        finally:
            self.in_repl_eval = saved

    def _eval_and_print(self, source: str, env: Environment) -> None:
        try:
            value = self.eval_in_frame(source, env)
        except EmberError as e:
            self._print(f"Error in evaluation: {e}")
            return
        self._print(f"==> {to_string(value)}")


def debugger_of(env: Environment) -> Optional[DebugController]:
    ctx = env.context
    return ctx.debugger if ctx is not None else None


def signal_error(
    message: str, env: Environment, error_class: type[EmberError] = EmberError
) -> LispValue:
    """Fail with `error_class(message)`, unless the debugger recovers.

    A primitive calls this as `return signal_error(...)`: when break-on-error
    is active the command loop runs on `env`, and a value given with the
    return command comes back as this call's result. Otherwise the error is
    raised.
    """
    err = error_class(message)
    debugger = debugger_of(env)
    if debugger is None:
        raise err
    return debugger.intercept(err, env)
