from __future__ import annotations

import logging
import sys
from typing import Iterable, Optional, TextIO

from ember import LispValue, SExpression
from ember.builtin import register_all
from ember.config import RuntimeConfig, load_config
from ember.debug.controller import DebugController
from ember.debug.line_source import LineSource
from ember.errors import EmberError
from ember.evaluation.apply import apply_without_eval
from ember.evaluation.evaluator import evaluate
from ember.reader.parser import lex, read_all, TokenStream
from ember.registry import ArityLike, PrimitiveRegistry
from ember.runtime_context import RuntimeContext
from ember.types.environment import Environment
from ember.types.nil import Nil
from ember.types.primitive import NativeFn, Primitive
from ember.types.symbol import Symbol

logger = logging.getLogger(__name__)


class Interpreter:
    """
    One independent Ember runtime: its own global frame, primitives and debugger.

    Hosts register native functions, evaluate script text, and call back into
    script functions through `apply`. Two Interpreters share nothing.
    """

    def __init__(
        self,
        config: Optional[RuntimeConfig] = None,
        *,
        line_source: Optional[LineSource] = None,
        output: Optional[TextIO] = None,
        interactive: Optional[bool] = None,
        prelude: str | None = None,
    ):
        self.config: RuntimeConfig = config if config is not None else load_config()
        self.context = RuntimeContext(self.config)
        if interactive is not None:
            self.context.interactive = interactive

        self.registry = PrimitiveRegistry(self.context.global_env)
        self.context.registry = self.registry

        self.debugger = DebugController(
            self.context,
            line_source=line_source,
            output=output,
            reader=read_all,
            command_prefix=self.config.command_prefix,
            prompt=self.config.prompt,
        )
        self.debugger.trace = self.config.trace
        self.debugger.break_on_error = self.config.debug_on_error
        self.context.debugger = self.debugger

        if sys.getrecursionlimit() < self.config.recursion_limit:
            logger.debug("Raising the recursion limit to %d", self.config.recursion_limit)
            sys.setrecursionlimit(self.config.recursion_limit)

        register_all(self.registry)
        logger.debug("Interpreter ready with %d primitives", len(self.registry))

        if prelude:
            self.eval(prelude)

    @property
    def global_env(self) -> Environment:
        return self.context.global_env

    @property
    def interactive(self) -> bool:
        return self.context.interactive

    @interactive.setter
    def interactive(self, value: bool) -> None:
        self.context.interactive = value

    def eval(self, code: str) -> LispValue:
        """Read and evaluate every form in `code`; the last value, or Nil for none."""
        stream = TokenStream(lex(code))
        result: LispValue = Nil
        while (expr := stream.parse_expr()) is not None:
            result = evaluate(expr, self.global_env)
        return result

    def eval_expr(self, expr: SExpression, env: Optional[Environment] = None) -> LispValue:
        return evaluate(expr, env if env is not None else self.global_env)

    def apply(self, fn: LispValue, args: Iterable[LispValue] = ()) -> LispValue:
        """Call a script or primitive function with already evaluated arguments.

        A failure gets the same break-on-error treatment as one raised while
        evaluating a form in the global frame.
        """
        if isinstance(fn, str):
            fn = self.lookup(fn)
        try:
            return apply_without_eval(fn, args, self.global_env, evaluate)
        except EmberError as err:
            return self.debugger.intercept(err, self.global_env)

    def register(self, name: str, arity: ArityLike, fn: NativeFn) -> Primitive:
        return self.registry.register(name, arity, fn)

    def register_special(self, name: str, arity: ArityLike, fn: NativeFn) -> Primitive:
        return self.registry.register_special(name, arity, fn)

    def define(self, name: str, value: LispValue) -> LispValue:
        self.global_env.define(Symbol(name), value)
        return value

    def lookup(self, name: str) -> LispValue:
        return self.global_env.lookup(Symbol(name))
