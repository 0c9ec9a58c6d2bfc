"""Closure representation and argument binding for Ember."""

from __future__ import annotations

from io import StringIO

from ember import SExpression, LispValue
from ember.types.environment import Environment
from ember.types.primitive import ArityCheck
from ember.types.symbol import Symbol
from ember.types.pair import list_from


class Closure:
    """A first-class function with formal parameters, body, and captured env.

    The captured frame is held by reference, so assignments made through it
    after the closure is created are visible inside the closure, and the
    other way round.
    """

    __slots__ = ("formals", "rest", "body", "env", "name", "arity")

    def __init__(
        self,
        formals: list[Symbol],
        body: list[SExpression],
        env: Environment,
        rest: Symbol | None = None,
        name: str | None = None,
    ):
        self.formals: list[Symbol] = formals
        self.rest: Symbol | None = rest
        self.body: list[SExpression] = body
        self.env: Environment = env
        self.name = name
        if rest is None:
            self.arity = ArityCheck.exactly(len(formals))
        else:
            self.arity = ArityCheck.at_least(len(formals))

    @property
    def display_name(self) -> str:
        return self.name or "anonymous"

    def __str__(self) -> str:
        with StringIO() as buffer:
            buffer.write(f"<function {self.display_name} (")
            buffer.write(" ".join(str(f) for f in self.formals))
            if self.rest is not None:
                if self.formals:
                    buffer.write(" ")
                buffer.write(f". {self.rest}")
            buffer.write(")>")
            return buffer.getvalue()

    def __repr__(self) -> str:
        return str(self)

    def extend_env(self, args: list[LispValue]) -> Environment:
        """Bind argument values to the formals in a new child of the captured frame.

        The caller has already checked arity.
        """
        local_env = Environment(outer=self.env, label=self.display_name)
        for formal, value in zip(self.formals, args):
            local_env.define(formal, value)
        if self.rest is not None:
            local_env.define(self.rest, list_from(args[len(self.formals):]))
        return local_env
