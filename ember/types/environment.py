"""Runtime environment for Ember.

An Environment is one frame of the lexical scope chain: a mapping from
Symbols to values plus a link to the enclosing (`outer`) frame. Lookup and
assignment walk the chain innermost-first. The root frame of an interpreter
carries the runtime context (registry, debugger) and every child inherits it.
"""

from __future__ import annotations

from io import StringIO
from typing import Iterator, Optional, TYPE_CHECKING

from ember import LispValue
from ember.errors import EmberTypeError, EmberUnboundSymbol, EmberIndexError
from ember.types.symbol import Symbol

if TYPE_CHECKING:
    from ember.runtime_context import RuntimeContext


class Environment:
    """Hierarchical mapping from Symbols to Lisp values."""

    __slots__ = ("vars", "outer", "context", "label", "__weakref__")

    def __init__(
        self,
        outer: Optional[Environment] = None,
        context: Optional[RuntimeContext] = None,
        label: Optional[str] = None,
    ):
        self.vars: dict[Symbol, LispValue] = {}
        self.outer: Environment | None = outer
        if context is None and outer is not None:
            context = outer.context
        self.context: RuntimeContext | None = context
        if label is None:
            label = "global" if outer is None else "local"
        self.label: str = label

    @classmethod
    def create_root(cls, context: Optional[RuntimeContext] = None) -> Environment:
        return cls(context=context, label="global")

    @classmethod
    def create_child(cls, parent: Environment, label: Optional[str] = None) -> Environment:
        return cls(outer=parent, label=label)

    def define(self, name: Symbol, value: LispValue) -> None:
        """Bind `name` to `value` in this frame, replacing any earlier binding here."""
        if not isinstance(name, Symbol):
            raise EmberTypeError(f"Cannot define {name!r}: not a symbol")
        self.vars[name] = value

    def find(self, symbol: Symbol) -> Optional[Environment]:
        """Find the nearest environment in the chain that contains `symbol`."""
        env: Optional[Environment] = self
        while env is not None:
            if symbol in env.vars:
                return env
            env = env.outer
        return None

    def set(self, name: Symbol, value: LispValue) -> None:
        """Update an existing binding for `name` in the environment chain.

        Raises EmberUnboundSymbol if the symbol is not found; never creates
        a binding.
        """
        env = self.find(name)
        if env is None:
            raise EmberUnboundSymbol(f"Cannot set unbound symbol {name}")
        env.vars[name] = value

    def lookup(self, name: Symbol) -> LispValue:
        """Look up the value bound to `name`, innermost frame first."""
        env = self.find(name)
        if env is None:
            raise EmberUnboundSymbol(f"Unbound symbol: {name}")
        return env.vars[name]

    def is_bound(self, name: Symbol) -> bool:
        return self.find(name) is not None

    @property
    def root(self) -> Environment:
        env = self
        while env.outer is not None:
            env = env.outer
        return env

    @property
    def depth(self) -> int:
        """Number of frames above this one."""
        n = 0
        env = self.outer
        while env is not None:
            n += 1
            env = env.outer
        return n

    def frames(self) -> Iterator[Environment]:
        """Yield this frame and each enclosing frame up to the root."""
        env: Optional[Environment] = self
        while env is not None:
            yield env
            env = env.outer

    # --- Diagnostics ---

    def dump_header(self) -> str:
        """One line naming this frame."""
        return f"<{self.label}> depth {self.depth}, {len(self.vars)} binding(s)"

    def dump_headers(self) -> str:
        """Numbered headers for the whole chain, 0 being this frame."""
        return "\n".join(
            f"{i}: {env.dump_header()}" for i, env in enumerate(self.frames())
        )

    def dump_single_frame(self, index: int) -> str:
        frames = list(self.frames())
        if index < 0 or index >= len(frames):
            raise EmberIndexError(
                f"Frame number must be between 0 and {len(frames) - 1}, but got {index}"
            )
        return frames[index]._dump_frame(index)

    def dump(self) -> str:
        """Every frame of the chain with its bindings."""
        return "\n".join(
            env._dump_frame(i) for i, env in enumerate(self.frames())
        )

    def _dump_frame(self, index: int) -> str:
        from ember.values import to_string
        from ember.types.primitive import Primitive

        with StringIO() as buffer:
            buffer.write(f"{index}: {self.dump_header()}\n")
            primitives = 0
            for name in sorted(self.vars, key=str):
                value = self.vars[name]
                if isinstance(value, Primitive):
                    primitives += 1
                    continue
                buffer.write(f"  {name} => {to_string(value)}\n")
            if primitives:
                buffer.write(f"  ... {primitives} primitive(s)\n")
            return buffer.getvalue().rstrip("\n")

    def __repr__(self) -> str:
        return f"<Environment {self.label} depth={self.depth}>"
