"""Primitive registration.

A PrimitiveRegistry owns the global frame it registers into. Registering a
name creates a Primitive value and binds it there; registering the same name
again replaces the binding, which hosts and tests use to stub behavior.
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator

from ember.types.environment import Environment
from ember.types.primitive import ArityCheck, NativeFn, Primitive
from ember.types.symbol import Symbol

logger = logging.getLogger(__name__)

ArityLike = int | str | ArityCheck


class PrimitiveRegistry:
    def __init__(self, global_env: Environment):
        self.global_env: Environment = global_env
        self._primitives: dict[str, Primitive] = {}

    def register(self, name: str, arity: ArityLike, fn: NativeFn) -> Primitive:
        """Bind a primitive called as fn(env, args) under `name`."""
        return self._bind(Primitive(name, arity, fn))

    def register_special(self, name: str, arity: ArityLike, fn: NativeFn) -> Primitive:
        """Bind a primitive called as fn(env, forms, evaluate_fn) with unevaluated operands."""
        return self._bind(Primitive(name, arity, fn, special=True))

    def register_all(self, table: Iterable[tuple[str, ArityLike, NativeFn]]) -> None:
        for name, arity, fn in table:
            self.register(name, arity, fn)

    def _bind(self, prim: Primitive) -> Primitive:
        if prim.name in self._primitives:
            logger.debug("Replacing primitive %s", prim.name)
        self._primitives[prim.name] = prim
        self.global_env.define(Symbol(prim.name), prim)
        return prim

    def lookup(self, name: str) -> Primitive | None:
        return self._primitives.get(name)

    def names(self) -> list[str]:
        return sorted(self._primitives)

    def __contains__(self, name: str) -> bool:
        return name in self._primitives

    def __iter__(self) -> Iterator[Primitive]:
        return iter(self._primitives.values())

    def __len__(self) -> int:
        return len(self._primitives)
