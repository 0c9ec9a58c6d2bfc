"""Native functions exposed to scripts, and their arity contracts."""

from __future__ import annotations

import re
from typing import Callable

from ember import LispValue
from ember.errors import EmberArityError

_SPEC_RE = re.compile(r"^\s*(?:(?P<star>\*)|>=\s*(?P<min>\d+)|(?P<alts>\d+(?:\s*\|\s*\d+)*))\s*$")


class ArityCheck:
    """Acceptable argument counts for a Primitive or Closure.

    Either a set of exact counts (`exact`) or a lower bound (`minimum`).
    """

    __slots__ = ("exact", "minimum")

    def __init__(self, exact: frozenset[int] | None = None, minimum: int | None = None):
        self.exact = exact
        self.minimum = minimum

    @classmethod
    def exactly(cls, n: int) -> ArityCheck:
        return cls(exact=frozenset((n,)))

    @classmethod
    def at_least(cls, n: int) -> ArityCheck:
        return cls(minimum=n)

    @classmethod
    def parse(cls, spec: int | str | ArityCheck) -> ArityCheck:
        """Parse an arity spec.

        Accepted forms:
        - int N >= 0: exactly N arguments; the int -1 means at least one
        - "N": exactly N
        - ">=N": at least N
        - "N|M|...": any of the listed counts
        - "*": any number of arguments
        """
        if isinstance(spec, ArityCheck):
            return spec
        if isinstance(spec, bool):
            raise ValueError(f"Invalid arity spec: {spec!r}")
        if isinstance(spec, int):
            if spec == -1:
                return cls.at_least(1)
            if spec < 0:
                raise ValueError(f"Invalid arity spec: {spec!r}")
            return cls.exactly(spec)
        if not isinstance(spec, str):
            raise ValueError(f"Invalid arity spec: {spec!r}")
        m = _SPEC_RE.match(spec)
        if m is None:
            raise ValueError(f"Invalid arity spec: {spec!r}")
        if m.group("star"):
            return cls.at_least(0)
        if m.group("min") is not None:
            return cls.at_least(int(m.group("min")))
        return cls(exact=frozenset(int(n) for n in m.group("alts").split("|")))

    def accepts(self, count: int) -> bool:
        if self.exact is not None:
            return count in self.exact
        return count >= self.minimum

    def describe(self) -> str:
        if self.exact is not None:
            counts = sorted(self.exact)
            if len(counts) == 1:
                return str(counts[0])
            return " or ".join(str(n) for n in counts)
        return f"at least {self.minimum}"

    def check(self, name: str, count: int) -> None:
        """Raise EmberArityError unless `count` arguments are acceptable."""
        if not self.accepts(count):
            raise EmberArityError(
                f"{name} expected {self.describe()} argument(s), but received {count}"
            )

    def __eq__(self, other) -> bool:
        return (
            isinstance(other, ArityCheck)
            and self.exact == other.exact
            and self.minimum == other.minimum
        )

    def __hash__(self) -> int:
        return hash((self.exact, self.minimum))

    def __repr__(self) -> str:
        return f"ArityCheck({self.describe()})"


NativeFn = Callable[..., LispValue]


class Primitive:
    """A native function bound under `name`.

    Ordinary primitives are called as fn(env, args) with evaluated arguments.
    Special primitives are called as fn(env, forms, evaluate_fn) with the
    unevaluated operand forms.
    """

    __slots__ = ("name", "arity", "fn", "special")

    def __init__(self, name: str, arity: int | str | ArityCheck, fn: NativeFn, special: bool = False):
        self.name = name
        self.arity = ArityCheck.parse(arity)
        self.fn = fn
        self.special = special

    def __repr__(self) -> str:
        kind = "special" if self.special else "prim"
        return f"<{kind}: {self.name}>"
