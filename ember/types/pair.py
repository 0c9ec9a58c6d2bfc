"""Mutable cons cells.

A proper list is a chain of Pairs whose last cdr is Nil. Pairs are shared by
reference, so mutation through set-car!/set-cdr! is visible to every holder.
"""

from __future__ import annotations

from typing import Iterable, Iterator

from ember import LispValue
from ember.types.nil import Nil


class Pair:
    __slots__ = ("car", "cdr")

    def __init__(self, car: LispValue, cdr: LispValue = Nil):
        self.car = car
        self.cdr = cdr

    def __iter__(self) -> Iterator[LispValue]:
        """Yield the cars of the chain; an improper tail is not yielded."""
        cell: LispValue = self
        while isinstance(cell, Pair):
            yield cell.car
            cell = cell.cdr

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __eq__(self, other) -> bool:
        a, b = self, other
        while isinstance(a, Pair) and isinstance(b, Pair):
            if a is b:
                return True
            if a.car != b.car:
                return False
            a, b = a.cdr, b.cdr
        if isinstance(a, Pair) or isinstance(b, Pair):
            return False
        return a == b

    __hash__ = None  # mutable

    def last_cdr(self) -> LispValue:
        cell = self
        while isinstance(cell.cdr, Pair):
            cell = cell.cdr
        return cell.cdr

    def is_proper(self) -> bool:
        return self.last_cdr() is Nil

    def __repr__(self) -> str:
        from ember.values import to_string
        return to_string(self)


def list_from(items: Iterable[LispValue], tail: LispValue = Nil) -> LispValue:
    """Build a pair chain holding `items`, terminated by `tail` (Nil by default)."""
    result = tail
    for item in reversed(list(items)):
        result = Pair(item, result)
    return result
