from __future__ import annotations

from typing import Iterable, Iterator

from ember import LispValue


class Vector:
    """Fixed-length, index-addressable, mutable sequence of values.

    Elements can be replaced in place; the length never changes. Growing a
    vector means building a new one.
    """

    __slots__ = ("items",)

    def __init__(self, items: Iterable[LispValue] = ()):
        self.items: list[LispValue] = list(items)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[LispValue]:
        return iter(self.items)

    def __getitem__(self, index: int) -> LispValue:
        return self.items[index]

    def __setitem__(self, index: int, value: LispValue) -> None:
        self.items[index] = value

    def __eq__(self, other) -> bool:
        return isinstance(other, Vector) and self.items == other.items

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        from ember.values import to_string
        return to_string(self)
