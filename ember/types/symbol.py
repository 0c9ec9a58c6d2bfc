from __future__ import annotations
import sys


class Symbol:
    """An interned name: two symbols with the same name are the same object."""

    __slots__ = ("id",)

    _table: dict[str, Symbol] = {}

    def __new__(cls, name: str):
        sym = cls._table.get(name)
        if sym is None:
            sym = super().__new__(cls)
            sym.id = sys.intern(name)
            cls._table[sym.id] = sym
        return sym

    def __reduce__(self):
        return (Symbol, (self.id,))

    def __repr__(self):
        return f"Symbol({self.id!r})"

    def __str__(self):
        return self.id
