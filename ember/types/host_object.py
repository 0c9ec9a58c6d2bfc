from __future__ import annotations

from typing import Any


class HostObject:
    """Opaque host payload carried through scripts untouched."""

    __slots__ = ("payload", "tag")

    def __init__(self, payload: Any, tag: str | None = None):
        self.payload = payload
        self.tag = tag if tag is not None else type(payload).__name__

    def __repr__(self) -> str:
        return f"<object: {self.tag}>"
