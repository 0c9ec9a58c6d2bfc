"""Primitive libraries shipped with the interpreter."""
from __future__ import annotations

from ember.registry import PrimitiveRegistry


def register_all(registry: PrimitiveRegistry) -> None:
    """Register every bundled library, core first."""
    from ember.builtin import debug_builtin, device_builtin, env_builtin, list_builtin, vector_builtin

    for library in (env_builtin, list_builtin, vector_builtin, debug_builtin, device_builtin):
        library.register(registry)
