"""Per-interpreter runtime state.

One RuntimeContext bundles what would otherwise be process globals: the
global frame, the primitive registry, the debug controller and the
interactive flag. The global frame holds a reference to it and every child
frame inherits that reference, so evaluation code reaches the context through
whatever frame it is working in.
"""

from __future__ import annotations

from typing import Optional, TYPE_CHECKING

from ember.config import RuntimeConfig
from ember.types.environment import Environment

if TYPE_CHECKING:
    from ember.debug.controller import DebugController
    from ember.registry import PrimitiveRegistry


class RuntimeContext:
    __slots__ = ("config", "global_env", "registry", "debugger", "interactive")

    def __init__(self, config: Optional[RuntimeConfig] = None):
        self.config: RuntimeConfig = config if config is not None else RuntimeConfig()
        self.interactive: bool = self.config.interactive
        self.global_env: Environment = Environment.create_root(self)
        self.registry: PrimitiveRegistry | None = None
        self.debugger: DebugController | None = None

