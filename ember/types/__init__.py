"""Runtime value types for Ember."""

from ember.types.nil import Nil, NilType
from ember.types.symbol import Symbol
from ember.types.pair import Pair, list_from
from ember.types.vector import Vector
from ember.types.host_object import HostObject
from ember.types.primitive import ArityCheck, Primitive
from ember.types.environment import Environment
from ember.types.closure import Closure

__all__ = [
    "Nil",
    "NilType",
    "Symbol",
    "Pair",
    "list_from",
    "Vector",
    "HostObject",
    "ArityCheck",
    "Primitive",
    "Environment",
    "Closure",
]
