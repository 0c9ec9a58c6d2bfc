# Core type aliases for Ember's data model.
# Runtime values are plain Python scalars (bool, int, float, str) plus the
# classes in ember.types (Nil, Symbol, Pair, Vector, Closure, Primitive,
# HostObject). The same values represent code (forms) and data.
#
# Naming guidance:
# - SExpression: Use in reader and special-form code to denote syntactic forms.
# - LispValue:  Use in evaluator/runtime code to denote evaluated values.
# Both aliases resolve to `Any` and are interchangeable.

from typing import Any, Callable

__version__ = "0.3.0"

# Runtime value alias
LispValue = Any
# Forms alias (used interchangeably with LispValue)
SExpression = LispValue

# Evaluator function type: Python evaluator handed to special forms
EvaluatorFn = Callable[..., LispValue]
