"""Special forms: let and let*.

Both evaluate their body in one new child frame of the current frame.
`let` evaluates every init in the outer frame; `let*` evaluates each init in
the new frame, so later inits see earlier bindings.
"""

from ember import EvaluatorFn
from ember import SExpression, LispValue
from ember.errors import EmberArityError, EmberSyntaxError
from ember.types.environment import Environment
from ember.types.nil import Nil
from ember.types.pair import Pair
from ember.types.symbol import Symbol


def _bindings(spec: SExpression, form_name: str) -> list[tuple[Symbol, SExpression]]:
    if spec is Nil:
        return []
    if not isinstance(spec, Pair) or not spec.is_proper():
        raise EmberSyntaxError(f"{form_name} bindings must be a list")
    result = []
    for binding in spec:
        if isinstance(binding, Symbol):
            result.append((binding, Nil))
            continue
        if not isinstance(binding, Pair) or not binding.is_proper():
            raise EmberSyntaxError(f"{form_name} binding must be (name value), got {binding!r}")
        parts = list(binding)
        if not isinstance(parts[0], Symbol) or len(parts) > 2:
            raise EmberSyntaxError(f"{form_name} binding must be (name value), got {binding!r}")
        result.append((parts[0], parts[1] if len(parts) == 2 else Nil))
    return result


def _body(tail: list[SExpression], local_env: Environment, evaluate_fn: EvaluatorFn) -> LispValue:
    result: LispValue = Nil
    for expr in tail[1:]:
        result = evaluate_fn(expr, local_env)
    return result


def let_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
) -> LispValue:
    if not tail:
        raise EmberArityError("let requires a binding list")
    bindings = _bindings(tail[0], "let")
    values = [evaluate_fn(init, env) for _, init in bindings]
    local_env = Environment(outer=env, label="let")
    for (name, _), value in zip(bindings, values):
        local_env.define(name, value)
    return _body(tail, local_env, evaluate_fn)


def let_star_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
) -> LispValue:
    if not tail:
        raise EmberArityError("let* requires a binding list")
    local_env = Environment(outer=env, label="let*")
    for name, init in _bindings(tail[0], "let*"):
        local_env.define(name, evaluate_fn(init, local_env))
    return _body(tail, local_env, evaluate_fn)
