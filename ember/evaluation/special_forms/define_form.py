from ember import EvaluatorFn
from ember import SExpression, LispValue
from ember.errors import EmberArityError, EmberTypeError
from ember.types.environment import Environment
from ember.types.pair import Pair
from ember.types.symbol import Symbol
from ember.types.closure import Closure
from ember.evaluation.special_forms.lambda_form import parse_parameters


def define_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
) -> LispValue:
    """
    (define name value)
    (define (name . params) body...)
    Binds in the current frame and returns the bound value.
    """
    if not tail:
        raise EmberArityError("define requires a name")
    target = tail[0]

    if isinstance(target, Pair):
        name = target.car
        if not isinstance(name, Symbol):
            raise EmberTypeError(f"define: function name must be a symbol, got {name!r}")
        formals, rest = parse_parameters(target.cdr)
        value: LispValue = Closure(formals, tail[1:], env, rest=rest, name=name.id)
        env.define(name, value)
        return value

    if not isinstance(target, Symbol):
        raise EmberTypeError(f"define: name must be a symbol, got {target!r}")
    if len(tail) != 2:
        raise EmberArityError("define requires exactly 2 arguments")
    value = evaluate_fn(tail[1], env)
    if isinstance(value, Closure) and value.name is None:
        value.name = target.id
    env.define(target, value)
    return value
