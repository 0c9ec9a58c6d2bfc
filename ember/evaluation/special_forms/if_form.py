from ember import EvaluatorFn
from ember import SExpression, LispValue
from ember.errors import EmberArityError
from ember.types.nil import Nil
from ember.types.environment import Environment
from ember.values import is_true


def if_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
) -> LispValue:
    """(if condition then [else])

    Only boolean false selects the else branch; Nil and 0 are true. Exactly
    one branch is evaluated.
    """
    if len(tail) < 2:
        raise EmberArityError("if requires a condition and a then-expression")
    if len(tail) > 3:
        raise EmberArityError("Too many arguments to if")

    cond = evaluate_fn(tail[0], env)
    if is_true(cond):
        return evaluate_fn(tail[1], env)
    elif len(tail) == 3:
        return evaluate_fn(tail[2], env)
    else:
        return Nil
