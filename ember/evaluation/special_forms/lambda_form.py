from ember import EvaluatorFn
from ember import SExpression, LispValue
from ember.errors import EmberArityError, EmberTypeError
from ember.types.closure import Closure
from ember.types.environment import Environment
from ember.types.nil import Nil
from ember.types.pair import Pair
from ember.types.symbol import Symbol


def parse_parameters(params: SExpression) -> tuple[list[Symbol], Symbol | None]:
    """Split a parameter list into required formals and an optional rest name.

    Accepts (a b), (a b . rest) and a bare symbol binding every argument.
    """
    formals: list[Symbol] = []
    cell = params
    while isinstance(cell, Pair):
        if not isinstance(cell.car, Symbol):
            raise EmberTypeError(f"Parameter names must be symbols, got {cell.car!r}")
        if cell.car in formals:
            raise EmberTypeError(f"Duplicate parameter name {cell.car}")
        formals.append(cell.car)
        cell = cell.cdr
    if cell is Nil:
        return formals, None
    if isinstance(cell, Symbol):
        return formals, cell
    raise EmberTypeError(f"Malformed parameter list: {params!r}")


def lambda_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
) -> LispValue:
    # (lambda (params) body...) allows zero or more body forms, evaluated in
    # order. With no body forms, invoking the function yields nil.
    if not tail:
        raise EmberArityError("lambda requires at least a parameter list")

    formals, rest = parse_parameters(tail[0])
    return Closure(formals, tail[1:], env, rest=rest)
