"""Binary field descriptions for device protocol data.

    (def-field brightness uint8 (range 0 100))
    (def-field mode uint8 (values 1 2 4))
    (def-field rgb uint8 (repeat 3))
    (def-field checksum uint16 (deferred-validation (values expected-sum)))

A field's storage type is a numpy integer dtype; sizes come from the dtype's
itemsize and values are decoded little-endian with numpy.frombuffer.
Deferred options are kept as unevaluated forms and only turned into a
constraint when a value is validated, so they can refer to bindings that
exist by then (earlier fields of a record, for instance).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field as dataclass_field
from typing import Protocol

import numpy as np

from ember import EvaluatorFn, LispValue, SExpression
from ember.debug.controller import signal_error
from ember.errors import EmberDomainError, EmberIndexError, EmberSyntaxError, EmberTypeError
from ember.registry import PrimitiveRegistry
from ember.types.environment import Environment
from ember.types.host_object import HostObject
from ember.types.pair import Pair
from ember.types.symbol import Symbol
from ember.types.vector import Vector
from ember.values import is_integer, is_list, is_object, is_vector, object_payload, to_string, vector_items

logger = logging.getLogger(__name__)

FIELD_TAG = "device-field"


class Constraint(Protocol):
    def check(self, value: int, env: Environment) -> bool: ...


@dataclass(frozen=True)
class RangeConstraint:
    low: int
    high: int

    def check(self, value: int, env: Environment) -> bool:
        return self.low <= value <= self.high


@dataclass(frozen=True)
class ValuesConstraint:
    allowed: tuple[int, ...]

    def check(self, value: int, env: Environment) -> bool:
        return value in self.allowed


@dataclass(frozen=True)
class DeferredConstraint:
    """An option form parsed in the validating environment on each check."""

    form: SExpression

    def check(self, value: int, env: Environment) -> bool:
        from ember.evaluation.evaluator import evaluate

        constraint = parse_constraint(self.form, env, evaluate)
        return constraint.check(value, env)


@dataclass
class DeviceField:
    name: str
    type_name: str
    dtype: np.dtype
    repeat_count: int = 1
    constraints: list[Constraint] = dataclass_field(default_factory=list)

    @property
    def size(self) -> int:
        """Bytes occupied by the field, every repetition included."""
        return self.dtype.itemsize * self.repeat_count

    def in_bounds(self, value: int) -> bool:
        info = np.iinfo(self.dtype)
        return int(info.min) <= value <= int(info.max)


@dataclass
class ExpandedField:
    """A field placed in a record: where it sits and the value it currently holds."""

    field: DeviceField
    offset: int
    size: int
    path: str
    value: LispValue = None

    def validate(self, env: Environment) -> bool:
        values = vector_items(self.value) if is_vector(self.value) else [self.value]
        for value in values:
            if not is_integer(value) or not self.field.in_bounds(value):
                return False
            if not all(c.check(value, env) for c in self.field.constraints):
                return False
        return True


# -------------------------------
# Option parsing
# -------------------------------
def _option_parts(form: SExpression) -> tuple[str, list[SExpression]]:
    if not isinstance(form, Pair) or not isinstance(form.car, Symbol) or not is_list(form):
        raise EmberSyntaxError(f"Field option must be a list headed by a name, got {to_string(form)}")
    return form.car.id, list(form.cdr)


def _integer(value: LispValue, what: str) -> int:
    if not is_integer(value):
        raise EmberTypeError(f"def-field {what} needs integers, but got {to_string(value)}")
    return value


def parse_constraint(form: SExpression, env: Environment, evaluate_fn: EvaluatorFn) -> Constraint:
    name, operands = _option_parts(form)
    match name:
        case "range":
            if len(operands) != 2:
                raise EmberSyntaxError("range needs a low and a high bound")
            low, high = (_integer(evaluate_fn(x, env), "range") for x in operands)
            if low > high:
                raise EmberDomainError(f"range low bound {low} is above its high bound {high}")
            return RangeConstraint(low, high)
        case "values":
            evaluated = [evaluate_fn(x, env) for x in operands]
            if len(evaluated) == 1 and is_list(evaluated[0]):
                evaluated = list(evaluated[0])
            return ValuesConstraint(tuple(_integer(v, "values") for v in evaluated))
        case "deferred-validation":
            if len(operands) != 1:
                raise EmberSyntaxError("deferred-validation needs exactly one option")
            return DeferredConstraint(operands[0])
    raise EmberSyntaxError(f"Unknown field option: {name}")


def field_dtype(type_name: str) -> np.dtype:
    try:
        dtype = np.dtype(type_name)
    except TypeError as e:
        raise EmberTypeError(f"Unknown field type {type_name}") from e
    if dtype.kind not in "iu":
        raise EmberTypeError(f"Field type {type_name} is not an integer type")
    return dtype


# -------------------------------
# Primitives
# -------------------------------
def def_field(env: Environment, forms: list[SExpression], evaluate_fn: EvaluatorFn) -> LispValue:
    """(def-field name type option...)"""
    name, type_form, *options = forms
    if not isinstance(name, Symbol) or not isinstance(type_form, Symbol):
        return signal_error("def-field needs a field name and a type name", env, EmberTypeError)

    device_field = DeviceField(name.id, type_form.id, field_dtype(type_form.id))
    for option in options:
        option_name, operands = _option_parts(option)
        if option_name == "repeat":
            if len(operands) != 1:
                raise EmberSyntaxError("repeat needs a count")
            count = _integer(evaluate_fn(operands[0], env), "repeat")
            if count < 1:
                raise EmberDomainError(f"repeat needs a positive count, but got {count}")
            device_field.repeat_count = count
        else:
            device_field.constraints.append(parse_constraint(option, env, evaluate_fn))

    logger.debug("Defined field %s: %s x%d", device_field.name, device_field.type_name, device_field.repeat_count)
    return HostObject(device_field, FIELD_TAG)


def _field_arg(name: str, value: LispValue) -> DeviceField:
    if not is_object(value) or not isinstance(object_payload(value), DeviceField):
        raise EmberTypeError(f"{name} needs a field, but got {to_string(value)}")
    return object_payload(value)


def field_name(env: Environment, args: list[LispValue]) -> str:
    return _field_arg("field-name", args[0]).name


def field_type(env: Environment, args: list[LispValue]) -> str:
    return _field_arg("field-type", args[0]).type_name


def field_size(env: Environment, args: list[LispValue]) -> int:
    return _field_arg("field-size", args[0]).size


def field_repeat(env: Environment, args: list[LispValue]) -> int:
    return _field_arg("field-repeat", args[0]).repeat_count


def field_valid(env: Environment, args: list[LispValue]) -> bool:
    """(field-valid? field value): bounds and constraints checked in the caller's frame."""
    device_field = _field_arg("field-valid?", args[0])
    expanded = ExpandedField(device_field, 0, device_field.size, device_field.name, args[1])
    return expanded.validate(env)


def decode_field(env: Environment, args: list[LispValue]) -> LispValue:
    """(decode-field field bytes [offset]): little-endian value(s) read from a byte vector."""
    device_field = _field_arg("decode-field", args[0])
    if not is_vector(args[1]):
        raise EmberTypeError(f"decode-field needs a vector of bytes, but got {to_string(args[1])}")
    offset = args[2] if len(args) == 3 else 0
    if not is_integer(offset):
        raise EmberTypeError(f"decode-field needs an integer offset, but got {to_string(offset)}")

    data = vector_items(args[1])
    end = offset + device_field.size
    if offset < 0 or end > len(data):
        return signal_error(
            f"decode-field needs {device_field.size} byte(s) at offset {offset}, but the vector has {len(data)}",
            env,
            EmberIndexError,
        )
    try:
        raw = bytes(data[offset:end])
    except (TypeError, ValueError) as e:
        raise EmberDomainError(f"decode-field needs byte values (0-255): {e}") from e

    decoded = np.frombuffer(raw, dtype=device_field.dtype.newbyteorder("<")).tolist()
    if device_field.repeat_count == 1:
        return decoded[0]
    return Vector(decoded)


def register(registry: PrimitiveRegistry) -> None:
    registry.register_special("def-field", ">=2", def_field)
    registry.register_all(
        [
            ("field-name", 1, field_name),
            ("field-type", 1, field_type),
            ("field-size", 1, field_size),
            ("field-repeat", 1, field_repeat),
            ("field-valid?", 2, field_valid),
            ("decode-field", "2|3", decode_field),
        ]
    )
