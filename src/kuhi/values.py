"""Runtime value model for the kuhi evaluator."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from enum import Enum
from fractions import Fraction
from typing import ClassVar, Final, Iterable, Union

import jax
import jax.numpy as jnp

from . import tokens
from .errors import ListElementSizeMismatch, ListTypeMismatch, TypeMismatch

_ENABLE_X64: Final[bool] = os.environ.get("KUHI_DISABLE_X64", "0") != "1"
if _ENABLE_X64:
    # Must run before any array is created.
    jax.config.update("jax_enable_x64", True)


class ValueKind(str, Enum):
    INTEGER = "Integer"
    RATIONAL = "Rational"
    FLOAT = "Float"
    COMPLEX = "Complex"
    LIST = "List"
    INFINITY = "Infinity"
    EPSILON = "Epsilon"
    UNDEFINED = "Undefined"
    PI = "Pi"


@dataclass(frozen=True)
class Integer:
    value: int
    kind: ClassVar[ValueKind] = ValueKind.INTEGER


@dataclass(frozen=True)
class Rational:
    """Exact fraction; ``Fraction`` keeps it reduced with a positive denominator."""

    value: Fraction
    kind: ClassVar[ValueKind] = ValueKind.RATIONAL


@dataclass(frozen=True)
class Float:
    value: jax.Array
    kind: ClassVar[ValueKind] = ValueKind.FLOAT


@dataclass(frozen=True)
class Complex:
    value: jax.Array
    kind: ClassVar[ValueKind] = ValueKind.COMPLEX


@dataclass(frozen=True)
class List:
    items: tuple["Value", ...]
    kind: ClassVar[ValueKind] = ValueKind.LIST

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)


@dataclass(frozen=True)
class Infinity:
    sign: int = 1
    kind: ClassVar[ValueKind] = ValueKind.INFINITY


@dataclass(frozen=True)
class Epsilon:
    """Signed infinitesimal, the reciprocal of the Infinity with the same sign."""

    sign: int = 1
    kind: ClassVar[ValueKind] = ValueKind.EPSILON


@dataclass(frozen=True)
class Undefined:
    kind: ClassVar[ValueKind] = ValueKind.UNDEFINED


@dataclass(frozen=True)
class Pi:
    """``coefficient × π`` when ``exponent`` is 1, ``coefficient × π⁻¹`` when it is -1."""

    coefficient: Fraction
    exponent: int = 1
    kind: ClassVar[ValueKind] = ValueKind.PI


Value = Union[Integer, Rational, Float, Complex, List, Infinity, Epsilon, Undefined, Pi]

EXACT_TYPES = (Integer, Rational)

# Strongest-type-wins order for list elements.
_PROMOTION_RANK: Final[dict[ValueKind, int]] = {
    ValueKind.INTEGER: 0,
    ValueKind.RATIONAL: 1,
    ValueKind.FLOAT: 2,
    ValueKind.COMPLEX: 3,
}


def exact(value: int | Fraction) -> Integer | Rational:
    """Result of an Integer-only operation such as division: integral fractions stay Integer."""
    if isinstance(value, Fraction):
        if value.denominator == 1:
            return Integer(value.numerator)
        return Rational(value)
    return Integer(value)


def _to_double(value) -> float:
    """`float(value)`, saturating to a signed infinity outside the double range."""
    try:
        return float(value)
    except OverflowError:
        return -math.inf if value < 0 else math.inf


def make_float(value) -> Float:
    return Float(jnp.asarray(_to_double(value)))


def make_complex(real, imag=0.0) -> Complex:
    return Complex(jnp.asarray(complex(_to_double(real), _to_double(imag))))


def pi_to_float(value: Pi) -> Float:
    coefficient = jnp.asarray(_to_double(value.coefficient))
    if value.exponent > 0:
        return Float(coefficient * jnp.pi)
    return Float(coefficient / jnp.pi)


def to_fraction(value: Integer | Rational) -> Fraction:
    return Fraction(value.value)


def to_float(value: Value) -> Float:
    if isinstance(value, Float):
        return value
    if isinstance(value, EXACT_TYPES):
        return make_float(value.value)
    if isinstance(value, Pi):
        return pi_to_float(value)
    raise TypeMismatch("Float", value.kind.value)


def to_complex(value: Value) -> Complex:
    if isinstance(value, Complex):
        return value
    return make_complex(to_float(value).value)


def kinds(*values: Value) -> str:
    return ", ".join(value.kind.value for value in values)


def _promote(value: Value, kind: ValueKind) -> Value:
    if value.kind == kind:
        return value
    if kind == ValueKind.RATIONAL:
        return Rational(to_fraction(value))
    if kind == ValueKind.FLOAT:
        return to_float(value)
    return to_complex(value)


def make_list(items: Iterable[Value]) -> List:
    """Build a homogeneous List, promoting numeric elements to the strongest kind."""
    items = tuple(items)
    if not items:
        return List(())

    first = items[0]
    if all(item.kind in _PROMOTION_RANK for item in items):
        target = max((item.kind for item in items), key=_PROMOTION_RANK.__getitem__)
        return List(tuple(_promote(item, target) for item in items))

    for item in items[1:]:
        if item.kind != first.kind:
            raise ListTypeMismatch(first.kind.value, item.kind.value)
        if isinstance(first, List) and len(item) != len(first):
            raise ListElementSizeMismatch(len(first), len(item))
    return List(items)


def from_literal(token: tokens.Literal) -> Value:
    """Value pushed by a literal token."""
    if isinstance(token, tokens.Integer):
        return Integer(token.value)
    if isinstance(token, tokens.Rational):
        return Rational(token.value)
    if isinstance(token, tokens.Complex):
        return make_complex(token.real, token.imag)
    if isinstance(token, tokens.Infinity):
        return Infinity(1)
    if isinstance(token, tokens.Epsilon):
        return Epsilon(1)
    if isinstance(token, tokens.Pi):
        return Pi(token.multiplier, 1)
    raise TypeError(f"{type(token).__name__} is not a literal token")


def sign_of(value: Value) -> int:
    """Sign of a real value (-1, 0 or 1)."""
    if isinstance(value, EXACT_TYPES):
        return (value.value > 0) - (value.value < 0)
    if isinstance(value, Float):
        number = float(value.value)
        return (number > 0) - (number < 0)
    if isinstance(value, (Infinity, Epsilon)):
        return value.sign
    if isinstance(value, Pi):
        return (value.coefficient > 0) - (value.coefficient < 0)
    raise TypeMismatch("Number", value.kind.value)
