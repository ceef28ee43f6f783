"""Arithmetic over kuhi values: promotion, symbolic limits and exact powers.

Every function either returns a new :mod:`kuhi.values` value or raises a
:class:`~kuhi.errors.KuhiRuntimeError`; operands are never mutated.

Promotion follows Integer < Rational < Float < Complex. Pi-multiples stay exact
while they only meet other Pi-multiples and are evaluated to a Float as soon as
they meet an ordinary number. Infinity, Epsilon and Undefined follow the limit
rules below; Undefined absorbs everything under ``+`` and ``×``.
"""

from __future__ import annotations

import operator
from fractions import Fraction
from typing import Callable, Final

import jax.numpy as jnp

from .errors import DivideByZero, ExponentTooBig, ListElementSizeMismatch, TypeMismatch, U32_MAX, ZerothRoot
from .values import (
    EXACT_TYPES,
    Complex,
    Epsilon,
    Float,
    Infinity,
    Integer,
    List,
    Pi,
    Rational,
    Undefined,
    Value,
    exact,
    kinds,
    make_list,
    sign_of,
    to_complex,
    to_float,
    to_fraction,
)

# sin(k·π) for the k in [0, 2) whose sine is rational.
_SIN_OF_PI_MULTIPLE: Final[dict[Fraction, Fraction]] = {
    Fraction(0): Fraction(0),
    Fraction(1, 6): Fraction(1, 2),
    Fraction(1, 2): Fraction(1),
    Fraction(5, 6): Fraction(1, 2),
    Fraction(1): Fraction(0),
    Fraction(7, 6): Fraction(-1, 2),
    Fraction(3, 2): Fraction(-1),
    Fraction(11, 6): Fraction(-1, 2),
}

_ASIN_AS_PI_MULTIPLE: Final[dict[Fraction, Fraction]] = {
    Fraction(1): Fraction(1, 2),
    Fraction(1, 2): Fraction(1, 6),
    Fraction(-1, 2): Fraction(-1, 6),
    Fraction(-1): Fraction(-1, 2),
}


def _require_numbers(*values: Value) -> None:
    if any(isinstance(value, List) for value in values):
        raise TypeMismatch("Number", kinds(*values))


def _numeric(a: Value, b: Value, exact_op: Callable, array_op: Callable) -> Value:
    if isinstance(a, Integer) and isinstance(b, Integer):
        return Integer(exact_op(a.value, b.value))
    if isinstance(a, EXACT_TYPES) and isinstance(b, EXACT_TYPES):
        return Rational(exact_op(to_fraction(a), to_fraction(b)))
    if isinstance(a, Complex) or isinstance(b, Complex):
        return Complex(array_op(to_complex(a).value, to_complex(b).value))
    return Float(array_op(to_float(a).value, to_float(b).value))


def _broadcast(fn: Callable[[Value, Value], Value], a: Value, b: Value) -> List:
    if isinstance(a, List) and isinstance(b, List):
        if len(a) != len(b):
            raise ListElementSizeMismatch(len(a), len(b))
        return make_list(fn(x, y) for x, y in zip(a, b))
    if isinstance(a, List):
        return make_list(fn(x, b) for x in a)
    return make_list(fn(a, y) for y in b)


def is_zero(value: Value) -> bool:
    if isinstance(value, EXACT_TYPES):
        return value.value == 0
    if isinstance(value, (Float, Complex)):
        return bool(value.value == 0)
    if isinstance(value, Pi):
        return value.coefficient == 0
    return False


def add(a: Value, b: Value) -> Value:
    _require_numbers(a, b)
    if isinstance(a, Undefined) or isinstance(b, Undefined):
        return Undefined()

    if isinstance(a, Infinity) and isinstance(b, Infinity):
        return a if a.sign == b.sign else Undefined()
    if isinstance(a, Infinity):
        return a
    if isinstance(b, Infinity):
        return b

    if isinstance(a, Epsilon) and isinstance(b, Epsilon):
        return a if a.sign == b.sign else Undefined()
    if isinstance(a, Epsilon):
        return b
    if isinstance(b, Epsilon):
        return a

    if isinstance(a, Pi) and isinstance(b, Pi) and a.exponent == b.exponent:
        return Pi(a.coefficient + b.coefficient, a.exponent)
    return _numeric(a, b, operator.add, jnp.add)


def neg(value: Value) -> Value:
    if isinstance(value, Integer):
        return Integer(-value.value)
    if isinstance(value, Rational):
        return Rational(-value.value)
    if isinstance(value, Float):
        return Float(-value.value)
    if isinstance(value, Complex):
        return Complex(-value.value)
    if isinstance(value, Infinity):
        return Infinity(-value.sign)
    if isinstance(value, Epsilon):
        return Epsilon(-value.sign)
    if isinstance(value, Pi):
        return Pi(-value.coefficient, value.exponent)
    raise TypeMismatch("Number", value.kind.value)


def sub(a: Value, b: Value) -> Value:
    _require_numbers(a, b)
    if isinstance(b, Undefined):
        return b
    return add(a, neg(b))


def mul(a: Value, b: Value) -> Value:
    _require_numbers(a, b)
    if isinstance(a, Undefined) or isinstance(b, Undefined):
        return Undefined()

    if isinstance(a, Infinity) or isinstance(b, Infinity):
        inf, other = (a, b) if isinstance(a, Infinity) else (b, a)
        if isinstance(other, Infinity):
            return Infinity(inf.sign * other.sign)
        if isinstance(other, (Epsilon, Complex)):
            return Undefined()
        sign = sign_of(other)
        return Undefined() if sign == 0 else Infinity(inf.sign * sign)

    if isinstance(a, Epsilon) or isinstance(b, Epsilon):
        eps, other = (a, b) if isinstance(a, Epsilon) else (b, a)
        if isinstance(other, Epsilon):
            return Epsilon(eps.sign * other.sign)
        return mul(Integer(eps.sign), other)

    if isinstance(a, Pi) and isinstance(b, Pi) and a.exponent != b.exponent:
        # π · π⁻¹ cancels.
        return Rational(Fraction(a.coefficient * b.coefficient))
    return _numeric(a, b, operator.mul, jnp.multiply)


def reciprocal(value: Value) -> Value:
    _require_numbers(value)
    if is_zero(value):
        raise DivideByZero()
    if isinstance(value, Integer):
        return exact(Fraction(1, value.value))
    if isinstance(value, Rational):
        return Rational(1 / value.value)
    if isinstance(value, Float):
        return Float(1 / value.value)
    if isinstance(value, Complex):
        return Complex(1 / value.value)
    if isinstance(value, Infinity):
        return Epsilon(value.sign)
    if isinstance(value, Epsilon):
        return Infinity(value.sign)
    if isinstance(value, Pi):
        return Pi(1 / value.coefficient, -value.exponent)
    return value


def div(a: Value, b: Value) -> Value:
    if isinstance(a, Integer) and isinstance(b, Integer):
        if b.value == 0:
            raise DivideByZero()
        return exact(Fraction(a.value, b.value))
    return mul(a, reciprocal(b))


def _check_exponent(exponent: int) -> None:
    if abs(exponent) > U32_MAX:
        raise ExponentTooBig(exponent)


def _exact_power(base: Integer | Rational, exponent: int) -> Value:
    """Exact power; the result is Rational whenever ``base`` is."""
    value = to_fraction(base)
    if exponent < 0 and value == 0:
        raise DivideByZero()
    if value == 1 or (value == 0 and exponent > 0):
        result = value
    elif value == -1:
        result = Fraction(-1 if exponent % 2 else 1)
    else:
        _check_exponent(exponent)
        result = value**exponent
    if isinstance(base, Integer):
        return exact(result)
    return Rational(result)


def _integer_root(n: int, k: int) -> int | None:
    """Exact ``k``-th root of a non-negative integer, or None."""
    if n < 2:
        return n
    if k >= n.bit_length():
        # 1 < root < 2
        return None
    x = 1 << -(-n.bit_length() // k)
    while True:
        y = ((k - 1) * x + n // x ** (k - 1)) // k
        if y >= x:
            break
        x = y
    return x if x**k == n else None


def _exact_root(value: Fraction, degree: int) -> Fraction | None:
    if value < 0:
        if degree % 2 == 0:
            return None
        magnitude = _exact_root(-value, degree)
        return None if magnitude is None else -magnitude
    numerator = _integer_root(value.numerator, degree)
    denominator = _integer_root(value.denominator, degree)
    if numerator is None or denominator is None:
        return None
    return Fraction(numerator, denominator)


def _is_integral(value: Value) -> bool:
    if isinstance(value, Integer):
        return True
    if isinstance(value, Float):
        return float(value.value).is_integer()
    return False


def _float_power(base: Value, exponent: Value) -> Value:
    if not isinstance(exponent, Complex) and is_zero(base) and sign_of(exponent) < 0:
        raise DivideByZero()
    if isinstance(base, Complex) or isinstance(exponent, Complex) or (sign_of(base) < 0 and not _is_integral(exponent)):
        return Complex(jnp.power(to_complex(base).value, to_complex(exponent).value))
    return Float(jnp.power(to_float(base).value, to_float(exponent).value))


def pow(base: Value, exponent: Value) -> Value:
    """``base`` raised to ``exponent``; exact whenever the result is representable exactly."""
    if isinstance(base, List) or isinstance(exponent, List):
        return _broadcast(pow, base, exponent)
    if isinstance(base, Undefined) or isinstance(exponent, Undefined):
        return Undefined()
    if isinstance(exponent, (Infinity, Epsilon)):
        return Undefined()

    if isinstance(base, (Infinity, Epsilon)):
        if not isinstance(exponent, Integer):
            return Undefined()
        n = exponent.value
        if n == 0:
            return Integer(1)
        sign = base.sign ** (n % 2)
        if n > 0:
            return type(base)(sign)
        return Epsilon(sign) if isinstance(base, Infinity) else Infinity(sign)

    if isinstance(base, Pi) and isinstance(exponent, Integer) and exponent.value in (-1, 0, 1):
        if exponent.value == 0:
            return Integer(1)
        return base if exponent.value == 1 else reciprocal(base)

    if isinstance(base, EXACT_TYPES) and isinstance(exponent, Integer):
        return _exact_power(base, exponent.value)
    if isinstance(base, EXACT_TYPES) and isinstance(exponent, EXACT_TYPES):
        ratio = to_fraction(exponent)
        if ratio.denominator <= U32_MAX:
            exact_root = _exact_root(to_fraction(base), ratio.denominator)
            if exact_root is not None:
                return _exact_power(Rational(exact_root), ratio.numerator)
    return _float_power(base, exponent)


def root(base: Value, degree: Value) -> Value:
    """``degree``-th root of ``base``, the inverse of :func:`pow` for a fixed exponent."""
    if isinstance(base, List) or isinstance(degree, List):
        return _broadcast(root, base, degree)
    if is_zero(degree):
        raise ZerothRoot()
    if isinstance(base, EXACT_TYPES) and isinstance(degree, Integer):
        magnitude = _exact_root(to_fraction(base), abs(degree.value))
        if magnitude is not None:
            result = Integer(magnitude.numerator) if isinstance(base, Integer) else Rational(magnitude)
            return result if degree.value > 0 else reciprocal(result)
    return pow(base, reciprocal(degree))


def _transcendental(value: Value, fn: Callable) -> Value:
    if isinstance(value, Complex):
        return Complex(fn(value.value))
    return Float(fn(to_float(value).value))


def sin(value: Value) -> Value:
    if isinstance(value, List):
        return make_list(sin(item) for item in value)
    if isinstance(value, (Undefined, Infinity)):
        return Undefined()
    if isinstance(value, Epsilon):
        return value
    if isinstance(value, Pi) and value.exponent == 1:
        exact_sine = _SIN_OF_PI_MULTIPLE.get(value.coefficient % 2)
        if exact_sine is not None:
            return Rational(exact_sine)
    if isinstance(value, EXACT_TYPES) and value.value == 0:
        return value
    return _transcendental(value, jnp.sin)


def asin(value: Value) -> Value:
    if isinstance(value, List):
        return make_list(asin(item) for item in value)
    if isinstance(value, (Undefined, Infinity)):
        return Undefined()
    if isinstance(value, Epsilon):
        return value
    if isinstance(value, EXACT_TYPES):
        if value.value == 0:
            return value
        multiple = _ASIN_AS_PI_MULTIPLE.get(to_fraction(value))
        if multiple is not None:
            return Pi(multiple, 1)
    if not isinstance(value, Complex) and abs(float(to_float(value).value)) > 1:
        return Complex(jnp.arcsin(to_complex(value).value))
    return _transcendental(value, jnp.arcsin)


def sinh(value: Value) -> Value:
    if isinstance(value, List):
        return make_list(sinh(item) for item in value)
    if isinstance(value, (Undefined, Infinity, Epsilon)):
        return value
    if isinstance(value, EXACT_TYPES) and value.value == 0:
        return value
    return _transcendental(value, jnp.sinh)


def asinh(value: Value) -> Value:
    if isinstance(value, List):
        return make_list(asinh(item) for item in value)
    if isinstance(value, (Undefined, Infinity, Epsilon)):
        return value
    if isinstance(value, EXACT_TYPES) and value.value == 0:
        return value
    return _transcendental(value, jnp.arcsinh)
