"""Text rendering for kuhi values and stacks."""

from __future__ import annotations

import math
import os
from collections.abc import Sequence
from fractions import Fraction
from typing import Final

from .values import Complex, Epsilon, Float, Infinity, Integer, List, Pi, Rational, Undefined, Value

_FLOAT_DIGITS: Final[int] = max(0, int(os.environ.get("KUHI_FLOAT_DIGITS", "10")))

MINUS: Final[str] = "⁻"


def _signed(text: str, negative: bool) -> str:
    return f"{MINUS}{text}" if negative else text


def _decimal_places(denominator: int) -> int | None:
    """Smallest k with denominator | 10**k, or None if the expansion repeats."""
    counts = []
    for factor in (2, 5):
        count = 0
        while denominator % factor == 0:
            denominator //= factor
            count += 1
        counts.append(count)
    return max(counts) if denominator == 1 else None


def format_integer(value: int) -> str:
    return _signed(str(abs(value)), value < 0)


def format_fraction(value: Fraction, *, decimal: bool = True) -> str:
    """``n/d`` form, or an exact decimal when ``decimal`` is set and one exists."""
    if value.denominator == 1:
        return format_integer(value.numerator)
    magnitude = abs(value)
    places = _decimal_places(magnitude.denominator) if decimal else None
    if places is not None:
        scaled = str(magnitude.numerator * 10**places // magnitude.denominator).rjust(places + 1, "0")
        text = f"{scaled[:-places]}.{scaled[-places:]}"
    else:
        text = f"{magnitude.numerator}/{magnitude.denominator}"
    return _signed(text, value < 0)


def format_real(number: float, digits: int = _FLOAT_DIGITS) -> str:
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return _signed("∞", number < 0)
    # repr gives the shortest round-tripping decimal, so 0.3 stays 0.3 before truncation.
    whole, frac = divmod(int(Fraction(repr(abs(number))) * 10**digits), 10**digits)
    text = str(whole)
    if frac:
        text += "." + str(frac).rjust(digits, "0").rstrip("0")
    return _signed(text, number < 0 and text != "0")


def format_pi(value: Pi) -> str:
    coefficient = value.coefficient
    magnitude = abs(coefficient)
    prefix = "" if magnitude == 1 else format_fraction(magnitude, decimal=False)
    suffix = "" if value.exponent == 1 else f"{MINUS}¹"
    return _signed(f"{prefix}π{suffix}", coefficient < 0)


def _render_item(value: Value) -> str:
    text = render(value)
    if isinstance(value, List) and value.items:
        return f"({text})"
    return text


def render(value: Value) -> str:
    """Single-line text for ``value`` using the source glyphs where one exists."""
    if isinstance(value, Integer):
        return format_integer(value.value)
    if isinstance(value, Rational):
        return format_fraction(value.value)
    if isinstance(value, Float):
        return format_real(float(value.value))
    if isinstance(value, Complex):
        number = complex(value.value)
        return f"{format_real(number.real)}i{format_real(number.imag)}"
    if isinstance(value, Infinity):
        return _signed("∞", value.sign < 0)
    if isinstance(value, Epsilon):
        return _signed("ε", value.sign < 0)
    if isinstance(value, Undefined):
        return "undefined"
    if isinstance(value, Pi):
        return format_pi(value)
    if isinstance(value, List):
        if not value.items:
            return "⟨⟩"
        return "‿".join(_render_item(item) for item in value.items)
    raise TypeError(f"cannot render {type(value).__name__}")


def render_stack(stack: Sequence[Value]) -> str:
    """One value per line, top of the stack first."""
    return "\n".join(render(value) for value in reversed(stack))
