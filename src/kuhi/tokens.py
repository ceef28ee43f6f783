"""Tokens and source locations for kuhi programs."""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
from typing import Union


@dataclass(frozen=True)
class SourceSpan:
    """Half-open character range ``[start, end)`` plus the line/column of ``start``."""

    start: int
    end: int
    line: int
    column: int

    def join(self, other: "SourceSpan") -> "SourceSpan":
        if other.start < self.start:
            return other.join(self)
        return SourceSpan(self.start, max(self.end, other.end), self.line, self.column)


@dataclass
class Cursor:
    """Mutable scan position, shared by nested parses so offsets stay absolute."""

    offset: int = 0
    line: int = 1
    column: int = 1

    def advance(self, ch: str) -> None:
        self.offset += 1
        if ch == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1

    def span_from(self, start: "Cursor") -> SourceSpan:
        return SourceSpan(start.offset, self.offset, start.line, start.column)

    def copy(self) -> "Cursor":
        return Cursor(self.offset, self.line, self.column)


@dataclass(frozen=True)
class Integer:
    value: int


@dataclass(frozen=True)
class Rational:
    value: Fraction


@dataclass(frozen=True)
class Complex:
    real: Fraction
    imag: Fraction


@dataclass(frozen=True)
class Infinity:
    pass


@dataclass(frozen=True)
class Epsilon:
    pass


@dataclass(frozen=True)
class Pi:
    multiplier: Fraction


@dataclass(frozen=True)
class Duplicate:
    pass


@dataclass(frozen=True)
class Pop:
    pass


@dataclass(frozen=True)
class Swap:
    pass


@dataclass(frozen=True)
class Negate:
    pass


@dataclass(frozen=True)
class Call:
    symbol: str


@dataclass(frozen=True)
class Inverse:
    token: "Token"


@dataclass(frozen=True)
class Scope:
    tokens: tuple[tuple["Token", SourceSpan], ...]


@dataclass(frozen=True)
class ListLiteral:
    items: tuple["Literal", ...]


# Transient tokens: produced by the scanner, consumed by post-processing.


@dataclass(frozen=True)
class Spacing:
    pass


@dataclass(frozen=True)
class InverseMarker:
    pass


@dataclass(frozen=True)
class ListBuilder:
    items: tuple["Literal", ...]


Literal = Union[Integer, Rational, Complex, Infinity, Epsilon, Pi]
Token = Union[Integer, Rational, Complex, Infinity, Epsilon, Pi, Duplicate, Pop, Swap, Negate, Call, Inverse, Scope, ListLiteral]
RawToken = Union[Token, Spacing, InverseMarker, ListBuilder]

LITERAL_TYPES = (Integer, Rational, Complex, Infinity, Epsilon, Pi)


def is_literal(token: object) -> bool:
    return isinstance(token, LITERAL_TYPES)
