"""Builtin operator table: symbol -> (forward, inverse, arity)."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Final

from . import algebra
from .errors import InvalidPop, NoInverse, TypeMismatch
from .values import Integer, List, Value

Stack = list[Value]
StackFn = Callable[[Stack], Stack]

U64_MAX: Final[int] = 2**64 - 1


@dataclass(frozen=True)
class Builtin:
    """A stack operator and its inverse.

    Both functions receive the whole stack and return a new one. ``call`` and
    ``call_inverse`` check that at least ``arity`` values are present first, so
    neither function needs to.
    """

    symbol: str
    forward: StackFn
    inverse: StackFn
    arity: int

    def _check_depth(self, stack: Stack) -> None:
        if self.arity > len(stack):
            raise InvalidPop(len(stack), self.arity)

    def call(self, stack: Stack) -> Stack:
        self._check_depth(stack)
        return self.forward(stack)

    def call_inverse(self, stack: Stack) -> Stack:
        self._check_depth(stack)
        return self.inverse(stack)


class BuiltinTable(Mapping[str, Builtin]):
    """Read-only symbol table handed to the evaluator."""

    def __init__(self, builtins: Iterable[Builtin]) -> None:
        self._table = MappingProxyType({builtin.symbol: builtin for builtin in builtins})

    def __getitem__(self, symbol: str) -> Builtin:
        return self._table[symbol]

    def __iter__(self) -> Iterator[str]:
        return iter(self._table)

    def __len__(self) -> int:
        return len(self._table)


def unary(fn: Callable[[Value], Value]) -> StackFn:
    def apply(stack: Stack) -> Stack:
        return [*stack[:-1], fn(stack[-1])]

    apply.__name__ = fn.__name__
    return apply


def binary(fn: Callable[[Value, Value], Value]) -> StackFn:
    """Lift ``fn`` so that ``[.., a, b]`` (``b`` on top) becomes ``[.., fn(a, b)]``."""

    def apply(stack: Stack) -> Stack:
        return [*stack[:-2], fn(stack[-2], stack[-1])]

    apply.__name__ = fn.__name__
    return apply


def no_inverse(_stack: Stack) -> Stack:
    raise NoInverse()


def duplicate(stack: Stack) -> Stack:
    return [*stack, stack[-1]]


def pop(stack: Stack) -> Stack:
    return stack[:-1]


def swap(stack: Stack) -> Stack:
    return [*stack[:-2], stack[-1], stack[-2]]


def rotate(stack: Stack) -> Stack:
    a, b, c = stack[-3:]
    return [*stack[:-3], b, c, a]


def rotate_back(stack: Stack) -> Stack:
    a, b, c = stack[-3:]
    return [*stack[:-3], c, a, b]


def iota(bound: Value) -> List:
    if not isinstance(bound, Integer) or not 1 <= bound.value <= U64_MAX:
        raise TypeMismatch("positive Integer", bound.kind.value)
    return List(tuple(Integer(i) for i in range(1, bound.value + 1)))


def cube(value: Value) -> Value:
    return algebra.pow(value, Integer(3))


def cube_root(value: Value) -> Value:
    return algebra.root(value, Integer(3))


DEFAULT_BUILTINS: Final[tuple[Builtin, ...]] = (
    Builtin(".", duplicate, no_inverse, 1),
    Builtin(",", pop, no_inverse, 1),
    Builtin("↔", swap, swap, 2),
    Builtin("+", binary(algebra.add), binary(algebra.sub), 2),
    Builtin("-", binary(algebra.sub), binary(algebra.add), 2),
    Builtin("×", binary(algebra.mul), binary(algebra.div), 2),
    Builtin("÷", binary(algebra.div), binary(algebra.mul), 2),
    Builtin("ⁿ", binary(algebra.pow), binary(algebra.root), 2),
    Builtin("√", binary(algebra.root), binary(algebra.pow), 2),
    Builtin("↻", rotate, rotate_back, 3),
    Builtin("◯", unary(algebra.sin), unary(algebra.asin), 1),
    Builtin("⌒", unary(algebra.sinh), unary(algebra.asinh), 1),
    Builtin("∛", unary(cube_root), unary(cube), 1),
    Builtin("ι", unary(iota), no_inverse, 1),
)

BUILTINS: Final[BuiltinTable] = BuiltinTable(DEFAULT_BUILTINS)
