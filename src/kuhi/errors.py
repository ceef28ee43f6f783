"""Structured error types for parser/runtime separation."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .tokens import SourceSpan, Token

U32_MAX = 2**32 - 1


class KuhiError(Exception):
    """Base class for structured kuhi errors."""

    message: str = "error"
    note: str = ""
    span: "SourceSpan | None" = None

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.span is None:
            return self.message
        return f"{self.message} at line {self.span.line}, column {self.span.column}"


# Syntax errors


class KuhiSyntaxError(KuhiError):
    """Parse failure: carries the offending span and the tokens scanned before it."""

    def __init__(self, message: str, span: "SourceSpan", tokens: "tuple[tuple[Token, SourceSpan], ...]" = ()) -> None:
        super().__init__(message)
        self.span = span
        self.tokens = tuple(tokens)


class InvalidSymbol(KuhiSyntaxError):
    note = "check the docs for a list of valid symbols"

    def __init__(self, symbol: str, span: "SourceSpan", tokens=()) -> None:
        super().__init__("invalid symbol", span, tokens)
        self.symbol = symbol


class UnmatchedParenthesis(KuhiSyntaxError):
    def __init__(self, is_open: bool, span: "SourceSpan", tokens=()) -> None:
        super().__init__("unmatched parenthesis", span, tokens)
        self.is_open = is_open

    @property
    def note(self) -> str:  # type: ignore[override]
        missing = "closing" if self.is_open else "opening"
        return f"there is a missing {missing} parenthesis in the code"


class LonelyInverse(KuhiSyntaxError):
    note = "must have something to invert"

    def __init__(self, span: "SourceSpan", tokens=()) -> None:
        super().__init__("lonely inverse", span, tokens)


# Runtime errors


class KuhiRuntimeError(KuhiError):
    """Evaluation failure; the evaluator attaches the span of the failing token."""

    def at(self, span: "SourceSpan") -> "KuhiRuntimeError":
        if self.span is None:
            self.span = span
        return self


class FunctionNotFound(KuhiRuntimeError):
    note = "check the docs for a list of functions"

    def __init__(self, symbol: str) -> None:
        super().__init__(f"function `{symbol}` not found")
        self.symbol = symbol


class ListTypeMismatch(KuhiRuntimeError):
    note = "ensure the list has elements of the same type"

    def __init__(self, first: str, second: str) -> None:
        super().__init__(f"list has an element of type `{first}` followed by one of type `{second}`")
        self.first = first
        self.second = second


class ListElementSizeMismatch(KuhiRuntimeError):
    note = "ensure the list has elements of the same size"

    def __init__(self, first: int, second: int) -> None:
        super().__init__(f"list has an element of size `{first}` followed by one of size `{second}`")
        self.first = first
        self.second = second


class InvalidPop(KuhiRuntimeError):
    note = "ensure you are using the correct function or add more values to the stack"

    def __init__(self, depth: int, arity: int) -> None:
        super().__init__(f"attempt to pop {arity} times from a stack of size {depth}")
        self.depth = depth
        self.arity = arity


class InvalidFoldWith(KuhiRuntimeError):
    note = "can only fold using binary operations"

    def __init__(self, arity: int) -> None:
        super().__init__(f"attempt to fold using a function of arity {arity}")
        self.arity = arity


class InvalidMapWith(KuhiRuntimeError):
    note = "can only map using unary operations"

    def __init__(self, arity: int) -> None:
        super().__init__(f"attempt to map using a function of arity {arity}")
        self.arity = arity


class InvalidFilterWith(KuhiRuntimeError):
    note = "can only filter using unary operations"

    def __init__(self, arity: int) -> None:
        super().__init__(f"attempt to filter using a function of arity {arity}")
        self.arity = arity


class TypeMismatch(KuhiRuntimeError):
    note = "ensure the function you're using works for the type of values on the stack"

    def __init__(self, expected: str, got: str) -> None:
        super().__init__(f"expected type `{expected}`, got `{got}`")
        self.expected = expected
        self.got = got


class ExponentTooBig(KuhiRuntimeError):
    note = f"max is {U32_MAX}"

    def __init__(self, exponent: int) -> None:
        super().__init__(f"exponent too big: {exponent}")
        self.exponent = exponent


class ZerothRoot(KuhiRuntimeError):
    message = "cannot take the 0th root"
    note = "try filtering the 0s on the stack"


class DivideByZero(KuhiRuntimeError):
    message = "cannot divide by zero"
    note = "try filtering the 0s on the stack\nuse ε to produce a small number instead of 0"


class NoInverse(KuhiRuntimeError):
    message = "function is not inversible"
    note = "rethink your logic"


class InverseOfNonFunction(KuhiRuntimeError):
    message = "cannot invert a non-function"
    note = "ensure inverse comes after a function"
