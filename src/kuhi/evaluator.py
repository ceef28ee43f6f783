"""Right-to-left stack evaluator for kuhi token streams."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Final

from .algebra import neg
from .builtins import BUILTINS, Builtin, Stack
from .errors import FunctionNotFound, InvalidPop, InverseOfNonFunction, KuhiRuntimeError, KuhiSyntaxError, TypeMismatch
from .parser import parse
from .tokens import Call, Cursor, Duplicate, Inverse, ListLiteral, Negate, Pop, Scope, SourceSpan, Swap, Token, is_literal
from .values import List, Value, from_literal, make_list

logger = logging.getLogger(__name__)

_PROGRAM_CACHE_MAX: Final[int] = max(1, int(os.environ.get("KUHI_PROGRAM_CACHE_MAX", "256")))

# Dedicated stack tokens share the builtin table entries of their glyphs.
_STACK_TOKEN_SYMBOLS: Final[dict[type, str]] = {
    Duplicate: ".",
    Pop: ",",
    Swap: "↔",
}


@lru_cache(maxsize=_PROGRAM_CACHE_MAX)
def _parse_cached(source: str) -> tuple[tuple[Token, SourceSpan], ...]:
    return tuple(parse(source))


class Evaluator:
    """Runs token streams against an operand stack.

    Tokens execute from last to first. Literals push values, operators dispatch
    through ``builtins`` (any mapping of symbol to :class:`~kuhi.builtins.Builtin`),
    and bracketed scopes run on a fresh stack seeded from the List on top.
    Failures surface as :class:`~kuhi.errors.KuhiRuntimeError` carrying the span
    of the token that raised them.
    """

    def __init__(self, builtins: Mapping[str, Builtin] = BUILTINS) -> None:
        self.builtins = builtins

    def run(self, tokens: Sequence[tuple[Token, SourceSpan]], stack: Sequence[Value] | None = None) -> Stack:
        current: Stack = [] if stack is None else list(stack)
        for token, span in reversed(tokens):
            try:
                current = self._step(token, current)
            except KuhiRuntimeError as err:
                err.at(span)
                raise
            logger.debug("%s -> depth %d", type(token).__name__, len(current))
        return current

    def _step(self, token: Token, stack: Stack) -> Stack:
        if is_literal(token):
            return [*stack, from_literal(token)]
        if isinstance(token, ListLiteral):
            return [*stack, make_list(from_literal(item) for item in token.items)]
        if isinstance(token, Scope):
            return self._run_scope(token, stack)
        if isinstance(token, Inverse):
            return self._apply(token.token, stack, inverse=True)
        return self._apply(token, stack, inverse=False)

    def _lookup(self, symbol: str) -> Builtin:
        try:
            return self.builtins[symbol]
        except KeyError:
            raise FunctionNotFound(symbol) from None

    def _apply(self, token: Token, stack: Stack, *, inverse: bool) -> Stack:
        if isinstance(token, Inverse):
            return self._apply(token.token, stack, inverse=not inverse)
        if isinstance(token, Negate):
            # Negation is its own inverse.
            if not stack:
                raise InvalidPop(0, 1)
            return [*stack[:-1], neg(stack[-1])]

        if isinstance(token, Call):
            symbol = token.symbol
        elif type(token) in _STACK_TOKEN_SYMBOLS:
            symbol = _STACK_TOKEN_SYMBOLS[type(token)]
        else:
            raise InverseOfNonFunction()

        builtin = self._lookup(symbol)
        if inverse:
            return builtin.call_inverse(stack)
        return builtin.call(stack)

    def _run_scope(self, scope: Scope, stack: Stack) -> Stack:
        if not stack:
            raise InvalidPop(0, 1)
        *rest, top = stack
        if not isinstance(top, List):
            raise TypeMismatch("List", top.kind.value)

        logger.debug("entering scope seeded with %d values", len(top))
        results = self.run(scope.tokens, top.items)
        logger.debug("leaving scope with %d values", len(results))
        if not results:
            return rest
        if len(results) == 1:
            return [*rest, results[0]]
        return [*rest, make_list(results)]


def evaluate(source: str, stack: Sequence[Value] | None = None, *, evaluator: Evaluator | None = None) -> Stack:
    """Parse and run ``source``, returning the final stack (top last)."""
    runner = Evaluator() if evaluator is None else evaluator
    return runner.run(_parse_cached(source), stack)


@dataclass
class Session:
    """Line-by-line evaluation with a persistent stack and source cursor.

    The cursor keeps counting across lines, so spans in errors are offsets into
    the whole session transcript. A failed line leaves the stack untouched.
    """

    evaluator: Evaluator = field(default_factory=Evaluator)
    stack: Stack = field(default_factory=list)
    cursor: Cursor = field(default_factory=Cursor)

    def __call__(self, line: str) -> Stack:
        start = self.cursor.copy()
        try:
            tokens = parse(line, self.cursor)
        except KuhiSyntaxError:
            self.cursor = start
            for ch in line:
                self.cursor.advance(ch)
            self._end_line(line)
            raise
        self._end_line(line)
        self.stack = self.evaluator.run(tokens, self.stack)
        return self.stack

    def _end_line(self, line: str) -> None:
        if not line.endswith("\n"):
            self.cursor.advance("\n")
