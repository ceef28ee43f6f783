"""Parser: scanner output to the final located token stream."""

from __future__ import annotations

import logging

from .errors import InvalidSymbol, LonelyInverse
from .lexer import ScannedTokens, tokenize
from .tokens import (
    Cursor,
    Inverse,
    InverseMarker,
    ListBuilder,
    ListLiteral,
    SourceSpan,
    Spacing,
    Token,
    is_literal,
)

logger = logging.getLogger(__name__)

TokenStream = list[tuple[Token, SourceSpan]]


def _resolve(scanned: ScannedTokens) -> TokenStream:
    """Fold list builders, drop spacing and attach inverse markers in one forward pass."""
    out: TokenStream = []
    builder: tuple[ListBuilder, SourceSpan] | None = None
    markers: list[SourceSpan] = []

    for token, span in scanned:
        if builder is not None:
            pending, pending_span = builder
            if isinstance(token, ListBuilder):
                builder = (ListBuilder(pending.items + token.items), pending_span.join(span))
                continue
            if not is_literal(token):
                raise InvalidSymbol("‿", pending_span, tuple(out))
            token, span = ListLiteral(pending.items + (token,)), pending_span.join(span)
            builder = None
        elif isinstance(token, ListBuilder):
            builder = (token, span)
            continue

        if isinstance(token, Spacing):
            continue
        if isinstance(token, InverseMarker):
            markers.append(span)
            continue

        while markers:
            token, span = Inverse(token), markers.pop().join(span)
        out.append((token, span))

    if builder is not None:
        raise InvalidSymbol("‿", builder[1], tuple(out))
    if markers:
        raise LonelyInverse(markers[-1], tuple(out))
    return out


def parse(source: str, cursor: Cursor | None = None) -> TokenStream:
    """Parse ``source`` into ``(Token, SourceSpan)`` pairs.

    ``cursor`` is advanced past the whole input, so callers that parse consecutive
    chunks (nested brackets, REPL lines) keep absolute offsets and line numbers.
    Raises a :class:`~kuhi.errors.KuhiSyntaxError` carrying the span of the failure
    and the tokens accepted before it.
    """
    cursor = Cursor() if cursor is None else cursor
    tokens = _resolve(tokenize(source, cursor))
    logger.debug("parsed %d tokens from %r", len(tokens), source)
    return tokens
