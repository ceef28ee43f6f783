"""Character scanner for kuhi source text."""

from __future__ import annotations

from fractions import Fraction

from .errors import InvalidSymbol, UnmatchedParenthesis
from .tokens import (
    Call,
    Complex,
    Cursor,
    Duplicate,
    Epsilon,
    Infinity,
    Integer,
    InverseMarker,
    ListBuilder,
    Negate,
    Pi,
    Pop,
    Rational,
    RawToken,
    Scope,
    SourceSpan,
    Spacing,
    Swap,
    is_literal,
)

# str.isdigit() also accepts superscripts such as "¹", which must stay an inverse marker.
_DIGITS = frozenset("0123456789")
_WHITESPACE = frozenset(" \t\r\n")

_MINUS = "⁻"
_SUPERSCRIPT_ONE = "¹"
_CHAIN = "‿"

_SINGLE_TOKENS = {
    ".": Duplicate,
    ",": Pop,
    "↔": Swap,
    "∞": Infinity,
    "ε": Epsilon,
}

ScannedTokens = list[tuple[RawToken, SourceSpan]]


def _scan_digits(source: str, start: int) -> int:
    i = start
    while i < len(source) and source[i] in _DIGITS:
        i += 1
    return i


def _scan_magnitude(source: str, start: int) -> tuple[int | Fraction | None, int]:
    """Scan ``digits`` or ``digits.digits``; a trailing ``.`` without digits is left alone."""
    end = _scan_digits(source, start)
    if end == start:
        return None, start
    whole = source[start:end]
    if end + 1 < len(source) and source[end] == "." and source[end + 1] in _DIGITS:
        frac_end = _scan_digits(source, end + 1)
        decimals = source[end + 1 : frac_end]
        return Fraction(int(whole + decimals), 10 ** len(decimals)), frac_end
    return int(whole), end


def _number_token(magnitude: int | Fraction) -> Integer | Rational:
    if isinstance(magnitude, Fraction):
        return Rational(magnitude)
    return Integer(magnitude)


def _consume(source: str, start: int, end: int, cursor: Cursor) -> int:
    for ch in source[start:end]:
        cursor.advance(ch)
    return end


def _pop_real_literal(tokens: ScannedTokens) -> tuple[Fraction | None, SourceSpan | None]:
    if tokens and isinstance(tokens[-1][0], (Integer, Rational)):
        token, span = tokens.pop()
        return Fraction(token.value), span
    return None, None


def _find_closing_paren(source: str, start: int) -> int | None:
    depth = 0
    for j in range(start, len(source)):
        if source[j] == "(":
            depth += 1
        elif source[j] == ")":
            depth -= 1
            if depth == 0:
                return j
    return None


def _visible(tokens: ScannedTokens) -> tuple:
    return tuple((tok, span) for tok, span in tokens if not isinstance(tok, Spacing))


def tokenize(source: str, cursor: Cursor | None = None) -> ScannedTokens:
    """Scan ``source`` into raw tokens, advancing ``cursor`` over every character."""
    cursor = Cursor() if cursor is None else cursor
    tokens: ScannedTokens = []
    i = 0

    while i < len(source):
        ch = source[i]
        start = cursor.copy()

        if ch in _WHITESPACE:
            end = i
            while end < len(source) and source[end] in _WHITESPACE:
                end += 1
            i = _consume(source, i, end, cursor)
            tokens.append((Spacing(), cursor.span_from(start)))
            continue

        if ch in _DIGITS:
            magnitude, end = _scan_magnitude(source, i)
            assert magnitude is not None
            i = _consume(source, i, end, cursor)
            span = cursor.span_from(start)
            if tokens and isinstance(tokens[-1][0], Negate):
                _, minus_span = tokens.pop()
                magnitude = -magnitude
                span = minus_span.join(span)
            tokens.append((_number_token(magnitude), span))
            continue

        if ch == "i":
            real, real_span = _pop_real_literal(tokens)
            i = _consume(source, i, i + 1, cursor)
            sign = 1
            if i < len(source) and source[i] == _MINUS and source[i + 1 : i + 2] != _SUPERSCRIPT_ONE:
                sign = -1
                i = _consume(source, i, i + 1, cursor)
                if i < len(source) and source[i] == ".":
                    dot = cursor.copy()
                    cursor.advance(".")
                    raise InvalidSymbol(".", cursor.span_from(dot), _visible(tokens))
            magnitude, end = _scan_magnitude(source, i)
            i = _consume(source, i, end, cursor)
            imag = Fraction(1 if magnitude is None else magnitude) * sign
            span = cursor.span_from(start)
            if real_span is not None:
                span = real_span.join(span)
            tokens.append((Complex(real if real is not None else Fraction(0), imag), span))
            continue

        if ch in ("π", "τ"):
            multiplier, multiplier_span = _pop_real_literal(tokens)
            i = _consume(source, i, i + 1, cursor)
            multiplier = Fraction(1) if multiplier is None else multiplier
            if ch == "τ":
                multiplier *= 2
            span = cursor.span_from(start)
            if multiplier_span is not None:
                span = multiplier_span.join(span)
            tokens.append((Pi(multiplier), span))
            continue

        if ch == _CHAIN:
            i = _consume(source, i, i + 1, cursor)
            span = cursor.span_from(start)
            if not tokens or not is_literal(tokens[-1][0]):
                raise InvalidSymbol(ch, span, _visible(tokens))
            literal, literal_span = tokens.pop()
            if tokens and isinstance(tokens[-1][0], ListBuilder):
                builder, builder_span = tokens.pop()
                tokens.append((ListBuilder(builder.items + (literal,)), builder_span.join(span)))
            else:
                tokens.append((ListBuilder((literal,)), literal_span.join(span)))
            continue

        if ch == _MINUS:
            if source[i + 1 : i + 2] == _SUPERSCRIPT_ONE:
                i = _consume(source, i, i + 2, cursor)
                tokens.append((InverseMarker(), cursor.span_from(start)))
            else:
                i = _consume(source, i, i + 1, cursor)
                tokens.append((Negate(), cursor.span_from(start)))
            continue

        if ch == "(":
            close = _find_closing_paren(source, i)
            if close is None:
                span = SourceSpan(start.offset, start.offset + 1, start.line, start.column)
                raise UnmatchedParenthesis(True, span, _visible(tokens))
            # Imported here: parser imports this module.
            from .parser import parse

            cursor.advance(ch)
            inner = parse(source[i + 1 : close], cursor)
            cursor.advance(")")
            i = close + 1
            tokens.append((Scope(tuple(inner)), cursor.span_from(start)))
            continue

        if ch == ")":
            cursor.advance(ch)
            raise UnmatchedParenthesis(False, cursor.span_from(start), _visible(tokens))

        i = _consume(source, i, i + 1, cursor)
        single = _SINGLE_TOKENS.get(ch)
        tokens.append((single() if single is not None else Call(ch), cursor.span_from(start)))

    return tokens
