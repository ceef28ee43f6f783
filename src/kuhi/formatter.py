"""ASCII mnemonic rewriting, so kuhi programs can be typed without the glyphs."""

from __future__ import annotations

import re
from typing import Final

MNEMONICS: Final[dict[str, str]] = {
    "_": "‿",
    "infinity": "∞",
    "inf": "∞",
    "epsilon": "ε",
    "pi": "π",
    "tau": "τ",
    "iota": "ι",
    ":": "↔",
    "`": "⁻",
    "*": "×",
    "%": "÷",
    "^": "ⁿ",
    "pow": "ⁿ",
    "root": "√",
    "sqrt": "√",
    "croot": "∛",
    "cbrt": "∛",
    "rot": "↻",
    "sin": "◯",
    "sinh": "⌒",
    "asin": "⁻¹◯",
    "asinh": "⁻¹⌒",
    "inverse": "⁻¹",
}

# Longest first, so "asinh" wins over "asin" and "sin".
_PATTERN: Final[re.Pattern[str]] = re.compile(
    "|".join(re.escape(name) for name in sorted(MNEMONICS, key=len, reverse=True))
)


def format_source(source: str) -> str:
    """Replace every mnemonic in ``source`` with its glyph in a single left-to-right pass."""
    return _PATTERN.sub(lambda match: MNEMONICS[match.group(0)], source)
