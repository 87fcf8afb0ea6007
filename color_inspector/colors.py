"""Color token grammars and value normalization."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, List

_ALPHA = r"(?:0?\.\d+|1|0|\.\d+)"

# Alternation order matters: a 3/4 digit prefix of a longer literal is rejected by \b and
# the engine backtracks into the 6 and 8 digit forms.
HEX_PATTERN = re.compile(r"(?<![\w&])#(?:[0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})\b")

RGB_PATTERN = re.compile(
    r"\brgba?\(\s*\d{1,3}\s*,\s*\d{1,3}\s*,\s*\d{1,3}(?:\s*,\s*" + _ALPHA + r")?\s*\)"
)

HSL_PATTERN = re.compile(
    r"\bhsla?\(\s*\d{1,3}(?:deg|rad|turn)?\s*,\s*\d{1,3}%\s*,\s*\d{1,3}%(?:\s*,\s*"
    + _ALPHA
    + r")?\s*\)"
)

LITERAL_PATTERNS = (HEX_PATTERN, RGB_PATTERN, HSL_PATTERN)

# Right-hand side of a custom property must *start* with one of these to count as a color.
_DEFINITION_VALUE = re.compile(
    r"#(?:[0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})\b|(?:rgba?|hsla?)\([^()]*\)",
    re.IGNORECASE,
)

_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class ColorToken:
    """A literal color found in text, with absolute offsets."""

    value: str
    start: int
    end: int


def normalize(value: str) -> str:
    """Return the dedup key for a color value: trimmed, lowercased, no whitespace."""
    return _WHITESPACE.sub("", value.strip().lower())


def leading_color(text: str) -> str | None:
    """Return the color token at the very start of `text`, if any."""
    match = _DEFINITION_VALUE.match(text)
    if match is None:
        return None
    return match.group(0).strip() or None


def iter_literal_colors(text: str) -> Iterator[ColorToken]:
    """Yield hex, rgb[a]() and hsl[a]() tokens in order of appearance."""
    tokens: List[ColorToken] = []
    for pattern in LITERAL_PATTERNS:
        for match in pattern.finditer(text):
            tokens.append(ColorToken(value=match.group(0), start=match.start(), end=match.end()))
    tokens.sort(key=lambda token: (token.start, token.end))
    yield from tokens


__all__ = [
    "ColorToken",
    "HEX_PATTERN",
    "HSL_PATTERN",
    "RGB_PATTERN",
    "iter_literal_colors",
    "leading_color",
    "normalize",
]
