"""Scope and property inference for style-sheet syntax (CSS, SCSS, Sass, Less)."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, Optional

from .base import ContextHint, ContextStrategy
from ..models import SourceFile

STYLESHEET_SUFFIXES = frozenset({".css", ".scss", ".sass", ".less"})

_DECLARATION_PROPERTY = re.compile(r"^\s*([A-Za-z_-][\w-]*)\s*:")
_BLOCK_COMMENT = re.compile(r"/\*.*?\*/", re.DOTALL)
# `//` after a colon, quote or `(` is almost always a URL, not a comment.
_LINE_COMMENT = re.compile(r"(?<![:\"'(])//[^\n]*")
_WHITESPACE = re.compile(r"\s+")
_NOT_NEWLINE = re.compile(r"[^\n]")

_SELECTOR_BOUNDARIES = "{};"


class StylesheetStrategy(ContextStrategy):
    """Nearest enclosing selector block plus the declaration's property name."""

    def __init__(self, window: int = 40) -> None:
        self.window = window
        self._masked: Dict[Path, str] = {}

    def supports(self, source: SourceFile) -> bool:
        return source.suffix in STYLESHEET_SUFFIXES

    def resolve(self, source: SourceFile, start: int, *, floor: int = 0) -> ContextHint:
        return ContextHint(
            scope=self.scope_at(source, start, floor=floor),
            property=self.property_at(source, start),
        )

    def property_at(self, source: SourceFile, offset: int) -> Optional[str]:
        index = source.line_index
        line = index.line_of(offset)
        prefix = index.line_text(line)[: index.column_of(offset)]
        cut = max(prefix.rfind("{"), prefix.rfind(";"))
        match = _DECLARATION_PROPERTY.match(prefix[cut + 1 :])
        return match.group(1) if match else None

    def scope_at(self, source: SourceFile, offset: int, *, floor: int = 0) -> Optional[str]:
        """Selector of the innermost unmatched block around `offset`, skipping @-rules."""
        text = self._masked_text(source)
        index = source.line_index
        window_start = index.line_start(max(0, index.line_of(offset) - self.window))
        lower = max(floor, window_start)

        depth = 0
        position = min(offset, len(text)) - 1
        while position >= lower:
            char = text[position]
            if char == "}":
                depth += 1
            elif char == "{":
                if depth:
                    depth -= 1
                else:
                    selector = _selector_before(text, position, lower)
                    if selector and not selector.startswith("@"):
                        return selector
            position -= 1
        return None

    def _masked_text(self, source: SourceFile) -> str:
        cached = self._masked.get(source.path)
        if cached is None:
            cached = mask_comments(source.text or "", line_comments=source.suffix != ".css")
            self._masked[source.path] = cached
        return cached


def mask_comments(text: str, *, line_comments: bool = False) -> str:
    """Blank out comments while keeping every offset and newline in place."""

    def _blank(match: re.Match[str]) -> str:
        return _NOT_NEWLINE.sub(" ", match.group(0))

    masked = _BLOCK_COMMENT.sub(_blank, text)
    if line_comments:
        masked = _LINE_COMMENT.sub(_blank, masked)
    return masked


def _selector_before(text: str, brace: int, lower: int) -> str:
    boundary = max(text.rfind(char, lower, brace) for char in _SELECTOR_BOUNDARIES)
    begin = boundary + 1 if boundary >= 0 else lower
    return _WHITESPACE.sub(" ", text[begin:brace]).strip()


__all__ = ["STYLESHEET_SUFFIXES", "StylesheetStrategy", "mask_comments"]
