"""Light/dark/base classification of source lines by enclosing conditional blocks."""

from __future__ import annotations

import re
from typing import Iterable, List, Optional, Sequence

from .models import THEME_BASE, THEME_DARK, THEME_LIGHT, ThemeInfo

_BLOCK_COMMENT = re.compile(r"/\*.*?\*/")
_LINE_COMMENT = re.compile(r"//.*$")
_MEDIA_TRIGGER = re.compile(r"@media[^{]*prefers-color-scheme\s*:\s*(dark|light)")
_PREFERS_ANYWHERE = re.compile(r"prefers-color-scheme\s*:\s*(?:dark|light)")

DEFAULT_THEME_ATTRIBUTES = ("data-theme-mode",)


class ThemeClassifier:
    """Brace-depth automaton tagging every line with the theme in effect there.

    A line containing a trigger (a `prefers-color-scheme` media query, or a `:root`
    rule keyed on one of `attributes` set to "dark"/"light") makes the first `{` it
    opens carry that tag; every other `{` inherits. The theme of a line is the
    nearest explicit tag on the stack as it stood when the line began.
    """

    def __init__(self, attributes: Sequence[str] = DEFAULT_THEME_ATTRIBUTES) -> None:
        self.attributes = tuple(attr.lower() for attr in attributes if attr)
        self._root_triggers = [
            re.compile(r":root[^{]*" + re.escape(attr) + r"\s*=\s*[\"'](dark|light)[\"']")
            for attr in self.attributes
        ]
        self._system_values = [
            re.compile(re.escape(attr) + r"\s*=\s*[\"']system[\"']") for attr in self.attributes
        ]
        self._root_not_attr = [
            re.compile(r":root\s*:?\s*not\(\s*\[" + re.escape(attr) + r"\]\s*\)")
            for attr in self.attributes
        ]

    def classify(self, text: str) -> List[str]:
        """Return one theme tag per line of `text`."""
        lines = text.split("\n")
        themes: List[str] = [THEME_BASE] * len(lines)
        stack: List[Optional[str]] = []

        for number, raw in enumerate(lines):
            line = strip_line_comments(raw.rstrip("\r"))
            themes[number] = _current(stack)

            trigger = self.trigger(line)
            for position in range(line.count("{")):
                stack.append(trigger if position == 0 else None)
            for _ in range(line.count("}")):
                if stack:
                    stack.pop()

        return themes

    def trigger(self, line: str) -> Optional[str]:
        """Theme opened by `line`, if it contains a recognized conditional block."""
        lowered = line.lower()
        media = _MEDIA_TRIGGER.search(lowered)
        if media:
            return THEME_DARK if media.group(1) == "dark" else THEME_LIGHT
        for pattern in self._root_triggers:
            match = pattern.search(lowered)
            if match:
                return THEME_DARK if match.group(1) == "dark" else THEME_LIGHT
        return None

    def supports_system(self, text: str) -> bool:
        """Whether the file switches theme automatically with the operating system."""
        lowered = text.lower()
        if any(pattern.search(lowered) for pattern in self._system_values):
            return True
        has_prefers = _PREFERS_ANYWHERE.search(lowered) is not None
        return has_prefers and any(pattern.search(lowered) for pattern in self._root_not_attr)

    def file_info(self, text: str, definition_themes: Iterable[str]) -> ThemeInfo:
        themes = set(definition_themes)
        return ThemeInfo(
            has_dark=THEME_DARK in themes,
            has_light=THEME_LIGHT in themes,
            has_base=THEME_BASE in themes,
            supports_system=self.supports_system(text),
        )


def strip_line_comments(line: str) -> str:
    """Drop same-line block comments and a trailing `//` comment."""
    return _LINE_COMMENT.sub("", _BLOCK_COMMENT.sub("", line))


def _current(stack: Sequence[Optional[str]]) -> str:
    for tag in reversed(stack):
        if tag:
            return tag
    return THEME_BASE


__all__ = ["DEFAULT_THEME_ATTRIBUTES", "ThemeClassifier", "strip_line_comments"]
