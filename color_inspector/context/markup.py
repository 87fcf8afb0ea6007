"""Scope and property inference for markup and script syntax (JSX, Vue, Svelte, HTML)."""

from __future__ import annotations

import re
from typing import Optional, Tuple

from .base import ContextHint, ContextStrategy
from ..models import SourceFile

# `key:` with a quoted or bare key opening the line or following `{`, `,`, `(`, `;` or a quote.
# `::` and `://` are not object keys.
_OBJECT_KEY = re.compile(
    r"""(?:^|[{,(;"'])\s*(?:(["'])([^"'\n]+?)\1|((?:--)?[A-Za-z_$][\w$-]*))\s*:(?!:|//)"""
)

_DECLARATION = re.compile(r"(?:^|\s)(?:function|const|let|var|class)\s+([A-Z][A-Za-z0-9_]*)\b")
_EXPORT_DECLARATION = re.compile(r"export\s+(?:default\s+)?(?:function\s+)?([A-Z][A-Za-z0-9_]*)\b")
_CLASS_ATTRIBUTE = re.compile(r"\b(?:className|class)\s*=\s*[\"']([^\"']+)[\"']")
_COMPONENT_TAG = re.compile(r"<([A-Z][A-Za-z0-9]*)\b")
_ELEMENT_TAG = re.compile(r"<([a-z][A-Za-z0-9-]*)\b")

SEPARATOR = " > "


class MarkupStrategy(ContextStrategy):
    """Breadcrumb of component, tag and class around a token, plus its object key.

    The element walk covers `window` lines above the token and stops at the first
    function, class or component declaration so context never leaks across
    components. The enclosing component name comes from a separate, longer walk.
    """

    def __init__(self, window: int = 15, component_window: int = 60) -> None:
        self.window = window
        self.component_window = component_window

    def supports(self, source: SourceFile) -> bool:
        return True

    def resolve(self, source: SourceFile, start: int, *, floor: int = 0) -> ContextHint:
        return ContextHint(
            scope=self.scope_at(source, start),
            property=self.property_at(source, start),
        )

    def property_at(self, source: SourceFile, offset: int) -> Optional[str]:
        index = source.line_index
        prefix = index.line_text(index.line_of(offset))[: index.column_of(offset)]
        key: Optional[str] = None
        for match in _OBJECT_KEY.finditer(prefix):
            key = match.group(2) or match.group(3)
        return key

    def scope_at(self, source: SourceFile, offset: int) -> Optional[str]:
        index = source.line_index
        line = index.line_of(offset)
        column = index.column_of(offset)

        class_name, component_tag, element_tag = self._element_context(source, line, column)
        component = self._enclosing_component(source, line, column)

        parts = [
            component,
            component_tag if component_tag != component else None,
            class_name or element_tag,
        ]
        crumbs = [part for part in parts if part]
        return SEPARATOR.join(crumbs) if crumbs else None

    def _element_context(
        self, source: SourceFile, line: int, column: int
    ) -> Tuple[Optional[str], Optional[str], Optional[str]]:
        index = source.line_index
        class_name: Optional[str] = None
        component_tag: Optional[str] = None
        element_tag: Optional[str] = None

        for number in range(line, max(-1, line - self.window - 1), -1):
            text = index.line_text(number)
            if number == line:
                text = text[:column]

            boundary = _declaration_match(text)
            if boundary is not None:
                # Only what follows the declaration still belongs to this component.
                text = text[boundary.end() :]

            if class_name is None:
                value = _last_group(_CLASS_ATTRIBUTE, text)
                if value and value.split():
                    first = value.split()[0]
                    class_name = first if first.startswith(".") else f".{first}"
            if component_tag is None:
                component_tag = _last_group(_COMPONENT_TAG, text)
            if element_tag is None:
                element_tag = _last_group(_ELEMENT_TAG, text)

            if boundary is not None:
                break

        return class_name, component_tag, element_tag

    def _enclosing_component(self, source: SourceFile, line: int, column: int) -> Optional[str]:
        index = source.line_index
        for number in range(line, max(-1, line - self.component_window - 1), -1):
            text = index.line_text(number)
            if number == line:
                text = text[:column]
            match = _declaration_match(text)
            if match is not None:
                return match.group(1)
        return None


def _declaration_match(text: str) -> Optional[re.Match[str]]:
    return _DECLARATION.search(text) or _EXPORT_DECLARATION.search(text)


def _last_group(pattern: re.Pattern[str], text: str) -> Optional[str]:
    value: Optional[str] = None
    for match in pattern.finditer(text):
        value = match.group(1)
    return value


__all__ = ["MarkupStrategy", "SEPARATOR"]
