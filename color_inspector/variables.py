"""Custom property definitions and the per-pass variable table."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Sequence

from .colors import leading_color
from .logging import get_logger
from .models import THEME_BASE, SourceFile, VarDefinition
from .themes import ThemeClassifier

DEFINITION_PATTERN = re.compile(r"(?<![\w-])--([A-Za-z0-9_-]+)\s*:\s*([^;]+)\s*;")
REFERENCE_PATTERN = re.compile(r"var\(\s*(--[A-Za-z0-9_-]+)\s*[,)]")

PRECEDENCE_FIRST = "first"
PRECEDENCE_LAST = "last"

_logger = get_logger("variables")


@dataclass(frozen=True)
class DefinitionMatch:
    """A `--name: <color>;` declaration; offsets cover the color value only."""

    name: str
    value: str
    start: int
    end: int


@dataclass(frozen=True)
class ReferenceMatch:
    """A `var(--name)` reference; offsets cover the `--name` token."""

    name: str
    start: int
    end: int


def iter_definitions(text: str) -> Iterator[DefinitionMatch]:
    """Yield declarations whose right-hand side begins with a color literal."""
    for match in DEFINITION_PATTERN.finditer(text):
        rhs = match.group(2)
        stripped = rhs.lstrip()
        value = leading_color(stripped)
        if value is None:
            continue
        start = match.start(2) + (len(rhs) - len(stripped))
        yield DefinitionMatch(
            name=f"--{match.group(1)}",
            value=value,
            start=start,
            end=start + len(value),
        )


def iter_references(text: str) -> Iterator[ReferenceMatch]:
    for match in REFERENCE_PATTERN.finditer(text):
        yield ReferenceMatch(name=match.group(1), start=match.start(1), end=match.end(1))


class VariableTable:
    """Name to definition map for one scan pass.

    With the default `first` precedence the earliest definition seen (traversal
    order, then text order) is retained and later ones are ignored.
    """

    def __init__(self, precedence: str = PRECEDENCE_FIRST) -> None:
        if precedence not in (PRECEDENCE_FIRST, PRECEDENCE_LAST):
            raise ValueError(f"Unknown variable precedence: {precedence}")
        self.precedence = precedence
        self._definitions: Dict[str, VarDefinition] = {}

    def define(self, definition: VarDefinition) -> bool:
        """Record `definition`; return False when an existing one is kept instead."""
        existing = self._definitions.get(definition.name)
        if existing is not None and self.precedence == PRECEDENCE_FIRST:
            if existing.value != definition.value or existing.defining_file != definition.defining_file:
                _logger.debug(
                    "Ignoring %s=%s from %s; %s already defines it",
                    definition.name,
                    definition.value,
                    definition.defining_file,
                    existing.defining_file,
                )
            return False
        self._definitions[definition.name] = definition
        return True

    def resolve(self, name: str) -> Optional[VarDefinition]:
        return self._definitions.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)

    def names(self) -> List[str]:
        return list(self._definitions)


def collect_variables(
    sources: Sequence[SourceFile],
    *,
    precedence: str = PRECEDENCE_FIRST,
    classifier: ThemeClassifier | None = None,
) -> VariableTable:
    """Build the variable table over every readable file, in traversal order."""
    table = VariableTable(precedence)
    classifier = classifier or ThemeClassifier()
    for source in sources:
        if source.text is None:
            continue
        for definition in definitions_in(source, classifier):
            table.define(definition)
    return table


def definitions_in(source: SourceFile, classifier: ThemeClassifier) -> Iterable[VarDefinition]:
    text = source.text or ""
    index = source.line_index
    themes: List[str] = []
    for match in iter_definitions(text):
        if not themes:
            themes = classifier.classify(text)
        line = index.line_of(match.start)
        yield VarDefinition(
            name=match.name,
            value=match.value,
            defining_file=source.label,
            theme=themes[line] if line < len(themes) else THEME_BASE,
            range=index.range_of(match.start, match.end),
        )


__all__ = [
    "DefinitionMatch",
    "ReferenceMatch",
    "VariableTable",
    "collect_variables",
    "definitions_in",
    "iter_definitions",
    "iter_references",
]
