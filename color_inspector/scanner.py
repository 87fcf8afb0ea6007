"""Per-file extraction of positioned color occurrences."""

from __future__ import annotations

from bisect import bisect_left
from typing import List, Optional, Sequence, Tuple

from .colors import iter_literal_colors
from .context import ContextExtractor
from .logging import get_logger
from .models import (
    KIND_LITERAL,
    KIND_VARIABLE,
    THEME_BASE,
    ColorOccurrence,
    SourceFile,
    ThemeInfo,
    UsageContext,
)
from .themes import ThemeClassifier
from .variables import VariableTable, iter_definitions, iter_references

Span = Tuple[int, int]


def overlaps_any(spans: Sequence[Span], starts: Sequence[int], start: int, end: int) -> bool:
    """True when [start, end) overlaps one of the sorted, disjoint `spans`."""
    candidate = bisect_left(starts, end) - 1
    return candidate >= 0 and spans[candidate][1] > start


class OccurrenceScanner:
    """Finds definitions, resolved references and literals in one file.

    Definitions are scanned first and their value spans are excluded from the
    literal pass so a declaration's color is not counted twice. References to
    names missing from the variable table produce nothing.
    """

    def __init__(
        self,
        table: VariableTable,
        *,
        extractor: ContextExtractor | None = None,
        classifier: ThemeClassifier | None = None,
        sample_length: int = 220,
    ) -> None:
        self.table = table
        self.extractor = extractor or ContextExtractor()
        self.classifier = classifier or ThemeClassifier()
        self.sample_length = sample_length
        self.logger = get_logger("scanner")

    def scan(self, source: SourceFile) -> List[ColorOccurrence]:
        if source.text is None:
            return []
        text = source.text
        themes = self.classifier.classify(text)
        found: List[Tuple[int, ColorOccurrence]] = []
        exclusions: List[Span] = []

        for definition in iter_definitions(text):
            exclusions.append((definition.start, definition.end))
            line = source.line_index.line_of(definition.start)
            theme = themes[line] if line < len(themes) else THEME_BASE
            found.append(
                (
                    definition.start,
                    self._occurrence(
                        source,
                        KIND_VARIABLE,
                        definition.value,
                        definition.start,
                        definition.end,
                        name=definition.name,
                        theme=theme,
                        is_definition=True,
                    ),
                )
            )

        unresolved = 0
        for reference in iter_references(text):
            resolved = self.table.resolve(reference.name)
            if resolved is None:
                unresolved += 1
                continue
            found.append(
                (
                    reference.start,
                    self._occurrence(
                        source,
                        KIND_VARIABLE,
                        resolved.value,
                        reference.start,
                        reference.end,
                        name=reference.name,
                        theme=resolved.theme,
                    ),
                )
            )

        exclusions.sort()
        starts = [span[0] for span in exclusions]
        for token in iter_literal_colors(text):
            if overlaps_any(exclusions, starts, token.start, token.end):
                continue
            found.append(
                (
                    token.start,
                    self._occurrence(source, KIND_LITERAL, token.value, token.start, token.end),
                )
            )

        if unresolved:
            self.logger.debug("%s: %d unresolved var() references", source.label, unresolved)
        found.sort(key=lambda item: item[0])
        return [occurrence for _, occurrence in found]

    def theme_info(self, source: SourceFile, occurrences: Sequence[ColorOccurrence]) -> ThemeInfo:
        definition_themes = [
            occ.context.theme or THEME_BASE
            for occ in occurrences
            if occ.is_variable and occ.is_definition and occ.file == source.label
        ]
        return self.classifier.file_info(source.text or "", definition_themes)

    def _occurrence(
        self,
        source: SourceFile,
        kind: str,
        value: str,
        start: int,
        end: int,
        *,
        name: Optional[str] = None,
        theme: Optional[str] = None,
        is_definition: bool = False,
    ) -> ColorOccurrence:
        index = source.line_index
        color_range = index.range_of(start, end)
        hint = self.extractor.resolve(source, start)
        sample = index.line_text(color_range.line - 1).strip()[: self.sample_length]
        return ColorOccurrence(
            kind=kind,
            value=value,
            file=source.label,
            range=color_range,
            name=name,
            context=UsageContext(
                line=color_range.line,
                scope=hint.scope,
                property=hint.property,
                theme=theme,
                is_definition=is_definition,
                sample=sample,
            ),
        )


__all__ = ["OccurrenceScanner", "overlaps_any"]
