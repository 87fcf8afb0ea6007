"""Deduplication of occurrences into color entries and per-file groups."""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .colors import normalize
from .models import (
    KIND_LITERAL,
    KIND_VARIABLE,
    THEME_ORDER,
    ColorEntry,
    ColorOccurrence,
    FileGroup,
    ImportSummary,
    ThemeInfo,
)

EntryKey = Tuple[str, ...]


class Aggregator:
    """Merges occurrences sharing a normalized identity into one ColorEntry.

    Literal keys are the normalized value; variable keys add the name and the
    theme tag so dark and light definitions of one name stay apart. With
    `per_file` set the file label is part of every key.
    """

    def __init__(self, per_file: bool = True) -> None:
        self.per_file = per_file

    def key_for(self, occurrence: ColorOccurrence) -> EntryKey:
        scope: Tuple[str, ...] = (occurrence.file,) if self.per_file else ()
        value = normalize(occurrence.value)
        if occurrence.kind == KIND_VARIABLE:
            return (KIND_VARIABLE, *scope, occurrence.name or "", value, occurrence.context.theme or "")
        return (KIND_LITERAL, *scope, value)

    def aggregate(self, occurrences: Iterable[ColorOccurrence]) -> List[ColorEntry]:
        """Entries in order of their first occurrence; later matches are appended."""
        entries: Dict[EntryKey, ColorEntry] = {}
        for occurrence in occurrences:
            key = self.key_for(occurrence)
            entry = entries.get(key)
            if entry is None:
                entry = ColorEntry(
                    kind=occurrence.kind,
                    value=occurrence.value,
                    key=key,
                    name=occurrence.name,
                    theme=occurrence.context.theme if occurrence.is_variable else None,
                )
                entries[key] = entry
            entry.occurrences.append(occurrence)
        return list(entries.values())

    def group(
        self,
        entries: Sequence[ColorEntry],
        files: Sequence[str],
        *,
        root: Optional[str] = None,
        theme_info: Mapping[str, ThemeInfo] | None = None,
    ) -> List[FileGroup]:
        """Partition entries by file: root first, the rest alphabetical."""
        theme_info = theme_info or {}
        groups: List[FileGroup] = []
        for file in order_files(files, root):
            members = [(entry, entry.in_file(file)) for entry in entries]
            members = [(entry, occs) for entry, occs in members if occs]
            if not members:
                continue
            members.sort(key=lambda item: entry_sort_key(item[0], item[1]))
            groups.append(
                FileGroup(file=file, entries=members, theme_info=theme_info.get(file, ThemeInfo()))
            )
        return groups

    def summarize_imports(
        self, groups: Sequence[FileGroup], files: Sequence[str], root: Optional[str] = None
    ) -> List[ImportSummary]:
        """Imported files in visitation order, each with its unique entry count."""
        counts = {group.file: group.count for group in groups}
        return [
            ImportSummary(file=file, colors=counts.get(file, 0))
            for file in dict.fromkeys(files)
            if file != root
        ]


def order_files(files: Sequence[str], root: Optional[str] = None) -> List[str]:
    unique = list(dict.fromkeys(files))
    rest = sorted(file for file in unique if file != root)
    return ([root] if root in unique else []) + rest


def entry_sort_key(
    entry: ColorEntry, occurrences: Sequence[ColorOccurrence] | None = None
) -> Tuple[int, str, int, str, int]:
    first_line = min((occ.range.line for occ in occurrences or ()), default=entry.first_line)
    return (
        0 if entry.kind == KIND_VARIABLE else 1,
        (entry.name or "").lower(),
        THEME_ORDER.get(entry.theme or "", len(THEME_ORDER)),
        normalize(entry.value),
        first_line,
    )


__all__ = ["Aggregator", "entry_sort_key", "order_files"]
