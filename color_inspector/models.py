"""Core data models shared across color-inspector components."""

from __future__ import annotations

import builtins
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .line_index import LineIndex

KIND_VARIABLE = "variable"
KIND_LITERAL = "literal"

IMPORT_CODE = "code"
IMPORT_STYLESHEET = "stylesheet"

THEME_DARK = "dark"
THEME_LIGHT = "light"
THEME_BASE = "base"

THEME_ORDER = {THEME_DARK: 0, THEME_LIGHT: 1, THEME_BASE: 2}

UNRESOLVED = "unknown"


@dataclass(frozen=True)
class Range:
    """Position of a token inside its file."""

    line: int
    start_col: int
    end_col: int


@dataclass
class SourceFile:
    """A file visited during one scan pass, with its text cached for the pass."""

    path: Path
    label: str
    text: Optional[str] = None
    _index: Optional[LineIndex] = field(default=None, init=False, repr=False, compare=False)

    @property
    def readable(self) -> bool:
        return self.text is not None

    @property
    def suffix(self) -> str:
        return self.path.suffix.lower()

    @property
    def line_index(self) -> LineIndex:
        if self._index is None:
            self._index = LineIndex.build(self.text or "")
        return self._index


@dataclass(frozen=True)
class ImportEdge:
    """An explicit import statement found in a file."""

    from_file: Path
    specifier: str
    kind: str
    offset: int = 0


@dataclass
class ImportGraphResult:
    """Files reachable from the root, in breadth-first visitation order."""

    root: Path
    files: List[SourceFile]
    truncated: bool = False

    @property
    def paths(self) -> List[Path]:
        return [source.path for source in self.files]


@dataclass(frozen=True)
class VarDefinition:
    """A custom property declaration whose value is a bare color."""

    name: str
    value: str
    defining_file: str
    theme: str = THEME_BASE
    range: Optional[Range] = None


@dataclass
class UsageContext:
    """Where and how an occurrence is used."""

    line: int
    scope: Optional[str] = None
    property: Optional[str] = None
    theme: Optional[str] = None
    is_definition: bool = False
    sample: str = ""

    @builtins.property
    def scope_label(self) -> str:
        return self.scope or UNRESOLVED

    @builtins.property
    def property_label(self) -> str:
        return self.property or UNRESOLVED


@dataclass
class ColorOccurrence:
    """One positioned appearance of a color-bearing token."""

    kind: str
    value: str
    file: str
    range: Range
    context: UsageContext
    name: Optional[str] = None

    @property
    def is_variable(self) -> bool:
        return self.kind == KIND_VARIABLE

    @property
    def is_definition(self) -> bool:
        return self.context.is_definition

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "name": self.name,
            "value": self.value,
            "file": self.file,
            "line": self.range.line,
            "start_col": self.range.start_col,
            "end_col": self.range.end_col,
            "scope": self.context.scope_label,
            "property": self.context.property_label,
            "theme": self.context.theme,
            "is_definition": self.context.is_definition,
            "sample": self.context.sample,
        }


@dataclass
class ColorEntry:
    """Deduplicated color: every occurrence sharing one normalized identity."""

    kind: str
    value: str
    key: Tuple[str, ...]
    name: Optional[str] = None
    theme: Optional[str] = None
    occurrences: List[ColorOccurrence] = field(default_factory=list)

    @property
    def definitions(self) -> List[ColorOccurrence]:
        return [occ for occ in self.occurrences if occ.is_definition]

    @property
    def usages(self) -> List[ColorOccurrence]:
        return [occ for occ in self.occurrences if not occ.is_definition]

    @property
    def first_line(self) -> int:
        return min((occ.range.line for occ in self.occurrences), default=0)

    @property
    def files(self) -> List[str]:
        seen: List[str] = []
        for occ in self.occurrences:
            if occ.file not in seen:
                seen.append(occ.file)
        return seen

    def in_file(self, file: str) -> List[ColorOccurrence]:
        return [occ for occ in self.occurrences if occ.file == file]


@dataclass(frozen=True)
class ThemeInfo:
    """Theme coverage of one file."""

    has_dark: bool = False
    has_light: bool = False
    has_base: bool = False
    supports_system: bool = False


@dataclass
class FileGroup:
    """Entries partitioned to one file, with occurrences restricted to it."""

    file: str
    entries: List[Tuple[ColorEntry, List[ColorOccurrence]]]
    theme_info: ThemeInfo = field(default_factory=ThemeInfo)

    @property
    def count(self) -> int:
        return len(self.entries)

    def to_dict(self) -> Dict[str, Any]:
        entries: List[Dict[str, Any]] = []
        for entry, occurrences in self.entries:
            entries.append(
                {
                    "kind": entry.kind,
                    "name": entry.name,
                    "value": entry.value,
                    "theme": entry.theme,
                    "definitions": [occ.to_dict() for occ in occurrences if occ.is_definition],
                    "usages": [occ.to_dict() for occ in occurrences if not occ.is_definition],
                }
            )
        return {
            "file": self.file,
            "count": self.count,
            "theme": {
                "dark": self.theme_info.has_dark,
                "light": self.theme_info.has_light,
                "base": self.theme_info.has_base,
                "system": self.theme_info.supports_system,
            },
            "entries": entries,
        }


@dataclass(frozen=True)
class ImportSummary:
    """An imported (non-root) file and its unique color count."""

    file: str
    colors: int


@dataclass
class Inventory:
    """Result of one scan pass, ready for rendering."""

    root: str
    files: List[str]
    entries: List[ColorEntry]
    groups: List[FileGroup]
    imports: List[ImportSummary]
    truncated: bool = False

    @property
    def total_colors(self) -> int:
        return len(self.entries)

    @property
    def import_count(self) -> int:
        return max(0, len(self.files) - 1)

    def group_for(self, file: str) -> Optional[FileGroup]:
        for group in self.groups:
            if group.file == file:
                return group
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "root": self.root,
            "total_colors": self.total_colors,
            "truncated": self.truncated,
            "files": list(self.files),
            "imports": [{"file": item.file, "colors": item.colors} for item in self.imports],
            "groups": [group.to_dict() for group in self.groups],
        }
