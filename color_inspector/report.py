"""Markdown and JSON rendering of a scan inventory."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Sequence

from jinja2 import Environment, FileSystemLoader

from .config import REPORT_FORMATS
from .models import (
    KIND_LITERAL,
    THEME_BASE,
    THEME_DARK,
    THEME_LIGHT,
    ColorEntry,
    ColorOccurrence,
    FileGroup,
    Inventory,
)

TEMPLATE_NAME = "report.md.j2"


@dataclass
class EntryView:
    label: str | None
    value: str
    line: int
    property: str | None
    scope: str | None
    usages: List[ColorOccurrence]
    hidden_usages: int = 0


@dataclass
class SectionView:
    title: str
    entries: List[EntryView] = field(default_factory=list)


@dataclass
class GroupView:
    file: str
    count: int
    badges: List[str]
    sections: List[SectionView]


def theme_badges(group: FileGroup) -> List[str]:
    """Light when the file has light or base variables; base stands in for light."""
    info = group.theme_info
    badges: List[str] = []
    if info.has_light or info.has_base:
        badges.append("light")
    if info.has_dark:
        badges.append("dark")
    if info.supports_system:
        badges.append("system")
    return badges


def build_sections(group: FileGroup, *, max_usages: int = 50) -> List[SectionView]:
    """Split a file's entries into Dark/Light/Base/Other sections, dropping empty ones."""
    buckets: Dict[str, List[EntryView]] = {THEME_DARK: [], THEME_LIGHT: [], THEME_BASE: [], KIND_LITERAL: []}
    for entry, occurrences in group.entries:
        bucket = KIND_LITERAL if entry.kind == KIND_LITERAL else (entry.theme or THEME_BASE)
        buckets.setdefault(bucket, []).append(_entry_view(entry, occurrences, max_usages))

    base_title = "Base" if buckets[THEME_LIGHT] else "Light theme"
    titles = (
        (THEME_DARK, "Dark theme"),
        (THEME_LIGHT, "Light theme"),
        (THEME_BASE, base_title),
        (KIND_LITERAL, "Other colors"),
    )
    return [SectionView(title=title, entries=buckets[key]) for key, title in titles if buckets[key]]


def _entry_view(
    entry: ColorEntry, occurrences: Sequence[ColorOccurrence], max_usages: int
) -> EntryView:
    ordered = sorted(occurrences, key=lambda occ: (occ.range.line, occ.range.start_col))
    usages = [occ for occ in ordered if not occ.is_definition]
    anchor = next((occ for occ in ordered if occ.is_definition), ordered[0])
    return EntryView(
        label=entry.name,
        value=entry.value,
        line=anchor.range.line,
        property=next((occ.context.property for occ in usages if occ.context.property), None),
        scope=next((occ.context.scope for occ in usages if occ.context.scope), None),
        usages=usages[:max_usages],
        hidden_usages=max(0, len(usages) - max_usages),
    )


class ReportRenderer:
    """Renders an Inventory as markdown through Jinja2, or as JSON."""

    def __init__(
        self,
        templates_dir: Path | None = None,
        *,
        max_usages: int = 50,
        auto_scan_minutes: int = 0,
    ) -> None:
        self.templates_dir = templates_dir or Path(__file__).with_name("templates")
        self.max_usages = max_usages
        self.auto_scan_minutes = auto_scan_minutes
        self._env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

    def render(self, inventory: Inventory, fmt: str = "markdown") -> str:
        if fmt not in REPORT_FORMATS:
            raise ValueError(f"Unsupported report format: {fmt}")
        if fmt == "json":
            return json.dumps(inventory.to_dict(), indent=2) + "\n"
        template = self._env.get_template(TEMPLATE_NAME)
        return template.render(**self.context(inventory))

    def context(self, inventory: Inventory) -> Dict[str, Any]:
        groups = [
            GroupView(
                file=group.file,
                count=group.count,
                badges=theme_badges(group),
                sections=build_sections(group, max_usages=self.max_usages),
            )
            for group in inventory.groups
        ]
        return {
            "header": header_line(inventory),
            "inventory": inventory,
            "imports": inventory.imports,
            "groups": groups,
            "auto_scan_minutes": self.auto_scan_minutes,
        }


def header_line(inventory: Inventory) -> str:
    noun = "Import" if inventory.import_count == 1 else "Imports"
    return f"{inventory.root} | {inventory.total_colors} colors | +{inventory.import_count} {noun}"


def render_report(inventory: Inventory, fmt: str = "markdown", **kwargs: Any) -> str:
    return ReportRenderer(**kwargs).render(inventory, fmt)


__all__ = ["ReportRenderer", "build_sections", "header_line", "render_report", "theme_badges"]
