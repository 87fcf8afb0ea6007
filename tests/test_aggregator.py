"""Tests for deduplication and grouping."""

from __future__ import annotations

from typing import List

from color_inspector.aggregator import Aggregator, order_files
from color_inspector.models import KIND_LITERAL, KIND_VARIABLE, THEME_BASE, THEME_DARK, ColorOccurrence, SourceFile
from color_inspector.scanner import OccurrenceScanner
from color_inspector.variables import collect_variables
from tests._fixtures.workspace_builder import make_source


def _scan(*sources: SourceFile) -> List[ColorOccurrence]:
    scanner = OccurrenceScanner(collect_variables(sources))
    occurrences: List[ColorOccurrence] = []
    for source in sources:
        occurrences.extend(scanner.scan(source))
    return occurrences


def test_literals_collapse_case_insensitively() -> None:
    occurrences = _scan(make_source("a { color: #FFF; }\nb { color: #fff; }\n"))

    entries = Aggregator().aggregate(occurrences)

    assert len(entries) == 1
    assert entries[0].kind == KIND_LITERAL
    assert entries[0].value == "#FFF"
    assert len(entries[0].occurrences) == 2


def test_dark_and_base_definitions_stay_distinct() -> None:
    source = make_source(
        """
        :root { --bg: #ffffff; }
        @media (prefers-color-scheme: dark) {
          :root { --bg: #000000; }
        }
        body { background: var(--bg); }
        """
    )

    entries = Aggregator().aggregate(_scan(source))

    assert [(entry.name, entry.value, entry.theme) for entry in entries] == [
        ("--bg", "#ffffff", THEME_BASE),
        ("--bg", "#000000", THEME_DARK),
    ]
    assert len(entries[0].definitions) == 1
    assert len(entries[0].usages) == 1


def test_per_file_controls_whether_files_share_entries() -> None:
    occurrences = _scan(
        make_source(".a { color: #123; }\n", "a.css"),
        make_source(".b { color: #123; }\n", "b.css"),
    )

    assert len(Aggregator(per_file=True).aggregate(occurrences)) == 2
    shared = Aggregator(per_file=False).aggregate(occurrences)
    assert len(shared) == 1
    assert shared[0].files == ["a.css", "b.css"]


def test_groups_put_root_first_and_variables_before_literals() -> None:
    root = make_source(".r { color: #abc; border-color: var(--line); }\n", "main.css")
    other_b = make_source(":root { --line: #111; }\n", "b.css")
    other_a = make_source(".a { color: #222; }\n", "a.css")
    occurrences = _scan(root, other_b, other_a)
    aggregator = Aggregator()
    entries = aggregator.aggregate(occurrences)

    groups = aggregator.group(entries, ["main.css", "b.css", "a.css"], root="main.css")

    assert [group.file for group in groups] == ["main.css", "a.css", "b.css"]
    assert [entry.kind for entry, _ in groups[0].entries] == [KIND_VARIABLE, KIND_LITERAL]
    assert groups[0].count == 2


def test_group_sorts_by_name_then_theme_then_value() -> None:
    source = make_source(
        """
        :root { --b: #222; --a: #111; }
        @media (prefers-color-scheme: dark) {
          :root { --a: #999; }
        }
        .x { color: #fff; background: #000; }
        """
    )
    aggregator = Aggregator()
    entries = aggregator.aggregate(_scan(source))

    (group,) = aggregator.group(entries, [source.label], root=source.label)

    assert [(entry.name, entry.theme, entry.value) for entry, _ in group.entries] == [
        ("--a", THEME_DARK, "#999"),
        ("--a", THEME_BASE, "#111"),
        ("--b", THEME_BASE, "#222"),
        (None, None, "#000"),
        (None, None, "#fff"),
    ]


def test_import_summaries_count_unique_entries_per_file() -> None:
    root = make_source('@import "./tokens.css";\n.r { color: #abc; }\n', "main.css")
    tokens = make_source(":root { --a: #111; --b: #222; }\n", "tokens.css")
    aggregator = Aggregator()
    files = ["main.css", "tokens.css", "empty.css"]
    groups = aggregator.group(aggregator.aggregate(_scan(root, tokens)), files, root="main.css")

    summaries = aggregator.summarize_imports(groups, files, "main.css")

    assert [(item.file, item.colors) for item in summaries] == [("tokens.css", 2), ("empty.css", 0)]


def test_order_files_without_root() -> None:
    assert order_files(["b", "a", "b"]) == ["a", "b"]
