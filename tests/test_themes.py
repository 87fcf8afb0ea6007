"""Tests for theme classification."""

from __future__ import annotations

import textwrap

from color_inspector.models import THEME_BASE, THEME_DARK, THEME_LIGHT
from color_inspector.themes import ThemeClassifier, strip_line_comments


def _classify(text: str, classifier: ThemeClassifier | None = None) -> list[str]:
    body = textwrap.dedent(text).strip("\n")
    return (classifier or ThemeClassifier()).classify(body)


def test_media_query_tags_nested_lines_dark() -> None:
    themes = _classify(
        """
        @media (prefers-color-scheme: dark) {
          .card {
            color: #000;
          }
        }
        .x { color: #fff; }
        """
    )

    assert themes == [THEME_BASE, THEME_DARK, THEME_DARK, THEME_DARK, THEME_DARK, THEME_BASE]


def test_root_attribute_selector_tags_light() -> None:
    themes = _classify(
        """
        :root[data-theme-mode="light"] {
          --x: #fff;
        }
        """
    )

    assert themes == [THEME_BASE, THEME_LIGHT, THEME_LIGHT]


def test_custom_theme_attribute() -> None:
    classifier = ThemeClassifier(["data-theme"])

    themes = _classify(
        """
        :root[data-theme='dark'] {
          --x: #000;
        }
        """,
        classifier,
    )

    assert themes[1] == THEME_DARK


def test_braces_inside_comments_are_ignored() -> None:
    themes = _classify(
        """
        /* @media (prefers-color-scheme: dark) { */
        .a { color: #fff; }
        """
    )

    assert themes == [THEME_BASE, THEME_BASE]


def test_supports_system_detection() -> None:
    classifier = ThemeClassifier()

    assert classifier.supports_system('<html data-theme-mode="system">')
    assert classifier.supports_system(
        "@media (prefers-color-scheme: dark) { :root:not([data-theme-mode]) { --x: #000; } }"
    )
    assert not classifier.supports_system(".a { color: #fff; }")
    assert not classifier.supports_system("@media (prefers-color-scheme: dark) { .a { color: #000; } }")


def test_file_info_reports_definition_themes() -> None:
    info = ThemeClassifier().file_info("", [THEME_DARK, THEME_BASE])

    assert info.has_dark is True
    assert info.has_base is True
    assert info.has_light is False
    assert info.supports_system is False


def test_strip_line_comments() -> None:
    assert strip_line_comments("a { /* x */ color: red; } // done") == "a {  color: red; } "
