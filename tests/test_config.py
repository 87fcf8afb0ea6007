"""Tests for color_inspector.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from color_inspector.config import (
    DEFAULT_EXTENSIONS,
    ConfigError,
    InspectorConfig,
    clamp_scan_minutes,
    load_config,
)


def _write_config(tmp_path: Path, body: str) -> Path:
    config_file = tmp_path / ".color-inspector.yml"
    config_file.write_text(body, encoding="utf-8")
    return config_file


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, InspectorConfig)
    assert config.root == tmp_path.resolve()
    assert config.imports.max_files == 160
    assert config.imports.extensions == list(DEFAULT_EXTENSIONS)
    assert config.imports.aliases == {"@/": "", "~/": ""}
    assert config.imports.exclude_paths == ["node_modules/"]
    assert config.context.markup_window == 15
    assert config.context.component_window == 60
    assert config.context.stylesheet_window == 40
    assert config.themes.attributes == ["data-theme-mode"]
    assert config.variables.precedence == "first"
    assert config.aggregate.per_file is True
    assert config.report.format == "markdown"
    assert config.report.auto_scan_minutes == 0
    assert config.report.max_usages == 50


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = _write_config(
        tmp_path,
        """
imports:
  max_files: 40
  extensions: [ts, .css]
  aliases:
    "@/": src
  exclude_paths:
    - "vendor/"
context:
  markup_window: 20
  sample_length: 80
themes:
  attributes: [data-theme, data-mode]
variables:
  precedence: LAST
aggregate:
  per_file: "no"
report:
  format: json
  auto_scan_minutes: 25
  max_usages: 5
""",
    )

    config = load_config(config_file)

    assert config.imports.max_files == 40
    assert config.imports.extensions == [".ts", ".css"]
    assert config.imports.aliases == {"@/": "src"}
    assert config.imports.exclude_paths == ["vendor/"]
    assert config.context.markup_window == 20
    assert config.context.sample_length == 80
    assert config.themes.attributes == ["data-theme", "data-mode"]
    assert config.variables.precedence == "last"
    assert config.aggregate.per_file is False
    assert config.report.format == "json"
    assert config.report.auto_scan_minutes == 10
    assert config.report.max_usages == 5


def test_load_config_finds_the_file_next_to_a_source_path(tmp_path: Path) -> None:
    _write_config(tmp_path, "imports:\n  max_files: 7\n")

    config = load_config(tmp_path / "main.css")

    assert config.imports.max_files == 7


@pytest.mark.parametrize(
    "body",
    [
        "variables:\n  precedence: nearest\n",
        "report:\n  format: html\n",
        "imports:\n  max_files: 0\n",
        "- just\n- a list\n",
        "imports: [unclosed\n",
    ],
)
def test_load_config_rejects_invalid_files(tmp_path: Path, body: str) -> None:
    _write_config(tmp_path, body)

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_empty_config_file_uses_defaults(tmp_path: Path) -> None:
    _write_config(tmp_path, "\n")

    assert load_config(tmp_path).imports.max_files == 160


def test_clamp_scan_minutes() -> None:
    assert clamp_scan_minutes(0) == 0
    assert clamp_scan_minutes(-3) == 0
    assert clamp_scan_minutes(1) == 1
    assert clamp_scan_minutes(5) == 5
    assert clamp_scan_minutes(15) == 10
