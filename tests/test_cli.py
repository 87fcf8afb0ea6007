"""CLI parser and command behaviour tests."""

from __future__ import annotations

import json

import pytest

from color_inspector.cli import _build_parser, main
from tests._fixtures.workspace_builder import WorkspaceBuilder


def _write_sample(builder: WorkspaceBuilder) -> None:
    builder.write(
        {
            "main.css": """
                @import "./tokens.css";
                .pair-card { border: 1px solid var(--border); }
            """,
            "tokens.css": ":root { --border: #aabbcc; }\n",
        }
    )


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "scan", "main.css"])
    assert args.verbose is True
    assert args.command == "scan"


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["scan", "main.css", "--verbose"])
    assert args.verbose is True
    assert args.path == "main.css"


def test_cli_parses_scan_options() -> None:
    parser = _build_parser()
    args = parser.parse_args(
        ["scan", "main.css", "--workspace", "ws", "--max-files", "3", "--format", "json"]
    )
    assert args.workspace == "ws"
    assert args.max_files == 3
    assert args.format == "json"


def test_cli_parses_watch_and_serve() -> None:
    parser = _build_parser()
    watch = parser.parse_args(["watch", "main.css", "--interval", "4", "--iterations", "2"])
    serve = parser.parse_args(["serve", "--port", "9000"])
    assert watch.interval == 4
    assert watch.iterations == 2
    assert serve.port == 9000
    assert serve.host == "127.0.0.1"


def test_scan_prints_markdown_report(
    workspace_builder: WorkspaceBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    _write_sample(workspace_builder)

    main(["scan", str(workspace_builder.path("main.css")), "--workspace", str(workspace_builder.path())])

    out = capsys.readouterr().out
    assert out.startswith("# main.css | 2 colors | +1 Import\n")
    assert "- `tokens.css` (1)" in out
    assert ".pair-card • border (line 2)" in out


def test_scan_prints_json_report(
    workspace_builder: WorkspaceBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    _write_sample(workspace_builder)

    main(
        [
            "scan",
            str(workspace_builder.path("main.css")),
            "--workspace",
            str(workspace_builder.path()),
            "--format",
            "json",
        ]
    )

    data = json.loads(capsys.readouterr().out)
    assert data["root"] == "main.css"
    assert data["total_colors"] == 2
    assert data["imports"] == [{"file": "tokens.css", "colors": 1}]


def test_scan_missing_root_exits_with_error(
    workspace_builder: WorkspaceBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["scan", str(workspace_builder.path("missing.css"))])

    assert excinfo.value.code == 1
    assert "Root file not found" in capsys.readouterr().err


def test_scan_invalid_config_exits_with_error(
    workspace_builder: WorkspaceBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    _write_sample(workspace_builder)
    workspace_builder.write({".color-inspector.yml": "variables:\n  precedence: nearest\n"})

    with pytest.raises(SystemExit) as excinfo:
        main(["scan", str(workspace_builder.path("main.css")), "--workspace", str(workspace_builder.path())])

    assert excinfo.value.code == 1
    assert "variables.precedence" in capsys.readouterr().err


def test_watch_runs_the_requested_iterations(
    workspace_builder: WorkspaceBuilder,
    capsys: pytest.CaptureFixture[str],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    _write_sample(workspace_builder)
    sleeps: list[float] = []
    monkeypatch.setattr("color_inspector.cli.time.sleep", sleeps.append)

    main(
        [
            "watch",
            str(workspace_builder.path("main.css")),
            "--workspace",
            str(workspace_builder.path()),
            "--interval",
            "30",
            "--iterations",
            "2",
        ]
    )

    out = capsys.readouterr().out
    assert out.count("# main.css | 2 colors") == 2
    assert "_Auto-scan: every 10 min_" in out
    assert sleeps == [600]
