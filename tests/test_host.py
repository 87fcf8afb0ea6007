"""Tests for the file-system host."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from color_inspector.host import FileSystemHost, SourceHost, canonical_path


def test_canonical_path_normalizes_lexically(tmp_path: Path) -> None:
    assert canonical_path(tmp_path / "a" / ".." / "b.css") == tmp_path / "b.css"


def test_file_system_host_reads_and_checks_files(tmp_path: Path) -> None:
    (tmp_path / "src").mkdir()
    target = tmp_path / "src" / "a.css"
    target.write_text(".a { color: #fff; }", encoding="utf-8")
    host = FileSystemHost(tmp_path)

    assert isinstance(host, SourceHost)
    assert asyncio.run(host.exists(target)) is True
    assert asyncio.run(host.exists(tmp_path / "src")) is False
    assert asyncio.run(host.read_text(target)) == ".a { color: #fff; }"
    assert host.relative_path(target) == "src/a.css"


def test_file_system_host_keeps_outside_paths_absolute(tmp_path: Path) -> None:
    host = FileSystemHost(tmp_path / "ws")

    outside = tmp_path / "other.css"

    assert host.relative_path(outside) == outside.as_posix()


def test_read_text_raises_for_missing_files(tmp_path: Path) -> None:
    host = FileSystemHost(tmp_path)

    with pytest.raises(OSError):
        asyncio.run(host.read_text(tmp_path / "missing.css"))
