"""Host collaborators used by a scan pass to reach the file system."""

from __future__ import annotations

import asyncio
import os
from pathlib import Path
from typing import Callable, Protocol, TypeVar, runtime_checkable

_T = TypeVar("_T")


@runtime_checkable
class SourceHost(Protocol):
    """What the scanner needs from its environment.

    `read_text` may raise `OSError` or `UnicodeDecodeError`; callers treat that as an
    unreadable file rather than a failed pass.
    """

    async def read_text(self, path: Path) -> str: ...

    async def exists(self, path: Path) -> bool: ...

    def relative_path(self, path: Path) -> str: ...


def canonical_path(path: Path | str) -> Path:
    """Absolute, lexically normalized path used as a file's identity."""
    return Path(os.path.normpath(os.path.abspath(os.fspath(path))))


class FileSystemHost:
    """Reads from the local disk, off the event loop."""

    def __init__(self, workspace: Path | str) -> None:
        self.workspace = canonical_path(Path(workspace).expanduser())

    async def read_text(self, path: Path) -> str:
        return await self._run(lambda: Path(path).read_text(encoding="utf-8"))

    async def exists(self, path: Path) -> bool:
        return await self._run(lambda: Path(path).is_file())

    def relative_path(self, path: Path) -> str:
        try:
            return Path(path).relative_to(self.workspace).as_posix()
        except ValueError:
            return Path(path).as_posix()

    @staticmethod
    async def _run(func: Callable[[], _T]) -> _T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, func)


__all__ = ["FileSystemHost", "SourceHost", "canonical_path"]
