"""Explicit import extraction, specifier resolution and import-graph traversal."""

from __future__ import annotations

import re
from collections import deque
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Deque, Iterable, List, Mapping, Optional, Sequence, Set, Tuple

from .config import DEFAULT_EXTENSIONS, ImportConfig
from .host import SourceHost, canonical_path
from .logging import get_logger
from .models import IMPORT_CODE, IMPORT_STYLESHEET, ImportEdge, ImportGraphResult, SourceFile

_IMPORT_FROM = re.compile(r"(?<!@)\bimport\s+[^;]*?\s+from\s+[\"']([^\"']+)[\"']")
_IMPORT_BARE = re.compile(r"(?<!@)\bimport\s+[\"']([^\"']+)[\"']")
_REQUIRE = re.compile(r"\brequire\(\s*[\"']([^\"']+)[\"']\s*\)")
_STYLESHEET_IMPORT = re.compile(r"@import\s+(?:url\(\s*)?[\"']([^\"']+)[\"']\s*\)?")

_IMPORT_PATTERNS: Tuple[Tuple[re.Pattern[str], str], ...] = (
    (_IMPORT_FROM, IMPORT_CODE),
    (_IMPORT_BARE, IMPORT_CODE),
    (_REQUIRE, IMPORT_CODE),
    (_STYLESHEET_IMPORT, IMPORT_STYLESHEET),
)

_HAS_EXTENSION = re.compile(r"\.[a-zA-Z0-9]+$")

DEFAULT_ALIASES = {"@/": "", "~/": ""}


def find_imports(text: str, from_file: Path | None = None) -> List[ImportEdge]:
    """Return explicit import edges in source order, one per (kind, specifier)."""
    found: List[Tuple[int, str, str]] = []
    for pattern, kind in _IMPORT_PATTERNS:
        for match in pattern.finditer(text):
            found.append((match.start(), match.group(1).strip(), kind))
    found.sort(key=lambda item: item[0])

    origin = from_file or Path(".")
    seen: Set[Tuple[str, str]] = set()
    edges: List[ImportEdge] = []
    for offset, specifier, kind in found:
        key = (kind, specifier)
        if key in seen or not specifier:
            continue
        seen.add(key)
        edges.append(ImportEdge(from_file=origin, specifier=specifier, kind=kind, offset=offset))
    return edges


def is_followable(
    specifier: str, kind: str, aliases: Iterable[str] = DEFAULT_ALIASES
) -> bool:
    """True for specifiers that point into the workspace without evaluating code."""
    if specifier.startswith("//"):
        return False
    if specifier.startswith(("./", "../", "/")):
        return True
    if any(specifier.startswith(prefix) for prefix in aliases):
        return True
    if kind == IMPORT_STYLESHEET:
        lowered = specifier.lower()
        return not lowered.startswith(("http:", "https:", "data:"))
    return False


def candidate_paths(
    base: Path, specifier: str, extensions: Sequence[str] = DEFAULT_EXTENSIONS
) -> List[Path]:
    """Paths to try, in order, for a specifier already joined onto `base`."""
    if _HAS_EXTENSION.search(specifier):
        return [canonical_path(base)]
    candidates = [canonical_path(f"{base}{ext}") for ext in extensions]
    candidates.extend(canonical_path(base / f"index{ext}") for ext in extensions)
    return candidates


def resolve_candidates(
    importer: Path,
    workspace: Path,
    specifier: str,
    kind: str,
    *,
    aliases: Mapping[str, str] = DEFAULT_ALIASES,
    extensions: Sequence[str] = DEFAULT_EXTENSIONS,
) -> List[Path]:
    """Candidate paths for `specifier` imported from `importer`; empty when unfollowable."""
    spec = specifier.strip()
    if spec.startswith("/"):
        return candidate_paths(workspace / spec.lstrip("/"), spec, extensions)

    for prefix in sorted(aliases, key=len, reverse=True):
        if spec.startswith(prefix):
            target = workspace / aliases[prefix] if aliases[prefix] else workspace
            return candidate_paths(target / spec[len(prefix):], spec, extensions)

    if spec.startswith(("./", "../")) or kind == IMPORT_STYLESHEET:
        return candidate_paths(importer.parent / spec, spec, extensions)

    return []


class ImportResolver:
    """Breadth-first walk of the explicit import closure of one root file."""

    def __init__(
        self,
        host: SourceHost,
        workspace: Path,
        config: ImportConfig | None = None,
    ) -> None:
        self.host = host
        self.workspace = canonical_path(workspace)
        self.config = config or ImportConfig()
        self.logger = get_logger("imports")

    async def collect(self, root: Path, max_files: Optional[int] = None) -> ImportGraphResult:
        """Visit files reachable from `root`, reading each one exactly once."""
        limit = max_files if max_files is not None else self.config.max_files
        root_path = canonical_path(root)
        queue: Deque[Path] = deque([root_path])
        visited: Set[Path] = set()
        files: List[SourceFile] = []

        while queue and len(files) < limit:
            path = queue.popleft()
            if path in visited:
                continue
            visited.add(path)

            source = SourceFile(path=path, label=self.host.relative_path(path))
            files.append(source)
            try:
                source.text = await self.host.read_text(path)
            except (OSError, UnicodeDecodeError) as exc:
                self.logger.debug("Skipping unreadable file %s: %s", source.label, exc)
                continue

            for edge in find_imports(source.text, path):
                target = await self._resolve(edge)
                if target is not None and target not in visited:
                    queue.append(target)

        truncated = any(path not in visited for path in queue)
        if truncated:
            self.logger.info(
                "Import graph truncated at %d files; raise imports.max_files to follow more",
                limit,
            )
        return ImportGraphResult(root=root_path, files=files, truncated=truncated)

    async def _resolve(self, edge: ImportEdge) -> Optional[Path]:
        aliases = self.config.aliases
        if not is_followable(edge.specifier, edge.kind, aliases):
            return None
        candidates = resolve_candidates(
            edge.from_file,
            self.workspace,
            edge.specifier,
            edge.kind,
            aliases=aliases,
            extensions=self.config.extensions,
        )
        for candidate in candidates:
            if self._is_excluded(candidate):
                continue
            if await self.host.exists(candidate):
                return candidate
        self.logger.debug(
            "Unresolved %s import '%s' in %s", edge.kind, edge.specifier, edge.from_file.name
        )
        return None

    def _is_excluded(self, path: Path) -> bool:
        patterns = self.config.exclude_paths
        if not patterns:
            return False
        try:
            rel_path = path.relative_to(self.workspace).as_posix()
        except ValueError:
            rel_path = path.as_posix()
        parts = rel_path.split("/")
        for pattern in patterns:
            if pattern.endswith("/"):
                directory = pattern.rstrip("/")
                if any(fnmatchcase(part, directory) for part in parts[:-1]):
                    return True
            elif fnmatchcase(rel_path, pattern) or fnmatchcase(parts[-1], pattern):
                return True
        return False


__all__ = [
    "ImportResolver",
    "candidate_paths",
    "find_imports",
    "is_followable",
    "resolve_candidates",
]
