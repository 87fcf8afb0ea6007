"""One scan pass end to end: import graph, variables, occurrences, inventory."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Dict, List, Optional

from .aggregator import Aggregator
from .config import CONFIG_FILENAME, InspectorConfig, load_config
from .context import ContextExtractor
from .host import FileSystemHost, SourceHost, canonical_path
from .imports import ImportResolver
from .logging import get_logger
from .models import ColorOccurrence, Inventory, ThemeInfo
from .scanner import OccurrenceScanner
from .themes import ThemeClassifier
from .variables import collect_variables

_WORKSPACE_MARKERS = (CONFIG_FILENAME, "package.json", ".git")


def discover_workspace(root: Path) -> Path:
    """Nearest ancestor of `root` holding a workspace marker, else its directory."""
    start = canonical_path(root).parent
    for candidate in (start, *start.parents):
        if any((candidate / marker).exists() for marker in _WORKSPACE_MARKERS):
            return candidate
    return start


class ColorInspector:
    """Coordinates a single scan pass over the import closure of a root file.

    Every pass builds its own variable table, context caches and host, so two
    passes never share mutable state. Callers that trigger passes in quick
    succession are responsible for discarding stale results.
    """

    def __init__(
        self,
        config: InspectorConfig | None = None,
        host: SourceHost | None = None,
    ) -> None:
        self.config = config
        self.host = host
        self.logger = get_logger("orchestrator")

    def scan(
        self,
        root: Path | str,
        workspace: Path | str | None = None,
        *,
        max_files: Optional[int] = None,
    ) -> Inventory:
        """Blocking wrapper around `scan_async` for the CLI and the service."""
        return asyncio.run(self.scan_async(root, workspace, max_files=max_files))

    async def scan_async(
        self,
        root: Path | str,
        workspace: Path | str | None = None,
        *,
        max_files: Optional[int] = None,
    ) -> Inventory:
        root_path = canonical_path(Path(root).expanduser())
        workspace_path = (
            canonical_path(Path(workspace).expanduser())
            if workspace is not None
            else discover_workspace(root_path)
        )
        config = self.config or load_config(workspace_path)
        host = self.host or FileSystemHost(workspace_path)

        if not await host.exists(root_path):
            raise FileNotFoundError(f"Root file not found: {root_path}")

        self.logger.info("Scanning %s", host.relative_path(root_path))
        resolver = ImportResolver(host, workspace_path, config.imports)
        graph = await resolver.collect(root_path, max_files=max_files)
        self.logger.debug("Import graph holds %d files", len(graph.files))

        classifier = ThemeClassifier(config.themes.attributes)
        table = collect_variables(
            graph.files, precedence=config.variables.precedence, classifier=classifier
        )
        self.logger.debug("Variable table holds %d color definitions", len(table))

        scanner = OccurrenceScanner(
            table,
            extractor=ContextExtractor(config.context),
            classifier=classifier,
            sample_length=config.context.sample_length,
        )
        occurrences: List[ColorOccurrence] = []
        theme_info: Dict[str, ThemeInfo] = {}
        for source in graph.files:
            found = scanner.scan(source)
            occurrences.extend(found)
            if source.readable:
                theme_info[source.label] = scanner.theme_info(source, found)

        labels = [source.label for source in graph.files]
        root_label = labels[0] if labels else host.relative_path(root_path)
        aggregator = Aggregator(per_file=config.aggregate.per_file)
        entries = aggregator.aggregate(occurrences)
        groups = aggregator.group(entries, labels, root=root_label, theme_info=theme_info)
        inventory = Inventory(
            root=root_label,
            files=labels,
            entries=entries,
            groups=groups,
            imports=aggregator.summarize_imports(groups, labels, root_label),
            truncated=graph.truncated,
        )
        self.logger.info(
            "Found %d colors across %d files", inventory.total_colors, len(labels)
        )
        return inventory


__all__ = ["ColorInspector", "discover_workspace"]
