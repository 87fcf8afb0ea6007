"""Context strategies and the extractor that picks one per occurrence."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ..config import ContextConfig
from ..models import SourceFile
from .base import ContextHint, ContextStrategy
from .markup import MarkupStrategy
from .stylesheet import STYLESHEET_SUFFIXES, StylesheetStrategy, mask_comments

_STYLE_BLOCK = re.compile(r"<style\b[^>]*>(.*?)</style\s*>", re.DOTALL | re.IGNORECASE)


class ContextExtractor:
    """Routes each occurrence to the stylesheet or markup strategy.

    Style-sheet files always use the stylesheet strategy. Markup files use the
    markup strategy, except inside `<style>` blocks where CSS rules apply again.
    """

    def __init__(self, config: ContextConfig | None = None) -> None:
        config = config or ContextConfig()
        self.stylesheet = StylesheetStrategy(window=config.stylesheet_window)
        self.markup = MarkupStrategy(
            window=config.markup_window, component_window=config.component_window
        )
        self._style_blocks: Dict[Path, List[Tuple[int, int]]] = {}

    def resolve(self, source: SourceFile, start: int) -> ContextHint:
        strategy, floor = self.strategy_for(source, start)
        return strategy.resolve(source, start, floor=floor)

    def strategy_for(self, source: SourceFile, offset: int) -> Tuple[ContextStrategy, int]:
        if self.stylesheet.supports(source):
            return self.stylesheet, 0
        block = self._style_block_at(source, offset)
        if block is not None:
            return self.stylesheet, block[0]
        return self.markup, 0

    def _style_block_at(self, source: SourceFile, offset: int) -> Optional[Tuple[int, int]]:
        blocks = self._style_blocks.get(source.path)
        if blocks is None:
            blocks = [match.span(1) for match in _STYLE_BLOCK.finditer(source.text or "")]
            self._style_blocks[source.path] = blocks
        for begin, end in blocks:
            if begin <= offset < end:
                return begin, end
        return None


__all__ = [
    "ContextExtractor",
    "ContextHint",
    "ContextStrategy",
    "MarkupStrategy",
    "STYLESHEET_SUFFIXES",
    "StylesheetStrategy",
    "mask_comments",
]
