"""Base classes for context strategies."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ..models import SourceFile


@dataclass(frozen=True)
class ContextHint:
    """Scope and property inferred for one occurrence; None means unresolved."""

    scope: Optional[str] = None
    property: Optional[str] = None


class ContextStrategy(ABC):
    """Contract for heuristics that describe where a color token is used."""

    @abstractmethod
    def supports(self, source: SourceFile) -> bool:
        """Return True when this strategy understands the file's syntax."""

    @abstractmethod
    def resolve(self, source: SourceFile, start: int, *, floor: int = 0) -> ContextHint:
        """Describe the token starting at offset `start`, never looking back before `floor`."""
