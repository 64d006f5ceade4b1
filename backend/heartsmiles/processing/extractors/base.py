"""
Abstract base class for all extractors.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from heartsmiles.core.constants import EntityKind


@dataclass
class ExtractionResult:
    """Outcome of one extraction call: records on success, a message on failure."""

    success: bool
    data: list[dict[str, Any]] = field(default_factory=list)
    error: str | None = None


class BaseExtractor(ABC):
    """Turns parsed spreadsheet rows into candidate entity records."""

    @abstractmethod
    async def extract(self, rows: list[dict[str, Any]], kind: EntityKind) -> ExtractionResult:
        """Extract records of `kind` from `rows`.  Never raises; failures are reported in the result."""
        ...
