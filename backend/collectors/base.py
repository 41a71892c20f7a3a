from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from backend.core.models import Property


class Collector(ABC):
    source_name: str

    @abstractmethod
    def fetch(self, listing_type: str) -> list[dict[str, Any]]:
        """Fetch approved property rows of one listing type."""

    @abstractmethod
    def normalize(self, raw_item: dict[str, Any]) -> Property | None:
        """Normalize source row into a Property."""
