from __future__ import annotations

from typing import Any

from backend.collectors.base import Collector
from backend.core.models import Property
from backend.core.normalize import row_to_property
from backend.core.supabase_repo import SupabaseRepo


class SupabaseCollector(Collector):
    source_name = "supabase"

    def __init__(self, repo: SupabaseRepo | None = None) -> None:
        self._repo = repo

    @property
    def repo(self) -> SupabaseRepo:
        # Credentials are only required once the source is actually used.
        if self._repo is None:
            self._repo = SupabaseRepo()
        return self._repo

    def fetch(self, listing_type: str) -> list[dict[str, Any]]:
        return self.repo.get_approved_properties(listing_type)

    def normalize(self, raw_item: dict[str, Any]) -> Property | None:
        return row_to_property(raw_item)
