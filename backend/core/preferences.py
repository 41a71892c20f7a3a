from __future__ import annotations

import json
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from backend.core.supabase_repo import SupabaseRepo


class PreferenceStore(ABC):
    @abstractmethod
    def load(self, key: str) -> str | None:
        """Return the stored blob for key, or None."""

    @abstractmethod
    def save(self, key: str, blob: str) -> None:
        """Store blob under key, replacing any previous value."""


class InMemoryPreferenceStore(PreferenceStore):
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})

    def load(self, key: str) -> str | None:
        return self._values.get(key)

    def save(self, key: str, blob: str) -> None:
        self._values[key] = blob


class JsonFilePreferenceStore(PreferenceStore):
    """
    Key/value blobs kept in one JSON object on disk.
    """

    def __init__(self, path: str | os.PathLike[str] | None = None) -> None:
        self.path = Path(path or os.environ.get("SAVED_SEARCH_PATH") or ".saved_searches.json")

    def load(self, key: str) -> str | None:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def save(self, key: str, blob: str) -> None:
        values = self._read_all()
        values[key] = blob
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as handle:
            json.dump(values, handle, sort_keys=True, ensure_ascii=False, indent=2)
        os.replace(tmp_path, self.path)

    def _read_all(self) -> dict[str, object]:
        if not self.path.exists():
            return {}
        with open(self.path, "r", encoding="utf-8") as handle:
            data = json.load(handle)
        if not isinstance(data, dict):
            raise ValueError(f"Preference file {self.path} does not hold a JSON object.")
        return data


class SupabasePreferenceStore(PreferenceStore):
    def __init__(self, repo: SupabaseRepo, user_id: str) -> None:
        self.repo = repo
        self.user_id = user_id

    def load(self, key: str) -> str | None:
        return self.repo.get_preference(self.user_id, key)

    def save(self, key: str, blob: str) -> None:
        self.repo.upsert_preference(self.user_id, key, blob)
