"""Persisted user preferences (page size, default filters, search match)."""

from __future__ import annotations

from typing import Any

from hnsearch.domain.models import Preferences
from hnsearch.logging import logger
from hnsearch.services.persistence import PersistentStore

PREFERENCES_KEY = "APP_SETTINGS"


class PreferencesStore:
    def __init__(self, store: PersistentStore, key: str = PREFERENCES_KEY) -> None:
        self._cell = store.cell(key, Preferences())

    @property
    def current(self) -> Preferences:
        return self._cell.value

    def update(self, **changes: Any) -> Preferences:
        # Re-validate so bad values never reach storage.
        updated = Preferences.model_validate({**self._cell.value.model_dump(), **changes})
        self._cell.set(updated)
        logger.info("preferences_updated", fields=sorted(changes))
        return updated


__all__ = ["PREFERENCES_KEY", "PreferencesStore"]
