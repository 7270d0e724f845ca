"""Recent search terms offered back to the user."""

from __future__ import annotations

from hnsearch.services.persistence import PersistentStore

SUGGESTIONS_KEY = "searchSuggestions"
MAX_SUGGESTIONS = 5


class SuggestionStore:
    """Bounded, most-recent-first list of distinct submitted terms.

    A term that is already present is left where it is; only new terms go to
    the front, and the oldest entry falls off past :data:`MAX_SUGGESTIONS`.
    """

    def __init__(self, store: PersistentStore, key: str = SUGGESTIONS_KEY) -> None:
        self._cell = store.cell(key, [], list[str])

    @property
    def suggestions(self) -> list[str]:
        return list(self._cell.value)

    def record(self, term: str) -> list[str]:
        term = term.strip()
        current = self._cell.value
        if not term or term in current:
            return list(current)
        updated = [term, *current][:MAX_SUGGESTIONS]
        self._cell.set(updated)
        return list(updated)


__all__ = ["MAX_SUGGESTIONS", "SUGGESTIONS_KEY", "SuggestionStore"]
