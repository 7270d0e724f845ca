"""Translate a filter selection into an API-ready query descriptor."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Callable, Mapping

from hnsearch.domain.catalog import CONTENT_TAG_FILTERS, DATE_RANGE_WINDOWS, SORT_ENDPOINTS
from hnsearch.domain.models import FilterSelection, Preferences, QueryDescriptor
from hnsearch.services.exceptions import ContractViolation
from hnsearch.utils.datetime import epoch_seconds_before, utc_now

_ALWAYS_SEARCHED = ("title", "url")


def _lookup(table: Mapping[str, object], value: str, kind: str):
    try:
        return table[value]
    except KeyError:
        raise ContractViolation(
            f"Unknown {kind} {value!r}; expected one of {sorted(table)}."
        ) from None


class QueryBuilder:
    """Pure mapping from :class:`FilterSelection` to :class:`QueryDescriptor`.

    ``hits_per_page`` and the searchable attributes come from configuration and
    stored preferences, never from the selection itself. The clock is read once
    per build, so two builds inside the same second give equal descriptors.
    """

    def __init__(
        self,
        hits_per_page: int,
        preferences: Callable[[], Preferences] | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._default_hits_per_page = hits_per_page
        self._preferences = preferences or Preferences
        self._clock = clock

    def build(self, selection: FilterSelection) -> QueryDescriptor:
        tag_filter = _lookup(CONTENT_TAG_FILTERS, selection.content_type, "content type")
        endpoint = _lookup(SORT_ENDPOINTS, selection.sort_mode, "sort mode")
        window = _lookup(DATE_RANGE_WINDOWS, selection.date_range, "date range")
        prefs = self._preferences()

        return QueryDescriptor(
            endpoint=endpoint,
            numeric_filter=self._numeric_filter(window),
            tag_filter=tag_filter,
            term=selection.term,
            page=selection.page,
            hits_per_page=prefs.hits_per_page or self._default_hits_per_page,
            searchable_attributes=self._searchable_attributes(prefs),
        )

    def _numeric_filter(self, window: timedelta | None) -> str:
        if window is None:
            return "created_at_i>0"
        return f"created_at_i>{epoch_seconds_before(self._clock(), window)}"

    @staticmethod
    def _searchable_attributes(prefs: Preferences) -> tuple[str, ...]:
        extra: list[str] = []
        if prefs.author_search_match:
            extra.append("author")
        if prefs.story_text_search_match:
            extra.append("story_text")
        if not extra:
            return ()
        return _ALWAYS_SEARCHED + tuple(extra)


__all__ = [
    "CONTENT_TAG_FILTERS",
    "DATE_RANGE_WINDOWS",
    "SORT_ENDPOINTS",
    "QueryBuilder",
]
