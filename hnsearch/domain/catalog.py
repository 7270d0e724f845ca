"""Filter catalogues shared by the domain models and the query builder."""

from __future__ import annotations

from datetime import timedelta

CONTENT_TAG_FILTERS: dict[str, str] = {
    "story": "story",
    "show_hn": "show_hn",
    "ask_hn": "ask_hn",
    "launch_hn": "launch_hn",
    "job": "job",
    "poll": "poll",
}

SORT_ENDPOINTS: dict[str, str] = {
    "popularity": "search",
    "date": "search_by_date",
}

# None means no lower bound.
DATE_RANGE_WINDOWS: dict[str, timedelta | None] = {
    "forever": None,
    "past24hr": timedelta(days=1),
    "pastWeek": timedelta(days=7),
    "pastMonth": timedelta(days=30),
    "pastYear": timedelta(days=365),
}

PER_PAGE_OPTIONS: tuple[int, ...] = (10, 20, 30, 50)


__all__ = [
    "CONTENT_TAG_FILTERS",
    "DATE_RANGE_WINDOWS",
    "PER_PAGE_OPTIONS",
    "SORT_ENDPOINTS",
]
