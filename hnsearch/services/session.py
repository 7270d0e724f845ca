"""Search session: the handlers a presentation layer calls."""

from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Callable

from hnsearch.domain.models import FilterSelection, Item, QueryDescriptor, ViewState
from hnsearch.logging import logger
from hnsearch.services.fetch import FetchController, Fetcher
from hnsearch.services.persistence import PersistentStore
from hnsearch.services.preferences import PreferencesStore
from hnsearch.services.query_builder import QueryBuilder
from hnsearch.services.stories import RemoveStory, StateListener, StoriesStore
from hnsearch.services.suggestions import SuggestionStore
from hnsearch.utils.datetime import utc_now

SEARCH_TERM_KEY = "search"

NO_RESULT_FEEDBACK: dict[str, str] = {
    "story": "stories",
    "show_hn": "show HN stories",
    "ask_hn": "ask HN stories",
    "launch_hn": "launch HN stories",
    "job": "jobs",
    "poll": "polls",
}


class SearchSessionController:
    """Owns the filter selection and the single authoritative query descriptor.

    Every setter except :meth:`set_term` rebuilds the descriptor synchronously
    and re-issues the request. The term only takes effect on
    :meth:`submit_search`.
    """

    def __init__(
        self,
        fetcher: Fetcher,
        store: PersistentStore,
        *,
        hits_per_page: int,
        fetch_timeout_seconds: float | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._preferences = PreferencesStore(store)
        self._suggestions = SuggestionStore(store)
        self._term_cell = store.cell(SEARCH_TERM_KEY, "")

        self._builder = QueryBuilder(
            hits_per_page,
            preferences=lambda: self._preferences.current,
            clock=clock,
        )
        self._stories = StoriesStore()
        self._fetcher = FetchController(
            fetcher,
            self._stories.dispatch,
            timeout_seconds=fetch_timeout_seconds,
        )

        prefs = self._preferences.current
        self._selection = FilterSelection(
            term=self._term_cell.value,
            content_type=prefs.default_content,
            sort_mode=prefs.default_sort,
            date_range=prefs.default_date_range,
            page=0,
        )
        self._descriptor = self._builder.build(self._selection)

    # ── snapshots ───────────────────────────────────────────────────────

    @property
    def view_state(self) -> ViewState:
        return self._stories.state

    @property
    def selection(self) -> FilterSelection:
        return self._selection

    @property
    def suggestions(self) -> list[str]:
        return self._suggestions.suggestions

    @property
    def descriptor(self) -> QueryDescriptor:
        return self._descriptor

    @property
    def preferences(self) -> PreferencesStore:
        return self._preferences

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        return self._stories.subscribe(listener)

    def empty_message(self) -> str:
        label = NO_RESULT_FEEDBACK.get(self._selection.content_type, "results")
        return f"No {label} found"

    # ── handlers ────────────────────────────────────────────────────────

    def start(self) -> asyncio.Task[None]:
        """Issue the initial request for the restored selection."""

        return self._fetcher.request(self._descriptor)

    def set_term(self, term: str) -> None:
        self._selection = self._selection.model_copy(update={"term": term})
        self._term_cell.set(term)

    def set_content_type(self, content_type: str) -> None:
        self._apply(self._selection.with_content_type(content_type))

    def set_sort_mode(self, sort_mode: str) -> None:
        self._apply(self._selection.model_copy(update={"sort_mode": sort_mode}))

    def set_date_range(self, date_range: str) -> None:
        self._apply(self._selection.model_copy(update={"date_range": date_range}))

    def set_page(self, page: int) -> None:
        if page < 0:
            raise ValueError("page must be >= 0")
        self._apply(self._selection.model_copy(update={"page": page}))

    def submit_search(self) -> asyncio.Task[None]:
        self._descriptor = self._builder.build(self._selection)
        task = self._fetcher.request(self._descriptor)
        self._suggestions.record(self._selection.term)
        logger.info(
            "search_submitted",
            term=self._selection.term,
            content_type=self._selection.content_type,
            sort_mode=self._selection.sort_mode,
            date_range=self._selection.date_range,
        )
        return task

    def remove_item(self, item: Item) -> ViewState:
        return self._stories.dispatch(RemoveStory(item=item))

    async def wait_idle(self) -> None:
        await self._fetcher.join()

    async def aclose(self) -> None:
        await self._fetcher.aclose()

    # ── private ─────────────────────────────────────────────────────────

    def _apply(self, selection: FilterSelection) -> None:
        # Build before committing so a rejected value leaves the session untouched.
        descriptor = self._builder.build(selection)
        self._selection = selection
        self._descriptor = descriptor
        self._fetcher.request(descriptor)


__all__ = ["NO_RESULT_FEEDBACK", "SEARCH_TERM_KEY", "SearchSessionController"]
