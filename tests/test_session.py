"""Tests for the search session controller."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone

import pytest

from hnsearch.domain.models import Preferences, QueryDescriptor, SearchPage
from hnsearch.services.exceptions import ContractViolation, NetworkError
from hnsearch.services.persistence import PersistentStore
from hnsearch.services.session import SearchSessionController

FIXED_NOW = datetime(2024, 1, 2, tzinfo=timezone.utc)


class RecordingFetcher:
    def __init__(self, make_item, *, fail: bool = False, delay: float = 0) -> None:
        self._make_item = make_item
        self._fail = fail
        self._delay = delay
        self.descriptors: list[QueryDescriptor] = []

    async def __call__(self, descriptor: QueryDescriptor) -> SearchPage:
        self.descriptors.append(descriptor)
        await asyncio.sleep(self._delay)
        if self._fail:
            raise NetworkError("boom")
        prefix = f"{descriptor.tag_filter}-{descriptor.page}"
        return SearchPage(hits=[self._make_item(f"{prefix}-{i}") for i in range(3)], nbPages=5)


def _controller(store, fetcher) -> SearchSessionController:
    return SearchSessionController(
        fetcher,
        store,
        hits_per_page=20,
        clock=lambda: FIXED_NOW,
    )


@pytest.mark.asyncio
async def test_initial_selection_comes_from_preferences(store, make_item):
    store.get("APP_SETTINGS", Preferences())[1](
        Preferences(default_content="job", default_sort="date", default_date_range="pastWeek")
    )
    store.get("search", "")[1]("remote")

    controller = _controller(store, RecordingFetcher(make_item))

    assert controller.selection.term == "remote"
    assert controller.selection.content_type == "job"
    assert controller.descriptor.endpoint == "search_by_date"
    assert controller.view_state.status == "idle"


@pytest.mark.asyncio
async def test_start_issues_single_request(store, make_item):
    fetcher = RecordingFetcher(make_item)
    controller = _controller(store, fetcher)

    controller.start()
    await controller.wait_idle()

    assert len(fetcher.descriptors) == 1
    assert controller.view_state.status == "success"
    assert controller.view_state.total_pages == 5


@pytest.mark.asyncio
async def test_term_changes_do_not_fetch_until_submit(store, make_item):
    fetcher = RecordingFetcher(make_item)
    controller = _controller(store, fetcher)

    controller.set_term("r")
    controller.set_term("ru")
    controller.set_term("rust")
    await asyncio.sleep(0)
    assert fetcher.descriptors == []

    controller.submit_search()
    await controller.wait_idle()

    assert [d.term for d in fetcher.descriptors] == ["rust"]
    assert controller.suggestions == ["rust"]


@pytest.mark.asyncio
async def test_filter_setters_refetch(store, make_item):
    fetcher = RecordingFetcher(make_item)
    controller = _controller(store, fetcher)

    controller.set_sort_mode("date")
    await controller.wait_idle()
    controller.set_date_range("pastYear")
    await controller.wait_idle()
    controller.set_page(2)
    await controller.wait_idle()

    endpoints = [d.endpoint for d in fetcher.descriptors]
    assert endpoints == ["search_by_date"] * 3
    assert fetcher.descriptors[-1].page == 2
    assert fetcher.descriptors[-1].numeric_filter.startswith("created_at_i>")
    assert controller.descriptor == fetcher.descriptors[-1]


@pytest.mark.asyncio
async def test_content_type_change_resets_page(store, make_item):
    fetcher = RecordingFetcher(make_item)
    controller = _controller(store, fetcher)

    controller.set_page(3)
    await controller.wait_idle()
    controller.set_content_type("poll")
    await controller.wait_idle()

    assert controller.selection.page == 0
    assert fetcher.descriptors[-1].tag_filter == "poll"
    assert fetcher.descriptors[-1].page == 0
    assert controller.view_state.items[0].object_id == "poll-0-0"


@pytest.mark.asyncio
async def test_rapid_filter_changes_show_latest_page_only(store, make_item):
    fetcher = RecordingFetcher(make_item, delay=0.01)
    controller = _controller(store, fetcher)

    controller.set_page(1)
    controller.set_page(2)
    controller.set_page(4)
    await controller.wait_idle()

    assert {item.object_id.split("-")[1] for item in controller.view_state.items} == {"4"}


@pytest.mark.asyncio
async def test_unknown_filter_leaves_session_untouched(store, make_item):
    fetcher = RecordingFetcher(make_item)
    controller = _controller(store, fetcher)
    before = controller.selection

    with pytest.raises(ContractViolation):
        controller.set_content_type("podcast")

    assert controller.selection == before
    assert fetcher.descriptors == []


@pytest.mark.asyncio
async def test_remove_item_is_local(store, make_item):
    fetcher = RecordingFetcher(make_item)
    controller = _controller(store, fetcher)
    controller.start()
    await controller.wait_idle()

    target = controller.view_state.items[1]
    controller.remove_item(target)
    controller.remove_item(target)

    assert [item.object_id for item in controller.view_state.items] == ["story-0-0", "story-0-2"]
    assert len(fetcher.descriptors) == 1


@pytest.mark.asyncio
async def test_failed_search_keeps_items_and_reports_error(store, make_item):
    fetcher = RecordingFetcher(make_item)
    controller = _controller(store, fetcher)
    controller.start()
    await controller.wait_idle()

    fetcher._fail = True
    controller.set_term("anything")
    controller.submit_search()
    await controller.wait_idle()

    assert controller.view_state.status == "error"
    assert len(controller.view_state.items) == 3


@pytest.mark.asyncio
async def test_empty_submission_does_not_record_suggestion(memory_storage, make_item):
    controller = _controller(PersistentStore(memory_storage), RecordingFetcher(make_item))

    controller.set_term("   ")
    controller.submit_search()
    await controller.wait_idle()

    assert controller.suggestions == []
    assert "searchSuggestions" not in memory_storage.data


@pytest.mark.asyncio
async def test_term_is_restored_in_new_session(memory_storage, make_item):
    first = _controller(PersistentStore(memory_storage), RecordingFetcher(make_item))
    first.set_term("sqlite")

    second = _controller(PersistentStore(memory_storage), RecordingFetcher(make_item))
    assert second.selection.term == "sqlite"


@pytest.mark.asyncio
async def test_preferences_apply_on_next_request(store, make_item):
    fetcher = RecordingFetcher(make_item)
    controller = _controller(store, fetcher)

    controller.preferences.update(hits_per_page=50, author_search_match=True)
    controller.submit_search()
    await controller.wait_idle()

    assert fetcher.descriptors[-1].hits_per_page == 50
    assert "author" in fetcher.descriptors[-1].searchable_attributes


def test_empty_message_names_content_type(store, make_item):
    controller = _controller(store, RecordingFetcher(make_item))
    assert controller.empty_message() == "No stories found"


@pytest.mark.asyncio
async def test_stale_unknown_default_in_storage_does_not_block_startup(memory_storage, make_item):
    memory_storage.set(
        "APP_SETTINGS",
        '{"hits_per_page": null, "default_content": "all", "default_sort": "popularity",'
        ' "default_date_range": "forever", "author_search_match": false,'
        ' "story_text_search_match": false}',
    )

    controller = _controller(PersistentStore(memory_storage), RecordingFetcher(make_item))

    assert controller.selection.content_type == "story"
    assert controller.descriptor.tag_filter == "story"
