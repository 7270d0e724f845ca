"""Pydantic models shared by the query, fetch and session layers."""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

from hnsearch.domain.catalog import (
    CONTENT_TAG_FILTERS,
    DATE_RANGE_WINDOWS,
    PER_PAGE_OPTIONS,
    SORT_ENDPOINTS,
)

FetchStatus = Literal["idle", "loading", "success", "error"]


def _one_of(value: str, catalogue: Mapping[str, object], field: str) -> str:
    if value not in catalogue:
        raise ValueError(f"{field} must be one of {sorted(catalogue)}, got {value!r}")
    return value


class FilterSelection(BaseModel):
    """Snapshot of everything the user picked in the search form."""

    model_config = ConfigDict(frozen=True)

    term: str = ""
    content_type: str = "story"
    sort_mode: str = "popularity"
    date_range: str = "forever"
    page: int = Field(default=0, ge=0)

    def with_content_type(self, content_type: str) -> FilterSelection:
        # Pages of different categories are not comparable.
        return self.model_copy(update={"content_type": content_type, "page": 0})


class QueryDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    endpoint: Literal["search", "search_by_date"]
    numeric_filter: str
    tag_filter: str
    term: str
    page: int = Field(ge=0)
    hits_per_page: int = Field(ge=1)
    searchable_attributes: tuple[str, ...] = ()

    def params(self) -> dict[str, str | int]:
        """Query-string parameters understood by the search API."""

        params: dict[str, str | int] = {
            "query": self.term,
            "tags": self.tag_filter,
            "numericFilters": self.numeric_filter,
            "page": self.page,
            "hitsPerPage": self.hits_per_page,
        }
        if self.searchable_attributes:
            params["restrictSearchableAttributes"] = ",".join(self.searchable_attributes)
        return params


class HighlightField(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    value: str = ""
    match_level: str = Field(default="none", alias="matchLevel")
    matched_words: tuple[str, ...] = Field(default=(), alias="matchedWords")


class Item(BaseModel):
    """A single search hit. Identity is ``object_id``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    object_id: str = Field(alias="objectID")
    title: str | None = None
    url: str | None = None
    author: str = ""
    story_text: str | None = None
    job_text: str | None = None
    comment_text: str | None = None
    tags: tuple[str, ...] = Field(default=(), alias="_tags")
    points: int | None = None
    num_comments: int | None = None
    created_at: datetime | None = None
    created_at_i: int | None = None
    highlight: dict[str, HighlightField] = Field(
        default_factory=dict, alias="_highlightResult"
    )

    @property
    def category(self) -> str | None:
        return self.tags[0] if self.tags else None

    def highlighted(self, field: str) -> str | None:
        """Emphasis markup for ``field``, only when the term actually matched it."""

        entry = self.highlight.get(field)
        if entry is None or not entry.matched_words:
            return None
        return entry.value or None

    def content(self) -> str | None:
        if self.category == "story":
            return self.highlighted("story_text") or self.story_text
        if self.category == "job":
            return self.highlighted("job_text") or self.job_text
        return None


class SearchPage(BaseModel):
    """One server-side page of results."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    hits: list[Item] = Field(default_factory=list)
    nb_pages: int = Field(default=0, ge=0, alias="nbPages")


class ViewState(BaseModel):
    model_config = ConfigDict(frozen=True)

    items: tuple[Item, ...] = ()
    status: FetchStatus = "idle"
    total_pages: int = Field(default=0, ge=0)


class Preferences(BaseModel):
    """User-adjustable application settings persisted between sessions."""

    model_config = ConfigDict(frozen=True)

    # None means "use the configured default".
    hits_per_page: int | None = None
    default_content: str = "story"
    default_sort: str = "popularity"
    default_date_range: str = "forever"
    author_search_match: bool = False
    story_text_search_match: bool = False

    @field_validator("hits_per_page")
    @classmethod
    def _known_page_size(cls, value: int | None) -> int | None:
        if value is not None and value not in PER_PAGE_OPTIONS:
            raise ValueError(f"hits_per_page must be one of {list(PER_PAGE_OPTIONS)}")
        return value

    @field_validator("default_content")
    @classmethod
    def _known_content(cls, value: str) -> str:
        return _one_of(value, CONTENT_TAG_FILTERS, "default_content")

    @field_validator("default_sort")
    @classmethod
    def _known_sort(cls, value: str) -> str:
        return _one_of(value, SORT_ENDPOINTS, "default_sort")

    @field_validator("default_date_range")
    @classmethod
    def _known_date_range(cls, value: str) -> str:
        return _one_of(value, DATE_RANGE_WINDOWS, "default_date_range")


__all__ = [
    "FetchStatus",
    "FilterSelection",
    "HighlightField",
    "Item",
    "Preferences",
    "QueryDescriptor",
    "SearchPage",
    "ViewState",
]
