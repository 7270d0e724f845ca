"""HTTP client for the item-search API."""

from __future__ import annotations

import httpx
from pydantic import ValidationError

from hnsearch.config import ApiSettings
from hnsearch.domain.models import QueryDescriptor, SearchPage
from hnsearch.logging import logger
from hnsearch.services.exceptions import NetworkError


class SearchApiClient:
    """Executes a :class:`QueryDescriptor` against the relevance or date endpoint."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        settings: ApiSettings | None = None,
    ) -> None:
        self._client = http_client
        self._settings = settings or ApiSettings()

    def url_for(self, descriptor: QueryDescriptor) -> str:
        return f"{str(self._settings.base_url).rstrip('/')}/{descriptor.endpoint}"

    async def fetch(self, descriptor: QueryDescriptor) -> SearchPage:
        url = self.url_for(descriptor)
        try:
            response = await self._client.get(
                url,
                params=descriptor.params(),
                timeout=self._settings.request_timeout_seconds,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            detail = exc.response.text[:500] if exc.response is not None else str(exc)
            status_code = exc.response.status_code if exc.response is not None else "unknown"
            raise NetworkError(f"Search request failed ({status_code}): {detail}") from exc
        except httpx.RequestError as exc:
            raise NetworkError(f"Search request failed: {exc}") from exc

        try:
            page = SearchPage.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise NetworkError(f"Unreadable search response: {exc}") from exc

        logger.debug(
            "search_page_fetched",
            endpoint=descriptor.endpoint,
            page=descriptor.page,
            hits=len(page.hits),
            nb_pages=page.nb_pages,
        )
        return page


__all__ = ["SearchApiClient"]
