"""Latest-wins fetch orchestration feeding the stories reducer."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable

from hnsearch.domain.models import QueryDescriptor, SearchPage
from hnsearch.logging import logger
from hnsearch.services.exceptions import NetworkError
from hnsearch.services.stories import FetchFailure, FetchInit, FetchSuccess, StoriesAction

Fetcher = Callable[[QueryDescriptor], Awaitable[SearchPage]]
Dispatch = Callable[[StoriesAction], object]


class FetchController:
    """Runs at most one meaningful request at a time.

    Every ``request`` bumps a generation counter. A resolution is dispatched
    only while its generation is still the latest, so a slow response for an
    older descriptor can never overwrite the result of a newer one. Superseded
    tasks are also cancelled, which aborts the underlying HTTP call.
    """

    def __init__(
        self,
        fetcher: Fetcher,
        dispatch: Dispatch,
        *,
        timeout_seconds: float | None = None,
        cancel_superseded: bool = True,
    ) -> None:
        self._fetch = fetcher
        self._dispatch = dispatch
        self._timeout = timeout_seconds
        self._cancel_superseded = cancel_superseded
        self._generation = 0
        self._descriptor: QueryDescriptor | None = None
        self._task: asyncio.Task[None] | None = None

    @property
    def descriptor(self) -> QueryDescriptor | None:
        return self._descriptor

    @property
    def in_flight(self) -> bool:
        return self._task is not None and not self._task.done()

    def request(self, descriptor: QueryDescriptor) -> asyncio.Task[None]:
        if self.in_flight and descriptor == self._descriptor:
            logger.debug("fetch_request_coalesced", endpoint=descriptor.endpoint, page=descriptor.page)
            assert self._task is not None
            return self._task

        if self._cancel_superseded and self.in_flight:
            assert self._task is not None
            self._task.cancel()

        self._generation += 1
        self._descriptor = descriptor
        self._dispatch(FetchInit())
        self._task = asyncio.get_running_loop().create_task(
            self._run(self._generation, descriptor)
        )
        return self._task

    async def join(self) -> None:
        """Wait until the most recently issued request has settled."""

        while self._task is not None and not self._task.done():
            await asyncio.wait({self._task})

    async def aclose(self) -> None:
        task, self._task = self._task, None
        self._generation += 1
        if task is not None and not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    async def _run(self, generation: int, descriptor: QueryDescriptor) -> None:
        try:
            async with asyncio.timeout(self._timeout):
                page = await self._fetch(descriptor)
        except TimeoutError:
            self._fail(generation, descriptor, f"timed out after {self._timeout}s")
            return
        except NetworkError as exc:
            self._fail(generation, descriptor, str(exc))
            return
        except Exception:
            logger.exception("fetch_crashed", endpoint=descriptor.endpoint, page=descriptor.page)
            self._fail(generation, descriptor, "unexpected error")
            raise

        if not self._is_current(generation):
            logger.debug("stale_fetch_dropped", generation=generation, latest=self._generation)
            return
        self._dispatch(FetchSuccess(items=tuple(page.hits), total_pages=page.nb_pages))

    def _fail(self, generation: int, descriptor: QueryDescriptor, reason: str) -> None:
        if not self._is_current(generation):
            logger.debug("stale_fetch_failure_dropped", generation=generation, reason=reason)
            return
        logger.warning(
            "fetch_failed",
            endpoint=descriptor.endpoint,
            term=descriptor.term,
            page=descriptor.page,
            error=reason,
        )
        self._dispatch(FetchFailure(reason=reason))


__all__ = ["FetchController", "Fetcher"]
