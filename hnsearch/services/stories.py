"""View-state reducer for the fetch lifecycle and local removals."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Union

from hnsearch.domain.models import Item, ViewState
from hnsearch.logging import logger


@dataclass(frozen=True, slots=True)
class FetchInit:
    pass


@dataclass(frozen=True, slots=True)
class FetchSuccess:
    items: tuple[Item, ...]
    total_pages: int


@dataclass(frozen=True, slots=True)
class FetchFailure:
    reason: str = ""


@dataclass(frozen=True, slots=True)
class RemoveStory:
    item: Item


StoriesAction = Union[FetchInit, FetchSuccess, FetchFailure, RemoveStory]
StateListener = Callable[[ViewState], None]


def reduce_stories(state: ViewState, action: StoriesAction) -> ViewState:
    """Return the state that follows ``action``; ``state`` is never mutated."""

    if isinstance(action, FetchInit):
        return state.model_copy(update={"status": "loading"})
    if isinstance(action, FetchSuccess):
        return ViewState(
            items=tuple(action.items),
            status="success",
            total_pages=max(action.total_pages, 0),
        )
    if isinstance(action, FetchFailure):
        return state.model_copy(update={"status": "error"})
    if isinstance(action, RemoveStory):
        object_id = action.item.object_id
        remaining = tuple(item for item in state.items if item.object_id != object_id)
        if len(remaining) == len(state.items):
            return state
        return state.model_copy(update={"items": remaining})

    logger.warning("stories_action_ignored", action=type(action).__name__)
    return state


class StoriesStore:
    """Holds the current :class:`ViewState`; the only way to change it is ``dispatch``."""

    def __init__(self, initial: ViewState | None = None) -> None:
        self._state = initial or ViewState()
        self._listeners: list[StateListener] = []

    @property
    def state(self) -> ViewState:
        return self._state

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def dispatch(self, action: StoriesAction) -> ViewState:
        new_state = reduce_stories(self._state, action)
        if new_state is not self._state:
            self._state = new_state
            for listener in list(self._listeners):
                listener(new_state)
        return self._state


__all__ = [
    "FetchFailure",
    "FetchInit",
    "FetchSuccess",
    "RemoveStory",
    "StateListener",
    "StoriesAction",
    "StoriesStore",
    "reduce_stories",
]
