"""Key/value cells synchronised with durable storage."""

from __future__ import annotations

from typing import Any, Callable, Generic, Protocol, TypeVar

from pydantic import TypeAdapter, ValidationError
from sqlalchemy.exc import SQLAlchemyError

from hnsearch.db.models.core import StoredValue
from hnsearch.db.session import Database
from hnsearch.logging import logger
from hnsearch.services.exceptions import StorageError

T = TypeVar("T")


class KeyValueStorage(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStorage:
    """Dict-backed storage, handy for tests and throwaway sessions."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class SqlStorage:
    """Storage backed by the ``stored_values`` table."""

    def __init__(self, database: Database) -> None:
        self._database = database

    def get(self, key: str) -> str | None:
        try:
            with self._database.session() as session:
                row = session.get(StoredValue, key)
                return row.value if row is not None else None
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to read '{key}': {exc}") from exc

    def set(self, key: str, value: str) -> None:
        try:
            with self._database.session() as session:
                row = session.get(StoredValue, key)
                if row is None:
                    session.add(StoredValue(key=key, value=value))
                else:
                    row.value = value
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to write '{key}': {exc}") from exc


class PersistentValue(Generic[T]):
    """A single value kept in memory and written through to storage."""

    def __init__(
        self,
        storage: KeyValueStorage,
        key: str,
        default: T,
        adapter: TypeAdapter[T],
    ) -> None:
        self.key = key
        self._storage = storage
        self._adapter = adapter
        self._value = self._load(default)

    @property
    def value(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        payload = self._adapter.dump_json(value).decode("utf-8")
        self._storage.set(self.key, payload)
        self._value = value

    def _load(self, default: T) -> T:
        raw = self._storage.get(self.key)
        if raw is None:
            return default
        try:
            return self._adapter.validate_json(raw)
        except ValidationError as exc:
            logger.warning(
                "persisted_value_discarded",
                key=self.key,
                error=str(exc),
            )
            return default


class PersistentStore:
    """Hands out one process-wide :class:`PersistentValue` per key."""

    def __init__(self, storage: KeyValueStorage) -> None:
        self._storage = storage
        self._cells: dict[str, PersistentValue[Any]] = {}

    def cell(self, key: str, default: T, value_type: Any = None) -> PersistentValue[T]:
        existing = self._cells.get(key)
        if existing is not None:
            return existing
        adapter: TypeAdapter[T] = TypeAdapter(value_type or type(default))
        created = PersistentValue(self._storage, key, default, adapter)
        self._cells[key] = created
        return created

    def get(
        self, key: str, default: T, value_type: Any = None
    ) -> tuple[T, Callable[[T], None]]:
        """Return the current value for ``key`` and a setter that persists it."""

        cell = self.cell(key, default, value_type)
        return cell.value, cell.set


__all__ = [
    "KeyValueStorage",
    "MemoryStorage",
    "PersistentStore",
    "PersistentValue",
    "SqlStorage",
]
