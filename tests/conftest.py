"""Shared pytest fixtures for storage-backed and API-backed tests."""

from __future__ import annotations

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from hnsearch.config import AppSettings
from hnsearch.db.session import Database
from hnsearch.domain.models import Item
from hnsearch.services.persistence import MemoryStorage, PersistentStore


def _make_item(object_id: str, title: str | None = None, **extra) -> Item:
    payload = {
        "objectID": object_id,
        "title": title or f"Story {object_id}",
        "author": "pg",
        "_tags": ["story", "author_pg", f"story_{object_id}"],
        **extra,
    }
    return Item.model_validate(payload)


def _hit_payload(object_id: str, title: str | None = None) -> dict:
    return {
        "objectID": object_id,
        "title": title or f"Story {object_id}",
        "url": f"https://example.com/{object_id}",
        "author": "pg",
        "points": 10,
        "num_comments": 2,
        "created_at": "2024-01-01T00:00:00Z",
        "created_at_i": 1704067200,
        "_tags": ["story", "author_pg", f"story_{object_id}"],
    }


@pytest.fixture
def make_item():
    return _make_item


@pytest.fixture
def hit_payload():
    return _hit_payload


@pytest.fixture
def database():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    db = Database(settings=AppSettings(), engine=engine)
    try:
        yield db
    finally:
        db.dispose()


@pytest.fixture
def memory_storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def store(memory_storage) -> PersistentStore:
    return PersistentStore(memory_storage)
