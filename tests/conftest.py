"""Shared test fixtures for the letterfeed test suite."""

from __future__ import annotations

import asyncio
import itertools
from collections.abc import Callable

import pytest

from letterfeed.addressing import Addressing
from letterfeed.config import FeedConfig, Settings, StorageConfig
from letterfeed.entry import EntryBuilder
from letterfeed.errors import FeedNotFoundError, StoreError
from letterfeed.feed import FeedDocument
from letterfeed.store import ObjectStore

FIXED_TIME = "2025-06-01T12:00:00+00:00"


class InMemoryStore(ObjectStore):
    """Dict-backed store that yields to the loop on every call."""

    def __init__(self) -> None:
        self.objects: dict[str, bytes] = {}
        self.fail_puts = False
        self.fail_gets = False
        self.puts: int = 0

    async def get(self, key: str) -> bytes:
        await asyncio.sleep(0)
        if self.fail_gets:
            raise StoreError("backend unavailable")
        try:
            return self.objects[key]
        except KeyError:
            raise FeedNotFoundError(key) from None

    async def put(self, key: str, data: bytes) -> None:
        await asyncio.sleep(0)
        if self.fail_puts:
            raise StoreError("backend unavailable")
        self.puts += 1
        self.objects[key] = data


def make_clock() -> Callable[[], str]:
    """A clock returning strictly increasing RFC 3339 timestamps."""
    counter = itertools.count()

    def _clock() -> str:
        n = next(counter)
        return f"2025-06-01T12:{n // 60:02d}:{n % 60:02d}+00:00"

    return _clock


@pytest.fixture
def feed_config() -> FeedConfig:
    return FeedConfig(
        name="Kill the Newsletter!",
        domain="www.example.com",
        email_domain="example.com",
        urn="example",
        administrator_email="admin@example.com",
    )


@pytest.fixture
def addressing(feed_config: FeedConfig) -> Addressing:
    return Addressing(feed_config)


@pytest.fixture
def builder(addressing: Addressing) -> EntryBuilder:
    return EntryBuilder(addressing)


@pytest.fixture
def document(feed_config: FeedConfig, addressing: Addressing, builder: EntryBuilder) -> FeedDocument:
    return FeedDocument(feed_config, addressing, builder, clock=lambda: FIXED_TIME)


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def clock() -> Callable[[], str]:
    return make_clock()


@pytest.fixture
def settings(feed_config: FeedConfig, tmp_path) -> Settings:
    return Settings(
        log_json=False,
        feed=feed_config,
        storage=StorageConfig(backend="local", local_path=str(tmp_path / "feeds")),
    )


@pytest.fixture
def token() -> str:
    return "abcdefghij0123456789"
