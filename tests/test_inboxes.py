"""Tests for letterfeed.inboxes (InboxService)."""

from __future__ import annotations

import xml.etree.ElementTree as ET

import pytest

from letterfeed.config import FeedConfig
from letterfeed.errors import FeedNotFoundError, InboxValidationError, StoreError
from letterfeed.inboxes import InboxService
from letterfeed.tokens import is_valid_token

ATOM = "{http://www.w3.org/2005/Atom}"


@pytest.fixture
def inboxes(feed_config: FeedConfig, store, clock) -> InboxService:
    return InboxService(feed_config, store, clock=clock)


class TestCreateInbox:
    async def test_creates_feed(self, inboxes: InboxService, store):
        created = await inboxes.create_inbox("Tech Weekly")

        assert is_valid_token(created.token)
        assert created.name == "Tech Weekly"
        assert created.email == f"{created.token}@example.com"
        assert created.feed_url == f"https://www.example.com/feeds/{created.token}.xml"
        root = ET.fromstring(store.objects[f"{created.token}.xml"])
        assert root.findtext(f"{ATOM}title") == "Tech Weekly"
        assert len(root.findall(f"{ATOM}entry")) == 1
        assert inboxes.inboxes_created == 1

    async def test_uses_given_token(self, inboxes: InboxService, store, token: str):
        created = await inboxes.create_inbox("Tech Weekly", token=token)
        assert created.token == token
        assert f"{token}.xml" in store.objects

    @pytest.mark.parametrize("name", [None, "", "   "])
    async def test_blank_name(self, inboxes: InboxService, store, name):
        with pytest.raises(InboxValidationError, match="Please provide the newsletter name."):
            await inboxes.create_inbox(name)
        assert store.objects == {}

    async def test_name_too_long(self, inboxes: InboxService, store):
        with pytest.raises(InboxValidationError, match="Newsletter name is too long."):
            await inboxes.create_inbox("x" * 1001)
        assert store.objects == {}

    async def test_name_at_limit(self, inboxes: InboxService):
        created = await inboxes.create_inbox("x" * 1000)
        assert created.name == "x" * 1000

    async def test_store_failure_propagates(self, inboxes: InboxService, store):
        store.fail_puts = True
        with pytest.raises(StoreError):
            await inboxes.create_inbox("Tech Weekly")
        assert inboxes.inboxes_created == 0


class TestReadFeed:
    async def test_reads_are_identical(self, inboxes: InboxService, store):
        created = await inboxes.create_inbox("Tech Weekly")
        first = await inboxes.read_feed(created.token)
        second = await inboxes.read_feed(created.token)
        assert first == second == store.objects[f"{created.token}.xml"]
        assert store.puts == 1

    async def test_unknown_token(self, inboxes: InboxService):
        with pytest.raises(FeedNotFoundError):
            await inboxes.read_feed("abcdefghij0123456789")

    async def test_malformed_token_never_reaches_store(self, inboxes: InboxService, store):
        store.fail_gets = True
        with pytest.raises(FeedNotFoundError):
            await inboxes.read_feed("../../etc/passwd")
