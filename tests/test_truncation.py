"""Tests for letterfeed.truncation."""

from __future__ import annotations

import xml.etree.ElementTree as ET

import pytest

from letterfeed.entry import EntryBuilder
from letterfeed.errors import TruncationError
from letterfeed.feed import FeedDocument
from letterfeed.models import ContentType
from letterfeed.truncation import truncate

ATOM = "{http://www.w3.org/2005/Atom}"


def _titles(data: bytes) -> list[str]:
    root = ET.fromstring(data)
    return [e.findtext(f"{ATOM}title") for e in root.findall(f"{ATOM}entry")]


@pytest.fixture
def large_feed(document: FeedDocument, builder: EntryBuilder, token: str) -> bytes:
    """A feed of 30 entries with uneven, multi-byte contents."""
    data = document.create("Tech Weekly", token)
    for i in range(1, 31):
        content = ("é<b>€</b> " * (i * 7 % 23 + 1)) + f"issue {i}"
        content_type = ContentType.HTML if i % 2 else ContentType.TEXT
        fragment = builder.build(
            token,
            f"Issue {i}",
            "a@b.com",
            f"2025-06-01T12:{i:02d}:00+00:00",
            content_type,
            content,
        )
        data = FeedDocument.insert(data, fragment)
    return data


def _floor(data: bytes) -> int:
    """Smallest budget that holds the header, the anchor and the closer."""
    return data.find(b"</updated>") + len(b"</updated>") + len(b"\n</feed>")


class TestTruncate:
    def test_small_document_unchanged(self, large_feed: bytes):
        assert truncate(large_feed, len(large_feed)) is large_feed
        assert truncate(large_feed, len(large_feed) + 100) is large_feed

    def test_all_budgets_yield_well_formed_prefixes(self, large_feed: bytes):
        all_titles = _titles(large_feed)
        for max_size in range(_floor(large_feed), len(large_feed), 53):
            result = truncate(large_feed, max_size)
            assert len(result) <= max_size
            assert result.endswith(b"</feed>")
            titles = _titles(result)
            # Oldest entries are evicted first: what remains is a prefix.
            assert titles == all_titles[: len(titles)]

    def test_keeps_as_many_entries_as_fit(self, large_feed: bytes):
        third_entry_end = 0
        for _ in range(3):
            third_entry_end = large_feed.find(b"</entry>", third_entry_end) + len(b"</entry>")
        max_size = third_entry_end + len(b"\n</feed>")
        result = truncate(large_feed, max_size)
        assert _titles(result) == ["Issue 30", "Issue 29", "Issue 28"]
        assert len(result) == max_size

    def test_degenerate_keeps_only_anchor(self, large_feed: bytes):
        floor = _floor(large_feed)
        result = truncate(large_feed, floor)
        assert len(result) == floor
        root = ET.fromstring(result)
        assert root.findall(f"{ATOM}entry") == []
        assert root.findtext(f"{ATOM}updated") == "2025-06-01T12:30:00+00:00"
        assert root.findtext(f"{ATOM}title") == "Tech Weekly"

    def test_degenerate_result_accepts_next_insert(self, large_feed: bytes, builder: EntryBuilder, token: str):
        result = truncate(large_feed, _floor(large_feed))
        fragment = builder.build(token, "Issue 31", "a", "2025-06-01T13:00:00+00:00", ContentType.TEXT, "x")
        assert _titles(FeedDocument.insert(result, fragment)) == ["Issue 31"]

    def test_too_small_for_header(self, large_feed: bytes):
        with pytest.raises(TruncationError):
            truncate(large_feed, _floor(large_feed) - 1)
        with pytest.raises(TruncationError):
            truncate(large_feed, 5)

    def test_truncated_feed_is_still_insertable(self, large_feed: bytes, builder: EntryBuilder, token: str):
        data = truncate(large_feed, len(large_feed) // 2)
        fragment = builder.build(token, "Issue 31", "a", "2025-06-01T13:00:00+00:00", ContentType.TEXT, "x")
        data = FeedDocument.insert(data, fragment)
        assert _titles(data)[:2] == ["Issue 31", "Issue 30"]
