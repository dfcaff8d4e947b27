"""Exception hierarchy for the feed service."""

from __future__ import annotations


class LetterfeedError(Exception):
    """Base class for all feed service errors."""


class InboxValidationError(LetterfeedError):
    """The requested inbox is invalid. The message is shown to the user."""


class FeedNotFoundError(LetterfeedError):
    """No feed document is stored under the requested key."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Feed not found: {key}")
        self.key = key


class StoreError(LetterfeedError):
    """The object store failed to read or write a feed document."""


class FeedDocumentError(LetterfeedError):
    """A stored feed document has no insertion anchor."""


class TruncationError(LetterfeedError):
    """A feed document cannot be reduced to the byte budget."""
