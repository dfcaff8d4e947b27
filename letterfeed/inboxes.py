"""InboxService — create mailboxes and serve their feeds."""

from __future__ import annotations

from collections.abc import Callable

import structlog

from .addressing import Addressing
from .config import FeedConfig
from .entry import EntryBuilder
from .errors import FeedNotFoundError, InboxValidationError
from .feed import FeedDocument
from .models import InboxCreated
from .store import ObjectStore
from .text import is_blank, now_rfc3339
from .tokens import generate_token, is_valid_token

logger = structlog.get_logger()


class InboxService:
    """Create feeds for new mailboxes and read stored feeds back."""

    def __init__(
        self,
        config: FeedConfig,
        store: ObjectStore,
        *,
        clock: Callable[[], str] = now_rfc3339,
    ) -> None:
        self._config = config
        self._store = store
        self._addressing = Addressing(config)
        self._document = FeedDocument(
            config,
            self._addressing,
            EntryBuilder(self._addressing),
            clock=clock,
        )
        self._inboxes_created: int = 0

    @property
    def inboxes_created(self) -> int:
        return self._inboxes_created

    def validate_name(self, name: str | None) -> str:
        if name is None or is_blank(name):
            raise InboxValidationError("Please provide the newsletter name.")
        if len(name) > self._config.name_maximum_size:
            raise InboxValidationError("Newsletter name is too long.")
        return name

    async def create_inbox(self, name: str | None, *, token: str | None = None) -> InboxCreated:
        """Validate *name*, render a fresh feed and store it.

        Raises :class:`InboxValidationError` before touching the store.
        Store failures propagate as :class:`letterfeed.errors.StoreError`.
        """
        name = self.validate_name(name)
        token = token or generate_token()
        feed = self._document.create(name, token)
        await self._store.put(self._addressing.store_key(token), feed)

        self._inboxes_created += 1
        logger.info("inbox_created", token=token, name=name)
        return InboxCreated(
            token=token,
            name=name,
            email=self._addressing.email(token),
            feed_url=self._addressing.feed_url(token),
        )

    async def read_feed(self, token: str) -> bytes:
        """Return the stored feed bytes verbatim."""
        if not is_valid_token(token):
            raise FeedNotFoundError(token)
        return await self._store.get(self._addressing.store_key(token))
