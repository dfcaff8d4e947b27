"""IngestionRouter — route inbound emails to their feeds and merge them in."""

from __future__ import annotations

import asyncio
import email.utils
import weakref
from collections.abc import Callable

import structlog

from .addressing import Addressing
from .config import FeedConfig
from .entry import EntryBuilder
from .errors import FeedDocumentError, FeedNotFoundError, StoreError, TruncationError
from .feed import FeedDocument
from .models import (
    Accepted,
    ContentType,
    Discarded,
    EntryData,
    InboundEmail,
    IngestionOutcome,
    IngestionStatus,
)
from .store import ObjectStore
from .text import is_blank, now_rfc3339
from .tokens import generate_token, is_valid_token
from .truncation import truncate

logger = structlog.get_logger()


class IngestionRouter:
    """Validate inbound emails and merge accepted ones into their feeds.

    Each delivery is a read-modify-write of one store object.  Deliveries
    to the same token are serialized inside this process; deliveries
    handled by other processes can still overwrite each other.
    """

    def __init__(
        self,
        config: FeedConfig,
        store: ObjectStore,
        *,
        clock: Callable[[], str] = now_rfc3339,
    ) -> None:
        self._config = config
        self._store = store
        self._clock = clock
        self._addressing = Addressing(config)
        self._builder = EntryBuilder(self._addressing)
        self._document = FeedDocument(config, self._addressing, self._builder, clock=clock)
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = weakref.WeakValueDictionary()

        self._emails_accepted: int = 0
        self._emails_discarded: int = 0
        self._emails_failed: int = 0

    # ------------------------------------------------------------------
    # Public properties (used by health checks)
    # ------------------------------------------------------------------

    @property
    def emails_accepted(self) -> int:
        return self._emails_accepted

    @property
    def emails_discarded(self) -> int:
        return self._emails_discarded

    @property
    def emails_failed(self) -> int:
        return self._emails_failed

    # ------------------------------------------------------------------
    # Routing
    # ------------------------------------------------------------------

    def route(
        self,
        to_address: str,
        from_address: str,
        subject: str,
        text: str | None,
        html: str | None,
    ) -> Accepted | Discarded:
        """Decide whether an email belongs to one of our mailboxes."""
        local_part = self._match_local_part(to_address)
        if local_part is None:
            return Discarded(reason="address_mismatch")

        token = local_part.lower()
        if not is_valid_token(token):
            return Discarded(reason="invalid_token")

        if not is_blank(html):
            content_type, content = ContentType.HTML, html
        elif text is not None:
            content_type, content = ContentType.TEXT, text
        else:
            return Discarded(reason="empty_body", token=token)

        entry = EntryData(
            title=subject,
            author=from_address,
            content_type=content_type,
            content=content,
        )
        return Accepted(token=token, entry=entry)

    def _match_local_part(self, to_address: str) -> str | None:
        """Local part of the first recipient under the email domain."""
        domain = self._config.email_domain.lower()
        for _, addr in email.utils.getaddresses([to_address]):
            if addr.count("@") != 1:
                continue
            local_part, _, addr_domain = addr.partition("@")
            if local_part and addr_domain.lower() == domain:
                return local_part
        return None

    # ------------------------------------------------------------------
    # Delivery
    # ------------------------------------------------------------------

    async def deliver(self, message: InboundEmail) -> IngestionOutcome:
        """Route *message* and, when accepted, prepend it to its feed."""
        decision = self.route(
            message.to,
            message.from_address,
            message.subject,
            message.text,
            message.html,
        )
        if isinstance(decision, Discarded):
            return self._discard(message, decision.reason, decision.token)

        token = decision.token
        lock = self._locks.get(token)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[token] = lock

        try:
            async with lock:
                await self._merge(token, decision.entry)
        except FeedNotFoundError:
            return self._discard(message, "unknown_feed", token)
        except (StoreError, FeedDocumentError, TruncationError):
            logger.exception(
                "email_ingestion_failed",
                token=token,
                from_address=message.from_address,
            )
            self._emails_failed += 1
            return IngestionOutcome(status=IngestionStatus.FAILED, token=token, reason="ingestion_failed")

        logger.info("email_received", token=token, from_address=message.from_address, to=message.to)
        self._emails_accepted += 1
        return IngestionOutcome(status=IngestionStatus.ACCEPTED, token=token)

    async def _merge(self, token: str, entry: EntryData) -> None:
        key = self._addressing.store_key(token)
        current = await self._store.get(key)
        fragment = self._builder.build(
            token=generate_token(),
            title=entry.title,
            author=entry.author,
            updated=self._clock(),
            content_type=entry.content_type,
            content=entry.content,
        )
        updated = self._document.insert(current, fragment)
        updated = truncate(updated, self._config.maximum_size)
        await self._store.put(key, updated)

    def _discard(self, message: InboundEmail, reason: str, token: str | None) -> IngestionOutcome:
        logger.info(
            "email_discarded",
            reason=reason,
            token=token,
            from_address=message.from_address,
            to=message.to,
        )
        self._emails_discarded += 1
        return IngestionOutcome(status=IngestionStatus.DISCARDED, token=token, reason=reason)
