"""Serialized Atom feed documents.

A feed exists only as its serialized bytes.  New entries are spliced in
place of the ``<updated>`` anchor that precedes the newest entry, so the
document is never parsed.
"""

from __future__ import annotations

from collections.abc import Callable

from .addressing import Addressing
from .config import FeedConfig
from .entry import EntryBuilder
from .errors import FeedDocumentError
from .models import ContentType
from .text import escape, now_rfc3339
from .tokens import generate_token

ATOM_NAMESPACE = "http://www.w3.org/2005/Atom"

UPDATED_OPEN = b"<updated>"
UPDATED_CLOSE = b"</updated>"


class FeedDocument:
    """Create feed documents and insert entry fragments into them."""

    def __init__(
        self,
        config: FeedConfig,
        addressing: Addressing,
        builder: EntryBuilder,
        *,
        clock: Callable[[], str] = now_rfc3339,
    ) -> None:
        self._config = config
        self._addressing = addressing
        self._builder = builder
        self._clock = clock

    def create(self, name: str, token: str) -> bytes:
        """Render a new feed holding a single "inbox created" entry."""
        entry = self._builder.build(
            token=generate_token(),
            title=f"“{name}” inbox created",
            author=self._config.name,
            updated=self._clock(),
            content_type=ContentType.HTML,
            content=self.instructions(token),
        )
        email = self._addressing.email(token)
        document = (
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            f'<feed xmlns="{ATOM_NAMESPACE}">\n'
            f'<link rel="self" type="application/atom+xml" href="{escape(self._addressing.feed_url(token))}"/>\n'
            f'<link rel="alternate" type="text/html" href="{escape(self._addressing.site_url())}"/>\n'
            f"<title>{escape(name)}</title>\n"
            f"<subtitle>{escape(self._config.name)} inbox “{escape(email)}”.</subtitle>\n"
            f"<id>{escape(self._addressing.atom_id(token))}</id>\n"
            f"{entry}\n"
            "</feed>\n"
        )
        return document.encode("utf-8")

    def instructions(self, token: str) -> str:
        """HTML telling the user where to subscribe and where to read."""
        email = escape(self._addressing.email(token))
        feed_url = escape(self._addressing.feed_url(token))
        return (
            f'<p>Sign up for the newsletter with<br><a href="mailto:{email}" target="_blank">{email}</a></p>\n'
            f'<p>Subscribe to the Atom feed at<br><a href="{feed_url}" target="_blank">{feed_url}</a></p>\n'
            "<p><em>Don’t share these addresses!</em><br>They contain a security token<br>"
            "that other people could use to send you spam<br>"
            "and unsubscribe you from your newsletters.</p>\n"
            "<p><em>Enjoy your readings!</em></p>"
        )

    @staticmethod
    def insert(current: bytes, fragment: str) -> bytes:
        """Replace the first ``<updated>…</updated>`` span with *fragment*.

        The span is the anchor in front of the newest entry, so the
        fragment (which carries its own anchor) lands ahead of every
        existing entry.
        """
        start = current.find(UPDATED_OPEN)
        if start == -1:
            raise FeedDocumentError("Feed document has no <updated> anchor")
        close = current.find(UPDATED_CLOSE, start + len(UPDATED_OPEN))
        if close == -1:
            raise FeedDocumentError("Feed document has an unterminated <updated> anchor")
        end = close + len(UPDATED_CLOSE)
        return current[:start] + fragment.encode("utf-8") + current[end:]
