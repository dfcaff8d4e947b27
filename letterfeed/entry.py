"""Render Atom ``<entry>`` fragments.

Every fragment starts with a standalone ``<updated>`` anchor.  The anchor
of the newest entry is where the next entry is inserted (see
:meth:`letterfeed.feed.FeedDocument.insert`).
"""

from __future__ import annotations

from .addressing import Addressing
from .models import ContentType
from .text import escape


class EntryBuilder:
    """Render one entry from message fields.

    Title, author and content are always escaped.  HTML content carries
    ``type="html"``, so feed readers unescape it and render the markup.
    """

    def __init__(self, addressing: Addressing) -> None:
        self._addressing = addressing

    def build(
        self,
        token: str,
        title: str,
        author: str,
        updated: str,
        content_type: ContentType,
        content: str,
    ) -> str:
        type_attribute = ' type="html"' if content_type is ContentType.HTML else ""
        return (
            f"{self.anchor(updated)}\n"
            "<entry>\n"
            f"  <id>{escape(self._addressing.atom_id(token))}</id>\n"
            f"  <title>{escape(title)}</title>\n"
            f"  <author><name>{escape(author)}</name></author>\n"
            f"  <updated>{escape(updated)}</updated>\n"
            f"  <content{type_attribute}>{escape(content)}</content>\n"
            "</entry>"
        )

    @staticmethod
    def anchor(updated: str) -> str:
        return f"<updated>{escape(updated)}</updated>"
