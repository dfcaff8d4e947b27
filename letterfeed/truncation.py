"""Keep serialized feeds inside their byte budget.

Truncation evicts from the tail, where the oldest entries live.  The cut
always lands right after a closing tag that ends a top-level element, so
appending ``</feed>`` yields a well-formed document again.
"""

from __future__ import annotations

import structlog

from .errors import TruncationError

logger = structlog.get_logger()

ENTRY_CLOSE = b"</entry>"
UPDATED_CLOSE = b"</updated>"
FEED_CLOSE = b"\n</feed>"


def truncate(data: bytes, max_size: int) -> bytes:
    """Return *data* reduced to at most *max_size* bytes.

    Keeps every entry that fits completely.  When not even the newest entry
    fits, only the feed header and its ``<updated>`` anchor are kept.
    """
    if len(data) <= max_size:
        return data

    budget = max_size - len(FEED_CLOSE)
    if budget <= 0:
        raise TruncationError(f"Maximum size {max_size} cannot hold a feed document")
    window = data[:budget]

    end = window.rfind(ENTRY_CLOSE)
    if end != -1:
        kept = window[: end + len(ENTRY_CLOSE)]
    else:
        # Entry bodies are escaped, so the first </updated> is the anchor
        # in front of the newest entry.
        end = window.find(UPDATED_CLOSE)
        if end == -1:
            raise TruncationError(
                f"Maximum size {max_size} cannot hold the feed header and its anchor"
            )
        kept = window[: end + len(UPDATED_CLOSE)]

    result = kept + FEED_CLOSE
    logger.info(
        "feed_truncated",
        original_size=len(data),
        truncated_size=len(result),
        max_size=max_size,
        entries_kept=result.count(ENTRY_CLOSE),
    )
    return result
