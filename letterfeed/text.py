"""Small text helpers shared by the feed renderers."""

from __future__ import annotations

import html
import re
from datetime import datetime, timezone

# Characters XML 1.0 does not allow anywhere in a document, even as entities.
_XML_ILLEGAL_RE = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")


def is_blank(value: str | None) -> bool:
    """True for ``None``, the empty string and whitespace-only strings."""
    return value is None or not value.strip()


def escape(value: str) -> str:
    """Escape text for use inside XML element content and attribute values.

    Characters XML cannot represent are replaced with U+FFFD.
    """
    return html.escape(_XML_ILLEGAL_RE.sub("\ufffd", value), quote=True)


def now_rfc3339() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")
