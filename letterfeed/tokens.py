"""Mailbox tokens.

A token is at the same time the object-store key, the local part of the
mailbox address and a path segment of the feed URL, so it is a bearer
secret.  Uniqueness is not checked: 20 characters over ``[a-z0-9]`` make
collisions negligible.
"""

from __future__ import annotations

import re
import secrets

TOKEN_LENGTH = 20

_TOKEN_RE = re.compile(rf"[a-z0-9]{{{TOKEN_LENGTH}}}")


def generate_token() -> str:
    """Return a fresh random token of ``TOKEN_LENGTH`` lowercase characters."""
    while True:
        candidate = secrets.token_urlsafe(30).replace("-", "").replace("_", "").lower()
        if len(candidate) >= TOKEN_LENGTH:
            return candidate[:TOKEN_LENGTH]


def is_valid_token(value: str) -> bool:
    return _TOKEN_RE.fullmatch(value) is not None
