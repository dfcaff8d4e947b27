"""Formulas deriving addresses, URLs, ids and store keys from a token."""

from __future__ import annotations

from .config import FeedConfig


class Addressing:
    """Derive every public name of a mailbox from its token."""

    def __init__(self, config: FeedConfig) -> None:
        self._config = config

    def email(self, token: str) -> str:
        return f"{token}@{self._config.email_domain}"

    def feed_url(self, token: str) -> str:
        return f"https://{self._config.domain}/feeds/{token}.xml"

    def site_url(self) -> str:
        return f"https://{self._config.domain}/"

    def atom_id(self, token: str) -> str:
        return f"urn:{self._config.urn}:{token}"

    @staticmethod
    def store_key(token: str) -> str:
        return f"{token}.xml"
