"""Data models shared by the ingestion and creation flows."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ContentType(str, Enum):
    HTML = "html"
    TEXT = "text"


class InboundEmail(BaseModel):
    """Webhook payload posted by the mail-to-webhook provider.

    Uses ``Field(alias="from")`` because ``"from"`` is a Python reserved word.
    ``populate_by_name=True`` allows construction via either key.  Every
    field is optional so that malformed payloads reach the router and are
    discarded there instead of failing validation.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    to: str = ""
    from_address: str = Field(default="", alias="from")
    subject: str = ""
    text: str | None = None
    html: str | None = None


class EntryData(BaseModel):
    """Fields of one Atom entry, before rendering."""

    model_config = ConfigDict(frozen=True)

    title: str
    author: str
    content_type: ContentType
    content: str


class Accepted(BaseModel):
    """The email targets a mailbox of this service and carries a body."""

    model_config = ConfigDict(frozen=True)

    token: str
    entry: EntryData


class Discarded(BaseModel):
    """The email is dropped without touching the store."""

    model_config = ConfigDict(frozen=True)

    reason: str
    token: str | None = None


class IngestionStatus(str, Enum):
    ACCEPTED = "accepted"
    DISCARDED = "discarded"
    FAILED = "failed"


class IngestionOutcome(BaseModel):
    status: IngestionStatus
    token: str | None = None
    reason: str | None = None


class InboxCreated(BaseModel):
    token: str
    name: str
    email: str
    feed_url: str
