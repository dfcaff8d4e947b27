"""FastAPI dependency-injection helpers for the feed services."""

from __future__ import annotations

from fastapi import Request

from letterfeed.config import Settings
from letterfeed.inboxes import InboxService
from letterfeed.router import IngestionRouter


def get_inboxes(request: Request) -> InboxService:
    return request.app.state.inboxes


def get_ingestion(request: Request) -> IngestionRouter:
    return request.app.state.ingestion


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
