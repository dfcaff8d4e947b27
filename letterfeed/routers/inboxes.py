"""Inbox creation endpoint."""

from __future__ import annotations

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Form, HTTPException, status
from fastapi.responses import JSONResponse

from letterfeed.config import Settings
from letterfeed.deps import get_inboxes, get_settings
from letterfeed.errors import InboxValidationError, StoreError
from letterfeed.inboxes import InboxService
from letterfeed.models import InboxCreated
from letterfeed.tokens import generate_token

logger = structlog.get_logger()

router = APIRouter(tags=["inboxes"])


@router.post("/", response_model=InboxCreated, status_code=status.HTTP_201_CREATED)
async def create_inbox(
    inboxes: Annotated[InboxService, Depends(get_inboxes)],
    settings: Annotated[Settings, Depends(get_settings)],
    name: Annotated[str | None, Form()] = None,
):
    """Create a mailbox and its feed for the newsletter *name*."""
    token = generate_token()
    try:
        return await inboxes.create_inbox(name, token=token)
    except InboxValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except StoreError:
        logger.exception("inbox_creation_failed", token=token, name=name)
        return JSONResponse(
            {
                "detail": (
                    f"Error creating “{name}” inbox! Please contact the system administrator "
                    f"at {settings.feed.administrator_email} with token “{token}”."
                ),
                "token": token,
            },
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
