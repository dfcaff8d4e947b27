"""Feed read endpoint polled by feed readers."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status

from letterfeed.deps import get_inboxes
from letterfeed.errors import FeedNotFoundError
from letterfeed.inboxes import InboxService

router = APIRouter(prefix="/feeds", tags=["feeds"])


@router.get("/{token}.xml")
async def read_feed(
    token: str,
    inboxes: Annotated[InboxService, Depends(get_inboxes)],
):
    """Return the stored Atom document verbatim."""
    try:
        feed = await inboxes.read_feed(token)
    except FeedNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Feed not found")
    return Response(content=feed, media_type="text/xml")
