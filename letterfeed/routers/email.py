"""Webhook receiving emails from the mail-to-webhook provider.

The endpoint always answers 200 so the provider never retries, whatever
happened to the email.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from letterfeed.deps import get_ingestion
from letterfeed.models import InboundEmail
from letterfeed.router import IngestionRouter

router = APIRouter(tags=["email"])


@router.post("/email")
async def receive_email(
    request: Request,
    ingestion: Annotated[IngestionRouter, Depends(get_ingestion)],
):
    form = await request.form()
    message = InboundEmail.model_validate({
        key: value for key, value in form.items() if isinstance(value, str)
    })
    outcome = await ingestion.deliver(message)
    return {"status": outcome.status.value}
