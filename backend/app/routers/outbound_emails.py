"""
SendEmail v2 router.

Endpoints:
  POST /v2/email/outbound-emails   - accept one email, return its MessageId

Rejections are raised as app.errors.SesError subclasses and rendered by the
exception handler in app.main.
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends

from app.models.send_email import SendEmailResponse
from app.services.send_email import send_email
from app.store import Store, get_store

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/outbound-emails", response_model=SendEmailResponse)
async def send_outbound_email(
    payload: Any = Body(None),
    store: Store = Depends(get_store),
) -> SendEmailResponse:
    """
    SendEmail (SES v2).

    The body is taken untyped so that schema failures are reported in the
    SES error format rather than FastAPI's default 422 body.
    """
    message_id = await send_email(payload, store)
    return SendEmailResponse(MessageId=message_id)
