"""
Store inspection router.

Lets tests and developers see what the emulator has "sent".

Endpoints:
  GET  /store          - list stored emails (optional ?since=<unix seconds>)
  POST /clear-store    - drop all stored emails
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends

from app.store import Store, get_store

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/store")
async def list_stored_emails(
    since: Optional[int] = None,
    store: Store = Depends(get_store),
) -> dict:
    emails = store.emails.list(since=since)
    return {"emails": [e.model_dump(by_alias=True) for e in emails]}


@router.post("/clear-store")
async def clear_store(store: Store = Depends(get_store)) -> dict:
    store.emails.clear()
    logger.info("Email store cleared")
    return {"message": "Store cleared"}
