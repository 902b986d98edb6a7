"""
SendEmail acceptance pipeline.

    request body → schema validation → content resolution → builder
                 → append to email store → MessageId

Content resolution checks the variants in priority order Simple → Raw →
Template; the schema does not forbid sending more than one, the first one
present wins.

Public API:
  validate_request(payload: dict) -> SendEmailRequest
  resolve_content(request: SendEmailRequest) -> ContentKind
  send_email(payload: dict, store: Store) -> str
"""

import logging
from enum import Enum

from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError

from app.errors import SchemaValidationFailed, UnsupportedContentKind
from app.models.send_email import SendEmailRequest
from app.models.stored_email import StoredEmail
from app.services.email_builder import (
    build_raw_email,
    build_simple_email,
    build_template_email,
)
from app.services.mime_decoder import decode_raw_message
from app.store import Store

logger = logging.getLogger(__name__)


class ContentKind(str, Enum):
    SIMPLE = "Simple"
    RAW = "Raw"
    TEMPLATE = "Template"


def _format_validation_errors(exc: ValidationError) -> str:
    """Render pydantic errors as 'Content.Simple.Subject: Field required; ...'."""
    parts = []
    for error in exc.errors():
        location = ".".join(str(p) for p in error["loc"]) or "body"
        parts.append(f"{location}: {error['msg']}")
    return "; ".join(parts)


def validate_request(payload: dict) -> SendEmailRequest:
    """
    Check a raw request body against the SendEmail schema.

    Raises:
        SchemaValidationFailed: with the failing field paths in the detail
    """
    try:
        return SendEmailRequest.model_validate(payload)
    except ValidationError as e:
        raise SchemaValidationFailed(
            f"Schema validation failed ({_format_validation_errors(e)})"
        ) from e


def resolve_content(request: SendEmailRequest) -> ContentKind:
    content = request.Content
    if content.Simple is not None:
        return ContentKind.SIMPLE
    if content.Raw is not None:
        return ContentKind.RAW
    if content.Template is not None:
        return ContentKind.TEMPLATE
    raise UnsupportedContentKind()


async def build_email(request: SendEmailRequest, store: Store) -> StoredEmail:
    """Dispatch to the builder for the request's content kind."""
    kind = resolve_content(request)

    if kind is ContentKind.SIMPLE:
        return build_simple_email(request)
    if kind is ContentKind.RAW:
        # MIME parsing of large attachments is CPU-bound; keep it off the event loop
        message = await run_in_threadpool(decode_raw_message, request.Content.Raw.Data)
        return build_raw_email(request, message)
    return build_template_email(request, store.templates)


async def send_email(payload: dict, store: Store) -> str:
    """
    Accept one SendEmail request and return the generated MessageId.

    Nothing is appended unless every check passes. Identical payloads sent
    twice produce two records with different MessageIds.

    Raises:
        SesError subclasses for every rejection (see app.errors)
    """
    request = validate_request(payload)
    email = await build_email(request, store)
    store.emails.append(email)

    logger.info(
        f"Accepted email {email.message_id} "
        f"({resolve_content(request).value}, {len(email.destination.to)} to-recipient(s))"
    )
    return email.message_id
