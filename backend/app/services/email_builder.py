"""
Email builders: turn a validated SendEmail request into a StoredEmail.

One builder per content variant:
  build_simple_email    - pre-rendered subject and body, copied verbatim
  build_raw_email       - fields taken from a decoded MIME message
  build_template_email  - stored template compiled with TemplateData

Each builder runs all of its precondition checks before constructing the
record, so a rejected request never produces a partial record.
"""

import logging
import random
import time

from app.errors import (
    MissingBody,
    MissingSender,
    MissingSubject,
    MissingTemplateName,
    TemplateNotFound,
)
from app.models.send_email import SendEmailRequest
from app.models.stored_email import EmailBody, EmailDestinationRecord, StoredEmail
from app.services.mime_decoder import ParsedMessage
from app.services.template_compiler import compile_template, parse_template_data
from app.store import TemplateStore

logger = logging.getLogger(__name__)

RAW_DEFAULT_SUBJECT = "(no subject)"

_MESSAGE_ID_MIN = 100_000_000
_MESSAGE_ID_MAX = 999_999_999


def generate_message_id() -> str:
    """
    Return an id of the form ses-<9 digits>.

    Uniqueness is best-effort only: ids are drawn at random and never checked
    against the store (roughly 1 in 900 million chance per pair to collide).
    """
    return f"ses-{random.randint(_MESSAGE_ID_MIN, _MESSAGE_ID_MAX)}"


def _now() -> int:
    return int(time.time())


def _request_destination(request: SendEmailRequest) -> EmailDestinationRecord:
    destination = request.Destination
    if destination is None:
        return EmailDestinationRecord()
    return EmailDestinationRecord(
        to=list(destination.ToAddresses),
        cc=list(destination.CcAddresses),
        bcc=list(destination.BccAddresses),
    )


# ---------------------------------------------------------------------------
# Simple
# ---------------------------------------------------------------------------

def build_simple_email(request: SendEmailRequest) -> StoredEmail:
    simple = request.Content.Simple
    html = simple.Body.Html.Data if simple.Body.Html is not None else None
    text = simple.Body.Text.Data if simple.Body.Text is not None else None

    if not html and not text:
        raise MissingBody()
    if not simple.Subject.Data:
        raise MissingSubject()
    if not request.FromEmailAddress:
        raise MissingSender()

    return StoredEmail(
        message_id=generate_message_id(),
        from_=request.FromEmailAddress,
        reply_to=list(request.ReplyToAddresses or []),
        destination=_request_destination(request),
        subject=simple.Subject.Data,
        body=EmailBody(html=html, text=text),
        attachments=[],
        at=_now(),
    )


# ---------------------------------------------------------------------------
# Raw
# ---------------------------------------------------------------------------

def build_raw_email(request: SendEmailRequest, message: ParsedMessage) -> StoredEmail:
    """
    Build a record from an already-decoded raw message.

    Only the plain-text body is kept; HTML bodies of raw messages are not
    extracted. The request's legacy Source field stands in for a missing
    From header.
    """
    return StoredEmail(
        message_id=generate_message_id(),
        from_=message.sender or request.Source or "",
        reply_to=[message.reply_to] if message.reply_to else [],
        destination=EmailDestinationRecord(
            to=message.to,
            cc=message.cc,
            bcc=message.bcc,
        ),
        subject=message.subject if message.subject is not None else RAW_DEFAULT_SUBJECT,
        body=EmailBody(text=message.text),
        attachments=message.attachments,
        at=_now(),
    )


# ---------------------------------------------------------------------------
# Template
# ---------------------------------------------------------------------------

def build_template_email(request: SendEmailRequest, templates: TemplateStore) -> StoredEmail:
    reference = request.Content.Template

    if not reference.TemplateName:
        raise MissingTemplateName()
    if not request.FromEmailAddress:
        raise MissingSender()

    template = templates.get(reference.TemplateName)
    if template is None:
        raise TemplateNotFound(reference.TemplateName)

    data = parse_template_data(reference.TemplateData)
    content = template.TemplateContent

    return StoredEmail(
        message_id=generate_message_id(),
        from_=request.FromEmailAddress,
        reply_to=list(request.ReplyToAddresses or []),
        destination=_request_destination(request),
        subject=compile_template(content.Subject, data) or "",
        body=EmailBody(
            html=compile_template(content.Html, data),
            text=compile_template(content.Text, data),
        ),
        attachments=[],
        at=_now(),
    )
