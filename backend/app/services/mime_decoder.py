"""
Raw MIME message decoding for SendEmail Content.Raw.

Decodes the base64 blob, parses it with the standard library email package
(policy.default gives structured address headers) and lifts out the fields
the raw email builder needs.

Public API:
  decode_raw_message(data: str | None) -> ParsedMessage

Any failure (missing data, bad base64, unparseable headers) is raised as
MalformedRawMessage so the request is rejected cleanly instead of crashing
the handler.
"""

import base64
import binascii
import hashlib
import logging
from dataclasses import dataclass, field
from email import policy
from email.message import EmailMessage
from email.parser import BytesParser
from typing import Optional

from app.errors import MalformedRawMessage
from app.models.stored_email import StoredAttachment

logger = logging.getLogger(__name__)


@dataclass
class ParsedMessage:
    """
    Structured view of a raw MIME message.

    Attributes:
        sender: From header text, None when the message has no From header
        reply_to: Reply-To header text, None when absent
        to / cc / bcc: One entry per addressee, in header order
        subject: Subject header, None when absent
        text: First text/plain body part, None when absent
        attachments: Every attachment part, content base64-encoded
    """
    sender: Optional[str] = None
    reply_to: Optional[str] = None
    to: list[str] = field(default_factory=list)
    cc: list[str] = field(default_factory=list)
    bcc: list[str] = field(default_factory=list)
    subject: Optional[str] = None
    text: Optional[str] = None
    attachments: list[StoredAttachment] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Field extraction helpers
# ---------------------------------------------------------------------------

def _header_text(msg: EmailMessage, name: str) -> Optional[str]:
    value = msg.get(name)
    if value is None:
        return None
    return str(value)


def _addressees(msg: EmailMessage, name: str) -> list[str]:
    """
    Collect every addressee of an address header.

    A message may repeat a header (To: twice) and each instance may hold
    several addresses or groups; all of them are flattened in order. Empty
    addresses (e.g. an empty group) are dropped.
    """
    result: list[str] = []
    for header in msg.get_all(name, []):
        addresses = getattr(header, "addresses", None)
        if addresses is None:
            # Unstructured fallback - keep the raw header text
            text = str(header).strip()
            if text:
                result.append(text)
            continue
        for address in addresses:
            if address is None or not address.addr_spec:
                continue
            result.append(str(address))
    return result


def _text_body(msg: EmailMessage) -> Optional[str]:
    part = msg.get_body(preferencelist=("plain",))
    if part is None:
        return None
    try:
        return part.get_content()
    except (LookupError, UnicodeError) as e:
        logger.warning(f"Failed to decode text body with get_content(): {e}")
        payload = part.get_payload(decode=True) or b""
        return payload.decode("utf-8", errors="ignore")


def _is_attachment(part: EmailMessage) -> bool:
    if part.is_multipart():
        return False
    if part.is_attachment():
        return True
    # Inline parts that carry a filename (e.g. embedded images) count too
    return part.get_content_disposition() == "inline" and bool(part.get_filename())


def _attachments(msg: EmailMessage) -> list[StoredAttachment]:
    attachments: list[StoredAttachment] = []
    for part in msg.walk():
        if not _is_attachment(part):
            continue
        content = part.get_payload(decode=True) or b""
        content_id = part.get("Content-ID")
        attachments.append(
            StoredAttachment(
                filename=part.get_filename(),
                content_type=part.get_content_type(),
                content_disposition=part.get_content_disposition(),
                content_id=str(content_id) if content_id is not None else None,
                checksum=hashlib.md5(content, usedforsecurity=False).hexdigest(),
                size=len(content),
                content=base64.b64encode(content).decode("ascii"),
            )
        )
    return attachments


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def decode_raw_message(data: Optional[str]) -> ParsedMessage:
    """
    Decode a base64-encoded MIME message into a ParsedMessage.

    Args:
        data: Content.Raw.Data from the SendEmail request

    Raises:
        MalformedRawMessage: data is missing, is not base64, or the message
            headers/parts cannot be parsed
    """
    if not data:
        raise MalformedRawMessage("Raw content must have base64-encoded Data.")

    try:
        raw_bytes = base64.b64decode(data)
    except (binascii.Error, ValueError) as e:
        logger.warning(f"Raw content is not valid base64: {e}")
        raise MalformedRawMessage("Raw content Data is not valid base64.") from e

    if not raw_bytes.strip():
        raise MalformedRawMessage("Raw content Data decodes to an empty message.")

    try:
        msg = BytesParser(policy=policy.default).parsebytes(raw_bytes)
        return ParsedMessage(
            sender=_header_text(msg, "From"),
            reply_to=_header_text(msg, "Reply-To"),
            to=_addressees(msg, "To"),
            cc=_addressees(msg, "Cc"),
            bcc=_addressees(msg, "Bcc"),
            subject=_header_text(msg, "Subject"),
            text=_text_body(msg),
            attachments=_attachments(msg),
        )
    except Exception as e:
        logger.warning(f"Failed to parse raw MIME message: {e}")
        raise MalformedRawMessage(f"Failed to parse raw message: {e}") from e
