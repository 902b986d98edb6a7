"""
Canonical stored-email record.

All three SendEmail content variants (Simple, Raw, Template) converge to a
StoredEmail before it is appended to the email store. Python attributes are
snake_case; the JSON served by GET /store uses the camelCase keys clients of
the emulator read (messageId, replyTo, from, ...), so always dump with
by_alias=True.

Records are frozen: once appended they are never modified.
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class StoredAttachment(_CamelModel):
    """An attachment lifted out of a raw MIME message."""

    filename: Optional[str] = None
    content_type: str
    content_disposition: Optional[str] = None
    content_id: Optional[str] = None
    checksum: str           # md5 hex digest of the decoded bytes
    size: int
    content: str            # base64-encoded bytes


class EmailDestinationRecord(_CamelModel):
    to: list[str] = []
    cc: list[str] = []
    bcc: list[str] = []


class EmailBody(_CamelModel):
    html: Optional[str] = None
    text: Optional[str] = None


class StoredEmail(_CamelModel):
    message_id: str
    from_: str = Field(alias="from")
    reply_to: list[str] = []
    destination: EmailDestinationRecord
    subject: str
    body: EmailBody
    attachments: list[StoredAttachment] = []
    at: int                 # Unix timestamp (seconds) of acceptance
