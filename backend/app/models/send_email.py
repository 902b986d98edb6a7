"""
Pydantic models for the SendEmail v2 request body.

These models are the request schema: field names mirror the AWS SES v2
JSON wire format (PascalCase) so a body produced by the AWS SDK validates
as-is. Only structure is checked here; semantic rules such as "Simple
content needs a subject" are enforced later by the email builders.

Unknown fields are ignored (model_config extra="ignore") so newer SDK
versions keep working.
"""

from typing import Optional
from pydantic import BaseModel


class _SesModel(BaseModel):
    model_config = {"extra": "ignore"}


# ---------------------------------------------------------------------------
# Content variants
# ---------------------------------------------------------------------------

class ContentPart(_SesModel):
    """A Subject/Html/Text block. Data is required whenever the block is sent."""
    Data: str
    Charset: Optional[str] = None


class SimpleBody(_SesModel):
    Html: Optional[ContentPart] = None
    Text: Optional[ContentPart] = None


class SimpleContent(_SesModel):
    Body: SimpleBody
    Subject: ContentPart


class RawContent(_SesModel):
    Data: Optional[str] = None    # base64-encoded MIME message


class TemplateReference(_SesModel):
    TemplateName: Optional[str] = None
    TemplateArn: Optional[str] = None
    TemplateData: Optional[str] = None    # JSON object, as a string


class EmailContent(_SesModel):
    Simple: Optional[SimpleContent] = None
    Raw: Optional[RawContent] = None
    Template: Optional[TemplateReference] = None


# ---------------------------------------------------------------------------
# Envelope
# ---------------------------------------------------------------------------

class EmailDestination(_SesModel):
    ToAddresses: list[str] = []
    CcAddresses: list[str] = []
    BccAddresses: list[str] = []


class EmailTag(_SesModel):
    Name: Optional[str] = None
    Value: Optional[str] = None


class ListManagement(_SesModel):
    ContactListName: Optional[str] = None
    TopicName: Optional[str] = None


class SendEmailRequest(_SesModel):
    """
    SendEmail v2 request.

    ConfigurationSetName, EmailTags, the feedback forwarding fields,
    FromEmailAddressIdentityArn and ListManagementOptions are accepted but
    have no effect on the stored email. Source is the legacy v1 sender field,
    only consulted as a fallback sender for raw messages.
    """
    Content: EmailContent
    FromEmailAddress: Optional[str] = None
    ReplyToAddresses: Optional[list[str]] = None
    Destination: Optional[EmailDestination] = None
    Source: Optional[str] = None

    ConfigurationSetName: Optional[str] = None
    EmailTags: Optional[list[EmailTag]] = None
    FeedbackForwardingEmailAddress: Optional[str] = None
    FeedbackForwardingEmailAddressIdentityArn: Optional[str] = None
    FromEmailAddressIdentityArn: Optional[str] = None
    ListManagementOptions: Optional[ListManagement] = None


class SendEmailResponse(BaseModel):
    MessageId: str
