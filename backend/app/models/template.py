"""
Pydantic models for stored email templates and the template management API.

Models:
  TemplateContent          - Subject/Html/Text strings with {{name}} tokens
  EmailTemplate            - a template as held by the template store
  CreateEmailTemplateRequest / UpdateEmailTemplateRequest - request bodies
"""

from typing import Optional
from pydantic import BaseModel


class TemplateContent(BaseModel):
    model_config = {"extra": "ignore"}

    Subject: Optional[str] = None
    Html: Optional[str] = None
    Text: Optional[str] = None


class EmailTemplate(BaseModel):
    TemplateName: str
    TemplateContent: TemplateContent
    CreatedTimestamp: int


class CreateEmailTemplateRequest(BaseModel):
    model_config = {"extra": "ignore"}

    TemplateName: str
    TemplateContent: TemplateContent


class UpdateEmailTemplateRequest(BaseModel):
    model_config = {"extra": "ignore"}

    TemplateContent: TemplateContent
