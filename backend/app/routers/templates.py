"""
Email template management router (SES v2 template API subset).

Endpoints:
  POST   /v2/email/templates          - CreateEmailTemplate
  GET    /v2/email/templates          - ListEmailTemplates
  GET    /v2/email/templates/{name}   - GetEmailTemplate
  PUT    /v2/email/templates/{name}   - UpdateEmailTemplate
  DELETE /v2/email/templates/{name}   - DeleteEmailTemplate

Templates created here are what SendEmail Content.Template refers to by
TemplateName.
"""

import logging
import time

from fastapi import APIRouter, Depends

from app.errors import AlreadyExistsException, NotFoundException
from app.models.template import (
    CreateEmailTemplateRequest,
    EmailTemplate,
    UpdateEmailTemplateRequest,
)
from app.store import Store, get_store

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_template_or_404(store: Store, name: str) -> EmailTemplate:
    template = store.templates.get(name)
    if template is None:
        raise NotFoundException(f'Template "{name}" does not exist.')
    return template


@router.post("")
async def create_email_template(
    body: CreateEmailTemplateRequest,
    store: Store = Depends(get_store),
) -> dict:
    if store.templates.get(body.TemplateName) is not None:
        raise AlreadyExistsException(f'Template "{body.TemplateName}" already exists.')

    store.templates.put(
        EmailTemplate(
            TemplateName=body.TemplateName,
            TemplateContent=body.TemplateContent,
            CreatedTimestamp=int(time.time()),
        )
    )
    logger.info(f"Created email template {body.TemplateName!r}")
    return {}


@router.get("")
async def list_email_templates(store: Store = Depends(get_store)) -> dict:
    templates = sorted(store.templates.list(), key=lambda t: t.CreatedTimestamp)
    return {
        "TemplatesMetadata": [
            {"TemplateName": t.TemplateName, "CreatedTimestamp": t.CreatedTimestamp}
            for t in templates
        ]
    }


@router.get("/{name}")
async def get_email_template(name: str, store: Store = Depends(get_store)) -> dict:
    template = _get_template_or_404(store, name)
    return {
        "TemplateName": template.TemplateName,
        "TemplateContent": template.TemplateContent.model_dump(exclude_none=True),
    }


@router.put("/{name}")
async def update_email_template(
    name: str,
    body: UpdateEmailTemplateRequest,
    store: Store = Depends(get_store),
) -> dict:
    existing = _get_template_or_404(store, name)
    store.templates.put(
        existing.model_copy(update={"TemplateContent": body.TemplateContent})
    )
    logger.info(f"Updated email template {name!r}")
    return {}


@router.delete("/{name}")
async def delete_email_template(name: str, store: Store = Depends(get_store)) -> dict:
    if not store.templates.delete(name):
        raise NotFoundException(f'Template "{name}" does not exist.')
    logger.info(f"Deleted email template {name!r}")
    return {}
