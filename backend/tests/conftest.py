"""Shared fixtures and raw-message builders."""

import base64
from email.message import EmailMessage

import pytest
from fastapi.testclient import TestClient

from app.store import Store, get_store


def make_raw_message(
    from_addr: str | None = "sender@example.com",
    to: str | None = "a@x.com, b@x.com",
    cc: str | None = None,
    bcc: str | None = None,
    reply_to: str | None = None,
    subject: str | None = "Raw subject",
    text: str | None = "Plain body",
    html: str | None = None,
    attachments: list[tuple[str, str, bytes]] | None = None,
) -> bytes:
    """Build a MIME message; attachments are (filename, content_type, bytes)."""
    msg = EmailMessage()
    if from_addr is not None:
        msg["From"] = from_addr
    if to is not None:
        msg["To"] = to
    if cc is not None:
        msg["Cc"] = cc
    if bcc is not None:
        msg["Bcc"] = bcc
    if reply_to is not None:
        msg["Reply-To"] = reply_to
    if subject is not None:
        msg["Subject"] = subject

    if text is not None:
        msg.set_content(text)
    if html is not None:
        if text is not None:
            msg.add_alternative(html, subtype="html")
        else:
            msg.set_content(html, subtype="html")

    for filename, content_type, content in attachments or []:
        maintype, subtype = content_type.split("/", 1)
        msg.add_attachment(content, maintype=maintype, subtype=subtype, filename=filename)

    return msg.as_bytes()


def encode_raw(raw: bytes) -> str:
    return base64.b64encode(raw).decode("ascii")


@pytest.fixture()
def store():
    return Store()


@pytest.fixture()
def client(store):
    """TestClient whose routers all see the per-test store."""
    from app.main import app

    app.dependency_overrides[get_store] = lambda: store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
