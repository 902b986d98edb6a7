"""
In-memory stores for the SES v2 emulator.

Replaces a real database: sent emails and email templates live in process
memory for the lifetime of the server. Both stores are lock-guarded so
concurrent requests never interleave mid-record.

Environment variables
---------------------
SES_MAX_STORED_EMAILS   Retention cap for sent emails (default: 0 = unlimited).
                        When positive, the oldest emails are dropped once the
                        cap is exceeded.
"""

import logging
import os
import threading
from typing import Optional

from dotenv import load_dotenv

from app.models.stored_email import StoredEmail
from app.models.template import EmailTemplate

load_dotenv()

logger = logging.getLogger(__name__)


def _max_stored_emails() -> int:
    raw = os.getenv("SES_MAX_STORED_EMAILS", "0").strip()
    try:
        return max(int(raw), 0)
    except ValueError:
        logger.warning(f"Ignoring invalid SES_MAX_STORED_EMAILS value {raw!r}")
        return 0


class EmailStore:
    """Append-only, insertion-ordered log of sent emails."""

    def __init__(self, max_emails: int = 0):
        self._emails: list[StoredEmail] = []
        self._lock = threading.Lock()
        self.max_emails = max_emails

    def append(self, email: StoredEmail) -> None:
        with self._lock:
            self._emails.append(email)
            if self.max_emails and len(self._emails) > self.max_emails:
                dropped = len(self._emails) - self.max_emails
                del self._emails[:dropped]

    def list(self, since: Optional[int] = None) -> list[StoredEmail]:
        """Return a snapshot of stored emails, optionally only those sent at or after `since`."""
        with self._lock:
            emails = list(self._emails)
        if since is None:
            return emails
        return [e for e in emails if e.at >= since]

    def clear(self) -> None:
        with self._lock:
            self._emails.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._emails)


class TemplateStore:
    """Email templates keyed by TemplateName."""

    def __init__(self):
        self._templates: dict[str, EmailTemplate] = {}
        self._lock = threading.Lock()

    def get(self, name: str) -> Optional[EmailTemplate]:
        with self._lock:
            return self._templates.get(name)

    def put(self, template: EmailTemplate) -> None:
        with self._lock:
            self._templates[template.TemplateName] = template

    def delete(self, name: str) -> bool:
        """Remove a template. Returns False when no template had that name."""
        with self._lock:
            return self._templates.pop(name, None) is not None

    def list(self) -> list[EmailTemplate]:
        with self._lock:
            return list(self._templates.values())

    def clear(self) -> None:
        with self._lock:
            self._templates.clear()


class Store:
    """Bundle of all emulator state, injected into routers via get_store()."""

    def __init__(self, max_emails: int = 0):
        self.emails = EmailStore(max_emails=max_emails)
        self.templates = TemplateStore()


store = Store(max_emails=_max_stored_emails())


def get_store() -> Store:
    """FastAPI dependency returning the process-wide store (override in tests)."""
    return store
