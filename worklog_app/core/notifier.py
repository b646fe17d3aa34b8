"""Mail delivery through the Mailgun HTTP API."""

from __future__ import annotations

import logging

import requests

from .config import MAILGUN_API_BASE, REQUEST_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)


class MailgunNotifier:
    def __init__(self, domain: str, api_key: str, *, session: requests.Session | None = None):
        self.domain = domain
        self.api_key = api_key
        self.session = session or requests.Session()

    @property
    def url(self) -> str:
        return f"{MAILGUN_API_BASE}/{self.domain}/messages"

    def send(self, sender: str, recipient: str, subject: str, html_body: str) -> bool:
        """Post one HTML message. Returns ``True`` when Mailgun accepted it."""
        data = {"from": sender, "to": recipient, "subject": subject, "html": html_body}
        try:
            resp = self.session.post(
                self.url,
                auth=("api", self.api_key),
                data=data,
                timeout=REQUEST_TIMEOUT_SECONDS,
            )
        except requests.RequestException as exc:
            logger.error("Error sending email to %s: %s", recipient, exc)
            return False
        if not resp.ok:
            logger.error("Error sending email to %s: %s %s", recipient, resp.status_code, resp.text[:200])
            return False
        logger.info("Email '%s' sent to %s", subject, recipient)
        return True
