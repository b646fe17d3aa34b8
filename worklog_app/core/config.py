"""Central configuration, constants, and the settings object for report runs."""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from .errors import ConfigurationError

# =============================================================================
# Jira Connection Settings
# =============================================================================
SEARCH_PAGE_SIZE: int = 100  # Issues per enhanced-search page
WORKLOG_PAGE_SIZE: int = 1000  # Worklogs per /issue/{key}/worklog page
SEARCH_FIELDS: Sequence[str] = ("key", "summary")

# =============================================================================
# Mail Delivery Settings
# =============================================================================
MAILGUN_API_BASE = "https://api.mailgun.net/v3"
REQUEST_TIMEOUT_SECONDS: float = 30.0

# =============================================================================
# Report Text
# =============================================================================
NO_COMMENT_PLACEHOLDER = "No comment provided"
NO_WORKLOGS_MESSAGE = "No worklogs found for the specified date range and accounts."

MONTH_ABBREVIATIONS: Sequence[str] = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)


def parse_account_ids(raw: Any) -> list[str]:
    """Parse the configured account ids.

    Accepts either a JSON array string (``'["id-1", "id-2"]'``) or an already
    decoded sequence of strings. Blank entries, non-array payloads and empty
    lists are rejected since they point at misconfiguration rather than at a
    quiet day.

    Raises
    ------
    ConfigurationError
        If ``raw`` cannot be turned into a non-empty list of account ids.
    """
    if raw is None:
        raise ConfigurationError("ACCOUNT_IDS is not configured.")
    if isinstance(raw, str):
        text = raw.strip()
        if not text:
            raise ConfigurationError("ACCOUNT_IDS is empty.")
        try:
            decoded = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"Failed to parse ACCOUNT_IDS JSON string: {exc}") from exc
    else:
        decoded = raw
    if isinstance(decoded, (str, bytes)) or not isinstance(decoded, Sequence):
        raise ConfigurationError(f"ACCOUNT_IDS must be a JSON array, got {type(decoded).__name__}.")
    ids: list[str] = []
    for item in decoded:
        if not isinstance(item, str) or not item.strip():
            raise ConfigurationError(f"ACCOUNT_IDS contains an invalid account id: {item!r}")
        ids.append(item.strip())
    if not ids:
        raise ConfigurationError("ACCOUNT_IDS is an empty array.")
    return ids


def normalize_server(server: str) -> str:
    """Return a base URL for a Jira site given either a URL or a bare domain."""
    text = (server or "").strip().rstrip("/")
    if not text:
        return text
    if not text.startswith(("http://", "https://")):
        text = f"https://{text}"
    return text


def lookup_secret(mapping: Mapping[str, Any], section: str, *names: str) -> Any:
    """First non-empty value for ``names``, preferring a ``[section]`` table over top-level keys."""
    nested = mapping.get(section) or {}
    for name in names:
        value = nested.get(name) if isinstance(nested, Mapping) else None
        if value:
            return value
        value = mapping.get(name)
        if value:
            return value
    return None


@dataclass(slots=True)
class ReportSettings:
    jira_server: str
    jira_email: str
    jira_api_token: str
    account_ids: list[str] = field(default_factory=list)
    email_from: str | None = None
    email_to: str | None = None
    daily_email_to: str | None = None
    mailgun_domain: str | None = None
    mailgun_api_key: str | None = None

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> ReportSettings:
        """Build settings from environment-style keys.

        Works with ``os.environ`` as well as Streamlit secrets, where values may
        also live in ``[jira]`` and ``[mailgun]`` sections.
        """
        server = lookup_secret(mapping, "jira", "JIRA_SERVER", "JIRA_DOMAIN")
        email = lookup_secret(mapping, "jira", "JIRA_EMAIL")
        token = lookup_secret(mapping, "jira", "JIRA_API_TOKEN", "JIRA_TOKEN")
        raw_ids = lookup_secret(mapping, "jira", "ACCOUNT_IDS")
        if not (server and email and token and raw_ids):
            raise ConfigurationError("Missing Jira credentials or ACCOUNT_IDS.")
        return cls(
            jira_server=normalize_server(str(server)),
            jira_email=str(email),
            jira_api_token=str(token),
            account_ids=parse_account_ids(raw_ids),
            email_from=lookup_secret(mapping, "mailgun", "EMAIL_FROM"),
            email_to=lookup_secret(mapping, "mailgun", "EMAIL_TO"),
            daily_email_to=lookup_secret(mapping, "mailgun", "DAILY_EMAIL_TO"),
            mailgun_domain=lookup_secret(mapping, "mailgun", "MAILGUN_DOMAIN_NAME", "MAILGUN_DOMAIN"),
            mailgun_api_key=lookup_secret(mapping, "mailgun", "MAILGUN_API_KEY"),
        )

    def recipient_for(self, single_day: bool) -> str | None:
        return self.daily_email_to if single_day else self.email_to
