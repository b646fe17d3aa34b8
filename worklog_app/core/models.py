"""Domain data models for accounts, worklogs, and the per-run fetch result."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Protocol


@dataclass(slots=True, frozen=True)
class Account:
    account_id: str
    display_name: str


@dataclass(slots=True, frozen=True)
class IssueRef:
    key: str
    summary: str | None


@dataclass(slots=True, frozen=True)
class WorklogRecord:
    """One worklog as listed for an issue, before any filtering."""

    author_id: str | None
    started: str | None
    time_spent_seconds: int
    comment_text: str | None


@dataclass(slots=True, frozen=True)
class WorklogEntry:
    """A worklog accepted for the report, attributed to one account."""

    issue_key: str
    date: date
    time_spent_seconds: int
    description: str
    account_name: str


@dataclass(slots=True, frozen=True)
class Skip:
    """A unit of work abandoned after a remote failure."""

    unit: str  # "display_name", "search" or "worklogs"
    key: str
    reason: str


@dataclass(slots=True)
class FetchResult:
    entries: list[WorklogEntry] = field(default_factory=list)
    accounts: list[Account] = field(default_factory=list)
    skipped: list[Skip] = field(default_factory=list)


class IssueTrackerClient(Protocol):
    def search_issues(self, author_id: str, from_date: date, to_date: date) -> list[IssueRef]: ...

    def list_worklogs(self, issue_key: str) -> list[WorklogRecord]: ...

    def resolve_display_name(self, account_id: str) -> str | None: ...


class Notifier(Protocol):
    def send(self, sender: str, recipient: str, subject: str, html_body: str) -> bool: ...
