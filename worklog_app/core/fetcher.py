"""WorklogFetcher: query candidate issues per account and collect matching worklogs."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from .config import NO_COMMENT_PLACEHOLDER
from .dates import DateRange
from .errors import ConfigurationError
from .mappers import started_date
from .models import Account, FetchResult, IssueRef, IssueTrackerClient, Skip, WorklogEntry, WorklogRecord

logger = logging.getLogger(__name__)


def accept_worklog(record: WorklogRecord, account_id: str, date_range: DateRange) -> bool:
    """Re-check a listed worklog against the original search criteria.

    The issue worklog listing returns every worklog on the issue, so author and
    date must be verified for each record no matter what the search matched.
    """
    if not record.author_id or record.author_id != account_id:
        return False
    day = started_date(record.started)
    if day is None:
        return False
    return date_range.contains(day)


def describe(record: WorklogRecord, issue: IssueRef) -> str:
    return record.comment_text or issue.summary or NO_COMMENT_PLACEHOLDER


@dataclass(slots=True)
class UnitResult:
    """Outcome of one unit of work: entries on success, a skip otherwise."""

    entries: list[WorklogEntry] = field(default_factory=list)
    skipped: list[Skip] = field(default_factory=list)

    @classmethod
    def skip(cls, unit: str, key: str, reason: str) -> UnitResult:
        return cls(skipped=[Skip(unit=unit, key=key, reason=reason)])

    def extend(self, other: UnitResult) -> None:
        self.entries.extend(other.entries)
        self.skipped.extend(other.skipped)


class WorklogFetcher:
    def __init__(self, client: IssueTrackerClient):
        self.client = client

    def fetch(self, account_ids: Iterable[str], date_range: DateRange) -> FetchResult:
        """Collect worklog entries for every account, one remote call at a time."""
        ids = list(account_ids or [])
        if not ids:
            raise ConfigurationError("No account ids configured.")

        result = FetchResult()
        for account_id in ids:
            account, name_skip = self._resolve_account(account_id)
            result.accounts.append(account)
            if name_skip is not None:
                result.skipped.append(name_skip)
            outcome = self._fetch_account(account, date_range)
            result.entries.extend(outcome.entries)
            result.skipped.extend(outcome.skipped)

        # Global, stable sort on the calendar date only
        result.entries.sort(key=lambda e: e.date)
        logger.info(
            "Fetched %s worklog entries for %s accounts (%s to %s), %s units skipped",
            len(result.entries),
            len(ids),
            date_range.from_iso,
            date_range.to_iso,
            len(result.skipped),
        )
        return result

    def _resolve_account(self, account_id: str) -> tuple[Account, Skip | None]:
        try:
            name = self.client.resolve_display_name(account_id)
        except Exception as exc:
            logger.exception("Failed to get displayName for %s: %s", account_id, exc)
            return Account(account_id, account_id), Skip("display_name", account_id, str(exc))
        return Account(account_id, name or account_id), None

    def _fetch_account(self, account: Account, date_range: DateRange) -> UnitResult:
        try:
            issues = list(self.client.search_issues(account.account_id, date_range.from_date, date_range.to_date))
        except Exception as exc:
            logger.exception("Failed to search issues for %s: %s", account.account_id, exc)
            return UnitResult.skip("search", account.account_id, str(exc))

        outcome = UnitResult()
        for issue in issues:
            outcome.extend(self._fetch_issue(account, issue, date_range))
        return outcome

    def _fetch_issue(self, account: Account, issue: IssueRef, date_range: DateRange) -> UnitResult:
        try:
            records = self.client.list_worklogs(issue.key)
        except Exception as exc:
            logger.exception("Failed to fetch worklogs for issue %s: %s", issue.key, exc)
            return UnitResult.skip("worklogs", issue.key, str(exc))

        outcome = UnitResult()
        for record in records:
            if not accept_worklog(record, account.account_id, date_range):
                continue
            outcome.entries.append(
                WorklogEntry(
                    issue_key=issue.key,
                    date=started_date(record.started),
                    time_spent_seconds=record.time_spent_seconds,
                    description=describe(record, issue),
                    account_name=account.display_name,
                )
            )
        return outcome
