"""ReportPipeline: orchestrates fetching, aggregation, rendering, and delivery."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from worklog_app.analytics.aggregations.account import aggregate, entries_to_records
from worklog_app.visual.report import Report, ReportKind, render

from .config import ReportSettings
from .dates import DateRange, current_month_range
from .errors import ConfigurationError, DeliveryError
from .fetcher import WorklogFetcher
from .jira_client import JiraAPI
from .models import FetchResult, IssueTrackerClient, Notifier
from .notifier import MailgunNotifier

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class DeliveryResult:
    report: Report
    recipient: str
    skipped: int = 0


class ReportPipeline:
    def __init__(
        self,
        client: IssueTrackerClient,
        settings: ReportSettings,
        notifier: Notifier | None = None,
    ):
        self.client = client
        self.settings = settings
        self.notifier = notifier

    @classmethod
    def from_settings(cls, settings: ReportSettings) -> ReportPipeline:
        """Wire the Jira client and, when configured, the Mailgun notifier."""
        api = JiraAPI(settings.jira_server, settings.jira_email, settings.jira_api_token)
        notifier = None
        if settings.mailgun_domain and settings.mailgun_api_key:
            notifier = MailgunNotifier(settings.mailgun_domain, settings.mailgun_api_key)
        return cls(api, settings, notifier)

    def fetch(self, date_range: DateRange) -> FetchResult:
        return WorklogFetcher(self.client).fetch(self.settings.account_ids, date_range)

    def build_report(self, date_range: DateRange, monthly: bool = False) -> Report:
        return self.preview(date_range, monthly)[0]

    def preview(self, date_range: DateRange, monthly: bool = False) -> tuple[Report, FetchResult]:
        """Render the report and keep the fetch result (entries, skips) alongside."""
        result = self.fetch(date_range)
        for skip in result.skipped:
            logger.info("Skipped %s for %s: %s", skip.unit, skip.key, skip.reason)
        aggregates = aggregate(result.entries, [a.display_name for a in result.accounts])
        kind = ReportKind.for_range(date_range, monthly=monthly)
        report = render(aggregates, date_range, kind, has_entries=bool(result.entries))
        return report, result

    def report_data(self, date_range: DateRange | None = None) -> list[dict[str, Any]]:
        """Entries for ``date_range`` (default: current UTC month) as JSON-ready rows."""
        date_range = date_range or current_month_range()
        return entries_to_records(self.fetch(date_range).entries)

    def send_report(self, date_range: DateRange, monthly: bool = False) -> DeliveryResult:
        """Build the report and hand it to the notifier.

        Single-day reports go to the daily recipient, everything else to the
        regular recipient.

        Raises
        ------
        ConfigurationError
            If no notifier, sender, or recipient is configured.
        DeliveryError
            If the notifier reports a failure.
        """
        if self.notifier is None:
            raise ConfigurationError("No notifier configured.")
        recipient = self.settings.recipient_for(date_range.is_single_day)
        if not (recipient and self.settings.email_from):
            raise ConfigurationError("EMAIL_FROM and a recipient (EMAIL_TO / DAILY_EMAIL_TO) are required.")

        report, result = self.preview(date_range, monthly)
        sent = self.notifier.send(self.settings.email_from, recipient, report.subject, report.html_body)
        if not sent:
            raise DeliveryError(f"Failed to deliver '{report.subject}' to {recipient}")
        logger.info("Delivered %s report '%s' to %s", report.kind.value, report.subject, recipient)
        return DeliveryResult(report=report, recipient=recipient, skipped=len(result.skipped))
