"""HTML rendering of per-account worklog summaries for e-mail delivery."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from enum import Enum

from worklog_app.analytics.aggregations.account import AccountAggregate
from worklog_app.core.config import MONTH_ABBREVIATIONS, NO_WORKLOGS_MESSAGE
from worklog_app.core.dates import DateRange, parse_day

TABLE_OPEN = '<table border="1" cellpadding="6" cellspacing="0" style="border-collapse: collapse;">'
TABLE_HEADER = (
    "      <tr>\n"
    "        <th>Date</th>\n"
    "        <th>Task/Ticket ID</th>\n"
    "        <th>Description</th>\n"
    "        <th>Hours Spent</th>\n"
    "      </tr>\n"
)


class ReportKind(str, Enum):
    DAILY_SINGLE = "daily-single"
    DAILY_RANGE = "daily-range"
    MONTHLY = "monthly"

    @classmethod
    def for_range(cls, date_range: DateRange, monthly: bool = False) -> ReportKind:
        if monthly:
            return cls.MONTHLY
        return cls.DAILY_SINGLE if date_range.is_single_day else cls.DAILY_RANGE


@dataclass(slots=True, frozen=True)
class Report:
    subject: str
    html_body: str
    kind: ReportKind


def format_date_mmddyyyy(day: date | str) -> str:
    d = parse_day(day)
    return f"{d.month:02d}/{d.day:02d}/{d.year}"


def format_month(day: date | str) -> str:
    d = parse_day(day)
    return f"{MONTH_ABBREVIATIONS[d.month - 1]} {d.year}"


def render_title(date_range: DateRange, kind: ReportKind) -> tuple[str, str]:
    """Return ``(header_html, subject)`` for the report kind."""
    if kind is ReportKind.MONTHLY:
        label = format_month(date_range.from_date)
        return (
            f"<h2>📝 Monthly Worklog Report – {label}</h2>",
            f"Monthly Worklog Report – {label}",
        )
    if kind is ReportKind.DAILY_SINGLE:
        label = format_date_mmddyyyy(date_range.from_date)
        return f"<h2>📝 Worklog report for {label}</h2>", f"📝 Worklog report for {label}"
    span = f"{format_date_mmddyyyy(date_range.from_date)} → {format_date_mmddyyyy(date_range.to_date)}"
    return f"<h2>📊 Weekly Worklog ({span})</h2>", f"Weekly Worklog ({span})"


def _split_line(line: str) -> tuple[str, str, str, str]:
    # Descriptions may themselves contain " | "
    issue_key, day, spent, description = line.split(" | ", 3)
    return issue_key, day, spent, description


def render_account(aggregate: AccountAggregate) -> str:
    heading = f"<h3>Summary of Hours - {aggregate.account_name}: {aggregate.total}</h3>"
    if not aggregate.lines:
        return f"\n      {heading}\n    "

    rows = sorted((_split_line(line) for line in aggregate.lines), key=lambda parts: parse_day(parts[1]))
    body = "".join(
        "<tr>\n"
        f"      <td>{format_date_mmddyyyy(day)}</td>\n"
        f"      <td>{issue_key}</td>\n"
        f"      <td>{description}</td>\n"
        f"      <td>{spent}</td>\n"
        "    </tr>"
        for issue_key, day, spent, description in rows
    )
    return f"\n    {heading}\n    {TABLE_OPEN}\n{TABLE_HEADER}      {body}\n    </table><br/>\n  "


def render(
    aggregates: Mapping[str, AccountAggregate],
    date_range: DateRange,
    kind: ReportKind,
    *,
    has_entries: bool | None = None,
) -> Report:
    """Render the full report.

    ``has_entries`` defaults to whether any aggregate carries a line; the
    explanatory paragraph is appended when there are none.
    """
    header, subject = render_title(date_range, kind)
    parts = [header]
    parts.extend(render_account(agg) for agg in aggregates.values())
    if has_entries is None:
        has_entries = any(agg.lines for agg in aggregates.values())
    if not has_entries:
        parts.append(f"<p>{NO_WORKLOGS_MESSAGE}</p>")
    return Report(subject=subject, html_body="".join(parts), kind=kind)
