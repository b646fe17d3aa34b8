"""Selection of the date range and report kind for scheduled and manual triggers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .dates import DateRange, previous_month_range, previous_week_range, utc_today, yesterday


@dataclass(slots=True, frozen=True)
class ScheduledReport:
    name: str  # "daily", "weekly" or "monthly"
    date_range: DateRange
    monthly: bool = False


def manual_report(name: str, now: datetime | None = None) -> ScheduledReport:
    if name == "daily":
        return ScheduledReport("daily", yesterday(now))
    if name == "weekly":
        return ScheduledReport("weekly", previous_week_range(now))
    if name == "monthly":
        return ScheduledReport("monthly", previous_month_range(now), monthly=True)
    raise ValueError(f"Unknown report name: {name!r}")


def scheduled_report(now: datetime | None = None) -> ScheduledReport:
    """Report due for a daily cron tick.

    The first of the month sends last month, Mondays send last week, every
    other day sends yesterday.
    """
    today = utc_today(now)
    if today.day == 1:
        return manual_report("monthly", now)
    if today.weekday() == 0:
        return manual_report("weekly", now)
    return manual_report("daily", now)
