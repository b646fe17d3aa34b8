"""UTC calendar date ranges used to scope worklog reports."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta

import pytz


@dataclass(slots=True, frozen=True)
class DateRange:
    """Inclusive range of calendar dates."""

    from_date: date
    to_date: date

    def __post_init__(self):
        if self.from_date > self.to_date:
            raise ValueError(f"Invalid date range: {self.from_date} is after {self.to_date}")

    @property
    def from_iso(self) -> str:
        return self.from_date.isoformat()

    @property
    def to_iso(self) -> str:
        return self.to_date.isoformat()

    @property
    def is_single_day(self) -> bool:
        return self.from_date == self.to_date

    def contains(self, day: date) -> bool:
        return self.from_date <= day <= self.to_date

    @classmethod
    def from_iso_strings(cls, from_date: str, to_date: str) -> DateRange:
        return cls(parse_day(from_date), parse_day(to_date))


def parse_day(value: date | str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(str(value).strip(), "%Y-%m-%d").date()


def utc_today(now: datetime | None = None) -> date:
    """Return the UTC calendar date for ``now`` (naive values are taken as UTC)."""
    if now is None:
        now = datetime.now(pytz.UTC)
    elif now.tzinfo is None:
        now = pytz.UTC.localize(now)
    else:
        now = now.astimezone(pytz.UTC)
    return now.date()


def _month_bounds(year: int, month: int) -> DateRange:
    first = date(year, month, 1)
    if month == 12:
        next_first = date(year + 1, 1, 1)
    else:
        next_first = date(year, month + 1, 1)
    return DateRange(first, next_first - timedelta(days=1))


def current_month_range(now: datetime | None = None) -> DateRange:
    today = utc_today(now)
    return _month_bounds(today.year, today.month)


def previous_month_range(now: datetime | None = None) -> DateRange:
    today = utc_today(now)
    last_of_previous = today.replace(day=1) - timedelta(days=1)
    return _month_bounds(last_of_previous.year, last_of_previous.month)


def previous_week_range(now: datetime | None = None) -> DateRange:
    """Most recently completed Monday..Sunday week.

    On a Sunday the current week is still in progress, so the week that ended
    seven days earlier is returned.
    """
    today = utc_today(now)
    this_monday = today - timedelta(days=today.weekday())
    monday = this_monday - timedelta(days=7)
    return DateRange(monday, monday + timedelta(days=6))


def single_day(day: date | str) -> DateRange:
    parsed = parse_day(day)
    return DateRange(parsed, parsed)


def yesterday(now: datetime | None = None) -> DateRange:
    return single_day(utc_today(now) - timedelta(days=1))
