"""Account-based aggregations of worklog entries."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

import pandas as pd

from worklog_app.core.models import WorklogEntry

ENTRY_COLUMNS: Sequence[str] = (
    "issueKey",
    "date",
    "timeSpent",
    "timeSpentSeconds",
    "description",
    "accountName",
)


def format_duration(seconds: int) -> str:
    """Per-entry duration as ``"Hh Mm"`` (seconds are dropped)."""
    hours, rest = divmod(int(seconds), 3600)
    return f"{hours}h {rest // 60}m"


def format_total(seconds: int) -> str:
    """Account total as ``"HhMm"``."""
    hours, rest = divmod(int(seconds), 3600)
    return f"{hours}h{rest // 60}m"


def counted_seconds(seconds: int) -> int:
    """Seconds an entry contributes to its account total.

    Totals are summed from the displayed ``Hh Mm`` value, so each entry is
    truncated to whole minutes before summing.
    """
    return int(seconds) // 60 * 60


def format_line(entry: WorklogEntry) -> str:
    return (
        f"{entry.issue_key} | {entry.date.isoformat()} | "
        f"{format_duration(entry.time_spent_seconds)} | {entry.description}"
    )


@dataclass(slots=True)
class AccountAggregate:
    account_name: str
    lines: list[str] = field(default_factory=list)
    total_seconds: int = 0

    @property
    def total(self) -> str:
        return format_total(self.total_seconds)


def aggregate(
    entries: Iterable[WorklogEntry],
    account_names: Iterable[str] | None = None,
) -> dict[str, AccountAggregate]:
    """Group entries by account name in order of first appearance.

    ``account_names`` seeds the mapping so accounts without any worklog still
    get an (empty) aggregate.
    """
    out: dict[str, AccountAggregate] = {}
    for name in account_names or ():
        out.setdefault(name, AccountAggregate(name))
    for entry in entries:
        agg = out.setdefault(entry.account_name, AccountAggregate(entry.account_name))
        agg.lines.append(format_line(entry))
        agg.total_seconds += counted_seconds(entry.time_spent_seconds)
    return out


def entries_to_records(entries: Iterable[WorklogEntry]) -> list[dict[str, Any]]:
    """JSON-ready rows, one per entry."""
    return [
        {
            "issueKey": e.issue_key,
            "date": e.date.isoformat(),
            "timeSpent": format_duration(e.time_spent_seconds),
            "timeSpentSeconds": e.time_spent_seconds,
            "description": e.description,
            "accountName": e.account_name,
        }
        for e in entries
    ]


def entries_to_dataframe(entries: Iterable[WorklogEntry]) -> pd.DataFrame:
    return pd.DataFrame(entries_to_records(entries), columns=list(ENTRY_COLUMNS))


def hours_by_account(entries: Iterable[WorklogEntry]) -> pd.DataFrame:
    """Entry count and counted hours per account, largest first."""
    df = entries_to_dataframe(entries)
    if df.empty:
        return pd.DataFrame(columns=["accountName", "entries", "hours"])
    df["countedSeconds"] = df["timeSpentSeconds"].apply(counted_seconds)
    agg = (
        df.groupby("accountName", sort=False)
        .agg(entries=("issueKey", "count"), seconds=("countedSeconds", "sum"))
        .sort_values(by="seconds", ascending=False, kind="stable")
    )
    agg["hours"] = (agg["seconds"] / 3600).round(2)
    return agg.drop(columns=["seconds"]).reset_index()
