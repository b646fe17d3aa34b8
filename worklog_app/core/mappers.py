"""Mapping raw Jira issue and worklog JSON into model instances."""

from __future__ import annotations

from datetime import date
from typing import Any

import pandas as pd

from .models import IssueRef, WorklogRecord


def comment_text(comment: Any) -> str | None:
    """First text run of a worklog comment.

    Jira Cloud returns comments as Atlassian Document Format
    (``doc -> paragraph -> text``); Server returns plain strings.
    """
    if comment is None:
        return None
    if isinstance(comment, str):
        return comment or None
    if not isinstance(comment, dict):
        return None
    blocks = comment.get("content") or []
    if not blocks or not isinstance(blocks[0], dict):
        return None
    runs = blocks[0].get("content") or []
    if not runs or not isinstance(runs[0], dict):
        return None
    text = runs[0].get("text")
    return text if isinstance(text, str) and text else None


def started_date(started: str | None) -> date | None:
    """Calendar-date portion of a worklog ``started`` timestamp.

    The date is taken as written (the author's local date), not shifted to UTC.
    """
    if not started or not isinstance(started, str):
        return None
    day = started.split("T")[0].strip()
    ts = pd.to_datetime(day, format="%Y-%m-%d", errors="coerce")
    if ts is None or pd.isna(ts):
        return None
    return ts.date()


def map_issue_ref(raw: dict[str, Any]) -> IssueRef | None:
    key = raw.get("key")
    if not key:
        return None
    fields = raw.get("fields") or {}
    return IssueRef(key=key, summary=fields.get("summary") or None)


def map_worklog(raw: dict[str, Any]) -> WorklogRecord:
    author = raw.get("author") or {}
    seconds = raw.get("timeSpentSeconds")
    try:
        seconds = max(int(seconds), 0)
    except (TypeError, ValueError):
        seconds = 0
    return WorklogRecord(
        author_id=author.get("accountId") if isinstance(author, dict) else None,
        started=raw.get("started"),
        time_spent_seconds=seconds,
        comment_text=comment_text(raw.get("comment")),
    )
