"""Jira API client wrapper (REST v3 + enhanced search pagination)."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

import requests
from jira import JIRA, JIRAError

from .config import SEARCH_FIELDS, SEARCH_PAGE_SIZE, WORKLOG_PAGE_SIZE
from .errors import TrackerError
from .mappers import map_issue_ref, map_worklog
from .models import IssueRef, WorklogRecord

logger = logging.getLogger(__name__)


def worklog_jql(author_id: str, from_date: date, to_date: date) -> str:
    return (
        f'worklogAuthor="{author_id}" AND worklogDate >= "{from_date.isoformat()}" '
        f'AND worklogDate <= "{to_date.isoformat()}"'
    )


class JiraAPI:
    def __init__(self, server: str, email: str, token: str):
        self.server = server.rstrip("/")
        # One attempt per call: the resilient session must not retry.
        self.client = JIRA(
            basic_auth=(email, token),
            options={"server": self.server, "rest_api_version": "3"},
            get_server_info=False,
            max_retries=0,
        )

    def _get_json(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        session = getattr(self.client, "_session", None)
        if session is None:
            raise TrackerError("JIRA session unavailable")
        url = f"{self.server}{path}"
        try:
            resp = session.get(url, params=params, headers={"Accept": "application/json"})
        except (JIRAError, requests.RequestException) as exc:
            raise TrackerError(f"Request to {path} failed: {exc}") from exc
        if resp.status_code >= 400:
            raise TrackerError(f"Request to {path} failed {resp.status_code}: {resp.text[:200]}")
        try:
            data = resp.json()
        except ValueError as exc:
            raise TrackerError(f"Invalid JSON from {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise TrackerError(f"Unexpected payload from {path}: {type(data).__name__}")
        return data

    def search_enhanced(
        self,
        jql: str,
        fields: list[str] | None = None,
        page_size: int = SEARCH_PAGE_SIZE,
    ) -> list[dict[str, Any]]:
        params: dict[str, Any] = {"jql": jql, "maxResults": page_size}
        if fields:
            params["fields"] = ",".join(fields)
        out: list[dict[str, Any]] = []
        token = None
        while True:
            qp = dict(params)
            if token:
                qp["nextPageToken"] = token
            data = self._get_json("/rest/api/3/search/jql", qp)
            out.extend(data.get("issues") or [])
            token = data.get("nextPageToken")
            if not token or data.get("isLast") is True:
                break
        return out

    def search_issues(self, author_id: str, from_date: date, to_date: date) -> list[IssueRef]:
        """Candidate issues carrying worklogs by ``author_id`` inside the range.

        This is a coarse filter only; callers re-check every worklog.
        """
        raw = self.search_enhanced(worklog_jql(author_id, from_date, to_date), fields=list(SEARCH_FIELDS))
        return [ref for ref in (map_issue_ref(r) for r in raw) if ref is not None]

    def list_worklogs(self, issue_key: str) -> list[WorklogRecord]:
        """Every worklog on the issue, regardless of author or date."""
        path = f"/rest/api/3/issue/{issue_key}/worklog"
        out: list[WorklogRecord] = []
        start_at = 0
        while True:
            data = self._get_json(path, {"startAt": start_at, "maxResults": WORKLOG_PAGE_SIZE})
            page = data.get("worklogs") or []
            out.extend(map_worklog(w) for w in page if isinstance(w, dict))
            start_at += len(page)
            total = data.get("total")
            if not page or not isinstance(total, int) or start_at >= total:
                break
        logger.debug("Listed %s worklogs for %s", len(out), issue_key)
        return out

    def resolve_display_name(self, account_id: str) -> str | None:
        data = self._get_json("/rest/api/3/user", {"accountId": account_id})
        return data.get("displayName") or None
