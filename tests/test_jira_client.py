from datetime import date
from types import SimpleNamespace

import pytest
import requests
from fakes import worklog

from worklog_app.core.dates import DateRange
from worklog_app.core.errors import TrackerError
from worklog_app.core.fetcher import WorklogFetcher
from worklog_app.core.jira_client import JiraAPI, worklog_jql


class _Resp:
    def __init__(self, payload, status=200):
        self.payload = payload
        self.status_code = status
        self.text = str(payload)

    def json(self):
        return self.payload


class _Session:
    def __init__(self, responses):
        self.responses = list(responses)
        self.requests = []

    def get(self, url, params=None, headers=None):
        self.requests.append((url, dict(params or {})))
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


class OfflineAPI(JiraAPI):
    def __init__(self, responses):
        self.server = "https://example.atlassian.net"
        self.client = SimpleNamespace(_session=_Session(responses))

    @property
    def session(self):
        return self.client._session


def test_worklog_jql():
    assert worklog_jql("abc", date(2024, 5, 1), date(2024, 5, 31)) == (
        'worklogAuthor="abc" AND worklogDate >= "2024-05-01" AND worklogDate <= "2024-05-31"'
    )


def test_search_issues_follows_page_tokens():
    api = OfflineAPI(
        [
            _Resp({"issues": [{"key": "OPS-1", "fields": {"summary": "one"}}], "nextPageToken": "p2"}),
            _Resp({"issues": [{"key": "OPS-2", "fields": {"summary": "two"}}], "isLast": True}),
        ]
    )
    refs = api.search_issues("abc", date(2024, 5, 1), date(2024, 5, 31))
    assert [r.key for r in refs] == ["OPS-1", "OPS-2"]
    (url, first), (_, second) = api.session.requests
    assert url == "https://example.atlassian.net/rest/api/3/search/jql"
    assert first["fields"] == "key,summary"
    assert second["nextPageToken"] == "p2"


def test_list_worklogs_reads_every_page():
    api = OfflineAPI(
        [
            _Resp({"startAt": 0, "total": 3, "worklogs": [worklog("a1", "2024-05-01T09:00:00.000+0000", 60)] * 2}),
            _Resp({"startAt": 2, "total": 3, "worklogs": [worklog("a2", "2024-05-02T09:00:00.000+0000", 120)]}),
        ]
    )
    records = api.list_worklogs("OPS-1")
    assert [r.author_id for r in records] == ["a1", "a1", "a2"]
    assert api.session.requests[1][1]["startAt"] == 2


def test_http_error_raises_tracker_error():
    api = OfflineAPI([_Resp({"errorMessages": ["nope"]}, status=404)])
    with pytest.raises(TrackerError):
        api.list_worklogs("OPS-404")


def test_transport_error_raises_tracker_error():
    api = OfflineAPI([requests.ConnectionError("reset")])
    with pytest.raises(TrackerError):
        api.resolve_display_name("abc")


def test_resolve_display_name():
    api = OfflineAPI([_Resp({"accountId": "abc", "displayName": "Alice"}), _Resp({"accountId": "abc"})])
    assert api.resolve_display_name("abc") == "Alice"
    assert api.resolve_display_name("abc") is None
    assert api.session.requests[0][1] == {"accountId": "abc"}


def test_non_object_payload_raises_tracker_error():
    api = OfflineAPI([_Resp([])])
    with pytest.raises(TrackerError):
        api.resolve_display_name("abc")


def test_malformed_user_payload_does_not_abort_fetch():
    api = OfflineAPI(
        [
            _Resp([]),
            _Resp({"issues": [], "isLast": True}),
            _Resp({"accountId": "a2", "displayName": "Bob"}),
            _Resp({"issues": [], "isLast": True}),
        ]
    )
    result = WorklogFetcher(api).fetch(["a1", "a2"], DateRange(date(2024, 5, 1), date(2024, 5, 31)))
    assert [a.display_name for a in result.accounts] == ["a1", "Bob"]
    assert [(s.unit, s.key) for s in result.skipped] == [("display_name", "a1")]
