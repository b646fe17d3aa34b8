import json
from datetime import date

from fakes import DummyAPI, worklog

import run_scheduled
from worklog_app.core.dates import DateRange
from worklog_app.core.schedule import ScheduledReport
from worklog_app.core.service import ReportPipeline


def _set_jira_env(monkeypatch, account_ids='["a1"]'):
    monkeypatch.setenv("JIRA_DOMAIN", "example.atlassian.net")
    monkeypatch.setenv("JIRA_EMAIL", "me@example.com")
    monkeypatch.setenv("JIRA_API_TOKEN", "t")
    monkeypatch.setenv("ACCOUNT_IDS", account_ids)


def test_missing_configuration_exits_with_code_2(monkeypatch):
    for name in ("JIRA_DOMAIN", "JIRA_SERVER", "JIRA_EMAIL", "JIRA_API_TOKEN", "JIRA_TOKEN", "ACCOUNT_IDS"):
        monkeypatch.delenv(name, raising=False)
    assert run_scheduled.main(["--kind", "daily", "--dry-run"]) == 2


def test_invalid_account_ids_exit_with_code_2(monkeypatch):
    _set_jira_env(monkeypatch, "[broken")
    assert run_scheduled.main(["--kind", "weekly"]) == 2
    assert run_scheduled.main(["--data"]) == 2


def test_data_flag_prints_entries_as_json(monkeypatch, capsys):
    _set_jira_env(monkeypatch)
    api = DummyAPI(
        issues={"a1": [{"key": "OPS-7", "fields": {"summary": "Patch"}}]},
        worklogs={"OPS-7": [worklog("a1", "2024-05-06T10:00:00.000+0000", 3600, "Kernel")]},
        names={"a1": "Alice"},
    )
    may = DateRange(date(2024, 5, 1), date(2024, 5, 31))
    monkeypatch.setattr(ReportPipeline, "from_settings", classmethod(lambda cls, settings: cls(api, settings)))
    monkeypatch.setattr(run_scheduled, "manual_report", lambda name: ScheduledReport(name, may, monthly=True))

    assert run_scheduled.main(["--data", "--kind", "monthly"]) == 0
    rows = json.loads(capsys.readouterr().out)
    assert rows == [
        {
            "issueKey": "OPS-7",
            "date": "2024-05-06",
            "timeSpent": "1h 0m",
            "timeSpentSeconds": 3600,
            "description": "Kernel",
            "accountName": "Alice",
        }
    ]
