from datetime import date

import pytest
from fakes import DummyAPI, RecordingNotifier, worklog

from worklog_app.core.config import ReportSettings
from worklog_app.core.dates import DateRange, single_day
from worklog_app.core.errors import ConfigurationError, DeliveryError
from worklog_app.core.service import ReportPipeline
from worklog_app.visual.report import ReportKind


def _settings(account_ids=("a1",)):
    return ReportSettings(
        jira_server="https://example.atlassian.net",
        jira_email="me@example.com",
        jira_api_token="t",
        account_ids=list(account_ids),
        email_from="reports@example.com",
        email_to="team@example.com",
        daily_email_to="lead@example.com",
    )


def _api():
    return DummyAPI(
        issues={"a1": [{"key": "OPS-7", "fields": {"summary": "Patch servers"}}]},
        worklogs={
            "OPS-7": [
                worklog("a1", "2024-05-06T10:00:00.000+0000", 9000, "Kernel updates"),
                worklog("a2", "2024-05-06T11:00:00.000+0000", 600, "Someone else"),
            ]
        },
        names={"a1": "Alice", "a2": "Bob"},
    )


def test_single_day_report():
    pipeline = ReportPipeline(_api(), _settings())
    report = pipeline.build_report(single_day("2024-05-06"))
    assert report.kind is ReportKind.DAILY_SINGLE
    assert report.subject == "📝 Worklog report for 05/06/2024"
    assert report.html_body.count("<td>OPS-7</td>") == 1
    assert "<h3>Summary of Hours - Alice: 2h30m</h3>" in report.html_body
    assert "Someone else" not in report.html_body


def test_account_without_worklogs_shows_zero_total():
    pipeline = ReportPipeline(_api(), _settings(["a1", "a2"]))
    report = pipeline.build_report(DateRange(date(2024, 5, 6), date(2024, 5, 12)))
    assert report.kind is ReportKind.DAILY_RANGE
    assert "<h3>Summary of Hours - Bob: 0h0m</h3>" in report.html_body
    assert report.html_body.count("<table") == 1


def test_monthly_report_without_worklogs():
    pipeline = ReportPipeline(DummyAPI(names={"a1": "Alice"}), _settings())
    report = pipeline.build_report(DateRange(date(2024, 2, 1), date(2024, 2, 29)), monthly=True)
    assert report.subject == "Monthly Worklog Report – Feb 2024"
    assert "No worklogs found for the specified date range and accounts." in report.html_body
    assert "<table" not in report.html_body


def test_identical_inputs_render_identical_reports():
    week = DateRange(date(2024, 5, 6), date(2024, 5, 12))
    first = ReportPipeline(_api(), _settings(["a1", "a2"])).build_report(week)
    second = ReportPipeline(_api(), _settings(["a1", "a2"])).build_report(week)
    assert first == second


@pytest.mark.parametrize("raw", ["", "[not json"])
def test_bad_account_config_produces_no_report(raw):
    mapping = {"JIRA_DOMAIN": "x", "JIRA_EMAIL": "e", "JIRA_API_TOKEN": "t", "ACCOUNT_IDS": raw}
    with pytest.raises(ConfigurationError):
        ReportSettings.from_mapping(mapping)


def test_empty_account_list_aborts_pipeline():
    notifier = RecordingNotifier()
    pipeline = ReportPipeline(_api(), _settings([]), notifier)
    with pytest.raises(ConfigurationError):
        pipeline.send_report(single_day("2024-05-06"))
    assert notifier.sent == []


def test_report_data_records():
    pipeline = ReportPipeline(_api(), _settings())
    rows = pipeline.report_data(DateRange(date(2024, 5, 1), date(2024, 5, 31)))
    assert rows == [
        {
            "issueKey": "OPS-7",
            "date": "2024-05-06",
            "timeSpent": "2h 30m",
            "timeSpentSeconds": 9000,
            "description": "Kernel updates",
            "accountName": "Alice",
        }
    ]


def test_send_routes_single_day_to_daily_recipient():
    notifier = RecordingNotifier()
    pipeline = ReportPipeline(_api(), _settings(), notifier)
    result = pipeline.send_report(single_day("2024-05-06"))
    assert result.recipient == "lead@example.com"
    sender, recipient, subject, body = notifier.sent[0]
    assert (sender, recipient) == ("reports@example.com", "lead@example.com")
    assert subject == result.report.subject
    assert body == result.report.html_body


def test_send_routes_ranges_to_regular_recipient():
    notifier = RecordingNotifier()
    pipeline = ReportPipeline(_api(), _settings(), notifier)
    result = pipeline.send_report(DateRange(date(2024, 5, 1), date(2024, 5, 31)), monthly=True)
    assert result.recipient == "team@example.com"
    assert result.report.kind is ReportKind.MONTHLY


def test_delivery_failure_is_surfaced():
    notifier = RecordingNotifier(ok=False)
    pipeline = ReportPipeline(_api(), _settings(), notifier)
    with pytest.raises(DeliveryError):
        pipeline.send_report(single_day("2024-05-06"))
    assert len(notifier.sent) == 1


def test_send_without_notifier_is_configuration_error():
    pipeline = ReportPipeline(_api(), _settings())
    with pytest.raises(ConfigurationError):
        pipeline.send_report(single_day("2024-05-06"))
