"""Cron entry point: build and e-mail the worklog report due today.

Usage:
  python run_scheduled.py                 # daily tick: monthly / weekly / daily rule
  python run_scheduled.py --kind weekly   # manual trigger
  python run_scheduled.py --dry-run       # print the HTML instead of sending
  python run_scheduled.py --data          # print the current month's entries as JSON

Settings are read from the environment (JIRA_DOMAIN, JIRA_EMAIL,
JIRA_API_TOKEN, ACCOUNT_IDS, EMAIL_FROM, EMAIL_TO, DAILY_EMAIL_TO,
MAILGUN_DOMAIN_NAME, MAILGUN_API_KEY).
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys

from worklog_app.core.config import ReportSettings
from worklog_app.core.errors import ConfigurationError, DeliveryError
from worklog_app.core.schedule import manual_report, scheduled_report
from worklog_app.core.service import ReportPipeline

logger = logging.getLogger("run_scheduled")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--kind", choices=["daily", "weekly", "monthly"], help="Send this report instead of the scheduled one")
    parser.add_argument("--dry-run", action="store_true", help="Print the rendered report, do not send")
    parser.add_argument(
        "--data",
        action="store_true",
        help="Print worklog entries as JSON (current month, or the --kind range) instead of a report",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if args.data:
        return _print_data(manual_report(args.kind).date_range if args.kind else None)

    due = manual_report(args.kind) if args.kind else scheduled_report()
    logger.info("Running %s report for %s to %s", due.name, due.date_range.from_iso, due.date_range.to_iso)
    try:
        settings = ReportSettings.from_mapping(os.environ)
        pipeline = ReportPipeline.from_settings(settings)
        if args.dry_run:
            report = pipeline.build_report(due.date_range, monthly=due.monthly)
            print(report.subject)
            print(report.html_body)
            return 0
        pipeline.send_report(due.date_range, monthly=due.monthly)
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        return 2
    except DeliveryError as exc:
        logger.error("%s", exc)
        return 1
    return 0


def _print_data(date_range) -> int:
    try:
        pipeline = ReportPipeline.from_settings(ReportSettings.from_mapping(os.environ))
        rows = pipeline.report_data(date_range)
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        return 2
    print(json.dumps(rows, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
