"""Worklog Report page: preview a report for a date range and send it on demand."""

from __future__ import annotations

import json
import logging

import streamlit as st
import streamlit.components.v1 as components

from worklog_app.analytics.aggregations.account import entries_to_records, hours_by_account
from worklog_app.app import register_page
from worklog_app.core.dates import DateRange, current_month_range, previous_month_range, previous_week_range, yesterday
from worklog_app.core.errors import ConfigurationError, DeliveryError

logger = logging.getLogger(__name__)

PRESETS = {
    "Yesterday": lambda: (yesterday(), False),
    "Previous week": lambda: (previous_week_range(), False),
    "Previous month": lambda: (previous_month_range(), True),
    "Current month": lambda: (current_month_range(), True),
    "Custom": None,
}


def _pick_range() -> tuple[DateRange, bool] | None:
    preset = st.radio("Range", list(PRESETS.keys()), horizontal=True)
    factory = PRESETS[preset]
    if factory is not None:
        return factory()
    default = current_month_range()
    picked = st.date_input("Dates", value=(default.from_date, default.to_date))
    if not isinstance(picked, tuple) or len(picked) != 2:
        st.info("Select a start and an end date.")
        return None
    start, end = picked
    monthly = st.checkbox("Monthly report layout", value=False)
    return DateRange(start, end), monthly


@register_page("Worklog Report")
def report_page():
    st.title("Worklog Report")
    pipeline = st.session_state.get("report_pipeline")
    if pipeline is None:
        st.warning("Configure the Jira connection on the Setup page first.")
        return

    picked = _pick_range()
    if picked is None:
        return
    date_range, monthly = picked
    st.caption(f"{date_range.from_iso} → {date_range.to_iso}")

    col_preview, col_send = st.columns(2)
    if col_preview.button("Preview", type="primary"):
        try:
            with st.spinner("Fetching worklogs..."):
                report, result = pipeline.preview(date_range, monthly)
        except ConfigurationError as exc:
            logger.error("Configuration error building report: %s", exc)
            st.error(str(exc))
            return
        st.subheader(report.subject)
        components.html(report.html_body, height=600, scrolling=True)
        summary = hours_by_account(result.entries)
        if not summary.empty:
            st.dataframe(summary, hide_index=True)
        if result.skipped:
            st.caption(f"{len(result.skipped)} lookups failed and were skipped.")
        st.download_button(
            "Download entries (JSON)",
            data=json.dumps(entries_to_records(result.entries), ensure_ascii=False, indent=2),
            file_name=f"worklogs_{date_range.from_iso}_{date_range.to_iso}.json",
            mime="application/json",
        )

    if col_send.button("Send e-mail"):
        try:
            with st.spinner("Building and sending report..."):
                delivery = pipeline.send_report(date_range, monthly=monthly)
        except (ConfigurationError, DeliveryError) as exc:
            logger.error("Report delivery failed: %s", exc)
            st.error(str(exc))
            return
        st.success(f"Report sent to {delivery.recipient}.")
