"""Connection setup page: collect Jira/Mailgun settings and initialize ReportPipeline."""

from __future__ import annotations

import json

import streamlit as st

from worklog_app.app import register_page
from worklog_app.core.config import ReportSettings, lookup_secret
from worklog_app.core.errors import ConfigurationError
from worklog_app.core.service import ReportPipeline


def _prefill(section: str, *names: str):
    return lookup_secret(st.secrets, section, *names) or ""


@register_page("Setup / Connection")
def setup_page():
    st.title("Jira Connection Setup")
    st.caption("Enter credentials (use secrets manager in production).")

    # Pre-fill from secrets if available (user can override)
    server = st.text_input(
        "Jira Server URL",
        value=_prefill("jira", "JIRA_SERVER", "JIRA_DOMAIN"),
    )
    email = st.text_input(
        "Email / Username",
        value=_prefill("jira", "JIRA_EMAIL"),
    )
    token = st.text_input(
        "API Token",
        type="password",
        value=_prefill("jira", "JIRA_API_TOKEN", "JIRA_TOKEN"),
    )
    secret_ids = _prefill("jira", "ACCOUNT_IDS")
    if not isinstance(secret_ids, str):
        secret_ids = json.dumps(list(secret_ids))
    account_ids = st.text_area("Account IDs (JSON array)", value=secret_ids)

    with st.expander("Mail delivery (optional)"):
        email_from = st.text_input("From", value=_prefill("mailgun", "EMAIL_FROM"))
        email_to = st.text_input("Report recipient", value=_prefill("mailgun", "EMAIL_TO"))
        daily_to = st.text_input("Daily report recipient", value=_prefill("mailgun", "DAILY_EMAIL_TO"))
        mg_domain = st.text_input("Mailgun domain", value=_prefill("mailgun", "MAILGUN_DOMAIN_NAME"))
        mg_key = st.text_input("Mailgun API key", type="password", value=_prefill("mailgun", "MAILGUN_API_KEY"))

    init_btn = st.button("Initialize Connection", type="primary")

    if init_btn:
        try:
            settings = ReportSettings.from_mapping(
                {
                    "JIRA_SERVER": server,
                    "JIRA_EMAIL": email,
                    "JIRA_API_TOKEN": token,
                    "ACCOUNT_IDS": account_ids,
                    "EMAIL_FROM": email_from,
                    "EMAIL_TO": email_to,
                    "DAILY_EMAIL_TO": daily_to,
                    "MAILGUN_DOMAIN_NAME": mg_domain,
                    "MAILGUN_API_KEY": mg_key,
                }
            )
        except ConfigurationError as e:
            st.error(str(e))
            return
        try:
            st.session_state["report_pipeline"] = ReportPipeline.from_settings(settings)
            st.success("Connection initialized.")
        except Exception as e:  # pragma: no cover
            st.error(f"Failed to initialize Jira client: {e}")

    if "report_pipeline" in st.session_state:
        st.info("ReportPipeline ready.")
