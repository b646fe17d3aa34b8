"""Convenience launcher for the Streamlit app.

Usage:
  streamlit run run_report_app.py

Automatically imports every module in ``worklog_app/pages`` so each page
decorated with ``@register_page`` registers itself without manual edits here.
"""

from importlib import import_module
from pathlib import Path

import streamlit as st

from worklog_app.app import main

st.set_page_config(layout="wide")


def _auto_init_pipeline():
    """Initialize the report pipeline from Streamlit secrets if available."""
    if "report_pipeline" in st.session_state:
        return

    from worklog_app.core.config import ReportSettings
    from worklog_app.core.errors import ConfigurationError

    try:
        settings = ReportSettings.from_mapping(st.secrets)
    except (ConfigurationError, FileNotFoundError):
        st.sidebar.warning("Jira secrets not found. Please use the Setup page.")
        return

    st.sidebar.info("Secrets found, attempting to connect to Jira...")
    try:
        from worklog_app.core.service import ReportPipeline

        st.session_state["report_pipeline"] = ReportPipeline.from_settings(settings)
        st.sidebar.success("Jira connection successful!")
    except Exception as e:
        st.sidebar.error(f"Jira connection failed: {e}")
        st.session_state.pop("report_pipeline", None)


_auto_init_pipeline()

PAGES_DIR = Path(__file__).parent / "worklog_app" / "pages"
for py in sorted(PAGES_DIR.glob("[!_]*.py")):
    mod_name = f"worklog_app.pages.{py.stem}"
    try:
        import_module(mod_name)
    except Exception as e:  # pragma: no cover - defensive
        print(f"Failed importing page {mod_name}: {e}")

if __name__ == "__main__":
    main()
