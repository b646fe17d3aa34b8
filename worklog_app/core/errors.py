"""Exception types shared by the report pipeline."""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Settings are missing or malformed; no report can be produced."""


class TrackerError(RuntimeError):
    """A single call against the issue tracker failed."""


class DeliveryError(RuntimeError):
    """The notifier did not accept the rendered report."""
