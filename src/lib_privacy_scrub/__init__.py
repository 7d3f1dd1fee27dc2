"""Public package surface for the telemetry privacy hooks.

``privacy_before_send`` and ``privacy_before_breadcrumb`` can be passed
straight to ``sentry_sdk.init``; :func:`init` does that wiring and applies the
environment configuration. The redaction helpers are exported for hosts that
scrub payloads outside the SDK.
"""

from __future__ import annotations

from .adapters.redaction import extract_table_name, redact_emails, redact_sensitive_fields
from .domain import DEFAULT_POLICY, EMAIL_SENTINEL, FILTERED, FaultPolicy, ScrubPolicy
from .runtime import (
    clear_user,
    init,
    privacy_before_breadcrumb,
    privacy_before_send,
    set_context,
    set_user,
    shutdown,
    summary_info,
)

__all__ = [
    "DEFAULT_POLICY",
    "EMAIL_SENTINEL",
    "FILTERED",
    "FaultPolicy",
    "ScrubPolicy",
    "clear_user",
    "extract_table_name",
    "init",
    "privacy_before_breadcrumb",
    "privacy_before_send",
    "redact_emails",
    "redact_sensitive_fields",
    "set_context",
    "set_user",
    "shutdown",
    "summary_info",
]
