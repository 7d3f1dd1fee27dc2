"""Concrete adapters: redaction helpers, scrubbers, and console output."""

from __future__ import annotations

from .console import RichConsoleAdapter
from .redaction import extract_table_name, redact_emails, redact_quoted, redact_sensitive_fields, strip_query
from .scrubber import BreadcrumbScrubber, EventScrubber

__all__ = [
    "BreadcrumbScrubber",
    "EventScrubber",
    "RichConsoleAdapter",
    "extract_table_name",
    "redact_emails",
    "redact_quoted",
    "redact_sensitive_fields",
    "strip_query",
]
