"""Port for redacting sensitive information from telemetry payloads."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from lib_privacy_scrub.domain.report import ScrubReport


@runtime_checkable
class ScrubberPort(Protocol):
    """Scrub an event or breadcrumb before it is handed to the transport."""

    def scrub(self, payload: Any) -> ScrubReport:
        """Return a report carrying the (possibly) redacted copy of ``payload``."""


__all__ = ["ScrubberPort"]
