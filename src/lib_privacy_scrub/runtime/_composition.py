"""Runtime composition helpers wiring scrubbers into SDK hooks.

Purpose
-------
Translate a :class:`ScrubPolicy` into the pair of hooks a telemetry client
registers, and expose the ready-made defaults built from
:data:`DEFAULT_POLICY`.
"""

from __future__ import annotations

from lib_privacy_scrub.adapters import BreadcrumbScrubber, EventScrubber
from lib_privacy_scrub.application.use_cases import (
    DiagnosticHook,
    Hook,
    create_before_breadcrumb,
    create_before_send,
)
from lib_privacy_scrub.domain import DEFAULT_POLICY, ScrubPolicy


def build_hooks(policy: ScrubPolicy = DEFAULT_POLICY, *, diagnostic: DiagnosticHook = None) -> tuple[Hook, Hook]:
    """Return ``(before_send, before_breadcrumb)`` honouring ``policy``."""

    before_send = create_before_send(
        EventScrubber(policy=policy),
        fault_policy=policy.fault_policy,
        diagnostic=diagnostic,
    )
    before_breadcrumb = create_before_breadcrumb(
        BreadcrumbScrubber(),
        fault_policy=policy.fault_policy,
        diagnostic=diagnostic,
    )
    return before_send, before_breadcrumb


privacy_before_send, privacy_before_breadcrumb = build_hooks()


__all__ = ["build_hooks", "privacy_before_breadcrumb", "privacy_before_send"]
