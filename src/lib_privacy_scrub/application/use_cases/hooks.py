"""Use cases turning scrubbers into telemetry SDK hooks.

Purpose
-------
Wrap a :class:`ScrubberPort` into the ``before_send`` / ``before_breadcrumb``
callables a telemetry client invokes for every outbound event and breadcrumb,
applying the configured :class:`FaultPolicy` when scrubbing goes wrong.

Contents
--------
* :func:`create_before_send` - factory for the event hook.
* :func:`create_before_breadcrumb` - factory for the breadcrumb hook.

System Role
-----------
Application-layer boundary between the SDK callback contract and the
adapters. Hooks built here never raise: step faults arrive inside the
:class:`ScrubReport`, anything else is caught at this boundary.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from lib_privacy_scrub.application.ports.scrubber import ScrubberPort
from lib_privacy_scrub.domain.policy import FaultPolicy
from lib_privacy_scrub.domain.report import ScrubReport, StepFault

logger = logging.getLogger(__name__)

Hook = Callable[..., Any]
DiagnosticHook = Callable[[str, dict[str, Any]], None] | None


def create_before_send(
    scrubber: ScrubberPort,
    *,
    fault_policy: FaultPolicy = FaultPolicy.BEST_EFFORT,
    diagnostic: DiagnosticHook = None,
) -> Hook:
    """Build the ``before_send`` hook around ``scrubber``.

    Parameters
    ----------
    scrubber:
        Adapter redacting events.
    fault_policy:
        ``BEST_EFFORT`` returns whatever was scrubbed when a step fails;
        ``DROP`` returns ``None`` so the SDK discards the event.
    diagnostic:
        Optional callback invoked as ``diagnostic("scrub_fault", payload)``
        whenever a fault is recorded.

    Returns
    -------
    Callable[[Any, Any], Any]
        Hook accepting ``(event, hint=None)`` and returning the scrubbed event
        or ``None``.

    Examples
    --------
    >>> class Upper:
    ...     def scrub(self, payload):
    ...         return ScrubReport(payload=payload.upper())
    >>> hook = create_before_send(Upper())
    >>> hook("quiet")
    'QUIET'
    """
    return _build_hook("event", scrubber, fault_policy, diagnostic)


def create_before_breadcrumb(
    scrubber: ScrubberPort,
    *,
    fault_policy: FaultPolicy = FaultPolicy.BEST_EFFORT,
    diagnostic: DiagnosticHook = None,
) -> Hook:
    """Build the ``before_breadcrumb`` hook around ``scrubber``.

    Same contract as :func:`create_before_send`, applied to breadcrumbs.
    """
    return _build_hook("breadcrumb", scrubber, fault_policy, diagnostic)


def _build_hook(
    kind: str,
    scrubber: ScrubberPort,
    fault_policy: FaultPolicy,
    diagnostic: DiagnosticHook,
) -> Hook:
    def _hook(payload: Any, hint: Any = None) -> Any:
        try:
            report = scrubber.scrub(payload)
        except Exception as exc:  # noqa: BLE001
            report = ScrubReport(payload=payload, faults=(StepFault(step="scrub", error=type(exc).__name__),))
        if report.clean:
            return report.payload
        _record_faults(kind, report, fault_policy, diagnostic)
        if fault_policy is FaultPolicy.DROP:
            return None
        return report.payload

    _hook.__name__ = f"privacy_before_{'send' if kind == 'event' else kind}"
    return _hook


def _record_faults(
    kind: str,
    report: ScrubReport,
    fault_policy: FaultPolicy,
    diagnostic: DiagnosticHook,
) -> None:
    """Log each fault and forward it to ``diagnostic`` without re-raising."""
    for fault in report.faults:
        logger.warning(
            "Scrubbing %s step %s failed with %s; policy=%s",
            kind,
            fault.step,
            fault.error,
            fault_policy.value,
        )
        if diagnostic is None:
            continue
        try:
            diagnostic("scrub_fault", {"kind": kind, "step": fault.step, "error": fault.error, "policy": fault_policy.value})
        except Exception:  # noqa: BLE001
            logger.exception("Diagnostic hook raised while reporting a scrub fault")


__all__ = ["DiagnosticHook", "Hook", "create_before_breadcrumb", "create_before_send"]
