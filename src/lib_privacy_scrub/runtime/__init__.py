"""Runtime façade registering the privacy hooks with the telemetry SDK.

Purpose
-------
Expose a stable entry point (``init``, ``set_user``, ``clear_user``,
``set_context``, ``shutdown``) that host applications use instead of wiring
scrubbers and Sentry options themselves.

Contents
--------
* ``init`` - composition root resolving settings and calling ``sentry_sdk.init``.
* ``privacy_before_send`` / ``privacy_before_breadcrumb`` - default hooks.
* ``set_user`` / ``clear_user`` / ``set_context`` - scope helpers that only
  forward non-identifying data.
* ``summary_info`` - metadata banner used by the CLI.

System Role
-----------
Outer shell of the package. The hooks themselves never perform I/O; the SDK
calls live here.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import sentry_sdk

from lib_privacy_scrub.adapters.redaction import redact_sensitive_fields
from lib_privacy_scrub.application.use_cases import DiagnosticHook
from lib_privacy_scrub.config import ScrubSettings, load_settings
from lib_privacy_scrub.domain import DEFAULT_POLICY, FaultPolicy, ScrubPolicy

from ._composition import build_hooks, privacy_before_breadcrumb, privacy_before_send
from ._state import ScrubRuntime, active_policy, clear_runtime, current_runtime, is_initialised, set_runtime

logger = logging.getLogger(__name__)


def init(
    dsn: str | None = None,
    *,
    environment: str | None = None,
    policy: ScrubPolicy | None = None,
    fault_policy: str | FaultPolicy | None = None,
    extra_keys: tuple[str, ...] | list[str] = (),
    traces_sample_rate: float | None = None,
    diagnostic_hook: DiagnosticHook = None,
    **sdk_options: Any,
) -> ScrubRuntime:
    """Build the privacy hooks and register them with Sentry.

    Why
    ---
    Hosts call ``init`` once at startup. Centralising the ``sentry_sdk.init``
    call guarantees the hooks are always installed and ``send_default_pii``
    stays off.

    What
    ----
    Resolves settings (explicit arguments override ``SENTRY_DSN``,
    ``SENTRY_ENV``, ``SENTRY_TRACES_SAMPLE_RATE``,
    ``PRIVACY_SCRUB_FAULT_POLICY`` and ``PRIVACY_SCRUB_EXTRA_KEYS``), builds the
    hooks, initialises the SDK when a DSN is known, and installs the result as
    the active runtime.

    Parameters
    ----------
    dsn:
        Telemetry DSN; without one the SDK is left untouched and the hooks are
        only returned.
    environment:
        Deployment name forwarded to the SDK.
    policy:
        Base denylist; defaults to :data:`DEFAULT_POLICY`.
    fault_policy:
        ``"best_effort"`` or ``"drop"``; overrides the environment.
    extra_keys:
        Additional denylist fragments appended to those from the environment.
    traces_sample_rate:
        Performance sampling rate forwarded to the SDK.
    diagnostic_hook:
        Callback receiving ``("scrub_fault", payload)`` notifications.
    sdk_options:
        Extra keyword arguments passed through to ``sentry_sdk.init``.

    Returns
    -------
    ScrubRuntime
        Snapshot of the installed hooks and policy.

    Raises
    ------
    ValueError
        When the environment or ``fault_policy`` holds an invalid value, or
        ``sdk_options`` tries to replace the hooks or enable default PII.
    """

    for reserved in ("before_send", "before_breadcrumb", "send_default_pii"):
        if reserved in sdk_options:
            raise ValueError(f"{reserved} is managed by lib_privacy_scrub.init and cannot be overridden")

    settings = _resolve_settings(
        load_settings(),
        dsn=dsn,
        environment=environment,
        fault_policy=fault_policy,
        extra_keys=extra_keys,
        traces_sample_rate=traces_sample_rate,
    )
    resolved_policy = settings.build_policy(policy or DEFAULT_POLICY)
    before_send, before_breadcrumb = build_hooks(resolved_policy, diagnostic=diagnostic_hook)

    sdk_initialised = False
    if settings.dsn:
        sentry_sdk.init(
            dsn=settings.dsn,
            environment=settings.environment,
            traces_sample_rate=settings.traces_sample_rate,
            before_send=before_send,
            before_breadcrumb=before_breadcrumb,
            send_default_pii=False,
            **sdk_options,
        )
        sdk_initialised = True
    else:
        logger.info("No telemetry DSN configured; privacy hooks built without initialising the SDK")

    runtime = ScrubRuntime(
        before_send=before_send,
        before_breadcrumb=before_breadcrumb,
        policy=resolved_policy,
        environment=settings.environment,
        sdk_initialised=sdk_initialised,
    )
    set_runtime(runtime)
    return runtime


def _resolve_settings(
    base: ScrubSettings,
    *,
    dsn: str | None,
    environment: str | None,
    fault_policy: str | FaultPolicy | None,
    extra_keys: tuple[str, ...] | list[str],
    traces_sample_rate: float | None,
) -> ScrubSettings:
    """Overlay explicit arguments on environment-derived ``base`` settings."""

    if isinstance(fault_policy, str):
        fault_policy = FaultPolicy.from_name(fault_policy)
    if traces_sample_rate is not None and not 0.0 <= traces_sample_rate <= 1.0:
        raise ValueError(f"traces_sample_rate must be between 0 and 1, got {traces_sample_rate}")
    return ScrubSettings(
        dsn=dsn or base.dsn,
        environment=environment or base.environment,
        fault_policy=fault_policy if fault_policy is not None else base.fault_policy,
        extra_keys=(*base.extra_keys, *extra_keys),
        traces_sample_rate=base.traces_sample_rate if traces_sample_rate is None else traces_sample_rate,
    )


def set_user(user_id: Any, role: str | None = None) -> None:
    """Identify the current user by id only, plus an optional role context.

    Email, username and IP address are never forwarded; the role travels in a
    separate ``profile`` context.
    """

    sentry_sdk.set_user({"id": user_id})
    if role is not None:
        sentry_sdk.set_context("profile", {"role": role})


def clear_user() -> None:
    """Forget the current user on the telemetry scope."""

    sentry_sdk.set_user(None)


def set_context(name: str, values: Mapping[str, Any]) -> None:
    """Attach a named context after removing denylisted fields from ``values``."""

    sentry_sdk.set_context(name, redact_sensitive_fields(dict(values), policy=active_policy()))


def shutdown(timeout: float | None = None) -> None:
    """Flush pending telemetry (when the SDK was initialised) and drop the runtime."""

    runtime = clear_runtime()
    if runtime is not None and runtime.sdk_initialised:
        sentry_sdk.flush(timeout=timeout)


def summary_info() -> str:
    """Return the metadata banner used by the CLI entry point.

    Examples
    --------
    >>> "version" in summary_info()
    True
    """
    from lib_privacy_scrub import __init__conf__

    lines: list[str] = []
    __init__conf__.print_info(writer=lines.append)
    return "".join(lines)


__all__ = [
    "ScrubRuntime",
    "active_policy",
    "build_hooks",
    "clear_user",
    "current_runtime",
    "init",
    "is_initialised",
    "privacy_before_breadcrumb",
    "privacy_before_send",
    "set_context",
    "set_user",
    "shutdown",
    "summary_info",
]
