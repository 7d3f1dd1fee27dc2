"""Runtime state container and access helpers."""

from __future__ import annotations

from dataclasses import dataclass
from threading import RLock

from lib_privacy_scrub.application.use_cases import Hook
from lib_privacy_scrub.domain import DEFAULT_POLICY, ScrubPolicy


@dataclass(slots=True, frozen=True)
class ScrubRuntime:
    """Hooks and policy assembled by :func:`lib_privacy_scrub.runtime.init`.

    Attributes
    ----------
    before_send / before_breadcrumb:
        Callables registered with the telemetry SDK.
    policy:
        Denylist and fault policy the hooks were built with.
    environment:
        Deployment name forwarded to the SDK, if any.
    sdk_initialised:
        ``True`` when a DSN was available and ``sentry_sdk.init`` ran.
    """

    before_send: Hook
    before_breadcrumb: Hook
    policy: ScrubPolicy
    environment: str | None
    sdk_initialised: bool


class _RuntimeSlot:
    """Holds the active :class:`ScrubRuntime`; every access takes the lock."""

    def __init__(self) -> None:
        self._lock = RLock()
        self._runtime: ScrubRuntime | None = None

    def swap(self, runtime: ScrubRuntime | None) -> ScrubRuntime | None:
        with self._lock:
            previous, self._runtime = self._runtime, runtime
            return previous

    def peek(self) -> ScrubRuntime | None:
        with self._lock:
            return self._runtime


_SLOT = _RuntimeSlot()


def set_runtime(runtime: ScrubRuntime) -> None:
    _SLOT.swap(runtime)


def clear_runtime() -> ScrubRuntime | None:
    """Remove the active runtime and return it, or ``None`` when there was none."""

    return _SLOT.swap(None)


def current_runtime() -> ScrubRuntime:
    """Return the active runtime or raise when uninitialised."""

    runtime = _SLOT.peek()
    if runtime is None:
        raise RuntimeError("lib_privacy_scrub.init() must be called before using the runtime API")
    return runtime


def is_initialised() -> bool:
    return _SLOT.peek() is not None


def active_policy() -> ScrubPolicy:
    """Return the policy of the active runtime, falling back to :data:`DEFAULT_POLICY`.

    Examples
    --------
    >>> active_policy() is DEFAULT_POLICY
    True
    """

    runtime = _SLOT.peek()
    return DEFAULT_POLICY if runtime is None else runtime.policy


__all__ = [
    "ScrubRuntime",
    "active_policy",
    "clear_runtime",
    "current_runtime",
    "is_initialised",
    "set_runtime",
]
