"""Configuration loading: ``.env`` support and environment settings.

Purpose
-------
Resolve the handful of knobs the scrubbing runtime exposes (Sentry DSN,
environment name, fault policy, extra denylist fragments, trace sampling)
from the process environment, optionally seeded from a nearby ``.env`` file.

Contents
--------
* :data:`DOTENV_ENV_VAR` - toggle enabling ``.env`` loading.
* :func:`enable_dotenv` / :func:`should_use_dotenv` - python-dotenv helpers.
* :class:`ScrubSettings` / :func:`load_settings` - parsed environment values.

System Role
-----------
Outer-layer configuration consumed by :mod:`lib_privacy_scrub.runtime` and
the CLI. Parsing errors surface here, never inside the hooks.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from threading import Lock

from dotenv import load_dotenv

from lib_privacy_scrub.domain.policy import DEFAULT_POLICY, FaultPolicy, ScrubPolicy

DOTENV_ENV_VAR = "PRIVACY_SCRUB_USE_DOTENV"
DSN_ENV_VAR = "SENTRY_DSN"
ENVIRONMENT_ENV_VAR = "SENTRY_ENV"
TRACES_RATE_ENV_VAR = "SENTRY_TRACES_SAMPLE_RATE"
FAULT_POLICY_ENV_VAR = "PRIVACY_SCRUB_FAULT_POLICY"
EXTRA_KEYS_ENV_VAR = "PRIVACY_SCRUB_EXTRA_KEYS"

_TRUTHY = {"1", "true", "yes", "on"}

_DOTENV_LOCK = Lock()
_DOTENV_LOADED: Path | None = None
_DOTENV_ATTEMPTED = False


def should_use_dotenv(*, explicit: bool | None, env_value: str | None) -> bool:
    """Decide whether ``.env`` loading is enabled.

    An explicit CLI flag wins; otherwise the :data:`DOTENV_ENV_VAR` toggle is
    interpreted as a boolean string.

    Examples
    --------
    >>> should_use_dotenv(explicit=False, env_value="1")
    False
    >>> should_use_dotenv(explicit=None, env_value="yes")
    True
    >>> should_use_dotenv(explicit=None, env_value=None)
    False
    """
    if explicit is not None:
        return explicit
    if env_value is None:
        return False
    return env_value.strip().lower() in _TRUTHY


def enable_dotenv(search_from: Path | None = None) -> Path | None:
    """Load the nearest ``.env`` walking upward from ``search_from``.

    Existing environment variables keep precedence. The lookup runs once per
    process; later calls return the first result.

    Returns
    -------
    Path | None
        Resolved path of the loaded file, or ``None`` when none was found.
    """
    global _DOTENV_LOADED, _DOTENV_ATTEMPTED
    with _DOTENV_LOCK:
        if _DOTENV_ATTEMPTED:
            return _DOTENV_LOADED
        _DOTENV_ATTEMPTED = True
        start = (search_from or Path.cwd()).resolve()
        for directory in (start, *start.parents):
            candidate = directory / ".env"
            if candidate.is_file():
                load_dotenv(candidate, override=False)
                _DOTENV_LOADED = candidate
                break
        return _DOTENV_LOADED


def _reset_dotenv_state_for_testing() -> None:
    """Forget previous :func:`enable_dotenv` calls."""
    global _DOTENV_LOADED, _DOTENV_ATTEMPTED
    with _DOTENV_LOCK:
        _DOTENV_LOADED = None
        _DOTENV_ATTEMPTED = False


@dataclass(slots=True, frozen=True)
class ScrubSettings:
    """Values resolved from the environment.

    Attributes
    ----------
    dsn:
        Telemetry DSN; ``None`` leaves the SDK uninitialised.
    environment:
        Deployment name forwarded to the SDK.
    fault_policy:
        Behaviour of the hooks when scrubbing faults.
    extra_keys:
        Additional denylist fragments.
    traces_sample_rate:
        Performance sampling rate in ``[0, 1]``.
    """

    dsn: str | None = None
    environment: str | None = None
    fault_policy: FaultPolicy = FaultPolicy.BEST_EFFORT
    extra_keys: tuple[str, ...] = field(default_factory=tuple)
    traces_sample_rate: float = 0.0

    def build_policy(self, base: ScrubPolicy = DEFAULT_POLICY) -> ScrubPolicy:
        """Return ``base`` extended with :attr:`extra_keys` and :attr:`fault_policy`.

        Examples
        --------
        >>> ScrubSettings(extra_keys=("ssn",)).build_policy().is_sensitive("ssn")
        True
        """
        return base.extend(self.extra_keys).with_fault_policy(self.fault_policy)


def load_settings(environ: Mapping[str, str] | None = None) -> ScrubSettings:
    """Parse :class:`ScrubSettings` from ``environ`` (defaults to ``os.environ``).

    Raises
    ------
    ValueError
        When a variable holds a value that cannot be interpreted; the message
        names the variable.

    Examples
    --------
    >>> settings = load_settings({"PRIVACY_SCRUB_FAULT_POLICY": "drop", "PRIVACY_SCRUB_EXTRA_KEYS": "ssn, dob"})
    >>> settings.fault_policy.value, settings.extra_keys
    ('drop', ('ssn', 'dob'))
    """
    env = os.environ if environ is None else environ
    return ScrubSettings(
        dsn=_blank_to_none(env.get(DSN_ENV_VAR)),
        environment=_blank_to_none(env.get(ENVIRONMENT_ENV_VAR)),
        fault_policy=_parse_fault_policy(env.get(FAULT_POLICY_ENV_VAR)),
        extra_keys=parse_extra_keys(env.get(EXTRA_KEYS_ENV_VAR)),
        traces_sample_rate=_parse_sample_rate(env.get(TRACES_RATE_ENV_VAR)),
    )


def parse_extra_keys(raw: str | None) -> tuple[str, ...]:
    """Split a comma-separated list of key fragments, dropping blanks.

    Examples
    --------
    >>> parse_extra_keys(" ssn,,dob ")
    ('ssn', 'dob')
    >>> parse_extra_keys(None)
    ()
    """
    if not raw:
        return ()
    return tuple(chunk.strip() for chunk in raw.split(",") if chunk.strip())


def _blank_to_none(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value.strip()


def _parse_fault_policy(raw: str | None) -> FaultPolicy:
    if raw is None or not raw.strip():
        return FaultPolicy.BEST_EFFORT
    try:
        return FaultPolicy.from_name(raw)
    except ValueError as exc:
        raise ValueError(f"{FAULT_POLICY_ENV_VAR} must be 'best_effort' or 'drop', got {raw!r}") from exc


def _parse_sample_rate(raw: str | None) -> float:
    if raw is None or not raw.strip():
        return 0.0
    try:
        rate = float(raw)
    except ValueError as exc:
        raise ValueError(f"{TRACES_RATE_ENV_VAR} must be a number, got {raw!r}") from exc
    if not 0.0 <= rate <= 1.0:
        raise ValueError(f"{TRACES_RATE_ENV_VAR} must be between 0 and 1, got {rate}")
    return rate


__all__ = [
    "DOTENV_ENV_VAR",
    "DSN_ENV_VAR",
    "ENVIRONMENT_ENV_VAR",
    "EXTRA_KEYS_ENV_VAR",
    "FAULT_POLICY_ENV_VAR",
    "ScrubSettings",
    "TRACES_RATE_ENV_VAR",
    "enable_dotenv",
    "load_settings",
    "parse_extra_keys",
    "should_use_dotenv",
]
