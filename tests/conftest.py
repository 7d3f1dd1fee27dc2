from __future__ import annotations

from collections.abc import Iterator
from typing import Any

import pytest
import sentry_sdk

from lib_privacy_scrub import config
from lib_privacy_scrub.runtime import _state

_SETTINGS_ENV = (
    config.DOTENV_ENV_VAR,
    config.DSN_ENV_VAR,
    config.ENVIRONMENT_ENV_VAR,
    config.TRACES_RATE_ENV_VAR,
    config.FAULT_POLICY_ENV_VAR,
    config.EXTRA_KEYS_ENV_VAR,
)


class _Recorder:
    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def record(self, name: str, /, **payload: Any) -> None:
        self.calls.append((name, payload))

    def named(self, name: str) -> list[dict[str, Any]]:
        return [payload for call, payload in self.calls if call == name]


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Start every test without scrubbing settings or an active runtime."""

    for name in _SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)
    config._reset_dotenv_state_for_testing()
    _state.clear_runtime()
    yield
    _state.clear_runtime()
    config._reset_dotenv_state_for_testing()


@pytest.fixture
def recorder() -> _Recorder:
    return _Recorder()


@pytest.fixture
def fake_sdk(monkeypatch: pytest.MonkeyPatch, recorder: _Recorder) -> _Recorder:
    """Replace the Sentry SDK entry points used by the runtime with recorders."""

    monkeypatch.setattr(sentry_sdk, "init", lambda **options: recorder.record("init", **options))
    monkeypatch.setattr(sentry_sdk, "set_user", lambda value: recorder.record("set_user", value=value))
    monkeypatch.setattr(sentry_sdk, "set_context", lambda name, value: recorder.record("set_context", name=name, value=value))
    monkeypatch.setattr(sentry_sdk, "flush", lambda timeout=None: recorder.record("flush", timeout=timeout))
    return recorder
