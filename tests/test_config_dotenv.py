from __future__ import annotations

import os
from pathlib import Path

import pytest
from click.testing import CliRunner

from lib_privacy_scrub import cli as cli_module
from lib_privacy_scrub import config as scrub_config
from lib_privacy_scrub.domain.policy import FaultPolicy


def test_enable_dotenv_populates_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Loading the nearest .env injects values into the process environment."""

    nested = tmp_path / "nested"
    nested.mkdir()
    env_file = tmp_path / ".env"
    env_file.write_text("SENTRY_ENV=dotenv-env\n")
    monkeypatch.chdir(nested)

    loaded = scrub_config.enable_dotenv()

    assert loaded == env_file.resolve()
    assert os.environ["SENTRY_ENV"] == "dotenv-env"
    assert scrub_config.load_settings().environment == "dotenv-env"

    os.environ.pop("SENTRY_ENV", None)


def test_enable_dotenv_respects_existing_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Existing environment variables keep precedence over .env entries."""

    nested = tmp_path / "nested"
    nested.mkdir()
    (tmp_path / ".env").write_text("SENTRY_ENV=dotenv-env\n")
    monkeypatch.chdir(nested)
    monkeypatch.setenv("SENTRY_ENV", "real-env")

    result = scrub_config.enable_dotenv()

    assert result is not None
    assert os.environ["SENTRY_ENV"] == "real-env"


def test_enable_dotenv_runs_once(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    first = tmp_path / "first"
    second = tmp_path / "second"
    first.mkdir()
    second.mkdir()
    (first / ".env").write_text("SENTRY_ENV=first\n")
    (second / ".env").write_text("SENTRY_ENV=second\n")

    assert scrub_config.enable_dotenv(first) == (first / ".env").resolve()
    assert scrub_config.enable_dotenv(second) == (first / ".env").resolve()
    assert os.environ["SENTRY_ENV"] == "first"

    monkeypatch.delenv("SENTRY_ENV", raising=False)


def test_enable_dotenv_without_file_returns_none(tmp_path: Path) -> None:
    empty = tmp_path / "a" / "b"
    empty.mkdir(parents=True)

    if any((directory / ".env").is_file() for directory in (empty, *empty.parents)):
        pytest.skip("an ancestor of the temporary directory holds a .env file")

    assert scrub_config.enable_dotenv(empty) is None


@pytest.mark.parametrize(
    "explicit, env_value, expected",
    [
        (True, None, True),
        (False, "1", False),
        (None, "1", True),
        (None, " Yes ", True),
        (None, "off", False),
        (None, "", False),
        (None, None, False),
    ],
)
def test_should_use_dotenv(explicit: bool | None, env_value: str | None, expected: bool) -> None:
    assert scrub_config.should_use_dotenv(explicit=explicit, env_value=env_value) is expected


def test_cli_dotenv_toggle_precedence(monkeypatch: pytest.MonkeyPatch) -> None:
    """CLI flag wins over environment toggle when deciding whether to load .env."""

    runner = CliRunner()

    calls: list[tuple[tuple[object, ...], dict[str, object]]] = []

    def record_enable(*args: object, **kwargs: object) -> None:
        calls.append((args, kwargs))

    monkeypatch.setattr(scrub_config, "enable_dotenv", record_enable)

    result = runner.invoke(cli_module.cli, ["--use-dotenv", "info"])
    assert result.exit_code == 0
    assert len(calls) == 1

    calls.clear()
    result = runner.invoke(cli_module.cli, ["info"], env={scrub_config.DOTENV_ENV_VAR: "1"})
    assert result.exit_code == 0
    assert len(calls) == 1

    calls.clear()
    result = runner.invoke(cli_module.cli, ["--no-use-dotenv", "info"], env={scrub_config.DOTENV_ENV_VAR: "1"})
    assert result.exit_code == 0
    assert calls == []

    result = runner.invoke(cli_module.cli, ["info"])
    assert result.exit_code == 0
    assert calls == []


def test_load_settings_defaults() -> None:
    settings = scrub_config.load_settings({})

    assert settings == scrub_config.ScrubSettings()
    assert settings.fault_policy is FaultPolicy.BEST_EFFORT
    assert settings.traces_sample_rate == 0.0


def test_load_settings_parses_every_variable() -> None:
    settings = scrub_config.load_settings(
        {
            scrub_config.DSN_ENV_VAR: " https://key@sentry.example.com/3 ",
            scrub_config.ENVIRONMENT_ENV_VAR: "staging",
            scrub_config.TRACES_RATE_ENV_VAR: "1",
            scrub_config.FAULT_POLICY_ENV_VAR: "DROP",
            scrub_config.EXTRA_KEYS_ENV_VAR: "ssn, , dob",
        }
    )

    assert settings.dsn == "https://key@sentry.example.com/3"
    assert settings.environment == "staging"
    assert settings.traces_sample_rate == 1.0
    assert settings.fault_policy is FaultPolicy.DROP
    assert settings.extra_keys == ("ssn", "dob")


def test_load_settings_treats_blank_values_as_unset() -> None:
    settings = scrub_config.load_settings({scrub_config.DSN_ENV_VAR: "  ", scrub_config.FAULT_POLICY_ENV_VAR: ""})

    assert settings.dsn is None
    assert settings.fault_policy is FaultPolicy.BEST_EFFORT


@pytest.mark.parametrize(
    "name, value, message",
    [
        (scrub_config.FAULT_POLICY_ENV_VAR, "sometimes", "must be 'best_effort' or 'drop'"),
        (scrub_config.TRACES_RATE_ENV_VAR, "often", "must be a number"),
        (scrub_config.TRACES_RATE_ENV_VAR, "2", "must be between 0 and 1"),
    ],
)
def test_load_settings_rejects_invalid_values(name: str, value: str, message: str) -> None:
    with pytest.raises(ValueError, match=message) as excinfo:
        scrub_config.load_settings({name: value})

    assert name in str(excinfo.value)


def test_build_policy_applies_extra_keys_and_fault_policy() -> None:
    policy = scrub_config.ScrubSettings(extra_keys=("ssn",), fault_policy=FaultPolicy.DROP).build_policy()

    assert policy.is_sensitive("ssn")
    assert policy.is_sensitive("email")
    assert policy.fault_policy is FaultPolicy.DROP
