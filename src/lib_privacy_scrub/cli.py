"""Command line interface for offline scrubbing.

Purpose
-------
Let operators and CI jobs check what the privacy hooks would send: feed a
captured event or breadcrumb as JSON and print the scrubbed result.

Contents
--------
* :func:`cli` - rich-click group with the global ``--traceback`` and
  ``--use-dotenv`` toggles.
* ``info``, ``scrub-event``, ``scrub-breadcrumb`` subcommands.
* :func:`main` - ``lib_cli_exit_tools`` wrapper used by the console script.
"""

from __future__ import annotations

import json
import os
from collections.abc import Sequence
from typing import IO, Any

import lib_cli_exit_tools
import rich_click as click
from click.core import ParameterSource

from . import __init__conf__
from . import config
from .adapters import RichConsoleAdapter
from .application.ports import ConsolePort
from .domain import FaultPolicy, ScrubPolicy
from .runtime import build_hooks, summary_info

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
_FAULT_POLICY_CHOICES = [member.value for member in FaultPolicy]


@click.group(invoke_without_command=True, context_settings=CLICK_CONTEXT_SETTINGS)
@click.version_option(version=__init__conf__.version, prog_name=__init__conf__.shell_command, message="%(prog)s version %(version)s")
@click.option(
    "--traceback/--no-traceback",
    default=False,
    help="Show full Python tracebacks on errors.",
)
@click.option(
    "--use-dotenv/--no-use-dotenv",
    default=False,
    help=f"Load environment variables from a nearby .env (default: ${config.DOTENV_ENV_VAR}).",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool, use_dotenv: bool) -> None:
    """Scrub telemetry events and breadcrumbs the way the SDK hooks do."""

    if ctx.get_parameter_source("traceback") is not ParameterSource.DEFAULT:
        lib_cli_exit_tools.config.traceback = traceback
        lib_cli_exit_tools.config.traceback_force_color = traceback

    explicit: bool | None = None
    if ctx.get_parameter_source("use_dotenv") is not ParameterSource.DEFAULT:
        explicit = use_dotenv
    if config.should_use_dotenv(explicit=explicit, env_value=os.getenv(config.DOTENV_ENV_VAR)):
        config.enable_dotenv()

    if ctx.invoked_subcommand is None:
        click.echo(summary_info(), nl=False)


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print package metadata."""

    click.echo(summary_info(), nl=False)


def _scrub_options(function: Any) -> Any:
    """Attach the options shared by the scrub commands."""

    function = click.option("--no-color", is_flag=True, default=False, help="Disable coloured JSON output.")(function)
    function = click.option(
        "--extra-key",
        "extra_keys",
        multiple=True,
        help="Additional key fragment to filter (repeatable).",
    )(function)
    function = click.option(
        "--fault-policy",
        type=click.Choice(_FAULT_POLICY_CHOICES),
        default=None,
        help=f"Outcome when scrubbing fails (default: ${config.FAULT_POLICY_ENV_VAR} or best_effort).",
    )(function)
    return click.argument("source", type=click.File("r"), default="-")(function)


@cli.command("scrub-event", context_settings=CLICK_CONTEXT_SETTINGS)
@_scrub_options
def cli_scrub_event(source: IO[str], fault_policy: str | None, extra_keys: tuple[str, ...], no_color: bool) -> None:
    """Read an event as JSON from SOURCE (or stdin) and print it scrubbed."""

    _run_scrub("event", source, fault_policy, extra_keys, RichConsoleAdapter(no_color=no_color), colorize=not no_color)


@cli.command("scrub-breadcrumb", context_settings=CLICK_CONTEXT_SETTINGS)
@_scrub_options
def cli_scrub_breadcrumb(source: IO[str], fault_policy: str | None, extra_keys: tuple[str, ...], no_color: bool) -> None:
    """Read a breadcrumb as JSON from SOURCE (or stdin) and print it scrubbed."""

    _run_scrub("breadcrumb", source, fault_policy, extra_keys, RichConsoleAdapter(no_color=no_color), colorize=not no_color)


def _run_scrub(
    kind: str,
    source: IO[str],
    fault_policy: str | None,
    extra_keys: Sequence[str],
    console: ConsolePort,
    *,
    colorize: bool,
) -> None:
    """Scrub the JSON document in ``source`` and hand the result to ``console``."""

    payload = _load_json(source)
    policy = _resolve_policy(fault_policy, extra_keys)

    def _diagnostic(name: str, details: dict[str, Any]) -> None:
        console.warn(f"{name}: {details['kind']} step {details['step']!r} failed with {details['error']}")

    before_send, before_breadcrumb = build_hooks(policy, diagnostic=_diagnostic)
    hook = before_send if kind == "event" else before_breadcrumb
    console.emit(hook(payload), colorize=colorize)


def _load_json(source: IO[str]) -> Any:
    try:
        return json.load(source)
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"not valid JSON ({exc.msg} at line {exc.lineno})", param_hint="SOURCE") from exc


def _resolve_policy(fault_policy: str | None, extra_keys: Sequence[str]) -> ScrubPolicy:
    try:
        settings = config.load_settings()
    except ValueError as exc:
        raise click.UsageError(str(exc)) from exc
    policy = settings.build_policy().extend(extra_keys)
    if fault_policy is not None:
        policy = policy.with_fault_policy(FaultPolicy.from_name(fault_policy))
    return policy


def main(argv: Sequence[str] | None = None, *, restore_traceback: bool = True) -> int:
    """Run the CLI through ``lib_cli_exit_tools`` and return the exit code.

    Traceback preferences changed by ``--traceback`` are restored afterwards
    unless ``restore_traceback`` is ``False``.
    """

    previous_traceback = lib_cli_exit_tools.config.traceback
    previous_force_color = lib_cli_exit_tools.config.traceback_force_color
    try:
        return lib_cli_exit_tools.run_cli(
            cli,
            argv=list(argv) if argv is not None else None,
            prog_name=__init__conf__.shell_command,
        )
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color


__all__ = ["cli", "main"]
