"""Console port describing how scrubbed payloads are shown to operators.

Purpose
-------
Let the CLI render scrubbed events and breadcrumbs without depending on a
particular terminal library.

Contents
--------
* :class:`ConsolePort` - runtime-checkable protocol with ``emit`` and
  ``warn`` methods.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ConsolePort(Protocol):
    """Render scrubbed payloads to an interactive console."""

    def emit(self, payload: Any, *, colorize: bool) -> None:
        """Render ``payload`` as JSON with optional colour control."""

    def warn(self, message: str) -> None:
        """Report a scrubbing problem without interrupting output."""


__all__ = ["ConsolePort"]
