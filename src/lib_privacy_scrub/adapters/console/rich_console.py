"""Rich-powered console adapter implementing :class:`ConsolePort`.

Purpose
-------
Pretty-print scrubbed payloads for the ``scrub-event`` and
``scrub-breadcrumb`` commands, and surface scrubbing faults on stderr.

Contents
--------
* :class:`RichConsoleAdapter` - adapter constructed by the CLI.
"""

from __future__ import annotations

from typing import Any

from rich.console import Console

from lib_privacy_scrub.application.ports.console import ConsolePort


class RichConsoleAdapter(ConsolePort):
    """Render payloads as JSON using Rich."""

    def __init__(
        self,
        *,
        console: Console | None = None,
        error_console: Console | None = None,
        force_color: bool = False,
        no_color: bool = False,
    ) -> None:
        """Configure the output and error consoles with colour overrides."""
        self._console = console if console is not None else Console(force_terminal=force_color, no_color=no_color)
        if error_console is not None:
            self._error_console = error_console
        else:
            self._error_console = Console(stderr=True, force_terminal=force_color, no_color=no_color)
        self._no_color = no_color

    def emit(self, payload: Any, *, colorize: bool) -> None:
        """Print ``payload`` as indented JSON.

        Examples
        --------
        >>> from io import StringIO
        >>> console = Console(file=StringIO(), record=True)
        >>> RichConsoleAdapter(console=console).emit({"message": "[Filtered]"}, colorize=False)
        >>> '"[Filtered]"' in console.export_text()
        True
        """
        highlight = colorize and not self._no_color
        self._console.print_json(data=payload, highlight=highlight, default=str)

    def warn(self, message: str) -> None:
        """Print ``message`` to the error console."""
        self._error_console.print(message, style="yellow", highlight=False)


__all__ = ["RichConsoleAdapter"]
