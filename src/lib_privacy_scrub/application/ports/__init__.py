"""Protocols the application layer depends on."""

from __future__ import annotations

from .console import ConsolePort
from .scrubber import ScrubberPort

__all__ = ["ConsolePort", "ScrubberPort"]
