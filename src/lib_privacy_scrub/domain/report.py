"""Outcome of scrubbing a single telemetry payload."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(slots=True, frozen=True)
class StepFault:
    """A scrubbing step that raised.

    Only the step name and the exception class are kept; exception messages
    may quote the payload being scrubbed.
    """

    step: str
    error: str


@dataclass(slots=True, frozen=True)
class ScrubReport:
    """Scrubbed payload plus the faults encountered while producing it.

    Attributes
    ----------
    payload:
        Redacted copy of the input, or the input itself when no rule applied.
    faults:
        Steps that raised; empty on a clean run.
    """

    payload: Any
    faults: tuple[StepFault, ...] = field(default_factory=tuple)

    @property
    def clean(self) -> bool:
        """Return ``True`` when every step completed."""
        return not self.faults


__all__ = ["ScrubReport", "StepFault"]
