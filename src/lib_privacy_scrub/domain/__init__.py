"""Domain value objects describing redaction policy and scrub outcomes."""

from __future__ import annotations

from .policy import DEFAULT_POLICY, EMAIL_SENTINEL, FILTERED, FaultPolicy, ScrubPolicy
from .report import ScrubReport, StepFault

__all__ = [
    "DEFAULT_POLICY",
    "EMAIL_SENTINEL",
    "FILTERED",
    "FaultPolicy",
    "ScrubPolicy",
    "ScrubReport",
    "StepFault",
]
