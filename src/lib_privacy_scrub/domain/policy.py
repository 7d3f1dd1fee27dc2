"""Redaction policy value objects shared by every scrubber.

Purpose
-------
Centralise the sentinel strings, the field-name denylist, and the fault policy
so the redaction helpers and the hook use cases agree on what "sensitive"
means.

Contents
--------
* :data:`FILTERED` / :data:`EMAIL_SENTINEL` - replacement tokens.
* :class:`FaultPolicy` - what a hook returns when its own code raises.
* :class:`ScrubPolicy` - immutable denylist plus fault policy.
* :data:`DEFAULT_POLICY` - policy used by the ready-made hooks.

System Role
-----------
Innermost layer; imported by adapters and use cases, depends on nothing but
the standard library.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

FILTERED = "[Filtered]"
"""Replacement for values stored under denylisted keys or quoted spans."""

EMAIL_SENTINEL = "[email]"
"""Replacement for email addresses found inside free text."""

_EXACT_KEYS = frozenset({"message", "content"})
_KEY_FRAGMENTS = ("email", "phone", "password", "token", "secret", "note")


class FaultPolicy(Enum):
    """Behaviour of a hook when scrubbing itself fails."""

    BEST_EFFORT = "best_effort"
    DROP = "drop"

    @classmethod
    def from_name(cls, name: str) -> "FaultPolicy":
        """Resolve ``name`` case-insensitively.

        Examples
        --------
        >>> FaultPolicy.from_name(" Drop ") is FaultPolicy.DROP
        True
        >>> FaultPolicy.from_name("best-effort") is FaultPolicy.BEST_EFFORT
        True
        """
        normalized = name.strip().lower().replace("-", "_")
        for member in cls:
            if member.value == normalized:
                return member
        raise ValueError(f"Unknown fault policy: {name!r}")


@dataclass(slots=True, frozen=True)
class ScrubPolicy:
    """Immutable description of which mapping keys are sensitive.

    Attributes
    ----------
    exact_keys:
        Key names filtered only on an exact, case-sensitive match.
    key_fragments:
        Substrings; any key containing one of them is filtered.
    fault_policy:
        Outcome for an event or breadcrumb whose scrubbing raised.

    Examples
    --------
    >>> DEFAULT_POLICY.is_sensitive("message")
    True
    >>> DEFAULT_POLICY.is_sensitive("message_id")
    False
    >>> DEFAULT_POLICY.is_sensitive("user_email")
    True
    >>> DEFAULT_POLICY.is_sensitive("Email")
    False
    """

    exact_keys: frozenset[str] = _EXACT_KEYS
    key_fragments: tuple[str, ...] = _KEY_FRAGMENTS
    fault_policy: FaultPolicy = field(default=FaultPolicy.BEST_EFFORT)

    def __post_init__(self) -> None:
        object.__setattr__(self, "exact_keys", frozenset(self.exact_keys))
        object.__setattr__(self, "key_fragments", tuple(self.key_fragments))
        if any(not fragment for fragment in self.key_fragments):
            raise ValueError("key fragments must not be empty")

    def is_sensitive(self, key: Any) -> bool:
        """Return ``True`` when ``key`` names a field that must be filtered."""
        if not isinstance(key, str):
            return False
        if key in self.exact_keys:
            return True
        return any(fragment in key for fragment in self.key_fragments)

    def extend(self, extra_fragments: Iterable[str]) -> "ScrubPolicy":
        """Return a copy whose denylist also covers ``extra_fragments``.

        Blank entries are ignored and duplicates collapse.

        Examples
        --------
        >>> policy = DEFAULT_POLICY.extend(["ssn", " ", "token"])
        >>> policy.is_sensitive("ssn_last4")
        True
        >>> policy.key_fragments.count("token")
        1
        """
        merged = list(self.key_fragments)
        for fragment in extra_fragments:
            cleaned = fragment.strip()
            if cleaned and cleaned not in merged:
                merged.append(cleaned)
        return replace(self, key_fragments=tuple(merged))

    def with_fault_policy(self, fault_policy: FaultPolicy) -> "ScrubPolicy":
        """Return a copy using ``fault_policy``."""
        return replace(self, fault_policy=fault_policy)


DEFAULT_POLICY = ScrubPolicy()


__all__ = [
    "DEFAULT_POLICY",
    "EMAIL_SENTINEL",
    "FILTERED",
    "FaultPolicy",
    "ScrubPolicy",
]
