"""Pure redaction helpers composed by the event and breadcrumb scrubbers.

Purpose
-------
Provide the primitives that decide what leaves the process: denylisted field
names inside arbitrary JSON-like payloads, email addresses and quoted spans in
free text, and table names hidden inside REST URLs.

Contents
--------
* :func:`redact_sensitive_fields` - cycle-safe deep copy with key filtering.
* :func:`redact_emails` / :func:`redact_quoted` - linear-time text scanners.
* :func:`extract_table_name` / :func:`strip_query` - URL and route helpers.

System Role
-----------
Adapter-layer building blocks with no state. Every function accepts any value
and never raises on unexpected shapes.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlsplit

from lib_privacy_scrub.domain.policy import DEFAULT_POLICY, EMAIL_SENTINEL, FILTERED, ScrubPolicy

# The lookbehind pins each candidate to the start of a run of local-part
# characters, so a long run is scanned once instead of once per offset.
_EMAIL_PATTERN = re.compile(r"(?<![A-Za-z0-9._%+\-])[A-Za-z0-9._%+\-]+@[A-Za-z0-9.\-]+\.[A-Za-z]{2,}")
_DOUBLE_QUOTED_PATTERN = re.compile(r'"[^"\n]*"')
_SINGLE_QUOTED_PATTERN = re.compile(r"(?<!\w)'[^'\n]*'(?!\w)")
_REST_TABLE_PATTERN = re.compile(r"/rest/v\d+/([^/?#]+)")


def redact_sensitive_fields(node: Any, depth: int = 0, *, policy: ScrubPolicy = DEFAULT_POLICY) -> Any:
    """Return a copy of ``node`` with denylisted keys replaced by ``[Filtered]``.

    Why
    ---
    Request bodies attached to telemetry events mirror whatever the app sent to
    its backend: message bodies, notes, contact details. Filtering by key name
    removes those values regardless of their type.

    What
    ----
    Walks ``node`` with an explicit stack, so nesting depth is limited by
    memory only, never by the interpreter's recursion limit.

    Parameters
    ----------
    node:
        Any JSON-like value. Mappings and lists/tuples are rebuilt, everything
        else is returned as-is.
    depth:
        Nesting level of ``node``; callers start at zero.
    policy:
        Denylist to apply.

    Returns
    -------
    Any
        Redacted copy. A mapping or list that refers back to one of its
        ancestors is replaced by the ancestor's copy, so cycles terminate. A
        tuple ancestor has no copy until all of its items are done; a
        reference back to it becomes ``[Filtered]``.

    Examples
    --------
    >>> redact_sensitive_fields({"message": None, "user_id": "1", "a": {"content": 3}})
    {'message': '[Filtered]', 'user_id': '1', 'a': {'content': '[Filtered]'}}
    >>> loop = {"name": "x"}
    >>> loop["self"] = loop
    >>> copy = redact_sensitive_fields(loop)
    >>> copy["self"] is copy
    True
    """
    ancestors: dict[int, Any] = {}
    stack: list[_Frame] = []
    redacted = _enter(node, None, ancestors, stack)
    if redacted is not _PENDING:
        return redacted
    while True:
        frame = stack[-1]
        for key, value in frame.entries:
            if frame.is_mapping and policy.is_sensitive(key):
                frame.store(key, FILTERED)
                continue
            child = _enter(value, key, ancestors, stack)
            if child is _PENDING:
                break
            frame.store(key, child)
        else:
            stack.pop()
            del ancestors[frame.marker]
            finished = frame.finish()
            if not stack:
                return finished
            stack[-1].store(frame.slot, finished)


_PENDING = object()


@dataclass(slots=True)
class _Frame:
    """Container under construction; ``slot`` is its key in the parent frame."""

    marker: int
    entries: Iterator[tuple[Any, Any]]
    target: dict[Any, Any] | list[Any]
    slot: Any
    is_mapping: bool
    is_tuple: bool

    def store(self, key: Any, value: Any) -> None:
        if self.is_mapping:
            self.target[key] = value  # type: ignore[index]
        else:
            self.target.append(value)  # type: ignore[union-attr]

    def finish(self) -> Any:
        return tuple(self.target) if self.is_tuple else self.target


def _enter(node: Any, slot: Any, ancestors: dict[int, Any], stack: list[_Frame]) -> Any:
    """Return the finished value for ``node`` or push a frame and return ``_PENDING``.

    ``ancestors`` maps the ids of containers on the current path to their
    copies; tuples map to ``None`` because their copy only exists once built.
    """
    if not isinstance(node, (Mapping, list, tuple)):
        return node
    marker = id(node)
    if marker in ancestors:
        existing = ancestors[marker]
        return FILTERED if existing is None else existing
    is_mapping = isinstance(node, Mapping)
    if is_mapping:
        target: dict[Any, Any] | list[Any] = {}
        entries: Iterator[tuple[Any, Any]] = iter(node.items())
    else:
        target = []
        entries = ((None, item) for item in node)
    is_tuple = isinstance(node, tuple)
    ancestors[marker] = None if is_tuple else target
    stack.append(_Frame(marker, entries, target, slot, is_mapping, is_tuple))
    return _PENDING


def redact_emails(text: Any) -> Any:
    """Replace every email address in ``text`` with ``[email]``.

    Non-string values are returned unchanged.

    Examples
    --------
    >>> redact_emails("Error for users a@b.io, x.y+z@mail.co.uk.")
    'Error for users [email], [email].'
    >>> redact_emails(None) is None
    True
    """
    if not isinstance(text, str) or "@" not in text:
        return text
    return _EMAIL_PATTERN.sub(EMAIL_SENTINEL, text)


def redact_quoted(text: Any) -> Any:
    """Replace quoted spans inside ``text`` with a quoted ``[Filtered]``.

    Error strings often embed the user input that failed validation or could
    not be saved; the quoted part is dropped while the surrounding wording is
    kept for debugging. Apostrophes inside words are not treated as quotes.

    Examples
    --------
    >>> redact_quoted('Failed to save message: "Help me"')
    'Failed to save message: "[Filtered]"'
    >>> redact_quoted("can't parse 'hello world'")
    "can't parse '[Filtered]'"
    """
    if not isinstance(text, str):
        return text
    text = _DOUBLE_QUOTED_PATTERN.sub(f'"{FILTERED}"', text)
    return _SINGLE_QUOTED_PATTERN.sub(f"'{FILTERED}'", text)


def extract_table_name(url: Any) -> str | None:
    """Return the table addressed by a REST-style URL such as ``/rest/v1/<table>``.

    Examples
    --------
    >>> extract_table_name("https://project.supabase.co/rest/v1/messages?select=*")
    'messages'
    >>> extract_table_name("https://example.com/profile") is None
    True
    >>> extract_table_name(None) is None
    True
    """
    if not isinstance(url, str) or not url:
        return None
    try:
        path = urlsplit(url).path
    except ValueError:
        return None
    match = _REST_TABLE_PATTERN.search(path)
    if match is None:
        return None
    return match.group(1)


def strip_query(route: Any) -> Any:
    """Drop everything from the first ``?`` onward.

    Examples
    --------
    >>> strip_query("/a/b?x=1&y=2")
    '/a/b'
    >>> strip_query("")
    ''
    """
    if not isinstance(route, str):
        return route
    return route.partition("?")[0]


__all__ = [
    "extract_table_name",
    "redact_emails",
    "redact_quoted",
    "redact_sensitive_fields",
    "strip_query",
]
