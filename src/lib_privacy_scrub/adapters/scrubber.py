"""Event and breadcrumb scrubbers.

Purpose
-------
Apply the redaction helpers to the fields of outbound telemetry events and
breadcrumbs so personal data is removed before the transport sees them.

Contents
--------
* :class:`EventScrubber` - redacts request bodies, messages, user data and
  exception values.
* :class:`BreadcrumbScrubber` - replaces HTTP URLs with table names and strips
  query strings from navigation routes.

System Role
-----------
Concrete :class:`ScrubberPort` implementations. Each scrubbing step runs under
its own guard and reports failures instead of raising, leaving the fault
policy to the hook use cases.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, MutableMapping
from typing import Any

from lib_privacy_scrub.adapters.redaction import (
    extract_table_name,
    redact_emails,
    redact_quoted,
    redact_sensitive_fields,
    strip_query,
)
from lib_privacy_scrub.application.ports.scrubber import ScrubberPort
from lib_privacy_scrub.domain.policy import DEFAULT_POLICY, ScrubPolicy
from lib_privacy_scrub.domain.report import ScrubReport, StepFault

Step = Callable[[MutableMapping[str, Any]], None]


def _run_steps(payload: Mapping[str, Any], steps: tuple[tuple[str, Step], ...]) -> ScrubReport:
    """Apply ``steps`` to a shallow copy of ``payload``, collecting faults.

    Steps replace top-level keys of the copy with new objects and never mutate
    containers reachable from ``payload``.
    """
    scrubbed = dict(payload)
    faults: list[StepFault] = []
    for name, step in steps:
        try:
            step(scrubbed)
        except Exception as exc:  # noqa: BLE001
            faults.append(StepFault(step=name, error=type(exc).__name__))
    return ScrubReport(payload=scrubbed, faults=tuple(faults))


class EventScrubber(ScrubberPort):
    """Redact personal data from error and message events.

    Parameters
    ----------
    policy:
        Denylist applied to ``request.data``.

    Examples
    --------
    >>> scrubber = EventScrubber()
    >>> event = {"message": "Error for a@b.io", "user": {"id": "u1", "email": "a@b.io"}}
    >>> report = scrubber.scrub(event)
    >>> report.payload
    {'message': 'Error for [email]', 'user': {'id': 'u1'}}
    >>> event["user"]["email"]
    'a@b.io'
    """

    def __init__(self, *, policy: ScrubPolicy = DEFAULT_POLICY) -> None:
        self._policy = policy
        self._steps: tuple[tuple[str, Step], ...] = (
            ("request.data", self._scrub_request_data),
            ("message", self._scrub_message),
            ("logentry", self._scrub_logentry),
            ("user", self._scrub_user),
            ("exception.values", self._scrub_exception_values),
        )

    @property
    def policy(self) -> ScrubPolicy:
        return self._policy

    def scrub(self, payload: Any) -> ScrubReport:
        """Return a report holding the redacted event.

        Values that are not mappings have no fields to redact and are
        reported back untouched.
        """
        if not isinstance(payload, Mapping):
            return ScrubReport(payload=payload)
        return _run_steps(payload, self._steps)

    def _scrub_request_data(self, event: MutableMapping[str, Any]) -> None:
        request = event.get("request")
        if not isinstance(request, Mapping) or "data" not in request:
            return
        rebuilt = dict(request)
        rebuilt["data"] = redact_sensitive_fields(request["data"], policy=self._policy)
        event["request"] = rebuilt

    @staticmethod
    def _scrub_message(event: MutableMapping[str, Any]) -> None:
        message = event.get("message")
        if isinstance(message, str):
            event["message"] = redact_emails(message)

    @staticmethod
    def _scrub_logentry(event: MutableMapping[str, Any]) -> None:
        logentry = event.get("logentry")
        if not isinstance(logentry, Mapping):
            return
        rebuilt = dict(logentry)
        for key in ("message", "formatted"):
            if isinstance(rebuilt.get(key), str):
                rebuilt[key] = redact_emails(rebuilt[key])
        params = rebuilt.get("params")
        if isinstance(params, (list, tuple)):
            rebuilt["params"] = [redact_emails(param) for param in params]
        event["logentry"] = rebuilt

    @staticmethod
    def _scrub_user(event: MutableMapping[str, Any]) -> None:
        user = event.get("user")
        if not isinstance(user, Mapping):
            return
        event["user"] = {"id": user["id"]} if "id" in user else {}

    @staticmethod
    def _scrub_exception_values(event: MutableMapping[str, Any]) -> None:
        exception = event.get("exception")
        if not isinstance(exception, Mapping):
            return
        values = exception.get("values")
        if not isinstance(values, (list, tuple)):
            return
        scrubbed_values: list[Any] = []
        for entry in values:
            if isinstance(entry, Mapping):
                entry = dict(entry)
                if isinstance(entry.get("value"), str):
                    entry["value"] = redact_quoted(redact_emails(entry["value"]))
            scrubbed_values.append(entry)
        rebuilt = dict(exception)
        rebuilt["values"] = scrubbed_values
        event["exception"] = rebuilt


class BreadcrumbScrubber(ScrubberPort):
    """Redact URLs and route parameters from breadcrumbs.

    Examples
    --------
    >>> crumb = {"category": "navigation", "data": {"from": "/a", "to": "/b?id=7"}}
    >>> BreadcrumbScrubber().scrub(crumb).payload["data"]
    {'from': '/a', 'to': '/b'}
    """

    def __init__(self) -> None:
        self._rules: dict[str, Step] = {
            "http": self._scrub_http,
            "navigation": self._scrub_navigation,
        }

    def scrub(self, payload: Any) -> ScrubReport:
        """Return a report holding the redacted breadcrumb.

        Breadcrumbs without a mapping ``data`` field, or with a category that
        has no rule, are reported back as the same object.
        """
        if not isinstance(payload, Mapping):
            return ScrubReport(payload=payload)
        category = payload.get("category")
        rule = self._rules.get(category) if isinstance(category, str) else None
        if rule is None or not isinstance(payload.get("data"), Mapping):
            return ScrubReport(payload=payload)
        return _run_steps(payload, ((f"{category}.data", rule),))

    @staticmethod
    def _scrub_http(breadcrumb: MutableMapping[str, Any]) -> None:
        data = dict(breadcrumb["data"])
        table = extract_table_name(data.pop("url", None))
        if table is not None:
            data["table"] = table
        breadcrumb["data"] = data

    @staticmethod
    def _scrub_navigation(breadcrumb: MutableMapping[str, Any]) -> None:
        data = dict(breadcrumb["data"])
        for key in ("from", "to"):
            if key in data:
                data[key] = strip_query(data[key])
        breadcrumb["data"] = data


__all__ = ["BreadcrumbScrubber", "EventScrubber"]
