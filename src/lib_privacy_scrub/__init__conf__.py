"""Static package metadata surfaced by the CLI banner."""

from __future__ import annotations

from typing import Callable

name = "lib_privacy_scrub"
title = "Privacy scrubbing hooks for telemetry events and breadcrumbs"
version = "0.1.0"
shell_command = "lib_privacy_scrub"


def print_info(writer: Callable[[str], object] | None = None) -> None:
    """Write the metadata banner through ``writer`` (defaults to stdout).

    Examples
    --------
    >>> print_info()  # doctest: +ELLIPSIS
    Info for lib_privacy_scrub:
    ...
    """
    fields = [
        ("name", name),
        ("title", title),
        ("version", version),
        ("shell_command", shell_command),
    ]
    pad = max(len(label) for label, _ in fields)
    lines = [f"Info for {name}:", ""]
    lines.extend(f"    {label.ljust(pad)} = {value}" for label, value in fields)
    text = "\n".join(lines) + "\n"
    if writer is None:
        print(text, end="")
    else:
        writer(text)
