"""Use cases assembling SDK hooks from scrubbers."""

from __future__ import annotations

from .hooks import DiagnosticHook, Hook, create_before_breadcrumb, create_before_send

__all__ = ["DiagnosticHook", "Hook", "create_before_breadcrumb", "create_before_send"]
