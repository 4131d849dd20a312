"""
exceptions.py — UIBuilder Unified Error Hierarchy

All UIBuilder-specific exceptions live here. Every layer of the stack
raises typed subclasses of UIBuilderError — never bare Exception.

Import from here, not from individual modules:
    from uibuilder.exceptions import TransportError, PlanParseError

Hierarchy:
    UIBuilderError
    ├── AgentError
    │   └── PlanParseError
    ├── TransportError
    ├── HistoryError
    └── ConfigError

ConfigError (a UIBuilderError) lives in uibuilder.config.settings next to
the validation that raises it.
"""

from __future__ import annotations

from typing import Optional


# ─────────────────────────────────────────────────────────────────────────────
# Root
# ─────────────────────────────────────────────────────────────────────────────

class UIBuilderError(Exception):
    """Base class for all UIBuilder exceptions."""


# ─────────────────────────────────────────────────────────────────────────────
# Agent layer
# ─────────────────────────────────────────────────────────────────────────────

class AgentError(UIBuilderError):
    """Base for pipeline orchestration errors."""


class PlanParseError(AgentError):
    """The planning stage reply could not be coerced into structured data."""

    def __init__(self, raw: str, message: str = "Failed to parse plan") -> None:
        self.raw = raw
        super().__init__(message)


# ─────────────────────────────────────────────────────────────────────────────
# Transport layer
# ─────────────────────────────────────────────────────────────────────────────

class TransportError(UIBuilderError):
    """
    A chat-completion round-trip failed.

    status_code is the upstream HTTP status, or None when the endpoint was
    never reached (DNS, refused connection, timeout).
    """

    def __init__(
        self,
        message: str,
        provider: str = "",
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code


# ─────────────────────────────────────────────────────────────────────────────
# History layer
# ─────────────────────────────────────────────────────────────────────────────

class HistoryError(UIBuilderError):
    """A version-history operation was given an unusable argument."""


__all__ = [
    "UIBuilderError",
    "AgentError",
    "PlanParseError",
    "TransportError",
    "HistoryError",
]
