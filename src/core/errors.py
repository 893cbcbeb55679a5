"""Relay error taxonomy.

Every error carries the HTTP status it maps to and renders itself as the
``{"error": message, ...}`` body callers receive.
"""
from typing import Any


class RelayError(Exception):
    """Base class for errors surfaced to relay callers."""

    status_code: int = 500

    def __init__(self, message: str, **extra: Any) -> None:
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_payload(self) -> dict[str, Any]:
        """Build the JSON error body."""
        return {"error": self.message, **self.extra}


class ConfigurationError(RelayError):
    """Required setup (the CDP endpoint) is missing."""


class BrowserConnectionError(RelayError):
    """The browser could not be reached or attached to."""


class InvalidRequestError(RelayError):
    """Malformed or missing request fields."""

    status_code = 400


class CommandError(RelayError):
    """A browser action failed or timed out."""
