"""Exceptions shared by the API layer and the upstream clients."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Raised when a required server-side setting (e.g. an API key) is missing."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
