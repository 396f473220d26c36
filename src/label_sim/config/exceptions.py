"""Custom exceptions for balance configuration."""

from typing import Any


class ConfigurationError(Exception):
    """Raised when a balance table is missing, malformed or incomplete."""

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []
