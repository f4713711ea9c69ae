"""Domain exception hierarchy for the Apex chat engine."""

from __future__ import annotations


class ApexChatError(RuntimeError):
    """Base class for all domain-level chat errors."""


class ConfigError(ApexChatError):
    """Raised when the API credential is not configured."""


class ReadError(ApexChatError):
    """Raised when an attachment cannot be read or decoded."""


class ApiError(ApexChatError):
    """Raised for non-success responses and malformed completion payloads."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class NetworkError(ApexChatError):
    """Raised when the completion endpoint cannot be reached."""


class ConfigValidationError(ApexChatError):
    """Raised when configuration cannot be validated safely."""
