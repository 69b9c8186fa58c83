"""Custom exception hierarchy for Product Advisor."""

from __future__ import annotations


class AdvisorError(Exception):
    """Base error type."""


class ConfigError(AdvisorError):
    """Raised when configuration is invalid or no transport is configured."""


class TransportError(AdvisorError):
    """Raised when the completion service cannot be reached or rejects a request."""

    def __init__(self, status_code: int | None, body: str) -> None:
        self.status_code = status_code
        self.body = body
        if status_code is None:
            message = f"Transport failure: {body}"
        else:
            message = f"Completion service responded with status {status_code}: {body}"
        super().__init__(message)


class MalformedResponseError(AdvisorError):
    """Raised when a completion response does not have the expected shape."""


class StorageError(AdvisorError):
    pass
