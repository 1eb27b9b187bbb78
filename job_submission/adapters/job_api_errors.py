"""Project-native typed exceptions for backend job API failures."""

from __future__ import annotations

from typing import Final

CONNECTION_ERROR_CODE: Final[int] = 0


class JobApiError(Exception):
    """Base exception for structured backend API failures.

    Attributes:
        code: Numeric API error code (HTTP status, or 0 for transport failures).
        message: Human-readable error message.
    """

    def __init__(self, message: str, code: int):
        super().__init__(message)
        self.code = code
        self.message = message

    def error_to_payload(self) -> dict[str, object]:
        """Return the `{code, message}` payload shown next to a retry action.

        Returns:
            dict[str, object]: Structured error payload.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """

        return {"code": self.code, "message": self.message}


class JobApiConnectionError(JobApiError, ConnectionError):
    """Transport-level connectivity failure while talking to the backend."""

    def __init__(self, message: str = "Connection error"):
        super().__init__(message=message, code=CONNECTION_ERROR_CODE)


class JobApiTimeoutError(JobApiError, TimeoutError):
    """Backend request exceeded the configured timeout."""

    def __init__(self, message: str = "Request timed out"):
        super().__init__(message=message, code=CONNECTION_ERROR_CODE)


class JobApiNotFoundError(JobApiError, LookupError):
    """Backend reported that the requested resource does not exist (`404`)."""


class JobApiResponseError(JobApiError, ValueError):
    """Backend returned a successful status with an undecodable payload."""
