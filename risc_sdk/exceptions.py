"""Exception hierarchy for the RISC SDK."""

from __future__ import annotations


class RiscError(Exception):
    """Base exception for all RISC SDK errors.

    Attributes:
        message: Human-readable description of the failure.
        status_code: HTTP status code when the error came from a response.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class RiscConfigurationError(RiscError):
    """Raised when the client was constructed without usable credentials."""


class RiscValidationError(RiscError):
    """Raised when a required operation argument is missing.

    No request is sent when this is raised.
    """


class RiscConnectionError(RiscError):
    """Raised when the SDK cannot reach the RISC API server."""


class RiscTimeoutError(RiscError):
    """Raised when a request does not complete within the client timeout.

    The in-flight request is abandoned; no other error is reported for it.
    """


class RiscAPIError(RiscError):
    """Raised for responses outside the success range.

    The message reads ``"<status code>: <error>"`` where the error is the
    ``error`` field of a JSON body, or the raw body text otherwise.
    """


class RiscResponseError(RiscError):
    """Raised when a successful response body is not valid JSON."""
