from enum import Enum


class ErrorKind(str, Enum):
    """Classification every boundary failure is reduced to."""

    VALIDATION = "validation"
    NETWORK = "network"
    TIMEOUT = "timeout"
    SERVER = "server"
    CLIENT = "client"


class AnalysisError(Exception):
    """Base exception for all analysis-service boundary errors."""

    kind: ErrorKind = ErrorKind.SERVER


class AnalysisValidationError(AnalysisError):
    """Raised when a file is rejected locally, before any request is sent."""

    kind = ErrorKind.VALIDATION


class AnalysisNetworkError(AnalysisError):
    """Raised when no response reached the client."""

    kind = ErrorKind.NETWORK


class AnalysisTimeoutError(AnalysisNetworkError):
    """Raised when the service did not answer within the operation's bound."""

    kind = ErrorKind.TIMEOUT


class AnalysisServiceError(AnalysisError):
    """Raised when the service answered with a failure."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status

    @property
    def kind(self) -> ErrorKind:  # type: ignore[override]
        if self.status is not None and 400 <= self.status < 500:
            return ErrorKind.CLIENT
        return ErrorKind.SERVER


class AnalysisPayloadError(AnalysisServiceError):
    """Raised when a service response does not match the expected shape."""


UNEXPECTED_ERROR_MESSAGE = "Unexpected error - please try again"


def describe_failure(exc: Exception) -> str:
    """User-facing text for an operation that raised ``exc``."""
    if isinstance(exc, AnalysisError):
        return str(exc)
    return UNEXPECTED_ERROR_MESSAGE
