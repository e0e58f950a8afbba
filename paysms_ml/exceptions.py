"""Exception hierarchy and error codes.

Pipeline stages catch these per item or per cluster and degrade to a safe
default; none of them is fatal to a batch.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Stable error codes for logs and API responses."""

    EXTERNAL_SERVICE_FAILED = "EXTERNAL_SERVICE_FAILED"
    EMBEDDING_FAILED = "EMBEDDING_FAILED"
    LLM_FAILED = "LLM_FAILED"
    TELEMETRY_FAILED = "TELEMETRY_FAILED"
    STORAGE_FAILED = "STORAGE_FAILED"
    EXTRACTION_FAILED = "EXTRACTION_FAILED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class PaySmsError(Exception):  # NOQA: N818
    """Base exception for the payment SMS service.

    Attributes
    ----------
    message
        Human-readable error message
    code
        Stable error code for programmatic handling
    details
        Optional additional context (logged, never shown to end users)
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code.value!r}, "
            f"details={self.details!r})"
        )


class ExternalServiceError(PaySmsError):
    """Raised when the embedding, LLM or telemetry backend fails."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.EXTERNAL_SERVICE_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class StorageError(PaySmsError):
    """Raised when the pattern store cannot read or write."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.STORAGE_FAILED, details)


class ExtractionError(PaySmsError):
    """Raised by strict extraction helpers when no positive amount exists."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.EXTRACTION_FAILED, details)
