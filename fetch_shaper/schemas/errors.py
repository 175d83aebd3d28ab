"""
Schemas
File: errors.py

Purpose: Error taxonomy for request shaping.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.

Transport failures and body-decode failures are NOT represented here:
they propagate to the caller exactly as the transport raised them.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Option Errors
    OPTIONS_VALIDATION_ERROR = "OPTIONS_VALIDATION_ERROR"
    UNSUPPORTED_FORMAT = "UNSUPPORTED_FORMAT"

    # Transport Errors
    TRANSPORT_ERROR = "TRANSPORT_ERROR"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class ShaperError(BaseModel):
    """
    Base error model for structured error communication.

    Lets callers serialize a failure (e.g. into a job log) without
    holding on to the exception object.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.OPTIONS_VALIDATION_ERROR],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "ShaperException":
        """Convert this error model to a raised exception."""
        return ShaperException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class ShaperException(Exception):
    """
    Base exception for all fetch-shaper errors.

    Carries structured error information and can be converted
    to/from ShaperError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "SHAPER_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> ShaperError:
        """Convert this exception to a ShaperError model."""
        return ShaperError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class OptionsValidationException(ShaperException):
    """Exception raised when call options are invalid for the chosen verb."""

    def __init__(
        self,
        message: str,
        field_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if field_path:
            full_details["field_path"] = field_path
        super().__init__(
            message=message,
            code=ErrorCodes.OPTIONS_VALIDATION_ERROR,
            details=full_details,
            retryable=False,
        )


class UnsupportedFormatException(ShaperException):
    """Exception raised when a response format is not json/text/blob/stream."""

    def __init__(
        self,
        message: str,
        requested: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if requested is not None:
            full_details["requested"] = requested
        super().__init__(
            message=message,
            code=ErrorCodes.UNSUPPORTED_FORMAT,
            details=full_details,
            retryable=False,
        )


class TransportException(ShaperException):
    """Exception raised by the bundled transport when a request cannot be sent."""

    def __init__(
        self,
        message: str,
        url: str | None = None,
        method: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if url:
            full_details["url"] = url
        if method:
            full_details["method"] = method
        super().__init__(
            message=message,
            code=ErrorCodes.TRANSPORT_ERROR,
            details=full_details,
            retryable=True,
        )
