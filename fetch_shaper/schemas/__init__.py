"""
Schemas

Purpose: Export the public API for the schemas module.
"""

# Error models and exceptions
from .errors import (
    ErrorCodes,
    OptionsValidationException,
    ShaperError,
    ShaperException,
    TransportException,
    UnsupportedFormatException,
)

# Call options and request descriptor
from .options import (
    CallOptions,
    HttpMethod,
    RequestDescriptor,
    RequestOptions,
    ResponseFormat,
    parse_format,
)

# Response envelope
from .envelope import ResponseEnvelope

__all__ = [
    # Errors
    "ErrorCodes",
    "ShaperError",
    "ShaperException",
    "OptionsValidationException",
    "UnsupportedFormatException",
    "TransportException",
    # Options
    "CallOptions",
    "HttpMethod",
    "RequestDescriptor",
    "RequestOptions",
    "ResponseFormat",
    "parse_format",
    # Envelope
    "ResponseEnvelope",
]
