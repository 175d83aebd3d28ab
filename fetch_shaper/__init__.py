"""
fetch-shaper

A minimal async HTTP client facade: get/post/put/patch/delete methods that
normalize parameters, serialize bodies and shape responses over an
injected transport.
"""

from fetch_shaper.http import (
    FetchResponse,
    RequestShaper,
    RequestsTransport,
    Transport,
    TransportResponse,
    create_shaper,
)
from fetch_shaper.schemas import (
    CallOptions,
    HttpMethod,
    OptionsValidationException,
    RequestDescriptor,
    ResponseEnvelope,
    ResponseFormat,
    ShaperException,
    TransportException,
    UnsupportedFormatException,
)

__version__ = "0.1.0"

__all__ = [
    "RequestShaper",
    "create_shaper",
    "Transport",
    "TransportResponse",
    "RequestsTransport",
    "FetchResponse",
    "CallOptions",
    "HttpMethod",
    "RequestDescriptor",
    "ResponseEnvelope",
    "ResponseFormat",
    "ShaperException",
    "OptionsValidationException",
    "UnsupportedFormatException",
    "TransportException",
]
