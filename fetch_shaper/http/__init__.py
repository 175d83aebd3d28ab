"""
HTTP Client Module

Request shaping over a pluggable transport.
"""

from .client import (
    RequestShaper,
    append_query,
    create_shaper,
    encode_params,
    merge_headers,
    serialize_json,
)
from .transport import FetchResponse, RequestsTransport, Transport, TransportResponse

__all__ = [
    "RequestShaper",
    "create_shaper",
    "encode_params",
    "append_query",
    "serialize_json",
    "merge_headers",
    "Transport",
    "TransportResponse",
    "RequestsTransport",
    "FetchResponse",
]
