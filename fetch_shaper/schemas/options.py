"""
Schemas
File: options.py

Purpose: Caller-facing call options and the per-call request descriptor.

CallOptions is what a caller hands to a verb method. RequestOptions is the
verb-normalized form handed to the shared request core, and
RequestDescriptor is exactly what the transport receives. None of these
outlive a single call.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import OptionsValidationException, UnsupportedFormatException


Body = Union[str, bytes]


class HttpMethod(str, Enum):
    """HTTP verbs supported by the shaper."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"

    @property
    def carries_body(self) -> bool:
        """POST, PUT and PATCH send a body; GET and DELETE use a query string."""
        return self in (HttpMethod.POST, HttpMethod.PUT, HttpMethod.PATCH)


class ResponseFormat(str, Enum):
    """Decoding strategy for the response body."""

    JSON = "json"
    TEXT = "text"
    BLOB = "blob"
    STREAM = "stream"


def parse_format(value: ResponseFormat | str | None) -> ResponseFormat:
    """
    Resolve a caller-supplied format to a ResponseFormat.

    None means the default (json). Anything outside json/text/blob/stream
    raises UnsupportedFormatException.
    """
    if value is None:
        return ResponseFormat.JSON
    if isinstance(value, ResponseFormat):
        return value
    try:
        return ResponseFormat(str(value).lower())
    except ValueError:
        allowed = ", ".join(f.value for f in ResponseFormat)
        raise UnsupportedFormatException(
            f"Unsupported response format {value!r} (expected one of: {allowed})",
            requested=str(value),
        ) from None


class CallOptions(BaseModel):
    """
    Verb-specific input for a single call.

    Accepts both the Python field names (``json_body``, ``full_response``)
    and the wire-style names (``json``, ``fullResponse``).
    """

    model_config = ConfigDict(
        extra="forbid",
        populate_by_name=True,
        frozen=True,
    )

    url: str = Field(
        ...,
        description="Absolute URL to send the request to",
        min_length=1,
    )
    params: Optional[dict[str, Any]] = Field(
        default=None,
        description="Query string (GET/DELETE) or form-encoded body (POST/PUT/PATCH)",
    )
    body: Any = Field(
        default=None,
        description="Request payload (POST/PUT/PATCH only)",
    )
    headers: Optional[dict[str, Any]] = Field(
        default=None,
        description="Caller headers; these win over any auto-added header",
    )
    json_body: bool = Field(
        default=False,
        alias="json",
        description="Serialize body as JSON and send Content-Type: application/json",
    )
    full_response: bool = Field(
        default=False,
        alias="fullResponse",
        description="Return a ResponseEnvelope instead of the decoded payload",
    )

    @classmethod
    def coerce(cls, opts: CallOptions | Mapping[str, Any]) -> CallOptions:
        """Accept a CallOptions instance or a plain mapping."""
        if isinstance(opts, CallOptions):
            return opts
        if not isinstance(opts, Mapping):
            raise OptionsValidationException(
                f"Call options must be a mapping or CallOptions, got {type(opts).__name__}"
            )
        try:
            return cls.model_validate(dict(opts))
        except ValidationError as e:
            first = e.errors()[0]
            field_path = ".".join(str(p) for p in first.get("loc", ()))
            raise OptionsValidationException(
                f"Invalid call options: {first.get('msg', str(e))}",
                field_path=field_path or None,
                details={"errors": len(e.errors())},
            ) from e


@dataclass
class RequestOptions:
    """Verb-normalized options handed to the shared request core."""

    method: HttpMethod
    headers: Optional[dict[str, Any]] = None
    body: Optional[Body] = None
    json_body: bool = False
    full_response: bool = False
    # Content-Type the body implies when the caller did not set one.
    body_content_type: Optional[str] = None


@dataclass(frozen=True)
class RequestDescriptor:
    """The canonical request the transport receives."""

    method: HttpMethod
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: Optional[Body] = None

    def header(self, name: str) -> Optional[str]:
        """Case-insensitive header lookup."""
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return None
