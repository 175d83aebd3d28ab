"""
Schemas
File: envelope.py

Purpose: Full-response wrapper returned when the caller asks for it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, TYPE_CHECKING

if TYPE_CHECKING:
    from fetch_shaper.http.transport import TransportResponse


@dataclass
class ResponseEnvelope:
    """
    Transport response metadata plus the decoded payload under ``data``.

    For the ``stream`` format ``data`` is the transport response itself.
    """
    status: int
    status_text: str = ""
    ok: bool = False
    url: str = ""
    headers: dict[str, str] = field(default_factory=dict)
    data: Any = None

    @classmethod
    def from_response(cls, response: "TransportResponse", data: Any) -> "ResponseEnvelope":
        """Copy the metadata fields off a transport response."""
        return cls(
            status=response.status,
            status_text=response.status_text,
            ok=response.ok,
            url=response.url,
            headers=dict(response.headers),
            data=data,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "status_text": self.status_text,
            "ok": self.ok,
            "url": self.url,
            "headers": dict(self.headers),
            "data": self.data,
        }
