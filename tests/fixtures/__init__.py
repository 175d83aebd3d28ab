"""
Test fixtures package for fetch-shaper tests.

Usage:
    from fixtures import FakeTransport, FakeResponse

    async def test_something():
        transport = FakeTransport(FakeResponse({"a": 1}))
        shaper = RequestShaper(transport)
"""

from .transport_fixtures import (
    FakeResponse,
    FakeTransport,
    StubSession,
    make_requests_response,
)

__all__ = [
    "FakeResponse",
    "FakeTransport",
    "StubSession",
    "make_requests_response",
]
