"""
Requests Transport Unit Tests
Tests for fetch_shaper/http/transport.py

No network: the requests.Session is replaced by StubSession.
"""
import asyncio

import pytest
import requests

from fetch_shaper.config import HttpConfig
from fetch_shaper.http import FetchResponse, RequestShaper, RequestsTransport
from fetch_shaper.http.transport import Transport, TransportResponse
from fetch_shaper.schemas import HttpMethod, RequestDescriptor, TransportException
from fixtures import StubSession, make_requests_response


URL = "https://api.x/y"


def _descriptor(**kwargs) -> RequestDescriptor:
    kwargs.setdefault("method", HttpMethod.GET)
    kwargs.setdefault("url", URL)
    return RequestDescriptor(**kwargs)


class TestRequestsTransport:
    """Tests for RequestsTransport.__call__()."""

    @pytest.mark.asyncio
    async def test_forwards_descriptor_to_session(self):
        session = StubSession()
        transport = RequestsTransport(HttpConfig(timeout=5.0), session=session)

        await transport(URL, _descriptor(
            method=HttpMethod.POST,
            headers={"Content-Type": "application/json"},
            body='{"a":1}',
        ))

        call = session.calls[0]
        assert call["method"] == "POST"
        assert call["url"] == URL
        assert call["headers"] == {"Content-Type": "application/json"}
        assert call["data"] == '{"a":1}'
        assert call["timeout"] == 5.0
        assert call["stream"] is True

    @pytest.mark.asyncio
    async def test_empty_headers_sent_as_none(self):
        session = StubSession()
        transport = RequestsTransport(session=session)

        await transport(URL, _descriptor())

        assert session.calls[0]["headers"] is None

    @pytest.mark.asyncio
    async def test_request_exception_wrapped(self):
        cause = requests.ConnectionError("connection refused")
        transport = RequestsTransport(session=StubSession(error=cause))

        with pytest.raises(TransportException) as exc_info:
            await transport(URL, _descriptor(method=HttpMethod.DELETE))

        error = exc_info.value
        assert error.__cause__ is cause
        assert error.retryable is True
        assert error.details == {"url": URL, "method": "DELETE"}

    @pytest.mark.asyncio
    async def test_returns_fetch_response(self):
        session = StubSession(make_requests_response(
            b"created",
            status_code=201,
            reason="Created",
            headers={"X-Id": "9"},
        ))
        transport = RequestsTransport(session=session)

        response = await transport(URL, _descriptor())

        assert isinstance(response, FetchResponse)
        assert response.status == 201
        assert response.status_text == "Created"
        assert response.ok is True
        assert response.url == URL
        assert response.headers == {"X-Id": "9"}

    @pytest.mark.asyncio
    async def test_concurrent_first_calls_share_one_session(self, monkeypatch):
        created = []

        class CountingSession(StubSession):
            def __init__(self):
                super().__init__()
                self.headers = {}
                self.proxies = {}
                created.append(self)

        monkeypatch.setattr(requests, "Session", CountingSession)
        transport = RequestsTransport()

        await asyncio.gather(
            transport(URL, _descriptor()),
            transport(URL, _descriptor()),
            transport(URL, _descriptor()),
        )

        assert len(created) == 1
        assert len(created[0].calls) == 3

    def test_satisfies_protocols(self):
        transport = RequestsTransport(session=StubSession())

        assert isinstance(transport, Transport)
        assert isinstance(FetchResponse(make_requests_response()), TransportResponse)

    def test_lazy_session_applies_config(self):
        transport = RequestsTransport(HttpConfig(
            user_agent="agent/1",
            proxy="http://proxy:8080",
            default_headers={"X-Client": "tests"},
        ))

        session = transport._get_session()
        try:
            assert session.headers["User-Agent"] == "agent/1"
            assert session.headers["X-Client"] == "tests"
            assert session.proxies == {"http": "http://proxy:8080", "https": "http://proxy:8080"}
            assert transport._get_session() is session
        finally:
            transport.close()

    def test_close_releases_session(self):
        session = StubSession()

        with RequestsTransport(session=session):
            pass

        assert session.closed is True

    @pytest.mark.asyncio
    async def test_async_context_manager_closes(self):
        session = StubSession()

        async with RequestsTransport(session=session):
            pass

        assert session.closed is True


class TestFetchResponse:
    """Tests for FetchResponse decode methods."""

    @pytest.mark.asyncio
    async def test_json(self):
        response = FetchResponse(make_requests_response(b'{"a":[1,2]}'))

        assert await response.json() == {"a": [1, 2]}

    @pytest.mark.asyncio
    async def test_text(self):
        response = FetchResponse(make_requests_response("héllo".encode("utf-8")))

        assert await response.text() == "héllo"

    @pytest.mark.asyncio
    async def test_blob(self):
        response = FetchResponse(make_requests_response(b"\x00\x01"))

        assert await response.blob() == b"\x00\x01"

    @pytest.mark.asyncio
    async def test_invalid_json_propagates(self):
        response = FetchResponse(make_requests_response(b"<html>"))

        with pytest.raises(requests.JSONDecodeError):
            await response.json()

    def test_iter_bytes(self):
        response = FetchResponse(make_requests_response(b"abcdef"))

        assert list(response.iter_bytes(chunk_size=4)) == [b"abcd", b"ef"]


class TestShaperOverRequestsTransport:
    """RequestShaper wired to RequestsTransport with a stubbed session."""

    @pytest.mark.asyncio
    async def test_post_json_end_to_end(self):
        session = StubSession(make_requests_response(b'{"id":1}', status_code=201))
        shaper = RequestShaper(RequestsTransport(session=session))

        envelope = await shaper.post(
            {"url": URL, "body": {"n": 5}, "json": True, "fullResponse": True}
        )

        call = session.calls[0]
        assert call["method"] == "POST"
        assert call["data"] == '{"n":5}'
        assert call["headers"] == {"Content-Type": "application/json"}
        assert envelope.status == 201
        assert envelope.data == {"id": 1}

    @pytest.mark.asyncio
    async def test_stream_format_returns_fetch_response(self):
        session = StubSession(make_requests_response(b"chunked-body"))
        shaper = RequestShaper(RequestsTransport(session=session))

        response = await shaper.get({"url": URL}, "stream")

        assert isinstance(response, FetchResponse)
        assert b"".join(response.iter_bytes()) == b"chunked-body"
