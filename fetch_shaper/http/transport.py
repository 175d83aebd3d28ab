"""
HTTP Transport

The transport contract RequestShaper consumes, plus the default
requests-backed implementation.

All network I/O, connection reuse, timeouts and TLS live here (or in
whatever transport the caller injects). The shaper never touches them.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterator, Mapping
from typing import Any, Optional, Protocol, runtime_checkable, TYPE_CHECKING

import requests

from fetch_shaper.schemas.errors import TransportException
from fetch_shaper.schemas.options import RequestDescriptor

if TYPE_CHECKING:
    from fetch_shaper.config import HttpConfig

logger = logging.getLogger(__name__)


@runtime_checkable
class TransportResponse(Protocol):
    """Response object a transport resolves to."""

    status: int
    status_text: str
    ok: bool
    url: str
    headers: Mapping[str, str]

    async def json(self) -> Any: ...

    async def text(self) -> str: ...

    async def blob(self) -> bytes: ...


@runtime_checkable
class Transport(Protocol):
    """Callable performing the actual network request."""

    async def __call__(self, url: str, request: RequestDescriptor) -> TransportResponse: ...


class FetchResponse:
    """
    Adapts a ``requests.Response`` to the TransportResponse contract.

    The underlying response is opened with ``stream=True``; the body is
    only read when one of the decode methods (or iter_bytes) is used.
    """

    def __init__(self, raw: requests.Response) -> None:
        self.raw = raw
        self.status: int = raw.status_code
        self.status_text: str = raw.reason or ""
        self.ok: bool = raw.ok
        self.url: str = str(raw.url)
        self.headers: dict[str, str] = dict(raw.headers)

    async def json(self) -> Any:
        """Parse the body as JSON; requests.JSONDecodeError propagates."""
        return await asyncio.to_thread(self.raw.json)

    async def text(self) -> str:
        return await asyncio.to_thread(lambda: self.raw.text)

    async def blob(self) -> bytes:
        return await asyncio.to_thread(lambda: self.raw.content)

    def iter_bytes(self, chunk_size: int = 8192) -> Iterator[bytes]:
        """Iterate the undecoded body (for the stream format)."""
        return self.raw.iter_content(chunk_size=chunk_size)

    def close(self) -> None:
        self.raw.close()

    def __repr__(self) -> str:
        return f"FetchResponse(status={self.status}, url={self.url!r})"


class RequestsTransport:
    """
    Default transport built on a ``requests.Session``.

    Blocking I/O runs in a worker thread so each call is awaitable.

    Usage:
        transport = RequestsTransport(HttpConfig(timeout=10))
        shaper = RequestShaper(transport)
    """

    def __init__(
        self,
        config: Optional["HttpConfig"] = None,
        *,
        session: Optional[requests.Session] = None,
    ) -> None:
        """
        Initialize the transport.

        Args:
            config: HTTP settings (timeout, user agent, proxy, default headers)
            session: Existing session to use instead of creating one
        """
        if config is None:
            from fetch_shaper.config import HttpConfig
            config = HttpConfig()
        self.config = config
        self._session = session

    def _get_session(self) -> requests.Session:
        """Lazy-create the requests session."""
        if self._session is None:
            session = requests.Session()
            session.headers["User-Agent"] = self.config.user_agent
            session.headers.update(self.config.default_headers)
            if self.config.proxy:
                session.proxies = {
                    "http": self.config.proxy,
                    "https": self.config.proxy,
                }
            self._session = session
        return self._session

    def _send(
        self,
        session: requests.Session,
        url: str,
        request: RequestDescriptor,
    ) -> FetchResponse:
        try:
            raw = session.request(
                method=request.method.value,
                url=url,
                headers=request.headers or None,
                data=request.body,
                timeout=self.config.timeout,
                stream=True,
            )
        except requests.RequestException as e:
            raise TransportException(
                str(e),
                url=url,
                method=request.method.value,
            ) from e

        logger.debug(f"{request.method.value} {url} -> {raw.status_code}")
        return FetchResponse(raw)

    async def __call__(self, url: str, request: RequestDescriptor) -> FetchResponse:
        # Session is created on the event-loop thread, never inside a worker
        session = self._get_session()
        return await asyncio.to_thread(self._send, session, url, request)

    def close(self) -> None:
        """Close the HTTP session."""
        if self._session:
            self._session.close()
            self._session = None

    def __enter__(self) -> "RequestsTransport":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    async def __aenter__(self) -> "RequestsTransport":
        return self

    async def __aexit__(self, *args) -> None:
        self.close()
