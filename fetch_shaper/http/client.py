"""
HTTP Client

RequestShaper: per-verb convenience methods that normalize parameters,
serialize bodies and shape responses over an injected transport.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Optional, Union, TYPE_CHECKING
from urllib.parse import urlencode

from fetch_shaper.schemas.envelope import ResponseEnvelope
from fetch_shaper.schemas.errors import OptionsValidationException
from fetch_shaper.schemas.options import (
    CallOptions,
    HttpMethod,
    RequestDescriptor,
    RequestOptions,
    ResponseFormat,
    parse_format,
)

if TYPE_CHECKING:
    from fetch_shaper.config import RuntimeConfig
    from .transport import Transport, TransportResponse

logger = logging.getLogger(__name__)


JSON_CONTENT_TYPE = "application/json"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded;charset=UTF-8"

OptionsInput = Union[CallOptions, Mapping[str, Any]]
FormatInput = Union[ResponseFormat, str, None]


# =============================================================================
# Encoding helpers
# =============================================================================

def _param_value(value: Any) -> Any:
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


def encode_params(params: Mapping[str, Any]) -> str:
    """
    Form-urlencode a params mapping.

    Spaces become ``+``, booleans render as ``true``/``false``, ``None``
    values are dropped and list/tuple values repeat the key.
    """
    pairs: list[tuple[str, Any]] = []
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            value = [_param_value(v) for v in value if v is not None]
        else:
            value = _param_value(value)
        pairs.append((str(key), value))
    return urlencode(pairs, doseq=True)


def append_query(url: str, query: str) -> str:
    """Append an encoded query string so the URL carries exactly one ``?``."""
    if not query:
        return url
    base, hash_sign, fragment = url.partition("#")
    if "?" not in base:
        base = f"{base}?{query}"
    elif base.endswith(("?", "&")):
        base = f"{base}{query}"
    else:
        base = f"{base}&{query}"
    return f"{base}{hash_sign}{fragment}"


def serialize_json(body: Any) -> str:
    """Compact JSON serialization (``{"a":1}``), non-ASCII left unescaped."""
    try:
        return json.dumps(body, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise OptionsValidationException(
            f"Body is not JSON serializable: {e}",
            field_path="body",
        ) from e


def merge_headers(
    defaults: Mapping[str, str],
    caller: Optional[Mapping[str, Any]],
) -> dict[str, str]:
    """
    Merge auto-added headers with caller headers.

    Caller headers win on collision; keys compare case-insensitively.
    """
    merged = dict(defaults)
    for key, value in (caller or {}).items():
        for existing in [k for k in merged if k.lower() == str(key).lower()]:
            del merged[existing]
        merged[str(key)] = str(value)
    return merged


# =============================================================================
# RequestShaper
# =============================================================================

class RequestShaper:
    """
    Minimal HTTP client facade over an injected transport.

    Usage:
        shaper = RequestShaper(RequestsTransport())

        data = await shaper.get({"url": "https://api.example.com/items", "params": {"q": "1"}})
        env = await shaper.post(
            {"url": "https://api.example.com/items", "body": {"n": 5}, "json": True,
             "fullResponse": True},
        )
        env.status, env.data

    Every call is independent: nothing is cached or shared between calls,
    and transport or decode failures propagate unchanged.
    """

    def __init__(
        self,
        transport: "Transport",
        *,
        default_format: FormatInput = ResponseFormat.JSON,
    ) -> None:
        """
        Initialize the shaper.

        Args:
            transport: Async callable ``(url, RequestDescriptor) -> response``
            default_format: Format used when a call does not pass one
        """
        self._transport = transport
        self.default_format = parse_format(default_format)

    @property
    def transport(self) -> "Transport":
        return self._transport

    # -------------------------------------------------------------------------
    # Verb methods
    # -------------------------------------------------------------------------

    async def get(self, opts: OptionsInput, response_format: FormatInput = None) -> Any:
        """Send a GET; ``params`` become the query string."""
        return await self._dispatch(HttpMethod.GET, opts, response_format)

    async def delete(self, opts: OptionsInput, response_format: FormatInput = None) -> Any:
        """Send a DELETE; ``params`` become the query string."""
        return await self._dispatch(HttpMethod.DELETE, opts, response_format)

    async def post(self, opts: OptionsInput, response_format: FormatInput = None) -> Any:
        """Send a POST; ``params`` become a form body, ``body`` a JSON body when ``json`` is set."""
        return await self._dispatch(HttpMethod.POST, opts, response_format)

    async def put(self, opts: OptionsInput, response_format: FormatInput = None) -> Any:
        """Send a PUT; same body rules as post()."""
        return await self._dispatch(HttpMethod.PUT, opts, response_format)

    async def patch(self, opts: OptionsInput, response_format: FormatInput = None) -> Any:
        """Send a PATCH; same body rules as post()."""
        return await self._dispatch(HttpMethod.PATCH, opts, response_format)

    def describe(self, method: HttpMethod | str, opts: OptionsInput) -> RequestDescriptor:
        """Return the request a verb method would send for ``opts``, without sending it."""
        if not isinstance(method, HttpMethod):
            try:
                method = HttpMethod(str(method).upper())
            except ValueError:
                raise OptionsValidationException(
                    f"Unsupported HTTP method {method!r}",
                    field_path="method",
                ) from None
        url, options = self._prepare(method, CallOptions.coerce(opts))
        return self._build_descriptor(url, options)

    # -------------------------------------------------------------------------
    # Shared core
    # -------------------------------------------------------------------------

    async def request(
        self,
        url: str,
        options: RequestOptions,
        response_format: FormatInput = None,
    ) -> Any:
        """
        Send a request and shape the response.

        Args:
            url: Final URL (query string already applied)
            options: Verb-normalized options
            response_format: json | text | blob | stream

        Returns:
            The decoded payload, or a ResponseEnvelope when
            ``options.full_response`` is set. For ``stream`` the transport
            response itself takes the payload's place and is never decoded.
        """
        fmt = self._resolve_format(response_format)
        descriptor = self._build_descriptor(url, options)

        logger.debug(f"{descriptor.method.value} {url}")
        response = await self._transport(url, descriptor)

        if fmt is ResponseFormat.STREAM:
            data: Any = response
        else:
            data = await self._decode(response, fmt)

        if options.full_response:
            return ResponseEnvelope.from_response(response, data)
        return data

    async def _dispatch(
        self,
        method: HttpMethod,
        opts: OptionsInput,
        response_format: FormatInput,
    ) -> Any:
        # Validate everything before the transport is touched
        fmt = self._resolve_format(response_format)
        url, options = self._prepare(method, CallOptions.coerce(opts))
        return await self.request(url, options, fmt)

    def _resolve_format(self, response_format: FormatInput) -> ResponseFormat:
        if response_format is None:
            return self.default_format
        return parse_format(response_format)

    @staticmethod
    async def _decode(response: "TransportResponse", fmt: ResponseFormat) -> Any:
        decoder = getattr(response, fmt.value)
        return await decoder()

    # -------------------------------------------------------------------------
    # Option normalization
    # -------------------------------------------------------------------------

    def _prepare(self, method: HttpMethod, opts: CallOptions) -> tuple[str, RequestOptions]:
        if method.carries_body:
            return opts.url, self._body_options(method, opts)
        return self._query_url(opts), self._query_options(method, opts)

    @staticmethod
    def _query_url(opts: CallOptions) -> str:
        if not opts.params:
            return opts.url
        return append_query(opts.url, encode_params(opts.params))

    @staticmethod
    def _query_options(method: HttpMethod, opts: CallOptions) -> RequestOptions:
        if opts.body is not None:
            raise OptionsValidationException(
                f"{method.value} requests cannot carry a body",
                field_path="body",
            )
        return RequestOptions(
            method=method,
            headers=opts.headers,
            # GET never announces a JSON body; DELETE keeps the caller's flag
            json_body=opts.json_body if method is HttpMethod.DELETE else False,
            full_response=opts.full_response,
        )

    @staticmethod
    def _body_options(method: HttpMethod, opts: CallOptions) -> RequestOptions:
        body: Optional[Union[str, bytes]] = None
        content_type: Optional[str] = None

        # Precedence, lowest first: raw body, params form body, JSON body
        if opts.body is not None and not opts.json_body:
            if not isinstance(opts.body, (str, bytes)):
                raise OptionsValidationException(
                    "body must be str or bytes unless json is set",
                    field_path="body",
                )
            body = opts.body
        if opts.params is not None:
            body = encode_params(opts.params)
            content_type = FORM_CONTENT_TYPE
        if opts.body is not None and opts.json_body:
            body = serialize_json(opts.body)
            content_type = None

        return RequestOptions(
            method=method,
            headers=opts.headers,
            body=body,
            json_body=opts.json_body,
            full_response=opts.full_response,
            body_content_type=content_type,
        )

    @staticmethod
    def _build_descriptor(url: str, options: RequestOptions) -> RequestDescriptor:
        defaults: dict[str, str] = {}
        if options.json_body:
            defaults["Content-Type"] = JSON_CONTENT_TYPE
        elif options.body_content_type:
            defaults["Content-Type"] = options.body_content_type

        return RequestDescriptor(
            method=options.method,
            url=url,
            headers=merge_headers(defaults, options.headers),
            body=options.body,
        )


def create_shaper(config: Optional["RuntimeConfig"] = None) -> RequestShaper:
    """Build a RequestShaper over the default requests-backed transport."""
    from fetch_shaper.config import get_default_config
    from .transport import RequestsTransport

    config = config or get_default_config()
    return RequestShaper(
        RequestsTransport(config.http),
        default_format=config.http.default_format,
    )
