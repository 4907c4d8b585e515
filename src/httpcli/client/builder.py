"""Fluent, re-executable HTTP request builder.

:class:`RequestBuilder` accumulates a request through chained mutations and
turns it into a wire request only when it is executed:

- **GET** parameters are appended to the URL as a query string.
- **POST** parameters become a form body, unless an explicit body was set,
  in which case the explicit body wins.
- Every other method sends the explicit body, if any, and ignores the
  parameters.

The outcome of :meth:`RequestBuilder.execute` is memoized: executing again
returns the same :class:`~httpcli.client.response.ResponseWrapper` without a
network call until :meth:`RequestBuilder.rearm` is called.

Example::

    import httpcli

    resp = httpcli.get("https://api.example.com/search").set_param("q", "cats").execute()
    hits = resp.decode_json()

The transport is :mod:`httpx`.  A builder either borrows a caller-owned
:class:`httpx.Client` (:meth:`RequestBuilder.with_client`) or opens its own
for the duration of each send, configured from
:func:`~httpcli.config.resolve_client_config`.
"""

from __future__ import annotations

import contextlib
import json
from dataclasses import dataclass
from typing import Any, ContextManager, Mapping, Optional, Union
from urllib.parse import quote_plus

import httpx

from httpcli.client.response import ResponseWrapper
from httpcli.config import resolve_client_config
from httpcli.exceptions import InvalidBodyTypeError, TransportError, URLParseError
from httpcli.models import ClientConfig, HTTPMethod, Protocol, RequestState
from httpcli.output import get_output

_FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
_JSON_CONTENT_TYPE = "application/json"


@dataclass(frozen=True)
class _Execution:
    """Outcome of a successful send: the memoized response and what was sent."""

    response: ResponseWrapper
    url: str
    request: httpx.Request


class RequestBuilder:
    """Mutable builder for a deferred, reusable HTTP request.

    Every ``set_*`` and ``with_*`` method returns the builder itself so calls
    can be chained.  Nothing is validated or encoded until :meth:`send`.

    Args:
        url: Base URL.  Query parameters set on the builder are appended to
            it for GET requests.
        method: HTTP method, as an :class:`~httpcli.models.HTTPMethod` or a
            case-insensitive string.
        protocol: Protocol-version metadata shown by :meth:`info`.
    """

    def __init__(
        self,
        url: str,
        method: Union[HTTPMethod, str] = HTTPMethod.GET,
        protocol: Protocol = Protocol.HTTP1,
    ) -> None:
        self._url = url
        self._method = method if isinstance(method, HTTPMethod) else HTTPMethod(method.upper())
        self._protocol = protocol
        self._headers = httpx.Headers()
        self._params: dict[str, str] = {}
        self._url_encode = True
        self._body: Optional[bytes] = None
        self._content_length = 0
        self._execution: Optional[_Execution] = None
        self._last_request: Optional[httpx.Request] = None
        self._client: Optional[httpx.Client] = None
        self._transport: Optional[httpx.BaseTransport] = None
        self._config: Optional[ClientConfig] = None
        self._insecure = False

    def __repr__(self) -> str:
        return f"<RequestBuilder {self._method.value} {self._url!r} [{self.state.value}]>"

    # ------------------------------------------------------------------ #
    # Read-only state
    # ------------------------------------------------------------------ #

    @property
    def method(self) -> HTTPMethod:
        return self._method

    @property
    def protocol(self) -> Protocol:
        return self._protocol

    @property
    def headers(self) -> httpx.Headers:
        """Headers of the pending request."""
        return self._headers

    @property
    def params(self) -> dict[str, str]:
        """A copy of the current parameter mapping."""
        return dict(self._params)

    @property
    def encode_params(self) -> bool:
        """Whether parameters are percent-escaped (off once a JSON body is set)."""
        return self._url_encode

    @property
    def content_length(self) -> int:
        """Length in bytes of the explicit body, ``0`` if none was set."""
        return self._content_length

    @property
    def state(self) -> RequestState:
        if self._execution is None:
            return RequestState.PENDING
        return RequestState.EXECUTED

    @property
    def response(self) -> Optional[ResponseWrapper]:
        """The memoized response, or ``None`` while the builder is pending."""
        if self._execution is None:
            return None
        return self._execution.response

    @property
    def request(self) -> Optional[httpx.Request]:
        """The last :class:`httpx.Request` handed to the transport, if any."""
        return self._last_request

    # ------------------------------------------------------------------ #
    # Fluent configuration
    # ------------------------------------------------------------------ #

    def set_url(self, url: str) -> RequestBuilder:
        """Replace the base URL.  Validation happens at send time."""
        self._url = url
        return self

    def set_param(self, key: Any, value: Any) -> RequestBuilder:
        """Set a single parameter, overwriting any previous value for *key*."""
        self._params[str(key)] = str(value)
        return self

    def set_params(self, params: Mapping[Any, Any]) -> RequestBuilder:
        """Merge *params* into the parameter mapping; last write per key wins."""
        for key, value in params.items():
            self._params[str(key)] = str(value)
        return self

    def set_header(self, key: str, value: str) -> RequestBuilder:
        """Set a header, replacing any existing value for *key*."""
        self._headers[key] = value
        return self

    def set_headers(self, headers: Mapping[str, str]) -> RequestBuilder:
        """Set several headers, each replacing any existing value."""
        for key, value in headers.items():
            self._headers[key] = value
        return self

    def set_raw_body(self, payload: Union[bytes, bytearray, str]) -> RequestBuilder:
        """Attach an explicit body, stored verbatim.

        An explicit body takes precedence over parameter-derived form bodies.
        ``str`` payloads are encoded as UTF-8.

        Raises:
            InvalidBodyTypeError: If *payload* is neither bytes nor str.
        """
        if isinstance(payload, str):
            data = payload.encode("utf-8")
        elif isinstance(payload, (bytes, bytearray)):
            data = bytes(payload)
        else:
            raise InvalidBodyTypeError(
                f"Request body must be bytes or str, got {type(payload).__name__}"
            )
        self._body = data
        self._content_length = len(data)
        return self

    def set_json_body(self, content: Any) -> RequestBuilder:
        """Attach a JSON body and set ``Content-Type: application/json``.

        Strings and bytes are sent as they are; any other value is serialised
        with :func:`json.dumps`.  Parameter escaping is switched off, so any
        parameters left on the builder no longer shape the body.
        """
        if not isinstance(content, (str, bytes, bytearray)):
            content = json.dumps(content)
        self.set_raw_body(content)
        self.set_header("Content-Type", _JSON_CONTENT_TYPE)
        self._url_encode = False
        return self

    # ------------------------------------------------------------------ #
    # Transport configuration
    # ------------------------------------------------------------------ #

    def with_client(self, client: httpx.Client) -> RequestBuilder:
        """Send through a caller-owned client.  The builder never closes it."""
        if self._insecure:
            get_output().warning(
                "with_insecure_tls() has no effect on a caller-supplied httpx.Client"
            )
        self._client = client
        return self

    def with_transport(self, transport: httpx.BaseTransport) -> RequestBuilder:
        """Build the owned client around *transport* (e.g. :class:`httpx.MockTransport`)."""
        self._transport = transport
        return self

    def with_config(self, config: ClientConfig) -> RequestBuilder:
        """Use *config* instead of resolving one from env and the user config file."""
        self._config = config
        return self

    def with_insecure_tls(self) -> RequestBuilder:
        """Skip certificate verification and disable response compression."""
        if self._client is not None:
            get_output().warning(
                "with_insecure_tls() has no effect on a caller-supplied httpx.Client"
            )
        self._insecure = True
        return self

    # ------------------------------------------------------------------ #
    # Derived URL and body
    # ------------------------------------------------------------------ #

    def _param_string(self) -> str:
        pairs = []
        for key, value in self._params.items():
            if self._url_encode:
                key, value = quote_plus(key), quote_plus(value)
            pairs.append(f"{key}={value}")
        return "&".join(pairs)

    def _build_get_url(self) -> str:
        query = self._param_string()
        if not query:
            return self._url
        separator = "&" if "?" in self._url else "?"
        return f"{self._url}{separator}{query}"

    def get_url(self) -> str:
        """Return the request URL.

        GET requests always reflect the current URL and parameters, even
        after execution.  Other methods return the URL that was actually sent
        while a response is memoized, and the base URL otherwise.
        """
        if self._method is HTTPMethod.GET:
            return self._build_get_url()
        if self._execution is not None:
            return self._execution.url
        return self._url

    def get_body(self) -> Optional[bytes]:
        """Return the explicit body, or for POST the parameter-encoded form body.

        The form body is computed on every call and never stored.
        """
        if self._body is not None:
            return self._body
        if self._method is HTTPMethod.POST:
            return self._param_string().encode("utf-8")
        return None

    # ------------------------------------------------------------------ #
    # Execution
    # ------------------------------------------------------------------ #

    def execute(self) -> ResponseWrapper:
        """Return the memoized response, sending the request first if needed.

        Raises:
            URLParseError: If the finalized URL is malformed.
            TransportError: If the transport fails.
            BodyReadError: If the response body cannot be read.
        """
        if self._execution is not None:
            return self._execution.response
        return self.send()

    def rearm(self) -> RequestBuilder:
        """Drop the memoized response so the next :meth:`execute` hits the network."""
        self._execution = None
        return self

    def send(self) -> ResponseWrapper:
        """Finalize the request, send it and memoize the fully-read response.

        Raises:
            URLParseError: If the finalized URL is malformed.
            TransportError: If the transport fails.
            BodyReadError: If the response body cannot be read.
        """
        dest = self._url
        body = self._body
        headers = httpx.Headers(self._headers)
        if self._params:
            if self._method is HTTPMethod.GET:
                dest = self._build_get_url()
            elif self._method is HTTPMethod.POST and body is None:
                body = self._param_string().encode("utf-8")
                if self._url_encode:
                    headers["Content-Type"] = _FORM_CONTENT_TYPE

        url = _parse_url(dest)
        output = get_output()
        output.debug(f"{self._method.value} {url} {self._protocol.value}")

        with self._open_client() as client:
            request = client.build_request(
                self._method.value, url, headers=headers, content=body
            )
            self._last_request = request
            try:
                raw = client.send(request, stream=True)
            except httpx.RequestError as exc:
                output.debug(f"Transport error: {exc}")
                raise TransportError(f"{self._method.value} {url} failed: {exc}") from exc
            response = ResponseWrapper(raw)
            response.receive_bytes()

        output.debug(f"{response.status()} from {url}")
        self._execution = _Execution(response=response, url=str(url), request=request)
        return response

    def _open_client(self) -> ContextManager[httpx.Client]:
        if self._client is not None:
            return contextlib.nullcontext(self._client)

        config = self._config or resolve_client_config()
        client_headers: dict[str, str] = {}
        if config.user_agent:
            client_headers["User-Agent"] = config.user_agent
        if self._insecure:
            client_headers["Accept-Encoding"] = "identity"
        return httpx.Client(
            timeout=config.timeout,
            verify=False if self._insecure else config.verify_ssl,
            follow_redirects=config.follow_redirects,
            headers=client_headers,
            transport=self._transport,
        )

    # ------------------------------------------------------------------ #
    # Diagnostics
    # ------------------------------------------------------------------ #

    def info(self) -> str:
        """Human-readable dump of the request and, if memoized, its response.

        Layout: ``METHOD URL PROTOCOL``, one ``name:value`` line per header,
        then the body and the response summary, each after a blank line.
        Once executed, the headers and body are those actually sent.
        """
        if self._execution is not None:
            header_items = self._execution.request.headers.multi_items()
            body = self._execution.request.content
        else:
            header_items = self._headers.multi_items()
            body = self._body or b""

        lines = [f"{self._method.value} {self.get_url()} {self._protocol.value}"]
        for name, value in header_items:
            lines.append(f"{name}:{value}")
        out = "\n".join(lines)
        if body:
            out += "\n\n" + body.decode("utf-8", errors="replace")
        if self._execution is not None:
            out += "\n\n" + self._execution.response.info()
        return out


def _parse_url(dest: str) -> httpx.URL:
    """Parse an absolute URL, raising URLParseError on malformed input."""
    try:
        url = httpx.URL(dest)
    except httpx.InvalidURL as exc:
        raise URLParseError(f"Invalid URL {dest!r}: {exc}", url=dest) from exc
    if not url.scheme or not url.host:
        raise URLParseError(f"URL {dest!r} must be absolute", url=dest)
    return url


# ------------------------------------------------------------------ #
# Factories
# ------------------------------------------------------------------ #


def new_request(
    method: Union[HTTPMethod, str],
    url: str,
    protocol: Protocol = Protocol.HTTP1,
) -> RequestBuilder:
    """Create a builder for an arbitrary method."""
    return RequestBuilder(url, method=method, protocol=protocol)


def get(url: str) -> RequestBuilder:
    """Create a GET builder."""
    return RequestBuilder(url, method=HTTPMethod.GET)


def post(url: str) -> RequestBuilder:
    """Create a POST builder."""
    return RequestBuilder(url, method=HTTPMethod.POST)


def from_request(request: httpx.Request) -> RequestBuilder:
    """Seed a builder from an existing :class:`httpx.Request`.

    The URL, method and headers are copied, except ``Host`` and
    ``Content-Length`` which are recomputed at send time.  A non-empty
    request body becomes the builder's explicit body.
    """
    builder = RequestBuilder(str(request.url), method=request.method)
    for name, value in request.headers.multi_items():
        if name not in ("host", "content-length"):
            builder.set_header(name, value)
    content = request.read()
    if content:
        builder.set_raw_body(content)
    return builder
