"""httpcli -- deferred, reusable HTTP requests on top of httpx.

Build a request with chained calls, execute it once, and read the memoized
response as many times and in as many shapes as needed::

    import httpcli

    req = httpcli.post("https://api.example.com/login").set_params(
        {"user": "alice", "password": "s3cret"}
    )
    resp = req.execute()          # network call
    resp is req.execute()         # True -- memoized
    req.rearm().execute()         # fresh network call, same configuration

Modules:
    client: :class:`RequestBuilder` and :class:`ResponseWrapper`.
    models: Enums and the :class:`ClientConfig` pydantic model.
    config: Transport configuration resolution (env, user config file).
    exceptions: Exception hierarchy rooted at :class:`HttpcliError`.
    output: stdout/stderr diagnostics with Rich support.
"""

from httpcli.client import RequestBuilder, ResponseWrapper, from_request, get, new_request, post
from httpcli.exceptions import (
    BodyReadError,
    ConfigError,
    DecodeError,
    HttpcliError,
    InvalidBodyTypeError,
    NilResponseError,
    TransportError,
    URLParseError,
)
from httpcli.models import ClientConfig, HTTPMethod, Protocol, RequestState

__version__ = "0.1.0"

HTTP1 = Protocol.HTTP1
HTTP2 = Protocol.HTTP2

__all__ = [
    "HTTP1",
    "HTTP2",
    "BodyReadError",
    "ClientConfig",
    "ConfigError",
    "DecodeError",
    "HTTPMethod",
    "HttpcliError",
    "InvalidBodyTypeError",
    "NilResponseError",
    "Protocol",
    "RequestBuilder",
    "RequestState",
    "ResponseWrapper",
    "TransportError",
    "URLParseError",
    "from_request",
    "get",
    "new_request",
    "post",
]
