"""Pydantic models and enums shared across httpcli.

* :class:`HTTPMethod` -- request verbs understood by the builder.
* :class:`Protocol` -- protocol-version metadata recorded on a request.
* :class:`RequestState` -- the two states of a request's execution cycle.
* :class:`ClientConfig` -- transport settings, resolved by
  :func:`~httpcli.config.resolve_client_config`.
"""

from __future__ import annotations

import enum
from typing import Optional

from pydantic import BaseModel, Field


class HTTPMethod(str, enum.Enum):
    """HTTP methods a :class:`~httpcli.client.builder.RequestBuilder` can issue.

    Only ``GET`` and ``POST`` interpret the builder's parameters (as a query
    string and a form body respectively); every other method sends the
    explicit body, if any, and leaves the URL untouched.
    """

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


class Protocol(str, enum.Enum):
    """Protocol-version identifiers stored on a request.

    These are metadata only: they appear in :meth:`RequestBuilder.info`
    output but do not change how the transport negotiates the connection.
    """

    HTTP1 = "HTTP/1.1"
    HTTP2 = "HTTP/2.0"


class RequestState(str, enum.Enum):
    """Execution state of a request builder.

    ``PENDING`` builders derive their URL fresh from the current parameters
    and hit the network on the next ``execute()``.  ``EXECUTED`` builders hold
    a memoized response and the URL that was actually sent.
    """

    PENDING = "pending"
    EXECUTED = "executed"


class ClientConfig(BaseModel):
    """Transport settings used when a builder opens its own :class:`httpx.Client`.

    Example::

        ClientConfig(timeout=5, verify_ssl=False)
    """

    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify TLS certificates")
    follow_redirects: bool = Field(
        default=True, description="Follow 3xx redirects inside the transport"
    )
    user_agent: Optional[str] = Field(
        default=None, description="User-Agent header applied when the request sets none"
    )
