"""Request builder and response wrapper.

Classes:
    :class:`RequestBuilder` -- fluent, re-executable request configuration.
    :class:`ResponseWrapper` -- memoized views over one response body.
"""

from httpcli.client.builder import RequestBuilder, from_request, get, new_request, post
from httpcli.client.response import ResponseWrapper

__all__ = [
    "RequestBuilder",
    "ResponseWrapper",
    "from_request",
    "get",
    "new_request",
    "post",
]
