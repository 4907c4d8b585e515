"""Exception hierarchy for httpcli.

All exceptions inherit from :class:`HttpcliError`, so callers can catch the
whole family with one ``except`` clause while still distinguishing the
failure class when they need to.  Errors raised by :mod:`httpx` are never
leaked directly; they are chained via ``raise ... from exc`` so the original
exception stays reachable through ``__cause__``.

Subclass hierarchy::

    HttpcliError
    +-- NilResponseError      accessor used on an absent response
    +-- URLParseError         finalized URL is malformed
    +-- TransportError        httpx failed to deliver the request
    +-- BodyReadError         response stream could not be read
    +-- DecodeError           body could not be decoded into a target
    +-- InvalidBodyTypeError  unsupported payload passed as a request body
    +-- ConfigError           invalid user config file or env value
"""


class HttpcliError(Exception):
    """Base exception for all httpcli errors.

    Args:
        message: Human-readable error description.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NilResponseError(HttpcliError):
    """Raised when a response accessor is used on a wrapper with no underlying response."""

    def __init__(self, message: str = "nil response"):
        super().__init__(message)


class URLParseError(HttpcliError):
    """Raised at send time when the finalized URL cannot be parsed.

    Args:
        message: Description of the parse failure.
        url: The offending URL string.
    """

    def __init__(self, message: str, url: str = ""):
        super().__init__(message)
        self.url = url


class TransportError(HttpcliError):
    """Raised when the underlying transport fails (connection, TLS, timeout).

    The original :class:`httpx.TransportError` is available as ``__cause__``.
    """


class BodyReadError(HttpcliError):
    """Raised when the response body stream cannot be fully read."""


class DecodeError(HttpcliError):
    """Raised when cached body bytes cannot be parsed into the requested shape."""


class InvalidBodyTypeError(HttpcliError, TypeError):
    """Raised when a request body is neither ``bytes`` nor ``str``."""


class ConfigError(HttpcliError):
    """Raised for configuration problems (invalid JSON, bad env values)."""
