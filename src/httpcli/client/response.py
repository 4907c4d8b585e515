"""Memoizing wrapper around a streamed :class:`httpx.Response`.

A :class:`ResponseWrapper` owns the body stream of one response.  The first
read drains the stream, closes it (on success and failure alike) and keeps
the bytes; every later view -- bytes, text, JSON, XML, :meth:`info` --
works from that cached copy without touching the transport again.

The wrapper knows nothing about the builder that produced it, so it can
also wrap responses obtained elsewhere::

    with httpx.Client() as client:
        raw = client.send(client.build_request("GET", url), stream=True)
        wrapper = ResponseWrapper(raw)
        data = wrapper.decode_json()
"""

from __future__ import annotations

import json
import xml.etree.ElementTree as ET
from typing import Any, Optional

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from httpcli.exceptions import BodyReadError, DecodeError, HttpcliError, NilResponseError
from httpcli.output import get_output
from httpcli.xml_body import xml_to_dict


class ResponseWrapper:
    """Idempotent views over a single network response body.

    Args:
        raw: The transport-level response, normally opened with
            ``stream=True`` so its body has not been read yet.  ``None``
            produces a wrapper whose accessors raise
            :class:`~httpcli.exceptions.NilResponseError`.
    """

    def __init__(self, raw: Optional[httpx.Response]) -> None:
        self._raw = raw
        self._body: Optional[bytes] = None

    def __repr__(self) -> str:
        if self._raw is None:
            return "<ResponseWrapper [nil]>"
        return f"<ResponseWrapper [{self._raw.status_code}]>"

    @property
    def raw(self) -> Optional[httpx.Response]:
        """The underlying :class:`httpx.Response`, or ``None``."""
        return self._raw

    @property
    def headers(self) -> httpx.Headers:
        """Response headers."""
        return self._require().headers

    @property
    def http_version(self) -> str:
        """Protocol reported by the transport, e.g. ``HTTP/1.1``."""
        return self._require().http_version

    def _require(self) -> httpx.Response:
        if self._raw is None:
            raise NilResponseError()
        return self._raw

    # ------------------------------------------------------------------ #
    # Body access
    # ------------------------------------------------------------------ #

    def receive_bytes(self) -> bytes:
        """Return the response body, reading the stream on first use.

        The stream is closed after the first read attempt whether or not it
        succeeded.

        Raises:
            NilResponseError: If the wrapper has no underlying response.
            BodyReadError: If the stream cannot be fully read.
        """
        raw = self._require()
        if self._body is not None:
            return self._body
        try:
            self._body = b"".join(raw.iter_bytes())
        except (httpx.StreamError, httpx.RequestError) as exc:
            raise BodyReadError(f"Failed to read response body: {exc}") from exc
        finally:
            raw.close()
        return self._body

    def receive_string(self) -> str:
        """Return the body as text, decoded with the response charset (default UTF-8).

        Raises:
            NilResponseError: If the wrapper has no underlying response.
            BodyReadError: If the stream cannot be fully read.
        """
        body = self.receive_bytes()
        return body.decode(self._raw.encoding or "utf-8", errors="replace")

    def as_bytes(self) -> bytes:
        """Like :meth:`receive_bytes`, but returns ``b""`` instead of raising."""
        try:
            return self.receive_bytes()
        except HttpcliError as exc:
            get_output().debug(f"Discarding response read error: {exc}")
            return b""

    def as_string(self) -> str:
        """Like :meth:`receive_string`, but returns ``""`` instead of raising."""
        try:
            return self.receive_string()
        except HttpcliError as exc:
            get_output().debug(f"Discarding response read error: {exc}")
            return ""

    # ------------------------------------------------------------------ #
    # Structured decoding
    # ------------------------------------------------------------------ #

    def decode_json(self, target: Any = None) -> Any:
        """Parse the body as JSON, optionally validating it into *target*.

        Args:
            target: A pydantic model class or any type accepted by
                :class:`pydantic.TypeAdapter` (``list[int]``, a dataclass,
                a ``TypedDict`` ...).  ``None`` returns the parsed JSON as is.

        Returns:
            The parsed (and validated) value.

        Raises:
            NilResponseError: If the wrapper has no underlying response.
            BodyReadError: If the stream cannot be fully read.
            DecodeError: If the body is not valid JSON or does not fit *target*.
        """
        body = self.receive_bytes()
        try:
            data = json.loads(body)
        except ValueError as exc:
            raise DecodeError(f"Response body is not valid JSON: {exc}") from exc
        return _validate(data, target)

    def decode_xml(
        self,
        target: Any = None,
        force_list: Optional[set[str]] = None,
    ) -> Any:
        """Parse the body as XML, optionally validating it into *target*.

        The document is converted with :func:`~httpcli.xml_body.xml_to_dict`,
        so the parsed value is ``{root_tag: {...}}``.  Repeated child tags
        become lists; tags named in *force_list* are lists even when they
        occur once, so a single-item collection validates into ``list[...]``.

        Raises:
            NilResponseError: If the wrapper has no underlying response.
            BodyReadError: If the stream cannot be fully read.
            DecodeError: If the body is not well-formed XML or does not fit
                *target*.
        """
        body = self.receive_bytes()
        try:
            data = xml_to_dict(body, force_list=force_list)
        except ET.ParseError as exc:
            raise DecodeError(f"Response body is not valid XML: {exc}") from exc
        return _validate(data, target)

    # ------------------------------------------------------------------ #
    # Status line and summary
    # ------------------------------------------------------------------ #

    def status(self) -> str:
        """Status line without the protocol, e.g. ``"200 OK"``."""
        raw = self._require()
        return f"{raw.status_code} {raw.reason_phrase}".rstrip()

    def status_code(self) -> int:
        """Numeric status code."""
        return self._require().status_code

    def info(self) -> str:
        """Human-readable summary: status line, headers, blank line, body.

        Returns an empty string when there is no response or the body is
        empty, even if headers are present.
        """
        if self._raw is None:
            return ""
        text = self.as_string()
        if not text:
            return ""
        lines = [f"{self._raw.http_version} {self.status()}"]
        for name, value in self._raw.headers.multi_items():
            lines.append(f"{name}:{value}")
        return "\n".join(lines) + "\n\n" + text


def _validate(data: Any, target: Any) -> Any:
    """Validate parsed body data into *target*, mapping failures to DecodeError."""
    if target is None:
        return data
    try:
        if isinstance(target, type) and issubclass(target, BaseModel):
            return target.model_validate(data)
        return TypeAdapter(target).validate_python(data)
    except ValidationError as exc:
        raise DecodeError(f"Response body does not match {_target_name(target)}: {exc}") from exc


def _target_name(target: Any) -> str:
    return getattr(target, "__name__", None) or repr(target)
