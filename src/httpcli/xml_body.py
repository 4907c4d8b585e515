"""XML response bodies as plain dicts.

:meth:`~httpcli.client.response.ResponseWrapper.decode_xml` parses the
memoized body with :func:`xml_to_dict` and hands the result to pydantic, so
an XML payload validates into the same targets a JSON payload would.

Mapping rules:

* the root element becomes the single top-level key;
* namespace URIs are dropped from tag and attribute names;
* attributes are stored under ``@name`` keys;
* a tag seen more than once under one parent, or listed in ``force_list``,
  maps to a list;
* text-only elements map to their stripped text, empty ones to ``None``;
* text next to attributes or children is kept under ``#text``.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Any, Iterable, Optional


def xml_to_dict(
    body: bytes,
    force_list: Optional[Iterable[str]] = None,
) -> dict[str, Any]:
    """Parse an XML response body into a JSON-compatible dict.

    Args:
        body: Raw XML bytes, typically a memoized response body.
        force_list: Tag names that always map to a list, even when a parent
            holds a single such child (``{"item"}`` for a one-item feed).

    Raises:
        ET.ParseError: If *body* is not well-formed XML.
    """
    list_tags = frozenset(force_list or ())
    root = ET.fromstring(body)
    return {_local_name(root.tag): _convert(root, list_tags)}


def _local_name(name: str) -> str:
    # "{http://example.com/ns}Item" -> "Item"
    return name.rpartition("}")[2]


def _convert(element: ET.Element, list_tags: frozenset[str]) -> Any:
    node: dict[str, Any] = {
        f"@{_local_name(name)}": value
        for name, value in element.attrib.items()
        if not name.startswith("xmlns")
    }

    # _convert never returns a list, so a list value means "already repeated".
    for child in element:
        tag = _local_name(child.tag)
        value = _convert(child, list_tags)
        if tag not in node:
            node[tag] = [value] if tag in list_tags else value
        elif isinstance(node[tag], list):
            node[tag].append(value)
        else:
            node[tag] = [node[tag], value]

    text = (element.text or "").strip()
    if not node:
        return text or None
    if text:
        node["#text"] = text
    return node
