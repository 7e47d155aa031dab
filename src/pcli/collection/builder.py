"""Build a resource tree from a loaded collection document.

This module walks a Postman-style collection document (v2.0/v2.1 shape) and
produces a :class:`~pcli.collection.models.Collection`. The document layout
it understands::

    {
      "info": {"name": "...", "description": "..."},
      "item": [                                  # folders and requests
        {"name": "users", "item": [...]},        # folder
        {"name": "ping", "request": {...},       # request
         "response": [{"name": "ok", "originalRequest": {...}}]}
      ],
      "variable": [{"key": "baseUrl", "value": "https://..."}]
    }

A document wrapped in a top-level ``collection`` key (as returned by the
Postman API) is unwrapped first.

The single public entry point is :func:`build_collection`. Internally it
delegates to private helpers that each handle one part of the document:

* ``_build_item`` -- a folder or request entry, recursively.
* ``_build_example`` -- one saved response.
* ``_build_request_data`` -- a request snapshot (method, URL, headers, body).
* ``_build_url`` -- a URL given either as a string or as an object.
"""

from __future__ import annotations

from typing import Any, Optional, Union

from pcli.collection.models import (
    Collection,
    Example,
    Folder,
    Request,
    RequestData,
)
from pcli.exceptions import CollectionParseError, MalformedTreeError

DEFAULT_MAX_DEPTH = 64
"""Deepest folder nesting accepted before the document is rejected as malformed."""

_UNTITLED_COLLECTION = "Untitled collection"


def build_collection(
    document: dict[str, Any], max_depth: int = DEFAULT_MAX_DEPTH
) -> Collection:
    """Build a :class:`~pcli.collection.models.Collection` from a document dict.

    Args:
        document: The parsed collection document, as returned by
            :func:`~pcli.collection.loader.load_collection_document`. An
            empty dict produces an empty collection.
        max_depth: Maximum nesting depth of folders and requests.

    Returns:
        The root of the resource tree.

    Raises:
        CollectionParseError: If the document or one of its items has an
            unexpected shape.
        MalformedTreeError: If items are nested deeper than *max_depth*.

    Example::

        raw = load_document("api.postman_collection.json")
        root = build_collection(raw)
        print([item.name for item in root.items])
    """
    if not isinstance(document, dict):
        raise CollectionParseError(
            f"Collection must be an object (got {type(document).__name__})"
        )
    if isinstance(document.get("collection"), dict):
        document = document["collection"]

    info = document.get("info") or {}
    if not isinstance(info, dict):
        raise CollectionParseError("Collection 'info' must be an object")

    items = _as_list(document.get("item"), "item")
    return Collection(
        name=_name_of(info, _UNTITLED_COLLECTION),
        description=_description_of(info.get("description")),
        items=[
            _build_item(item, handle=str(index), depth=1, max_depth=max_depth)
            for index, item in enumerate(items)
        ],
        variables=_key_values(document.get("variable")),
    )


def _build_item(
    raw: Any, handle: str, depth: int, max_depth: int
) -> Union[Folder, Request]:
    """Build a folder or request from one ``item`` entry."""
    if depth > max_depth:
        raise MalformedTreeError(
            f"Collection is nested deeper than {max_depth} levels at item {handle}"
        )
    if not isinstance(raw, dict):
        raise CollectionParseError(
            f"Item {handle} must be an object (got {type(raw).__name__})"
        )

    name = _name_of(raw, "Untitled")
    if "item" in raw:
        children = _as_list(raw.get("item"), f"item {handle}")
        return Folder(
            name=name,
            handle=handle,
            items=[
                _build_item(child, f"{handle}.{index}", depth + 1, max_depth)
                for index, child in enumerate(children)
            ],
        )

    if "request" in raw:
        responses = _as_list(raw.get("response"), f"response of item {handle}")
        return Request(
            name=name,
            handle=handle,
            request=_build_request_data(raw["request"]),
            examples=[
                _build_example(resp, f"{handle}.{index}", owner=handle)
                for index, resp in enumerate(responses)
            ],
        )

    raise CollectionParseError(
        f'Item "{name}" is neither a folder nor a request'
    )


def _build_example(raw: Any, handle: str, owner: str) -> Example:
    """Build an example from one ``response`` entry of a request."""
    if not isinstance(raw, dict):
        raise CollectionParseError(
            f"Response {handle} must be an object (got {type(raw).__name__})"
        )
    original = raw.get("originalRequest")
    code = raw.get("code")
    return Example(
        name=_name_of(raw, "Untitled example"),
        handle=handle,
        request_handle=owner,
        original_request=_build_request_data(original) if original else None,
        status=raw.get("status"),
        code=code if isinstance(code, int) else None,
        body=raw.get("body") if isinstance(raw.get("body"), str) else None,
    )


def _build_request_data(raw: Any) -> RequestData:
    """Build a request snapshot; a bare string is treated as a GET URL."""
    if isinstance(raw, str):
        return RequestData(method="GET", **_build_url(raw))
    if not isinstance(raw, dict):
        raise CollectionParseError(
            f"Request must be an object or URL string (got {type(raw).__name__})"
        )

    body = raw.get("body")
    raw_body: Optional[str] = None
    if isinstance(body, dict) and isinstance(body.get("raw"), str):
        raw_body = body["raw"]

    return RequestData(
        method=str(raw.get("method") or "GET").upper(),
        headers=_key_values(raw.get("header")),
        raw_body=raw_body,
        **_build_url(raw.get("url")),
    )


def _build_url(raw: Any) -> dict[str, Any]:
    """Return the URL-related ``RequestData`` fields for a string or object URL."""
    if raw is None:
        return {}
    if isinstance(raw, str):
        return _parse_raw_url(raw)
    if not isinstance(raw, dict):
        raise CollectionParseError(
            f"Request url must be a string or object (got {type(raw).__name__})"
        )

    fields: dict[str, Any] = {}
    raw_url = raw.get("raw")
    if isinstance(raw_url, str):
        fields = _parse_raw_url(raw_url)

    host = raw.get("host")
    if isinstance(host, list):
        fields["host"] = ".".join(str(part) for part in host)
    elif isinstance(host, str):
        fields["host"] = host

    path = raw.get("path")
    if isinstance(path, list):
        fields["path_segments"] = [_path_segment(seg) for seg in path]
    elif isinstance(path, str):
        fields["path_segments"] = _split_path(path)

    if "query" in raw:
        fields["query"] = _key_values(raw.get("query"))
    if "variable" in raw:
        fields["path_variables"] = _key_values(raw.get("variable"))
    return fields


def _parse_raw_url(raw_url: str) -> dict[str, Any]:
    """Split a raw URL string into host, path segments, and query parameters.

    The first segment after an optional ``scheme://`` prefix is the host,
    so ``{{baseUrl}}/users/:id`` has host ``{{baseUrl}}`` and path
    ``/users/:id``.
    """
    rest = raw_url.split("#", 1)[0]
    query_string = ""
    if "?" in rest:
        rest, query_string = rest.split("?", 1)
    if "://" in rest:
        rest = rest.split("://", 1)[1]

    host, _, path = rest.partition("/")
    query: dict[str, Any] = {}
    for pair in filter(None, query_string.split("&")):
        key, _, value = pair.partition("=")
        query[key] = value

    return {
        "raw_url": raw_url,
        "host": host or None,
        "path_segments": _split_path(path),
        "query": query,
    }


def _split_path(path: str) -> list[str]:
    return [seg for seg in path.split("/") if seg]


def _path_segment(seg: Any) -> str:
    # Schema v2.0 allows {"type": "string", "value": "..."} path segments.
    if isinstance(seg, dict):
        return str(seg.get("value", ""))
    return str(seg)


def _key_values(raw: Any) -> dict[str, Any]:
    """Flatten a list of ``{"key", "value", "disabled"}`` entries into a dict.

    Disabled entries are skipped and, for duplicate keys, the last value wins.
    A dict is returned unchanged.
    """
    if raw is None:
        return {}
    if isinstance(raw, dict):
        return dict(raw)
    if not isinstance(raw, list):
        raise CollectionParseError(
            f"Expected a list of key/value entries (got {type(raw).__name__})"
        )
    result: dict[str, Any] = {}
    for entry in raw:
        if not isinstance(entry, dict) or entry.get("disabled"):
            continue
        key = entry.get("key", entry.get("id"))
        if key is None:
            continue
        result[str(key)] = entry.get("value")
    return result


def _as_list(raw: Any, where: str) -> list[Any]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise CollectionParseError(
            f"Expected a list for {where} (got {type(raw).__name__})"
        )
    return raw


def _name_of(raw: dict[str, Any], default: str) -> str:
    name = raw.get("name")
    if name is None or str(name) == "":
        return default
    return str(name)


def _description_of(raw: Any) -> Optional[str]:
    # v2.1 descriptions may be {"content": "...", "type": "text/markdown"}.
    if isinstance(raw, dict):
        raw = raw.get("content")
    return raw if isinstance(raw, str) else None
