"""Extract normalised request details from requests and examples.

The single public entry point is :func:`extract_details`, which reads the
request snapshot behind a node and returns a
:class:`~pcli.collection.models.ResourceDetails`:

* ``method`` -- lower-cased HTTP method;
* ``path`` -- URL path with ``:var`` and ``{{var}}`` placeholders kept;
* ``params`` -- path variables;
* ``query`` / ``headers`` -- flattened key/value mappings;
* ``body`` -- the raw body parsed as JSON, or ``{}`` when there is none.

For an example, its own captured request is preferred; when the document did
not save one, the owning request's data is used instead.
"""

from __future__ import annotations

import json
from typing import Any, Optional

from pcli.collection.models import (
    AnyNode,
    Collection,
    NodeKind,
    RequestData,
    ResourceDetails,
)
from pcli.exceptions import ExtractionError, MalformedBodyError, NoRequestDataError


def extract_details(
    node: AnyNode, collection: Optional[Collection] = None
) -> ResourceDetails:
    """Extract the details of a request or example.

    Args:
        node: A request or example node.
        collection: The tree *node* belongs to. Needed only to fall back to
            the owning request of an example that has no snapshot of its own.

    Returns:
        The extracted :class:`~pcli.collection.models.ResourceDetails`.

    Raises:
        MalformedBodyError: If the raw body is non-empty and not valid JSON.
        NoRequestDataError: If an example has no request data of its own and
            its owning request cannot be found.
        ExtractionError: If *node* is neither a request nor an example.

    Example::

        details = extract_details(resolve(root, ["users", "get-user"]))
        print(details.method, details.path)
    """
    return _details_from(_request_data_of(node, collection), node.name)


def _request_data_of(node: AnyNode, collection: Optional[Collection]) -> RequestData:
    """Pick the request snapshot that describes *node*."""
    kind = getattr(node, "kind", None)
    if kind is NodeKind.REQUEST:
        return node.request
    if kind is NodeKind.EXAMPLE:
        if node.original_request is not None:
            return node.original_request
        owner = collection.find_request(node.request_handle) if collection else None
        if owner is None:
            raise NoRequestDataError(node.name)
        return owner.request
    raise ExtractionError(
        f'"{node.name}" is a {kind.value if kind else "node"}; '
        "only requests and examples have request details"
    )


def _details_from(data: RequestData, name: str) -> ResourceDetails:
    return ResourceDetails(
        method=data.method.lower(),
        path=data.path,
        params=dict(data.path_variables),
        query=dict(data.query),
        headers=dict(data.headers),
        body=parse_body(data.raw_body, name),
    )


def parse_body(raw: Optional[str], name: str = "request") -> Any:
    """Parse a raw request body as JSON.

    An absent or empty (whitespace-only) body yields ``{}``.

    Raises:
        MalformedBodyError: If *raw* is non-empty and not valid JSON.
    """
    if raw is None or not raw.strip():
        return {}
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise MalformedBodyError(name, str(exc)) from exc
