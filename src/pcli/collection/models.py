"""Pydantic models for the in-memory resource tree.

A collection is a tree of typed nodes::

    Collection
    +-- Folder
    |   +-- Folder ...
    |   +-- Request
    |       +-- Example
    +-- Request
        +-- Example

Every node carries a ``kind`` discriminator drawn from the closed
:class:`NodeKind` enum, so code that branches on node type can test
``node.kind`` instead of probing classes. Folder and Collection children are
a discriminated union of :class:`Folder` and :class:`Request`.

An :class:`Example` does not hold a reference to its owning request. It stores
the owner's positional ``handle`` in ``request_handle`` instead, and the owner
is looked up with :meth:`Collection.find_request`. Nodes are built once by
:func:`~pcli.collection.builder.build_collection` and only read afterwards.
"""

from __future__ import annotations

import enum
from typing import Annotated, Any, Iterator, Literal, Optional, Union

from pydantic import BaseModel, Field


class NodeKind(str, enum.Enum):
    """Closed set of node variants in a resource tree."""

    COLLECTION = "collection"
    FOLDER = "folder"
    REQUEST = "request"
    EXAMPLE = "example"
    UNKNOWN = "unknown"

    @property
    def symbol(self) -> str:
        """One-letter tag used when listing the tree."""
        return KIND_SYMBOLS[self]


KIND_SYMBOLS: dict[NodeKind, str] = {
    NodeKind.COLLECTION: "C",
    NodeKind.FOLDER: "F",
    NodeKind.REQUEST: "R",
    NodeKind.EXAMPLE: "E",
    NodeKind.UNKNOWN: "?",
}


class RequestData(BaseModel):
    """A request snapshot: method, URL template, headers, and raw body.

    ``path_segments`` keeps placeholders such as ``:id`` or ``{{version}}``
    verbatim. ``query``, ``headers``, and ``path_variables`` are flattened
    key/value mappings.
    """

    method: str = "GET"
    raw_url: str = ""
    host: Optional[str] = None
    path_segments: list[str] = Field(default_factory=list)
    path_variables: dict[str, Any] = Field(default_factory=dict)
    query: dict[str, Any] = Field(default_factory=dict)
    headers: dict[str, Any] = Field(default_factory=dict)
    raw_body: Optional[str] = None

    @property
    def path(self) -> str:
        """The URL path with unresolved placeholders, always starting with ``/``."""
        return "/" + "/".join(self.path_segments)


class Node(BaseModel):
    """Fields shared by every node in the tree."""

    name: str = Field(min_length=1)
    handle: str = ""

    @property
    def children(self) -> list[Any]:
        return []


class Example(Node):
    """A saved response for a request.

    ``original_request`` is the request snapshot captured with the response,
    when the document carries one.
    """

    kind: Literal[NodeKind.EXAMPLE] = NodeKind.EXAMPLE
    request_handle: Optional[str] = None
    original_request: Optional[RequestData] = None
    status: Optional[str] = None
    code: Optional[int] = None
    body: Optional[str] = None


class Request(Node):
    """A single API call template and its saved examples."""

    kind: Literal[NodeKind.REQUEST] = NodeKind.REQUEST
    request: RequestData = Field(default_factory=RequestData)
    examples: list[Example] = Field(default_factory=list)

    @property
    def children(self) -> list[Example]:
        return self.examples


class Folder(Node):
    """A named group of folders and requests, in document order."""

    kind: Literal[NodeKind.FOLDER] = NodeKind.FOLDER
    items: list[Item] = Field(default_factory=list)

    @property
    def children(self) -> list[Item]:
        return self.items


Item = Annotated[Union[Folder, Request], Field(discriminator="kind")]


class Collection(Node):
    """Root of the tree.

    ``variables`` holds the collection-level variables declared in the
    document, which :mod:`pcli.collection.variables` can substitute into
    ``{{name}}`` placeholders.
    """

    kind: Literal[NodeKind.COLLECTION] = NodeKind.COLLECTION
    description: Optional[str] = None
    items: list[Item] = Field(default_factory=list)
    variables: dict[str, Any] = Field(default_factory=dict)

    @property
    def children(self) -> list[Item]:
        return self.items

    def walk(self) -> Iterator[Node]:
        """Yield every descendant node in depth-first pre-order."""
        stack: list[Node] = list(reversed(self.items))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def find_request(self, handle: Optional[str]) -> Optional[Request]:
        """Return the request whose ``handle`` is *handle*, or ``None``."""
        if not handle:
            return None
        for node in self.walk():
            if isinstance(node, Request) and node.handle == handle:
                return node
        return None


Folder.model_rebuild()
Collection.model_rebuild()

Container = Union[Collection, Folder]
"""Nodes that may serve as the root of a resolution or listing."""

AnyNode = Union[Collection, Folder, Request, Example]


class ResourceDetails(BaseModel):
    """Normalised request details extracted from a request or example.

    Produced by :func:`~pcli.collection.extractor.extract_details` and
    consumed by :func:`~pcli.display.compose_display`.
    """

    method: str
    path: str
    params: dict[str, Any] = Field(default_factory=dict)
    query: dict[str, Any] = Field(default_factory=dict)
    headers: dict[str, Any] = Field(default_factory=dict)
    body: Any = Field(default_factory=dict)
