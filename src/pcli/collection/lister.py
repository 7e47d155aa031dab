"""Enumerate a resource tree into a nested, order-preserving listing.

:func:`list_tree` walks the tree depth-first in pre-order and returns one
:class:`ListingEntry` per node below the root, each holding its kind, name,
and the entries of its own children. Children keep their document order.

:func:`render_listing` turns a listing into plain text, one entry per line,
indented with one tab per nesting level::

    F users
    \tR list-users
    \t\tE ok
    R ping

Kind symbols are plain letters; colouring them is left to
:mod:`pcli.output`.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from pcli.collection.builder import DEFAULT_MAX_DEPTH
from pcli.collection.models import KIND_SYMBOLS, NodeKind
from pcli.exceptions import MalformedTreeError


class ListingEntry(BaseModel):
    """One listed node and the entries of its children."""

    kind: NodeKind
    name: str
    children: list[ListingEntry] = Field(default_factory=list)

    @property
    def symbol(self) -> str:
        return KIND_SYMBOLS[self.kind]

    @property
    def label(self) -> str:
        """``"<symbol> <name>"``, as shown in rendered listings."""
        return f"{self.symbol} {self.name}"


NestedListing = list[ListingEntry]


def list_tree(root: Any, max_depth: int = DEFAULT_MAX_DEPTH) -> NestedListing:
    """List every node below *root*.

    The root itself is not part of the listing, so the number of entries
    equals the number of descendants.

    Args:
        root: A collection or folder (any node with ``children`` works; a
            request lists its examples).
        max_depth: Nesting ceiling for folders and requests, counted the
            same way the builder counts them. Examples are leaves one level
            below their request and never trip it.

    Returns:
        The top-level entries, in document order.

    Raises:
        MalformedTreeError: If the tree is nested deeper than *max_depth*.
    """
    return [_list_node(child, 1, max_depth) for child in root.children]


def _list_node(node: Any, depth: int, max_depth: int) -> ListingEntry:
    children = getattr(node, "children", [])
    if depth > max_depth and (children or _kind_of(node) is not NodeKind.EXAMPLE):
        raise MalformedTreeError(
            f'Tree is nested deeper than {max_depth} levels at "{node.name}"'
        )
    return ListingEntry(
        kind=_kind_of(node),
        name=node.name,
        children=[
            _list_node(child, depth + 1, max_depth)
            for child in children
        ],
    )


def _kind_of(node: Any) -> NodeKind:
    kind = getattr(node, "kind", None)
    return kind if isinstance(kind, NodeKind) else NodeKind.UNKNOWN


def render_listing(listing: NestedListing) -> str:
    """Render *listing* as tab-indented lines, depth 0 unindented."""
    lines: list[str] = []

    def _walk(entries: NestedListing, depth: int) -> None:
        for entry in entries:
            lines.append("\t" * depth + entry.label)
            _walk(entry.children, depth + 1)

    _walk(listing, 0)
    return "\n".join(lines)


def count_entries(listing: NestedListing) -> int:
    """Total number of entries in *listing*, at every depth."""
    return sum(1 + count_entries(entry.children) for entry in listing)
