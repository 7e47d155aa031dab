"""Locate a nested resource by following a path of names through the tree.

A resource path is an ordered list of case-insensitive names, one per level::

    ["users", "admin", "get-user", "ok"]
     folder   folder   request     example

Resolution keeps a *scope* (the children searched at the current level),
starting with the root's children. At each level the first child whose name
matches the segment wins; sibling names are not required to be unique, so a
duplicate name always resolves to its first occurrence in document order.
What the next scope is depends on the kind of the matched node:

* folder -- its child folders and requests;
* request -- its saved examples;
* example -- nothing, so any further segment is a dead end.

The single public function is :func:`resolve`.
"""

from __future__ import annotations

from typing import Sequence

from pcli.collection.models import AnyNode, Container, NodeKind
from pcli.exceptions import (
    DeadEndError,
    InvalidUsageError,
    NotFoundError,
    UnknownKindError,
)

_RESOLVABLE_KINDS = frozenset({NodeKind.FOLDER, NodeKind.REQUEST, NodeKind.EXAMPLE})


def resolve(root: Container, path: Sequence[str]) -> AnyNode:
    """Resolve *path* against *root* and return the node it names.

    At most ``len(path)`` scopes are searched. The tree is only read.

    Args:
        root: The collection or folder to start from.
        path: Case-insensitive names, outermost first. Must not be empty;
            callers treat the root itself as already resolved.

    Returns:
        The folder, request, or example named by the last segment.

    Raises:
        InvalidUsageError: If *path* is empty.
        NotFoundError: If a segment has no match in its scope. The error
            names the segment and the container that was searched.
        DeadEndError: If the path continues past an example.
        UnknownKindError: If a segment matches a node of a kind that cannot
            appear in a resource path.

    Example::

        node = resolve(root, ["f1", "r1", "e1"])
        assert node.kind is NodeKind.EXAMPLE
    """
    if not path:
        raise InvalidUsageError("A resource path needs at least one name")

    scope = root.children
    scope_name = root.name

    for depth, segment in enumerate(path[:-1]):
        node = _match(scope, segment, scope_name)
        if node.kind is NodeKind.FOLDER:
            scope = node.items
        elif node.kind is NodeKind.REQUEST:
            scope = node.examples
        else:
            raise DeadEndError(node.name, path[depth + 1])
        scope_name = node.name

    return _match(scope, path[-1], scope_name)


def _match(scope: Sequence[AnyNode], segment: str, scope_name: str) -> AnyNode:
    """Return the first node in *scope* named *segment*, ignoring case."""
    wanted = segment.casefold()
    for node in scope:
        if node.name.casefold() != wanted:
            continue
        if getattr(node, "kind", None) not in _RESOLVABLE_KINDS:
            raise UnknownKindError(node.name)
        return node
    raise NotFoundError(segment, scope_name)
