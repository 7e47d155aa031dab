"""Compose resolved resources into displayable blocks.

:func:`compose_display` is the bridge between the collection core and the
output layer. It takes a resolved node (or already-extracted
:class:`~pcli.collection.models.ResourceDetails`) and produces a
:class:`FormattedOutput`: a header line plus the detail fields worth showing.
Rendering that block to a terminal, with or without colour, is the job of
:mod:`pcli.output`; :meth:`FormattedOutput.render` gives the plain-text form.

Detail fields are ``url`` (method and path), ``params``, ``query``,
``headers``, and ``body``. A field is suppressed when its name is in the
``ignore`` set or when its JSON form is trivial (``{}``, ``[]``, ``""``).
"""

from __future__ import annotations

import json
from typing import Any, Iterable, Optional, Union

from pydantic import BaseModel, Field

from pcli.collection.extractor import extract_details
from pcli.collection.lister import list_tree, render_listing
from pcli.collection.models import AnyNode, Collection, NodeKind, ResourceDetails
from pcli.collection.variables import apply_variables

DEFAULT_IGNORE: frozenset[str] = frozenset({"url", "headers"})
"""Fields hidden unless the user asks for them. ``url`` is already in the header line."""

_TRIVIAL_LENGTH = 2


class FormattedOutput(BaseModel):
    """A display block: header parts plus the fields that survived filtering.

    ``listing`` is set instead of ``fields`` for folders and collections.
    """

    name: str = ""
    kind: NodeKind = NodeKind.UNKNOWN
    url_line: str = ""
    fields: dict[str, Any] = Field(default_factory=dict)
    listing: Optional[str] = None

    @property
    def header(self) -> str:
        """``"<name> <METHOD path>"``, skipping whichever part is empty."""
        return " ".join(part for part in (self.name, self.url_line) if part)

    def render(self) -> str:
        """Plain-text rendering: header, then pretty JSON or the subtree listing."""
        result = self.header
        if self.listing:
            result += "\n" + self.listing
        elif self.fields:
            result += "\n" + serialize(self.fields, indent=2)
        return result

    def __str__(self) -> str:
        return self.render()


def compose_display(
    target: Union[AnyNode, ResourceDetails],
    ignore: Optional[Iterable[str]] = None,
    collection: Optional[Collection] = None,
    variables: Optional[dict[str, Any]] = None,
) -> FormattedOutput:
    """Build the display block for a resolved node or extracted details.

    Args:
        target: A request, example, folder, or collection node, or a
            :class:`~pcli.collection.models.ResourceDetails` to show as is.
        ignore: Field names always suppressed. Defaults to
            :data:`DEFAULT_IGNORE`.
        collection: The tree *target* belongs to, used to find the owning
            request of an example without its own request snapshot.
        variables: Values substituted into ``{{name}}`` placeholders of the
            extracted details.

    Returns:
        The composed :class:`FormattedOutput`.

    Raises:
        ExtractionError: Propagated unchanged from
            :func:`~pcli.collection.extractor.extract_details`.
    """
    ignored = DEFAULT_IGNORE if ignore is None else frozenset(ignore)

    if isinstance(target, ResourceDetails):
        return _compose_details(target, "", NodeKind.UNKNOWN, ignored, variables)

    kind = getattr(target, "kind", NodeKind.UNKNOWN)
    if kind in (NodeKind.COLLECTION, NodeKind.FOLDER):
        return FormattedOutput(
            name=target.name,
            kind=kind,
            url_line=f"({kind.value})",
            listing=render_listing(list_tree(target)),
        )

    details = extract_details(target, collection)
    return _compose_details(details, target.name, kind, ignored, variables)


def _compose_details(
    details: ResourceDetails,
    name: str,
    kind: NodeKind,
    ignored: frozenset[str],
    variables: Optional[dict[str, Any]],
) -> FormattedOutput:
    if variables:
        details = apply_variables(details, variables)

    candidates = {
        "url": {"method": details.method, "path": details.path},
        "params": details.params,
        "query": details.query,
        "headers": details.headers,
        "body": details.body,
    }
    fields = {
        key: value
        for key, value in candidates.items()
        if key not in ignored and not is_trivial(value)
    }
    return FormattedOutput(
        name=name,
        kind=kind,
        url_line=f"{details.method} {details.path}",
        fields=fields,
    )


def serialize(value: Any, indent: Optional[int] = None) -> str:
    """JSON form of *value*, falling back to ``str`` for unknown types."""
    return json.dumps(value, indent=indent, ensure_ascii=False, default=str)


def is_trivial(value: Any) -> bool:
    """Whether *value* serialises to two characters or fewer (``{}``, ``[]``, ``""``)."""
    return len(serialize(value)) <= _TRIVIAL_LENGTH
