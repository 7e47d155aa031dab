"""Collection core -- tree model, loading, resolution, listing, and extraction.

This sub-package turns a raw collection document into a read-only resource
tree and answers the two questions the CLI asks of it: *where is the resource
with these names?* and *what does the whole tree look like?*

Typical usage::

    from pcli.collection import build_collection, load_document, resolve

    root = build_collection(load_document("api.postman_collection.json"))
    node = resolve(root, ["users", "get-user"])
    details = extract_details(node, root)

Sub-modules:

* :mod:`~pcli.collection.models` -- Collection/Folder/Request/Example nodes.
* :mod:`~pcli.collection.loader` -- I/O layer (file, URL, stdin).
* :mod:`~pcli.collection.builder` -- document dict to resource tree.
* :mod:`~pcli.collection.resolver` -- follow a path of names to one node.
* :mod:`~pcli.collection.lister` -- nested listing of the whole tree.
* :mod:`~pcli.collection.extractor` -- request details of a request/example.
* :mod:`~pcli.collection.variables` -- ``{{name}}`` substitution.
"""

from pcli.collection.builder import build_collection
from pcli.collection.extractor import extract_details
from pcli.collection.lister import list_tree, render_listing
from pcli.collection.loader import load_collection_document, load_document
from pcli.collection.resolver import resolve

__all__ = [
    "build_collection",
    "extract_details",
    "list_tree",
    "load_collection_document",
    "load_document",
    "render_listing",
    "resolve",
]
