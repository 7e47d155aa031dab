"""Browse commands -- list, show, and summarise the active collection.

Implements the top-level ``pcli ls``, ``pcli show``, and ``pcli info``
commands. Each one resolves the effective configuration, loads the
collection document (local file, stdin, or remote URL), builds the resource
tree, and then hands the tree to the collection core:

* ``ls`` -- :func:`~pcli.collection.lister.list_tree` on the root or on a
  resolved container;
* ``show`` -- :func:`~pcli.collection.resolver.resolve` followed by
  :func:`~pcli.display.compose_display`;
* ``info`` -- counts of folders, requests, and examples.

Resource paths are given as separate arguments, one name per level, and are
matched case-insensitively::

    pcli ls users
    pcli show users "Get user" "200 OK"
"""

from __future__ import annotations

from typing import Any, Optional

import typer

from pcli.collection.models import Collection, NodeKind
from pcli.exceptions import PcliError
from pcli.models import GlobalConfig
from pcli.output import (
    debug,
    error,
    format_response,
    get_output,
    info,
    use_format,
    warning,
)


def _open_collection(ctx: typer.Context) -> tuple[Collection, GlobalConfig]:
    """Resolve the configuration and build the active collection tree.

    The configured ``output.format`` replaces the auto-detected one unless
    --json or --plain was given. Warns (without failing) when no collection
    source is available, in which case an empty collection is returned.

    Raises:
        PcliError: If the configuration is invalid or the collection cannot
            be loaded or parsed.
    """
    from pcli.collection.builder import build_collection
    from pcli.collection.loader import load_collection_document
    from pcli.config import resolve_api_key, resolve_config

    obj = ctx.obj or {}
    config = resolve_config(
        cli_collection=obj.get("collection"),
        cli_variables=obj.get("variables"),
        cli_format=obj.get("format"),
    )
    use_format(config.output.format)
    debug(f"Collection source: {config.collection or config.collection_url or '-'}")

    document = load_collection_document(config, api_key=resolve_api_key(config))
    if not document:
        warning("no collection is found, creating new")
    return build_collection(document, max_depth=config.max_depth), config


def ls_command(
    ctx: typer.Context,
    names: Optional[list[str]] = typer.Argument(
        None, help="Names leading to a folder or request (case-insensitive)."
    ),
) -> None:
    """List the collection tree.

    Prints every folder (F), request (R), and example (E), indented by
    depth and in collection order. With NAMES, only the subtree of the
    named folder or request is listed.

    Example::

        pcli ls
        pcli ls users admin
    """
    from pcli.collection.lister import count_entries, list_tree
    from pcli.collection.resolver import resolve

    try:
        root, config = _open_collection(ctx)
        target = resolve(root, names) if names else root
        listing = list_tree(target, max_depth=config.max_depth)
    except PcliError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    get_output().print_listing(listing, title=target.name)
    info(f"{count_entries(listing)} resources")


def show_command(
    ctx: typer.Context,
    names: list[str] = typer.Argument(
        ..., help="Names leading to the resource (case-insensitive)."
    ),
    ignore: Optional[list[str]] = typer.Option(
        None,
        "--ignore",
        "-i",
        help="Extra field to hide (url, params, query, headers, body). Repeatable. "
        "url and headers are hidden unless --all is given.",
    ),
    show_all: bool = typer.Option(
        False, "--all", "-a", help="Also show the url and headers fields."
    ),
    raw: bool = typer.Option(
        False, "--raw", help="Do not substitute {{variables}}."
    ),
) -> None:
    """Show one folder, request, or example.

    Requests and examples are shown as ``name method /path`` followed by
    their non-empty path variables, query, and body. Folders are shown
    with the listing of their subtree.

    Example::

        pcli show users "Get user"
        pcli show users "Get user" "200 OK" --ignore body
        pcli --variables '{"id": 7}' show users "Get user" --all
    """
    from pcli.collection.resolver import resolve
    from pcli.collection.variables import merge_variables
    from pcli.display import DEFAULT_IGNORE, compose_display

    ignored = frozenset() if show_all else DEFAULT_IGNORE
    if ignore:
        ignored = ignored | frozenset(ignore)

    try:
        root, config = _open_collection(ctx)
        node = resolve(root, names)
        variables = {} if raw else merge_variables(root, config.variables)
        block = compose_display(node, ignore=ignored, collection=root, variables=variables)
    except PcliError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    get_output().print_details(block)


def info_command(ctx: typer.Context) -> None:
    """Show collection info (name, description, resource counts, variables).

    Example::

        pcli info
        pcli --json info
    """
    try:
        root, _ = _open_collection(ctx)
    except PcliError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    counts = {kind: 0 for kind in (NodeKind.FOLDER, NodeKind.REQUEST, NodeKind.EXAMPLE)}
    for node in root.walk():
        counts[node.kind] += 1

    data: dict[str, Any] = {
        "name": root.name,
        "description": root.description or "-",
        "folders": counts[NodeKind.FOLDER],
        "requests": counts[NodeKind.REQUEST],
        "examples": counts[NodeKind.EXAMPLE],
        "variables": sorted(root.variables),
    }
    format_response(data)
