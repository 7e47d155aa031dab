"""pcli -- Explore and print API-collection documents from the terminal.

This package loads a Postman-style collection (a tree of folders, requests,
and saved response examples) from a local file or a remote URL and lets the
user navigate it by name. Resources are addressed by a path of
case-insensitive names, for example ``pcli show users get-user ok``.

Typical workflow::

    pcli -c api.postman_collection.json ls     # print the whole tree
    pcli -c api.postman_collection.json show users list-users

Modules:
    app: Typer application and CLI entry point.
    collection: Tree model, document builder, loader, resolver, lister,
        detail extractor, and variable substitution.
    display: Composition of resource details into displayable blocks.
    models: Pydantic configuration models.
    config: XDG-aware configuration and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.3.0"
