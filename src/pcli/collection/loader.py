"""Load collection documents from a local file, stdin, or a remote URL.

This module handles all I/O for fetching raw collection documents and
converting them into Python dictionaries. JSON and YAML are both accepted,
with automatic format detection.

The public functions are:

* :func:`load_document` -- Load and parse a document from any supported source.
* :func:`fetch_document` -- GET a document over HTTP, optionally sending an
  API key header (as the Postman API expects).
* :func:`load_collection_document` -- Pick the source from the effective
  configuration, returning ``{}`` when no usable source exists.

After loading, the raw dict should be passed to
:func:`~pcli.collection.builder.build_collection`.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import httpx
import yaml

from pcli.exceptions import CollectionLoadError, CollectionParseError, ConnectionError_
from pcli.models import GlobalConfig

logger = logging.getLogger(__name__)


def load_document(
    source: str,
    api_key: Optional[str] = None,
    api_key_header: str = "X-API-Key",
    timeout: float = 30.0,
    verify: bool = True,
) -> dict[str, Any]:
    """Load a collection document from URL, file path, or stdin ('-').

    Supports JSON and YAML formats.
    Auto-detects format from content/extension.

    Args:
        source: A URL (http/https), file path, or '-' for stdin.
        api_key: Sent in *api_key_header* when *source* is a URL.
        api_key_header: Header name for the API key.
        timeout: HTTP timeout in seconds.
        verify: Verify TLS certificates for URL sources.

    Returns:
        The parsed document as a dictionary.

    Raises:
        CollectionLoadError: If the source cannot be read or fetched.
        CollectionParseError: If the content cannot be parsed.
        ConnectionError_: On network failures while fetching a URL.
    """
    if source == "-":
        return _load_from_stdin()
    elif source.startswith(("http://", "https://")):
        return fetch_document(
            source, api_key, api_key_header, timeout=timeout, verify=verify
        )
    else:
        return _load_from_file(source)


def fetch_document(
    url: str,
    api_key: Optional[str] = None,
    api_key_header: str = "X-API-Key",
    timeout: float = 30.0,
    verify: bool = True,
    transport: Optional[httpx.BaseTransport] = None,
) -> dict[str, Any]:
    """Fetch a collection document from *url*.

    Args:
        url: The HTTP(S) URL to fetch.
        api_key: Optional API key, sent in *api_key_header*.
        api_key_header: Header name for the API key.
        timeout: Request timeout in seconds.
        verify: Verify TLS certificates.
        transport: Optional httpx transport (used by tests).

    Returns:
        The parsed document dictionary.

    Raises:
        CollectionLoadError: If the server answers with an error status.
        ConnectionError_: On timeouts, DNS failures, or refused connections.
        CollectionParseError: If the body cannot be parsed.
    """
    headers = {api_key_header: api_key} if api_key else {}
    logger.debug("Fetching collection from %s", url)
    try:
        with httpx.Client(
            timeout=timeout,
            verify=verify,
            follow_redirects=True,
            transport=transport,
        ) as client:
            response = client.get(url, headers=headers)
            response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise CollectionLoadError(
            f"HTTP {exc.response.status_code} fetching collection from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise ConnectionError_(f"Failed to fetch collection from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    hint = ""
    if "json" in content_type:
        hint = "json"
    elif "yaml" in content_type or "yml" in content_type:
        hint = "yaml"

    return _parse_content(response.text, hint=hint)


def load_collection_document(
    config: GlobalConfig, api_key: Optional[str] = None
) -> dict[str, Any]:
    """Load the collection document named by the effective configuration.

    Sources are tried in this order:

    1. ``config.collection`` -- a file path, URL, or ``-``. A file path that
       does not exist yields ``{}``.
    2. ``config.collection_url`` -- fetched only when no ``collection`` is
       configured and an *api_key* is available.

    A document of the form ``{"collection": {...}}`` is unwrapped.

    Returns:
        The collection document, or ``{}`` when there is no usable source.
        Callers are expected to warn the user about the empty result.
    """
    source = config.collection
    timeout = float(config.request.timeout)
    verify = config.request.verify_ssl

    document: dict[str, Any] = {}
    if source:
        if source == "-" or source.startswith(("http://", "https://")) or Path(
            source
        ).is_file():
            document = load_document(
                source,
                api_key=api_key,
                api_key_header=config.api_key_header,
                timeout=timeout,
                verify=verify,
            )
        else:
            logger.debug("Collection file %s does not exist", source)
    elif config.collection_url and api_key:
        document = fetch_document(
            config.collection_url,
            api_key,
            config.api_key_header,
            timeout=timeout,
            verify=verify,
        )
    else:
        logger.debug("No collection file or remote collection configured")

    inner = document.get("collection")
    return inner if isinstance(inner, dict) else document


def _load_from_stdin() -> dict[str, Any]:
    """Read a document from stdin.

    Raises:
        CollectionLoadError: If stdin cannot be read or is empty.
        CollectionParseError: If content cannot be parsed.
    """
    try:
        content = sys.stdin.read()
    except Exception as exc:
        raise CollectionLoadError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise CollectionLoadError("No input received from stdin")

    return _parse_content(content, hint="stdin")


def _load_from_file(path: str) -> dict[str, Any]:
    """Load a document from a local file.

    Supports .json, .yaml, and .yml extensions. Falls back to content-based
    detection if the extension is not recognized.

    Raises:
        CollectionLoadError: If the file does not exist or cannot be read.
        CollectionParseError: If content cannot be parsed.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise CollectionLoadError(f"Collection file not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CollectionLoadError(f"Failed to read collection file {path}: {exc}") from exc

    if not content.strip():
        raise CollectionParseError(f"Collection file is empty: {path}")

    suffix = file_path.suffix.lower()
    hint = ""
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"

    logger.debug("Loaded %d bytes from %s", len(content), path)
    return _parse_content(content, hint=hint)


def _parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Parse content as JSON or YAML.

    Tries JSON first (unless hint is 'yaml'), then falls back to YAML.

    Raises:
        CollectionParseError: If the content cannot be parsed as either
            format, or is not an object.
    """
    json_error: Exception | None = None
    yaml_error: Exception | None = None

    if hint != "yaml":
        try:
            result = json.loads(content)
            if not isinstance(result, dict):
                raise CollectionParseError(
                    "Collection must be a JSON/YAML object (got "
                    f"{type(result).__name__})"
                )
            return result
        except json.JSONDecodeError as exc:
            json_error = exc
            if hint == "json":
                raise CollectionParseError(f"Invalid JSON: {exc}") from exc

    try:
        result = yaml.safe_load(content)
        if not isinstance(result, dict):
            raise CollectionParseError(
                "Collection must be a JSON/YAML object (got "
                f"{type(result).__name__ if result is not None else 'empty document'})"
            )
        return result
    except yaml.YAMLError as exc:
        yaml_error = exc

    msg = "Failed to parse collection as JSON or YAML"
    if json_error:
        msg += f"\n  JSON error: {json_error}"
    if yaml_error:
        msg += f"\n  YAML error: {yaml_error}"
    raise CollectionParseError(msg)
