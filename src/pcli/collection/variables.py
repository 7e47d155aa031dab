"""Substitute ``{{name}}`` variables into extracted request details.

Variables come from two places: the collection's own ``variable`` list and
a JSON object given on the command line (``--variables``) or through
``PCLI_VARIABLES``. Command-line values win over collection values.

Path variables written as ``:id`` are not touched; only ``{{name}}``
placeholders are replaced, and placeholders without a value are kept
verbatim.
"""

from __future__ import annotations

import json
import re
from typing import Any, Mapping, Optional

from pcli.collection.models import Collection, ResourceDetails
from pcli.exceptions import InvalidUsageError

_PLACEHOLDER = re.compile(r"\{\{\s*([^{}\s]+)\s*\}\}")


def parse_variables(text: Optional[str]) -> dict[str, Any]:
    """Parse a variables JSON blob. ``None`` or blank text gives ``{}``.

    Raises:
        InvalidUsageError: If *text* is not a JSON object.
    """
    if text is None or not text.strip():
        return {}
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise InvalidUsageError(f"Variables must be valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise InvalidUsageError(
            f"Variables must be a JSON object (got {type(data).__name__})"
        )
    return data


def merge_variables(
    collection: Collection, overrides: Mapping[str, Any]
) -> dict[str, Any]:
    """Layer *overrides* over the collection's own variables."""
    merged = dict(collection.variables)
    merged.update(overrides)
    return merged


def apply_variables(
    details: ResourceDetails, variables: Mapping[str, Any]
) -> ResourceDetails:
    """Return a copy of *details* with ``{{name}}`` placeholders substituted.

    Every string in ``path``, ``params``, ``query``, ``headers``, and
    ``body`` (including dict keys and nested values) is rewritten. The
    ``method`` is left alone.
    """
    if not variables:
        return details
    return ResourceDetails(
        method=details.method,
        path=_substitute(details.path, variables),
        params=_substitute(details.params, variables),
        query=_substitute(details.query, variables),
        headers=_substitute(details.headers, variables),
        body=_substitute(details.body, variables),
    )


def _substitute(value: Any, variables: Mapping[str, Any]) -> Any:
    if isinstance(value, str):
        return _PLACEHOLDER.sub(lambda m: _lookup(m, variables), value)
    if isinstance(value, dict):
        return {
            _substitute(k, variables): _substitute(v, variables)
            for k, v in value.items()
        }
    if isinstance(value, list):
        return [_substitute(item, variables) for item in value]
    return value


def _lookup(match: re.Match[str], variables: Mapping[str, Any]) -> str:
    name = match.group(1)
    if name not in variables:
        return match.group(0)
    return str(variables[name])
