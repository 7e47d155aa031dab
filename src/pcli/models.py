"""Pydantic configuration models for pcli.

The tree model lives in :mod:`pcli.collection.models`; this module holds the
user-facing configuration, serialised as JSON in the user's config directory
(``~/.config/pcli/config.json``) or in a project-local ``pcli.json``:
:class:`RequestConfig`, :class:`OutputConfig`, and :class:`GlobalConfig`.
"""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field


class RequestConfig(BaseModel):
    """HTTP settings used when fetching a remote collection."""

    timeout: int = Field(default=30, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: Literal["auto", "json", "plain", "rich"] = Field(
        default="auto",
        description="Output format used when neither --json nor --plain is given",
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/pcli/config.json``.

    Loaded and saved by :func:`~pcli.config.load_global_config` and
    :func:`~pcli.config.save_global_config`. Fields here have the
    lowest precedence and can be overridden by project config, environment
    variables, or CLI flags. See :func:`~pcli.config.resolve_config`
    for the full precedence chain.

    Example::

        GlobalConfig(
            collection_url="https://api.getpostman.com/collections/1234",
            api_key_source="env:POSTMAN_API_KEY",
        )
    """

    collection: Optional[str] = Field(
        default=None, description="Path (or URL, or '-') of the collection document"
    )
    collection_url: Optional[str] = Field(
        default=None, description="Remote collection fetched with the API key"
    )
    api_key_source: str = Field(
        default="env:PCLI_API_KEY",
        description="Credential source for the API key: env:VAR or file:/path",
    )
    api_key_header: str = Field(
        default="X-API-Key", description="Header carrying the API key"
    )
    variables: dict[str, Any] = Field(
        default_factory=dict, description="Values substituted into {{name}} placeholders"
    )
    max_depth: int = Field(
        default=64, description="Deepest nesting accepted in a collection"
    )
    request: RequestConfig = Field(default_factory=RequestConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
