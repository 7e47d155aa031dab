"""Shared test fixtures for pcli.

Provides reusable fixtures for loading collection fixtures, building small
hand-made trees, creating isolated config environments, managing output
state, and running CLI commands. These fixtures are automatically discovered
by pytest and available to all test modules without explicit imports.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from pcli.collection.models import (
    Collection,
    Example,
    Folder,
    Request,
    RequestData,
)
from pcli.output import reset_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time.  When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale
    ("I/O operation on closed file").  Resetting forces a fresh manager
    to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Collection fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_collection_path() -> Path:
    """Path to the sample Postman v2.1 collection fixture."""
    return FIXTURES_DIR / "sample_collection.json"


@pytest.fixture
def sample_document(sample_collection_path: Path) -> dict[str, Any]:
    """Load the raw sample collection document."""
    with open(sample_collection_path) as f:
        return json.load(f)


@pytest.fixture
def sample_root(sample_document: dict[str, Any]) -> Collection:
    """The sample collection built into a resource tree."""
    from pcli.collection.builder import build_collection

    return build_collection(sample_document)


@pytest.fixture
def small_tree() -> Collection:
    """A hand-built tree: ``Collection{F f1{R r1{E e1}}}``.

    ``r1`` is ``POST /items/:id`` with a JSON body and one query parameter;
    ``e1`` has no request snapshot of its own.
    """
    r1 = Request(
        name="r1",
        handle="0.0",
        request=RequestData(
            method="POST",
            raw_url="{{host}}/items/:id?x=1",
            host="{{host}}",
            path_segments=["items", ":id"],
            path_variables={"id": "7"},
            query={"x": "1"},
            headers={"Content-Type": "application/json"},
            raw_body='{"a": 1}',
        ),
        examples=[Example(name="e1", handle="0.0.0", request_handle="0.0")],
    )
    return Collection(
        name="root",
        items=[Folder(name="f1", handle="0", items=[r1])],
    )


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME to subdirectories of tmp_path
    so that tests never touch real user config. Clears all PCLI_*
    environment variables and changes the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setattr("pcli.config._is_xdg_platform", lambda: True)

    for var in [
        "PCLI_COLLECTION",
        "PCLI_COLLECTION_URL",
        "PCLI_VARIABLES",
        "PCLI_API_KEY",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
