"""Tests for the console-script entry point and logging setup in pcli.app."""

from __future__ import annotations

import logging
from pathlib import Path
from unittest.mock import patch

import pytest
import typer
from rich.logging import RichHandler

from pcli import app as app_module
from pcli.exceptions import CollectionLoadError
from pcli.exit_codes import EXIT_COLLECTION_ERROR, EXIT_GENERIC_FAILURE


@pytest.fixture(autouse=True)
def _no_signal_handlers(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep main() from replacing the test runner's SIGINT handler."""
    monkeypatch.setattr(app_module, "_setup_signal_handlers", lambda: None)


class TestMain:
    def test_pcli_error_exits_with_its_code(self, isolated_config: Path, capfd) -> None:
        with patch.object(app_module, "app", side_effect=CollectionLoadError("gone")):
            with pytest.raises(SystemExit) as exc_info:
                app_module.main()
        assert exc_info.value.code == EXIT_COLLECTION_ERROR
        assert "gone" in capfd.readouterr().err

    def test_unexpected_error_writes_crash_log(self, isolated_config: Path) -> None:
        with patch.object(app_module, "app", side_effect=RuntimeError("kaboom")):
            with pytest.raises(SystemExit) as exc_info:
                app_module.main()
        assert exc_info.value.code == EXIT_GENERIC_FAILURE
        logs = list((isolated_config / "data" / "pcli" / "logs").glob("crash-*.log"))
        assert len(logs) == 1
        assert "kaboom" in logs[0].read_text()

    def test_system_exit_passes_through(self, isolated_config: Path) -> None:
        with patch.object(app_module, "app", side_effect=SystemExit(0)):
            with pytest.raises(SystemExit) as exc_info:
                app_module.main()
        assert exc_info.value.code == 0


class TestConfigureLogging:
    def test_single_handler(self) -> None:
        app_module._configure_logging(verbose=False)
        app_module._configure_logging(verbose=True)
        logger = logging.getLogger("pcli")
        handlers = [h for h in logger.handlers if isinstance(h, RichHandler)]
        assert len(handlers) == 1
        assert logger.level == logging.DEBUG
        assert logger.propagate is False

    def test_quiet_level(self) -> None:
        app_module._configure_logging(verbose=False)
        assert logging.getLogger("pcli").level == logging.WARNING


class TestMainCallback:
    def _run(self, **flags) -> dict:
        options = {
            "version": False,
            "collection": "c.json",
            "variables": None,
            "json_output": False,
            "plain_output": False,
            "no_color": True,
            "quiet": True,
            "verbose": False,
        }
        options.update(flags)
        ctx = typer.Context(typer.main.get_command(app_module.app))
        app_module.main_callback(ctx, **options)
        return ctx.obj

    def test_context_keys(self) -> None:
        assert self._run() == {"collection": "c.json", "variables": None, "format": None}

    def test_json_flag_recorded(self) -> None:
        assert self._run(json_output=True)["format"] == "json"

    def test_plain_flag_recorded(self) -> None:
        assert self._run(plain_output=True)["format"] == "plain"
