"""Tests for pcli.config -- XDG paths, atomic writes, precedence, credentials."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from pcli.config import (
    _atomic_write,
    get_config_dir,
    get_data_dir,
    global_config_path,
    load_global_config,
    load_project_config,
    resolve_api_key,
    resolve_config,
    resolve_credential,
    save_global_config,
)
from pcli.exceptions import ConfigError, InvalidUsageError
from pcli.models import GlobalConfig, OutputConfig


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_json(path: Path, data: Any) -> None:
    """Write a dict as JSON to *path*, creating parent dirs."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


# ---------------------------------------------------------------------------
# XDG path resolution
# ---------------------------------------------------------------------------


class TestXDGPaths:
    def test_config_dir_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("pcli.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        result = get_config_dir()
        assert result == tmp_path / ".config" / "pcli"
        assert result.is_dir()

    def test_config_dir_xdg_custom(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("pcli.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "custom"))
        assert get_config_dir() == tmp_path / "custom" / "pcli"

    def test_data_dir_xdg_custom(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("pcli.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
        assert get_data_dir() == tmp_path / "data" / "pcli"

    def test_fallback_dirs(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("pcli.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
        assert get_config_dir() == tmp_path / ".pcli"
        assert get_data_dir() == tmp_path / ".pcli" / "logs"


# ---------------------------------------------------------------------------
# Atomic writes
# ---------------------------------------------------------------------------


class TestAtomicWrite:
    def test_creates_file_with_content(self, tmp_path: Path) -> None:
        target = tmp_path / "test.txt"
        _atomic_write(target, "hello world")
        assert target.read_text(encoding="utf-8") == "hello world"

    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        target = tmp_path / "a" / "b" / "test.txt"
        _atomic_write(target, "deep write")
        assert target.read_text(encoding="utf-8") == "deep write"

    def test_no_temp_files_left_on_success(self, tmp_path: Path) -> None:
        target = tmp_path / "test.txt"
        _atomic_write(target, "content")
        assert list(tmp_path.iterdir()) == [target]

    def test_no_temp_files_left_on_error(self, tmp_path: Path) -> None:
        target = tmp_path / "test.txt"
        with patch("pcli.config.os.fsync", side_effect=OSError("disk error")):
            with pytest.raises(OSError, match="disk error"):
                _atomic_write(target, "will fail")
        assert list(tmp_path.iterdir()) == []


# ---------------------------------------------------------------------------
# Global config
# ---------------------------------------------------------------------------


class TestGlobalConfig:
    def test_load_returns_defaults_when_missing(self, isolated_config: Path) -> None:
        cfg = load_global_config()
        assert cfg == GlobalConfig()
        assert cfg.collection is None
        assert cfg.api_key_source == "env:PCLI_API_KEY"
        assert cfg.api_key_header == "X-API-Key"
        assert cfg.max_depth == 64
        assert cfg.request.timeout == 30

    def test_save_and_load_roundtrip(self, isolated_config: Path) -> None:
        original = GlobalConfig(
            collection="api.json",
            variables={"baseUrl": "http://localhost"},
            output=OutputConfig(format="json"),
        )
        save_global_config(original)
        assert load_global_config() == original

    def test_load_invalid_json_raises_config_error(self, isolated_config: Path) -> None:
        path = global_config_path()
        path.write_text("{broken", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid global config"):
            load_global_config()

    def test_load_invalid_schema_raises_config_error(self, isolated_config: Path) -> None:
        _write_json(global_config_path(), {"max_depth": "very deep"})
        with pytest.raises(ConfigError):
            load_global_config()


# ---------------------------------------------------------------------------
# Project config
# ---------------------------------------------------------------------------


class TestProjectConfig:
    def test_returns_none_when_missing(self, isolated_config: Path) -> None:
        assert load_project_config() is None

    def test_loads_object(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "pcli.json", {"collection": "api.json"})
        assert load_project_config() == {"collection": "api.json"}

    def test_non_object_raises(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "pcli.json", ["a"])
        with pytest.raises(ConfigError, match="must be a JSON object"):
            load_project_config()

    def test_invalid_json_raises(self, isolated_config: Path) -> None:
        (isolated_config / "pcli.json").write_text("nope{", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid project config"):
            load_project_config()


# ---------------------------------------------------------------------------
# Precedence
# ---------------------------------------------------------------------------


class TestResolveConfig:
    def test_defaults(self, isolated_config: Path) -> None:
        assert resolve_config() == GlobalConfig()

    def test_global_layer(self, isolated_config: Path) -> None:
        save_global_config(GlobalConfig(collection="global.json"))
        assert resolve_config().collection == "global.json"

    def test_project_over_global(self, isolated_config: Path) -> None:
        save_global_config(GlobalConfig(collection="global.json", max_depth=10))
        _write_json(isolated_config / "pcli.json", {"collection": "project.json"})
        cfg = resolve_config()
        assert cfg.collection == "project.json"
        assert cfg.max_depth == 10

    def test_env_over_project(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _write_json(isolated_config / "pcli.json", {"collection": "project.json"})
        monkeypatch.setenv("PCLI_COLLECTION", "env.json")
        monkeypatch.setenv("PCLI_COLLECTION_URL", "https://api.example.com/c")
        monkeypatch.setenv("PCLI_VARIABLES", '{"a": "env"}')
        cfg = resolve_config()
        assert cfg.collection == "env.json"
        assert cfg.collection_url == "https://api.example.com/c"
        assert cfg.variables == {"a": "env"}

    def test_cli_over_env(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("PCLI_COLLECTION", "env.json")
        monkeypatch.setenv("PCLI_VARIABLES", '{"a": "env"}')
        cfg = resolve_config(
            cli_collection="cli.json", cli_variables='{"a": "cli"}', cli_format="json"
        )
        assert cfg.collection == "cli.json"
        assert cfg.variables == {"a": "cli"}
        assert cfg.output.format == "json"

    def test_invalid_project_values(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "pcli.json", {"max_depth": "deep"})
        with pytest.raises(ConfigError, match="Invalid project config"):
            resolve_config()

    def test_invalid_cli_variables(self, isolated_config: Path) -> None:
        with pytest.raises(InvalidUsageError):
            resolve_config(cli_variables="[1]")


# ---------------------------------------------------------------------------
# Credentials
# ---------------------------------------------------------------------------


class TestResolveCredential:
    def test_env_source(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MY_KEY", "abc")
        assert resolve_credential("env:MY_KEY") == "abc"

    def test_env_missing_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("MY_KEY", raising=False)
        with pytest.raises(ConfigError, match="not set"):
            resolve_credential("env:MY_KEY")

    def test_file_source(self, tmp_path: Path) -> None:
        key_file = tmp_path / "key.txt"
        key_file.write_text("  file-key\n", encoding="utf-8")
        assert resolve_credential(f"file:{key_file}") == "file-key"

    def test_file_missing_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            resolve_credential(f"file:{tmp_path / 'nope'}")

    def test_unknown_format_raises(self) -> None:
        with pytest.raises(ConfigError, match="Unknown credential source"):
            resolve_credential("vault:secret")


class TestResolveApiKey:
    def test_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PCLI_API_KEY", "k1")
        assert resolve_api_key(GlobalConfig()) == "k1"

    def test_missing_env_is_none(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("PCLI_API_KEY", raising=False)
        assert resolve_api_key(GlobalConfig()) is None

    def test_missing_file_is_none(self, tmp_path: Path) -> None:
        cfg = GlobalConfig(api_key_source=f"file:{tmp_path / 'none'}")
        assert resolve_api_key(cfg) is None

    def test_bad_source_raises(self) -> None:
        with pytest.raises(ConfigError):
            resolve_api_key(GlobalConfig(api_key_source="plain-text-key"))
