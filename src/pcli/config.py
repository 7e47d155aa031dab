"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for pcli:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.pcli/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Global config** -- A single :class:`~pcli.models.GlobalConfig`
  JSON file storing defaults (collection source, API key source, variables,
  output format).
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, project-local config, and global config into the
  final effective configuration.
* **Credential resolution** -- :func:`resolve_credential` reads the API key
  from an environment variable or a file.

All file writes use an atomic temp-file-then-rename strategy
(:func:`_atomic_write`) to prevent data loss on crash or power failure.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from pcli.collection.variables import parse_variables
from pcli.exceptions import ConfigError
from pcli.models import GlobalConfig

_APP_NAME = "pcli"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "pcli.json"

ENV_COLLECTION = "PCLI_COLLECTION"
ENV_COLLECTION_URL = "PCLI_COLLECTION_URL"
ENV_VARIABLES = "PCLI_VARIABLES"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform uses the XDG Base Directory layout (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/pcli/`` (default ``~/.config/pcli/``).
    On macOS/Windows: ``~/.pcli/``.

    Returns:
        Absolute path to the configuration directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        base = _xdg_base("XDG_CONFIG_HOME", (".config",))
        path = base / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/pcli/`` (default ``~/.local/share/pcli/``).
    On macOS/Windows: ``~/.pcli/logs/``.

    Returns:
        Absolute path to the data directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        base = _xdg_base("XDG_DATA_HOME", (".local", "share"))
        path = base / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. On any failure the
    temp file is removed.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close below
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Global config ---


def global_config_path() -> Path:
    """Path to the global config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the XDG config directory.

    Returns:
        The deserialised :class:`~pcli.models.GlobalConfig`. If the
        file does not exist, a default instance is returned.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        text = path.read_text(encoding="utf-8")
        data = json.loads(text)
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically to disk."""
    data = config.model_dump(mode="json")
    _atomic_write(global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./pcli.json``.

    A repository can pin its collection file and variables here. Keys are
    the same as in :class:`~pcli.models.GlobalConfig`.

    Returns:
        The parsed JSON as a dict, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Project config at {path} must be a JSON object")
    return data


# --- Precedence resolution ---


def resolve_config(
    cli_collection: Optional[str] = None,
    cli_variables: Optional[str] = None,
    cli_format: Optional[str] = None,
) -> GlobalConfig:
    """Resolve config with full precedence chain.

    Precedence (high to low):
        1. CLI flags (``cli_collection``, ``cli_variables``, ``cli_format``)
        2. Environment variables (``PCLI_COLLECTION``, ``PCLI_COLLECTION_URL``,
           ``PCLI_VARIABLES``)
        3. Project config (``./pcli.json``)
        4. User config (``~/.config/pcli/config.json``)
        5. Defaults

    Variables are replaced, not merged, by each higher layer.

    Returns:
        The effective :class:`~pcli.models.GlobalConfig`.

    Raises:
        ConfigError: If a config file is invalid.
        InvalidUsageError: If a variables blob is not a JSON object.
    """
    # 5 + 4. Global config fills in defaults automatically
    global_cfg = load_global_config()
    data = global_cfg.model_dump(mode="json")

    # 3. Project-local config
    project = load_project_config()
    if project:
        data.update(project)
        try:
            global_cfg = GlobalConfig.model_validate(data)
        except ValueError as exc:
            raise ConfigError(f"Invalid project config: {exc}") from exc

    # 2. Environment variables
    env_collection = os.environ.get(ENV_COLLECTION)
    if env_collection:
        global_cfg.collection = env_collection
    env_url = os.environ.get(ENV_COLLECTION_URL)
    if env_url:
        global_cfg.collection_url = env_url
    env_variables = os.environ.get(ENV_VARIABLES)
    if env_variables:
        global_cfg.variables = parse_variables(env_variables)

    # 1. CLI flags
    if cli_collection is not None:
        global_cfg.collection = cli_collection
    if cli_variables is not None:
        global_cfg.variables = parse_variables(cli_variables)
    if cli_format is not None:
        global_cfg.output.format = cli_format

    return global_cfg


# --- Credential source resolution ---


def resolve_credential(source: str) -> str:
    """Resolve a credential from its source descriptor.

    Supported formats:
        - ``"env:VAR_NAME"`` -- reads ``os.environ["VAR_NAME"]``
        - ``"file:/path/to/file"`` -- reads file content, stripped of whitespace

    Raises:
        ConfigError: If the source can't be resolved.
    """
    if source.startswith("env:"):
        var_name = source[4:]
        value = os.environ.get(var_name)
        if value is None:
            raise ConfigError(
                f"Environment variable '{var_name}' is not set (source: {source})"
            )
        return value

    if source.startswith("file:"):
        path = Path(source[5:]).expanduser()
        if not path.is_file():
            raise ConfigError(f"Credential file not found: {path} (source: {source})")
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise ConfigError(f"Cannot read credential file {path}: {exc}") from exc

    raise ConfigError(f"Unknown credential source format: {source}")


def resolve_api_key(config: GlobalConfig) -> Optional[str]:
    """Return the API key named by ``config.api_key_source``, or ``None``.

    A missing environment variable or file means "no key"; only a
    malformed source descriptor is an error.

    Raises:
        ConfigError: If the source descriptor format is unknown.
    """
    source = config.api_key_source
    if source.startswith("env:"):
        return os.environ.get(source[4:]) or None
    if source.startswith("file:") and not Path(source[5:]).expanduser().is_file():
        return None
    return resolve_credential(source) or None
