"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for swaggins:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.swaggins/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Global config** -- A single :class:`~swaggins.models.GlobalConfig` JSON
  file storing the default output format and log level.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, project-local config, and global config into the
  effective configuration.

Writes go through :func:`_atomic_write` (temp file, then rename).
"""

from __future__ import annotations

import json
import logging
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from swaggins.exceptions import ConfigError
from swaggins.models import GlobalConfig

_APP_NAME = "swaggins"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "swaggins.json"

ENV_FORMAT = "SWAGGINS_FORMAT"
ENV_LOG_LEVEL = "SWAGGINS_LOG_LEVEL"

OUTPUT_FORMATS = ("auto", "json", "plain", "rich")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Dotted keys accepted by ``swaggins config set``.
SETTABLE_KEYS = ("output.format", "log_level")


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True on platforms following the XDG Base Directory spec (Linux/BSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    return Path.home().joinpath(*default_segments)


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/swaggins/`` (default ``~/.config/swaggins/``).
    On macOS/Windows: ``~/.swaggins/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/swaggins/`` (default ``~/.local/share/swaggins/``).
    On macOS/Windows: ``~/.swaggins/data/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}" / "data"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write *data* to *path* via a temp file in the same directory and ``os.replace``.

    The temp file is removed if anything goes wrong before the rename.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    tmp_path: Optional[str] = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        ) as fd:
            tmp_path = fd.name
            fd.write(data)
            fd.flush()
            os.fsync(fd.fileno())
        os.replace(tmp_path, path)
    except BaseException:
        if tmp_path is not None and os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise


# --- Global config ---


def _global_config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def _read_json(path: Path, what: str) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Invalid {what} at {path}: {exc}") from exc


def load_global_config() -> GlobalConfig:
    """Load the global configuration, or defaults when no file exists.

    Raises:
        ConfigError: If the file contains invalid JSON or fails validation.
    """
    path = _global_config_path()
    if not path.is_file():
        return GlobalConfig()
    data = _read_json(path, "global config")
    try:
        return GlobalConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> Path:
    """Persist *config* atomically and return the file path."""
    path = _global_config_path()
    data = config.model_dump(mode="json")
    _atomic_write(path, json.dumps(data, indent=2) + "\n")
    return path


def set_config_value(key: str, value: str) -> GlobalConfig:
    """Update one setting in the global config file and return the new config.

    Args:
        key: One of :data:`SETTABLE_KEYS`.
        value: The new value; validated against the allowed choices.

    Raises:
        ConfigError: Unknown key or invalid value.
    """
    config = load_global_config()
    if key == "output.format":
        config.output.format = _check_format(value)
    elif key == "log_level":
        config.log_level = _check_log_level(value)
    else:
        raise ConfigError(
            f"Unknown config key '{key}'. Settable keys: {', '.join(SETTABLE_KEYS)}"
        )
    save_global_config(config)
    return config


def _check_format(value: str) -> str:
    fmt = value.lower()
    if fmt not in OUTPUT_FORMATS:
        raise ConfigError(
            f"Invalid output format '{value}'. Choose from: {', '.join(OUTPUT_FORMATS)}"
        )
    return fmt


def _check_log_level(value: str) -> str:
    level = value.upper()
    if level not in LOG_LEVELS:
        raise ConfigError(
            f"Invalid log level '{value}'. Choose from: {', '.join(LOG_LEVELS)}"
        )
    return level


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load ``./swaggins.json`` from the working directory, if present.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    data = _read_json(path, "project config")
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


# --- Precedence resolution ---


def resolve_config(
    cli_format: Optional[str] = None,
    cli_log_level: Optional[str] = None,
) -> GlobalConfig:
    """Resolve the effective configuration.

    Precedence (high to low):
        1. CLI flags (``cli_format``, ``cli_log_level``)
        2. Environment variables (``SWAGGINS_FORMAT``, ``SWAGGINS_LOG_LEVEL``)
        3. Project config (``./swaggins.json``)
        4. User config (``~/.config/swaggins/config.json``)
        5. Defaults

    Raises:
        ConfigError: Any layer holds an invalid value.
    """
    config = load_global_config()

    project = load_project_config() or {}
    project_output = project.get("output") or {}
    if not isinstance(project_output, dict):
        raise ConfigError(
            "Invalid project config: 'output' must be a JSON object, "
            f"got {type(project_output).__name__}"
        )
    if "format" in project_output:
        config.output.format = _check_format(str(project_output["format"]))
    if "log_level" in project:
        config.log_level = _check_log_level(str(project["log_level"]))

    env_format = os.environ.get(ENV_FORMAT)
    if env_format:
        config.output.format = _check_format(env_format)
    env_level = os.environ.get(ENV_LOG_LEVEL)
    if env_level:
        config.log_level = _check_log_level(env_level)

    if cli_format is not None:
        config.output.format = _check_format(cli_format)
    if cli_log_level is not None:
        config.log_level = _check_log_level(cli_log_level)

    return config


def configure_logging(level: str) -> None:
    """Set the root logger level; installs a stderr handler on first use."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger().setLevel(level.upper())
