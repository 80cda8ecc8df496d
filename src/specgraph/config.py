"""Configuration management with XDG paths and precedence resolution.

This module resolves the :class:`~specgraph.models.PreprocessOptions` used
for a run:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.specgraph/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Global config** -- A single :class:`~specgraph.models.GlobalConfig`
  JSON file storing default options and output preferences.
* **Project config** -- ``./specgraph.json`` pins options for one
  repository.
* **Precedence resolution** -- :func:`resolve_options` merges CLI flags,
  environment variables, project config, and global config into the final
  effective options.
"""

from __future__ import annotations

import json
import os
import platform
from pathlib import Path
from typing import Any, Optional

from specgraph.exceptions import ConfigError
from specgraph.models import GlobalConfig, PreprocessOptions

_APP_NAME = "specgraph"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "specgraph.json"

ENV_OPTIONS = {
    "SPECGRAPH_STRICT": "strict",
    "SPECGRAPH_VIEWER": "viewer",
    "SPECGRAPH_ADD_SUB_OPERATIONS": "add_sub_operations",
}
"""Environment variables that override boolean options, mapped to option names."""

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    return Path.home().joinpath(*default_segments)


def get_config_dir() -> Path:
    """Return the configuration directory.

    On Linux/BSD: ``$XDG_CONFIG_HOME/specgraph/`` (default ``~/.config/specgraph/``).
    On macOS/Windows: ``~/.specgraph/``.

    The directory is not created; specgraph only reads configuration.
    """
    if _is_xdg_platform():
        return _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    return Path.home() / f".{_APP_NAME}"


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/specgraph/`` (default ``~/.local/share/specgraph/``).
    On macOS/Windows: ``~/.specgraph/logs/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}" / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Config files ---


def _read_json(path: Path, label: str) -> Optional[Any]:
    if not path.is_file():
        return None
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as exc:
        raise ConfigError(f"Invalid {label} at {path}: {exc}") from exc


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the config directory.

    Returns:
        The deserialised :class:`~specgraph.models.GlobalConfig`. If the
        file does not exist, a default instance is returned.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = get_config_dir() / _CONFIG_FILENAME
    data = _read_json(path, "global config")
    if data is None:
        return GlobalConfig()
    try:
        return GlobalConfig.model_validate(data)
    except ValueError as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./specgraph.json``.

    The file's ``options`` object is layered over the global options.

    Returns:
        The parsed JSON object, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    data = _read_json(path, "project config")
    if data is not None and not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


def parse_bool(value: str, source: str) -> bool:
    """Parse a boolean option value from an environment variable.

    Raises:
        ConfigError: If *value* is not one of 1/0, true/false, yes/no, on/off.
    """
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigError(f"Invalid boolean value '{value}' for {source}")


# --- Precedence resolution ---


def resolve_options(
    cli_strict: Optional[bool] = None,
    cli_viewer: Optional[bool] = None,
    cli_add_sub_operations: Optional[bool] = None,
) -> PreprocessOptions:
    """Resolve preprocessing options with the full precedence chain.

    Precedence (high to low):
        1. CLI flags (``None`` means the flag was not given)
        2. Environment variables (``SPECGRAPH_STRICT``, ``SPECGRAPH_VIEWER``,
           ``SPECGRAPH_ADD_SUB_OPERATIONS``)
        3. Project config (``./specgraph.json``, ``options`` key)
        4. User config (``~/.config/specgraph/config.json``, ``options`` key)
        5. Defaults

    Pass-through options from the config files are preserved.

    Returns:
        The effective :class:`~specgraph.models.PreprocessOptions`.

    Raises:
        ConfigError: If a config file or environment value is invalid.
    """
    # 5 + 4. Defaults and user config
    merged: dict[str, Any] = load_global_config().options.model_dump(by_alias=False)

    # 3. Project config; camelCase keys are normalised by validating first
    project = load_project_config()
    if project is not None and project.get("options") is not None:
        try:
            project_options = PreprocessOptions.model_validate(project["options"])
        except ValueError as exc:
            raise ConfigError(f"Invalid options in project config: {exc}") from exc
        merged.update(project_options.model_dump(exclude_unset=True))
        merged.update(project_options.model_extra or {})

    # 2. Environment variables
    for env_var, option in ENV_OPTIONS.items():
        env_value = os.environ.get(env_var)
        if env_value:
            merged[option] = parse_bool(env_value, env_var)

    # 1. CLI flags
    cli_values = {
        "strict": cli_strict,
        "viewer": cli_viewer,
        "add_sub_operations": cli_add_sub_operations,
    }
    merged.update({k: v for k, v in cli_values.items() if v is not None})

    return PreprocessOptions.model_validate(merged)
