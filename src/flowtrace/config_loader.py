"""Load flowtrace settings from flowtrace.yaml, flowtrace.toml or pyproject.toml.

Only switches are read from files; sinks are code and must be set on
``TraceConfig`` directly.
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import TYPE_CHECKING

import yaml

from flowtrace._errors import ConfigError
from flowtrace.settings import config as global_config

if TYPE_CHECKING:
    from flowtrace.settings import TraceConfig

SETTING_KEYS = ("enabled", "show_context_info", "raise_sink_errors")


def load_settings(root: Path) -> dict[str, bool]:
    """Read flowtrace settings from ``root``.

    Looks for flowtrace.yaml, flowtrace.yml, flowtrace.toml, then the
    ``[tool.flowtrace]`` table of pyproject.toml.  The first file found
    wins.  Returns an empty dict when none is present.

    Raises:
        ConfigError: If the file cannot be parsed or a value is not a boolean.

    """
    for name in ("flowtrace.yaml", "flowtrace.yml"):
        path = root / name
        if path.is_file():
            return _validate(_parse_yaml(path), path)
    toml_path = root / "flowtrace.toml"
    if toml_path.is_file():
        return _validate(_flatten_section(_parse_toml(toml_path)), toml_path)
    pyproject = root / "pyproject.toml"
    if pyproject.is_file():
        tool = _parse_toml(pyproject).get("tool")
        if isinstance(tool, dict) and isinstance(tool.get("flowtrace"), dict):
            return _validate(tool["flowtrace"], pyproject)
    return {}


def configure_from(root: Path, target: TraceConfig | None = None) -> dict[str, bool]:
    """Apply settings found in ``root`` to ``target`` (default: process-wide).

    Returns the settings that were applied.
    """
    settings = load_settings(root)
    cfg = target if target is not None else global_config
    for key, value in settings.items():
        setattr(cfg, key, value)
    return settings


def _parse_yaml(path: Path) -> dict[str, object]:
    try:
        data = yaml.safe_load(path.read_text()) or {}
    except (OSError, yaml.YAMLError) as exc:
        msg = f"Cannot read {path}: {exc}"
        raise ConfigError(msg) from exc
    if not isinstance(data, dict):
        msg = f"{path}: expected a mapping at top level"
        raise ConfigError(msg)
    return _flatten_section(data)


def _parse_toml(path: Path) -> dict[str, object]:
    try:
        return tomllib.loads(path.read_text())
    except (OSError, tomllib.TOMLDecodeError) as exc:
        msg = f"Cannot read {path}: {exc}"
        raise ConfigError(msg) from exc


def _flatten_section(data: dict[str, object]) -> dict[str, object]:
    """Extract flowtrace.* keys into top-level settings."""
    result: dict[str, object] = {}
    section = data.get("flowtrace")
    if isinstance(section, dict):
        result.update(section)
    for k, v in data.items():
        if k != "flowtrace" and k in SETTING_KEYS:
            result[k] = v
    return result


def _validate(data: dict[str, object], path: Path) -> dict[str, bool]:
    settings: dict[str, bool] = {}
    for key in SETTING_KEYS:
        if key not in data:
            continue
        value = data[key]
        if not isinstance(value, bool):
            msg = f"{path}: {key} must be true or false, got {value!r}"
            raise ConfigError(msg)
        settings[key] = value
    return settings
