"""Application-wide configuration loaded from JSON resources."""

from __future__ import annotations

import json
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any, Mapping

_CONFIG_RESOURCE = "app.json"
_APP_CONFIG_CACHE: AppConfig | None = None

_DEFAULT_DEBUG_ARGUMENT = "-d"
_DEFAULT_LOG_DIR_NAME = "logs"
_DEFAULT_TIMESTAMP_FORMAT = "%Y-%m-%d %H-%M-%S"
_DEFAULT_INSTALLING_STATUS = "Installing"
_DEFAULT_SHUTDOWN_TIMEOUT = 30.0


@dataclass(frozen=True)
class LaunchSettings:
    """How game processes are started and where their output is kept."""

    debug_argument: str = _DEFAULT_DEBUG_ARGUMENT
    log_dir_name: str = _DEFAULT_LOG_DIR_NAME
    timestamp_format: str = _DEFAULT_TIMESTAMP_FORMAT


@dataclass(frozen=True)
class OperationSettings:
    """Settings for background instance operations."""

    installing_status: str = _DEFAULT_INSTALLING_STATUS
    shutdown_timeout_s: float = _DEFAULT_SHUTDOWN_TIMEOUT


@dataclass(frozen=True)
class AppConfig:
    """Structured configuration values for the launcher."""

    launch: LaunchSettings
    operations: OperationSettings


def get_app_config() -> AppConfig:
    """Return the cached application configuration."""

    global _APP_CONFIG_CACHE
    if _APP_CONFIG_CACHE is None:
        _APP_CONFIG_CACHE = load_app_config()
    return _APP_CONFIG_CACHE


def reset_app_config_cache() -> None:
    """Reset the cached configuration for subsequent reloads."""

    global _APP_CONFIG_CACHE
    _APP_CONFIG_CACHE = None


def load_app_config(path: str | Path | None = None) -> AppConfig:
    """Load configuration from ``path`` or the bundled JSON resource."""

    data = _read_config_data(path)
    launch = _parse_launch_section(data.get("launch"))
    operations = _parse_operations_section(data.get("operations"))
    return AppConfig(launch=launch, operations=operations)


def get_launch_settings() -> LaunchSettings:
    """Convenience accessor for the launch configuration."""

    return get_app_config().launch


def _read_config_data(path: str | Path | None) -> Mapping[str, Any]:
    if path is not None:
        return _load_json_from_path(Path(path).expanduser())
    return _load_default_config_data()


def _load_json_from_path(path: Path) -> Mapping[str, Any]:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError:
        return {}
    return _parse_json(raw)


def _load_default_config_data() -> Mapping[str, Any]:
    try:
        resource = resources.files(__package__).joinpath(_CONFIG_RESOURCE)
        raw = resource.read_text(encoding="utf-8")
    except (FileNotFoundError, OSError):
        return {}
    return _parse_json(raw)


def _parse_json(raw: str) -> Mapping[str, Any]:
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        return {}
    if isinstance(parsed, Mapping):
        return parsed
    return {}


def _parse_launch_section(section: Any) -> LaunchSettings:
    if not isinstance(section, Mapping):
        return LaunchSettings()
    debug_argument = _coerce_text(section.get("debug_argument"), default=_DEFAULT_DEBUG_ARGUMENT)
    log_dir_name = _coerce_dir_name(section.get("log_dir_name"), default=_DEFAULT_LOG_DIR_NAME)
    timestamp_format = _coerce_text(
        section.get("timestamp_format"), default=_DEFAULT_TIMESTAMP_FORMAT
    )
    return LaunchSettings(
        debug_argument=debug_argument,
        log_dir_name=log_dir_name,
        timestamp_format=timestamp_format,
    )


def _parse_operations_section(section: Any) -> OperationSettings:
    if not isinstance(section, Mapping):
        return OperationSettings()
    installing = _coerce_text(section.get("installing_status"), default=_DEFAULT_INSTALLING_STATUS)
    timeout = _coerce_positive_float(
        section.get("shutdown_timeout_s"), default=_DEFAULT_SHUTDOWN_TIMEOUT
    )
    return OperationSettings(installing_status=installing, shutdown_timeout_s=timeout)


def _coerce_text(value: Any, *, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


def _coerce_dir_name(value: Any, *, default: str) -> str:
    text = _coerce_text(value, default=default)
    if "/" in text or "\\" in text or text in {".", ".."}:
        return default
    return text


def _coerce_positive_float(value: Any, *, default: float) -> float:
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        candidate = float(value)
    elif isinstance(value, str):
        try:
            candidate = float(value.strip())
        except ValueError:
            return default
    else:
        return default
    if candidate != candidate or candidate <= 0:
        return default
    return candidate


__all__ = [
    "AppConfig",
    "LaunchSettings",
    "OperationSettings",
    "get_app_config",
    "get_launch_settings",
    "load_app_config",
    "reset_app_config_cache",
]
