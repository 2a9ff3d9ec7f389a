"""Locations of launcher data on disk."""

from __future__ import annotations

import os
from pathlib import Path

DATA_DIR_ENV = "ESLAUNCHER_DATA_DIR"
_DEFAULT_DIRNAME = ".eslauncher"
INSTANCES_DIRNAME = "instances"
REGISTRY_FILENAME = "instances.json"


def get_data_dir() -> Path:
    """Return the configured data directory, falling back to the user home."""

    override = os.environ.get(DATA_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / _DEFAULT_DIRNAME


def get_instances_dir() -> Path:
    return get_data_dir() / INSTANCES_DIRNAME


def get_registry_path() -> Path:
    return get_instances_dir() / REGISTRY_FILENAME


__all__ = [
    "DATA_DIR_ENV",
    "get_data_dir",
    "get_instances_dir",
    "get_registry_path",
]
