"""Side effects performed on an instance's install folder."""

from __future__ import annotations

from services.launcher.folders import open_folder
from services.launcher.process import LaunchOutcome, build_command, launch, log_timestamp
from services.launcher.removal import remove_install

__all__ = [
    "LaunchOutcome",
    "build_command",
    "launch",
    "log_timestamp",
    "open_folder",
    "remove_install",
]
