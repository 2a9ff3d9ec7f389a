"""Domain model for launcher-managed game instances."""

from .commands import (
    UPDATING_STATUS,
    Delete,
    Effects,
    InstanceCommand,
    Play,
    RevealFolder,
    StateChanged,
    Update,
    apply_command,
    is_state_changing,
)
from .models import Instance, InstanceSnapshot, InstanceSource, InstanceType, construct
from .operations import (
    DeleteOperation,
    InstallOperation,
    LaunchOperation,
    Operation,
    RevealOperation,
    UpdateOperation,
)
from .state import InstanceState, InstanceStatus

__all__ = [
    "Delete",
    "DeleteOperation",
    "Effects",
    "InstallOperation",
    "Instance",
    "InstanceCommand",
    "InstanceSnapshot",
    "InstanceSource",
    "InstanceState",
    "InstanceStatus",
    "InstanceType",
    "LaunchOperation",
    "Operation",
    "Play",
    "RevealFolder",
    "RevealOperation",
    "StateChanged",
    "UPDATING_STATUS",
    "Update",
    "UpdateOperation",
    "apply_command",
    "construct",
    "is_state_changing",
]
