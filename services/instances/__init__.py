"""Orchestration of instance commands, background operations and persistence."""

from __future__ import annotations

from services.instances.channel import CommandChannel
from services.instances.dispatcher import CommandDispatcher
from services.instances.messages import (
    AudioMessage,
    Deleted,
    InstanceMessage,
    Installed,
    Message,
    Updated,
)
from services.instances.paths import get_data_dir, get_instances_dir, get_registry_path
from services.instances.runner import OperationRunner
from services.instances.store import InstanceStore, RegistryLoadError

__all__ = [
    "AudioMessage",
    "CommandChannel",
    "CommandDispatcher",
    "Deleted",
    "InstanceMessage",
    "InstanceStore",
    "Installed",
    "Message",
    "OperationRunner",
    "RegistryLoadError",
    "Updated",
    "get_data_dir",
    "get_instances_dir",
    "get_registry_path",
]
