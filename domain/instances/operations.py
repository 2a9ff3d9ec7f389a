"""Descriptions of background work requested by instance commands.

Operations are plain data. The instance decides *what* has to happen; the
runner in :mod:`services.instances.runner` decides *how* it is carried out.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Union

from .models import Instance, InstanceSource, InstanceType


@dataclass(frozen=True, slots=True)
class LaunchOperation:
    path: Path
    # Relative to ``path`` unless absolute.
    executable: Path
    name: str
    debug: bool = False

    kind = "launch"
    finish_before_exit = False

    @property
    def target(self) -> Path:
        return self.path


@dataclass(frozen=True, slots=True)
class UpdateOperation:
    instance: Instance

    kind = "update"
    finish_before_exit = True

    @property
    def target(self) -> Path:
        return self.instance.path


@dataclass(frozen=True, slots=True)
class RevealOperation:
    path: Path

    kind = "reveal"
    finish_before_exit = False

    @property
    def target(self) -> Path:
        return self.path


@dataclass(frozen=True, slots=True)
class DeleteOperation:
    path: Path

    kind = "delete"
    finish_before_exit = True

    @property
    def target(self) -> Path:
        return self.path


@dataclass(frozen=True, slots=True)
class InstallOperation:
    destination: Path
    name: str
    instance_type: InstanceType
    source: InstanceSource

    kind = "install"
    finish_before_exit = True

    @property
    def target(self) -> Path:
        return self.destination


Operation = Union[
    LaunchOperation,
    UpdateOperation,
    RevealOperation,
    DeleteOperation,
    InstallOperation,
]


__all__ = [
    "DeleteOperation",
    "InstallOperation",
    "LaunchOperation",
    "Operation",
    "RevealOperation",
    "UpdateOperation",
]
