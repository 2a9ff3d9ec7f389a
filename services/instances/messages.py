"""Messages travelling through the command channel."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Union

from domain.instances import Instance, InstanceCommand
from services.ambient_audio import AudioCommand
from shared.result import Result


@dataclass(frozen=True, slots=True)
class InstanceMessage:
    """Route ``command`` to the instance installed at ``path``."""

    path: Path
    command: InstanceCommand


@dataclass(frozen=True, slots=True)
class Installed:
    destination: Path
    result: Result[Instance, str]


@dataclass(frozen=True, slots=True)
class Updated:
    path: Path
    result: Result[Instance, str]


@dataclass(frozen=True, slots=True)
class Deleted:
    path: Path
    result: Result[Path, str]


@dataclass(frozen=True, slots=True)
class AudioMessage:
    command: AudioCommand


Message = Union[InstanceMessage, Installed, Updated, Deleted, AudioMessage]


__all__ = [
    "AudioMessage",
    "Deleted",
    "InstanceMessage",
    "Installed",
    "Message",
    "Updated",
]
