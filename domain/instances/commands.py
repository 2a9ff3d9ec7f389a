"""Commands accepted by an instance and the effects they produce."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Union

from .models import Instance
from .operations import (
    DeleteOperation,
    LaunchOperation,
    Operation,
    RevealOperation,
    UpdateOperation,
)
from .state import InstanceState

_LOGGER = logging.getLogger(__name__)

UPDATING_STATUS = "Updating"


@dataclass(frozen=True, slots=True)
class Play:
    debug: bool = False


@dataclass(frozen=True, slots=True)
class Update:
    pass


@dataclass(frozen=True, slots=True)
class RevealFolder:
    pass


@dataclass(frozen=True, slots=True)
class Delete:
    pass


@dataclass(frozen=True, slots=True)
class StateChanged:
    state: InstanceState


InstanceCommand = Union[Play, Update, RevealFolder, Delete, StateChanged]

# Commands that may only start from the ``Ready`` state.
GATED_COMMANDS = (Play, Update, Delete)


@dataclass(frozen=True, slots=True)
class Effects:
    """Outcome of applying a command to an instance.

    ``transition`` has to be applied before any of ``operations`` is
    scheduled so a second command can never observe the old state while the
    first command's work is already running.
    """

    transition: InstanceState | None = None
    operations: tuple[Operation, ...] = ()
    rejected: bool = False

    @classmethod
    def reject(cls) -> "Effects":
        return cls(rejected=True)


def is_state_changing(command: InstanceCommand) -> bool:
    return isinstance(command, GATED_COMMANDS)


def apply_command(instance: Instance, command: InstanceCommand) -> Effects:
    """Translate ``command`` into effects for ``instance``.

    Only :class:`StateChanged` mutates the instance here; every other command
    returns a description that the dispatcher applies and schedules.
    """

    if isinstance(command, StateChanged):
        instance.state = command.state
        return Effects()

    if is_state_changing(command) and not instance.state.is_ready:
        _LOGGER.debug(
            "Ignoring %s for %s while %s",
            type(command).__name__,
            instance.name,
            instance.state,
        )
        return Effects.reject()

    if isinstance(command, Play):
        return Effects(
            transition=InstanceState.playing(),
            operations=(
                LaunchOperation(
                    path=instance.path,
                    executable=instance.executable,
                    name=instance.name,
                    debug=command.debug,
                ),
            ),
        )
    if isinstance(command, Update):
        return Effects(
            transition=InstanceState.working(UPDATING_STATUS),
            operations=(UpdateOperation(instance.detached()),),
        )
    if isinstance(command, RevealFolder):
        return Effects(operations=(RevealOperation(instance.path),))
    if isinstance(command, Delete):
        return Effects(operations=(DeleteOperation(instance.path),))
    raise TypeError(f"Unsupported instance command: {command!r}")


__all__ = [
    "Delete",
    "Effects",
    "InstanceCommand",
    "Play",
    "RevealFolder",
    "StateChanged",
    "UPDATING_STATUS",
    "Update",
    "apply_command",
    "is_state_changing",
]
