"""Execute operation descriptions on background threads."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from app.config import LaunchSettings
from domain.instances import (
    DeleteOperation,
    Instance,
    InstallOperation,
    InstanceState,
    LaunchOperation,
    Operation,
    RevealOperation,
    StateChanged,
    UpdateOperation,
)
from services.ambient_audio import AudioCommand
from services.instances.channel import CommandChannel
from services.instances.messages import (
    AudioMessage,
    Deleted,
    InstanceMessage,
    Installed,
    Updated,
)
from services.launcher import LaunchOutcome, launch, open_folder, remove_install
from services.update import InstanceUpdateService
from shared.result import Result

_LOGGER = logging.getLogger(__name__)

Launcher = Callable[..., LaunchOutcome]


class OperationRunner:
    """Carry out one operation and report its completion on the channel.

    Every operation that owes a completion message sends exactly one, even
    when the work itself fails unexpectedly.
    """

    def __init__(
        self,
        channel: CommandChannel,
        *,
        update_service: InstanceUpdateService | None = None,
        launch_settings: LaunchSettings | None = None,
        launcher: Launcher = launch,
        reveal: Callable[[Path], bool] = open_folder,
        remover: Callable[[Path], Result[Path, str]] = remove_install,
    ) -> None:
        self._channel = channel
        self._update_service = update_service
        self._launch_settings = launch_settings
        self._launcher = launcher
        self._reveal = reveal
        self._remover = remover

    def run(self, operation: Operation) -> None:
        if isinstance(operation, LaunchOperation):
            self._run_launch(operation)
        elif isinstance(operation, UpdateOperation):
            self._run_update(operation)
        elif isinstance(operation, RevealOperation):
            self._run_reveal(operation)
        elif isinstance(operation, DeleteOperation):
            self._run_delete(operation)
        elif isinstance(operation, InstallOperation):
            self._run_install(operation)
        else:
            raise TypeError(f"Unsupported operation: {operation!r}")

    def _run_launch(self, operation: LaunchOperation) -> None:
        self._channel.send(AudioMessage(AudioCommand.PAUSE))
        try:
            self._launcher(
                operation.path,
                operation.executable,
                operation.name,
                operation.debug,
                settings=self._launch_settings,
            )
        except OSError as exc:
            _LOGGER.error("Failed to run game %s: %s", operation.name, exc)
        except Exception:
            _LOGGER.exception("Unexpected error while running %s", operation.name)
        finally:
            self._channel.send(
                InstanceMessage(operation.path, StateChanged(InstanceState.ready()))
            )
            self._channel.send(AudioMessage(AudioCommand.RESUME))

    def _run_update(self, operation: UpdateOperation) -> None:
        instance = operation.instance
        result: Result[Instance, str]
        if self._update_service is None:
            _LOGGER.error("Failed to update instance %s: no update service configured", instance.name)
            result = Result.err("No update service configured")
        else:
            try:
                result = Result.ok(self._update_service.update_instance(instance))
            except Exception as exc:
                _LOGGER.error("Failed to update instance %s: %s", instance.name, exc, exc_info=True)
                result = Result.err(str(exc))
        self._channel.send(Updated(instance.path, result))

    def _run_reveal(self, operation: RevealOperation) -> None:
        try:
            self._reveal(operation.path)
        except Exception:
            _LOGGER.exception("Unexpected error while opening %s", operation.path)

    def _run_delete(self, operation: DeleteOperation) -> None:
        try:
            result = self._remover(operation.path)
        except Exception as exc:
            _LOGGER.exception("Unexpected error while removing %s", operation.path)
            result = Result.err(str(exc))
        self._channel.send(Deleted(operation.path, result))

    def _run_install(self, operation: InstallOperation) -> None:
        result: Result[Instance, str]
        if self._update_service is None:
            _LOGGER.error("Install failed: no update service configured")
            result = Result.err("No update service configured")
        else:
            try:
                instance = self._update_service.install_instance(
                    operation.destination,
                    operation.name,
                    operation.instance_type,
                    operation.source,
                )
            except Exception as exc:
                _LOGGER.error("Install failed: %s", exc, exc_info=True)
                result = Result.err(str(exc))
            else:
                result = Result.ok(instance)
        self._channel.send(Installed(operation.destination, result))


__all__ = ["OperationRunner"]
