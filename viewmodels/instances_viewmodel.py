"""View-model owning the instance registry and reconciling operation results."""

from __future__ import annotations

import logging
from pathlib import Path

from app.config import AppConfig, get_app_config
from domain.instances import (
    Instance,
    InstanceCommand,
    InstanceSnapshot,
    InstanceSource,
    InstanceState,
    InstanceType,
    InstallOperation,
    StateChanged,
)
from services.ambient_audio import AmbientAudio, deliver
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
from services.instances.paths import get_instances_dir
from services.instances.store import InstanceStore

logger = logging.getLogger(__name__)


class InstancesViewModel:
    """Expose instance snapshots and commands to the presentation layer.

    All methods run on the control thread.  Background operations only talk
    back through ``channel``; :meth:`process_pending` applies what they
    report and saves the registry once per batch when it changed.
    """

    def __init__(
        self,
        store: InstanceStore,
        dispatcher: CommandDispatcher,
        channel: CommandChannel,
        *,
        audio: AmbientAudio | None = None,
        config: AppConfig | None = None,
        instances_dir: Path | None = None,
    ) -> None:
        self._store = store
        self._dispatcher = dispatcher
        self._channel = channel
        self._audio = audio
        self._config = config or get_app_config()
        self._instances_dir = instances_dir
        self._instances: list[Instance] = []
        self._pending_installs: dict[Path, str] = {}
        self._dirty = False
        self._accepting = True

    # ------------------------------------------------------------------
    # Registry access
    # ------------------------------------------------------------------
    def load(self) -> list[InstanceSnapshot]:
        """Replace the registry with the stored one; load errors propagate."""

        self._instances = self._store.load()
        self._dirty = False
        return self.snapshots()

    def save(self) -> bool:
        saved = self._store.save(self._instances)
        if saved:
            self._dirty = False
        return saved

    def snapshots(self) -> list[InstanceSnapshot]:
        return [instance.snapshot() for instance in self._instances]

    def snapshot(self, path: Path) -> InstanceSnapshot | None:
        instance = self._find(path)
        return instance.snapshot() if instance is not None else None

    def pending_installs(self) -> dict[Path, str]:
        """Return install destinations still in progress with their status label."""

        return dict(self._pending_installs)

    def has_pending(self) -> bool:
        """Return ``True`` while messages are waiting on the channel."""

        return not self._channel.empty()

    def stop_accepting(self) -> None:
        """Refuse new work from here on; results and state changes still apply."""

        self._accepting = False

    @property
    def dispatcher(self) -> CommandDispatcher:
        return self._dispatcher

    @property
    def config(self) -> AppConfig:
        return self._config

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def submit(self, path: Path, command: InstanceCommand) -> None:
        """Queue a user command; it is applied by :meth:`process_pending`."""

        self._channel.send(InstanceMessage(Path(path), command))

    def start_installation(
        self,
        name: str,
        instance_type: InstanceType,
        source: InstanceSource,
    ) -> Path | None:
        """Schedule the installation of a new instance named ``name``."""

        if not self._accepting:
            logger.warning("Not installing %r while shutting down", name)
            return None
        name = name.strip()
        if not name or name in {".", ".."} or "/" in name or "\\" in name:
            logger.error("Cannot install an instance named %r", name)
            return None

        destination = self._resolve_instances_dir() / name
        if self._find(destination) is not None:
            logger.error("An instance already lives at %s", destination)
            return None
        if destination in self._pending_installs:
            logger.warning("An installation into %s is already running", destination)
            return None

        self._pending_installs[destination] = self._config.operations.installing_status
        try:
            self._dispatcher.schedule(
                InstallOperation(
                    destination=destination,
                    name=name,
                    instance_type=instance_type,
                    source=source,
                )
            )
        except RuntimeError as exc:
            self._pending_installs.pop(destination, None)
            logger.error("Could not start installation into %s: %s", destination, exc)
            return None
        return destination

    def process_pending(self) -> int:
        """Handle every queued message and persist the registry if it changed."""

        handled = 0
        for message in self._channel.drain():
            self.handle(message)
            handled += 1
        if self._dirty:
            self.save()
        return handled

    def handle(self, message: Message) -> None:
        if isinstance(message, InstanceMessage):
            self._handle_instance_message(message)
        elif isinstance(message, Updated):
            self._handle_updated(message)
        elif isinstance(message, Deleted):
            self._handle_deleted(message)
        elif isinstance(message, Installed):
            self._handle_installed(message)
        elif isinstance(message, AudioMessage):
            self._handle_audio(message)
        else:
            raise TypeError(f"Unsupported message: {message!r}")

    # ------------------------------------------------------------------
    # Message handlers
    # ------------------------------------------------------------------
    def _handle_instance_message(self, message: InstanceMessage) -> None:
        instance = self._find(message.path)
        if instance is None:
            logger.warning(
                "Dropping %s for unknown instance %s",
                type(message.command).__name__,
                message.path,
            )
            return
        if not self._accepting and not isinstance(message.command, StateChanged):
            logger.info(
                "Dropping %s for %s while shutting down",
                type(message.command).__name__,
                instance.name,
            )
            return
        accepted = self._dispatcher.dispatch(instance, message.command)
        if not accepted:
            logger.debug("%s rejected for %s", type(message.command).__name__, instance.name)

    def _handle_updated(self, message: Updated) -> None:
        instance = self._find(message.path)
        if instance is None:
            logger.warning("Update finished for unknown instance %s", message.path)
            return
        if message.result.is_ok():
            updated = message.result.unwrap()
            instance.refresh_from(updated)
            self._dirty = True
            logger.info("%s is now at version %s", instance.name, instance.version)
        else:
            logger.error("Failed to update %s: %s", instance.name, message.result.unwrap_err())
        instance.apply(StateChanged(InstanceState.ready()))

    def _handle_deleted(self, message: Deleted) -> None:
        if message.result.is_err():
            logger.error(
                "Instance at %s was not removed: %s",
                message.path,
                message.result.unwrap_err(),
            )
            return
        before = len(self._instances)
        self._instances = [
            instance for instance in self._instances if instance.path != message.path
        ]
        if len(self._instances) != before:
            self._dirty = True
            logger.info("Removed instance at %s from the registry", message.path)

    def _handle_installed(self, message: Installed) -> None:
        self._pending_installs.pop(message.destination, None)
        if message.result.is_err():
            logger.error("Install failed: %s", message.result.unwrap_err())
            return
        instance = message.result.unwrap()
        if self._find(instance.path) is not None:
            logger.error("Refusing duplicate instance at %s", instance.path)
            return
        instance.apply(StateChanged(InstanceState.ready()))
        self._instances.append(instance)
        self._dirty = True
        logger.info("Installed %s (%s)", instance.name, instance.version)

    def _handle_audio(self, message: AudioMessage) -> None:
        if self._audio is None:
            logger.debug("No ambient audio attached; ignoring %s", message.command.value)
            return
        try:
            deliver(self._audio, message.command)
        except Exception:
            logger.warning("Ambient audio failed to %s", message.command.value, exc_info=True)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _find(self, path: Path) -> Instance | None:
        path = Path(path)
        for instance in self._instances:
            if instance.path == path:
                return instance
        return None

    def _resolve_instances_dir(self) -> Path:
        return self._instances_dir if self._instances_dir is not None else get_instances_dir()


__all__ = ["InstancesViewModel"]
