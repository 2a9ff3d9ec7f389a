"""Wire the launcher core together at application start-up."""

from __future__ import annotations

import logging
import time

from app.config import AppConfig, get_app_config
from services.ambient_audio import AmbientAudio
from services.instances import (
    CommandChannel,
    CommandDispatcher,
    InstanceStore,
    OperationRunner,
)
from services.instances.dispatcher import Spawn
from services.update import InstanceUpdateService
from shared.logging_config import ensure_app_logging
from viewmodels.instances_viewmodel import InstancesViewModel

_LOGGER = logging.getLogger(__name__)


def build_launcher(
    *,
    store: InstanceStore | None = None,
    update_service: InstanceUpdateService | None = None,
    audio: AmbientAudio | None = None,
    channel: CommandChannel | None = None,
    config: AppConfig | None = None,
    spawn: Spawn | None = None,
    configure_logging: bool = True,
) -> InstancesViewModel:
    """Construct the view-model with its channel, runner and dispatcher.

    The registry is not loaded here; call :meth:`InstancesViewModel.load` and
    decide how to surface a corrupt registry.
    """

    if configure_logging:
        ensure_app_logging()
    config = config or get_app_config()
    channel = channel or CommandChannel()
    runner = OperationRunner(
        channel,
        update_service=update_service,
        launch_settings=config.launch,
    )
    dispatcher = CommandDispatcher(runner, spawn=spawn)
    viewmodel = InstancesViewModel(
        store or InstanceStore(),
        dispatcher,
        channel,
        audio=audio,
        config=config,
    )
    _LOGGER.info("Launcher core initialised")
    return viewmodel


def shutdown(viewmodel: InstancesViewModel, timeout: float | None = None) -> bool:
    """Let running operations finish, apply their results and save.

    User commands still queued are dropped instead of starting new work.

    Returns ``False`` when operations were still running after ``timeout``.
    """

    if timeout is None:
        timeout = viewmodel.config.operations.shutdown_timeout_s
    deadline = time.monotonic() + timeout
    viewmodel.stop_accepting()
    # Queued user commands are dropped, so only running work can add results.
    while True:
        viewmodel.process_pending()
        idle = viewmodel.dispatcher.wait_idle(max(0.0, deadline - time.monotonic()))
        if not idle or not viewmodel.has_pending():
            break
    if not idle:
        _LOGGER.warning("Shutting down with %d operation(s) still running", viewmodel.dispatcher.in_flight())
    viewmodel.save()
    return idle


__all__ = ["build_launcher", "shutdown"]
