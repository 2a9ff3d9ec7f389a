"""Turn instance commands into state transitions plus background work."""

from __future__ import annotations

import logging
import threading
import time
from collections import Counter
from pathlib import Path
from typing import Callable, Protocol

from domain.instances import (
    DeleteOperation,
    Instance,
    InstanceCommand,
    InstanceState,
    Operation,
    StateChanged,
    is_state_changing,
)

_LOGGER = logging.getLogger(__name__)


class OperationExecutor(Protocol):
    def run(self, operation: Operation) -> None:
        ...


Spawn = Callable[[Callable[[], None], str, bool], None]


def _spawn_thread(target: Callable[[], None], name: str, finish_before_exit: bool) -> None:
    thread = threading.Thread(target=target, name=name, daemon=not finish_before_exit)
    thread.start()


class CommandDispatcher:
    """Bridge between control-thread state changes and background operations.

    ``dispatch`` must only be called from the control thread.  Operations run
    on their own threads and report back exclusively through the channel
    used by the runner, so instance state is never touched off the control
    thread.
    """

    def __init__(self, runner: OperationExecutor, *, spawn: Spawn | None = None) -> None:
        self._runner = runner
        self._spawn = spawn or _spawn_thread
        self._condition = threading.Condition()
        self._in_flight: Counter[tuple[Path, str]] = Counter()

    def dispatch(self, instance: Instance, command: InstanceCommand) -> bool:
        """Apply ``command`` to ``instance``; ``False`` when it was rejected."""

        if is_state_changing(command) and self.is_deleting(instance.path):
            _LOGGER.debug(
                "Ignoring %s for %s while it is being removed",
                type(command).__name__,
                instance.name,
            )
            return False

        effects = instance.apply(command)
        if effects.rejected:
            return False
        if effects.transition is not None:
            instance.apply(StateChanged(effects.transition))
        for operation in effects.operations:
            try:
                self.schedule(operation)
            except RuntimeError as exc:
                _LOGGER.error(
                    "Could not start %s operation for %s: %s",
                    operation.kind,
                    instance.name,
                    exc,
                )
                if effects.transition is not None:
                    instance.apply(StateChanged(InstanceState.ready()))
                return False
        return True

    def schedule(self, operation: Operation) -> None:
        """Start ``operation`` in the background without waiting for it."""

        key = (operation.target, operation.kind)
        with self._condition:
            self._in_flight[key] += 1
        _LOGGER.debug("Scheduling %s operation for %s", operation.kind, operation.target)

        def _run() -> None:
            try:
                self._runner.run(operation)
            except Exception:
                _LOGGER.exception("%s operation for %s crashed", operation.kind, operation.target)
            finally:
                self._finish(key)

        try:
            self._spawn(_run, f"instance-{operation.kind}", operation.finish_before_exit)
        except RuntimeError:
            self._finish(key)
            raise

    def is_busy(self, path: Path) -> bool:
        with self._condition:
            return any(count for (target, _), count in self._in_flight.items() if target == path)

    def is_deleting(self, path: Path) -> bool:
        with self._condition:
            return self._in_flight[(Path(path), DeleteOperation.kind)] > 0

    def in_flight(self) -> int:
        with self._condition:
            return sum(self._in_flight.values())

    def wait_idle(self, timeout: float | None = None) -> bool:
        """Block until no operation is running; ``False`` on timeout."""

        deadline = None if timeout is None else time.monotonic() + timeout
        with self._condition:
            while sum(self._in_flight.values()):
                remaining = None if deadline is None else deadline - time.monotonic()
                if remaining is not None and remaining <= 0:
                    return False
                self._condition.wait(remaining)
            return True

    def _finish(self, key: tuple[Path, str]) -> None:
        with self._condition:
            self._in_flight[key] -= 1
            if self._in_flight[key] <= 0:
                del self._in_flight[key]
            self._condition.notify_all()


__all__ = ["CommandDispatcher", "OperationExecutor", "Spawn"]
