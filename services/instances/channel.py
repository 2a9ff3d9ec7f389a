"""The single channel carrying user commands and operation results."""

from __future__ import annotations

from queue import Empty, SimpleQueue
from typing import Iterator

from services.instances.messages import Message


class CommandChannel:
    """Thread-safe FIFO shared by the control thread and background operations.

    Any thread may :meth:`send`; only the control thread consumes.
    """

    def __init__(self) -> None:
        self._queue: SimpleQueue[Message] = SimpleQueue()

    def send(self, message: Message) -> None:
        self._queue.put(message)

    def get(self, timeout: float | None = None) -> Message:
        """Block for the next message; raises :class:`queue.Empty` on timeout."""

        return self._queue.get(timeout=timeout)

    def drain(self) -> Iterator[Message]:
        """Yield queued messages without blocking, including ones sent meanwhile."""

        while True:
            try:
                yield self._queue.get_nowait()
            except Empty:
                return

    def empty(self) -> bool:
        return self._queue.empty()


__all__ = ["CommandChannel"]
