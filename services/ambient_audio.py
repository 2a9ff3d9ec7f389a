"""Contract with the launcher's background music player."""

from __future__ import annotations

from enum import Enum
from typing import Protocol


class AudioCommand(str, Enum):
    PAUSE = "pause"
    RESUME = "resume"


class AmbientAudio(Protocol):
    """Background music that has to fall silent while a game is running."""

    def pause(self) -> None:
        ...

    def resume(self) -> None:
        ...


def deliver(audio: AmbientAudio, command: AudioCommand) -> None:
    if command is AudioCommand.PAUSE:
        audio.pause()
    else:
        audio.resume()


__all__ = ["AmbientAudio", "AudioCommand", "deliver"]
