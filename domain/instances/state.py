"""Operational state of an instance."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class InstanceStatus(str, Enum):
    READY = "ready"
    WORKING = "working"
    PLAYING = "playing"


@dataclass(frozen=True, slots=True)
class InstanceState:
    """One of ``Ready``, ``Working{status}`` or ``Playing``.

    Use the :meth:`ready`, :meth:`working` and :meth:`playing` constructors;
    ``status`` only carries text for the working state.
    """

    kind: InstanceStatus = InstanceStatus.READY
    status: str = ""

    def __post_init__(self) -> None:
        if self.kind is not InstanceStatus.WORKING and self.status:
            raise ValueError(f"Only the working state carries a status, got {self.kind.value}")

    @classmethod
    def ready(cls) -> "InstanceState":
        return cls(InstanceStatus.READY)

    @classmethod
    def working(cls, status: str) -> "InstanceState":
        return cls(InstanceStatus.WORKING, status)

    @classmethod
    def playing(cls) -> "InstanceState":
        return cls(InstanceStatus.PLAYING)

    @property
    def is_ready(self) -> bool:
        return self.kind is InstanceStatus.READY

    @property
    def is_working(self) -> bool:
        return self.kind is InstanceStatus.WORKING

    @property
    def is_playing(self) -> bool:
        return self.kind is InstanceStatus.PLAYING

    def __str__(self) -> str:
        if self.is_working:
            return f"Working ({self.status})"
        return self.kind.value.capitalize()


__all__ = ["InstanceState", "InstanceStatus"]
