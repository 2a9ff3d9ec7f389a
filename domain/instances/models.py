"""Identity and configuration of installed game builds."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from .state import InstanceState

if TYPE_CHECKING:
    from .commands import Effects, InstanceCommand


class InstanceType(str, Enum):
    """Build kind of an instance, deciding its executable and archive naming."""

    MACOS = "MacOS"
    WINDOWS = "Windows"
    LINUX = "Linux"
    APPIMAGE = "AppImage"
    UNKNOWN = "Unknown"

    def archive(self) -> str | None:
        """Return the marker used to pick the matching release archive."""

        return _ARCHIVE_MARKERS.get(self)

    def executable(self) -> str | None:
        """Return the executable location relative to the install folder."""

        return _EXECUTABLES.get(self)

    @classmethod
    def for_platform(cls, platform: str) -> "InstanceType":
        """Return the default build kind for a ``sys.platform`` value."""

        if platform.startswith("win"):
            return cls.WINDOWS
        if platform == "darwin":
            return cls.MACOS
        if platform.startswith("linux"):
            return cls.APPIMAGE
        return cls.UNKNOWN


_ARCHIVE_MARKERS: dict[InstanceType, str] = {
    InstanceType.MACOS: "mac",
    InstanceType.WINDOWS: "win64",
    InstanceType.LINUX: ".tar.gz",
    InstanceType.APPIMAGE: ".AppImage",
}

_EXECUTABLES: dict[InstanceType, str] = {
    InstanceType.MACOS: "Endless Sky.app/Contents/MacOS/Endless Sky",
    InstanceType.WINDOWS: "EndlessSky.exe",
    InstanceType.LINUX: "endless-sky",
    InstanceType.APPIMAGE: "endless-sky.AppImage",
}


@dataclass(frozen=True, slots=True)
class InstanceSource:
    """Where an instance was installed or last updated from."""

    type: str
    identifier: str

    def describe(self) -> str:
        return f"{self.type} {self.identifier}".strip()


@dataclass(frozen=True, slots=True)
class InstanceSnapshot:
    """Read-only view of an instance handed to the presentation layer."""

    path: Path
    executable: Path
    name: str
    version: str
    instance_type: InstanceType
    source: InstanceSource
    state: InstanceState

    @property
    def can_play(self) -> bool:
        return self.state.is_ready

    @property
    def can_update(self) -> bool:
        return self.state.is_ready

    @property
    def can_delete(self) -> bool:
        return self.state.is_ready

    @property
    def can_reveal(self) -> bool:
        return True

    @property
    def status_label(self) -> str | None:
        return self.state.status if self.state.is_working else None


@dataclass(slots=True)
class Instance:
    """One installed build tracked by the launcher.

    ``path`` identifies the instance within the registry. ``state`` is
    transient: it never takes part in equality or persistence and starts as
    :meth:`InstanceState.ready` for every constructed instance.
    """

    path: Path
    executable: Path
    name: str
    version: str
    instance_type: InstanceType
    source: InstanceSource
    state: InstanceState = field(default_factory=InstanceState.ready, compare=False)

    def __post_init__(self) -> None:
        self.path = Path(self.path)
        self.executable = Path(self.executable)
        self.instance_type = InstanceType(self.instance_type)

    @property
    def executable_path(self) -> Path:
        return self.path / self.executable

    def snapshot(self) -> InstanceSnapshot:
        return InstanceSnapshot(
            path=self.path,
            executable=self.executable,
            name=self.name,
            version=self.version,
            instance_type=self.instance_type,
            source=self.source,
            state=self.state,
        )

    def detached(self) -> "Instance":
        """Return a copy safe to hand to a background operation."""

        return replace(self, state=InstanceState.ready())

    def refresh_from(self, other: "Instance") -> None:
        """Take over the configuration of ``other`` while keeping identity and state."""

        self.executable = other.executable
        self.name = other.name
        self.version = other.version
        self.instance_type = other.instance_type
        self.source = other.source

    def apply(self, command: "InstanceCommand") -> "Effects":
        from .commands import apply_command

        return apply_command(self, command)


def construct(
    path: Path | str,
    executable: Path | str,
    name: str,
    version: str,
    instance_type: InstanceType,
    source: InstanceSource,
) -> Instance:
    """Build a fresh :class:`Instance` in the ``Ready`` state."""

    return Instance(
        path=Path(path),
        executable=Path(executable),
        name=name,
        version=version,
        instance_type=instance_type,
        source=source,
    )


__all__ = [
    "Instance",
    "InstanceSnapshot",
    "InstanceSource",
    "InstanceType",
    "construct",
]
