from __future__ import annotations

import stat
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

import pytest

from domain.instances import Instance, InstanceSource, InstanceType, Operation, construct
from services.instances import CommandChannel, CommandDispatcher, InstanceStore, OperationRunner
from services.update import ReleaseInfo
from viewmodels.instances_viewmodel import InstancesViewModel

POSIX_ONLY = pytest.mark.skipif(sys.platform.startswith("win"), reason="uses a POSIX shell script")


def make_instance(
    path: Path | str = "/games/es-dev",
    *,
    name: str = "es-dev",
    version: str = "0.9.16",
    instance_type: InstanceType = InstanceType.LINUX,
    source: InstanceSource | None = None,
) -> Instance:
    return construct(
        path=Path(path),
        executable=Path(instance_type.executable() or ""),
        name=name,
        version=version,
        instance_type=instance_type,
        source=source or InstanceSource(type="Continuous", identifier="master"),
    )


def write_script(path: Path, body: str) -> Path:
    """Write an executable ``/bin/sh`` script at ``path``."""

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("#!/bin/sh\n" + body + "\n", encoding="utf-8")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


def run_inline(target: Callable[[], None], name: str, finish_before_exit: bool) -> None:
    target()


class DeferredSpawn:
    """Collect scheduled operations so tests decide when they complete."""

    def __init__(self) -> None:
        self.pending: list[tuple[str, Callable[[], None]]] = []

    def __call__(self, target: Callable[[], None], name: str, finish_before_exit: bool) -> None:
        self.pending.append((name, target))

    def run_all(self) -> None:
        while self.pending:
            _, target = self.pending.pop(0)
            target()


class RecordingRunner:
    def __init__(self) -> None:
        self.operations: list[Operation] = []

    def run(self, operation: Operation) -> None:
        self.operations.append(operation)


class RecordingAudio:
    def __init__(self) -> None:
        self.events: list[str] = []

    def pause(self) -> None:
        self.events.append("pause")

    def resume(self) -> None:
        self.events.append("resume")


@dataclass
class StaticReleaseProvider:
    release: ReleaseInfo | None
    requests: list[tuple[InstanceSource, InstanceType]] = field(default_factory=list)

    def fetch_latest(self, source: InstanceSource, instance_type: InstanceType) -> ReleaseInfo | None:
        self.requests.append((source, instance_type))
        return self.release


class RecordingInstaller:
    """Build installer that creates the destination folder and reports a version."""

    def __init__(self, version: str = "0.10.0", error: Exception | None = None) -> None:
        self.version = version
        self.error = error
        self.installed: list[Path] = []

    def install(
        self,
        destination: Path,
        name: str,
        instance_type: InstanceType,
        source: InstanceSource,
    ) -> Instance:
        if self.error is not None:
            raise self.error
        destination.mkdir(parents=True, exist_ok=True)
        self.installed.append(destination)
        return construct(
            path=destination,
            executable=Path(instance_type.executable() or ""),
            name=name,
            version=self.version,
            instance_type=instance_type,
            source=source,
        )


def build_viewmodel(
    tmp_path: Path,
    *,
    spawn=run_inline,
    update_service=None,
    audio=None,
    launcher=None,
    remover=None,
    reveal=None,
) -> InstancesViewModel:
    channel = CommandChannel()
    runner_kwargs = {}
    if launcher is not None:
        runner_kwargs["launcher"] = launcher
    if remover is not None:
        runner_kwargs["remover"] = remover
    if reveal is not None:
        runner_kwargs["reveal"] = reveal
    runner = OperationRunner(channel, update_service=update_service, **runner_kwargs)
    dispatcher = CommandDispatcher(runner, spawn=spawn)
    store = InstanceStore(tmp_path / "registry" / "instances.json")
    return InstancesViewModel(
        store,
        dispatcher,
        channel,
        audio=audio,
        instances_dir=tmp_path / "instances",
    )
