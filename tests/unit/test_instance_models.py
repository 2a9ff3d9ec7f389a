from __future__ import annotations

from pathlib import Path

import pytest

from domain.instances import InstanceSource, InstanceState, InstanceType, StateChanged, construct
from tests.helpers import make_instance


@pytest.mark.parametrize(
    ("instance_type", "executable", "archive"),
    [
        (InstanceType.MACOS, "Endless Sky.app/Contents/MacOS/Endless Sky", "mac"),
        (InstanceType.WINDOWS, "EndlessSky.exe", "win64"),
        (InstanceType.LINUX, "endless-sky", ".tar.gz"),
        (InstanceType.APPIMAGE, "endless-sky.AppImage", ".AppImage"),
    ],
)
def test_instance_type_conventions(instance_type, executable, archive) -> None:
    assert instance_type.executable() == executable
    assert instance_type.archive() == archive


def test_unknown_instance_type_has_no_conventions() -> None:
    assert InstanceType.UNKNOWN.executable() is None
    assert InstanceType.UNKNOWN.archive() is None


@pytest.mark.parametrize(
    ("platform", "expected"),
    [
        ("win32", InstanceType.WINDOWS),
        ("darwin", InstanceType.MACOS),
        ("linux", InstanceType.APPIMAGE),
        ("sunos5", InstanceType.UNKNOWN),
    ],
)
def test_default_instance_type_for_platform(platform, expected) -> None:
    assert InstanceType.for_platform(platform) is expected


def test_executable_path_joins_install_path() -> None:
    instance = make_instance("/games/es-dev", instance_type=InstanceType.MACOS)

    assert instance.executable_path == Path("/games/es-dev/Endless Sky.app/Contents/MacOS/Endless Sky")


def test_state_is_not_part_of_identity() -> None:
    first = make_instance()
    second = make_instance()
    second.apply(StateChanged(InstanceState.playing()))

    assert first == second


def test_construct_accepts_strings_and_starts_ready() -> None:
    instance = construct(
        "/games/es",
        "endless-sky",
        "es",
        "0.10.0",
        InstanceType.LINUX,
        InstanceSource("Release", "v0.10.0"),
    )

    assert instance.path == Path("/games/es")
    assert instance.executable == Path("endless-sky")
    assert instance.state.is_ready


def test_snapshot_exposes_command_availability() -> None:
    instance = make_instance()
    ready = instance.snapshot()

    instance.apply(StateChanged(InstanceState.working("Updating")))
    working = instance.snapshot()

    assert (ready.can_play, ready.can_update, ready.can_delete, ready.can_reveal) == (True, True, True, True)
    assert ready.status_label is None
    assert (working.can_play, working.can_update, working.can_delete, working.can_reveal) == (
        False,
        False,
        False,
        True,
    )
    assert working.status_label == "Updating"


def test_snapshot_is_read_only() -> None:
    snapshot = make_instance().snapshot()

    with pytest.raises(AttributeError):
        snapshot.name = "other"  # type: ignore[misc]


def test_refresh_keeps_path_and_state() -> None:
    instance = make_instance("/games/es-dev", version="0.9.16")
    instance.apply(StateChanged(InstanceState.working("Updating")))
    newer = make_instance("/elsewhere", version="0.10.0", source=InstanceSource("Release", "v0.10.0"))

    instance.refresh_from(newer)

    assert instance.path == Path("/games/es-dev")
    assert instance.version == "0.10.0"
    assert instance.source == InstanceSource("Release", "v0.10.0")
    assert instance.state.is_working


def test_source_description() -> None:
    assert InstanceSource("PR", "1234").describe() == "PR 1234"
