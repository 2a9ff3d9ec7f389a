"""Run an instance's game executable and keep its output on disk."""

from __future__ import annotations

import datetime as _datetime_module
import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path

from app.config import LaunchSettings, get_launch_settings

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class LaunchOutcome:
    """What happened during one launch."""

    stdout_path: Path
    stderr_path: Path
    started: bool
    returncode: int | None = None

    @property
    def succeeded(self) -> bool:
        return self.started and self.returncode == 0


def _now() -> _datetime_module.datetime:
    return _datetime_module.datetime.now()


def log_timestamp(settings: LaunchSettings | None = None) -> str:
    """Return the local-time, second-resolution stem used for log file names."""

    settings = settings or get_launch_settings()
    return _now().strftime(settings.timestamp_format)


def build_command(executable: Path, debug: bool, settings: LaunchSettings | None = None) -> list[str]:
    settings = settings or get_launch_settings()
    command = [str(executable)]
    if debug:
        command.append(settings.debug_argument)
    return command


def launch(
    install_path: Path,
    executable: Path,
    name: str,
    debug: bool = False,
    *,
    settings: LaunchSettings | None = None,
) -> LaunchOutcome:
    """Run ``executable`` to completion, capturing its output under ``logs``.

    Blocks until the game exits, so call it from a background thread.  A
    process that cannot be started is logged and reported through
    :attr:`LaunchOutcome.started`; failing to prepare the log files raises
    :class:`OSError`.
    """

    settings = settings or get_launch_settings()
    install_path = Path(install_path)
    executable = Path(executable)
    if not executable.is_absolute():
        executable = install_path / executable

    log_dir = install_path / settings.log_dir_name
    log_dir.mkdir(parents=True, exist_ok=True)

    stamp = log_timestamp(settings)
    stdout_path = log_dir / f"{stamp}.out"
    stderr_path = log_dir / f"{stamp}.err"
    # Both files exist before the run so a failed start still leaves a trace.
    stdout_path.write_bytes(b"")
    stderr_path.write_bytes(b"")

    command = build_command(executable, debug, settings)
    _LOGGER.info("Launching %s via executable %s", name, executable)
    _LOGGER.debug("Launch command: %s", command)

    try:
        completed = subprocess.run(command, capture_output=True, check=False)
    except OSError as exc:
        _LOGGER.error("Error starting process for %s: %s", name, exc)
        return LaunchOutcome(stdout_path=stdout_path, stderr_path=stderr_path, started=False)

    _LOGGER.info("%s exited with status %s", name, completed.returncode)
    stdout_path.write_bytes(completed.stdout or b"")
    stderr_path.write_bytes(completed.stderr or b"")
    _LOGGER.info("Logfiles have been written to %s", log_dir)

    if completed.returncode != 0:
        _LOGGER.error("Stdout was: %s", _decode(completed.stdout))
        _LOGGER.error("Stderr was: %s", _decode(completed.stderr))

    return LaunchOutcome(
        stdout_path=stdout_path,
        stderr_path=stderr_path,
        started=True,
        returncode=completed.returncode,
    )


def _decode(data: bytes | None) -> str:
    return (data or b"").decode("utf-8", errors="replace")


__all__ = ["LaunchOutcome", "build_command", "launch", "log_timestamp"]
