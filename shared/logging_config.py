"""Central logging configuration for the launcher.

The launcher writes its diagnostics (install, update and launch results) to a
single log file and, for the log pane of the presentation layer, to an
explicit log-line channel.  Configuration is idempotent so tests and repeated
start-up paths never register duplicate handlers.

Two environment variables customise where the log file is written:

``ESLAUNCHER_LOG_FILE``
    Absolute path to the log file that should be created.

``ESLAUNCHER_LOG_DIR``
    Directory where the default log file name will be created.  Ignored when
    ``ESLAUNCHER_LOG_FILE`` is present.
"""

from __future__ import annotations

import logging
import os
import re
import sys
from enum import Enum
from pathlib import Path
from typing import Iterable, Protocol

_LOG_FILE_ENV = "ESLAUNCHER_LOG_FILE"
_LOG_DIR_ENV = "ESLAUNCHER_LOG_DIR"
_DEFAULT_DIRNAME = ".eslauncher"
_DEFAULT_LOGNAME = "launcher.log"
_CONFIGURED = False
_LOG_PATH: Path | None = None
_HANDLER_TAG = "_eslauncher_logging_handler"
_FILE_HANDLER: logging.FileHandler | None = None
_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

USER_PLACEHOLDER = "<user>"
USER_HOME_PLACEHOLDER = "<user_home>"


class LogVerbosity(str, Enum):
    """Verbosity levels supported by the application log file."""

    DISABLED = "disabled"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    VERBOSE = "verbose"


_VERBOSITY_LEVELS: dict[LogVerbosity, int] = {
    LogVerbosity.DISABLED: logging.CRITICAL + 1,
    LogVerbosity.ERROR: logging.ERROR,
    LogVerbosity.WARNING: logging.WARNING,
    LogVerbosity.INFO: logging.INFO,
    LogVerbosity.VERBOSE: logging.DEBUG,
}

_DEFAULT_VERBOSITY = LogVerbosity.INFO
_CURRENT_VERBOSITY = _DEFAULT_VERBOSITY


class LogLineSink(Protocol):
    """Anything accepting formatted log lines, e.g. a ``queue.SimpleQueue``."""

    def put(self, item: str) -> None:
        ...


def _home_candidates() -> set[str]:
    candidates = {str(Path.home())}
    for env_var in ("HOME", "USERPROFILE"):
        value = os.environ.get(env_var)
        if value:
            candidates.add(os.path.expanduser(value))
    return {
        os.path.normpath(candidate)
        for candidate in candidates
        if candidate and os.path.normpath(candidate) not in {os.sep, "."}
    }


def _username_candidates() -> set[str]:
    candidates = {Path.home().name}
    for env_var in ("USERNAME", "USER", "LOGNAME"):
        value = os.environ.get(env_var)
        if value:
            candidates.add(value)
    return {candidate.strip() for candidate in candidates if candidate and candidate.strip()}


def _build_redaction_patterns() -> list[tuple[re.Pattern[str], str]]:
    flags = re.IGNORECASE if os.name == "nt" else 0
    patterns: list[tuple[re.Pattern[str], str]] = []
    for home in sorted(_home_candidates(), key=len, reverse=True):
        for variant in {home, home.replace("\\", "/")}:
            patterns.append((re.compile(re.escape(variant), flags), USER_HOME_PLACEHOLDER))

    for username in sorted(_username_candidates(), key=len, reverse=True):
        escaped = re.escape(username)
        if any(character.isalnum() for character in username):
            pattern = re.compile(rf"(?<!\w){escaped}(?!\w)", re.IGNORECASE)
        else:
            pattern = re.compile(escaped, re.IGNORECASE)
        patterns.append((pattern, USER_PLACEHOLDER))
    return patterns


_REDACTION_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = tuple(_build_redaction_patterns())


def _sanitize_text(message: str) -> str:
    if not message or not _REDACTION_PATTERNS:
        return message
    redacted = message
    for pattern, replacement in _REDACTION_PATTERNS:
        redacted = pattern.sub(replacement, redacted)
    return redacted


class _RedactingFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        return _sanitize_text(super().format(record))


class LogChannelHandler(logging.Handler):
    """Forward formatted log lines to an explicit sink owned by the caller."""

    def __init__(self, sink: LogLineSink, level: int = logging.INFO) -> None:
        super().__init__(level)
        self._sink = sink
        self.setFormatter(_RedactingFormatter("%(levelname)s %(message)s"))

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self._sink.put(self.format(record))
        except Exception:  # pragma: no cover - logging must never raise
            self.handleError(record)


def ensure_app_logging() -> Path:
    """Configure the root logger for the launcher.

    The first invocation installs a file handler and, when stderr is
    interactive, a console handler.  Subsequent calls are no-ops and return
    the already configured log file path.
    """

    global _CONFIGURED, _LOG_PATH, _FILE_HANDLER

    if _CONFIGURED and _LOG_PATH is not None:
        return _LOG_PATH

    log_path = _resolve_log_path()
    log_path.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    formatter = _RedactingFormatter(_FORMAT, datefmt=_DATE_FORMAT)

    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setLevel(_VERBOSITY_LEVELS[_CURRENT_VERBOSITY])
    file_handler.setFormatter(formatter)
    setattr(file_handler, _HANDLER_TAG, True)
    root.addHandler(file_handler)
    _FILE_HANDLER = file_handler

    if _should_log_to_stderr(root.handlers):
        stream_handler = logging.StreamHandler()
        stream_handler.setLevel(logging.INFO)
        stream_handler.setFormatter(formatter)
        setattr(stream_handler, _HANDLER_TAG, True)
        root.addHandler(stream_handler)

    _CONFIGURED = True
    _LOG_PATH = log_path

    logging.getLogger(__name__).info(
        "Writing launcher logs to %s (verbosity=%s)",
        log_path,
        _CURRENT_VERBOSITY.value,
    )
    return log_path


def attach_log_channel(sink: LogLineSink, level: int = logging.INFO) -> LogChannelHandler:
    """Stream log lines of at least ``level`` into ``sink``.

    The returned handler belongs to the caller; pass it to
    :func:`detach_log_channel` on shutdown.
    """

    handler = LogChannelHandler(sink, level)
    setattr(handler, _HANDLER_TAG, True)
    logging.getLogger().addHandler(handler)
    return handler


def detach_log_channel(handler: logging.Handler) -> None:
    logging.getLogger().removeHandler(handler)
    handler.close()


def set_file_log_verbosity(verbosity: LogVerbosity | str) -> None:
    """Adjust the minimum severity recorded in the application log file."""

    global _CURRENT_VERBOSITY

    if isinstance(verbosity, str):
        try:
            verbosity = LogVerbosity(verbosity.lower())
        except ValueError as exc:
            raise ValueError(f"Unsupported log verbosity: {verbosity}") from exc

    ensure_app_logging()
    handler = _FILE_HANDLER
    if handler is None:  # pragma: no cover - ensure_app_logging always installs one
        return

    _CURRENT_VERBOSITY = verbosity
    handler.setLevel(_VERBOSITY_LEVELS[verbosity])
    logging.getLogger(__name__).info("File log verbosity set to %s", verbosity.value)


def get_file_log_verbosity() -> LogVerbosity:
    """Return the current verbosity level for the application log file."""

    return _CURRENT_VERBOSITY


def _resolve_log_path() -> Path:
    env_file = os.environ.get(_LOG_FILE_ENV)
    if env_file:
        return Path(env_file).expanduser()

    env_dir = os.environ.get(_LOG_DIR_ENV)
    if env_dir:
        return Path(env_dir).expanduser() / _DEFAULT_LOGNAME

    return Path.home() / _DEFAULT_DIRNAME / "logs" / _DEFAULT_LOGNAME


def _should_log_to_stderr(handlers: Iterable[logging.Handler]) -> bool:
    stderr = getattr(sys, "stderr", None)
    is_tty = getattr(stderr, "isatty", None)
    if not callable(is_tty):
        return False
    try:
        if not is_tty():
            return False
    except (OSError, ValueError):  # pragma: no cover - closed or odd stderr
        return False

    for handler in handlers:
        if isinstance(handler, logging.StreamHandler) and handler.stream is stderr:
            return False
    return True


def _reset_for_tests() -> None:
    """Remove handlers installed by this module."""

    global _CONFIGURED, _LOG_PATH, _FILE_HANDLER, _CURRENT_VERBOSITY

    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_TAG, False):
            root.removeHandler(handler)
            handler.close()

    _CONFIGURED = False
    _LOG_PATH = None
    _FILE_HANDLER = None
    _CURRENT_VERBOSITY = _DEFAULT_VERBOSITY


__all__ = [
    "LogChannelHandler",
    "LogLineSink",
    "LogVerbosity",
    "attach_log_channel",
    "detach_log_channel",
    "ensure_app_logging",
    "get_file_log_verbosity",
    "set_file_log_verbosity",
]
