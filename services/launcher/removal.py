"""Removal of instance install directories."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from shared.result import Result

_LOGGER = logging.getLogger(__name__)


def remove_install(path: Path) -> Result[Path, str]:
    """Recursively delete ``path``; the caller decides what a failure means."""

    path = Path(path)
    try:
        shutil.rmtree(path)
    except OSError as exc:
        _LOGGER.error("Failed to remove %s: %s", path, exc)
        return Result.err(str(exc))
    _LOGGER.info("Removed %s", path)
    return Result.ok(path)


__all__ = ["remove_install"]
