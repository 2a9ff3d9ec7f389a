"""Reveal install folders in the host file browser."""

from __future__ import annotations

import logging
import os
import subprocess
import sys
import webbrowser
from pathlib import Path

_LOGGER = logging.getLogger(__name__)


def open_folder(path: Path) -> bool:
    """Open ``path`` with the platform file browser.

    Best effort only: every failure is logged and reported as ``False``.
    """

    path = Path(path)
    _LOGGER.info("Opening %s in file explorer", path)
    if not path.exists():
        _LOGGER.warning("Skipping reveal because %s does not exist", path)
        return False
    try:
        if sys.platform.startswith("win"):
            os.startfile(str(path))  # type: ignore[attr-defined]
        elif sys.platform == "darwin":
            subprocess.Popen(["open", str(path)])
        else:
            try:
                subprocess.Popen(["xdg-open", str(path)])
            except OSError:
                _LOGGER.debug("xdg-open unavailable, falling back to webbrowser", exc_info=True)
                if not webbrowser.open(path.resolve().as_uri()):
                    _LOGGER.error("Failed to open path: no file browser available")
                    return False
    except OSError as exc:
        _LOGGER.error("Failed to open path: %s", exc)
        return False
    return True


__all__ = ["open_folder"]
