"""Collaborator protocols for release discovery and build installation.

Both collaborators live outside the launcher core: providers talk to release
hosting, installers download and extract archives.  The core only relies on
the contracts below.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from domain.instances import Instance, InstanceSource, InstanceType
from services.update.models import ReleaseInfo


class ReleaseProvider(Protocol):
    """Protocol describing release metadata providers."""

    def fetch_latest(self, source: InstanceSource, instance_type: InstanceType) -> ReleaseInfo | None:
        """Return the newest build for ``source`` or ``None`` when unavailable."""


class BuildInstaller(Protocol):
    """Protocol describing the download-and-extract collaborator.

    ``install`` is all-or-nothing: it either returns a fully populated
    :class:`Instance` living at ``destination`` or raises.
    """

    def install(
        self,
        destination: Path,
        name: str,
        instance_type: InstanceType,
        source: InstanceSource,
    ) -> Instance:
        """Place a build at ``destination`` and describe it."""


__all__ = ["BuildInstaller", "ReleaseProvider"]
