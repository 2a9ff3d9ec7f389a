"""Service responsible for updating and installing instances."""

from __future__ import annotations

import logging
from pathlib import Path

from domain.instances import Instance, InstanceSource, InstanceType
from services.update.models import InstallError, ReleaseInfo, UpdateError
from services.update.providers import BuildInstaller, ReleaseProvider
from services.update.versioning import is_update_available


_LOGGER = logging.getLogger(__name__)


class InstanceUpdateService:
    """Coordinate release discovery and installation for instances."""

    def __init__(self, provider: ReleaseProvider, installer: BuildInstaller) -> None:
        self._provider = provider
        self._installer = installer

    def get_available_release(self, instance: Instance) -> ReleaseInfo | None:
        """Return the newest release for ``instance`` if it differs from the installed one."""

        if instance.instance_type is InstanceType.UNKNOWN:
            raise UpdateError(f"Cannot update {instance.name}: unknown instance type")

        release = self._provider.fetch_latest(instance.source, instance.instance_type)
        if release is None:
            raise UpdateError(
                f"No release found for {instance.name} ({instance.source.describe()})"
            )

        if not is_update_available(instance.version, release.version):
            _LOGGER.info("%s is up to date (version %s)", instance.name, instance.version)
            return None

        _LOGGER.info(
            "Update available for %s: %s -> %s",
            instance.name,
            instance.version,
            release.version,
        )
        return release

    def update_instance(self, instance: Instance) -> Instance:
        """Bring ``instance`` to the newest release and return its new description."""

        release = self.get_available_release(instance)
        if release is None:
            return instance

        try:
            updated = self.install_instance(
                instance.path, instance.name, instance.instance_type, instance.source
            )
        except InstallError as exc:
            raise UpdateError(f"Failed to update {instance.name}: {exc}") from exc

        if updated.path != instance.path:
            raise UpdateError(
                f"Installer placed {instance.name} at {updated.path} instead of {instance.path}"
            )
        _LOGGER.info("Updated %s to version %s", instance.name, updated.version)
        return updated

    def install_instance(
        self,
        destination: Path,
        name: str,
        instance_type: InstanceType,
        source: InstanceSource,
    ) -> Instance:
        """Install a build at ``destination`` through the installer collaborator."""

        _LOGGER.info("Installing %s into %s from %s", name, destination, source.describe())
        try:
            return self._installer.install(Path(destination), name, instance_type, source)
        except InstallError:
            raise
        except (OSError, ValueError, RuntimeError) as exc:
            raise InstallError(str(exc)) from exc


__all__ = ["InstanceUpdateService"]
