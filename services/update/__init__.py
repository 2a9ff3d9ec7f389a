"""Public API for the instance update service package."""

from __future__ import annotations

from services.update.models import InstallError, ReleaseInfo, UpdateError
from services.update.providers import BuildInstaller, ReleaseProvider
from services.update.service import InstanceUpdateService
from services.update.versioning import compare_versions, is_update_available

__all__ = [
    "BuildInstaller",
    "InstallError",
    "InstanceUpdateService",
    "ReleaseInfo",
    "ReleaseProvider",
    "UpdateError",
    "compare_versions",
    "is_update_available",
]
