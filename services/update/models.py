"""Data models used by the instance update service."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ReleaseInfo:
    """Metadata describing a downloadable build of the game."""

    version: str
    asset_name: str
    download_url: str | None = None
    release_notes: str | None = None


class UpdateError(RuntimeError):
    """Raised when an instance cannot be updated."""


class InstallError(RuntimeError):
    """Raised when a build cannot be downloaded or extracted into place."""
