"""Helpers for comparing installed and released build versions."""

from __future__ import annotations

from packaging.version import InvalidVersion, Version


__all__ = [
    "compare_versions",
    "is_update_available",
]


def compare_versions(current_version: str, candidate: str) -> int | None:
    """Compare ``candidate`` against ``current_version``.

    Returns ``1`` when ``candidate`` is newer, ``-1`` when it is older and
    ``0`` when both are equivalent.  Returns ``None`` when either side is not
    a PEP 440 version, which is the case for continuous builds identified by
    a commit hash.
    """

    if candidate.strip() == current_version.strip():
        return 0

    try:
        candidate_version = Version(candidate)
        current_version_parsed = Version(current_version)
    except InvalidVersion:
        return None

    if candidate_version == current_version_parsed:
        return 0
    if candidate_version > current_version_parsed:
        return 1
    return -1


def is_update_available(current_version: str, candidate: str) -> bool:
    """Return ``True`` if ``candidate`` should replace ``current_version``.

    Builds without an orderable version only count as an update when their
    identifiers differ.
    """

    comparison = compare_versions(current_version, candidate)
    if comparison is None:
        return True
    return comparison > 0
