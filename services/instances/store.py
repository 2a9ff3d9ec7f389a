"""Durable storage of the instance registry."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Iterable, Mapping

from domain.instances import Instance, InstanceSource, InstanceType, construct
from services.instances.paths import get_registry_path

_LOGGER = logging.getLogger(__name__)

_FIELDS = ("path", "executable", "name", "version", "instance_type", "source")


class RegistryLoadError(RuntimeError):
    """Raised when an existing registry document cannot be read."""


def instance_to_record(instance: Instance) -> dict[str, Any]:
    """Return the persisted representation of ``instance``.

    Only identity and configuration are stored; the operational state never
    survives a restart.
    """

    return {
        "path": str(instance.path),
        "executable": str(instance.executable),
        "name": instance.name,
        "version": instance.version,
        "instance_type": instance.instance_type.value,
        "source": {
            "type": instance.source.type,
            "identifier": instance.source.identifier,
        },
    }


def instance_from_record(record: Any) -> Instance:
    if not isinstance(record, Mapping):
        raise ValueError(f"Instance record must be an object, got {type(record).__name__}")
    missing = [name for name in _FIELDS if name not in record]
    if missing:
        raise ValueError(f"Instance record is missing {', '.join(missing)}")

    source = record["source"]
    if not isinstance(source, Mapping):
        raise ValueError("Instance source must be an object")

    return construct(
        path=Path(_require_text(record, "path")),
        executable=Path(_require_text(record, "executable")),
        name=_require_text(record, "name"),
        version=_require_text(record, "version"),
        instance_type=InstanceType(_require_text(record, "instance_type")),
        source=InstanceSource(
            type=_require_text(source, "type"),
            identifier=_require_text(source, "identifier"),
        ),
    )


def _require_text(record: Mapping[str, Any], key: str) -> str:
    value = record.get(key)
    if not isinstance(value, str):
        raise ValueError(f"Field {key!r} must be a string")
    return value


class InstanceStore:
    """Save and load the ordered instance list as one JSON document."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = Path(path) if path is not None else None

    @property
    def path(self) -> Path:
        return self._path if self._path is not None else get_registry_path()

    def save(self, instances: Iterable[Instance]) -> bool:
        """Write every instance to disk.

        Failures are logged and reported as ``False``; the in-memory registry
        stays authoritative until the next successful save.
        """

        location = self.path
        _LOGGER.debug("Saving instances to %s", location)
        try:
            payload = json.dumps(
                [instance_to_record(instance) for instance in instances],
                indent=2,
            ) + "\n"
            location.parent.mkdir(parents=True, exist_ok=True)
            temporary = location.with_name(f"{location.name}.tmp")
            temporary.write_text(payload, encoding="utf-8")
            os.replace(temporary, location)
        except (OSError, TypeError, ValueError) as exc:
            _LOGGER.error("Failed to save instances: %s", exc)
            return False
        return True

    def load(self) -> list[Instance]:
        """Read the registry; a missing document means a first run."""

        location = self.path
        _LOGGER.debug("Loading instances from %s", location)
        try:
            raw = location.read_text(encoding="utf-8")
        except FileNotFoundError:
            _LOGGER.warning(
                "%s doesn't exist (yet?), commencing without loading instances",
                location.name,
            )
            return []
        except (OSError, UnicodeDecodeError) as exc:
            raise RegistryLoadError(f"Unable to read {location}: {exc}") from exc

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise RegistryLoadError(f"Malformed instance registry {location}: {exc}") from exc

        if not isinstance(data, list):
            raise RegistryLoadError(f"Instance registry {location} must hold a list")

        instances: list[Instance] = []
        seen: set[Path] = set()
        for index, record in enumerate(data):
            try:
                instance = instance_from_record(record)
            except ValueError as exc:
                raise RegistryLoadError(
                    f"Invalid instance #{index} in {location}: {exc}"
                ) from exc
            if instance.path in seen:
                raise RegistryLoadError(
                    f"Duplicate instance path {instance.path} in {location}"
                )
            seen.add(instance.path)
            instances.append(instance)

        _LOGGER.info("Loaded %d instance(s)", len(instances))
        return instances


__all__ = [
    "InstanceStore",
    "RegistryLoadError",
    "instance_from_record",
    "instance_to_record",
]
