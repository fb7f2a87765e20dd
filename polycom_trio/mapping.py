"""Declarative mapping of passthrough device fields into statistics."""

from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping
from importlib import resources
from pathlib import Path
from typing import Any, Protocol

import yaml

_LOGGER = logging.getLogger(__name__)

DEFAULT_MAPPING_RESOURCE = "data/model-mapping.yml"


class PropertyProcessor(Protocol):
    """Anything that can copy payload fields into a statistics map."""

    def apply(
        self,
        statistics: MutableMapping[str, str],
        payload: Mapping[str, Any] | None,
        group: str,
    ) -> None: ...


class PropertyMapper:
    """Copy payload values into "<group>#<property>" statistics entries.

    The mapping is ``group -> {property: path}`` where ``path`` is a dotted
    path into the response data; numeric segments index into lists.
    """

    def __init__(self, mapping: Mapping[str, Mapping[str, str]]) -> None:
        """Initialize property mapper."""
        self._mapping = {
            group: dict(properties or {}) for group, properties in mapping.items()
        }

    @classmethod
    def from_yaml(cls, path: str | Path) -> PropertyMapper:
        """Load a mapping from a YAML file."""
        path = Path(path)
        with path.open() as f:
            data = yaml.safe_load(f) or {}
        return cls._from_raw(data, str(path))

    @classmethod
    def default(cls) -> PropertyMapper:
        """Load the mapping shipped with the package."""
        text = (
            resources.files(__package__)
            .joinpath(DEFAULT_MAPPING_RESOURCE)
            .read_text(encoding="utf-8")
        )
        return cls._from_raw(yaml.safe_load(text) or {}, DEFAULT_MAPPING_RESOURCE)

    @classmethod
    def _from_raw(cls, data: Any, source: str) -> PropertyMapper:
        if not isinstance(data, Mapping):
            raise ValueError(f"Property mapping in {source} must be a mapping")
        for group, properties in data.items():
            if properties is not None and not isinstance(properties, Mapping):
                raise ValueError(
                    f"Group {group} in {source} must map property names to paths"
                )
        return cls(data)

    @property
    def groups(self) -> list[str]:
        """Get the names of the mapped groups."""
        return list(self._mapping)

    def apply(
        self,
        statistics: MutableMapping[str, str],
        payload: Mapping[str, Any] | None,
        group: str,
    ) -> None:
        """Write every resolvable property of ``group`` into ``statistics``."""
        properties = self._mapping.get(group)
        if not properties:
            _LOGGER.debug("No property mapping for group %s", group)
            return
        for name, path in properties.items():
            value = resolve_path(payload, str(path))
            if value is None:
                continue
            statistics[f"{group}#{name}"] = _to_text(value)


def resolve_path(payload: Any, path: str) -> Any:
    """Follow a dotted path through nested mappings and lists."""
    current = payload
    for segment in path.split("."):
        if isinstance(current, Mapping):
            current = current.get(segment)
        elif isinstance(current, list) and segment.isdigit():
            index = int(segment)
            current = current[index] if index < len(current) else None
        else:
            return None
        if current is None:
            return None
    if isinstance(current, (Mapping, list)):
        return None
    return current


def _to_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
