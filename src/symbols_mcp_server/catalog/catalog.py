"""Immutable in-memory catalog of loaded entities."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

from symbols_mcp_server.domain.model import BaseSymbol, CatalogVersion, EntityKind
from symbols_mcp_server.errors import DuplicateIdentifierError, DuplicateVersionError


@dataclass(frozen=True)
class Catalog:
    """Read-only snapshot of every entity, one map per kind keyed by id.

    Maps preserve insertion order. Build instances with ``CatalogBuilder``.
    """

    entities: Mapping[EntityKind, Mapping[str, BaseSymbol]]
    version: CatalogVersion | None = None

    def of_kind(self, kind: EntityKind | None = None) -> list[BaseSymbol]:
        """Entities of ``kind`` (or every kind) in insertion order."""
        if kind is not None:
            return list(self.entities.get(kind, {}).values())
        return [entity for by_id in self.entities.values() for entity in by_id.values()]

    def get(self, entity_id: str, kind: EntityKind | None = None) -> BaseSymbol | None:
        kinds = [kind] if kind is not None else list(self.entities)
        for candidate in kinds:
            entity = self.entities.get(candidate, {}).get(entity_id)
            if entity is not None:
                return entity
        return None

    def counts(self) -> dict[str, int]:
        return {kind.value: len(by_id) for kind, by_id in self.entities.items()}

    def __len__(self) -> int:
        return sum(len(by_id) for by_id in self.entities.values())

    def __iter__(self) -> Iterator[BaseSymbol]:
        return iter(self.of_kind())

    def __contains__(self, entity_id: object) -> bool:
        return isinstance(entity_id, str) and self.get(entity_id) is not None


@dataclass
class CatalogBuilder:
    """Mutable accumulator used only while loading.

    Ids are unique across all kinds and all source files.
    """

    _entities: dict[EntityKind, dict[str, BaseSymbol]] = field(
        default_factory=lambda: {kind: {} for kind in EntityKind}
    )
    _origins: dict[str, Path | None] = field(default_factory=dict)
    _version: CatalogVersion | None = None
    _version_origin: Path | None = None

    def add(self, entity: BaseSymbol, source: Path | None = None) -> None:
        if entity.id in self._origins:
            raise DuplicateIdentifierError(entity.id, path=source, first_path=self._origins[entity.id])
        self._origins[entity.id] = source
        self._entities[entity.kind][entity.id] = entity

    def set_version(self, version: CatalogVersion, source: Path | None = None) -> None:
        if self._version is not None:
            raise DuplicateVersionError(path=source, first_path=self._version_origin)
        self._version = version
        self._version_origin = source

    def build(self) -> Catalog:
        frozen = {kind: MappingProxyType(dict(by_id)) for kind, by_id in self._entities.items()}
        return Catalog(entities=MappingProxyType(frozen), version=self._version)
