"""Catalog loader: YAML definition tree -> immutable ``Catalog``.

Walks the catalog root recursively, validates every entity with Pydantic
and merges all files into one ``Catalog``. Any failure aborts the whole
load; there is no partial catalog.

Recognized top-level keys per document::

    version:   {name: "..."}          # at most once per load
    functions: {key: {...}} | [...]
    models:    {key: {...}} | [...]   # "structs" is accepted as an alias
    symbols:   {key: {...}} | [...]   # each entry carries type: function|model
    commands:  [{ns, name, ...}]      # id is derived as "ns/name"
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError
import yaml

from symbols_mcp_server.catalog.catalog import Catalog, CatalogBuilder
from symbols_mcp_server.domain.model import (
    BaseSymbol,
    CatalogVersion,
    CommandSymbol,
    EntityKind,
    FunctionSymbol,
    ModelSymbol,
)
from symbols_mcp_server.errors import (
    CatalogIOError,
    ConfigValidationError,
    DuplicateIdentifierError,
    DuplicateVersionError,
    PathSecurityError,
)


logger = logging.getLogger(__name__)

DEFINITION_SUFFIXES = frozenset({".yaml", ".yml"})

_SECTION_TYPES: dict[str, type[BaseSymbol] | None] = {
    "functions": FunctionSymbol,
    "models": ModelSymbol,
    "structs": ModelSymbol,
    "commands": CommandSymbol,
    "symbols": None,  # discriminated by each entry's "type"
}

_DISCRIMINATED_TYPES: dict[str, type[BaseSymbol]] = {
    EntityKind.FUNCTION.value: FunctionSymbol,
    EntityKind.MODEL.value: ModelSymbol,
    EntityKind.COMMAND.value: CommandSymbol,
}


@dataclass(frozen=True)
class LoadResult:
    catalog: Catalog
    files_processed: int


def resolve_catalog_root(root_dir: str | Path, allowed_base_dir: str | Path) -> Path:
    """Resolve ``root_dir`` and ensure it lies inside ``allowed_base_dir``.

    Raises:
        PathSecurityError: if the resolved root escapes the allowed base.
    """
    resolved = Path(root_dir).expanduser().resolve()
    allowed = Path(allowed_base_dir).expanduser().resolve()
    if not resolved.is_relative_to(allowed):
        logger.error("Catalog root %s is outside allowed base %s", resolved, allowed)
        raise PathSecurityError(resolved, allowed)
    return resolved


def iter_definition_files(root: Path) -> Iterator[Path]:
    """Yield definition files under ``root`` in sorted path order, at any depth."""
    for path in sorted(root.rglob("*")):
        if path.suffix.lower() in DEFINITION_SUFFIXES and path.is_file():
            yield path


def _duplicate_keys(node: yaml.Node, trail: tuple[str, ...] = ()) -> Iterator[tuple[tuple[str, ...], str]]:
    """Yield (trail, key) for every key repeated within one mapping, depth first."""
    if isinstance(node, yaml.MappingNode):
        seen: set[str] = set()
        for key_node, value_node in node.value:
            key = key_node.value if isinstance(key_node, yaml.ScalarNode) else None
            if key is not None and key != "<<":
                if key in seen:
                    yield trail, key
                seen.add(key)
            yield from _duplicate_keys(value_node, (*trail, str(key)))
    elif isinstance(node, yaml.SequenceNode):
        for index, item in enumerate(node.value):
            yield from _duplicate_keys(item, (*trail, f"[{index}]"))


def _reject_duplicate_keys(root: yaml.Node | None, path: Path) -> None:
    """Fail on repeated mapping keys, which PyYAML would otherwise collapse to the last value.

    Raises:
        DuplicateVersionError: ``version`` appears twice at the top level.
        DuplicateIdentifierError: a keyed section repeats an entity id.
        ConfigValidationError: any other repeated key.
    """
    if root is None:
        return
    for trail, key in _duplicate_keys(root):
        if not trail and key == "version":
            raise DuplicateVersionError(path=path, first_path=path)
        if len(trail) == 1 and trail[0] in _SECTION_TYPES:
            raise DuplicateIdentifierError(key, path=path, first_path=path)
        location = ".".join(trail) or "top level"
        raise ConfigValidationError(f"{path}: duplicate key '{key}' at {location}", path=path)


def _read_document(path: Path) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CatalogIOError(f"Failed to read {path}: {exc}", path=path) from exc

    loader = yaml.SafeLoader(text)
    try:
        root = loader.get_single_node()
        _reject_duplicate_keys(root, path)
        document = loader.construct_document(root) if root is not None else None
    except yaml.YAMLError as exc:
        raise ConfigValidationError(f"Invalid YAML in {path}: {exc}", path=path) from exc
    finally:
        loader.dispose()

    if document is None:
        return {}
    if not isinstance(document, dict):
        raise ConfigValidationError(f"{path}: top-level document must be a mapping", path=path)

    unknown = sorted(set(document) - set(_SECTION_TYPES) - {"version"})
    if unknown:
        raise ConfigValidationError(f"{path}: unknown top-level keys {unknown}", path=path)
    return document


def _iter_entries(section: str, raw: Any, path: Path) -> Iterator[tuple[str, dict[str, Any]]]:
    """Yield ``(label, entry)`` pairs from a mapping- or list-shaped section."""
    if raw is None:
        return
    if isinstance(raw, dict):
        items: Iterator[tuple[str, Any]] = ((str(key), value) for key, value in raw.items())
    elif isinstance(raw, list):
        items = ((f"{section}[{index}]", value) for index, value in enumerate(raw))
    else:
        raise ConfigValidationError(f"{path}: '{section}' must be a mapping or a list", path=path)

    for label, entry in items:
        if not isinstance(entry, dict):
            raise ConfigValidationError(f"{path}: entry {label} must be a mapping", path=path, entity_id=label)
        yield label, entry


def _entity_type(section: str, entry: dict[str, Any], label: str, path: Path) -> type[BaseSymbol]:
    entity_type = _SECTION_TYPES[section]
    if entity_type is not None:
        return entity_type
    discriminator = entry.get("type")
    if discriminator not in _DISCRIMINATED_TYPES:
        raise ConfigValidationError(
            f"{path}: entry {label} has invalid type {discriminator!r}",
            path=path,
            entity_id=entry.get("id") or label,
        )
    return _DISCRIMINATED_TYPES[discriminator]


def _validate_entity(entity_type: type[BaseSymbol], entry: dict[str, Any], label: str, path: Path) -> BaseSymbol:
    try:
        return entity_type.model_validate(entry)
    except ValidationError as exc:
        entity_id = entry.get("id") or label
        raise ConfigValidationError(
            f"{path}: invalid {entity_type.kind.value} '{entity_id}': {exc}",
            path=path,
            entity_id=str(entity_id),
        ) from exc


def load_file(path: Path, builder: CatalogBuilder) -> int:
    """Parse one definition file into ``builder``. Returns the entity count."""
    document = _read_document(path)

    if "version" in document:
        try:
            version = CatalogVersion.model_validate(document["version"])
        except ValidationError as exc:
            raise ConfigValidationError(f"{path}: invalid version: {exc}", path=path) from exc
        builder.set_version(version, path)

    added = 0
    for section in _SECTION_TYPES:
        for label, entry in _iter_entries(section, document.get(section), path):
            entity_type = _entity_type(section, entry, label, path)
            builder.add(_validate_entity(entity_type, entry, label, path), path)
            added += 1
    return added


def load_catalog(root_dir: str | Path, allowed_base_dir: str | Path) -> LoadResult:
    """Build a ``Catalog`` from every definition file under ``root_dir``.

    Raises:
        PathSecurityError: root escapes ``allowed_base_dir`` (no I/O performed).
        CatalogIOError: root is missing or a file cannot be read.
        ConfigValidationError: malformed document or entity.
        DuplicateIdentifierError: an id appears twice anywhere in the load.
        DuplicateVersionError: more than one file declares ``version``.
    """
    root = resolve_catalog_root(root_dir, allowed_base_dir)
    if not root.is_dir():
        raise CatalogIOError(f"Catalog directory not found: {root}", path=root)

    builder = CatalogBuilder()
    files_processed = 0
    for path in iter_definition_files(root):
        try:
            count = load_file(path, builder)
        except Exception:
            logger.error("Failed to load symbols from %s", path)
            raise
        files_processed += 1
        logger.debug("Loaded %d entities from %s", count, path)

    catalog = builder.build()
    logger.info(
        "Catalog loaded: %d entities from %d files (%s)",
        len(catalog),
        files_processed,
        ", ".join(f"{kind}={count}" for kind, count in catalog.counts().items()),
    )
    return LoadResult(catalog=catalog, files_processed=files_processed)
