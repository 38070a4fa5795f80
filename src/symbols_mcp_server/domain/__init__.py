"""Domain layer - catalog entities with no infrastructure dependencies."""

from symbols_mcp_server.domain.model import (
    ENTITY_TYPES,
    BaseSymbol,
    CatalogVersion,
    CommandExample,
    CommandSymbol,
    EntityKind,
    FieldSpec,
    FunctionSymbol,
    HandlerKind,
    ModelSymbol,
    Page,
)


__all__ = [
    "ENTITY_TYPES",
    "BaseSymbol",
    "CatalogVersion",
    "CommandExample",
    "CommandSymbol",
    "EntityKind",
    "FieldSpec",
    "FunctionSymbol",
    "HandlerKind",
    "ModelSymbol",
    "Page",
]
