"""Domain model - catalog entities and value objects.

Entities are immutable Pydantic models validated once at load time:
- ``FunctionSymbol``: an SDK function (parameters, return type)
- ``ModelSymbol``: an SDK data model / struct (fields)
- ``CommandSymbol``: a generic namespaced command with a closed handler set

Every entity shares ``id``, ``name``, ``description`` and ``tags``, which are
the fields the search engine scores against.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, ClassVar, Generic, Literal, TypeVar

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator


class EntityKind(StrEnum):
    """Kind discriminator for catalog entities."""

    FUNCTION = "function"
    MODEL = "model"
    COMMAND = "command"


class HandlerKind(StrEnum):
    """Built-in command handlers. Configuration can only pick from these."""

    HELLO = "hello"
    TIME = "time"
    ADD = "add"
    UUID = "uuid"


class CatalogVersion(BaseModel):
    """Top-level ``version`` marker of a catalog."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = Field(min_length=1, description="Version identifier for the SDK")


class FieldSpec(BaseModel):
    """A field of a model or a parameter of a function."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    type: str = Field(description="Symbol name of the field type")
    required: bool = Field(default=False, description="Whether the field is required")
    description: str | None = Field(default=None, description="Description of the field")


class BaseSymbol(BaseModel):
    """Fields shared by every catalog entity."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    kind: ClassVar[EntityKind]

    id: str = Field(min_length=1, description="Unique identifier")
    name: str = Field(min_length=1, description="Display name, primary search field")
    description: str | None = Field(default=None, description="Free text, secondary search field")
    tags: tuple[str, ...] = Field(default=(), description="Curated keywords, tertiary search field")
    imports: tuple[str, ...] = Field(default=(), description="Imports required to use the symbol")
    files: tuple[str, ...] = Field(default=(), description="Reference files for the symbol")
    example: str | None = Field(default=None, description="Usage snippet")

    @field_validator("tags", mode="after")
    @classmethod
    def _dedupe_tags(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        # dict.fromkeys keeps first-seen order, so tag iteration stays deterministic
        return tuple(dict.fromkeys(value))

    @property
    def keywords(self) -> tuple[str, ...]:
        """Values scored at tag weight."""
        return self.tags

    def to_payload(self) -> dict[str, Any]:
        """Serialize for tool responses, omitting empty optional fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class FunctionSymbol(BaseSymbol):
    kind: ClassVar[EntityKind] = EntityKind.FUNCTION

    type: Literal["function"] = "function"
    parent: str | None = Field(
        default=None,
        validation_alias=AliasChoices("parent", "struct"),
        description="Struct containing the function",
    )
    parameters: dict[str, FieldSpec] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("parameters", "arguments"),
    )
    return_type: str | None = Field(
        default=None,
        validation_alias=AliasChoices("return_type", "returnType"),
    )


class ModelSymbol(BaseSymbol):
    kind: ClassVar[EntityKind] = EntityKind.MODEL

    type: Literal["model"] = "model"
    parent: str | None = Field(default=None, validation_alias=AliasChoices("parent", "struct"))
    fields: dict[str, FieldSpec] = Field(default_factory=dict)


class CommandExample(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    args: dict[str, Any] = Field(default_factory=dict)
    comment: str | None = None


class CommandSymbol(BaseSymbol):
    """A namespaced command. ``id`` is always ``"{ns}/{name}"``."""

    kind: ClassVar[EntityKind] = EntityKind.COMMAND

    type: Literal["command"] = "command"
    ns: str = Field(min_length=1, description="Command namespace, e.g. 'demo'")
    description: str | None = Field(default=None, validation_alias=AliasChoices("description", "summary"))
    input_schema: dict[str, Any] | None = Field(
        default=None,
        validation_alias=AliasChoices("schema", "input_schema"),
        serialization_alias="schema",
    )
    examples: tuple[CommandExample, ...] = ()
    handler: HandlerKind | None = None
    static_data: dict[str, Any] | None = Field(
        default=None,
        validation_alias=AliasChoices("static_data", "staticData"),
    )

    @model_validator(mode="before")
    @classmethod
    def _derive_id(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        if "handlerInline" in data or "handler_inline" in data:
            raise ValueError("inline handlers are not supported; use 'handler' or 'static_data'")
        if data.get("ns") and data.get("name"):
            derived = f"{data['ns']}/{data['name']}"
            if data.get("id") not in (None, derived):
                raise ValueError(f"command id must be '{derived}'")
            data = {**data, "id": derived}
        return data

    @property
    def keywords(self) -> tuple[str, ...]:
        # the namespace is searchable like a curated tag
        return tuple(dict.fromkeys((self.ns, *self.tags)))

    @model_validator(mode="after")
    def _check_runnable(self) -> CommandSymbol:
        if self.static_data is None and self.handler is None:
            raise ValueError("command needs either 'handler' or 'static_data'")
        return self

ENTITY_TYPES: dict[EntityKind, type[BaseSymbol]] = {
    EntityKind.FUNCTION: FunctionSymbol,
    EntityKind.MODEL: ModelSymbol,
    EntityKind.COMMAND: CommandSymbol,
}


T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    """A bounded slice of an ordered result set.

    ``total`` counts the full result set before slicing. ``next`` is the
    offset to resume at, or ``None`` when this page reaches the end.
    """

    data: list[T] = Field(default_factory=list)
    total: int = Field(ge=0)
    next: int | None = None
