"""Canonical Pydantic models shared across all swaggins modules.

This is the single source of truth for data shapes in the project. The models
fall into three groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`OutputConfig` and :class:`GlobalConfig`.

**Schema models** -- the polymorphic result of decoding an OpenAPI
*Schema Object*. A schema is exactly one of :class:`ObjectSchema`,
:class:`ArraySchema`, :class:`NumberSchema`, :class:`StringSchema`, or
:class:`CompositeSchema` (see the :data:`Schema` union). Anywhere a schema may
instead be a ``$ref`` pointer the field is typed :data:`RefOrSchema`.

**Document models** -- the structural skeleton around the schemas:
    :class:`OpenAPI`, :class:`Info`, :class:`Paths`, :class:`Path`,
    :class:`PathItem`, :class:`Operation`, :class:`HttpMethod`, and
    :class:`Components`.

Schema and document models are frozen: they are built once by the decoder in
:mod:`swaggins.parser` and never mutated afterwards.
"""

from __future__ import annotations

import enum
import functools
from typing import Annotated, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, RootModel


# --- Config ---


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/swaggins/config.json``.

    Loaded and saved by :func:`~swaggins.config.load_global_config` and
    :func:`~swaggins.config.save_global_config`. See
    :func:`~swaggins.config.resolve_config` for the full precedence chain.
    """

    output: OutputConfig = Field(default_factory=OutputConfig)
    log_level: str = Field(
        default="WARNING", description="Root logger level used by the CLI"
    )


# --- Schema enumerations ---


class SchemaType(str, enum.Enum):
    """Values of a schema's ``type`` field that select a decoder.

    The enum value is the wire text, so the table below is the complete
    variant-to-wire mapping.
    """

    NUMBER = "number"
    STRING = "string"
    OBJECT = "object"
    ARRAY = "array"

    @classmethod
    def from_wire(cls, text: str) -> Optional["SchemaType"]:
        """Return the member whose wire text is *text*, or ``None``."""
        return _SCHEMA_TYPES_BY_WIRE.get(text)


class CompositeSchemaKind(str, enum.Enum):
    """The keyword that combines the member schemas of a composite schema."""

    ONE_OF = "oneOf"
    ANY_OF = "anyOf"
    ALL_OF = "allOf"

    @property
    def keyword(self) -> str:
        """The JSON field name carrying this kind's member list."""
        return self.value

    @classmethod
    def from_wire(cls, text: str) -> Optional["CompositeSchemaKind"]:
        """Return the member whose keyword is *text*, or ``None``."""
        return _COMPOSITE_KINDS_BY_WIRE.get(text)


_SCHEMA_TYPES_BY_WIRE: dict[str, SchemaType] = {t.value: t for t in SchemaType}
_COMPOSITE_KINDS_BY_WIRE: dict[str, CompositeSchemaKind] = {
    k.value: k for k in CompositeSchemaKind
}


# --- Schema building blocks ---


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


@functools.total_ordering
class PropertyName(RootModel[str]):
    """Name of one property of an :class:`ObjectSchema`.

    Wraps a plain string so property names cannot be confused with other
    text. Instances hash and compare by value and order lexicographically,
    which keeps ``frozenset`` membership and sorting deterministic.

    Example::

        >>> sorted({PropertyName("b"), PropertyName("a")})
        [PropertyName(root='a'), PropertyName(root='b')]
    """

    model_config = ConfigDict(frozen=True)

    @property
    def value(self) -> str:
        return self.root

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, PropertyName):
            return NotImplemented
        return self.root < other.root

    def __str__(self) -> str:
        return self.root


class Reference(_Frozen):
    """A ``{"$ref": "..."}`` pointer, kept unresolved."""

    ref: str = Field(alias="$ref")


class Property(_Frozen):
    """One ``(name, schema)`` entry of :attr:`ObjectSchema.properties`."""

    name: PropertyName
    schema_: RefOrSchema = Field(alias="schema")


class Discriminator(_Frozen):
    """Hint telling consumers which composite member a concrete value matches.

    Both fields are optional; an empty discriminator is legal.
    """

    property_name: Optional[PropertyName] = Field(default=None, alias="propertyName")
    mapping: Optional[Annotated[dict[str, PropertyName], Field(min_length=1)]] = None


# --- Schema variants ---


class ObjectSchema(_Frozen):
    """``type: object`` with its properties in declaration order.

    ``required`` is not checked against ``properties``; a name may be
    required without being declared.
    """

    required: Optional[Annotated[frozenset[PropertyName], Field(min_length=1)]] = None
    properties: Annotated[tuple[Property, ...], Field(min_length=1)]


class ArraySchema(_Frozen):
    """``type: array`` with the schema of its items."""

    items: RefOrSchema


class NumberSchema(_Frozen):
    """``type: number``, optionally restricted to a set of values."""

    enum: Optional[Annotated[frozenset[float], Field(min_length=1)]] = None


class StringSchema(_Frozen):
    """``type: string``, optionally restricted to a set of values."""

    enum: Optional[Annotated[frozenset[str], Field(min_length=1)]] = None


class CompositeSchema(_Frozen):
    """A ``oneOf`` / ``anyOf`` / ``allOf`` combination of member schemas.

    ``schemas`` keeps source order; consumers number the alternatives by it.
    """

    schemas: Annotated[tuple[RefOrSchema, ...], Field(min_length=1)]
    kind: CompositeSchemaKind
    discriminator: Optional[Discriminator] = None


Schema = Union[ObjectSchema, ArraySchema, NumberSchema, StringSchema, CompositeSchema]
"""Closed union of every decoded schema variant."""

RefOrSchema = Union[Reference, Schema]
"""Either an unresolved ``$ref`` pointer or an inline schema."""

SCHEMA_VARIANTS: tuple[type[BaseModel], ...] = (
    ObjectSchema,
    ArraySchema,
    NumberSchema,
    StringSchema,
    CompositeSchema,
)

for _model in (Property, ObjectSchema, ArraySchema, CompositeSchema):
    _model.model_rebuild()


# --- Document ---


class HttpMethod(str, enum.Enum):
    """HTTP methods recognised as keys of an OpenAPI *Path Item Object*."""

    GET = "get"
    PUT = "put"
    POST = "post"
    DELETE = "delete"
    OPTIONS = "options"
    HEAD = "head"
    PATCH = "patch"
    TRACE = "trace"


class Operation(_Frozen):
    """A single operation under a path item."""

    operation_id: Optional[str] = Field(default=None, alias="operationId")
    summary: Optional[str] = None
    description: Optional[str] = None
    deprecated: bool = False


class PathItem(_Frozen):
    """The operations available on one path, keyed by method."""

    operations: dict[HttpMethod, Operation] = Field(default_factory=dict)


class Path(_Frozen):
    """One entry of the ``paths`` object."""

    path: str
    item: PathItem


class Paths(_Frozen):
    """All paths of the document in source order."""

    paths: tuple[Path, ...] = ()


class Info(_Frozen):
    """API metadata from the document's *Info Object*."""

    title: str
    version: str
    description: Optional[str] = None


class Components(_Frozen):
    """Reusable component definitions; only ``schemas`` are decoded."""

    schemas: dict[str, RefOrSchema] = Field(default_factory=dict)


class OpenAPI(_Frozen):
    """Root of a decoded OpenAPI document."""

    openapi: str
    info: Info
    paths: Paths = Field(default_factory=Paths)
    components: Optional[Components] = None
