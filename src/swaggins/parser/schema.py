"""Decode OpenAPI *Schema Objects* into the closed :data:`~swaggins.models.Schema` union.

A schema node is decoded along one of two routes:

* **By type** -- the node has a ``type`` field. Its value selects the
  variant (``object``, ``array``, ``number``, ``string``) and the matching
  decoder validates the variant's own fields. Once ``type`` is present the
  decoder is committed to this route: an unknown type or a malformed
  sub-field is the final answer.
* **As composite** -- the node has no ``type``. Exactly one of ``oneOf``,
  ``anyOf``, ``allOf`` must be present; its array becomes the ordered member
  list of a :class:`~swaggins.models.CompositeSchema`.

If the composite route fails as well, a
:class:`~swaggins.exceptions.CombinedDecodingFailure` reports both routes.

A node carrying both ``type`` and a composite keyword decodes by type and the
composite keyword is ignored.

The reverse direction, :func:`encode_schema`, turns a decoded schema back into
plain JSON data. Sets are emitted sorted so the output is deterministic.

Typical usage::

    from swaggins.parser.schema import decode_schema

    schema = decode_schema({"oneOf": [{"type": "string"}, {"$ref": "#/x"}]})
    assert schema.kind is CompositeSchemaKind.ONE_OF
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from swaggins.exceptions import (
    AmbiguousCompositeKindError,
    CombinedDecodingFailure,
    DecodingFailure,
    MalformedFieldError,
    MissingFieldError,
    NoCompositeKindError,
    UnknownTypeError,
    format_path,
)
from swaggins.models import (
    SCHEMA_VARIANTS,
    ArraySchema,
    CompositeSchema,
    CompositeSchemaKind,
    Discriminator,
    NumberSchema,
    ObjectSchema,
    Property,
    PropertyName,
    Reference,
    RefOrSchema,
    Schema,
    SchemaType,
    StringSchema,
)
from swaggins.parser.decoding import (
    History,
    decode_field,
    decode_non_empty_list,
    decode_non_empty_set,
    decode_optional_field,
    decode_pairs,
    expect_number,
    expect_object,
    expect_string,
    optional_field,
    string_key,
)

logger = logging.getLogger(__name__)

_TYPE_FIELD = "type"
_REF_FIELD = "$ref"
_DISCRIMINATOR_FIELD = "discriminator"


# --- Keys and leaves ---


def property_name_key(raw: Any) -> Optional[PropertyName]:
    """Key decoder for object properties; non-text keys and the empty string are rejected."""
    if not isinstance(raw, str) or not raw:
        return None
    return PropertyName(raw)


def decode_property_name(node: Any, history: History = ()) -> PropertyName:
    text = expect_string(node, history)
    name = property_name_key(text)
    if name is None:
        raise MalformedFieldError("Property name must not be empty", history)
    return name


def decode_reference(node: Any, history: History = ()) -> Reference:
    obj = expect_object(node, history)
    return Reference(ref=decode_field(obj, _REF_FIELD, expect_string, history))


def decode_ref_or_schema(node: Any, history: History = ()) -> RefOrSchema:
    """Decode a node that is either a ``$ref`` pointer or an inline schema.

    References are kept as opaque :class:`~swaggins.models.Reference` leaves;
    they are never resolved here.
    """
    if isinstance(node, dict) and _REF_FIELD in node:
        return decode_reference(node, history)
    return decode_schema(node, history)


# --- Type-tagged variants ---


def decode_schema_type(node: Any, history: History = ()) -> SchemaType:
    """Decode the value of a ``type`` field into a :class:`~swaggins.models.SchemaType`.

    Raises:
        UnknownTypeError: The value is a string but not a known type.
        MalformedFieldError: The value is not a string.
    """
    text = expect_string(node, history)
    schema_type = SchemaType.from_wire(text)
    if schema_type is None:
        raise UnknownTypeError(text, history)
    return schema_type


def _decode_property(name: PropertyName, schema: RefOrSchema) -> Property:
    return Property(name=name, schema=schema)


def decode_properties(node: Any, history: History = ()) -> tuple[Property, ...]:
    """Decode a ``properties`` object into properties in declaration order."""
    return decode_pairs(
        node, property_name_key, decode_ref_or_schema, _decode_property, history
    )


def decode_object_schema(node: Any, history: History = ()) -> ObjectSchema:
    obj = expect_object(node, history)
    required = decode_optional_field(
        obj,
        "required",
        lambda value, path: decode_non_empty_set(value, decode_property_name, path),
        history,
    )
    properties = decode_field(obj, "properties", decode_properties, history)
    return ObjectSchema(required=required, properties=properties)


def decode_array_schema(node: Any, history: History = ()) -> ArraySchema:
    obj = expect_object(node, history)
    return ArraySchema(items=decode_field(obj, "items", decode_ref_or_schema, history))


def decode_number_schema(node: Any, history: History = ()) -> NumberSchema:
    obj = expect_object(node, history)
    enum = decode_optional_field(
        obj,
        "enum",
        lambda value, path: decode_non_empty_set(value, expect_number, path),
        history,
    )
    return NumberSchema(enum=enum)


def decode_string_schema(node: Any, history: History = ()) -> StringSchema:
    obj = expect_object(node, history)
    enum = decode_optional_field(
        obj,
        "enum",
        lambda value, path: decode_non_empty_set(value, expect_string, path),
        history,
    )
    return StringSchema(enum=enum)


_DECODERS_BY_TYPE: dict[SchemaType, Callable[[Any, History], Schema]] = {
    SchemaType.OBJECT: decode_object_schema,
    SchemaType.ARRAY: decode_array_schema,
    SchemaType.NUMBER: decode_number_schema,
    SchemaType.STRING: decode_string_schema,
}


def decode_typed_schema(node: Any, history: History = ()) -> Schema:
    """Decode a schema by its ``type`` field.

    Raises:
        MissingFieldError: The node has no ``type`` (the caller may then try
            the composite route).
        UnknownTypeError: ``type`` names no known schema type.
        DecodingFailure: The selected variant's fields are malformed.
    """
    obj = expect_object(node, history)
    schema_type = decode_field(obj, _TYPE_FIELD, decode_schema_type, history)
    return _DECODERS_BY_TYPE[schema_type](obj, history)


# --- Composite ---


def find_composite_kind(obj: dict[str, Any], history: History = ()) -> CompositeSchemaKind:
    """Return the single composite kind whose keyword appears in *obj*.

    Keywords are collected in the object's field order.

    Raises:
        NoCompositeKindError: No composite keyword is present.
        AmbiguousCompositeKindError: More than one is present.
    """
    allowed = [kind.keyword for kind in CompositeSchemaKind]
    present = [kind for kind in map(CompositeSchemaKind.from_wire, obj) if kind is not None]
    if not present:
        raise NoCompositeKindError(allowed, history)
    if len(present) > 1:
        raise AmbiguousCompositeKindError(
            [kind.keyword for kind in present], allowed, history
        )
    return present[0]


def decode_discriminator(node: Any, history: History = ()) -> Discriminator:
    """Decode a *Discriminator Object*; both of its fields are optional."""
    obj = expect_object(node, history)
    property_name = decode_optional_field(
        obj, "propertyName", decode_property_name, history
    )
    mapping = decode_optional_field(
        obj,
        "mapping",
        lambda value, path: dict(
            decode_pairs(value, string_key, decode_property_name, lambda k, v: (k, v), path)
        ),
        history,
    )
    return Discriminator(property_name=property_name, mapping=mapping)


def decode_composite_schema(node: Any, history: History = ()) -> CompositeSchema:
    obj = expect_object(node, history)
    kind = find_composite_kind(obj, history)
    schemas = decode_field(
        obj,
        kind.keyword,
        lambda value, path: decode_non_empty_list(value, decode_ref_or_schema, path),
        history,
    )
    discriminator = decode_optional_field(
        obj, _DISCRIMINATOR_FIELD, decode_discriminator, history
    )
    return CompositeSchema(schemas=schemas, kind=kind, discriminator=discriminator)


# --- Facade ---


def decode_schema(node: Any, history: History = ()) -> Schema:
    """Decode any schema node into one of the :data:`~swaggins.models.Schema` variants.

    The ``type`` route is tried first. Its outcome is final whenever the node
    has a ``type`` field; only a node without one falls through to the
    composite route.

    Args:
        node: The raw JSON value of the schema.
        history: Path to *node*, used in error messages.

    Returns:
        The decoded schema.

    Raises:
        MalformedFieldError: *node* is not a JSON object.
        UnknownTypeError: ``type`` is present but not a known type.
        CombinedDecodingFailure: ``type`` is absent and the composite route
            failed too.
        DecodingFailure: Any nested node failed to decode.
    """
    obj = expect_object(node, history)

    if optional_field(obj, _TYPE_FIELD) is not None:
        if any(CompositeSchemaKind.from_wire(key) for key in obj):
            logger.debug(
                "Schema at %s has a type and composite keywords; decoding by type",
                format_path(history),
            )
        return decode_typed_schema(obj, history)

    type_failure = MissingFieldError(_TYPE_FIELD, history + (_TYPE_FIELD,))
    try:
        return decode_composite_schema(obj, history)
    except DecodingFailure as exc:
        raise CombinedDecodingFailure(
            [("by type", type_failure), ("as composite", exc)], history
        ) from exc


# --- Encoding ---


def encode_ref_or_schema(value: RefOrSchema) -> dict[str, Any]:
    if isinstance(value, Reference):
        return {_REF_FIELD: value.ref}
    return encode_schema(value)


def encode_schema(schema: Schema) -> dict[str, Any]:
    """Turn a decoded schema back into JSON-compatible data.

    The output decodes to a schema equal to *schema*. Enum and ``required``
    sets are emitted sorted.
    """
    if not isinstance(schema, SCHEMA_VARIANTS):
        raise TypeError(f"Not a schema: {type(schema).__name__}")
    if isinstance(schema, ObjectSchema):
        data: dict[str, Any] = {"type": SchemaType.OBJECT.value}
        if schema.required is not None:
            data["required"] = [name.value for name in sorted(schema.required)]
        data["properties"] = {
            prop.name.value: encode_ref_or_schema(prop.schema_)
            for prop in schema.properties
        }
        return data
    if isinstance(schema, ArraySchema):
        return {"type": SchemaType.ARRAY.value, "items": encode_ref_or_schema(schema.items)}
    if isinstance(schema, NumberSchema):
        data = {"type": SchemaType.NUMBER.value}
        if schema.enum is not None:
            data["enum"] = sorted(schema.enum)
        return data
    if isinstance(schema, StringSchema):
        data = {"type": SchemaType.STRING.value}
        if schema.enum is not None:
            data["enum"] = sorted(schema.enum)
        return data
    data = {
        schema.kind.keyword: [encode_ref_or_schema(member) for member in schema.schemas]
    }
    if schema.discriminator is not None:
        data[_DISCRIMINATOR_FIELD] = _encode_discriminator(schema.discriminator)
    return data


def _encode_discriminator(discriminator: Discriminator) -> dict[str, Any]:
    data: dict[str, Any] = {}
    if discriminator.property_name is not None:
        data["propertyName"] = discriminator.property_name.value
    if discriminator.mapping is not None:
        data["mapping"] = {key: name.value for key, name in discriminator.mapping.items()}
    return data
