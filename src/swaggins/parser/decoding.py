"""Small combinator-style helpers for decoding JSON trees into models.

Every decoder in :mod:`swaggins.parser` has the shape
``decoder(node, history) -> value``: *node* is the raw JSON value (as produced
by ``json.loads`` or ``yaml.safe_load``) and *history* is the path from the
document root to *node*. Failures are raised as
:class:`~swaggins.exceptions.DecodingFailure` subclasses carrying that path,
so a failure deep inside a schema reports exactly where it happened.

The helpers here cover the building blocks the schema and document decoders
share: JSON type checks, required and optional field access, non-empty
collections, and :func:`decode_pairs`, which turns a JSON object into an
ordered tuple of decoded ``(key, value)`` pairs.
"""

from __future__ import annotations

from typing import Any, Callable, Optional, TypeVar

from swaggins.exceptions import (
    EmptyObjectError,
    InvalidKeyError,
    MalformedFieldError,
    MissingFieldError,
    PathSegment,
    format_path,
)

T = TypeVar("T")
K = TypeVar("K")
V = TypeVar("V")
U = TypeVar("U")

History = tuple[PathSegment, ...]
Decoder = Callable[[Any, History], T]
KeyDecoder = Callable[[Any], Optional[K]]

__all__ = [
    "History",
    "decode_field",
    "decode_non_empty_list",
    "decode_non_empty_set",
    "decode_optional_field",
    "decode_pairs",
    "describe",
    "down_field",
    "expect_array",
    "expect_bool",
    "expect_number",
    "expect_object",
    "expect_string",
    "format_path",
    "optional_field",
    "string_key",
]


def describe(node: Any) -> str:
    """Name the JSON type of *node* for error messages."""
    if node is None:
        return "null"
    if isinstance(node, bool):
        return "boolean"
    if isinstance(node, (int, float)):
        return "number"
    if isinstance(node, str):
        return "string"
    if isinstance(node, list):
        return "array"
    if isinstance(node, dict):
        return "object"
    return type(node).__name__


def _expected(expected: str, node: Any, history: History) -> MalformedFieldError:
    return MalformedFieldError(f"Expected {expected}, got {describe(node)}", history)


# --- Primitives ---


def expect_object(node: Any, history: History = ()) -> dict[str, Any]:
    if not isinstance(node, dict):
        raise _expected("object", node, history)
    return node


def expect_array(node: Any, history: History = ()) -> list[Any]:
    if not isinstance(node, list):
        raise _expected("array", node, history)
    return node


def expect_string(node: Any, history: History = ()) -> str:
    if not isinstance(node, str):
        raise _expected("string", node, history)
    return node


def expect_number(node: Any, history: History = ()) -> float:
    """Accept JSON numbers (``int`` or ``float``) as ``float``; booleans are rejected."""
    if isinstance(node, bool) or not isinstance(node, (int, float)):
        raise _expected("number", node, history)
    try:
        return float(node)
    except OverflowError:
        raise MalformedFieldError("Number out of range", history) from None


def expect_bool(node: Any, history: History = ()) -> bool:
    if not isinstance(node, bool):
        raise _expected("boolean", node, history)
    return node


# --- Fields ---


def down_field(obj: dict[str, Any], name: str, history: History = ()) -> Any:
    """Return ``obj[name]``, raising :class:`MissingFieldError` when absent."""
    if name not in obj:
        raise MissingFieldError(name, history + (name,))
    return obj[name]


def optional_field(obj: dict[str, Any], name: str) -> Any:
    """Return ``obj[name]``, or ``None`` when the field is absent or ``null``."""
    return obj.get(name)


def decode_field(
    obj: dict[str, Any], name: str, decoder: Decoder[T], history: History = ()
) -> T:
    """Decode the required field *name* of *obj* with *decoder*."""
    return decoder(down_field(obj, name, history), history + (name,))


def decode_optional_field(
    obj: dict[str, Any], name: str, decoder: Decoder[T], history: History = ()
) -> Optional[T]:
    """Decode the field *name* of *obj* if present; absence (or ``null``) yields ``None``."""
    value = optional_field(obj, name)
    if value is None:
        return None
    return decoder(value, history + (name,))


# --- Collections ---


def decode_non_empty_list(
    node: Any, item_decoder: Decoder[T], history: History = ()
) -> tuple[T, ...]:
    """Decode a JSON array with at least one element, preserving order."""
    items = expect_array(node, history)
    if not items:
        raise MalformedFieldError("Must be non-empty, got an empty array", history)
    return tuple(item_decoder(item, history + (index,)) for index, item in enumerate(items))


def decode_non_empty_set(
    node: Any, item_decoder: Decoder[T], history: History = ()
) -> frozenset[T]:
    """Decode a non-empty JSON array into a set; duplicate elements collapse."""
    return frozenset(decode_non_empty_list(node, item_decoder, history))


def string_key(raw: Any) -> Optional[str]:
    """Key decoder that accepts every text field name unchanged.

    YAML reads unquoted keys such as ``200`` as numbers; those are rejected.
    """
    if not isinstance(raw, str):
        return None
    return raw


def decode_pairs(
    node: Any,
    key_decoder: KeyDecoder[K],
    value_decoder: Decoder[V],
    combine: Callable[[K, V], U],
    history: History = (),
) -> tuple[U, ...]:
    """Decode a non-empty JSON object into an ordered tuple of combined pairs.

    Field order in the result is exactly the field order of the input object;
    nothing is sorted or de-duplicated, so the result has one element per
    field.

    Args:
        node: The raw JSON value; must be an object with at least one field.
        key_decoder: Turns a raw field name into a typed key, returning
            ``None`` when the name is not acceptable.
        value_decoder: Decodes each field's value. It receives the field's
            path, so its failures point at the field.
        combine: Builds one result element from a decoded key and value.
        history: Path to *node*.

    Raises:
        EmptyObjectError: *node* is an empty object.
        InvalidKeyError: *key_decoder* rejected a field name.
        DecodingFailure: Raised by *value_decoder* for a malformed value.
    """
    obj = expect_object(node, history)
    if not obj:
        raise EmptyObjectError(history)

    pairs: list[U] = []
    for raw_key, raw_value in obj.items():
        key = key_decoder(raw_key)
        if key is None:
            raise InvalidKeyError(raw_key, history + (raw_key,))
        value = value_decoder(raw_value, history + (raw_key,))
        pairs.append(combine(key, value))
    return tuple(pairs)
