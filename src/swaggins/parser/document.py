"""Decode the top-level OpenAPI document around the schemas.

These are plain structural decodes: ``info``, ``paths`` (one
:class:`~swaggins.models.Path` per entry, in source order, with the HTTP
method keys of each path item) and ``components.schemas`` (every entry goes
through :func:`~swaggins.parser.schema.decode_ref_or_schema`). Everything else
in the document is ignored.

:func:`parse_spec` is the one-call entry point combining the loader, the
version check, and :func:`decode_document`.
"""

from __future__ import annotations

import logging
from typing import Any

from swaggins.exceptions import InvalidKeyError
from swaggins.models import (
    Components,
    HttpMethod,
    Info,
    OpenAPI,
    Operation,
    Path,
    PathItem,
    Paths,
    RefOrSchema,
)
from swaggins.parser.decoding import (
    History,
    decode_field,
    decode_optional_field,
    expect_bool,
    expect_object,
    expect_string,
    string_key,
)
from swaggins.parser.loader import load_spec, validate_openapi_version
from swaggins.parser.schema import decode_ref_or_schema

logger = logging.getLogger(__name__)

_HTTP_METHODS = {m.value: m for m in HttpMethod}


def decode_info(node: Any, history: History = ()) -> Info:
    obj = expect_object(node, history)
    return Info(
        title=decode_field(obj, "title", expect_string, history),
        version=decode_field(obj, "version", _expect_version_text, history),
        description=decode_optional_field(obj, "description", expect_string, history),
    )


def decode_operation(node: Any, history: History = ()) -> Operation:
    obj = expect_object(node, history)
    deprecated = decode_optional_field(obj, "deprecated", expect_bool, history)
    return Operation(
        operation_id=decode_optional_field(obj, "operationId", expect_string, history),
        summary=decode_optional_field(obj, "summary", expect_string, history),
        description=decode_optional_field(obj, "description", expect_string, history),
        deprecated=bool(deprecated),
    )


def decode_path_item(node: Any, history: History = ()) -> PathItem:
    """Decode a *Path Item Object*; keys that are not HTTP methods are skipped."""
    obj = expect_object(node, history)
    operations: dict[HttpMethod, Operation] = {}
    for key, value in obj.items():
        method = _HTTP_METHODS.get(key)
        if method is None:
            continue
        operations[method] = decode_operation(value, history + (key,))
    return PathItem(operations=operations)


def decode_paths(node: Any, history: History = ()) -> Paths:
    obj = expect_object(node, history)
    return Paths(
        paths=tuple(
            Path(
                path=_text_key(path, history),
                item=decode_path_item(item, history + (path,)),
            )
            for path, item in obj.items()
        )
    )


def decode_components(node: Any, history: History = ()) -> Components:
    obj = expect_object(node, history)
    raw_schemas = decode_optional_field(obj, "schemas", expect_object, history) or {}
    schemas: dict[str, RefOrSchema] = {}
    for name, raw in raw_schemas.items():
        key = _text_key(name, history + ("schemas",))
        schemas[key] = decode_ref_or_schema(raw, history + ("schemas", key))
    logger.debug("Decoded %d component schemas", len(schemas))
    return Components(schemas=schemas)


def decode_document(raw: Any) -> OpenAPI:
    """Decode a loaded OpenAPI document into an :class:`~swaggins.models.OpenAPI`.

    Args:
        raw: The document as returned by
            :func:`~swaggins.parser.loader.load_spec`.

    Raises:
        DecodingFailure: Any part of the document has the wrong shape; the
            message carries the JSON pointer of the failing node.
    """
    history: History = ()
    obj = expect_object(raw, history)
    openapi = decode_field(obj, "openapi", _expect_version_text, history)
    info = decode_field(obj, "info", decode_info, history)
    paths = decode_optional_field(obj, "paths", decode_paths, history)
    return OpenAPI(
        openapi=openapi,
        info=info,
        paths=paths if paths is not None else Paths(),
        components=decode_optional_field(obj, "components", decode_components, history),
    )


def _text_key(raw: Any, history: History) -> str:
    key = string_key(raw)
    if key is None:
        raise InvalidKeyError(raw, history + (raw,))
    return key


def _expect_version_text(node: Any, history: History) -> str:
    # YAML reads an unquoted ``openapi: 3.0`` as a float.
    if isinstance(node, (int, float)) and not isinstance(node, bool):
        return str(node)
    return expect_string(node, history)


def parse_spec(source: str) -> OpenAPI:
    """Load, version-check, and decode the OpenAPI document at *source*.

    Args:
        source: A URL (http/https), file path, or ``'-'`` for stdin.

    Raises:
        SpecParseError: The document cannot be loaded, has an unsupported
            version, or fails to decode.
    """
    raw = load_spec(source)
    version = validate_openapi_version(raw)
    logger.debug("Loaded OpenAPI %s document from %s", version, source)
    return decode_document(raw)
