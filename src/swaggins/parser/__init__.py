"""OpenAPI document parser -- load a document and decode it into models.

Typical usage::

    from swaggins.parser import parse_spec

    api = parse_spec("openapi.yaml")
    for name, schema in api.components.schemas.items():
        print(name, type(schema).__name__)

Sub-modules:

* :mod:`~swaggins.parser.loader` -- I/O layer (URL, file, stdin), format
  detection, and OpenAPI version validation.
* :mod:`~swaggins.parser.decoding` -- generic helpers for decoding JSON trees
  with path-aware failures.
* :mod:`~swaggins.parser.schema` -- the polymorphic schema decoder and its
  reverse encoder.
* :mod:`~swaggins.parser.document` -- the document skeleton (info, paths,
  components) around the schemas.
"""

from swaggins.parser.document import decode_document, parse_spec
from swaggins.parser.loader import load_spec, validate_openapi_version
from swaggins.parser.schema import decode_ref_or_schema, decode_schema, encode_schema

__all__ = [
    "decode_document",
    "decode_ref_or_schema",
    "decode_schema",
    "encode_schema",
    "load_spec",
    "parse_spec",
    "validate_openapi_version",
]
