"""swaggins -- Parse OpenAPI 3.x documents into a typed, immutable schema model.

This package reads an OpenAPI document (JSON or YAML, from a file, URL, or
stdin) and decodes it into frozen Pydantic models. The centrepiece is the
polymorphic schema decoder, which turns every *Schema Object* into exactly one
of :class:`~swaggins.models.ObjectSchema`, :class:`~swaggins.models.ArraySchema`,
:class:`~swaggins.models.NumberSchema`, :class:`~swaggins.models.StringSchema`,
or :class:`~swaggins.models.CompositeSchema`.

Typical workflow::

    swaggins parse openapi.yaml            # decode and summarise
    swaggins inspect schemas openapi.yaml  # list decoded component schemas

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models for the schema and document model plus config.
    config: XDG-aware configuration with precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
    parser: Loading and decoding of OpenAPI documents.
"""

__version__ = "0.1.0"
