"""Inspect commands -- examine a decoded OpenAPI document.

Provides the ``swaggins inspect`` sub-command group with read-only views of
a document: its component schemas as decoded variants, a single schema
re-encoded as JSON, and its paths. Every command loads and decodes the whole
document first, so a decoding failure anywhere is reported with its JSON
pointer and the command exits with the failure's exit code.
"""

from __future__ import annotations

import typer

from swaggins.exceptions import InvalidUsageError, SwagginsError
from swaggins.models import (
    ArraySchema,
    CompositeSchema,
    NumberSchema,
    ObjectSchema,
    OpenAPI,
    Reference,
    RefOrSchema,
    StringSchema,
)
from swaggins.output import debug, error, format_data, get_output, info, suggest


inspect_app = typer.Typer(no_args_is_help=True)

_MAX_LISTED = 5


def load_document(source: str) -> OpenAPI:
    """Parse *source*, turning any :class:`SwagginsError` into a clean CLI exit.

    Raises:
        typer.Exit: With the error's exit code when loading or decoding fails.
    """
    from swaggins.parser import parse_spec

    debug(f"Parsing {source}")
    try:
        return parse_spec(source)
    except SwagginsError as exc:
        error(f"Failed to parse spec: {exc}")
        raise typer.Exit(code=exc.exit_code) from None


def find_schema(document: OpenAPI, name: str) -> RefOrSchema:
    """Return the component schema called *name*.

    Raises:
        InvalidUsageError: The document has no such component schema.
    """
    schemas = document.components.schemas if document.components else {}
    if name not in schemas:
        raise InvalidUsageError(f"No schema named '{name}'")
    return schemas[name]


def _listing(values: list[str]) -> str:
    text = ", ".join(values[:_MAX_LISTED])
    if len(values) > _MAX_LISTED:
        text += ", ..."
    return text


def summarize(schema: RefOrSchema) -> tuple[str, str]:
    """Return a ``(kind, details)`` pair describing *schema* for tables."""
    if isinstance(schema, Reference):
        return "$ref", schema.ref
    if isinstance(schema, ObjectSchema):
        details = "properties: " + _listing([p.name.value for p in schema.properties])
        if schema.required:
            details += "; required: " + _listing([n.value for n in sorted(schema.required)])
        return "object", details
    if isinstance(schema, ArraySchema):
        kind, _ = summarize(schema.items)
        return "array", f"items: {kind}"
    if isinstance(schema, (NumberSchema, StringSchema)):
        kind = "number" if isinstance(schema, NumberSchema) else "string"
        if schema.enum is None:
            return kind, "-"
        return kind, "enum: " + _listing([str(v) for v in sorted(schema.enum)])
    if isinstance(schema, CompositeSchema):
        details = f"{len(schema.schemas)} members"
        if schema.discriminator and schema.discriminator.property_name:
            details += f"; discriminator: {schema.discriminator.property_name}"
        return schema.kind.keyword, details
    raise TypeError(f"Not a schema: {type(schema).__name__}")


@inspect_app.command("schemas")
def inspect_schemas(
    spec: str = typer.Argument(help="Spec file path, URL, or '-' for stdin."),
) -> None:
    """List the component schemas with their decoded variant.

    Example::

        swaggins inspect schemas openapi.yaml
    """
    document = load_document(spec)
    schemas = document.components.schemas if document.components else {}
    if not schemas:
        info("No schemas defined in this spec.")
        return

    rows = [[name, *summarize(schema)] for name, schema in schemas.items()]
    get_output().print_table(
        ["Schema", "Kind", "Details"], rows, title=f"Schemas ({len(rows)})"
    )


@inspect_app.command("schema")
def inspect_schema(
    spec: str = typer.Argument(help="Spec file path, URL, or '-' for stdin."),
    name: str = typer.Argument(help="Name under components.schemas."),
) -> None:
    """Print one component schema, re-encoded from the decoded model.

    Example::

        swaggins --json inspect schema openapi.yaml Pet
    """
    from swaggins.parser.schema import encode_ref_or_schema

    document = load_document(spec)
    schemas = document.components.schemas if document.components else {}
    try:
        schema = find_schema(document, name)
    except InvalidUsageError as exc:
        error(str(exc))
        if schemas:
            suggest(f"Available: {_listing(list(schemas))}")
        raise typer.Exit(code=exc.exit_code) from None

    format_data(encode_ref_or_schema(schema))


@inspect_app.command("paths")
def inspect_paths(
    spec: str = typer.Argument(help="Spec file path, URL, or '-' for stdin."),
) -> None:
    """List every operation as method, path, operation id, and summary."""
    document = load_document(spec)
    rows: list[list[str]] = []
    for path in document.paths.paths:
        for method, operation in path.item.operations.items():
            rows.append([
                method.value.upper(),
                path.path,
                operation.operation_id or "-",
                operation.summary or "-",
            ])

    if not rows:
        info("No operations defined in this spec.")
        return

    get_output().print_table(
        ["Method", "Path", "Operation ID", "Summary"],
        rows,
        title=f"{document.info.title} -- Paths ({len(rows)})",
    )
