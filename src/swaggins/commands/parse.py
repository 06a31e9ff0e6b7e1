"""The ``swaggins parse`` command -- decode a document and summarise it."""

from __future__ import annotations

import typer

from swaggins.commands.inspect import load_document
from swaggins.output import format_data, success


def parse_command(
    spec: str = typer.Argument(help="Spec file path, URL, or '-' for stdin."),
) -> None:
    """Decode an OpenAPI document and print a summary.

    Exits with code 7 and the failing node's JSON pointer when any part of
    the document does not decode.

    Example::

        swaggins parse openapi.yaml
        cat openapi.json | swaggins --json parse -
    """
    document = load_document(spec)
    schemas = document.components.schemas if document.components else {}
    operations = sum(len(p.item.operations) for p in document.paths.paths)

    format_data({
        "openapi": document.openapi,
        "title": document.info.title,
        "version": document.info.version,
        "paths": len(document.paths.paths),
        "operations": operations,
        "schemas": len(schemas),
    })
    success(f"Decoded {len(schemas)} schemas")
