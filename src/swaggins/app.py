"""Typer application and CLI entry point for swaggins.

This module builds the top-level Typer application and registers the
built-in sub-commands (``parse``, ``inspect``, ``config``).

:func:`main` is the console-script entry point declared in
``pyproject.toml``. It installs a SIGINT handler and invokes the app.
:class:`~swaggins.exceptions.SwagginsError` exits with the error's
``exit_code``; any other exception is written to a crash log under the data
directory.

See Also:
    :mod:`swaggins.config`: Configuration resolution used in :func:`main_callback`.
    :mod:`swaggins.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from swaggins import __version__
from swaggins.commands.config import config_app
from swaggins.commands.inspect import inspect_app
from swaggins.commands.parse import parse_command
from swaggins.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="swaggins",
    help="Parse OpenAPI 3.x documents into a typed schema model.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("parse")(parse_command)
app.add_typer(inspect_app, name="inspect", help="Inspect a decoded OpenAPI document.")
app.add_typer(config_app, name="config", help="Configuration management.")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"swaggins {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
    output_file: Optional[str] = typer.Option(
        None, "-o", "--output", help="Output file path."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Resolves the effective configuration (flags > env > project > global),
    installs the global :class:`~swaggins.output.OutputManager`, and sets the
    root log level (``DEBUG`` with ``--verbose``).
    """
    from swaggins.config import configure_logging, resolve_config
    from swaggins.exceptions import ConfigError
    from swaggins.output import OutputFormat, OutputManager, error, set_output

    cli_format: Optional[str] = None
    if json_output:
        cli_format = OutputFormat.JSON.value
    elif plain_output:
        cli_format = OutputFormat.PLAIN.value

    try:
        config = resolve_config(
            cli_format=cli_format,
            cli_log_level="DEBUG" if verbose else None,
        )
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    set_output(
        OutputManager(
            format=OutputFormat(config.output.format),
            no_color=no_color,
            quiet=quiet,
            verbose=verbose,
            output_file=output_file,
        )
    )
    configure_logging(config.log_level)

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log() -> str:
    """Write the current traceback to a timestamped file and return its path."""
    from swaggins.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_path = logs_dir / f"crash-{datetime.now().strftime('%Y%m%d-%H%M%S')}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``swaggins`` console script.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from swaggins.exceptions import SwagginsError
        from swaggins.output import error

        if isinstance(exc, SwagginsError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log()
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
