"""Config commands -- view and modify the global configuration.

Provides the ``swaggins config`` sub-command group. Settings live in
``config.json`` under the swaggins config directory and hold the default
output format and log level.
"""

from __future__ import annotations

import typer

from swaggins.exceptions import ConfigError
from swaggins.output import error, format_data, info, success, suggest


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show the effective configuration.

    Example::

        swaggins config show
        swaggins --json config show
    """
    from swaggins.config import get_config_dir, resolve_config

    config = resolve_config()
    info(f"Config directory: {get_config_dir()}")
    format_data(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Config key: 'output.format' or 'log_level'."),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value in the global config file.

    Example::

        swaggins config set output.format json
        swaggins config set log_level debug
    """
    from swaggins.config import SETTABLE_KEYS, set_config_value

    try:
        set_config_value(key, value)
    except ConfigError as exc:
        error(str(exc))
        suggest(f"Settable keys: {', '.join(SETTABLE_KEYS)}")
        raise typer.Exit(code=2) from None

    success(f"Set {key} = {value}")


@config_app.command("reset")
def config_reset() -> None:
    """Reset the global configuration to defaults."""
    from swaggins.config import save_global_config
    from swaggins.models import GlobalConfig

    path = save_global_config(GlobalConfig())
    success(f"Configuration reset: {path}")
