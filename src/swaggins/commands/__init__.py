"""Built-in Typer sub-commands registered by :func:`swaggins.app.main`."""
