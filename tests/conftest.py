"""Shared test fixtures for swaggins.

Provides fixture documents, an isolated config environment, output state
resets, and a Typer CLI runner. pytest discovers these automatically.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
import yaml

from swaggins.output import reset_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager holds references to sys.stdout/sys.stderr taken at
    creation time; CliRunner swaps those streams, so a manager left over
    from one test would write to closed files in the next.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Fixture documents
# ---------------------------------------------------------------------------


@pytest.fixture
def petstore_path() -> Path:
    return FIXTURES_DIR / "petstore.yaml"


@pytest.fixture
def petstore_raw(petstore_path: Path) -> dict[str, Any]:
    """The petstore fixture as a plain dict."""
    return yaml.safe_load(petstore_path.read_text(encoding="utf-8"))


@pytest.fixture
def broken_raw() -> dict[str, Any]:
    with open(FIXTURES_DIR / "broken_schema.json") as f:
        return json.load(f)


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG directories at tmp_path and clear SWAGGINS_* variables.

    Also changes the working directory to tmp_path so no project-local
    ``swaggins.json`` leaks in.
    """
    monkeypatch.setattr("swaggins.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    for var in ["SWAGGINS_FORMAT", "SWAGGINS_LOG_LEVEL"]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
