"""Tests for swaggins.parser.loader."""

from __future__ import annotations

import io
import json
from pathlib import Path
from unittest.mock import patch

import httpx
import pytest

from swaggins.exceptions import SpecParseError
from swaggins.parser.loader import (
    _load_from_stdin,
    _load_from_url,
    _parse_content,
    load_spec,
    validate_openapi_version,
)

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures"

_MINIMAL_YAML = 'openapi: "3.0.0"\ninfo:\n  title: From YAML\n  version: "1"\n'


def _response(status: int, url: str, **kwargs) -> httpx.Response:
    return httpx.Response(status_code=status, request=httpx.Request("GET", url), **kwargs)


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------


class TestLoadFromFile:
    def test_yaml_fixture(self) -> None:
        result = load_spec(str(FIXTURES_DIR / "petstore.yaml"))
        assert result["info"]["title"] == "Petstore API"
        assert list(result["components"]["schemas"])[0] == "Pet"

    def test_json_fixture(self) -> None:
        result = load_spec(str(FIXTURES_DIR / "broken_schema.json"))
        assert result["openapi"] == "3.1.0"

    def test_yaml_without_suffix(self, tmp_path: Path) -> None:
        spec_file = tmp_path / "openapi"
        spec_file.write_text(_MINIMAL_YAML, encoding="utf-8")
        assert load_spec(str(spec_file))["info"]["title"] == "From YAML"

    def test_missing_file(self) -> None:
        with pytest.raises(SpecParseError, match="Spec file not found"):
            load_spec("/nonexistent/openapi.yaml")

    def test_empty_file(self, tmp_path: Path) -> None:
        spec_file = tmp_path / "empty.yaml"
        spec_file.write_text("  \n", encoding="utf-8")
        with pytest.raises(SpecParseError, match="Spec file is empty"):
            load_spec(str(spec_file))

    def test_json_suffix_makes_syntax_errors_final(self, tmp_path: Path) -> None:
        spec_file = tmp_path / "spec.json"
        spec_file.write_text("openapi: '3.0.0'", encoding="utf-8")
        with pytest.raises(SpecParseError, match="Invalid JSON"):
            load_spec(str(spec_file))

    def test_root_must_be_object(self, tmp_path: Path) -> None:
        spec_file = tmp_path / "list.json"
        spec_file.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(SpecParseError, match="must be a JSON/YAML object"):
            load_spec(str(spec_file))


# ---------------------------------------------------------------------------
# Stdin
# ---------------------------------------------------------------------------


class TestLoadFromStdin:
    def test_dash_reads_stdin(self) -> None:
        payload = json.dumps({"openapi": "3.0.0", "info": {"title": "piped", "version": "1"}})
        with patch("swaggins.parser.loader.sys") as mock_sys:
            mock_sys.stdin = io.StringIO(payload)
            result = load_spec("-")
        assert result["info"]["title"] == "piped"

    def test_yaml_on_stdin(self) -> None:
        with patch("swaggins.parser.loader.sys") as mock_sys:
            mock_sys.stdin = io.StringIO(_MINIMAL_YAML)
            assert _load_from_stdin()["info"]["title"] == "From YAML"

    def test_blank_stdin(self) -> None:
        with patch("swaggins.parser.loader.sys") as mock_sys:
            mock_sys.stdin = io.StringIO(" \n\t")
            with pytest.raises(SpecParseError, match="No input received"):
                _load_from_stdin()


# ---------------------------------------------------------------------------
# URLs
# ---------------------------------------------------------------------------


class TestLoadFromUrl:
    def test_json_response(self) -> None:
        url = "https://example.com/openapi.json"
        body = {"openapi": "3.1.0", "info": {"title": "Remote", "version": "1"}}
        with patch("swaggins.parser.loader.httpx.get", return_value=_response(200, url, json=body)):
            assert load_spec(url)["info"]["title"] == "Remote"

    def test_yaml_content_type(self) -> None:
        url = "https://example.com/openapi"
        response = _response(
            200, url, text=_MINIMAL_YAML, headers={"content-type": "application/yaml"}
        )
        with patch("swaggins.parser.loader.httpx.get", return_value=response):
            assert _load_from_url(url)["info"]["title"] == "From YAML"

    def test_http_status_error(self) -> None:
        url = "https://example.com/gone.json"
        with patch("swaggins.parser.loader.httpx.get", return_value=_response(410, url)):
            with pytest.raises(SpecParseError, match="HTTP 410"):
                _load_from_url(url)

    def test_transport_error(self) -> None:
        with patch(
            "swaggins.parser.loader.httpx.get",
            side_effect=httpx.ConnectError("connection refused"),
        ):
            with pytest.raises(SpecParseError, match="Failed to fetch"):
                _load_from_url("https://unreachable.example.com/openapi.json")


# ---------------------------------------------------------------------------
# Content detection
# ---------------------------------------------------------------------------


class TestParseContent:
    def test_json_first(self) -> None:
        assert _parse_content('{"a": [1, 2]}') == {"a": [1, 2]}

    def test_yaml_fallback_keeps_key_order(self) -> None:
        result = _parse_content("c: 1\na: 2\nb: 3\n")
        assert list(result) == ["c", "a", "b"]

    def test_neither_format(self) -> None:
        with pytest.raises(SpecParseError, match="as JSON or YAML") as exc_info:
            _parse_content("}{ not: [valid")
        assert "JSON error" in str(exc_info.value)

    def test_empty_yaml_document(self) -> None:
        with pytest.raises(SpecParseError, match="empty document"):
            _parse_content("---\n", hint="yaml")


# ---------------------------------------------------------------------------
# Version check
# ---------------------------------------------------------------------------


class TestValidateOpenAPIVersion:
    @pytest.mark.parametrize("version", ["3.0.0", "3.0.3", "3.1.0", "3.2.0"])
    def test_accepts_3x(self, version: str) -> None:
        assert validate_openapi_version({"openapi": version}) == version

    def test_numeric_version(self) -> None:
        assert validate_openapi_version({"openapi": 3.1}) == "3.1"

    def test_swagger_document(self) -> None:
        with pytest.raises(SpecParseError, match="Swagger 2.0 is not supported"):
            validate_openapi_version({"swagger": "2.0"})

    def test_missing_version(self) -> None:
        with pytest.raises(SpecParseError, match="Missing 'openapi' field"):
            validate_openapi_version({"info": {}})

    @pytest.mark.parametrize("version", ["2.0.0", "4.0.0", "30.0"])
    def test_other_versions(self, version: str) -> None:
        with pytest.raises(SpecParseError, match="Unsupported OpenAPI version"):
            validate_openapi_version({"openapi": version})
