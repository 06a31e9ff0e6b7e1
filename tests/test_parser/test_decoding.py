"""Tests for swaggins.parser.decoding helpers."""

from __future__ import annotations

import pytest

from swaggins.exceptions import (
    EmptyObjectError,
    InvalidKeyError,
    MalformedFieldError,
    MissingFieldError,
    format_path,
)
from swaggins.parser.decoding import (
    decode_field,
    decode_non_empty_list,
    decode_non_empty_set,
    decode_optional_field,
    decode_pairs,
    describe,
    down_field,
    expect_number,
    expect_object,
    expect_string,
    string_key,
)


def _upper_key(raw: str):
    return raw.upper() if raw.isalpha() else None


# ---------------------------------------------------------------------------
# format_path
# ---------------------------------------------------------------------------


class TestFormatPath:
    def test_root(self) -> None:
        assert format_path(()) == "#"

    def test_keys_and_indexes(self) -> None:
        assert format_path(("components", "schemas", "Pet", "oneOf", 0)) == (
            "#/components/schemas/Pet/oneOf/0"
        )

    def test_escapes_slash_and_tilde(self) -> None:
        assert format_path(("paths", "/pets/{id}", "a~b")) == "#/paths/~1pets~1{id}/a~0b"


# ---------------------------------------------------------------------------
# Primitive checks
# ---------------------------------------------------------------------------


class TestPrimitives:
    @pytest.mark.parametrize(
        "node,name",
        [
            (None, "null"),
            (True, "boolean"),
            (3, "number"),
            (1.5, "number"),
            ("x", "string"),
            ([], "array"),
            ({}, "object"),
        ],
    )
    def test_describe(self, node, name: str) -> None:
        assert describe(node) == name

    def test_expect_object_failure_message(self) -> None:
        with pytest.raises(MalformedFieldError, match="Expected object, got array"):
            expect_object([], ("a",))

    def test_expect_string(self) -> None:
        assert expect_string("x") == "x"
        with pytest.raises(MalformedFieldError):
            expect_string(1)

    def test_expect_number_converts_to_float(self) -> None:
        result = expect_number(2)
        assert result == 2.0
        assert isinstance(result, float)

    def test_expect_number_rejects_booleans(self) -> None:
        with pytest.raises(MalformedFieldError, match="got boolean"):
            expect_number(False)

    def test_expect_number_out_of_range(self) -> None:
        with pytest.raises(MalformedFieldError, match="Number out of range") as exc_info:
            expect_number(10**400, ("enum", 0))
        assert exc_info.value.pointer == "#/enum/0"

    def test_string_key_rejects_non_text(self) -> None:
        assert string_key("200") == "200"
        assert string_key(200) is None


# ---------------------------------------------------------------------------
# Field access
# ---------------------------------------------------------------------------


class TestFields:
    def test_down_field_missing(self) -> None:
        with pytest.raises(MissingFieldError) as exc_info:
            down_field({"a": 1}, "b", ("root",))
        assert exc_info.value.name == "b"
        assert exc_info.value.history == ("root", "b")

    def test_decode_field_passes_path(self) -> None:
        with pytest.raises(MalformedFieldError) as exc_info:
            decode_field({"a": 1}, "a", expect_string, ("x",))
        assert exc_info.value.pointer == "#/x/a"
        assert exc_info.value.name == "a"

    def test_optional_field_absent_or_null(self) -> None:
        assert decode_optional_field({}, "a", expect_string) is None
        assert decode_optional_field({"a": None}, "a", expect_string) is None

    def test_optional_field_present(self) -> None:
        assert decode_optional_field({"a": "v"}, "a", expect_string) == "v"

    def test_optional_field_malformed(self) -> None:
        with pytest.raises(MalformedFieldError):
            decode_optional_field({"a": 3}, "a", expect_string)


# ---------------------------------------------------------------------------
# Collections
# ---------------------------------------------------------------------------


class TestNonEmptyCollections:
    def test_list_keeps_order(self) -> None:
        assert decode_non_empty_list(["b", "a", "b"], expect_string) == ("b", "a", "b")

    def test_list_must_be_non_empty(self) -> None:
        with pytest.raises(MalformedFieldError, match="non-empty"):
            decode_non_empty_list([], expect_string, ("enum",))

    def test_list_item_failure_carries_index(self) -> None:
        with pytest.raises(MalformedFieldError) as exc_info:
            decode_non_empty_list(["a", "b", 3], expect_string, ("enum",))
        assert exc_info.value.history == ("enum", 2)

    def test_set_collapses_duplicates(self) -> None:
        assert decode_non_empty_set(["a", "a", "b"], expect_string) == frozenset({"a", "b"})

    def test_set_must_be_non_empty(self) -> None:
        with pytest.raises(MalformedFieldError):
            decode_non_empty_set([], expect_string)


class TestDecodePairs:
    """decode_pairs keeps input order and reports the failing key."""

    def test_order_is_preserved(self) -> None:
        result = decode_pairs(
            {"z": "1", "a": "2", "m": "3"}, string_key, expect_string, lambda k, v: (k, v)
        )
        assert result == (("z", "1"), ("a", "2"), ("m", "3"))

    def test_key_decoder_is_applied(self) -> None:
        result = decode_pairs({"ab": "x"}, _upper_key, expect_string, lambda k, v: k + v)
        assert result == ("ABx",)

    def test_empty_object(self) -> None:
        with pytest.raises(EmptyObjectError) as exc_info:
            decode_pairs({}, string_key, expect_string, lambda k, v: v, ("properties",))
        assert exc_info.value.pointer == "#/properties"

    def test_rejected_key(self) -> None:
        with pytest.raises(InvalidKeyError) as exc_info:
            decode_pairs({"ok": "x", "n0pe": "y"}, _upper_key, expect_string, lambda k, v: v)
        assert exc_info.value.key == "n0pe"
        assert exc_info.value.history == ("n0pe",)

    def test_value_failure_points_at_key(self) -> None:
        with pytest.raises(MalformedFieldError) as exc_info:
            decode_pairs({"a": "x", "b": 2}, string_key, expect_string, lambda k, v: v, ("m",))
        assert exc_info.value.pointer == "#/m/b"

    def test_not_an_object(self) -> None:
        with pytest.raises(MalformedFieldError):
            decode_pairs(["a"], string_key, expect_string, lambda k, v: v)
