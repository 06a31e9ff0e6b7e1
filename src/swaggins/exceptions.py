"""Exception hierarchy for swaggins.

All exceptions inherit from :class:`SwagginsError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`swaggins.exit_codes`.
The top-level error handler in :func:`swaggins.app.main` catches
``SwagginsError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Decoding failures form their own branch under :class:`SpecParseError`. Each
one records the JSON path (``history``) of the node that failed so the message
can point a human at the offending part of the document.

Subclass hierarchy::

    SwagginsError (exit 1)
    +-- InvalidUsageError             (exit 2)
    +-- ConfigError                   (exit 1)
    +-- SpecParseError                (exit 7)
        +-- DecodingFailure
            +-- EmptyObjectError
            +-- InvalidKeyError
            +-- UnknownTypeError
            +-- MissingFieldError
            +-- MalformedFieldError
            +-- CompositeKindError
            |   +-- NoCompositeKindError
            |   +-- AmbiguousCompositeKindError
            +-- CombinedDecodingFailure
"""

from __future__ import annotations

from typing import Any, Optional, Sequence, Union

from swaggins.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_SPEC_PARSE_ERROR,
)

PathSegment = Union[str, int]
"""One step into a JSON tree: an object key or an array index."""


def format_path(history: Sequence[PathSegment]) -> str:
    """Render a decoding path as a JSON Pointer fragment (RFC 6901).

    Example::

        >>> format_path(("components", "schemas", "a/b", 0))
        '#/components/schemas/a~1b/0'
    """
    segments = (str(seg).replace("~", "~0").replace("/", "~1") for seg in history)
    return "#" + "".join(f"/{seg}" for seg in segments)


class SwagginsError(Exception):
    """Base exception for all swaggins errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(SwagginsError):
    """Raised for invalid CLI arguments (unknown schema name, bad config key)."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(SwagginsError):
    """Raised for configuration problems (invalid JSON, bad values)."""

    exit_code = EXIT_GENERIC_FAILURE


class SpecParseError(SwagginsError):
    """Raised when the OpenAPI document cannot be loaded, parsed, or decoded."""

    exit_code = EXIT_SPEC_PARSE_ERROR


# --- Decoding failures ---


class DecodingFailure(SpecParseError):
    """A node of the JSON tree did not have the expected shape.

    Args:
        reason: What was wrong, without location information.
        history: Path from the document root to the failing node.
    """

    def __init__(self, reason: str, history: Sequence[PathSegment] = ()):
        self.reason = reason
        self.history: tuple[PathSegment, ...] = tuple(history)
        super().__init__(f"{reason} (at {self.pointer})")

    @property
    def pointer(self) -> str:
        """The failing node's location as a JSON Pointer fragment."""
        return format_path(self.history)


class EmptyObjectError(DecodingFailure):
    """An object that must have at least one field had none."""

    def __init__(self, history: Sequence[PathSegment] = ()):
        super().__init__("Must be non-empty, got an empty object", history)


class InvalidKeyError(DecodingFailure):
    """A field name was rejected by its key decoder."""

    def __init__(self, key: Any, history: Sequence[PathSegment] = ()):
        self.key = key
        super().__init__(f"Invalid key: {key!r}", history)


class UnknownTypeError(DecodingFailure):
    """A ``type`` field held a string outside the known schema types."""

    def __init__(self, text: str, history: Sequence[PathSegment] = ()):
        self.text = text
        super().__init__(f"Unknown type: {text}", history)


class MissingFieldError(DecodingFailure):
    """A required field was absent. ``history`` ends with the field name."""

    def __init__(self, name: str, history: Sequence[PathSegment] = ()):
        self.name = name
        super().__init__(f"Missing required field '{name}'", history)


class MalformedFieldError(DecodingFailure):
    """A field was present but its value had the wrong shape."""

    @property
    def name(self) -> Optional[PathSegment]:
        """The last path segment, or ``None`` for the document root."""
        return self.history[-1] if self.history else None


class CompositeKindError(DecodingFailure):
    """Not exactly one of the composite keywords was present.

    Args:
        found: Keywords present on the node, in input order.
        allowed: All keywords that may select a composite kind.
        history: Path to the node.
    """

    def __init__(
        self,
        found: Sequence[str],
        allowed: Sequence[str],
        history: Sequence[PathSegment] = (),
    ):
        self.found: tuple[str, ...] = tuple(found)
        self.allowed: tuple[str, ...] = tuple(allowed)
        found_text = ",".join(self.found) if self.found else "none"
        super().__init__(
            f"Must be exactly one of: {', '.join(self.allowed)}, found {found_text}",
            history,
        )


class NoCompositeKindError(CompositeKindError):
    """None of ``oneOf`` / ``anyOf`` / ``allOf`` was present."""

    def __init__(self, allowed: Sequence[str], history: Sequence[PathSegment] = ()):
        super().__init__((), allowed, history)


class AmbiguousCompositeKindError(CompositeKindError):
    """Two or more of ``oneOf`` / ``anyOf`` / ``allOf`` were present."""


class CombinedDecodingFailure(DecodingFailure):
    """Every decoding route for a node failed.

    Args:
        routes: ``(route_name, failure)`` pairs in the order they were tried.
        history: Path to the node.
    """

    def __init__(
        self,
        routes: Sequence[tuple[str, DecodingFailure]],
        history: Sequence[PathSegment] = (),
    ):
        self.routes: tuple[tuple[str, DecodingFailure], ...] = tuple(routes)
        detail = "; ".join(f"{name}: {failure}" for name, failure in self.routes)
        super().__init__(f"No decoding route succeeded ({detail})", history)

    @property
    def failures(self) -> tuple[DecodingFailure, ...]:
        """The underlying failures, one per attempted route."""
        return tuple(failure for _, failure in self.routes)
