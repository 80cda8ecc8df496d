"""Exception hierarchy for specgraph.

All exceptions inherit from :class:`SpecgraphError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`specgraph.exit_codes`.
The top-level error handler in :func:`specgraph.app.main` catches
``SpecgraphError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    SpecgraphError (exit 1)
    +-- InvalidUsageError                (exit 2)
    |   +-- MissingNameHintError         (exit 2)
    +-- SpecParseError                   (exit 7)
    +-- UnsupportedSecuritySchemeError   (exit 8)
    +-- ConfigError                      (exit 1)

An operation without a usable response schema is *not* an error: the
preprocessor drops it and logs a warning.
"""

from __future__ import annotations

from typing import Optional

from specgraph.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_SPEC_PARSE_ERROR,
    EXIT_UNSUPPORTED_FEATURE,
)


class SpecgraphError(Exception):
    """Base exception for all specgraph errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`specgraph.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(SpecgraphError):
    """Raised for invalid CLI arguments or a violated calling contract."""

    exit_code = EXIT_INVALID_USAGE


class MissingNameHintError(InvalidUsageError):
    """Raised when a data definition must be named but no name hint was supplied."""


class SpecParseError(SpecgraphError):
    """Raised when the OpenAPI spec cannot be parsed or a ``$ref`` cannot be resolved."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class UnsupportedSecuritySchemeError(SpecgraphError):
    """Raised in strict mode when a security scheme cannot be translated.

    Args:
        scheme_name: The key of the scheme under ``components/securitySchemes``.
        scheme: Description of the unsupported feature, e.g. the HTTP
            authentication scheme (``"digest"``) or the scheme type.
    """

    exit_code = EXIT_UNSUPPORTED_FEATURE

    def __init__(self, scheme_name: str, scheme: Optional[str]):
        super().__init__(
            f"Security scheme '{scheme_name}' uses an unsupported "
            f"authentication scheme: {scheme}"
        )
        self.scheme_name = scheme_name
        self.scheme = scheme


class ConfigError(SpecgraphError):
    """Raised for configuration problems (invalid JSON, bad option values)."""

    exit_code = EXIT_GENERIC_FAILURE
