"""Normalize OpenAPI security schemes into viewer credential descriptions.

Each scheme under ``components/securitySchemes`` is classified into a
:class:`~specgraph.models.SecuritySchemeKind`. Translatable kinds are turned
into a :class:`~specgraph.models.NormalizedSecurityScheme` by the builder
registered for them in ``_BUILDERS``:

* ``apiKey`` -- one credential slot, ``apiKey``.
* ``http`` with scheme ``basic`` -- two slots, ``username`` and ``password``.

OAuth 2.0 is handled by a separate token mechanism and is always skipped.
Everything else (other HTTP schemes such as ``bearer`` or ``digest``,
``openIdConnect``, unknown types) is unsupported: strict mode raises
:class:`~specgraph.exceptions.UnsupportedSecuritySchemeError`, otherwise the
scheme is logged and left out.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from specgraph.exceptions import UnsupportedSecuritySchemeError
from specgraph.models import (
    NormalizedSecurityScheme,
    PreprocessOptions,
    SecuritySchemeKind,
)
from specgraph.parser.sanitize import beautify

logger = logging.getLogger(__name__)


def classify_security_scheme(definition: dict[str, Any]) -> SecuritySchemeKind:
    """Map the raw ``type`` and ``scheme`` fields of a scheme onto its kind.

    HTTP authentication scheme names are case-insensitive (RFC 7235).
    """
    scheme_type = definition.get("type")
    if scheme_type == "oauth2":
        return SecuritySchemeKind.OAUTH2
    if scheme_type == "apiKey":
        return SecuritySchemeKind.API_KEY
    if scheme_type == "http" and str(definition.get("scheme", "")).lower() == "basic":
        return SecuritySchemeKind.BASIC_AUTH
    return SecuritySchemeKind.UNSUPPORTED


def _describe_unsupported(definition: dict[str, Any]) -> str:
    if definition.get("type") == "http":
        return f"HTTP authentication scheme '{definition.get('scheme')}'"
    return f"security scheme type '{definition.get('type')}'"


def _api_key_scheme(key: str, definition: dict[str, Any]) -> NormalizedSecurityScheme:
    return NormalizedSecurityScheme(
        raw_name=key,
        definition=definition,
        kind=SecuritySchemeKind.API_KEY,
        parameters={"apiKey": beautify(f"{key}_apiKey")},
        schema={
            "type": "object",
            "description": f"API key credentials for the protocol '{key}'",
            "properties": {"apiKey": {"type": "string"}},
        },
    )


def _basic_auth_scheme(key: str, definition: dict[str, Any]) -> NormalizedSecurityScheme:
    return NormalizedSecurityScheme(
        raw_name=key,
        definition=definition,
        kind=SecuritySchemeKind.BASIC_AUTH,
        parameters={
            "username": beautify(f"{key}_username"),
            "password": beautify(f"{key}_password"),
        },
        schema={
            "type": "object",
            "description": f"Basic auth credentials for the protocol '{key}'",
            "properties": {
                "username": {"type": "string"},
                "password": {"type": "string"},
            },
        },
    )


_BUILDERS: dict[
    SecuritySchemeKind, Callable[[str, dict[str, Any]], NormalizedSecurityScheme]
] = {
    SecuritySchemeKind.API_KEY: _api_key_scheme,
    SecuritySchemeKind.BASIC_AUTH: _basic_auth_scheme,
}


def normalize_security_schemes(
    security_schemes: dict[str, Any], options: PreprocessOptions
) -> dict[str, NormalizedSecurityScheme]:
    """Normalize every translatable security scheme of a spec.

    Args:
        security_schemes: The ``components/securitySchemes`` map, with
            ``$ref`` entries already resolved.
        options: Preprocessing options; only ``strict`` is consulted.

    Returns:
        Normalized schemes keyed by the sanitized scheme key, in declaration
        order. OAuth 2.0 and (in non-strict mode) unsupported schemes are
        absent.

    Raises:
        UnsupportedSecuritySchemeError: In strict mode, for the first scheme
            that is neither OAuth 2.0 nor translatable.
    """
    normalized: dict[str, NormalizedSecurityScheme] = {}

    for key, definition in security_schemes.items():
        if not isinstance(definition, dict):
            continue

        kind = classify_security_scheme(definition)
        if kind == SecuritySchemeKind.OAUTH2:
            continue

        builder = _BUILDERS.get(kind)
        if builder is None:
            description = _describe_unsupported(definition)
            if options.strict:
                raise UnsupportedSecuritySchemeError(key, description)
            logger.warning(
                "Security scheme '%s' uses an unsupported %s; skipping it",
                key,
                description,
            )
            continue

        normalized[beautify(key)] = builder(key, definition)

    return normalized
