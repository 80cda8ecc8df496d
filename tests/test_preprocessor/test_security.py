"""Tests for specgraph.preprocessor.security."""

from __future__ import annotations

import logging
from typing import Any

import pytest

from specgraph.exceptions import UnsupportedSecuritySchemeError
from specgraph.exit_codes import EXIT_UNSUPPORTED_FEATURE
from specgraph.models import PreprocessOptions, SecuritySchemeKind
from specgraph.preprocessor.security import (
    classify_security_scheme,
    normalize_security_schemes,
)

LENIENT = PreprocessOptions()
STRICT = PreprocessOptions(strict=True)


class TestClassifySecurityScheme:
    @pytest.mark.parametrize(
        ("definition", "kind"),
        [
            ({"type": "oauth2", "flows": {}}, SecuritySchemeKind.OAUTH2),
            ({"type": "apiKey", "in": "header", "name": "X"}, SecuritySchemeKind.API_KEY),
            ({"type": "http", "scheme": "basic"}, SecuritySchemeKind.BASIC_AUTH),
            ({"type": "http", "scheme": "Basic"}, SecuritySchemeKind.BASIC_AUTH),
            ({"type": "http", "scheme": "bearer"}, SecuritySchemeKind.UNSUPPORTED),
            ({"type": "openIdConnect"}, SecuritySchemeKind.UNSUPPORTED),
            ({"type": "mutualTLS"}, SecuritySchemeKind.UNSUPPORTED),
        ],
    )
    def test_kinds(self, definition: dict[str, Any], kind: SecuritySchemeKind) -> None:
        assert classify_security_scheme(definition) == kind


class TestNormalizeSecuritySchemes:
    """Test translation of security schemes into viewer parameters."""

    def test_api_key(self) -> None:
        definition = {"type": "apiKey", "in": "header", "name": "X-Key"}
        result = normalize_security_schemes({"My_api_key": definition}, LENIENT)

        scheme = result["MyApiKey"]
        assert scheme.raw_name == "My_api_key"
        assert scheme.definition is definition
        assert scheme.kind == SecuritySchemeKind.API_KEY
        assert scheme.parameters == {"apiKey": "MyApiKeyApiKey"}
        assert scheme.schema_["properties"] == {"apiKey": {"type": "string"}}

    def test_basic_auth(self) -> None:
        result = normalize_security_schemes(
            {"basic": {"type": "http", "scheme": "basic"}}, LENIENT
        )
        assert result["basic"].kind == SecuritySchemeKind.BASIC_AUTH
        assert result["basic"].parameters == {
            "username": "basicUsername",
            "password": "basicPassword",
        }
        assert set(result["basic"].schema_["properties"]) == {"username", "password"}

    def test_oauth2_always_skipped(self) -> None:
        schemes = {"oauth": {"type": "oauth2", "flows": {}}}
        assert normalize_security_schemes(schemes, LENIENT) == {}
        assert normalize_security_schemes(schemes, STRICT) == {}

    def test_unsupported_skipped_with_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        schemes = {
            "digest": {"type": "http", "scheme": "digest"},
            "key": {"type": "apiKey", "in": "query", "name": "k"},
        }
        with caplog.at_level(logging.WARNING, logger="specgraph.preprocessor.security"):
            result = normalize_security_schemes(schemes, LENIENT)
        assert list(result) == ["key"]
        assert "digest" in caplog.text

    def test_unsupported_raises_in_strict_mode(self) -> None:
        schemes = {"digest": {"type": "http", "scheme": "digest"}}
        with pytest.raises(UnsupportedSecuritySchemeError) as exc_info:
            normalize_security_schemes(schemes, STRICT)
        assert exc_info.value.scheme_name == "digest"
        assert "digest" in str(exc_info.value.scheme)
        assert exc_info.value.exit_code == EXIT_UNSUPPORTED_FEATURE

    def test_declaration_order_kept(self) -> None:
        schemes = {
            "zeta": {"type": "apiKey", "in": "header", "name": "Z"},
            "alpha": {"type": "http", "scheme": "basic"},
        }
        assert list(normalize_security_schemes(schemes, LENIENT)) == ["zeta", "alpha"]

    def test_empty(self) -> None:
        assert normalize_security_schemes({}, STRICT) == {}
