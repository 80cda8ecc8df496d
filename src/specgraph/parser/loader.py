"""Load OpenAPI specifications from a URL, local file, or stdin.

Reading the document is not part of preprocessing proper; this module only
turns a source string into the raw ``dict`` that
:func:`~specgraph.preprocessor.preprocess_oas` walks. JSON and YAML are both
accepted, with the format detected from the file extension, the HTTP
``content-type``, or the content itself.

The two public functions are:

* :func:`load_spec` -- Load and parse a spec from any supported source.
* :func:`validate_openapi_version` -- Check and return the ``openapi`` version
  string, rejecting Swagger 2.x documents.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

import httpx
import yaml

from specgraph.exceptions import SpecParseError

logger = logging.getLogger(__name__)

_URL_TIMEOUT = 30.0


def load_spec(source: str) -> dict[str, Any]:
    """Load an OpenAPI spec from URL, file path, or stdin ('-').

    Args:
        source: A URL (http/https), file path, or '-' for stdin.

    Returns:
        The parsed spec as a dictionary.

    Raises:
        SpecParseError: If the source cannot be read or parsed.
    """
    if source == "-":
        content, hint = _read_stdin(), ""
    elif source.startswith(("http://", "https://")):
        content, hint = _fetch_url(source)
    else:
        content, hint = _read_file(source)

    if not content.strip():
        raise SpecParseError(f"Spec source is empty: {source}")

    logger.debug("Loaded %d characters from %s", len(content), source)
    return _parse_content(content, hint=hint)


def _read_stdin() -> str:
    try:
        return sys.stdin.read()
    except OSError as exc:
        raise SpecParseError(f"Failed to read from stdin: {exc}") from exc


def _fetch_url(url: str) -> tuple[str, str]:
    """Fetch *url* and return its body plus a format hint from the content type."""
    try:
        response = httpx.get(url, timeout=_URL_TIMEOUT, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SpecParseError(
            f"HTTP {exc.response.status_code} fetching spec from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise SpecParseError(f"Failed to fetch spec from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    if "json" in content_type:
        return response.text, "json"
    if "yaml" in content_type or "yml" in content_type:
        return response.text, "yaml"
    return response.text, ""


def _read_file(path: str) -> tuple[str, str]:
    """Read a local spec file and return its text plus a format hint from the suffix."""
    file_path = Path(path)
    if not file_path.is_file():
        raise SpecParseError(f"Spec file not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SpecParseError(f"Failed to read spec file {path}: {exc}") from exc

    suffix = file_path.suffix.lower()
    if suffix == ".json":
        return content, "json"
    if suffix in (".yaml", ".yml"):
        return content, "yaml"
    return content, ""


def _parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Parse content as JSON or YAML.

    JSON is tried first unless the hint says YAML; valid JSON is also valid
    YAML, but the JSON parser is stricter and gives better error messages.

    Args:
        content: The raw string content.
        hint: Optional format hint ('json' or 'yaml').

    Returns:
        The parsed dictionary.

    Raises:
        SpecParseError: If the content is not a JSON/YAML object.
    """
    errors: list[str] = []

    if hint != "yaml":
        try:
            return _require_object(json.loads(content))
        except json.JSONDecodeError as exc:
            if hint == "json":
                raise SpecParseError(f"Invalid JSON: {exc}") from exc
            errors.append(f"JSON error: {exc}")

    try:
        return _require_object(yaml.safe_load(content))
    except yaml.YAMLError as exc:
        errors.append(f"YAML error: {exc}")

    raise SpecParseError(
        "Failed to parse spec as JSON or YAML\n  " + "\n  ".join(errors)
    )


def _require_object(result: Any) -> dict[str, Any]:
    if not isinstance(result, dict):
        kind = type(result).__name__ if result is not None else "empty document"
        raise SpecParseError(f"Spec must be a JSON/YAML object (got {kind})")
    return result


def validate_openapi_version(spec: dict[str, Any]) -> str:
    """Validate and return the OpenAPI version string.

    Any ``3.x`` version is accepted.

    Args:
        spec: The parsed spec dictionary.

    Returns:
        The OpenAPI version string (e.g., '3.0.3', '3.1.0').

    Raises:
        SpecParseError: If the version is missing, unsupported, or indicates
            Swagger 2.x.
    """
    if "swagger" in spec:
        raise SpecParseError(
            f"Swagger {spec['swagger']} is not supported. "
            "Only OpenAPI 3.x documents can be preprocessed. "
            "Consider converting with https://converter.swagger.io"
        )

    version = spec.get("openapi")
    if version is None:
        raise SpecParseError(
            "Missing 'openapi' field. Is this an OpenAPI 3.x document?"
        )

    version_str = str(version)
    if not version_str.startswith("3."):
        raise SpecParseError(
            f"Unsupported OpenAPI version: {version_str}. "
            "Only OpenAPI 3.x is supported."
        )
    return version_str
