"""Extract per-operation information from a raw OpenAPI spec.

These helpers answer questions about one path + HTTP method pair of the
document: which payload schema the request and the success response carry
(and what the generated types could be called), which parameters, links,
and security protocols apply. They read the spec without modifying it and
resolve ``$ref`` pointers on demand via :mod:`specgraph.parser.resolver`.

The preprocessor in :mod:`specgraph.preprocessor.orchestrator` is the only
consumer; it decides what to do with the answers.

Parameter merging follows the OpenAPI specification: path-level parameters
provide defaults, and operation-level parameters override them when they share
the same ``name`` and ``in`` values.
"""

from __future__ import annotations

import re
from typing import Any, Optional

from specgraph.models import (
    EndpointLink,
    HTTPMethod,
    NameHints,
    Parameter,
    ParameterLocation,
    SchemaAndNames,
)
from specgraph.parser.resolver import ref_name, resolve_object
from specgraph.parser.sanitize import infer_resource_name_from_path

# HTTP methods recognized by OpenAPI
_HTTP_METHODS = frozenset(m.value for m in HTTPMethod)

_SUCCESS_STATUS = re.compile(r"^2[0-9]{2}$")
_JSON_MEDIA_TYPE = "application/json"


def is_operation(key: str) -> bool:
    """Return ``True`` if a path-item key names an HTTP operation.

    Path items also carry non-operation keys such as ``parameters``,
    ``summary``, ``servers``, or ``$ref``; those are rejected.
    """
    return isinstance(key, str) and key.lower() in _HTTP_METHODS


def _get_path_item(path: str, oas: dict[str, Any]) -> dict[str, Any]:
    """Return the resolved *Path Item Object* for *path*, or an empty dict."""
    path_item = resolve_object((oas.get("paths") or {}).get(path), oas)
    return path_item if isinstance(path_item, dict) else {}


def _get_endpoint(path: str, method: str, oas: dict[str, Any]) -> dict[str, Any]:
    """Return the resolved *Operation Object* for *path* and *method*, or an empty dict."""
    endpoint = resolve_object(_get_path_item(path, oas).get(method), oas)
    return endpoint if isinstance(endpoint, dict) else {}


def get_response_status_code(
    path: str, method: str, oas: dict[str, Any]
) -> Optional[str]:
    """Choose the response whose payload represents the operation's result.

    Args:
        path: Path template key under ``paths``.
        method: Operation key under the path item.
        oas: The raw spec.

    Returns:
        The first declared ``2XX`` status code, else ``"default"`` if that is
        declared, else ``None``.
    """
    responses = _get_endpoint(path, method, oas).get("responses", {})
    if not isinstance(responses, dict):
        return None

    for status_code in responses:
        if _SUCCESS_STATUS.match(str(status_code)):
            return str(status_code)
    if "default" in responses:
        return "default"
    return None


def _success_response(path: str, method: str, oas: dict[str, Any]) -> dict[str, Any]:
    """Return the resolved response chosen by :func:`get_response_status_code`.

    Status-code keys are compared as strings since YAML loads unquoted
    codes as integers. Returns an empty dict when there is no such response.
    """
    status_code = get_response_status_code(path, method, oas)
    if status_code is None:
        return {}

    responses = _get_endpoint(path, method, oas)["responses"]
    for key, response in responses.items():
        if str(key) == status_code:
            response = resolve_object(response, oas)
            return response if isinstance(response, dict) else {}
    return {}


def _select_media_schema(content: Any) -> Any:
    """Pick the JSON payload schema from a ``content`` map.

    ``application/json`` wins; otherwise the first media type mentioning
    ``json`` (``application/problem+json``, ``application/json; charset=...``)
    is used. Returns ``None`` when there is no JSON payload.
    """
    if not isinstance(content, dict):
        return None

    media = content.get(_JSON_MEDIA_TYPE)
    if media is None:
        for media_type, candidate in content.items():
            if "json" in media_type.lower():
                media = candidate
                break

    if isinstance(media, dict):
        return media.get("schema")
    return None


def _schema_and_names(
    schema: Any, path: str, oas: dict[str, Any]
) -> tuple[Any, NameHints]:
    """Resolve a payload schema and gather its naming hints."""
    names = NameHints(from_path=infer_resource_name_from_path(path))
    if isinstance(schema, dict) and "$ref" in schema:
        ref = schema["$ref"]
        schema = resolve_object(schema, oas)
        names.from_ref = ref_name(ref)
    if isinstance(schema, dict) and isinstance(schema.get("title"), str):
        names.from_schema = schema["title"]
    return schema, names


def get_request_schema_and_names(
    path: str, method: str, oas: dict[str, Any]
) -> SchemaAndNames:
    """Extract the JSON request body schema of an operation.

    A ``$ref``'d *Request Body Object* is resolved first. When the body's
    JSON schema is itself a reference, the reference name becomes the
    ``from_ref`` hint and the schema is resolved.

    Args:
        path: Path template key under ``paths``.
        method: Operation key under the path item.
        oas: The raw spec.

    Returns:
        A :class:`~specgraph.models.SchemaAndNames`. ``schema_`` is ``None``
        when the operation declares no JSON request body.
    """
    request_body = resolve_object(_get_endpoint(path, method, oas).get("requestBody"), oas)
    if not isinstance(request_body, dict):
        return SchemaAndNames()

    required = request_body.get("required") is True

    schema = _select_media_schema(request_body.get("content"))
    if schema is None:
        return SchemaAndNames(required=required)

    schema, names = _schema_and_names(schema, path, oas)
    return SchemaAndNames(schema=schema, names=names, required=required)


def get_response_schema_and_names(
    path: str, method: str, oas: dict[str, Any]
) -> SchemaAndNames:
    """Extract the JSON schema of an operation's success response.

    The response is chosen by :func:`get_response_status_code`.

    Returns:
        A :class:`~specgraph.models.SchemaAndNames`. ``schema_`` is ``None``
        when no success response or no JSON payload is declared.
    """
    response = _success_response(path, method, oas)
    schema = _select_media_schema(response.get("content"))
    if schema is None:
        return SchemaAndNames()

    schema, names = _schema_and_names(schema, path, oas)
    return SchemaAndNames(schema=schema, names=names)


def get_endpoint_links(
    path: str, method: str, oas: dict[str, Any]
) -> list[EndpointLink]:
    """Extract the *Link Objects* of an operation's success response.

    Returns:
        One :class:`~specgraph.models.EndpointLink` per declared link, in
        declaration order. Empty when the response declares no links.
    """
    links_object = _success_response(path, method, oas).get("links")
    if not isinstance(links_object, dict):
        return []

    links: list[EndpointLink] = []
    for name, link in links_object.items():
        link = resolve_object(link, oas)
        if not isinstance(link, dict):
            continue
        links.append(
            EndpointLink(
                name=name,
                operation_id=link.get("operationId"),
                operation_ref=link.get("operationRef"),
                description=link.get("description"),
                parameters=link.get("parameters") or {},
                request_body=link.get("requestBody"),
            )
        )
    return links


def _merge_parameters(
    path_params: list[dict[str, Any]],
    op_params: list[dict[str, Any]],
) -> list[dict[str, Any]]:
    """Merge path-level and operation-level parameters.

    Operation-level parameters override path-level parameters with the same
    name and location (``in`` field), per the OpenAPI spec.

    Args:
        path_params: Resolved parameters defined at the path level.
        op_params: Resolved parameters defined at the operation level.

    Returns:
        A merged list of parameter dicts: surviving path-level parameters
        first, then all operation-level parameters.
    """
    op_keys = {(p.get("name", ""), p.get("in", "")) for p in op_params}
    merged = [
        p for p in path_params if (p.get("name", ""), p.get("in", "")) not in op_keys
    ]
    merged.extend(op_params)
    return merged


def _resolve_parameter_list(params: Any, oas: dict[str, Any]) -> list[dict[str, Any]]:
    """Resolve every ``$ref`` in a raw ``parameters`` array."""
    if not isinstance(params, list):
        return []
    resolved = [resolve_object(p, oas) for p in params]
    return [p for p in resolved if isinstance(p, dict)]


def get_parameters(path: str, method: str, oas: dict[str, Any]) -> list[Parameter]:
    """Collect the parameters of an operation.

    Path parameters are always required, regardless of the ``required``
    field in the source. Parameters with unrecognised ``in`` locations are
    skipped.

    Returns:
        A list of :class:`~specgraph.models.Parameter` in declaration order.
    """
    if not is_operation(method):
        return []

    merged = _merge_parameters(
        _resolve_parameter_list(_get_path_item(path, oas).get("parameters"), oas),
        _resolve_parameter_list(_get_endpoint(path, method, oas).get("parameters"), oas),
    )

    parameters: list[Parameter] = []
    for param in merged:
        try:
            location = ParameterLocation(param.get("in", "query"))
        except ValueError:
            continue

        schema = param.get("schema")
        parameters.append(
            Parameter(
                name=param.get("name", ""),
                location=location,
                required=location == ParameterLocation.PATH
                or param.get("required") is True,
                description=param.get("description"),
                deprecated=param.get("deprecated") is True,
                schema=schema if isinstance(schema, dict) else None,
            )
        )
    return parameters


def get_security_protocols(path: str, method: str, oas: dict[str, Any]) -> list[str]:
    """List the security protocols that apply to an operation.

    An operation-level ``security`` array replaces the global one; an
    explicit empty array means no protocol applies. Keys that reference
    undeclared or OAuth 2.0 schemes are left out, since OAuth 2.0 is handled
    outside the viewer mechanism.

    Returns:
        Raw scheme keys, de-duplicated, in the order they are first required.
    """
    endpoint = _get_endpoint(path, method, oas)
    requirements = endpoint.get("security")
    if requirements is None:
        requirements = oas.get("security", [])

    schemes = (oas.get("components") or {}).get("securitySchemes") or {}
    protocols: list[str] = []
    for requirement in requirements or []:
        if not isinstance(requirement, dict):
            continue
        for key in requirement:
            scheme = resolve_object(schemes.get(key), oas)
            if not isinstance(scheme, dict) or scheme.get("type") == "oauth2":
                continue
            if key not in protocols:
                protocols.append(key)
    return protocols
