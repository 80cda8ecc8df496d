"""Build the intermediate model for a whole OpenAPI spec.

:func:`preprocess_oas` visits every operation in document order (paths
first, then methods within a path), because the first schema seen claims
both the shared definition and the preferred name. Processing happens in
three passes:

1. Build one :class:`~specgraph.models.Operation` per path + method pair.
   Operations without a usable response schema are dropped with a warning.
2. If ``add_sub_operations`` is enabled, link nested GET operations. This
   needs every identifier to be final, so it cannot run during pass 1.
3. Normalize the spec's security schemes.

The input document is never modified. Generated operation identifiers live
only on the resulting operations.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from specgraph.models import (
    HTTPMethod,
    Operation,
    PreprocessedModel,
    PreprocessOptions,
)
from specgraph.parser.extractor import (
    get_endpoint_links,
    get_parameters,
    get_request_schema_and_names,
    get_response_schema_and_names,
    get_security_protocols,
    is_operation,
)
from specgraph.parser.resolver import resolve_object
from specgraph.parser.sanitize import beautify
from specgraph.preprocessor.definitions import create_or_reuse_data_def
from specgraph.preprocessor.security import normalize_security_schemes
from specgraph.preprocessor.sub_operations import link_sub_operations

logger = logging.getLogger(__name__)


def preprocess_oas(
    oas: dict[str, Any], options: Optional[PreprocessOptions] = None
) -> PreprocessedModel:
    """Extract a :class:`~specgraph.models.PreprocessedModel` from a raw OpenAPI dict.

    Args:
        oas: The raw OpenAPI 3.x spec, as returned by
            :func:`~specgraph.parser.loader.load_spec`. Not modified.
        options: Preprocessing options. Defaults to
            :class:`~specgraph.models.PreprocessOptions` defaults.

    Returns:
        A new model; nothing is shared with earlier runs.

    Raises:
        MissingNameHintError: If a new data definition has no name hint.
        UnsupportedSecuritySchemeError: In strict mode, for a security
            scheme that cannot be translated.
        SpecParseError: If a ``$ref`` cannot be resolved.

    Example::

        raw = load_spec("petstore.yaml")
        model = preprocess_oas(raw, PreprocessOptions(add_sub_operations=True))
        for op in model.operations.values():
            print(op.operation_id, op.response_definition.object_type_name)
    """
    if options is None:
        options = PreprocessOptions()
    model = PreprocessedModel(options=options)

    for path, path_item in (oas.get("paths") or {}).items():
        path_item = resolve_object(path_item, oas)
        if not isinstance(path_item, dict):
            continue

        for method, endpoint in path_item.items():
            if not is_operation(method) or not isinstance(endpoint, dict):
                continue

            operation = _build_operation(path, method, endpoint, oas, model)
            if operation is None:
                continue

            if operation.operation_id in model.operations:
                logger.warning(
                    "Operation id '%s' of \"%s %s\" is already in use; "
                    "the earlier operation is replaced",
                    operation.operation_id,
                    method.upper(),
                    path,
                )
            model.operations[operation.operation_id] = operation

    if options.add_sub_operations:
        for operation in model.operations.values():
            operation.sub_operations = link_sub_operations(
                operation, model.operations.values()
            )

    schemes = (oas.get("components") or {}).get("securitySchemes") or {}
    model.security = normalize_security_schemes(
        {key: resolve_object(scheme, oas) for key, scheme in schemes.items()},
        options,
    )

    logger.info(
        "Preprocessed %d operations into %d data definitions",
        len(model.operations),
        len(model.definitions),
    )
    return model


def _operation_description(endpoint: dict[str, Any]) -> Optional[str]:
    """Return the description, falling back to the summary."""
    description = endpoint.get("description")
    if isinstance(description, str) and description:
        return description
    summary = endpoint.get("summary")
    if isinstance(summary, str):
        return summary
    return None


def _operation_id(path: str, method: str, endpoint: dict[str, Any]) -> str:
    """Return the explicit ``operationId`` or derive one from method and path."""
    operation_id = endpoint.get("operationId")
    if isinstance(operation_id, str):
        return operation_id
    return beautify(f"{method}:{path}")


def _build_operation(
    path: str,
    method: str,
    endpoint: dict[str, Any],
    oas: dict[str, Any],
    model: PreprocessedModel,
) -> Optional[Operation]:
    """Build the operation for one path + method pair, or ``None`` to drop it."""
    request = get_request_schema_and_names(path, method, oas)
    request_schema = request.schema_
    if request_schema is not None and not isinstance(request_schema, dict):
        logger.warning(
            "\"%s %s\" has a non-object request schema; ignoring the request body",
            method.upper(),
            path,
        )
        request_schema = None
    request_definition = create_or_reuse_data_def(request_schema, request.names, model)

    response = get_response_schema_and_names(path, method, oas)
    if not isinstance(response.schema_, dict):
        logger.warning(
            "\"%s %s\" has no valid response schema. Ignoring operation.",
            method.upper(),
            path,
        )
        return None
    response_definition = create_or_reuse_data_def(response.schema_, response.names, model)

    security_protocols: list[str] = []
    if model.options.viewer:
        security_protocols = get_security_protocols(path, method, oas)

    return Operation(
        operation_id=_operation_id(path, method, endpoint),
        description=_operation_description(endpoint),
        path=path,
        method=HTTPMethod(method.lower()),
        request_definition=request_definition,
        request_required=request.required,
        response_definition=response_definition,
        parameters=get_parameters(path, method, oas),
        links=get_endpoint_links(path, method, oas),
        security_protocols=security_protocols,
    )
