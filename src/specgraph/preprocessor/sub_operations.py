"""Derive sub-operations from nested GET paths.

A GET operation on ``/users/{id}`` can expose the GET operations on
``/users/{id}/friends`` or ``/users/{id}/profile`` as fields of its result
type. Only operations whose path carries a path parameter qualify, since
only then does the parent identify a single resource.

Containment is a plain substring test on the path templates, not a
segment-aware match: ``/pets/{id}`` is also considered contained in
``/pets/{id}2/x``.
"""

from __future__ import annotations

import re
from typing import Iterable

from specgraph.models import HTTPMethod, Operation

_PATH_PARAM = re.compile(r"\{.*\}")


def link_sub_operations(
    operation: Operation, operations: Iterable[Operation]
) -> list[str]:
    """Return the identifiers of the sub-operations of *operation*.

    Args:
        operation: The candidate parent operation.
        operations: Every operation of the model. All identifiers must be
            final.

    Returns:
        Identifiers of GET operations whose path contains the parent's path,
        in the iteration order of *operations*. Empty for non-GET parents and
        for parents without path parameters.
    """
    if operation.method != HTTPMethod.GET or not _PATH_PARAM.search(operation.path):
        return []

    return [
        candidate.operation_id
        for candidate in operations
        if candidate.method == HTTPMethod.GET
        and candidate.operation_id != operation.operation_id
        and operation.path in candidate.path
    ]
