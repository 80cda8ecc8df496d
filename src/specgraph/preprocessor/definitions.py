"""Create, reuse, and name data definitions.

A :class:`~specgraph.models.DataDefinition` wraps one payload schema. All
request and response bodies whose schemas are structurally equal, wherever
they appear in the spec, point at the same definition instance, so the
generation stage emits one GraphQL type per distinct payload shape.

Names are handed out first come, first served. For a new schema the name
hints are tried in priority order (``$ref`` name, schema ``title``, name
inferred from the path) and the first one whose sanitized form is still free
wins. When all of them are taken, the sanitized form of the highest-priority
hint gets the smallest free numeric suffix, starting at 2::

    Pet, Pet2, Pet3, ...
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from specgraph.exceptions import MissingNameHintError
from specgraph.models import DataDefinition, NameHints, NameRegistry, PreprocessedModel
from specgraph.parser.sanitize import beautify
from specgraph.preprocessor.equality import schemas_equal

logger = logging.getLogger(__name__)

INPUT_TYPE_SUFFIX = "Input"


def find_equal_index(
    schema: Any, definitions: Sequence[DataDefinition]
) -> Optional[int]:
    """Return the index of the first definition holding a schema equal to *schema*.

    Scans *definitions* in insertion order.

    Returns:
        The index, or ``None`` when no definition matches.
    """
    for index, definition in enumerate(definitions):
        if schemas_equal(schema, definition.schema_):
            return index
    return None


def choose_schema_name(names: Optional[NameHints], registry: NameRegistry) -> str:
    """Pick a collision-free type name and record it in *registry*.

    Args:
        names: Candidate base names for the type.
        registry: Names assigned so far in this run. Updated in place.

    Returns:
        The sanitized name, guaranteed not to have been assigned before.

    Raises:
        MissingNameHintError: If *names* carries no hint at all.
    """
    candidates = names.candidates() if names is not None else []
    if not candidates:
        raise MissingNameHintError("Cannot create data definition without name(s).")

    for candidate in candidates:
        if not registry.is_used(beautify(candidate)):
            return registry.register(candidate)

    base = beautify(candidates[0])
    appendix = 2
    while registry.is_used(f"{base}{appendix}"):
        appendix += 1
    return registry.register(f"{base}{appendix}")


def create_or_reuse_data_def(
    schema: Any, names: Optional[NameHints], model: PreprocessedModel
) -> Optional[DataDefinition]:
    """Return the data definition for *schema*, creating it if necessary.

    Args:
        schema: A JSON schema, or ``None`` when the operation has no such
            payload.
        names: Name hints, only consulted when a new definition is created.
        model: The model under construction. A new definition is appended
            to ``model.definitions`` and its name recorded in ``model.names``.

    Returns:
        The existing definition when an equal schema was seen before, a new
        definition otherwise, or ``None`` when *schema* is ``None``.
    """
    if schema is None:
        return None

    index = find_equal_index(schema, model.definitions)
    if index is not None:
        existing = model.definitions[index]
        logger.debug("Reusing data definition '%s'", existing.object_type_name)
        return existing

    name = choose_schema_name(names, model.names)
    definition = DataDefinition(
        schema=schema,
        object_type_name=name,
        input_type_name=name + INPUT_TYPE_SUFFIX,
    )
    model.definitions.append(definition)
    logger.debug("Created data definition '%s'", name)
    return definition
