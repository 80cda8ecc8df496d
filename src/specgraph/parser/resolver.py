"""Resolve internal ``$ref`` JSON Reference pointers in OpenAPI specifications.

OpenAPI documents commonly use ``$ref`` pointers (e.g.,
``{"$ref": "#/components/schemas/Pet"}``) to avoid repetition. The
preprocessor resolves references lazily, one object at a time, because the
*name* at the end of a schema reference is itself a naming hint for the
generated type. Nested references inside a schema are left in place for the
downstream generation stage.

Only **internal** references (those starting with ``#/``) are supported.
External file or URL references raise
:class:`~specgraph.exceptions.SpecParseError`.
"""

from __future__ import annotations

from typing import Any

from specgraph.exceptions import SpecParseError


def resolve_ref(ref: str, root: dict[str, Any]) -> Any:
    """Resolve a single ``$ref`` string against the root spec.

    Parses JSON Pointer references like ``#/components/schemas/Pet`` and
    navigates the root dict to locate the referenced value. Handles
    RFC 6901 JSON Pointer escaping (``~0`` for ``~``, ``~1`` for ``/``).

    Args:
        ref: The ``$ref`` string (e.g., ``"#/components/schemas/Pet"``).
        root: The root spec dictionary to resolve against.

    Returns:
        The value found at the referenced path. The value is returned as-is,
        not copied.

    Raises:
        SpecParseError: If the reference is external (does not start with
            ``#/``), or if any segment in the pointer path does not exist
            in the document.
    """
    if not isinstance(ref, str) or not ref.startswith("#/"):
        raise SpecParseError(
            f"External $ref not supported: {ref}. "
            "Only internal references (#/...) are handled."
        )

    current: Any = root
    for segment in ref[2:].split("/"):
        segment = segment.replace("~1", "/").replace("~0", "~")

        if isinstance(current, dict):
            if segment not in current:
                raise SpecParseError(
                    f"Cannot resolve $ref '{ref}': "
                    f"key '{segment}' not found at path"
                )
            current = current[segment]
        elif isinstance(current, list):
            try:
                current = current[int(segment)]
            except (ValueError, IndexError) as exc:
                raise SpecParseError(
                    f"Cannot resolve $ref '{ref}': "
                    f"invalid array index '{segment}'"
                ) from exc
        else:
            raise SpecParseError(
                f"Cannot resolve $ref '{ref}': "
                f"cannot navigate into {type(current).__name__}"
            )

    return current


def resolve_object(obj: Any, root: dict[str, Any]) -> Any:
    """Follow ``$ref`` pointers until *obj* is no longer a reference.

    Only the top level is resolved; a reference to another reference is
    followed until a concrete object is reached.

    Args:
        obj: A value from the spec, possibly ``{"$ref": "#/..."}``.
        root: The root spec dictionary.

    Returns:
        The referenced object, or *obj* itself when it is not a reference.

    Raises:
        SpecParseError: If a reference cannot be resolved or the chain of
            references is circular.
    """
    seen: set[str] = set()
    while isinstance(obj, dict) and "$ref" in obj:
        ref = obj["$ref"]
        if ref in seen:
            raise SpecParseError(f"Circular $ref chain detected at '{ref}'")
        seen.add(ref)
        obj = resolve_ref(ref, root)
    return obj


def ref_name(ref: str) -> str:
    """Return the last JSON Pointer segment of *ref*, unescaped.

    Example::

        >>> ref_name("#/components/schemas/Pet")
        'Pet'
    """
    return ref.rsplit("/", 1)[-1].replace("~1", "/").replace("~0", "~")
