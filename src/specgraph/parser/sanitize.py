"""Turn arbitrary spec strings into GraphQL-safe identifiers.

GraphQL names must match ``[_A-Za-z][_0-9A-Za-z]*``. OpenAPI keys, titles,
and paths routinely contain slashes, braces, dashes, and spaces, so every
generated type, field, and argument name passes through :func:`beautify`
first.

:func:`beautify` is pure and deterministic: the same input always produces
the same identifier, and applying it to its own output is a no-op.
"""

from __future__ import annotations

import re

_SEPARATED_CHAR = re.compile(r"[^a-zA-Z0-9]+([a-zA-Z0-9])")
_INVALID_CHARS = re.compile(r"[^a-zA-Z0-9]")


def beautify(value: str) -> str:
    """Sanitize *value* into an identifier-safe, camelCased name.

    Each run of characters outside ``[A-Za-z0-9]`` is removed and the
    character following it is upper-cased. Leftover trailing separators are
    dropped. A result starting with a digit is prefixed with ``_``; an empty
    result becomes ``_``.

    Args:
        value: Any string taken from the spec.

    Returns:
        The sanitized identifier.

    Example::

        >>> beautify("get:/users/{id}")
        'getUsersId'
        >>> beautify("My_api_key_apiKey")
        'MyApiKeyApiKey'
    """
    result = _SEPARATED_CHAR.sub(lambda match: match.group(1).upper(), value)
    result = _INVALID_CHARS.sub("", result)
    if not result:
        return "_"
    if result[0].isdigit():
        return f"_{result}"
    return result


def beautify_and_store(value: str, sane_map: dict[str, str]) -> str:
    """Sanitize *value* and remember the original string.

    Args:
        value: Any string taken from the spec.
        sane_map: Reverse lookup from sanitized names to their originals.
            Updated in place.

    Returns:
        The sanitized identifier, as returned by :func:`beautify`.
    """
    clean = beautify(value)
    sane_map[clean] = value
    return clean


def infer_resource_name_from_path(path: str) -> str:
    """Derive a resource name from the static segments of a URL path.

    Path-parameter segments (``{id}``) are skipped; the remaining segments
    are capitalized and concatenated.

    Args:
        path: An OpenAPI path template such as ``/users/{id}/friends``.

    Returns:
        The inferred name (``"UsersFriends"`` for the example above), or
        ``"Root"`` when the path has no static segment.
    """
    name = "".join(
        segment[0].upper() + segment[1:]
        for segment in path.split("/")
        if segment and "{" not in segment
    )
    return name or "Root"
