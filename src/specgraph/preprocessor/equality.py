"""Structural equality over JSON-schema trees.

Two payload schemas share a generated type exactly when they are
structurally equal, so this comparison decides deduplication. Python's
``==`` is close but treats ``True == 1`` and ``1 == 1.0`` as equal across
types, which would merge ``{"default": true}`` with ``{"default": 1}``.
"""

from __future__ import annotations

from typing import Any


def schemas_equal(left: Any, right: Any) -> bool:
    """Return ``True`` if two schema trees are structurally equal.

    * Objects (dicts) are equal when they have the same keys and each value
      is equal; key order does not matter.
    * Arrays (lists or tuples) are equal when they have the same length and
      are equal element by element; order matters.
    * Booleans only equal booleans; other numbers compare numerically, since
      JSON has a single number type. Everything else must have the same type
      and compare equal.

    Example::

        >>> schemas_equal({"a": 1, "b": [1, 2]}, {"b": [1, 2], "a": 1})
        True
        >>> schemas_equal({"default": True}, {"default": 1})
        False
    """
    if isinstance(left, dict):
        if not isinstance(right, dict) or left.keys() != right.keys():
            return False
        return all(schemas_equal(value, right[key]) for key, value in left.items())

    if isinstance(left, (list, tuple)):
        if not isinstance(right, (list, tuple)) or len(left) != len(right):
            return False
        return all(schemas_equal(a, b) for a, b in zip(left, right))

    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right

    if isinstance(left, (int, float)) and isinstance(right, (int, float)):
        return left == right

    return type(left) is type(right) and left == right
