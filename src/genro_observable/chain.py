# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Notification chains.

A notification chain is the ``{path: value}`` map produced by a single
mutation. It always contains the mutated path itself and fans out to
every descendant path touched by the replacement:

- descendants of the new value are reported with their new sub-value;
- descendants of the old value that no longer exist are reported with
  the :data:`REMOVED` sentinel.

Entries are inserted parent-first, so iterating a chain in reverse
visits every descendant before its ancestors.

Example:
    >>> build_notification_chain({'b': 1, 'x': 0}, {'b': 2}, 'a')
    {'a': {'b': 2}, 'a.b': 2, 'a.x': REMOVED}
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from .exceptions import CircularReferenceError

_SCALARS = (str, bytes, int, float, complex, bool, type(None))


class _Removed:
    """Marker delivered for paths that stopped existing."""

    __slots__ = ()
    _instance: _Removed | None = None

    def __new__(cls) -> _Removed:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return 'REMOVED'

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return 'REMOVED'


REMOVED = _Removed()


def is_composite(value: Any) -> bool:
    """True if value is decomposed into sub-paths (mappings only)."""
    return isinstance(value, Mapping)


def is_same_leaf(old: Any, new: Any) -> bool:
    """True if writing ``new`` over ``old`` is a no-op.

    Identity always matches. Immutable scalars of the same type also
    match when equal; containers such as lists only match by identity.
    """
    if old is new:
        return True
    return type(old) is type(new) and isinstance(new, _SCALARS) and old == new


def join_path(prefix: str, key: Any) -> str:
    """Join a key to a dotted prefix ('' means root level)."""
    return f"{prefix}.{key}" if prefix else str(key)


def compose_paths(key: Any, prefixes: Iterable[str]) -> list[str]:
    """Return the full path of ``key`` under each prefix.

    An empty prefix collection means ``key`` lives at root level.
    """
    paths = [join_path(prefix, key) for prefix in prefixes]
    return paths or [str(key)]


def build_notification_chain(
    old_value: Any,
    new_value: Any,
    *paths: str,
    ancestors: Iterable[int] = (),
) -> dict[str, Any]:
    """Compute every path affected by replacing old_value with new_value.

    Args:
        old_value: Value currently stored (REMOVED if absent).
        new_value: Value being written (REMOVED for a deletion).
        *paths: Every path by which the mutated location is reachable.
        ancestors: ids of composites that must not appear inside
            new_value (the node being written into).

    Returns:
        Ordered dict mapping dotted paths to their post-mutation value.

    Raises:
        CircularReferenceError: If new_value contains itself, or one of
            the given ancestors.
    """
    chain: dict[str, Any] = {}
    for path in paths:
        _extend_chain(chain, old_value, new_value, path, set(ancestors))
    return chain


def _extend_chain(
    chain: dict[str, Any],
    old: Any,
    new: Any,
    path: str,
    stack: set[int],
) -> None:
    chain[path] = new
    old_children = old if is_composite(old) else {}

    if is_composite(new):
        marker = id(new)
        if marker in stack:
            raise CircularReferenceError(path)
        stack.add(marker)
        for key, sub_value in new.items():
            _extend_chain(
                chain,
                old_children.get(key, REMOVED),
                sub_value,
                join_path(path, key),
                stack,
            )
        stack.discard(marker)
        removed = [key for key in old_children if key not in new]
    else:
        removed = list(old_children)

    for key in removed:
        _extend_chain(chain, old_children[key], REMOVED, join_path(path, key), stack)
