# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Parent chain registry.

Maps each wrapped node, by identity, to the dotted paths under which it
is reachable from the root. A node assigned to a second location keeps
its first path too, so one node may carry several prefixes.

Entries are held weakly: the registry never keeps a node alive, and an
entry disappears as soon as its node is garbage collected.
"""

from __future__ import annotations

import weakref
from typing import Any


class ParentChainRegistry:
    """Identity-keyed table of node -> reachable path prefixes.

    Example:
        >>> registry = ParentChainRegistry()
        >>> registry.add(node, 'config.database')
        >>> registry.get(node)
        ('config.database',)
    """

    __slots__ = ('_chains', '_refs')

    def __init__(self) -> None:
        # dict values keep prefixes in registration order
        self._chains: dict[int, dict[str, None]] = {}
        self._refs: dict[int, weakref.ref] = {}

    def __repr__(self) -> str:
        return f"ParentChainRegistry({len(self._chains)} nodes)"

    def __len__(self) -> int:
        """Return the number of live nodes with at least one prefix."""
        return len(self._chains)

    def __contains__(self, node: Any) -> bool:
        return id(node) in self._chains

    def add(self, node: Any, path: str) -> None:
        """Register ``path`` as a prefix of ``node``.

        Args:
            node: A weak-referenceable wrapped node.
            path: Dotted path at which the node is stored.
        """
        key = id(node)
        if key not in self._refs:
            self._refs[key] = weakref.ref(node, lambda ref, key=key: self._forget(key, ref))
            self._chains[key] = {}
        self._chains[key][path] = None

    def get(self, node: Any) -> tuple[str, ...]:
        """Return the prefixes of ``node`` (empty tuple if unregistered)."""
        return tuple(self._chains.get(id(node), ()))

    def _forget(self, key: int, ref: weakref.ref) -> None:
        # The id may already belong to a newer node
        if self._refs.get(key) is ref:
            self._chains.pop(key, None)
            self._refs.pop(key, None)
