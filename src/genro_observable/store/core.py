# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""ObservableTree - a nested mapping observable at every depth.

This module provides the ObservableTree class, the root of an observed
state tree. Every mutation, at any nesting level, is reported on the
dotted path it touches, and a shallow snapshot of the whole tree or of
any path can be read on demand.

Key Features:
    - **Deep interception**: nested mappings are wrapped on the way in,
      so writes on any node are observed
    - **Path fan-out**: replacing a sub-tree notifies every path that
      appeared, changed or disappeared below it
    - **Idempotent leaves**: rewriting an identical scalar notifies nobody
    - **Veto traps**: optional set/delete hooks can refuse a mutation
    - **Snapshots**: point-in-time shallow copies by path

Path Syntax:
    - Dotted paths: 'parent.child.grandchild'
    - Lists are leaves: there are no indexed paths

Example:
    Basic usage::

        tree = ObservableTree({'ui': {'theme': 'light'}})
        tree.observe('ui.theme').subscribe(print)

        tree['ui']['theme'] = 'dark'      # prints 'dark'
        tree.set_item('ui.theme', 'dark')  # identical value, no output

        tree.snapshot('ui')  # {'theme': 'dark'}
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from ..interceptor import DeleteTrap, MutationInterceptor, SetTrap
from ..node import ObservedNode
from ..proxy import build_proxy_chain
from ..registry import ParentChainRegistry
from .snapshot import SnapshotMixin
from .subscription import SubscriptionHub, SubscriptionMixin


class ObservableTree(SubscriptionMixin, SnapshotMixin, ObservedNode):
    """Root of an observed state tree.

    ObservableTree provides:
    - tree[path] / get_item(path): live values
    - tree[path] = value / set_item(path, value): observed writes
    - del tree[path] / del_item(path): observed deletes
    - observe(path) / subscribe(path, cb) / unsubscribe_all(handles)
    - snapshot(path): shallow point-in-time copies

    Registry, channels and traps are held by the shared interceptor, so
    the tree's own state contains only the caller's data.

    Example:
        >>> tree = ObservableTree({'a': {'b': 1}})
        >>> tree.observe('a.c').subscribe(print)
        >>> tree['a'] = {'b': 2, 'c': 3}  # prints 3
    """

    __slots__ = ()

    def __init__(
        self,
        source: Mapping | None = None,
        *,
        set_trap: SetTrap | None = None,
        delete_trap: DeleteTrap | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize an ObservableTree.

        Args:
            source: Optional initial mapping. Nested mappings are wrapped;
                no notification is emitted for the initial content.
            set_trap: Optional ``(target, key, value, receiver)`` hook.
                Returning literally False refuses the write.
            delete_trap: Optional ``(target, key)`` hook that performs
                deletions itself; a falsy result means nothing was
                removed and nobody is notified.
            logger: Logger for diagnostics. Defaults to this module's.

        Raises:
            TypeError: If source is not a mapping.
            CircularReferenceError: If source contains itself.

        Example:
            >>> ObservableTree({'a': 1, 'b': {'c': 2}})
            >>> ObservableTree(set_trap=lambda t, k, v, r: k != 'locked')
        """
        interceptor = MutationInterceptor(
            ParentChainRegistry(),
            SubscriptionHub(),
            set_trap=set_trap,
            delete_trap=delete_trap,
            logger=logger or logging.getLogger(__name__),
        )
        super().__init__(interceptor)

        if source is not None:
            self._load_source(source)

    def _load_source(self, source: Mapping) -> None:
        """Wrap source into this tree.

        Raises:
            TypeError: If source is not a mapping.
        """
        if not isinstance(source, Mapping):
            raise TypeError(
                f"source must be a mapping, not {type(source).__name__}"
            )
        build_proxy_chain(
            source, self._interceptor, self._interceptor.registry, into=self
        )

    # ==================== Introspection ====================

    @property
    def logger(self) -> logging.Logger:
        """The logger receiving this tree's diagnostics."""
        return self._interceptor.logger

    def paths_of(self, node: ObservedNode) -> set[str]:
        """Return every path by which node is reachable from the root.

        The root itself has no path and returns an empty set.
        """
        return set(self._interceptor.registry.get(node))


def create(source: Mapping | None = None, **options: Any) -> ObservableTree:
    """Create an ObservableTree; options are the constructor's keywords."""
    return ObservableTree(source, **options)
