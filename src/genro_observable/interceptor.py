# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""MutationInterceptor - the write/delete protocol shared by a tree.

Every ObservedNode of a tree holds the same interceptor. A write or
delete on any node:

1. resolves the node's reachable prefixes from the registry and
   composes the full path(s) of the mutated key;
2. gives the optional trap a chance to veto the mutation;
3. stores the value (mappings are wrapped first);
4. computes the notification chain and delivers it synchronously,
   deepest paths first.

Traps follow a veto-only contract: a set trap returning literally
``False`` aborts the write, anything else lets default handling proceed.
A delete trap performs the removal itself; its truthiness decides
whether notifications fire.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, TYPE_CHECKING

from .chain import (
    REMOVED,
    build_notification_chain,
    compose_paths,
    is_composite,
    is_same_leaf,
)
from .proxy import build_proxy_chain

if TYPE_CHECKING:
    from .node import ObservedNode
    from .registry import ParentChainRegistry
    from .store.subscription import SubscriptionHub

SetTrap = Callable[[dict, str, Any, Any], Any]
DeleteTrap = Callable[[dict, str], Any]


class MutationInterceptor:
    """Set/delete traps bound to one tree's registry and hub.

    Attributes:
        registry: The tree's ParentChainRegistry.
        hub: The tree's SubscriptionHub.
        set_trap: Optional ``(target, key, value, receiver)`` veto hook.
            ``target`` is the raw storage dict, ``receiver`` the node.
        delete_trap: Optional ``(target, key)`` hook performing deletion.
        logger: Logger for vetoes and fan-out tracing.
    """

    __slots__ = ('registry', 'hub', 'set_trap', 'delete_trap', 'logger')

    def __init__(
        self,
        registry: ParentChainRegistry,
        hub: SubscriptionHub,
        set_trap: SetTrap | None = None,
        delete_trap: DeleteTrap | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.registry = registry
        self.hub = hub
        self.set_trap = set_trap
        self.delete_trap = delete_trap
        self.logger = logger or logging.getLogger(__name__)

    def paths_for(self, receiver: ObservedNode, key: str) -> list[str]:
        """Return every full path of ``key`` inside ``receiver``."""
        return compose_paths(key, self.registry.get(receiver))

    def set(self, receiver: ObservedNode, key: str, value: Any) -> bool:
        """Intercept ``receiver[key] = value``.

        Returns:
            False if a set trap vetoed the write, True otherwise
            (including an idempotent leaf write, which notifies nobody).

        Raises:
            CircularReferenceError: If value contains receiver or itself.
        """
        target = receiver._data
        paths = self.paths_for(receiver, key)
        old_value = target.get(key, REMOVED)

        if is_composite(value):
            if self._vetoed(target, key, value, receiver, paths):
                return False
            value = build_proxy_chain(
                value, self, self.registry, paths, ancestors=(id(receiver),)
            )
        else:
            if key in target and is_same_leaf(old_value, value):
                return True
            if self._vetoed(target, key, value, receiver, paths):
                return False

        notification_chain = build_notification_chain(old_value, value, *paths)
        target[key] = value
        self.fire(notification_chain)
        return True

    def delete(self, receiver: ObservedNode, key: str) -> bool:
        """Intercept ``del receiver[key]``.

        Returns:
            True if the key was removed. Notifications fire only then.
        """
        target = receiver._data
        paths = self.paths_for(receiver, key)
        notification_chain = build_notification_chain(
            target.get(key, REMOVED), REMOVED, *paths
        )

        if self.delete_trap is not None:
            deleted = bool(self.delete_trap(target, key))
        else:
            deleted = target.pop(key, REMOVED) is not REMOVED

        if deleted:
            self.fire(notification_chain)
        else:
            self.logger.debug('Delete of "%s" refused', paths[0])
        return deleted

    def fire(self, notification_chain: dict[str, Any]) -> None:
        """Deliver each chain entry to its channel, deepest paths first."""
        self.logger.debug(
            'Mutation of "%s" reaches %d path(s)',
            next(iter(notification_chain), ''), len(notification_chain),
        )
        for path in reversed(notification_chain):
            self.hub.emit(path, notification_chain[path])

    def _vetoed(
        self,
        target: dict,
        key: str,
        value: Any,
        receiver: ObservedNode,
        paths: list[str],
    ) -> bool:
        if self.set_trap is None:
            return False
        if self.set_trap(target, key, value, receiver) is False:
            self.logger.debug('Write to "%s" vetoed by set trap', paths[0])
            return True
        return False
