# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""ObservedNode - a mapping whose writes are intercepted.

Every composite (mapping) stored in an ObservableTree is wrapped in an
ObservedNode. Reads go straight to the node's own storage; writes and
deletes are routed through the tree's shared MutationInterceptor, which
computes the affected paths and notifies their subscribers.

Path Syntax:
    - Single key: ``node['host']``
    - Dotted path: ``node['database.host']`` resolves through nested nodes

Keys are stored as strings. Since '.' separates path segments, keys
must not contain it.
"""

from __future__ import annotations

from collections.abc import MutableMapping
from typing import Any, Iterator, TYPE_CHECKING

from .exceptions import PathVetoedError

if TYPE_CHECKING:
    from .interceptor import MutationInterceptor

_MISSING = object()


class ObservedNode(MutableMapping):
    """A wrapped composite value inside an ObservableTree.

    ObservedNode behaves like a dict: ``update``, ``pop``, ``popitem``,
    ``setdefault`` and ``clear`` all go through the interceptor and are
    therefore observed too.

    A write refused by a set trap is silent through ``node[key] = value``
    (also when the refused write is an intermediate segment of a dotted
    key); use :meth:`set_item` / :meth:`del_item` to get the boolean
    outcome. Refused deletions keep the key: ``pop`` then falls back to
    its default (or raises KeyError), ``popitem`` raises KeyError, and
    ``clear`` leaves the refused keys in place. ``setdefault`` returns
    the stored value, which is ``default`` itself when the write was
    refused.

    Example:
        >>> tree = ObservableTree({'config': {'debug': False}})
        >>> config = tree['config']
        >>> config['debug'] = True  # notifies 'config.debug'
        >>> tree['config.debug']
        True
    """

    __slots__ = ('_data', '_interceptor', '__weakref__')

    def __init__(self, interceptor: MutationInterceptor | None) -> None:
        """Initialize an empty node.

        Args:
            interceptor: The shared interceptor of the owning tree.
        """
        self._data: dict[str, Any] = {}
        self._interceptor = interceptor

    # ==================== Special Methods ====================

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._data!r})"

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __getitem__(self, key: Any) -> Any:
        node, label = self._resolve(key)
        return node._data[label]

    def __setitem__(self, key: Any, value: Any) -> None:
        try:
            node, label = self._resolve(key, autocreate=True)
        except PathVetoedError as exc:
            self._interceptor.logger.debug('Cannot set "%s": %s', key, exc.args[0])
            return
        node._interceptor.set(node, label, value)

    def __delitem__(self, key: Any) -> None:
        node, label = self._resolve(key)
        if label not in node._data:
            raise KeyError(key)
        node._interceptor.delete(node, label)

    # ==================== Dict Methods ====================

    def pop(self, key: Any, default: Any = _MISSING) -> Any:
        """Remove key and return its value.

        If the key is missing, or the delete trap refuses the removal,
        return default; without a default raise KeyError.
        """
        try:
            node, label = self._resolve(key)
            value = node._data[label]
        except KeyError:
            if default is _MISSING:
                raise
            return default
        if node._interceptor.delete(node, label):
            return value
        if default is _MISSING:
            raise KeyError(key)
        return default

    def popitem(self) -> tuple[str, Any]:
        """Remove and return the first removable (key, value) pair.

        Raises:
            KeyError: If the node is empty or every deletion was refused.
        """
        for label in list(self._data):
            value = self._data[label]
            if self._interceptor.delete(self, label):
                return label, value
        raise KeyError('popitem(): no removable item')

    def clear(self) -> None:
        """Remove every key; keys whose deletion is refused stay."""
        for label in list(self._data):
            if label in self._data:
                self._interceptor.delete(self, label)

    def setdefault(self, key: Any, default: Any = None) -> Any:
        """Store default at key if missing; return the stored value.

        A stored mapping comes back as its ObservedNode. If the write is
        refused, default is returned and nothing is stored.
        """
        try:
            return self[key]
        except KeyError:
            self[key] = default
        return self.get_item(key, default)

    # ==================== Path Utilities ====================

    def _resolve(
        self, key: Any, autocreate: bool = False
    ) -> tuple[ObservedNode, str]:
        """Return (owning node, final label) for a key or dotted path."""
        label = key if isinstance(key, str) else str(key)
        if '.' not in label:
            return self, label
        return self._traverse(label, autocreate)

    def _traverse(
        self, path: str, autocreate: bool = False
    ) -> tuple[ObservedNode, str]:
        """Walk a dotted path down to the node holding its last segment.

        Args:
            path: Dotted path string.
            autocreate: If True, missing intermediate segments are
                written as empty mappings (each one is a notified write).

        Returns:
            Tuple of (parent_node, final_label).

        Raises:
            KeyError: If a segment is missing or holds a leaf.
            PathVetoedError: If creating a missing segment was refused.
        """
        parts = path.split('.')
        current = self

        for i, part in enumerate(parts[:-1]):
            if not part:
                raise KeyError(f"Empty segment in path '{path}'")
            if part not in current._data:
                if not autocreate:
                    raise KeyError(f"Path segment '{part}' not found")
                current._interceptor.set(current, part, {})
                if part not in current._data:
                    raise PathVetoedError(
                        f"Path segment '{part}' could not be created"
                    )

            child = current._data[part]
            if not isinstance(child, ObservedNode):
                remaining = '.'.join(parts[i + 1:])
                raise KeyError(f"'{part}' is a leaf, cannot access '{remaining}'")
            current = child

        if not parts[-1]:
            raise KeyError(f"Empty segment in path '{path}'")
        return current, parts[-1]

    # ==================== Core API ====================

    def get_item(self, path: str, default: Any = None) -> Any:
        """Get the live value at the given path.

        Args:
            path: Dotted path relative to this node.
            default: Value returned if the path does not resolve.

        Returns:
            The stored value (nested composites are live ObservedNodes),
            or default.
        """
        try:
            node, label = self._resolve(path)
            return node._data[label]
        except KeyError:
            return default

    def set_item(self, path: str, value: Any) -> bool:
        """Set a value at the given path, creating intermediate nodes.

        Args:
            path: Dotted path relative to this node (e.g. 'ui.panel.width').
            value: Leaf or mapping to store. Mappings are wrapped.

        Returns:
            True if the write was applied (or was an idempotent no-op),
            False if it was vetoed or the path crosses a leaf.

        Example:
            >>> tree.set_item('ui.panel.width', 300)
            True
        """
        try:
            node, label = self._resolve(path, autocreate=True)
        except KeyError as exc:
            self._interceptor.logger.debug('Cannot set "%s": %s', path, exc.args[0])
            return False
        return node._interceptor.set(node, label, value)

    def del_item(self, path: str) -> bool:
        """Delete the value at the given path.

        Args:
            path: Dotted path relative to this node.

        Returns:
            True if the value was removed (and subscribers notified),
            False if the path does not resolve or the deletion was refused.
            A missing key never reaches the delete trap.
        """
        try:
            node, label = self._resolve(path)
        except KeyError:
            return False
        # Nothing to remove: the delete trap is not consulted
        if label not in node._data:
            return False
        return node._interceptor.delete(node, label)

    # ==================== Walk ====================

    def walk(self, _prefix: str = '') -> Iterator[tuple[str, Any]]:
        """Yield (path, value) for every descendant, parents first.

        Example:
            >>> for path, value in tree.walk():
            ...     print(path, value)
        """
        for label, value in self._data.items():
            path = f"{_prefix}.{label}" if _prefix else label
            yield path, value
            if isinstance(value, ObservedNode):
                yield from value.walk(path)

    # ==================== Conversion ====================

    def as_dict(self) -> dict[str, Any]:
        """Convert to plain nested dicts, fully detached from the tree.

        Unlike a snapshot, nested nodes are converted too.
        """
        return {
            label: value.as_dict() if isinstance(value, ObservedNode) else value
            for label, value in self._data.items()
        }
