# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Snapshots: read-only, shallow views of the current state."""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

from ..chain import is_composite

if TYPE_CHECKING:
    from ..interceptor import MutationInterceptor


class SnapshotMixin:
    """Snapshot API of ObservableTree."""

    __slots__ = ()

    _data: dict[str, Any]
    _interceptor: MutationInterceptor

    def snapshot(self, path: str | None = None) -> Any:
        """Return the current image of the tree or of one of its paths.

        Only one level is copied: composites nested inside the result
        are the live ObservedNodes.

        Args:
            path: Dotted path ('a.b.c'). If omitted or empty, the whole
                tree's own state is copied; bookkeeping is never included.

        Returns:
            A shallow dict copy for composites, the value itself for
            leaves, or None if the path is not reachable. The first
            unreachable segment is logged at DEBUG level.

        Example:
            >>> tree = ObservableTree({'a': {'b': 1}})
            >>> tree.snapshot('a')
            {'b': 1}
            >>> tree.snapshot('a.c') is None
            True
        """
        if not (path and isinstance(path, str)):
            return dict(self._data)

        current: Any = self
        for segment in path.split('.'):
            if not (is_composite(current) and segment and segment in current):
                self._interceptor.logger.debug(
                    'Cannot access path "%s": "%s" is not reachable', path, segment
                )
                return None
            current = current[segment]

        if is_composite(current):
            return dict(current)
        return current
