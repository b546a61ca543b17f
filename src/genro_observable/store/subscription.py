# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Subscriptions: one lazily created broadcast channel per path.

Channels are ``reactivex`` Subjects. A channel is created the first time
a path is observed and lives as long as the tree; disposing individual
subscriptions never destroys it. Delivery is synchronous: a mutation
returns only after every subscriber of every affected path has run.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, TYPE_CHECKING

from reactivex import Observable
from reactivex import operators as ops
from reactivex.abc import DisposableBase
from reactivex.subject import Subject

if TYPE_CHECKING:
    from ..interceptor import MutationInterceptor


class SubscriptionHub:
    """Table of path -> Subject, created on first observation."""

    __slots__ = ('_channels',)

    def __init__(self) -> None:
        self._channels: dict[str, Subject] = {}

    def __repr__(self) -> str:
        return f"SubscriptionHub({sorted(self._channels)})"

    def __contains__(self, path: str) -> bool:
        return path in self._channels

    def observe(self, path: str) -> Observable:
        """Return a view over the channel of ``path``, creating it if needed.

        Every view of the same path shares one upstream Subject, so all
        subscribers see every value.
        """
        channel = self._channels.get(path)
        if channel is None:
            channel = self._channels[path] = Subject()
        return channel.pipe(ops.as_observable())

    def emit(self, path: str, value: Any) -> bool:
        """Push value to the channel of path, if anyone ever observed it.

        Returns:
            True if a channel existed for path.
        """
        channel = self._channels.get(path)
        if channel is None:
            return False
        channel.on_next(value)
        return True

    def paths(self) -> list[str]:
        """Return the observed paths, sorted."""
        return sorted(self._channels)

    @staticmethod
    def unsubscribe_all(handles: Iterable[DisposableBase]) -> None:
        """Dispose a batch of subscriptions. Channels stay alive."""
        for handle in handles:
            handle.dispose()


class SubscriptionMixin:
    """Observe/unsubscribe API of ObservableTree."""

    __slots__ = ()

    _interceptor: MutationInterceptor

    def observe(self, path: str) -> Observable:
        """Return an Observable of every value written at ``path``.

        Delivered values are raw leaves, freshly wrapped ObservedNodes,
        or :data:`REMOVED` when the path stops existing.

        Args:
            path: Dotted path (e.g. 'ui.panel.width'). The path need not
                exist yet.

        Example:
            >>> tree.observe('ui.theme').subscribe(print)
            >>> tree['ui.theme'] = 'dark'  # prints 'dark'
        """
        return self._interceptor.hub.observe(path)

    def subscribe(
        self,
        path: str,
        on_next: Callable[[Any], Any],
        on_error: Callable[[Exception], Any] | None = None,
        on_completed: Callable[[], Any] | None = None,
    ) -> DisposableBase:
        """Subscribe a callback to ``path``; returns the handle."""
        return self.observe(path).subscribe(
            on_next, on_error=on_error, on_completed=on_completed
        )

    def unsubscribe_all(self, handles: Iterable[DisposableBase]) -> None:
        """Cancel the given subscription handles.

        The channels are kept: later observers and mutations use them.
        """
        self._interceptor.hub.unsubscribe_all(handles)

    def observed_paths(self) -> list[str]:
        """Return the paths that currently have a channel."""
        return self._interceptor.hub.paths()
