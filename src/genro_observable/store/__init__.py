# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""ObservableTree package - the root of an observed state tree.

The package is organized into:
- core: ObservableTree construction, mutation surface and introspection
- subscription: per-path broadcast channels (reactivex Subjects)
- snapshot: shallow point-in-time reads by path

Example:
    >>> from genro_observable import ObservableTree
    >>> tree = ObservableTree({'config': {'name': 'MyApp'}})
    >>> tree.snapshot('config')
    {'name': 'MyApp'}
"""

from .core import ObservableTree, create
from .subscription import SubscriptionHub

__all__ = ["ObservableTree", "SubscriptionHub", "create"]
