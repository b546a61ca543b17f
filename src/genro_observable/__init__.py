# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Genro-Observable - nested state trees observable by dotted path.

Wrap a nested mapping once, then subscribe to any path ('a.b.c') and be
notified, synchronously, of every write or delete that touches it, at
whatever depth it happens.
"""

__version__ = "0.1.0"

from .chain import REMOVED, build_notification_chain, is_composite
from .exceptions import CircularReferenceError, ObservableError, PathVetoedError
from .interceptor import MutationInterceptor
from .node import ObservedNode
from .proxy import build_proxy_chain
from .registry import ParentChainRegistry
from .store import ObservableTree, SubscriptionHub, create

__all__ = [
    # Core classes
    "ObservableTree",
    "ObservedNode",
    "create",
    "REMOVED",
    # Building blocks
    "MutationInterceptor",
    "ParentChainRegistry",
    "SubscriptionHub",
    "build_notification_chain",
    "build_proxy_chain",
    "is_composite",
    # Exceptions
    "ObservableError",
    "CircularReferenceError",
    "PathVetoedError",
]
