# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""ObservableTree exceptions."""

from __future__ import annotations


class ObservableError(Exception):
    """Base exception for ObservableTree errors."""

    pass


class CircularReferenceError(ObservableError, ValueError):
    """Raised when a composite value contains itself at some depth.

    Self-referential graphs cannot be wrapped: the tree would have
    infinitely many paths.
    """

    def __init__(self, path: str) -> None:
        super().__init__(f"Circular reference detected at '{path}'")
        self.path = path


class PathVetoedError(ObservableError, KeyError):
    """Raised internally when a set trap refuses an intermediate segment.

    Subclasses KeyError so path resolution failures are handled alike.
    """

    pass
