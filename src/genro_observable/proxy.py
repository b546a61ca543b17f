# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Proxy chains: recursive wrapping of composite values.

Wrapping turns a nested mapping into a tree of ObservedNode instances
sharing one interceptor, and records in the registry the path of every
node it creates. Leaves (scalars, lists, arbitrary objects) are stored
as-is; lists are never decomposed into indexed paths.

A node that already belongs to the same tree is reused rather than
copied: it keeps its identity and gains the new paths as additional
prefixes. Mappings from anywhere else, including nodes of another
tree, are copied into fresh nodes.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, TYPE_CHECKING

from .chain import compose_paths, is_composite
from .exceptions import CircularReferenceError
from .node import ObservedNode

if TYPE_CHECKING:
    from .interceptor import MutationInterceptor
    from .registry import ParentChainRegistry


def build_proxy_chain(
    value: Mapping,
    interceptor: MutationInterceptor,
    registry: ParentChainRegistry,
    paths: Iterable[str] = (),
    *,
    ancestors: Iterable[int] = (),
    into: ObservedNode | None = None,
) -> ObservedNode:
    """Wrap a mapping and all nested mappings into ObservedNodes.

    Registry entries are only committed once the whole value has been
    wrapped, so a rejected value leaves the registry untouched.

    Args:
        value: The mapping to wrap.
        interceptor: Shared interceptor routing the nodes' writes.
        registry: Registry receiving one prefix per (node, path).
        paths: Paths at which the resulting node is stored. Empty for
            the root node.
        ancestors: ids of nodes that value must not contain (the node
            it is being written into).
        into: Existing empty node to fill instead of creating one.

    Returns:
        The wrapped node.

    Raises:
        CircularReferenceError: If value contains itself or one of the
            given ancestors.
    """
    registrations: list[tuple[ObservedNode, str]] = []
    node = _wrap(
        value, interceptor, list(paths), set(ancestors), registrations, into
    )
    for wrapped, path in registrations:
        registry.add(wrapped, path)
    return node


def _wrap(
    value: Mapping,
    interceptor: MutationInterceptor,
    paths: list[str],
    stack: set[int],
    registrations: list[tuple[ObservedNode, str]],
    into: ObservedNode | None = None,
) -> ObservedNode:
    marker = id(value)
    if marker in stack:
        raise CircularReferenceError(paths[0] if paths else '')
    stack.add(marker)

    if isinstance(value, ObservedNode) and value._interceptor is interceptor:
        node = value
        for label, child in node._data.items():
            if isinstance(child, ObservedNode):
                _wrap(
                    child, interceptor, compose_paths(label, paths),
                    stack, registrations,
                )
    else:
        node = into if into is not None else ObservedNode(interceptor)
        for key, child in value.items():
            label = key if isinstance(key, str) else str(key)
            if is_composite(child):
                child = _wrap(
                    child, interceptor, compose_paths(label, paths),
                    stack, registrations,
                )
            node._data[label] = child

    stack.discard(marker)
    registrations.extend((node, path) for path in paths)
    return node
