# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""UI state example: panels observed by dotted path.

Run with::

    python examples/ui_state/ui_state.py
"""

from __future__ import annotations

import logging

from genro_observable import REMOVED, ObservableTree


def main() -> None:
    logging.basicConfig(level=logging.DEBUG, format='%(name)s: %(message)s')

    # Widths below 100 are refused
    def set_trap(target, key, value, receiver):
        return not (key == 'width' and isinstance(value, int) and value < 100)

    state = ObservableTree(
        {'theme': 'light', 'panels': {'left': {'width': 240, 'open': True}}},
        set_trap=set_trap,
    )

    def show(path):
        def render(value):
            shown = 'removed' if value is REMOVED else value
            print(f"  {path} -> {shown}")
        return render

    handles = [
        state.subscribe(path, show(path))
        for path in ('theme', 'panels.left', 'panels.left.width', 'panels.right.width')
    ]

    print("theme:")
    state['theme'] = 'dark'
    state['theme'] = 'dark'  # identical, nothing printed

    print("resize left panel:")
    state['panels']['left']['width'] = 320
    print("refused resize:", state.set_item('panels.left.width', 50))

    print("add right panel:")
    state['panels']['right'] = {'width': 200, 'open': False}

    print("close left panel:")
    del state['panels.left']

    print("snapshot:", state.snapshot('panels.right'))
    state.unsubscribe_all(handles)


if __name__ == '__main__':
    main()
