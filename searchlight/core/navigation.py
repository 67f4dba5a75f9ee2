"""
Cyclic navigation over the marks of one search pass.
"""

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import Callable, Optional, Sequence

from searchlight.core.document import MarkElement


# callback(mark, position, count) with a 1-based position
CurrentMarkListener = Callable[[MarkElement, int, int], None]


class CursorState(Enum):
    """Navigation state."""
    EMPTY = auto()       # No marks
    POSITIONED = auto()  # One mark is current


class NavigationCursor:
    """
    Holds the ordered marks of a pass and which one is current.

    At most one mark is flagged current. Listeners are notified every
    time the current mark changes, including right after a rebuild.
    """

    def __init__(self):
        self._marks: list[MarkElement] = []
        self._index: int = -1
        self._listeners: list[CurrentMarkListener] = []

    @property
    def state(self) -> CursorState:
        return CursorState.POSITIONED if self._marks else CursorState.EMPTY

    @property
    def index(self) -> int:
        """Current 0-based index, -1 when empty."""
        return self._index

    @property
    def count(self) -> int:
        return len(self._marks)

    @property
    def marks(self) -> list[MarkElement]:
        return list(self._marks)

    @property
    def current_mark(self) -> Optional[MarkElement]:
        if 0 <= self._index < len(self._marks):
            return self._marks[self._index]
        return None

    @property
    def position(self) -> tuple[int, int]:
        """1-based ``(position, count)``; ``(0, 0)`` when empty."""
        return (self._index + 1, len(self._marks))

    def rebuild(self, marks: Sequence[MarkElement]) -> Optional[tuple[int, int]]:
        """
        Replace the marks and move to the first one.

        Returns:
            ``(1, count)``, or None if ``marks`` is empty
        """
        for mark in self._marks:
            mark.set_current(False)

        self._marks = list(marks)
        for i, mark in enumerate(self._marks):
            mark.index = i
            mark.set_current(False)

        if not self._marks:
            self._index = -1
            return None

        self._move_to(0)
        return self.position

    def reset(self) -> None:
        """Drop all marks."""
        self.rebuild([])

    def next(self) -> Optional[tuple[int, int]]:
        """Advance with wraparound; None when empty."""
        if not self._marks:
            return None
        self._move_to((self._index + 1) % len(self._marks))
        return self.position

    def previous(self) -> Optional[tuple[int, int]]:
        """Step back with wraparound; None when empty."""
        if not self._marks:
            return None
        count = len(self._marks)
        self._move_to((self._index - 1 + count) % count)
        return self.position

    def add_listener(self, callback: CurrentMarkListener) -> None:
        self._listeners.append(callback)

    def remove_listener(self, callback: CurrentMarkListener) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _move_to(self, index: int) -> None:
        current = self.current_mark
        if current is not None:
            current.set_current(False)

        self._index = index
        mark = self._marks[index]
        mark.set_current(True)
        self._notify(mark)

    def _notify(self, mark: MarkElement) -> None:
        position, count = self.position
        for callback in list(self._listeners):
            try:
                callback(mark, position, count)
            except Exception:
                logging.exception("NavigationCursor - Current mark listener failed")
