"""Transform history — cursor-based linear undo/redo over placements.

Stores immutable Placement snapshots in a bounded list. The cursor points
at the currently applied entry; -1 means the untouched initial transform.
Pure Python class (no Qt dependency).
"""

from __future__ import annotations

from mockup_editor.constants import MAX_HISTORY_LEVELS
from mockup_editor.models.placement import Placement


class TransformHistory:
    """Linear placement history with a movable cursor.

    Committing after an undo discards the redo tail.

    Usage::

        history = TransformHistory(initial)
        history.commit(moved)          # cursor -> 0
        previous = history.undo()      # initial, cursor -> -1
        again = history.redo()         # moved, cursor -> 0
    """

    def __init__(
        self,
        initial: Placement | None = None,
        max_levels: int = MAX_HISTORY_LEVELS,
    ) -> None:
        if max_levels < 1:
            raise ValueError(f"max_levels must be >= 1, got {max_levels}")
        self._initial = initial if initial is not None else Placement()
        self._entries: list[Placement] = []
        self._cursor = -1
        self._max_levels = max_levels

    @property
    def initial(self) -> Placement:
        return self._initial

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def entries(self) -> tuple[Placement, ...]:
        return tuple(self._entries)

    @property
    def current(self) -> Placement:
        """Transform at the cursor (initial when cursor is -1)."""
        if self._cursor < 0:
            return self._initial
        return self._entries[self._cursor]

    @property
    def can_undo(self) -> bool:
        return self._cursor >= 0

    @property
    def can_redo(self) -> bool:
        return self._cursor < len(self._entries) - 1

    def commit(self, placement: Placement) -> None:
        """Append *placement* after the cursor, discarding any redo tail."""
        del self._entries[self._cursor + 1:]
        self._entries.append(placement)
        if len(self._entries) > self._max_levels:
            self._entries.pop(0)  # Drop oldest
        self._cursor = len(self._entries) - 1

    def undo(self) -> Placement | None:
        """Step back one entry.

        Returns:
            The transform now applied, or None if nothing to undo.
        """
        if self._cursor < 0:
            return None
        self._cursor -= 1
        return self.current

    def redo(self) -> Placement | None:
        """Step forward one entry.

        Returns:
            The transform now applied, or None if nothing to redo.
        """
        if self._cursor >= len(self._entries) - 1:
            return None
        self._cursor += 1
        return self.current

    def reset(self) -> Placement:
        """Drop all entries and return the initial transform."""
        self._entries.clear()
        self._cursor = -1
        return self._initial
