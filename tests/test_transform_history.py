"""Tests for TransformHistory — cursor-based linear undo/redo.

Covers:
- commit / undo / redo cursor movement
- redo tail discarded on commit after undo
- bounded length, reset to the initial transform
"""

import pytest

from mockup_editor.core.transform_history import TransformHistory
from mockup_editor.models.placement import Placement, Point2D


def _p(x: float, scale: float = 1.0, rotation: float = 0.0) -> Placement:
    return Placement(Point2D(x, 50.0), scale, rotation)


class TestHistoryBasics:
    def test_initial_state(self):
        history = TransformHistory()
        assert history.cursor == -1
        assert history.current == Placement()
        assert not history.can_undo
        assert not history.can_redo

    def test_custom_initial(self):
        history = TransformHistory(_p(10))
        assert history.current == _p(10)
        assert history.initial == _p(10)

    def test_commit_moves_cursor(self):
        history = TransformHistory()
        history.commit(_p(10))
        history.commit(_p(20))
        assert history.cursor == 1
        assert history.current == _p(20)
        assert history.can_undo
        assert not history.can_redo

    def test_invalid_bound(self):
        with pytest.raises(ValueError):
            TransformHistory(max_levels=0)


class TestUndoRedo:
    def test_undo_to_initial(self):
        history = TransformHistory(_p(0))
        history.commit(_p(10))
        assert history.undo() == _p(0)
        assert history.cursor == -1
        assert history.can_redo

    def test_undo_at_start_is_noop(self):
        history = TransformHistory()
        assert history.undo() is None
        assert history.cursor == -1

    def test_redo_at_end_is_noop(self):
        history = TransformHistory()
        history.commit(_p(10))
        assert history.redo() is None
        assert history.cursor == 0

    def test_undo_then_redo_restores(self):
        history = TransformHistory()
        for x in (10, 20, 30):
            history.commit(_p(x))
        history.undo()
        history.undo()
        assert history.current == _p(10)
        assert history.redo() == _p(20)
        assert history.redo() == _p(30)

    def test_commit_after_undo_discards_tail(self):
        history = TransformHistory()
        for x in (10, 20, 30):
            history.commit(_p(x))
        history.undo()
        history.undo()
        history.commit(_p(99))
        assert history.entries == (_p(10), _p(99))
        assert not history.can_redo

    def test_commit_from_initial_discards_everything(self):
        history = TransformHistory()
        history.commit(_p(10))
        history.undo()
        history.commit(_p(20))
        assert history.entries == (_p(20),)
        assert history.cursor == 0


class TestBoundsAndReset:
    def test_oldest_dropped_past_bound(self):
        history = TransformHistory(max_levels=3)
        for x in range(5):
            history.commit(_p(x))
        assert history.entries == (_p(2), _p(3), _p(4))
        assert history.cursor == 2

    def test_undo_stops_at_initial_after_drop(self):
        history = TransformHistory(_p(-1), max_levels=2)
        for x in range(4):
            history.commit(_p(x))
        assert history.undo() == _p(2)
        assert history.undo() == _p(-1)
        assert history.undo() is None

    def test_reset(self):
        history = TransformHistory(_p(5))
        history.commit(_p(10))
        history.commit(_p(20))
        assert history.reset() == _p(5)
        assert history.entries == ()
        assert history.cursor == -1
        assert not history.can_undo
        assert not history.can_redo

    def test_entries_is_a_copy(self):
        history = TransformHistory()
        history.commit(_p(10))
        entries = history.entries
        history.commit(_p(20))
        assert entries == (_p(10),)
