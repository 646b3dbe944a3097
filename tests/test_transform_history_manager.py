"""Tests for TransformHistoryManager — undo/redo signals, effects, save, teardown."""

import asyncio
from unittest.mock import MagicMock

import pytest

from mockup_editor.editor.transform_history_manager import TransformHistoryManager
from mockup_editor.models.effects import EffectType, ImageEffect
from mockup_editor.models.placement import Placement, Point2D


def _manager(assets, data, **kwargs):
    return TransformHistoryManager("d-1", "designs/logo.png", assets, data, **kwargs)


def _p(x: float) -> Placement:
    return Placement(Point2D(x, 50.0))


class TestHistorySignals:
    def test_starts_clean(self, assets, data):
        mgr = _manager(assets, data)
        assert mgr.transform == Placement()
        assert not mgr.has_unsaved_changes
        assert not mgr.can_undo
        assert not mgr.can_redo

    def test_initial_is_normalized(self, assets, data):
        mgr = _manager(assets, data, initial=Placement(Point2D(120, 50), 0.0, 370.0))
        assert mgr.transform == Placement(Point2D(100, 50), 0.1, 10.0)

    def test_commit_marks_unsaved_and_emits(self, assets, data):
        mgr = _manager(assets, data)
        changed, undo_state = MagicMock(), MagicMock()
        mgr.transform_changed.connect(changed)
        mgr.undo_state_changed.connect(undo_state)
        mgr.commit(_p(10))
        changed.assert_called_once_with(_p(10))
        undo_state.assert_called_once()
        assert mgr.has_unsaved_changes

    def test_commit_normalizes(self, assets, data):
        mgr = _manager(assets, data)
        assert mgr.commit(Placement(Point2D(50, 50), 1.0, -90.0)).rotation == 270.0

    def test_undo_redo(self, assets, data):
        mgr = _manager(assets, data)
        mgr.commit(_p(10))
        mgr.commit(_p(20))
        assert mgr.undo() == _p(10)
        assert mgr.can_redo
        assert mgr.redo() == _p(20)
        assert mgr.redo() is None

    def test_undo_without_history_emits_nothing(self, assets, data):
        mgr = _manager(assets, data)
        changed = MagicMock()
        mgr.transform_changed.connect(changed)
        assert mgr.undo() is None
        changed.assert_not_called()
        assert not mgr.has_unsaved_changes

    def test_reset(self, assets, data):
        mgr = _manager(assets, data, initial=_p(5))
        mgr.commit(_p(10))
        assert mgr.reset() == _p(5)
        assert not mgr.can_undo
        assert mgr.selected_effect is None


class TestApplyEffect:
    @pytest.mark.asyncio
    async def test_success(self, assets, data):
        mgr = _manager(assets, data)
        image, notify = MagicMock(), MagicMock()
        mgr.image_changed.connect(image)
        mgr.notification.connect(notify)
        assert await mgr.apply_effect(ImageEffect(EffectType.SEPIA))
        assert mgr.image_reference == "designs/logo.png?e=sepia"
        assert data.images["d-1"] == "designs/logo.png?e=sepia"
        assert mgr.selected_effect is EffectType.SEPIA
        assert mgr.has_unsaved_changes
        image.assert_called_once_with("designs/logo.png?e=sepia")
        notify.assert_called_once_with("info", "sepia effect has been applied")

    @pytest.mark.asyncio
    async def test_asset_failure_changes_nothing(self, failing_assets, data):
        mgr = _manager(failing_assets, data)
        notify = MagicMock()
        mgr.notification.connect(notify)
        assert not await mgr.apply_effect(ImageEffect(EffectType.GRAYSCALE))
        assert mgr.image_reference == "designs/logo.png"
        assert mgr.selected_effect is None
        assert not mgr.has_unsaved_changes
        assert data.images == {}
        notify.assert_called_once_with("error", "Failed to apply effect")

    @pytest.mark.asyncio
    async def test_persist_failure_changes_nothing(self, assets, failing_data):
        mgr = _manager(assets, failing_data)
        assert not await mgr.apply_effect(ImageEffect(EffectType.BLUR, intensity=20))
        assert mgr.image_reference == "designs/logo.png"

    @pytest.mark.asyncio
    async def test_busy_toggled(self, assets, data):
        mgr = _manager(assets, data)
        busy = MagicMock()
        mgr.busy_changed.connect(busy)
        await mgr.apply_effect(ImageEffect(EffectType.OPTIMIZE))
        assert [c.args[0] for c in busy.call_args_list] == [True, False]
        assert not mgr.is_busy

    @pytest.mark.asyncio
    async def test_busy_until_last_pending_call_finishes(self, assets, data):
        mgr = _manager(assets, data)
        mgr.commit(_p(10))
        busy = MagicMock()
        mgr.busy_changed.connect(busy)
        gate = asyncio.Event()

        async def slow_persist(design_id, placement):
            await gate.wait()
            return True

        data.persist_placement = slow_persist
        save_task = asyncio.create_task(mgr.save())
        await asyncio.sleep(0)
        assert mgr.is_busy

        assert await mgr.apply_effect(ImageEffect(EffectType.SEPIA))
        assert mgr.is_busy

        gate.set()
        assert await save_task
        assert not mgr.is_busy
        assert [c.args[0] for c in busy.call_args_list] == [True, False]


class TestSave:
    @pytest.mark.asyncio
    async def test_save_clears_flag(self, assets, data):
        mgr = _manager(assets, data)
        mgr.commit(_p(10))
        assert await mgr.save()
        assert data.placements["d-1"] == _p(10)
        assert not mgr.has_unsaved_changes

    @pytest.mark.asyncio
    async def test_clean_save_skips_service(self, assets, data):
        mgr = _manager(assets, data)
        assert await mgr.save()
        assert data.placements == {}

    @pytest.mark.asyncio
    async def test_failed_save_keeps_state(self, assets, failing_data):
        mgr = _manager(assets, failing_data)
        mgr.commit(_p(10))
        before = mgr.transform
        notify = MagicMock()
        mgr.notification.connect(notify)
        assert not await mgr.save()
        assert mgr.has_unsaved_changes
        assert mgr.transform == before
        notify.assert_called_once_with("error", "Failed to save changes")

    @pytest.mark.asyncio
    async def test_edit_during_save_stays_dirty(self, assets, data):
        mgr = _manager(assets, data)
        mgr.commit(_p(10))

        async def persist(design_id, placement):
            mgr.commit(_p(20))
            return True

        data.persist_placement = persist
        assert await mgr.save()
        assert mgr.has_unsaved_changes


class TestTeardown:
    def test_clean_teardown(self, assets, data):
        mgr = _manager(assets, data)
        warning = MagicMock()
        mgr.unsaved_changes_warning.connect(warning)
        assert mgr.request_teardown()
        warning.assert_not_called()

    def test_dirty_teardown_warns(self, assets, data):
        mgr = _manager(assets, data)
        mgr.commit(_p(10))
        warning, notify = MagicMock(), MagicMock()
        mgr.unsaved_changes_warning.connect(warning)
        mgr.notification.connect(notify)
        assert not mgr.request_teardown()
        warning.assert_called_once()
        notify.assert_called_once_with("warning", "You have unsaved changes")
