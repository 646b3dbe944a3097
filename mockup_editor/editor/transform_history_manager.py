"""Transform history manager — fine-tuning one design with undo/redo.

Wraps a TransformHistory with the unsaved-changes flag and the two
asynchronous service operations: applying an image effect and saving
the placement. Service failures never change in-memory state; they are
logged and surfaced through ``notification``.
"""

from __future__ import annotations

import logging

from PyQt6.QtCore import QObject, pyqtSignal

from mockup_editor.constants import MAX_HISTORY_LEVELS, MIN_SCALE
from mockup_editor.core.i18n import Translator
from mockup_editor.core.transform_history import TransformHistory
from mockup_editor.models.effects import EffectType, ImageEffect
from mockup_editor.models.placement import Placement
from mockup_editor.services.interfaces import AssetService, DataService

logger = logging.getLogger(__name__)


class TransformHistoryManager(QObject):
    """Undo/redo and persistence for a single design's placement.

    Signals:
        transform_changed(object): Placement now applied.
        undo_state_changed(): can_undo / can_redo may have changed.
        image_changed(str): Processed image reference after an effect.
        notification(str, str): level ("info"/"error"), message.
        busy_changed(bool): True when the first pending service call
            starts, False when the last one finishes.
        unsaved_changes_warning(): Teardown requested with unsaved changes.
    """

    transform_changed = pyqtSignal(object)
    undo_state_changed = pyqtSignal()
    image_changed = pyqtSignal(str)
    notification = pyqtSignal(str, str)
    busy_changed = pyqtSignal(bool)
    unsaved_changes_warning = pyqtSignal()

    def __init__(
        self,
        design_id: str,
        image_reference: str,
        asset_service: AssetService,
        data_service: DataService,
        initial: Placement | None = None,
        min_scale: float = MIN_SCALE,
        max_levels: int = MAX_HISTORY_LEVELS,
        translator: Translator | None = None,
        parent: QObject | None = None,
    ):
        super().__init__(parent)
        self._design_id = design_id
        self._image_reference = image_reference
        self._assets = asset_service
        self._data = data_service
        self._min_scale = min_scale
        self._tr = translator or Translator()
        self._history = TransformHistory(
            (initial or Placement()).normalized(min_scale), max_levels=max_levels,
        )
        self._unsaved = False
        self._pending = 0
        self._selected_effect: EffectType | None = None

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def design_id(self) -> str:
        return self._design_id

    @property
    def image_reference(self) -> str:
        return self._image_reference

    @property
    def transform(self) -> Placement:
        return self._history.current

    @property
    def history(self) -> TransformHistory:
        return self._history

    @property
    def has_unsaved_changes(self) -> bool:
        return self._unsaved

    @property
    def selected_effect(self) -> EffectType | None:
        return self._selected_effect

    @property
    def is_busy(self) -> bool:
        return self._pending > 0

    @property
    def can_undo(self) -> bool:
        return self._history.can_undo

    @property
    def can_redo(self) -> bool:
        return self._history.can_redo

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def _applied(self, placement: Placement) -> None:
        self._unsaved = True
        self.transform_changed.emit(placement)
        self.undo_state_changed.emit()

    def commit(self, placement: Placement) -> Placement:
        """Apply a new transform, discarding any redo tail."""
        placement = placement.normalized(self._min_scale)
        self._history.commit(placement)
        self._applied(placement)
        return placement

    def undo(self) -> Placement | None:
        placement = self._history.undo()
        if placement is None:
            return None
        self._applied(placement)
        return placement

    def redo(self) -> Placement | None:
        placement = self._history.redo()
        if placement is None:
            return None
        self._applied(placement)
        return placement

    def reset(self) -> Placement:
        """Drop the history and return to the initial transform."""
        placement = self._history.reset()
        self._selected_effect = None
        self._applied(placement)
        return placement

    # ------------------------------------------------------------------
    # Service operations
    # ------------------------------------------------------------------

    def _begin_call(self) -> None:
        self._pending += 1
        if self._pending == 1:
            self.busy_changed.emit(True)

    def _end_call(self) -> None:
        self._pending -= 1
        if self._pending == 0:
            self.busy_changed.emit(False)

    async def apply_effect(self, effect: ImageEffect) -> bool:
        """Process the design image and persist the new reference.

        Returns:
            True on success. On failure nothing changes and an error
            notification is emitted; the call can simply be retried.
        """
        self._begin_call()
        try:
            processed = await self._assets.transform_image(self._image_reference, effect)
            await self._data.persist_processed_image(self._design_id, processed)
        except Exception:
            logger.exception(
                "Applying %s to design %s failed", effect.type.value, self._design_id,
            )
            self.notification.emit(
                "error", self._tr.t("notify.effect_failed", "Failed to apply effect"),
            )
            return False
        finally:
            self._end_call()

        self._image_reference = processed
        self._selected_effect = effect.type
        self._unsaved = True
        self.image_changed.emit(processed)
        self.notification.emit(
            "info",
            self._tr.t("notify.effect_applied", "{effect} effect has been applied").format(
                effect=effect.type.value,
            ),
        )
        return True

    async def save(self) -> bool:
        """Persist the current transform if anything changed.

        Returns:
            True when saved or nothing to save; False on service failure
            (the unsaved flag stays set).
        """
        if not self._unsaved:
            return True
        placement = self._history.current
        self._begin_call()
        try:
            await self._data.persist_placement(self._design_id, placement)
        except Exception:
            logger.exception("Saving placement of design %s failed", self._design_id)
            self.notification.emit(
                "error", self._tr.t("notify.save_failed", "Failed to save changes"),
            )
            return False
        finally:
            self._end_call()

        # Edits made while the call was pending stay unsaved
        if self._history.current == placement:
            self._unsaved = False
        self.notification.emit(
            "info", self._tr.t("notify.saved", "Your changes have been saved successfully"),
        )
        return True

    def request_teardown(self) -> bool:
        """Check before the session is torn down.

        Returns:
            False (and warns) if unsaved changes would be lost.
        """
        if self._unsaved:
            self.unsaved_changes_warning.emit()
            self.notification.emit(
                "warning", self._tr.t("notify.unsaved_changes", "You have unsaved changes"),
            )
            return False
        return True
