"""Design layer controller — pointer gestures to transform updates.

One controller per placed design. Runs an explicit state machine
(idle -> dragging | resizing | rotating -> idle) fed by pointer events
from the host; it never mutates the placement store, it reports every new
record through ``layer_changed``.

Deltas are incremental: the anchor advances to the pointer after every
move, so dropped or coalesced events cost at most one coarser frame.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable

from PyQt6.QtCore import QObject, pyqtSignal

from mockup_editor.constants import MIN_SCALE, POSITION_MAX, POSITION_MIN
from mockup_editor.core.geometry import (
    angle_between,
    clamp,
    normalize_rotation,
    percent_to_container,
    to_container_percent,
)
from mockup_editor.models.placement import (
    ContainerRect,
    DesignLayer,
    GestureMode,
    InteractionSession,
    Point2D,
)

logger = logging.getLogger(__name__)


class DesignLayerController(QObject):
    """Gesture state machine for a single DesignLayer.

    Signals:
        layer_changed(object): New DesignLayer record after a move/cancel.
        gesture_started(str, object): layer id, GestureMode.
        gesture_ended(str): layer id.
    """

    layer_changed = pyqtSignal(object)
    gesture_started = pyqtSignal(str, object)
    gesture_ended = pyqtSignal(str)

    def __init__(
        self,
        layer: DesignLayer,
        container: Callable[[], ContainerRect],
        min_scale: float = MIN_SCALE,
        parent: QObject | None = None,
    ):
        super().__init__(parent)
        self._layer = layer
        self._container = container
        self._min_scale = min_scale
        self._session: InteractionSession | None = None

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def layer(self) -> DesignLayer:
        return self._layer

    @property
    def layer_id(self) -> str:
        return self._layer.id

    @property
    def session(self) -> InteractionSession | None:
        return self._session

    @property
    def mode(self) -> GestureMode | None:
        """Active gesture mode, None when idle."""
        return self._session.mode if self._session is not None else None

    @property
    def is_active(self) -> bool:
        return self._session is not None

    def set_layer(self, layer: DesignLayer) -> None:
        """Resync with the stored record (store may have normalized it)."""
        if layer.id != self._layer.id:
            raise ValueError(f"Controller for {self._layer.id} got layer {layer.id}")
        self._layer = layer

    # ------------------------------------------------------------------
    # Gesture lifecycle
    # ------------------------------------------------------------------

    def begin_gesture(self, pointer: Point2D, mode: GestureMode) -> bool:
        """Start a gesture. First gesture wins; locked or hidden layers ignore input.

        Returns:
            True if a session was started.
        """
        if self._session is not None:
            logger.debug(
                "Ignoring %s on %s: %s already active",
                mode.value, self._layer.id, self._session.mode.value,
            )
            return False
        if self._layer.locked:
            logger.debug("Ignoring %s on locked layer %s", mode.value, self._layer.id)
            return False
        if not self._layer.visible:
            logger.debug("Ignoring %s on hidden layer %s", mode.value, self._layer.id)
            return False
        self._session = InteractionSession(
            mode=mode,
            anchor=pointer,
            target_layer_id=self._layer.id,
            start_layer=self._layer,
        )
        self.gesture_started.emit(self._layer.id, mode)
        return True

    def continue_gesture(self, pointer: Point2D) -> DesignLayer | None:
        """Apply the pointer delta since the last event.

        Returns:
            The new record, or None if idle or the update was skipped.
        """
        session = self._session
        if session is None:
            return None

        rect = self._container()
        anchor = session.anchor
        session.anchor = pointer
        if rect.is_degenerate:
            # Transform frozen until the container has a size again
            logger.debug("Skipping update for %s: degenerate container", self._layer.id)
            return None

        if session.mode is GestureMode.DRAG:
            updated = self._drag(anchor, pointer, rect)
        elif session.mode is GestureMode.RESIZE:
            updated = self._resize(anchor, pointer, rect)
        else:
            updated = self._rotate(anchor, pointer, rect)

        if updated == self._layer:
            return None
        self._layer = updated
        self.layer_changed.emit(updated)
        return updated

    def end_gesture(self) -> None:
        """Clear the session wherever the pointer is. Idempotent."""
        if self._session is None:
            return
        self._session = None
        self.gesture_ended.emit(self._layer.id)

    def cancel_gesture(self) -> None:
        """Abort the gesture and restore the pre-gesture record."""
        session = self._session
        if session is None:
            return
        self._session = None
        if session.start_layer != self._layer:
            self._layer = session.start_layer
            self.layer_changed.emit(self._layer)
        self.gesture_ended.emit(self._layer.id)

    # ------------------------------------------------------------------
    # Transform math
    # ------------------------------------------------------------------

    def _drag(self, anchor: Point2D, pointer: Point2D, rect: ContainerRect) -> DesignLayer:
        delta = pointer - anchor
        dx = to_container_percent(delta.x, rect.width)
        dy = to_container_percent(delta.y, rect.height)
        pos = self._layer.position
        return replace(
            self._layer,
            position=Point2D(
                clamp(pos.x + dx, POSITION_MIN, POSITION_MAX),
                clamp(pos.y + dy, POSITION_MIN, POSITION_MAX),
            ),
        )

    def _resize(self, anchor: Point2D, pointer: Point2D, rect: ContainerRect) -> DesignLayer:
        # Dragging the handle one container width to the right adds 1.0
        dx = (pointer.x - anchor.x) / rect.width
        return replace(self._layer, scale=max(self._min_scale, self._layer.scale + dx))

    def _rotate(self, anchor: Point2D, pointer: Point2D, rect: ContainerRect) -> DesignLayer:
        cx, cy = percent_to_container(self._layer.position, rect)
        swept = angle_between(Point2D(cx, cy), anchor, pointer)
        return replace(
            self._layer,
            rotation=normalize_rotation(self._layer.rotation + swept),
        )
