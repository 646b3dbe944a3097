"""Product view surface — base mockup plus the active layer controllers.

Owns image preloading and routes host pointer events to the layer
controllers. Contains no transform math: controllers compute, the store
records, the surface only wires signals and keeps paint order.
"""

from __future__ import annotations

import logging

from PyQt6.QtCore import QObject, pyqtSignal

from mockup_editor.constants import MIN_SCALE
from mockup_editor.editor.design_layer_controller import DesignLayerController
from mockup_editor.editor.placement_store import PlacementStore
from mockup_editor.models.placement import (
    ContainerRect,
    DesignLayer,
    GestureMode,
    Point2D,
    Size,
    ViewType,
)
from mockup_editor.services.interfaces import AssetService, ContainerProvider

logger = logging.getLogger(__name__)


class ProductViewSurface(QObject):
    """Renders one (color, view) slice of the placement store.

    Signals:
        surface_changed(): Controller set or paint order rebuilt.
        preload_requested(list): References sent to the asset service.
    """

    surface_changed = pyqtSignal()
    preload_requested = pyqtSignal(list)

    def __init__(
        self,
        store: PlacementStore,
        asset_service: AssetService,
        container: ContainerProvider,
        min_scale: float = MIN_SCALE,
        parent: QObject | None = None,
    ):
        super().__init__(parent)
        self._store = store
        self._assets = asset_service
        self._container = container
        self._min_scale = min_scale
        self._color: str | None = None
        self._view: ViewType | None = None
        self._base_image: str | None = None
        self._controllers: dict[str, DesignLayerController] = {}
        self._preloaded_refs: frozenset[str] = frozenset()
        self._natural_sizes: dict[str, Size] = {}

        store.layers_changed.connect(self._on_layers_changed)
        store.state_reset.connect(self._rebuild)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def color(self) -> str | None:
        return self._color

    @property
    def view(self) -> ViewType | None:
        return self._view

    @property
    def base_image(self) -> str | None:
        return self._base_image

    @property
    def controllers(self) -> list[DesignLayerController]:
        """Controllers in paint order (last draws on top)."""
        if self._color is None or self._view is None:
            return []
        return [
            self._controllers[layer.id]
            for layer in self._store.get_layers(self._color, self._view)
            if layer.id in self._controllers
        ]

    @property
    def visible_layers(self) -> list[DesignLayer]:
        """Layers to paint, bottom to top."""
        return [c.layer for c in self.controllers if c.layer.visible]

    def controller_for(self, layer_id: str) -> DesignLayerController | None:
        return self._controllers.get(layer_id)

    def container_rect(self) -> ContainerRect:
        return self._container.container_rect()

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def show(self, color: str, view: ViewType, base_image: str | None) -> None:
        """Display (color, view) over *base_image*."""
        self._color = color
        self._view = view
        self._base_image = base_image
        if base_image is None:
            logger.warning("Product image not found for (%s, %s)", color, view.value)
        self._rebuild()

    def _rebuild(self) -> None:
        for ctrl in self._controllers.values():
            self._dispose(ctrl)
        self._controllers = {}
        if self._color is None or self._view is None:
            return
        for layer in self._store.get_layers(self._color, self._view):
            self._controllers[layer.id] = self._make_controller(layer)
        self._preload()
        self.surface_changed.emit()

    def _make_controller(self, layer: DesignLayer) -> DesignLayerController:
        ctrl = DesignLayerController(
            layer, self.container_rect, min_scale=self._min_scale, parent=self,
        )
        ctrl.layer_changed.connect(self._on_controller_changed)
        return ctrl

    def _dispose(self, ctrl: DesignLayerController) -> None:
        ctrl.end_gesture()
        ctrl.layer_changed.disconnect(self._on_controller_changed)
        ctrl.setParent(None)

    def _on_controller_changed(self, layer: DesignLayer) -> None:
        if self._color is None or self._view is None:
            return
        self._store.replace_layer(self._color, self._view, layer)

    def _on_layers_changed(self, color: str, view: ViewType) -> None:
        if color != self._color or view != self._view:
            return
        layers = self._store.get_layers(color, view)
        current_ids = {layer.id for layer in layers}
        for layer_id in list(self._controllers):
            if layer_id not in current_ids:
                self._dispose(self._controllers.pop(layer_id))
        for layer in layers:
            ctrl = self._controllers.get(layer.id)
            if ctrl is None:
                self._controllers[layer.id] = self._make_controller(layer)
            else:
                ctrl.set_layer(layer)
        self._preload()
        self.surface_changed.emit()

    # ------------------------------------------------------------------
    # Preloading
    # ------------------------------------------------------------------

    def _referenced_images(self) -> list[str]:
        refs: list[str] = []
        if self._base_image:
            refs.append(self._base_image)
        for ctrl in self.controllers:
            ref = ctrl.layer.image_reference
            if ref not in refs:
                refs.append(ref)
        return refs

    def _preload(self) -> None:
        """Preload every referenced image when the reference set changes."""
        refs = self._referenced_images()
        if frozenset(refs) == self._preloaded_refs:
            return
        self._preloaded_refs = frozenset(refs)
        for ref in refs:
            try:
                self._assets.preload(ref)
            except Exception:
                logger.warning("Preload failed for %s", ref, exc_info=True)
        self.preload_requested.emit(refs)

    def set_natural_size(self, image_reference: str, size: Size) -> None:
        """Record an image's natural size once the host has loaded it."""
        self._natural_sizes[image_reference] = size

    def box_size(self, layer_id: str) -> Size | None:
        """On-screen box of a layer (natural size x scale), if known."""
        ctrl = self._controllers.get(layer_id)
        if ctrl is None:
            return None
        natural = self._natural_sizes.get(ctrl.layer.image_reference)
        if natural is None:
            return None
        return Size(natural.width * ctrl.layer.scale, natural.height * ctrl.layer.scale)

    # ------------------------------------------------------------------
    # Pointer routing
    # ------------------------------------------------------------------

    def pointer_down(self, layer_id: str, pointer: Point2D, mode: GestureMode) -> bool:
        """Pointer pressed on a layer body (DRAG) or one of its handles."""
        ctrl = self._controllers.get(layer_id)
        if ctrl is None:
            logger.debug("pointer_down on unknown layer %s", layer_id)
            return False
        return ctrl.begin_gesture(pointer, mode)

    def pointer_move(self, pointer: Point2D) -> None:
        for ctrl in list(self._controllers.values()):
            if ctrl.is_active:
                ctrl.continue_gesture(pointer)

    def pointer_up(self, pointer: Point2D | None = None) -> None:
        """Pointer released anywhere — ends every active gesture."""
        for ctrl in list(self._controllers.values()):
            ctrl.end_gesture()

    def cancel_gestures(self) -> None:
        """Abort active gestures, restoring pre-gesture placements."""
        for ctrl in list(self._controllers.values()):
            ctrl.cancel_gesture()

    @property
    def active_gestures(self) -> dict[str, GestureMode]:
        return {
            layer_id: ctrl.mode
            for layer_id, ctrl in self._controllers.items()
            if ctrl.mode is not None
        }
