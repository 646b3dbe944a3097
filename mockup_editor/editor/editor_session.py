"""Editor session — top-level coordinator of one product editing session.

Holds the current color/view selection, wires the placement store to the
product view surface and exposes the design-level operations. Services
are injected and live as long as the session.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable

from PyQt6.QtCore import QObject, pyqtSignal

from mockup_editor.config import EditorConfig
from mockup_editor.constants import (
    DEFAULT_POSITION_X,
    DEFAULT_POSITION_Y,
    DEFAULT_ROTATION,
    DEFAULT_SCALE,
    POSITION_MAX,
    POSITION_MIN,
)
from mockup_editor.core.geometry import clamp
from mockup_editor.core.i18n import Translator
from mockup_editor.editor.placement_store import PlacementStore
from mockup_editor.editor.product_view_surface import ProductViewSurface
from mockup_editor.editor.transform_history_manager import TransformHistoryManager
from mockup_editor.models.placement import (
    DesignLayer,
    Placement,
    Point2D,
    ViewType,
    new_layer_id,
)
from mockup_editor.models.product import ProductMockup
from mockup_editor.services.interfaces import (
    AssetService,
    ContainerProvider,
    DataService,
    ProductStateStore,
)

logger = logging.getLogger(__name__)


class EditorSession(QObject):
    """Coordinator of placements for one product.

    Switching color or view only changes which slice of the store is
    displayed; work on every (color, view) pair is preserved.

    Signals:
        selection_changed(str, object): color, ViewType.
        active_layer_changed(object): layer id or None.
        notification(str, str): level ("info"/"error"), message.
    """

    selection_changed = pyqtSignal(str, object)
    active_layer_changed = pyqtSignal(object)
    notification = pyqtSignal(str, str)

    def __init__(
        self,
        product: ProductMockup,
        asset_service: AssetService,
        data_service: DataService,
        container: ContainerProvider,
        store: PlacementStore | None = None,
        config: EditorConfig | None = None,
        parent: QObject | None = None,
    ):
        super().__init__(parent)
        self._config = config or EditorConfig()
        self._product = product
        self._assets = asset_service
        self._data = data_service
        self._store = store or PlacementStore(min_scale=self._config.min_scale, parent=self)
        self._surface = ProductViewSurface(
            self._store, asset_service, container,
            min_scale=self._config.min_scale, parent=self,
        )
        self._current_color = product.colors[0] if product.colors else self._config.colors[0]
        self._current_view = ViewType.FRONT
        self._active_layer_id: str | None = None
        self._tr = Translator(self._config.language)
        # One transform editor per layer id, with its store-mirroring slot
        self._editors: dict[
            str, tuple[TransformHistoryManager, Callable[[Placement], None]]
        ] = {}

        self._store.layer_removed.connect(self._on_layer_removed)
        self._store.state_reset.connect(self.close_transform_editors)
        self._show()

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def product(self) -> ProductMockup:
        return self._product

    @property
    def store(self) -> PlacementStore:
        return self._store

    @property
    def surface(self) -> ProductViewSurface:
        return self._surface

    @property
    def config(self) -> EditorConfig:
        return self._config

    @property
    def language(self) -> str:
        return self._tr.lang

    @property
    def current_color(self) -> str:
        return self._current_color

    @property
    def current_view(self) -> ViewType:
        return self._current_view

    @property
    def colors(self) -> list[str]:
        return list(self._product.colors) or list(self._config.colors)

    @property
    def current_base_image(self) -> str | None:
        return self._product.image_for(self._current_color, self._current_view)

    @property
    def current_layers(self) -> tuple[DesignLayer, ...]:
        return self._store.get_layers(self._current_color, self._current_view)

    @property
    def active_layer_id(self) -> str | None:
        return self._active_layer_id

    @property
    def active_layer(self) -> DesignLayer | None:
        if self._active_layer_id is None:
            return None
        return self._find(self._active_layer_id)

    def _find(self, layer_id: str) -> DesignLayer | None:
        return self._store.find_layer(self._current_color, self._current_view, layer_id)

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def _show(self) -> None:
        self._surface.show(self._current_color, self._current_view, self.current_base_image)

    def select_color(self, color: str) -> None:
        if color == self._current_color:
            return
        self._current_color = color
        self._after_selection()

    def select_view(self, view: ViewType) -> None:
        if view == self._current_view:
            return
        self._current_view = view
        self._after_selection()

    def _after_selection(self) -> None:
        self._show()
        layers = self.current_layers
        if self._active_layer_id is None or self._find(self._active_layer_id) is None:
            self._set_active(layers[-1].id if layers else None)
        self.selection_changed.emit(self._current_color, self._current_view)

    def set_active_layer(self, layer_id: str | None) -> None:
        if layer_id is not None and self._find(layer_id) is None:
            return
        self._set_active(layer_id)

    def _set_active(self, layer_id: str | None) -> None:
        if layer_id == self._active_layer_id:
            return
        self._active_layer_id = layer_id
        self.active_layer_changed.emit(layer_id)

    def _on_layer_removed(self, color: str, view: ViewType, layer_id: str) -> None:
        self.close_transform_editor(layer_id)
        if layer_id == self._active_layer_id:
            layers = self._store.get_layers(self._current_color, self._current_view)
            self._set_active(layers[-1].id if layers else None)

    # ------------------------------------------------------------------
    # Design operations
    # ------------------------------------------------------------------

    def default_placement(self) -> Placement:
        """Centered placement, nudged per layer already on the current view."""
        offset = self._config.nudge_step_pct * len(self.current_layers)
        return Placement(
            position=Point2D(
                clamp(DEFAULT_POSITION_X + offset, POSITION_MIN, POSITION_MAX),
                clamp(DEFAULT_POSITION_Y + offset, POSITION_MIN, POSITION_MAX),
            ),
            scale=DEFAULT_SCALE,
            rotation=DEFAULT_ROTATION,
        )

    def add_design(self, image_reference: str, name: str | None = None) -> DesignLayer:
        """Place a new design on top of the current (color, view)."""
        layer = DesignLayer(
            image_reference=image_reference,
            name=name or self._unique_name(self._tr.t("layers.default_name", "Design")),
        ).with_placement(self.default_placement())
        layer = self._store.add_layer(self._current_color, self._current_view, layer)
        self._set_active(layer.id)
        logger.debug("Added design %s (%s)", layer.id, image_reference)
        return layer

    def _unique_name(self, base: str) -> str:
        names = {layer.name for layer in self.current_layers}
        if base not in names:
            return base
        counter = 1
        while f"{base}_{counter}" in names:
            counter += 1
        return f"{base}_{counter}"

    def remove_design(self, layer_id: str) -> bool:
        return self._store.remove_layer(self._current_color, self._current_view, layer_id)

    def duplicate_design(self, layer_id: str) -> DesignLayer | None:
        """Copy a layer on top of the current view, offset diagonally."""
        source = self._find(layer_id)
        if source is None:
            return None
        offset = self._config.duplicate_offset_pct
        copy = replace(
            source,
            id=new_layer_id(),
            name=self._unique_name(
                f"{source.name} ({self._tr.t('layers.copy_suffix', 'copy')})"
            ),
            position=Point2D(source.position.x + offset, source.position.y + offset),
            locked=False,
        )
        copy = self._store.add_layer(self._current_color, self._current_view, copy)
        self._set_active(copy.id)
        return copy

    def clear_designs(self) -> int:
        return self._store.clear(self._current_color, self._current_view)

    def move_design_to_view(self, layer_id: str, target_view: ViewType) -> DesignLayer | None:
        """Move a layer to another view of the current color (on top)."""
        if target_view == self._current_view:
            return None
        layer = self._find(layer_id)
        if layer is None:
            return None
        return self._store.transfer_layer(
            self._current_color, self._current_view, layer_id,
            self._current_color, target_view,
        )

    def toggle_visibility(self, layer_id: str) -> DesignLayer | None:
        layer = self._find(layer_id)
        if layer is None:
            return None
        if layer.visible:
            self._end_gesture(layer_id)
        return self._update(layer_id, visible=not layer.visible)

    def toggle_lock(self, layer_id: str) -> DesignLayer | None:
        layer = self._find(layer_id)
        if layer is None:
            return None
        if not layer.locked:
            self._end_gesture(layer_id)
        return self._update(layer_id, locked=not layer.locked)

    def _end_gesture(self, layer_id: str) -> None:
        ctrl = self._surface.controller_for(layer_id)
        if ctrl is not None:
            ctrl.end_gesture()

    def set_opacity(self, layer_id: str, opacity: float) -> DesignLayer | None:
        return self._update(layer_id, opacity=opacity)

    def reset_design_transform(self, layer_id: str) -> DesignLayer | None:
        default = Placement()
        return self._update(
            layer_id,
            position=default.position,
            scale=default.scale,
            rotation=default.rotation,
        )

    def apply_placement(self, layer_id: str, placement: Placement) -> DesignLayer | None:
        """Write a fine-tuned placement back onto a layer."""
        return self._update(
            layer_id,
            position=placement.position,
            scale=placement.scale,
            rotation=placement.rotation,
        )

    def bring_to_front(self, layer_id: str) -> bool:
        return self._store.bring_to_front(self._current_color, self._current_view, layer_id)

    def _update(self, layer_id: str, **changes) -> DesignLayer | None:
        return self._store.update_layer(
            self._current_color, self._current_view, layer_id, **changes,
        )

    # ------------------------------------------------------------------
    # Transform editor / persistence
    # ------------------------------------------------------------------

    def open_transform_editor(self, layer_id: str) -> TransformHistoryManager | None:
        """Fine-tune one layer with undo/redo, seeded from its placement.

        Committed transforms are mirrored onto the layer. Reopening a layer
        returns its existing editor; the editor is closed when the layer is
        removed, moved to another view or the state is reloaded.
        """
        layer = self._find(layer_id)
        if layer is None:
            return None
        if layer_id in self._editors:
            return self._editors[layer_id][0]
        manager = TransformHistoryManager(
            design_id=layer.id,
            image_reference=layer.image_reference,
            asset_service=self._assets,
            data_service=self._data,
            initial=layer.placement,
            min_scale=self._config.min_scale,
            max_levels=self._config.max_history_levels,
            translator=self._tr,
            parent=self,
        )
        color, view = self._current_color, self._current_view

        def mirror(placement: Placement) -> None:
            self._store.update_layer(
                color, view, layer_id,
                position=placement.position,
                scale=placement.scale,
                rotation=placement.rotation,
            )

        manager.transform_changed.connect(mirror)
        self._editors[layer_id] = (manager, mirror)
        return manager

    def transform_editor(self, layer_id: str) -> TransformHistoryManager | None:
        """The open editor of a layer, if any."""
        entry = self._editors.get(layer_id)
        return entry[0] if entry is not None else None

    def close_transform_editor(self, layer_id: str) -> bool:
        """Detach and release a layer's editor. Returns False if none is open."""
        entry = self._editors.pop(layer_id, None)
        if entry is None:
            return False
        manager, mirror = entry
        manager.transform_changed.disconnect(mirror)
        # Python owns it again; released with the caller's last reference
        manager.setParent(None)
        logger.debug("Closed transform editor of %s", layer_id)
        return True

    def close_transform_editors(self) -> None:
        for layer_id in list(self._editors):
            self.close_transform_editor(layer_id)

    def export_state(self) -> dict:
        """Serialized placements of every (color, view) for this product."""
        return self._store.snapshot()

    def load_state(self, data: dict) -> None:
        self._store.restore(data)
        layers = self.current_layers
        self._set_active(layers[-1].id if layers else None)

    async def save_all(self) -> bool:
        """Persist the whole placement state through the data service.

        Returns:
            True on success; False if the service failed or cannot store
            product state.
        """
        if not isinstance(self._data, ProductStateStore):
            logger.warning("Data service cannot persist product state")
            return False
        try:
            await self._data.persist_product_state(self._product.id, self.export_state())
        except Exception:
            logger.exception("Saving placements for product %s failed", self._product.id)
            self.notification.emit(
                "error",
                self._tr.t("notify.product_save_failed", "Failed to save product placements"),
            )
            return False
        self.notification.emit(
            "info", self._tr.t("notify.product_saved", "Product placements saved"),
        )
        return True
