"""Placement store — single source of truth for (color, view) -> layers.

All mutations go through this store, which emits Qt signals so the view
surface and selectors stay in sync. Mutations are synchronous and
last-write-wins; unknown layer ids are silent no-ops because gesture
events can race with a removal.
"""

from __future__ import annotations

import logging
from dataclasses import fields, replace

from PyQt6.QtCore import QObject, pyqtSignal

from mockup_editor.constants import MIN_SCALE
from mockup_editor.core.serializers import dict_to_state, state_to_dict
from mockup_editor.models.placement import DesignLayer, PlacementKey, ViewType

logger = logging.getLogger(__name__)

_IMMUTABLE_FIELDS = frozenset({"id", "image_reference"})
_PATCHABLE_FIELDS = frozenset(f.name for f in fields(DesignLayer)) - _IMMUTABLE_FIELDS


class PlacementStore(QObject):
    """Ordered design layers per (color, view).

    Sequence order is paint order: later layers draw on top. Keys are
    created lazily, so reading an untouched (color, view) yields an empty
    sequence.

    Signals carry (color, view, layer_id); ``layers_changed`` fires after
    every mutation of a key.
    """

    layer_added = pyqtSignal(str, object, str)
    layer_updated = pyqtSignal(str, object, str)
    layer_removed = pyqtSignal(str, object, str)
    layers_changed = pyqtSignal(str, object)
    # Full reload (restore)
    state_reset = pyqtSignal()

    def __init__(self, min_scale: float = MIN_SCALE, parent: QObject | None = None):
        super().__init__(parent)
        self._state: dict[PlacementKey, list[DesignLayer]] = {}
        self._ids: set[str] = set()
        self._min_scale = min_scale

    # ------------------------------------------------------------------
    # Selectors
    # ------------------------------------------------------------------

    def get_layers(self, color: str, view: ViewType) -> tuple[DesignLayer, ...]:
        """Layers of (color, view) in paint order; empty if unset."""
        return tuple(self._state.get((color, view), ()))

    def find_layer(self, color: str, view: ViewType, layer_id: str) -> DesignLayer | None:
        for layer in self._state.get((color, view), ()):
            if layer.id == layer_id:
                return layer
        return None

    def keys(self) -> list[PlacementKey]:
        """Keys holding at least one layer."""
        return [key for key, layers in self._state.items() if layers]

    def layer_count(self) -> int:
        return sum(len(layers) for layers in self._state.values())

    def _index_of(self, color: str, view: ViewType, layer_id: str) -> int:
        for i, layer in enumerate(self._state.get((color, view), ())):
            if layer.id == layer_id:
                return i
        return -1

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_layer(self, color: str, view: ViewType, layer: DesignLayer) -> DesignLayer:
        """Append *layer* on top of (color, view).

        Raises:
            ValueError: If a layer with the same id already exists.
        """
        if layer.id in self._ids:
            raise ValueError(f"Duplicate layer id: {layer.id}")
        layer = layer.normalized(self._min_scale)
        self._state.setdefault((color, view), []).append(layer)
        self._ids.add(layer.id)
        self.layer_added.emit(color, view, layer.id)
        self.layers_changed.emit(color, view)
        return layer

    def update_layer(
        self, color: str, view: ViewType, layer_id: str, **changes,
    ) -> DesignLayer | None:
        """Replace the given fields of a layer, leaving the others untouched.

        Returns:
            The stored record, or None if the layer does not exist.

        Raises:
            ValueError: On an immutable or unknown field name.
        """
        bad = set(changes) - _PATCHABLE_FIELDS
        if bad:
            raise ValueError(f"Cannot patch layer fields: {sorted(bad)}")
        idx = self._index_of(color, view, layer_id)
        if idx < 0:
            logger.debug("update_layer: %s not in (%s, %s)", layer_id, color, view.value)
            return None
        layers = self._state[(color, view)]
        updated = replace(layers[idx], **changes).normalized(self._min_scale)
        layers[idx] = updated
        self.layer_updated.emit(color, view, layer_id)
        self.layers_changed.emit(color, view)
        return updated

    def replace_layer(
        self, color: str, view: ViewType, layer: DesignLayer,
    ) -> DesignLayer | None:
        """Store a whole record reported by a layer controller."""
        existing = self.find_layer(color, view, layer.id)
        if existing is None:
            logger.debug("replace_layer: %s not in (%s, %s)", layer.id, color, view.value)
            return None
        if layer.image_reference != existing.image_reference:
            raise ValueError(f"image_reference of layer {layer.id} is immutable")
        changes = {
            name: getattr(layer, name)
            for name in _PATCHABLE_FIELDS
            if getattr(layer, name) != getattr(existing, name)
        }
        if not changes:
            return existing
        return self.update_layer(color, view, layer.id, **changes)

    def remove_layer(self, color: str, view: ViewType, layer_id: str) -> bool:
        """Remove a layer. Returns False (no-op) if it does not exist."""
        idx = self._index_of(color, view, layer_id)
        if idx < 0:
            return False
        self._state[(color, view)].pop(idx)
        # Ids are never reused, so the id stays reserved.
        self.layer_removed.emit(color, view, layer_id)
        self.layers_changed.emit(color, view)
        return True

    def transfer_layer(
        self,
        color: str, view: ViewType, layer_id: str,
        target_color: str, target_view: ViewType,
    ) -> DesignLayer | None:
        """Move a layer (same id) on top of another (color, view)."""
        if (color, view) == (target_color, target_view):
            return None
        idx = self._index_of(color, view, layer_id)
        if idx < 0:
            return None
        layer = self._state[(color, view)].pop(idx)
        self.layer_removed.emit(color, view, layer_id)
        self.layers_changed.emit(color, view)
        self._state.setdefault((target_color, target_view), []).append(layer)
        self.layer_added.emit(target_color, target_view, layer_id)
        self.layers_changed.emit(target_color, target_view)
        return layer

    def move_layer(self, color: str, view: ViewType, layer_id: str, index: int) -> bool:
        """Move a layer to *index* in paint order (clamped to the sequence)."""
        idx = self._index_of(color, view, layer_id)
        if idx < 0:
            return False
        layers = self._state[(color, view)]
        target = max(0, min(index, len(layers) - 1))
        if target == idx:
            return False
        layers.insert(target, layers.pop(idx))
        self.layers_changed.emit(color, view)
        return True

    def bring_to_front(self, color: str, view: ViewType, layer_id: str) -> bool:
        return self.move_layer(color, view, layer_id, len(self._state.get((color, view), ())))

    def clear(self, color: str, view: ViewType) -> int:
        """Remove every layer of (color, view). Returns the count removed."""
        layers = self._state.get((color, view))
        if not layers:
            return 0
        removed = [layer.id for layer in layers]
        layers.clear()
        for layer_id in removed:
            self.layer_removed.emit(color, view, layer_id)
        self.layers_changed.emit(color, view)
        return len(removed)

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def snapshot(self) -> dict:
        """JSON-safe copy of the whole state."""
        return state_to_dict({k: v for k, v in self._state.items() if v})

    def restore(self, data: dict) -> None:
        """Replace the whole state from a snapshot."""
        state = dict_to_state(data)
        ids = [layer.id for layers in state.values() for layer in layers]
        if len(ids) != len(set(ids)):
            raise ValueError("Snapshot contains duplicate layer ids")
        self._state = {
            key: [layer.normalized(self._min_scale) for layer in layers]
            for key, layers in state.items()
        }
        self._ids.update(ids)
        self.state_reset.emit()
