"""Serialization utilities — dataclass <-> JSON-safe dict conversion.

Handles Enum fields, nested frozen dataclasses and the (color, view)
keyed placement state. Used by PlacementStore snapshots and
PlacementRepository.
"""

from __future__ import annotations

import dataclasses
from enum import Enum
from typing import Any

from mockup_editor.constants import PLACEMENT_SCHEMA_VERSION
from mockup_editor.models.placement import (
    DesignLayer,
    Placement,
    PlacementKey,
    Point2D,
    ViewType,
)


# =====================================================================
# Generic helpers
# =====================================================================


def _serialize_value(val: Any) -> Any:
    """Convert a value to a JSON-safe type."""
    if val is None:
        return None
    if isinstance(val, Enum):
        return val.value
    if dataclasses.is_dataclass(val) and not isinstance(val, type):
        return _dataclass_to_dict(val)
    if isinstance(val, (list, tuple)):
        return [_serialize_value(v) for v in val]
    if isinstance(val, (int, float, str, bool)):
        return val
    return str(val)


def _dataclass_to_dict(obj: Any) -> dict:
    """Recursively convert a dataclass to a JSON-safe dict."""
    result = {}
    for f in dataclasses.fields(obj):
        result[f.name] = _serialize_value(getattr(obj, f.name))
    return result


def _dict_to_point(d: dict | None) -> Point2D:
    if not d:
        return Point2D()
    return Point2D(float(d.get("x", 0.0)), float(d.get("y", 0.0)))


# =====================================================================
# Placement / layer
# =====================================================================


def placement_to_dict(placement: Placement) -> dict:
    return _dataclass_to_dict(placement)


def dict_to_placement(d: dict) -> Placement:
    default = Placement()
    return Placement(
        position=_dict_to_point(d.get("position")) if "position" in d else default.position,
        scale=float(d.get("scale", default.scale)),
        rotation=float(d.get("rotation", default.rotation)),
    )


def layer_to_dict(layer: DesignLayer) -> dict:
    return _dataclass_to_dict(layer)


def dict_to_layer(d: dict) -> DesignLayer:
    """Rebuild a DesignLayer; unknown keys are ignored."""
    placement = dict_to_placement(d)
    return DesignLayer(
        image_reference=d["image_reference"],
        id=d["id"],
        position=placement.position,
        scale=placement.scale,
        rotation=placement.rotation,
        name=d.get("name", ""),
        visible=bool(d.get("visible", True)),
        locked=bool(d.get("locked", False)),
        opacity=float(d.get("opacity", 1.0)),
    )


# =====================================================================
# Whole placement state
# =====================================================================


def state_to_dict(state: dict[PlacementKey, list[DesignLayer]]) -> dict:
    """Nest the (color, view) map as {color: {view: [layer, ...]}}."""
    colors: dict[str, dict[str, list[dict]]] = {}
    for (color, view), layers in state.items():
        colors.setdefault(color, {})[view.value] = [layer_to_dict(layer) for layer in layers]
    return {"schema_version": PLACEMENT_SCHEMA_VERSION, "colors": colors}


def dict_to_state(d: dict) -> dict[PlacementKey, list[DesignLayer]]:
    """Inverse of state_to_dict.

    Raises:
        ValueError: On an unsupported schema version or unknown view name.
    """
    version = d.get("schema_version", PLACEMENT_SCHEMA_VERSION)
    if version != PLACEMENT_SCHEMA_VERSION:
        raise ValueError(f"Unsupported placement schema version: {version}")
    state: dict[PlacementKey, list[DesignLayer]] = {}
    for color, views in d.get("colors", {}).items():
        for view_name, layers in views.items():
            state[(color, ViewType(view_name))] = [dict_to_layer(item) for item in layers]
    return state
