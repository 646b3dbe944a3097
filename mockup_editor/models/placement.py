"""Placement data models for design layers on a product mockup.

Positions are normalized percentages of the product-view container,
measured from the top-left corner and anchored at the layer's visual
center. Scale 1.0 is the design image's natural size. Rotation is in
degrees, always kept in [0, 360).
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
import uuid

from mockup_editor.constants import (
    DEFAULT_POSITION_X,
    DEFAULT_POSITION_Y,
    DEFAULT_ROTATION,
    DEFAULT_SCALE,
    MIN_SCALE,
    POSITION_MAX,
    POSITION_MIN,
)
from mockup_editor.core.geometry import clamp, normalize_rotation


class ViewType(Enum):
    """Photographed side of a product."""
    FRONT = "front"
    BACK = "back"


class GestureMode(Enum):
    """Pointer gesture kinds. Exactly one is active per layer at a time."""
    DRAG = "drag"
    RESIZE = "resize"
    ROTATE = "rotate"


@dataclass(frozen=True)
class Point2D:
    """2D point — percent for placements, pixels for pointer events."""
    x: float = 0.0
    y: float = 0.0

    def __sub__(self, other: Point2D) -> Point2D:
        return Point2D(self.x - other.x, self.y - other.y)


@dataclass(frozen=True)
class Size:
    width: float = 0.0
    height: float = 0.0


@dataclass(frozen=True)
class ContainerRect:
    """Bounding box of the product-view container in pointer space [px]."""
    left: float = 0.0
    top: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @property
    def is_degenerate(self) -> bool:
        """True when the container has no area (e.g. layout collapse)."""
        return self.width <= 0 or self.height <= 0


def new_layer_id() -> str:
    """Fresh layer id (uuid4, never reused)."""
    return str(uuid.uuid4())


def _default_position() -> Point2D:
    return Point2D(DEFAULT_POSITION_X, DEFAULT_POSITION_Y)


@dataclass(frozen=True)
class Placement:
    """The {position, scale, rotation} triple of a design layer.

    Also used as the immutable history entry of the transform editor.
    """
    position: Point2D = field(default_factory=_default_position)
    scale: float = DEFAULT_SCALE
    rotation: float = DEFAULT_ROTATION

    def normalized(self, min_scale: float = MIN_SCALE) -> Placement:
        """Return a copy with every placement invariant enforced."""
        return Placement(
            position=Point2D(
                clamp(self.position.x, POSITION_MIN, POSITION_MAX),
                clamp(self.position.y, POSITION_MIN, POSITION_MAX),
            ),
            scale=max(min_scale, self.scale),
            rotation=normalize_rotation(self.rotation),
        )


@dataclass(frozen=True)
class DesignLayer:
    """One placed instance of a design image on a product view.

    Records are values: every edit produces a new record via
    ``dataclasses.replace`` so controllers can report changes upward
    without mutating shared state.

    Attributes:
        id: Unique identifier, assigned at creation and never reused.
        image_reference: Source design image URL/identifier (immutable).
        position: Normalized center position [%].
        scale: Size multiplier relative to the natural image size.
        rotation: Rotation [degree], in [0, 360).
        name: Display name.
        visible: Hidden layers keep their placement but are not painted.
        locked: Locked layers ignore pointer gestures.
        opacity: Paint opacity in [0, 1].
    """
    image_reference: str
    id: str = field(default_factory=new_layer_id)
    position: Point2D = field(default_factory=_default_position)
    scale: float = DEFAULT_SCALE
    rotation: float = DEFAULT_ROTATION
    name: str = ""
    visible: bool = True
    locked: bool = False
    opacity: float = 1.0

    @property
    def placement(self) -> Placement:
        return Placement(self.position, self.scale, self.rotation)

    def with_placement(self, placement: Placement) -> DesignLayer:
        return replace(
            self,
            position=placement.position,
            scale=placement.scale,
            rotation=placement.rotation,
        )

    def normalized(self, min_scale: float = MIN_SCALE) -> DesignLayer:
        """Return a copy with placement invariants and opacity bounds enforced."""
        layer = self.with_placement(self.placement.normalized(min_scale))
        if not 0.0 <= layer.opacity <= 1.0:
            layer = replace(layer, opacity=clamp(layer.opacity, 0.0, 1.0))
        return layer


@dataclass
class InteractionSession:
    """Transient state of one active gesture on one layer.

    Attributes:
        mode: Active gesture kind.
        anchor: Last observed pointer position [px]; deltas are incremental.
        target_layer_id: Layer being manipulated.
        start_layer: Pre-gesture snapshot, restored on cancel.
    """
    mode: GestureMode
    anchor: Point2D
    target_layer_id: str
    start_layer: DesignLayer


PlacementKey = tuple[str, ViewType]
