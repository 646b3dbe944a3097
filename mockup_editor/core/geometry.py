"""Geometry helpers for placement math — clamping, angles, percent conversion.

Pure functions, no state.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from mockup_editor.constants import FULL_TURN_DEG

if TYPE_CHECKING:
    from mockup_editor.models.placement import ContainerRect, Point2D


def clamp(value: float, lo: float, hi: float) -> float:
    """Restrict *value* to [lo, hi]."""
    return max(lo, min(hi, value))


def to_container_percent(delta: float, container_size: float) -> float:
    """Convert a pixel delta into a percent-of-container delta.

    Raises:
        ValueError: If container_size is not positive.
    """
    if container_size <= 0:
        raise ValueError(f"Container size must be positive, got {container_size}")
    return delta / container_size * 100.0


def normalize_rotation(degrees: float) -> float:
    """Wrap an angle into [0, 360)."""
    result = degrees % FULL_TURN_DEG
    # -1e-20 % 360 == 360.0 in floating point
    if result >= FULL_TURN_DEG:
        result = 0.0
    return result


def angle_between(center: Point2D, a: Point2D, b: Point2D) -> float:
    """Signed angle [degree] swept from center->a to center->b.

    Wrapped into (-180, 180] so crossing the atan2 branch cut does not
    produce a near-full-turn jump.
    """
    start = math.atan2(a.y - center.y, a.x - center.x)
    end = math.atan2(b.y - center.y, b.x - center.x)
    swept = math.degrees(end - start)
    if swept > 180.0:
        swept -= FULL_TURN_DEG
    elif swept <= -180.0:
        swept += FULL_TURN_DEG
    return swept


def percent_to_container(position: Point2D, rect: ContainerRect) -> tuple[float, float]:
    """Normalized position [%] -> pointer-space coordinates [px]."""
    return (
        rect.left + position.x / 100.0 * rect.width,
        rect.top + position.y / 100.0 * rect.height,
    )
