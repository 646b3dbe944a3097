"""Image effect descriptors sent to the asset service.

Effects are tagged records rather than open string-keyed maps; each type
knows which transformation parameters it contributes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class EffectType(Enum):
    GRAYSCALE = "grayscale"
    SEPIA = "sepia"
    BLUR = "blur"
    SHARPEN = "sharpen"
    REMOVE_BACKGROUND = "remove_background"
    OPTIMIZE = "optimize"


# Effects whose strength is meaningful (0-100)
_INTENSITY_EFFECTS = {EffectType.SEPIA, EffectType.BLUR, EffectType.SHARPEN}


@dataclass(frozen=True)
class ImageEffect:
    """A processing request for a design image.

    Attributes:
        type: Effect kind.
        intensity: Strength in [0, 100]; ignored by effects without one.
        params: Extra provider parameters (e.g. {"quality": 80}).
    """
    type: EffectType
    intensity: int = 50
    params: dict[str, str | int | float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not 0 <= self.intensity <= 100:
            raise ValueError(f"Effect intensity must be in [0, 100], got {self.intensity}")

    def to_params(self) -> dict[str, str | int | float]:
        """Transformation parameters in the order they are encoded."""
        if self.type in _INTENSITY_EFFECTS:
            result: dict[str, str | int | float] = {"e": f"{self.type.value}:{self.intensity}"}
        else:
            result = {"e": self.type.value}
        for key in sorted(self.params):
            result[key] = self.params[key]
        return result
