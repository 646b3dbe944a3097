"""Editor configuration — defaults from constants, overrides from app_settings."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import TYPE_CHECKING

from mockup_editor.constants import (
    DEFAULT_COLORS,
    DEFAULT_LANGUAGE,
    DUPLICATE_OFFSET_PCT,
    MAX_HISTORY_LEVELS,
    MIN_SCALE,
    NUDGE_STEP_PCT,
)

if TYPE_CHECKING:
    from mockup_editor.database.placement_repository import PlacementRepository

SETTINGS_PREFIX = "editor."


@dataclass
class EditorConfig:
    """Tunables of an editing session.

    Attributes:
        min_scale: Scale floor for resize gestures and patches.
        nudge_step_pct: Offset [%] applied per existing layer to new designs.
        duplicate_offset_pct: Offset [%] of a duplicated layer.
        max_history_levels: Bound of the transform history.
        colors: Fallback color variants when a product lists none.
        language: Notification language.
    """
    min_scale: float = MIN_SCALE
    nudge_step_pct: float = NUDGE_STEP_PCT
    duplicate_offset_pct: float = DUPLICATE_OFFSET_PCT
    max_history_levels: int = MAX_HISTORY_LEVELS
    colors: list[str] = field(default_factory=lambda: list(DEFAULT_COLORS))
    language: str = DEFAULT_LANGUAGE

    def __post_init__(self) -> None:
        if self.min_scale <= 0:
            raise ValueError(f"min_scale must be positive, got {self.min_scale}")
        if self.nudge_step_pct < 0 or self.duplicate_offset_pct < 0:
            raise ValueError("Layer offsets must not be negative")
        if self.max_history_levels < 1:
            raise ValueError(
                f"max_history_levels must be >= 1, got {self.max_history_levels}"
            )

    @classmethod
    def from_settings(cls, repo: PlacementRepository) -> EditorConfig:
        """Build a config, reading "editor.<field>" overrides from *repo*.

        Colors are stored comma-separated.
        """
        kwargs: dict = {}
        for f in fields(cls):
            raw = repo.get_setting(SETTINGS_PREFIX + f.name)
            if raw is None:
                continue
            if f.name == "colors":
                kwargs[f.name] = [c.strip() for c in raw.split(",") if c.strip()]
            elif f.name == "max_history_levels":
                kwargs[f.name] = int(raw)
            elif f.name == "language":
                kwargs[f.name] = raw
            else:
                kwargs[f.name] = float(raw)
        return cls(**kwargs)
