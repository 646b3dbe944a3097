"""Base product mockup model.

Lightweight dataclass — catalog data is owned by the external data service.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from mockup_editor.constants import DEFAULT_COLORS
from mockup_editor.models.placement import ViewType


@dataclass
class ProductMockup:
    """Product whose color variants and views carry design placements.

    Attributes:
        id: Product identifier in the data service.
        name: Display name.
        colors: Selectable color variants (first is the default).
        images: Base mockup image reference per color and view.
    """
    id: str = ""
    name: str = ""
    colors: list[str] = field(default_factory=lambda: list(DEFAULT_COLORS))
    images: dict[str, dict[ViewType, str]] = field(default_factory=dict)

    @property
    def default_color(self) -> str:
        return self.colors[0] if self.colors else DEFAULT_COLORS[0]

    def image_for(self, color: str, view: ViewType) -> str | None:
        """Base image for (color, view), or None if the catalog has none."""
        return self.images.get(color, {}).get(view)
