"""Boundary contracts of the editor — asset service, data service, host container.

Implementations live outside the core (see UrlAssetService and
PlacementRepository for the bundled ones). Service calls are coroutines
so they never block the interaction loop.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from mockup_editor.models.effects import ImageEffect
from mockup_editor.models.placement import ContainerRect, Placement


@runtime_checkable
class AssetService(Protocol):
    """Image storage/transformation provider."""

    async def transform_image(self, image_reference: str, effect: ImageEffect) -> str:
        """Return the reference of the processed image."""
        ...

    def preload(self, image_reference: str) -> None:
        """Best-effort, fire-and-forget warm-up of an image."""
        ...


@runtime_checkable
class DataService(Protocol):
    """Persistence of placements and processed images."""

    async def persist_placement(self, design_id: str, placement: Placement) -> bool:
        ...

    async def persist_processed_image(self, design_id: str, image_reference: str) -> bool:
        ...


@runtime_checkable
class ProductStateStore(Protocol):
    """Optional data-service extension for whole-product placement state."""

    async def persist_product_state(self, product_id: str, state: dict) -> bool:
        ...


class ContainerProvider(Protocol):
    """Host UI shell query for the product-view bounding box."""

    def container_rect(self) -> ContainerRect:
        ...
