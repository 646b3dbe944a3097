"""URL-based asset service — builds transformation URLs for a storage host.

Processed images are addressed as
``{base_url}/transform/{file_id}/{key_value,...}``; nothing is fetched
here, the storage host renders on first request.
"""

from __future__ import annotations

import logging
from urllib.parse import quote, urlsplit

from mockup_editor.models.effects import ImageEffect

logger = logging.getLogger(__name__)


def file_id_from_reference(image_reference: str) -> str:
    """Storage file id of an image reference (last path segment, no extension)."""
    path = urlsplit(image_reference).path or image_reference
    name = path.rstrip("/").rsplit("/", 1)[-1]
    if not name:
        raise ValueError(f"Image reference has no file name: {image_reference!r}")
    return name.rsplit(".", 1)[0] if "." in name else name


class UrlAssetService:
    """AssetService that encodes effects into storage transformation URLs.

    Preloaded references are remembered so repeated preload requests for
    the same image are cheap.
    """

    def __init__(self, base_url: str):
        if not base_url:
            raise ValueError("base_url must not be empty")
        self._base_url = base_url.rstrip("/")
        self._preloaded: set[str] = set()

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def preloaded(self) -> frozenset[str]:
        return frozenset(self._preloaded)

    def build_transform_url(self, image_reference: str, effect: ImageEffect) -> str:
        file_id = file_id_from_reference(image_reference)
        options = ",".join(
            f"{key}_{quote(str(value), safe=':')}"
            for key, value in effect.to_params().items()
        )
        return f"{self._base_url}/transform/{quote(file_id)}/{options}"

    async def transform_image(self, image_reference: str, effect: ImageEffect) -> str:
        url = self.build_transform_url(image_reference, effect)
        logger.debug("Transform %s with %s -> %s", image_reference, effect.type.value, url)
        return url

    def preload(self, image_reference: str) -> None:
        if image_reference in self._preloaded:
            return
        self._preloaded.add(image_reference)
        logger.debug("Preloading %s", image_reference)
