"""Service layer — boundary contracts and the bundled asset service."""

from mockup_editor.services.asset_service import UrlAssetService, file_id_from_reference
from mockup_editor.services.interfaces import (
    AssetService,
    ContainerProvider,
    DataService,
    ProductStateStore,
)

__all__ = [
    "AssetService",
    "ContainerProvider",
    "DataService",
    "ProductStateStore",
    "UrlAssetService",
    "file_id_from_reference",
]
