"""Shared fixtures — headless Qt core application and fake services."""

import sys

import pytest
from PyQt6.QtCore import QCoreApplication

from mockup_editor.models.placement import ContainerRect

# QCoreApplication instance needed for QObject / signals
_app = QCoreApplication.instance() or QCoreApplication(sys.argv)


class FakeContainer:
    """Host container whose bounding box tests can resize."""

    def __init__(self, width: float = 400.0, height: float = 400.0,
                 left: float = 0.0, top: float = 0.0):
        self.rect = ContainerRect(left, top, width, height)

    def container_rect(self) -> ContainerRect:
        return self.rect

    def resize(self, width: float, height: float) -> None:
        self.rect = ContainerRect(self.rect.left, self.rect.top, width, height)


class FakeAssetService:
    """Records preloads and returns predictable processed references."""

    def __init__(self, fail: bool = False):
        self.preloaded: list[str] = []
        self.transforms: list[tuple] = []
        self.fail = fail

    async def transform_image(self, image_reference, effect):
        self.transforms.append((image_reference, effect))
        if self.fail:
            raise ConnectionError("asset service unavailable")
        return f"{image_reference}?e={effect.type.value}"

    def preload(self, image_reference):
        self.preloaded.append(image_reference)


class FakeDataService:
    """In-memory data service that can be told to fail."""

    def __init__(self, fail: bool = False):
        self.placements: dict = {}
        self.images: dict = {}
        self.states: dict = {}
        self.fail = fail

    async def persist_placement(self, design_id, placement):
        if self.fail:
            raise ConnectionError("data service unavailable")
        self.placements[design_id] = placement
        return True

    async def persist_processed_image(self, design_id, image_reference):
        if self.fail:
            raise ConnectionError("data service unavailable")
        self.images[design_id] = image_reference
        return True

    async def persist_product_state(self, product_id, state):
        if self.fail:
            raise ConnectionError("data service unavailable")
        self.states[product_id] = state
        return True


@pytest.fixture
def container():
    return FakeContainer()


@pytest.fixture
def assets():
    return FakeAssetService()


@pytest.fixture
def data():
    return FakeDataService()


@pytest.fixture
def failing_assets():
    return FakeAssetService(fail=True)


@pytest.fixture
def failing_data():
    return FakeDataService(fail=True)
