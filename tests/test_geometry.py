"""Tests for placement geometry helpers and placement models."""

import math

import pytest

from mockup_editor.core.geometry import (
    angle_between,
    clamp,
    normalize_rotation,
    percent_to_container,
    to_container_percent,
)
from mockup_editor.models.placement import (
    ContainerRect,
    DesignLayer,
    Placement,
    Point2D,
)


class TestClamp:
    def test_inside(self):
        assert clamp(42.0, 0.0, 100.0) == 42.0

    def test_below(self):
        assert clamp(-5.0, 0.0, 100.0) == 0.0

    def test_above(self):
        assert clamp(120.0, 0.0, 100.0) == 100.0


class TestContainerPercent:
    def test_basic_conversion(self):
        assert to_container_percent(40.0, 400.0) == pytest.approx(10.0)

    def test_negative_delta(self):
        assert to_container_percent(-100.0, 500.0) == pytest.approx(-20.0)

    @pytest.mark.parametrize("size", [0.0, -1.0])
    def test_non_positive_size_rejected(self, size):
        with pytest.raises(ValueError):
            to_container_percent(10.0, size)

    def test_percent_to_container_uses_origin(self):
        rect = ContainerRect(left=10.0, top=20.0, width=200.0, height=100.0)
        assert percent_to_container(Point2D(50.0, 50.0), rect) == (110.0, 70.0)


class TestNormalizeRotation:
    @pytest.mark.parametrize("deg, expected", [
        (0.0, 0.0),
        (360.0, 0.0),
        (370.0, 10.0),
        (-10.0, 350.0),
        (-720.0, 0.0),
    ])
    def test_wraps(self, deg, expected):
        assert normalize_rotation(deg) == pytest.approx(expected)

    def test_tiny_negative_never_reaches_360(self):
        result = normalize_rotation(-1e-20)
        assert 0.0 <= result < 360.0


class TestAngleBetween:
    def test_quarter_turn_clockwise_in_screen_space(self):
        center = Point2D(0.0, 0.0)
        # +x to +y (y grows downward on screen)
        assert angle_between(center, Point2D(1.0, 0.0), Point2D(0.0, 1.0)) == pytest.approx(90.0)

    def test_negative_sweep(self):
        center = Point2D(0.0, 0.0)
        assert angle_between(center, Point2D(0.0, 1.0), Point2D(1.0, 0.0)) == pytest.approx(-90.0)

    def test_branch_cut_is_small_angle(self):
        center = Point2D(0.0, 0.0)
        a = Point2D(-1.0, -0.01)
        b = Point2D(-1.0, 0.01)
        swept = angle_between(center, a, b)
        assert abs(swept) < 2.0

    def test_pointer_on_center_is_finite(self):
        center = Point2D(5.0, 5.0)
        swept = angle_between(center, center, Point2D(6.0, 5.0))
        assert math.isfinite(swept)


class TestPlacementModel:
    def test_default_placement_centered(self):
        p = Placement()
        assert p.position == Point2D(50.0, 50.0)
        assert p.scale == 1.0
        assert p.rotation == 0.0

    def test_normalized_enforces_invariants(self):
        p = Placement(Point2D(-3.0, 140.0), scale=0.01, rotation=-90.0).normalized()
        assert p.position == Point2D(0.0, 100.0)
        assert p.scale == 0.1
        assert p.rotation == pytest.approx(270.0)

    def test_layer_ids_unique(self):
        ids = {DesignLayer(image_reference="a.png").id for _ in range(100)}
        assert len(ids) == 100

    def test_layer_opacity_clamped(self):
        layer = DesignLayer(image_reference="a.png", opacity=1.5).normalized()
        assert layer.opacity == 1.0

    def test_with_placement_keeps_identity(self):
        layer = DesignLayer(image_reference="a.png")
        moved = layer.with_placement(Placement(Point2D(10.0, 20.0), 2.0, 45.0))
        assert moved.id == layer.id
        assert moved.image_reference == "a.png"
        assert moved.placement == Placement(Point2D(10.0, 20.0), 2.0, 45.0)

    def test_degenerate_container(self):
        assert ContainerRect(0, 0, 0, 100).is_degenerate
        assert ContainerRect(0, 0, 100, 0).is_degenerate
        assert not ContainerRect(0, 0, 100, 100).is_degenerate
