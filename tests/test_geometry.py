"""
Tests for geometry primitives.
"""

import math

import pytest

from tactical_board.core.geometry import (
    bounding_box,
    catmull_rom_path,
    distance,
    lerp,
    lerp_position,
    point_segment_distance,
    polyline_distance,
)
from tactical_board.core.models import Position


class TestDistance:
    """Test planar distance and interpolation."""

    def test_distance_345(self):
        assert distance(Position(0, 0), Position(3, 4)) == pytest.approx(5.0)

    def test_distance_ignores_height(self):
        assert distance(Position(0, 0, 0), Position(0, 2, 10)) == pytest.approx(2.0)

    def test_lerp_endpoints(self):
        assert lerp(2.0, 6.0, 0.0) == 2.0
        assert lerp(2.0, 6.0, 1.0) == 6.0
        assert lerp(2.0, 6.0, 0.25) == 3.0

    def test_lerp_position_all_axes(self):
        p = lerp_position(Position(0, 0, 0), Position(10, -10, 2), 0.5)
        assert p == Position(5.0, -5.0, 1.0)


class TestSegmentDistance:
    """Test nearest-point distances used by the eraser."""

    def test_perpendicular_projection(self):
        d = point_segment_distance(Position(5, 3), Position(0, 0), Position(10, 0))
        assert d == pytest.approx(3.0)

    def test_clamped_to_endpoint(self):
        d = point_segment_distance(Position(13, 4), Position(0, 0), Position(10, 0))
        assert d == pytest.approx(5.0)

    def test_degenerate_segment(self):
        d = point_segment_distance(Position(3, 4), Position(0, 0), Position(0, 0))
        assert d == pytest.approx(5.0)

    def test_polyline_uses_nearest_segment(self):
        points = [Position(0, 0), Position(10, 0), Position(10, 10)]
        assert polyline_distance(Position(12, 5), points) == pytest.approx(2.0)

    def test_polyline_empty_is_infinite(self):
        assert math.isinf(polyline_distance(Position(0, 0), []))


class TestCatmullRom:
    """Test freehand smoothing."""

    def test_passes_through_endpoints(self):
        points = [Position(0, 0), Position(5, 5), Position(10, 0)]
        path = catmull_rom_path(points, 6)
        assert len(path) == 7
        assert path[0].x == pytest.approx(0.0) and path[0].y == pytest.approx(0.0)
        assert path[-1].x == pytest.approx(10.0) and path[-1].y == pytest.approx(0.0)

    def test_passes_through_control_points(self):
        points = [Position(0, 0), Position(5, 5), Position(10, 0)]
        path = catmull_rom_path(points, 4)
        # u = 2/4 * 2 segments = 1.0 lands on the middle control point
        assert path[2].x == pytest.approx(5.0)
        assert path[2].y == pytest.approx(5.0)

    def test_single_point_unchanged(self):
        assert catmull_rom_path([Position(1, 1)], 10) == [Position(1, 1)]


class TestBoundingBox:

    def test_bounds(self):
        box = bounding_box([Position(3, -2), Position(-1, 4), Position(0, 0)])
        assert box == (-1, -2, 3, 4)
