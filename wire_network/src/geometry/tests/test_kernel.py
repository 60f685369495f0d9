"""
Tests for geometry/kernel.py - Angles, distances and Delaunay triangulation.
"""

import math

import numpy as np
import pytest

from wire_network.src.geometry.kernel import (
    Point,
    angle_degrees,
    euclidean_distance,
    manhattan_distance,
    point_in_circle,
    triangulate,
    xy,
)
from wire_network.src.network.topology import Pole


class TestXY:
    """Tests for coordinate extraction."""

    def test_point(self):
        assert xy(Point(1, 2)) == (1.0, 2.0)

    def test_tuple(self):
        assert xy((3, 4.5)) == (3.0, 4.5)

    def test_object_with_attributes(self):
        pole = Pole(entity_number=1, name="test-pole", x=-2, y=7)
        assert xy(pole) == (-2.0, 7.0)


class TestAngleDegrees:
    """Tests for angle_degrees."""

    @pytest.mark.parametrize(
        "x, y, expected",
        [(1, 0, 0), (0, 1, 90), (-1, 0, 180), (0, -1, 270), (1, 1, 45)],
    )
    def test_axis_angles(self, x, y, expected):
        assert angle_degrees(0, 0, x, y) == pytest.approx(expected)

    def test_relative_to_center(self):
        assert angle_degrees(5, 5, 5, 10) == pytest.approx(90)

    def test_range(self):
        """Angles always land in [0, 360)."""
        for step in range(-16, 17):
            theta = step * math.pi / 8
            angle = angle_degrees(0, 0, math.cos(theta), math.sin(theta))
            assert 0 <= angle < 360

    def test_full_turn_folds_to_zero(self):
        """A vector a hair below the X axis after a full turn is not 360."""
        angle = angle_degrees(0, 0, math.cos(2 * math.pi), math.sin(2 * math.pi))
        assert 0 <= angle < 360
        assert angle == pytest.approx(0)


class TestDistances:
    """Tests for the distance helpers."""

    def test_euclidean(self):
        assert euclidean_distance((0, 0), (3, 4)) == pytest.approx(5)

    def test_manhattan(self):
        assert manhattan_distance((0, 0), (3, -4)) == 7

    def test_point_in_circle_inside(self):
        assert point_in_circle((0, 0), (3, 4), 5.5)

    def test_point_in_circle_boundary_is_inside(self):
        assert point_in_circle((0, 0), (5, 0), 5)
        assert point_in_circle((0, 0), (3, 4), 5)

    def test_point_in_circle_outside(self):
        assert not point_in_circle((0, 0), (5.01, 0), 5)


class TestTriangulate:
    """Tests for triangulate."""

    def test_too_few_points(self):
        assert list(triangulate([])) == []
        assert list(triangulate([(0, 0), (1, 0)])) == []

    def test_collinear_points(self):
        assert list(triangulate([(0, 0), (1, 1), (2, 2), (3, 3)])) == []

    def test_single_triangle(self):
        points = [(0, 0), (10, 0), (5, 8)]
        triangles = list(triangulate(points))
        assert len(triangles) == 1
        assert set(triangles[0]) == set(points)

    def test_yields_input_objects(self):
        poles = [
            Pole(1, "test-pole", 0, 0),
            Pole(2, "test-pole", 10, 0),
            Pole(3, "test-pole", 5, 8),
        ]
        (triangle,) = list(triangulate(poles))
        assert all(any(vertex is pole for pole in poles) for vertex in triangle)

    def test_square_has_two_triangles(self):
        triangles = list(triangulate([(0, 0), (4, 0), (0, 3), (4, 3.5)]))
        assert len(triangles) == 2

    def test_is_lazy(self):
        result = triangulate([(0, 0), (10, 0), (5, 8)])
        assert not isinstance(result, list)
        assert len(next(iter(result))) == 3

    def test_empty_circumcircles(self):
        """No input point lies strictly inside a triangle's circumcircle."""
        rng = np.random.default_rng(7)
        points = [tuple(p) for p in rng.uniform(0, 50, size=(40, 2))]
        for a, b, c in triangulate(points):
            (ax, ay), (bx, by), (cx, cy) = a, b, c
            d = 2 * (ax * (by - cy) + bx * (cy - ay) + cx * (ay - by))
            ux = (
                (ax**2 + ay**2) * (by - cy)
                + (bx**2 + by**2) * (cy - ay)
                + (cx**2 + cy**2) * (ay - by)
            ) / d
            uy = (
                (ax**2 + ay**2) * (cx - bx)
                + (bx**2 + by**2) * (ax - cx)
                + (cx**2 + cy**2) * (bx - ax)
            ) / d
            radius = math.hypot(ax - ux, ay - uy)
            for p in points:
                if p in (a, b, c):
                    continue
                assert math.hypot(p[0] - ux, p[1] - uy) >= radius - 1e-7
