"""
Tests for network/orientation.py - Pole facing directions.
"""

import pytest

from wire_network.src.blueprint.entity import Entity
from wire_network.src.common.diagnostics import ProgramDiagnostics
from wire_network.src.geometry.kernel import Point
from wire_network.src.network.orientation import (
    PoleOrientationResolver,
    angle_to_sector,
    resolve_pole_direction,
)


class TestAngleToSector:
    """Tests for angle_to_sector."""

    @pytest.mark.parametrize(
        "angle, sector",
        [(90, 0), (270, 0), (0, 2), (180, 2), (45, 1), (225, 1), (135, 3), (315, 3)],
    )
    def test_sectors(self, angle, sector):
        assert angle_to_sector(angle) == sector

    def test_always_in_range(self):
        for angle in range(0, 360, 5):
            assert 0 <= angle_to_sector(angle) < 4


class TestResolvePoleDirection:
    """Tests for resolve_pole_direction (screen coordinates, Y down)."""

    def test_no_neighbors(self):
        assert resolve_pole_direction((0, 0), []) == 0

    def test_north_and_south_in_either_order(self):
        north, south = (0, -5), (0, 5)
        assert resolve_pole_direction((0, 0), [north, south]) == 0
        assert resolve_pole_direction((0, 0), [south, north]) == 0

    def test_east_west_neighbors(self):
        assert resolve_pole_direction((0, 0), [(5, 0)]) == 4
        assert resolve_pole_direction((0, 0), [(-5, 0)]) == 4
        assert resolve_pole_direction((0, 0), [(5, 0), (-5, 0)]) == 4

    def test_mean_of_sectors(self):
        assert resolve_pole_direction((0, 0), [(0, -5), (5, 0)]) == 2

    def test_mean_is_floored(self):
        # north votes 0, north-east votes 1
        assert resolve_pole_direction((0, 0), [(0, -5), (5, -5)]) == 0

    def test_relative_to_center(self):
        assert resolve_pole_direction(Point(10, 10), [Point(15, 10)]) == 4

    def test_result_is_even_direction(self):
        neighbors = [(3, -4), (-2, 6), (7, 1), (-5, -5)]
        for count in range(1, len(neighbors) + 1):
            assert resolve_pole_direction((0, 0), neighbors[:count]) in (0, 2, 4, 6)


class TestPoleOrientationResolver:
    """Tests for PoleOrientationResolver."""

    def setup_method(self):
        self.entities = {
            1: Entity(1, "test-pole", Point(0, 0)),
            2: Entity(2, "test-pole", Point(5, 0)),
            3: Entity(3, "test-pole", Point(-5, 0)),
        }
        self.diagnostics = ProgramDiagnostics()
        self.resolver = PoleOrientationResolver(self.entities.get, self.diagnostics)

    def test_direction_for(self):
        assert self.resolver.direction_for(1, Point(0, 0), [2, 3]) == 4

    def test_stale_neighbor_is_ignored(self):
        assert self.resolver.direction_for(1, Point(0, 0), [2, 99]) == 4
        assert self.diagnostics.warning_count() == 1
        assert "stale neighbor 99" in self.diagnostics.get_messages()[0]

    def test_only_stale_neighbors(self):
        assert self.resolver.direction_for(1, Point(0, 0), [98, 99]) == 0
        assert self.diagnostics.warning_count() == 2

    def test_live_neighbor_positions(self):
        positions = self.resolver.live_neighbor_positions(1, [3, 2])
        assert positions == [Point(-5, 0), Point(5, 0)]
