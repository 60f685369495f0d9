"""
Tests for common/entity_catalog.py - Entity wire data from draftsman.
"""

import pytest
from draftsman.data import entities

from wire_network.src.common.entity_catalog import (
    DEFAULT_CATALOG,
    ENTITY_CONFIG,
    EntityCatalog,
)
from wire_network.src.common.exceptions import InvalidWireColorError, UnknownEntityError

POLES = ["small-electric-pole", "medium-electric-pole", "big-electric-pole", "substation"]


def prototype_point(value):
    if isinstance(value, dict):
        return (value["x"], value["y"])
    return tuple(value)


class TestPoleData:
    """Tests for pole reach and type data."""

    @pytest.mark.parametrize(
        "name, reach",
        [
            ("small-electric-pole", 7.5),
            ("medium-electric-pole", 9),
            ("substation", 18),
        ],
    )
    def test_max_wire_distance(self, name, reach):
        assert DEFAULT_CATALOG.max_wire_distance(name) == reach
        assert DEFAULT_CATALOG.is_pole(name)

    @pytest.mark.parametrize("name", POLES)
    def test_reach_comes_from_prototype(self, name):
        expected = entities.raw[name]["maximum_wire_distance"]
        assert DEFAULT_CATALOG.max_wire_distance(name) == pytest.approx(expected)

    def test_non_pole_has_no_reach(self):
        assert not DEFAULT_CATALOG.is_pole("small-lamp")
        with pytest.raises(UnknownEntityError):
            DEFAULT_CATALOG.max_wire_distance("small-lamp")

    @pytest.mark.parametrize("name", POLES)
    def test_every_pole_has_four_anchor_sets(self, name):
        anchors = DEFAULT_CATALOG.get(name)["connection_points"]
        assert len(anchors) == 4
        assert all({"copper", "red", "green"} <= set(points) for points in anchors)

    def test_entries_carry_no_supply_area(self):
        for name in POLES:
            assert "supply_radius" not in DEFAULT_CATALOG.get(name)


class TestCatalogLookup:
    """Tests for general lookups."""

    def test_every_configured_entity_is_known(self):
        for name in ENTITY_CONFIG:
            assert name in DEFAULT_CATALOG

    def test_unknown_entity(self):
        with pytest.raises(UnknownEntityError) as exc_info:
            DEFAULT_CATALOG.get("rocket-silo")
        assert exc_info.value.name == "rocket-silo"

    def test_contains(self):
        assert "decider-combinator" in DEFAULT_CATALOG
        assert "rocket-silo" not in DEFAULT_CATALOG

    def test_entity_type(self):
        assert DEFAULT_CATALOG.entity_type("small-lamp") == "lamp"
        assert DEFAULT_CATALOG.entity_type("rocket-silo") is None

    def test_footprint(self):
        assert DEFAULT_CATALOG.get_footprint("big-electric-pole") == (2, 2)
        assert DEFAULT_CATALOG.get_footprint("arithmetic-combinator") == (1, 2)
        assert DEFAULT_CATALOG.get_footprint("rocket-silo") == (1, 1)


class TestWithPoles:
    """Tests for EntityCatalog.with_poles."""

    def test_adds_pole_kinds(self):
        catalog = EntityCatalog.with_poles({"test-pole": 12})
        assert catalog.is_pole("test-pole")
        assert catalog.max_wire_distance("test-pole") == 12
        assert "small-electric-pole" in catalog

    def test_without_defaults(self):
        catalog = EntityCatalog.with_poles({"test-pole": 12}, include_defaults=False)
        assert "small-electric-pole" not in catalog

    def test_anchors_at_center(self):
        catalog = EntityCatalog.with_poles({"test-pole": 12})
        for direction in (0, 2, 4, 6):
            assert catalog.wire_connection_point("test-pole", "red", 1, direction) == (0, 0)

    def test_default_catalog_untouched(self):
        EntityCatalog.with_poles({"test-pole": 12})
        assert "test-pole" not in DEFAULT_CATALOG


class TestWireConnectionPoint:
    """Tests for EntityCatalog.wire_connection_point."""

    @pytest.mark.parametrize("direction", [0, 2, 4, 6])
    def test_pole_anchor_per_direction(self, direction):
        points = entities.raw["small-electric-pole"]["connection_points"]
        expected = prototype_point(points[direction // 2]["wire"]["red"])
        point = DEFAULT_CATALOG.wire_connection_point(
            "small-electric-pole", "red", 1, direction
        )
        assert point == pytest.approx(expected)

    def test_combinator_sides_follow_direction(self):
        raw = entities.raw["arithmetic-combinator"]
        east_input = prototype_point(raw["input_connection_points"][1]["wire"]["red"])
        south_output = prototype_point(
            raw["output_connection_points"][2]["wire"]["green"]
        )
        assert DEFAULT_CATALOG.wire_connection_point(
            "arithmetic-combinator", "red", 1, 2
        ) == pytest.approx(east_input)
        assert DEFAULT_CATALOG.wire_connection_point(
            "arithmetic-combinator", "green", 2, 4
        ) == pytest.approx(south_output)

    def test_combinator_input_and_output_differ(self):
        point_in = DEFAULT_CATALOG.wire_connection_point("decider-combinator", "red", 1, 0)
        point_out = DEFAULT_CATALOG.wire_connection_point("decider-combinator", "red", 2, 0)
        assert point_in != point_out

    def test_missing_side_falls_back_to_first(self):
        first = DEFAULT_CATALOG.wire_connection_point("small-lamp", "green", 1, 0)
        assert DEFAULT_CATALOG.wire_connection_point("small-lamp", "green", 2, 0) == first

    def test_power_switch_copper_sides(self):
        left = DEFAULT_CATALOG.wire_connection_point("power-switch", "copper", 1, 0)
        right = DEFAULT_CATALOG.wire_connection_point("power-switch", "copper", 2, 0)
        assert left[0] < 0 < right[0]

    @pytest.mark.parametrize("color", ["red", "green"])
    def test_power_switch_circuit_hook_on_first_side(self, color):
        raw = entities.raw["power-switch"]["circuit_wire_connection_point"]
        expected = prototype_point(raw["wire"][color])
        point = DEFAULT_CATALOG.wire_connection_point("power-switch", color, 1, 0)
        assert point == pytest.approx(expected)

    def test_power_switch_second_side_is_copper_only(self):
        with pytest.raises(InvalidWireColorError):
            DEFAULT_CATALOG.wire_connection_point("power-switch", "red", 2, 0)

    def test_color_without_anchor(self):
        with pytest.raises(InvalidWireColorError):
            DEFAULT_CATALOG.wire_connection_point("small-lamp", "copper", 1, 0)

    def test_entity_without_wire_data(self):
        catalog = EntityCatalog({"chest": {"type": "container", "footprint": (1, 1)}})
        assert catalog.wire_connection_point("chest", "red", 1, 0) == (0.0, 0.0)
