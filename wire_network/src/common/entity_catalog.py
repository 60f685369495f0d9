from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from draftsman.data import entities as draftsman_entities

from .constants import ELECTRIC_POLE_TYPE
from .exceptions import InvalidWireColorError, UnknownEntityError

"""Wire data for wire-capable entities, read from draftsman's prototype dump."""


Offset = Tuple[float, float]
Anchors = Tuple[Dict[str, Offset], ...]

# Entities taking part in wiring. ``sides`` names, per circuit side, the
# prototype keys holding that side's wire anchors.
ENTITY_CONFIG: Dict[str, Dict[str, Any]] = {
    "small-electric-pole": {"type": ELECTRIC_POLE_TYPE, "footprint": (1, 1)},
    "medium-electric-pole": {"type": ELECTRIC_POLE_TYPE, "footprint": (1, 1)},
    "big-electric-pole": {"type": ELECTRIC_POLE_TYPE, "footprint": (2, 2)},
    "substation": {"type": ELECTRIC_POLE_TYPE, "footprint": (2, 2)},
    "arithmetic-combinator": {
        "type": "arithmetic_combinator",
        "footprint": (1, 2),
        "sides": {1: ("input_connection_points",), 2: ("output_connection_points",)},
    },
    "decider-combinator": {
        "type": "decider_combinator",
        "footprint": (1, 2),
        "sides": {1: ("input_connection_points",), 2: ("output_connection_points",)},
    },
    "constant-combinator": {
        "type": "constant_combinator",
        "footprint": (1, 1),
        "sides": {1: ("circuit_wire_connection_points",)},
    },
    "small-lamp": {
        "type": "lamp",
        "footprint": (1, 1),
        "sides": {1: ("circuit_wire_connection_point", "circuit_connector")},
    },
    # Copper goes in on the left and out on the right, the circuit hook
    # shares side 1 with the left copper hook
    "power-switch": {
        "type": "power_switch",
        "footprint": (2, 2),
        "sides": {
            1: ("left_wire_connection_point", "circuit_wire_connection_point"),
            2: ("right_wire_connection_point",),
        },
    },
}


def _vector(value: Any) -> Offset:
    if isinstance(value, Mapping):
        return (float(value.get("x", 0)), float(value.get("y", 0)))
    return (float(value[0]), float(value[1]))


def _wire_points(point: Mapping[str, Any]) -> Dict[str, Offset]:
    """Map each wire color of a prototype connection point to its offset."""
    # Circuit connector definitions wrap the point in "points"
    point = point.get("points", point)
    wire = point.get("wire", {})
    return {color: _vector(offset) for color, offset in wire.items()}


def _anchor_sets(value: Any) -> Anchors:
    """Per-direction anchors of one prototype key (one set or four)."""
    if isinstance(value, Sequence):
        return tuple(_wire_points(point) for point in value)
    return (_wire_points(value),)


def _merge_anchor_sets(sets: Sequence[Anchors]) -> Anchors:
    count = max(len(anchors) for anchors in sets)
    merged = []
    for index in range(count):
        points: Dict[str, Offset] = {}
        for anchors in sets:
            points.update(anchors[index % len(anchors)])
        merged.append(points)
    return tuple(merged)


def _resolve_entry(name: str, config: Mapping[str, Any]) -> Dict[str, Any]:
    """Combine an entry's config with the prototype data draftsman ships."""
    prototype = draftsman_entities.raw.get(name)
    if prototype is None:
        raise UnknownEntityError(f"{name} (no prototype data)")

    entry: Dict[str, Any] = {
        "type": config["type"],
        "footprint": tuple(config["footprint"]),
    }
    if config["type"] == ELECTRIC_POLE_TYPE:
        entry["maximum_wire_distance"] = float(prototype["maximum_wire_distance"])
        entry["connection_points"] = _anchor_sets(prototype["connection_points"])
        return entry

    circuit_points: Dict[int, Anchors] = {}
    for side, keys in config.get("sides", {}).items():
        sets = [_anchor_sets(prototype[key]) for key in keys if key in prototype]
        if sets:
            circuit_points[side] = _merge_anchor_sets(sets)
    entry["circuit_points"] = circuit_points
    return entry


def _test_pole(radius: float) -> Dict[str, Any]:
    return {
        "type": ELECTRIC_POLE_TYPE,
        "footprint": (1, 1),
        "maximum_wire_distance": radius,
        "connection_points": tuple(
            {"copper": (0.0, 0.0), "red": (0.0, 0.0), "green": (0.0, 0.0)}
            for _ in range(4)
        ),
    }


class EntityCatalog:
    """Lookup of entity kind data used by the wiring subsystem."""

    def __init__(self, entries: Optional[Mapping[str, Dict[str, Any]]] = None):
        if entries is None:
            entries = {
                name: _resolve_entry(name, config)
                for name, config in ENTITY_CONFIG.items()
            }
        self._entries: Dict[str, Dict[str, Any]] = dict(entries)

    @classmethod
    def with_poles(
        cls, radii: Mapping[str, float], include_defaults: bool = True
    ) -> "EntityCatalog":
        """Create a catalog with extra pole kinds of the given wire reach.

        The extra poles attach every wire at their center.
        """
        entries: Dict[str, Dict[str, Any]] = (
            dict(DEFAULT_CATALOG._entries) if include_defaults else {}
        )
        for name, radius in radii.items():
            entries[name] = _test_pole(radius)
        return cls(entries)

    def __contains__(self, name: str) -> bool:
        return name in self._entries

    def get(self, name: str) -> Dict[str, Any]:
        """Return the raw entry for ``name``."""
        entry = self._entries.get(name)
        if entry is None:
            raise UnknownEntityError(name)
        return entry

    def entity_type(self, name: str) -> Optional[str]:
        entry = self._entries.get(name)
        return entry.get("type") if entry else None

    def is_pole(self, name: str) -> bool:
        return self.entity_type(name) == ELECTRIC_POLE_TYPE

    def max_wire_distance(self, name: str) -> float:
        """Maximum passive wire reach of a pole kind, in tiles."""
        entry = self.get(name)
        reach = entry.get("maximum_wire_distance")
        if reach is None:
            raise UnknownEntityError(f"{name} (not a pole)")
        return float(reach)

    def get_footprint(self, name: str) -> Tuple[int, int]:
        entry = self._entries.get(name, {})
        width, height = entry.get("footprint", (1, 1))
        return (int(width), int(height))

    def wire_connection_point(
        self, name: str, color: str, side: int, direction: int
    ) -> Offset:
        """Offset in tiles from the entity center where a wire attaches.

        Anchors are looked up by color and circuit side, then by direction
        for entities with one anchor set per direction. Poles have a single
        side. A side the entity lacks falls back to its first side; entities
        without wire data attach at their center.
        """
        entry = self.get(name)

        pole_points = entry.get("connection_points")
        if pole_points:
            anchors = pole_points
        else:
            circuit_points = entry.get("circuit_points")
            if not circuit_points:
                return (0.0, 0.0)
            anchors = circuit_points.get(side) or circuit_points[min(circuit_points)]

        points = anchors[(direction // 2) % len(anchors)]
        if color not in points:
            raise InvalidWireColorError(color)
        return points[color]


DEFAULT_CATALOG = EntityCatalog()
