from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional

from wire_network.src.common.constants import CIRCUIT_WIRE_COLORS, WIRE_COLOR_PALETTE
from wire_network.src.common.exceptions import InvalidWireColorError

"""Ledger of manually authored wire connections."""


@dataclass(frozen=True)
class WireConnection:
    """An explicit wire between two entity connection points."""

    color: str  # copper, red or green
    entity_number_1: int
    entity_number_2: int
    entity_side_1: int = 1
    entity_side_2: int = 1

    def normalized(self) -> "WireConnection":
        """Same connection with the lower (entity, side) endpoint first."""
        first = (self.entity_number_1, self.entity_side_1)
        second = (self.entity_number_2, self.entity_side_2)
        if first <= second:
            return self
        return WireConnection(
            color=self.color,
            entity_number_1=self.entity_number_2,
            entity_number_2=self.entity_number_1,
            entity_side_1=self.entity_side_2,
            entity_side_2=self.entity_side_1,
        )

    @property
    def hash(self) -> str:
        return connection_hash(self)

    def touches(self, entity_number: int) -> bool:
        return entity_number in (self.entity_number_1, self.entity_number_2)


def connection_hash(connection: WireConnection) -> str:
    """Canonical key: color, then both endpoints in ascending order."""
    c = connection.normalized()
    return (
        f"{c.color}-{c.entity_number_1}-{c.entity_side_1}"
        f"-{c.entity_number_2}-{c.entity_side_2}"
    )


def select_connections(
    connections: Iterable[WireConnection], entity_numbers: Iterable[int]
) -> List[WireConnection]:
    """Connections with both ends inside ``entity_numbers``."""
    selected = set(entity_numbers)
    return [
        c
        for c in connections
        if c.entity_number_1 in selected and c.entity_number_2 in selected
    ]


def remap_connections(
    connections: Iterable[WireConnection], id_map: Mapping[int, int]
) -> List[WireConnection]:
    """Renumber connections onto new entities, dropping any that leave the map."""
    remapped = []
    for c in select_connections(connections, id_map.keys()):
        remapped.append(
            replace(
                c,
                entity_number_1=id_map[c.entity_number_1],
                entity_number_2=id_map[c.entity_number_2],
            )
        )
    return remapped


Listener = Callable[[str, WireConnection], None]


class WireConnections:
    """All explicit connections of a blueprint, keyed by connection hash."""

    def __init__(self) -> None:
        self._connections: Dict[str, WireConnection] = {}
        self._on_create: List[Listener] = []
        self._on_remove: List[Listener] = []

    def __len__(self) -> int:
        return len(self._connections)

    def __iter__(self) -> Iterator[WireConnection]:
        return iter(list(self._connections.values()))

    def __contains__(self, wire_hash: str) -> bool:
        return wire_hash in self._connections

    def subscribe(
        self, on_create: Optional[Listener] = None, on_remove: Optional[Listener] = None
    ) -> None:
        if on_create is not None:
            self._on_create.append(on_create)
        if on_remove is not None:
            self._on_remove.append(on_remove)

    def unsubscribe(
        self, on_create: Optional[Listener] = None, on_remove: Optional[Listener] = None
    ) -> None:
        if on_create in self._on_create:
            self._on_create.remove(on_create)
        if on_remove in self._on_remove:
            self._on_remove.remove(on_remove)

    def create(self, connection: WireConnection) -> str:
        """Add a connection; adding an existing one is a no-op."""
        if connection.color not in WIRE_COLOR_PALETTE:
            raise InvalidWireColorError(connection.color)

        connection = connection.normalized()
        wire_hash = connection.hash
        if wire_hash in self._connections:
            return wire_hash

        self._connections[wire_hash] = connection
        for listener in list(self._on_create):
            listener(wire_hash, connection)
        return wire_hash

    def remove(self, wire_hash: str) -> Optional[WireConnection]:
        connection = self._connections.pop(wire_hash, None)
        if connection is not None:
            for listener in list(self._on_remove):
                listener(wire_hash, connection)
        return connection

    def get(self, wire_hash: str) -> Optional[WireConnection]:
        return self._connections.get(wire_hash)

    def get_entity_connection_hashes(self, entity_number: int) -> List[str]:
        return [h for h, c in self._connections.items() if c.touches(entity_number)]

    def get_entity_connections(self, entity_number: int) -> List[WireConnection]:
        return [c for c in self._connections.values() if c.touches(entity_number)]

    def remove_entity_connections(self, entity_number: int) -> List[WireConnection]:
        return [
            removed
            for removed in (
                self.remove(h) for h in self.get_entity_connection_hashes(entity_number)
            )
            if removed is not None
        ]

    # ------------------------------------------------------------------
    # Blueprint format (Factorio 1.1 per-entity "connections" dict)
    # ------------------------------------------------------------------

    def serialize(self, entity_number: int) -> Dict[str, Any]:
        """The ``connections`` dict of one entity."""
        data: Dict[str, Any] = {}
        for connection in self.get_entity_connections(entity_number):
            if connection.entity_number_1 == entity_number:
                own_side = connection.entity_side_1
                other, other_side = connection.entity_number_2, connection.entity_side_2
            else:
                own_side = connection.entity_side_2
                other, other_side = connection.entity_number_1, connection.entity_side_1

            if connection.color == "copper":
                data.setdefault(f"Cu{own_side - 1}", []).append(
                    {"entity_id": other, "wire_id": other_side - 1}
                )
            else:
                side = data.setdefault(str(own_side), {})
                side.setdefault(connection.color, []).append(
                    {"entity_id": other, "circuit_id": other_side}
                )
        return data

    @staticmethod
    def deserialize(entity_number: int, data: Mapping[str, Any]) -> List[WireConnection]:
        connections: List[WireConnection] = []
        for key, value in (data or {}).items():
            if key.startswith("Cu"):
                own_side = int(key[2:]) + 1
                for target in value:
                    connections.append(
                        WireConnection(
                            color="copper",
                            entity_number_1=entity_number,
                            entity_number_2=int(target["entity_id"]),
                            entity_side_1=own_side,
                            entity_side_2=int(target.get("wire_id", 0)) + 1,
                        )
                    )
                continue

            own_side = int(key)
            for color in CIRCUIT_WIRE_COLORS:
                for target in value.get(color, []):
                    connections.append(
                        WireConnection(
                            color=color,
                            entity_number_1=entity_number,
                            entity_number_2=int(target["entity_id"]),
                            entity_side_1=own_side,
                            entity_side_2=int(target.get("circuit_id", 1)),
                        )
                    )
        return [c.normalized() for c in connections]


__all__ = [
    "WireConnection",
    "WireConnections",
    "connection_hash",
    "select_connections",
    "remap_connections",
]
