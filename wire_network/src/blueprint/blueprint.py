from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from wire_network.src.common.entity_catalog import DEFAULT_CATALOG, EntityCatalog
from wire_network.src.common.exceptions import WireNetworkError
from wire_network.src.geometry.kernel import Point, xy

from .entity import Entity, EntityChange
from .wire_connections import WireConnections, remap_connections

"""In-memory blueprint: entities plus their explicit wire connections."""


ChangeListener = Callable[[List[EntityChange]], None]


class Blueprint:
    """Entities keyed by entity number, with change notification.

    Listeners receive batches of :class:`EntityChange`. Outside a transaction
    every mutation is delivered on its own; inside :meth:`transaction` the
    changes are held back and delivered together when the outermost
    transaction ends.
    """

    def __init__(self, catalog: EntityCatalog = DEFAULT_CATALOG) -> None:
        self.catalog = catalog
        self.entities: Dict[int, Entity] = {}
        self.wire_connections = WireConnections()
        self.label = "Blueprint"
        self._listeners: List[ChangeListener] = []
        self._transactions: List[str] = []
        self._pending: List[EntityChange] = []
        self._next_entity_number = 1

    # ------------------------------------------------------------------
    # Change notification
    # ------------------------------------------------------------------

    def add_listener(self, listener: ChangeListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: ChangeListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    @contextmanager
    def transaction(self, name: str = "Edit") -> Iterator["Blueprint"]:
        """Group mutations so listeners see one consistent batch."""
        self._transactions.append(name)
        try:
            yield self
        finally:
            self._transactions.pop()
            if not self._transactions and self._pending:
                pending, self._pending = self._pending, []
                self._notify(pending)

    @property
    def in_transaction(self) -> bool:
        return bool(self._transactions)

    def _emit(self, kind: str, entity: Entity) -> None:
        change = EntityChange(kind=kind, entity=entity)
        if self._transactions:
            self._pending.append(change)
        else:
            self._notify([change])

    def _notify(self, changes: List[EntityChange]) -> None:
        for listener in list(self._listeners):
            listener(changes)

    # ------------------------------------------------------------------
    # Entities
    # ------------------------------------------------------------------

    def get_entity(self, entity_number: int) -> Optional[Entity]:
        return self.entities.get(entity_number)

    def poles(self) -> List[Entity]:
        return [e for e in self.entities.values() if e.is_pole]

    def create_entity(
        self,
        name: str,
        position: Any,
        direction: int = 0,
        entity_number: Optional[int] = None,
    ) -> Entity:
        """Place an entity; unknown names are rejected by the catalog."""
        self.catalog.get(name)
        if entity_number is None:
            entity_number = self._next_entity_number
        elif entity_number in self.entities:
            raise WireNetworkError("Entity number already in use", entity_number)
        self._next_entity_number = max(self._next_entity_number, entity_number + 1)

        entity = Entity(
            entity_number=entity_number,
            name=name,
            position=Point(*xy(position)),
            direction=direction,
            type=self.catalog.entity_type(name),
        )
        self.entities[entity_number] = entity
        self._emit("create", entity)
        return entity

    def _require(self, entity_number: int) -> Entity:
        entity = self.entities.get(entity_number)
        if entity is None:
            raise WireNetworkError("No such entity", entity_number)
        return entity

    def move_entity(self, entity_number: int, position: Any) -> Entity:
        entity = self._require(entity_number)
        entity.position = Point(*xy(position))
        self._emit("move", entity)
        return entity

    def rotate_entity(self, entity_number: int, direction: int) -> Entity:
        entity = self._require(entity_number)
        entity.direction = direction % 8
        self._emit("rotate", entity)
        return entity

    def remove_entity(self, entity_number: int) -> Entity:
        """Remove an entity together with its explicit connections."""
        entity = self._require(entity_number)
        self.wire_connections.remove_entity_connections(entity_number)
        del self.entities[entity_number]
        self._emit("remove", entity)
        return entity

    # ------------------------------------------------------------------
    # Copy / paste
    # ------------------------------------------------------------------

    def paste(
        self,
        source: "Blueprint",
        entity_numbers: Optional[Iterable[int]] = None,
        offset: Tuple[float, float] = (0.0, 0.0),
    ) -> Dict[int, int]:
        """Copy entities from ``source`` into this blueprint.

        Connections between copied entities are recreated on the new
        entities; connections leading outside the selection are dropped.
        Returns the old -> new entity number map.
        """
        numbers = (
            sorted(source.entities)
            if entity_numbers is None
            else [n for n in entity_numbers if n in source.entities]
        )
        id_map: Dict[int, int] = {}
        with self.transaction("Create Entities"):
            for number in numbers:
                original = source.entities[number]
                created = self.create_entity(
                    original.name,
                    (original.position.x + offset[0], original.position.y + offset[1]),
                    direction=original.direction,
                )
                id_map[number] = created.entity_number

            for connection in remap_connections(source.wire_connections, id_map):
                self.wire_connections.create(connection)
        return id_map

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        entities = []
        for number in sorted(self.entities):
            data = self.entities[number].to_dict()
            connections = self.wire_connections.serialize(number)
            if connections:
                data["connections"] = connections
            entities.append(data)
        return {
            "blueprint": {
                "item": "blueprint",
                "label": self.label,
                "entities": entities,
            }
        }


__all__ = ["Blueprint"]
