from dataclasses import dataclass
from typing import Optional

from wire_network.src.common.constants import ELECTRIC_POLE_TYPE
from wire_network.src.geometry.kernel import Point

"""Entities placed in a blueprint."""


@dataclass
class Entity:
    """A placed entity. Positions are tile centers in grid units."""

    entity_number: int
    name: str
    position: Point
    direction: int = 0
    type: Optional[str] = None

    @property
    def is_pole(self) -> bool:
        return self.type == ELECTRIC_POLE_TYPE

    def to_dict(self) -> dict:
        data = {
            "entity_number": self.entity_number,
            "name": self.name,
            "position": {"x": self.position.x, "y": self.position.y},
        }
        if self.direction:
            data["direction"] = self.direction
        return data


@dataclass(frozen=True)
class EntityChange:
    """Notification that an entity was created, moved, rotated or removed."""

    kind: str  # create, move, rotate, remove
    entity: Entity

    @property
    def entity_number(self) -> int:
        return self.entity.entity_number

    @property
    def is_pole(self) -> bool:
        return self.entity.is_pole
