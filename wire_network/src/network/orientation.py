from __future__ import annotations

import math
from typing import Any, Callable, Iterable, List, Optional, Sequence

from wire_network.src.common.constants import DIRECTION_COUNT, POLE_SECTOR_COUNT
from wire_network.src.common.diagnostics import ProgramDiagnostics
from wire_network.src.geometry.kernel import angle_degrees, xy

"""Facing direction of a pole from the poles it is wired to."""


SECTOR_ANGLE = 360 / DIRECTION_COUNT


def angle_to_sector(angle: float) -> int:
    """Fold a counter-clockwise angle into one of the four pole sectors."""
    clockwise = 360 - angle
    shifted = clockwise - SECTOR_ANGLE * 1.5
    if shifted < 0:
        shifted += 360
    sector = math.floor(shifted / SECTOR_ANGLE)
    return sector % POLE_SECTOR_COUNT


def resolve_pole_direction(center: Any, neighbor_points: Sequence[Any]) -> int:
    """Direction (0, 2, 4 or 6) a pole at ``center`` should face.

    Each neighbor votes with its sector; the floored mean of the votes is the
    result. A pole without neighbors faces 0.
    """
    if not neighbor_points:
        return 0

    cx, cy = xy(center)
    sector_sum = 0
    for point in neighbor_points:
        px, py = xy(point)
        # Screen Y grows downwards
        sector_sum += angle_to_sector(angle_degrees(0, 0, px - cx, (py - cy) * -1))

    return math.floor(sector_sum / len(neighbor_points)) * 2


class PoleOrientationResolver:
    """Resolve pole directions against live entities.

    ``entity_lookup`` maps an entity number to the live entity (anything with
    a ``position``) or ``None`` when the entity no longer exists.
    """

    def __init__(
        self,
        entity_lookup: Callable[[int], Optional[Any]],
        diagnostics: Optional[ProgramDiagnostics] = None,
    ) -> None:
        self.entity_lookup = entity_lookup
        self.diagnostics = diagnostics or ProgramDiagnostics()

    def live_neighbor_positions(
        self, entity_number: int, neighbor_numbers: Iterable[int]
    ) -> List[Any]:
        positions = []
        for neighbor_number in neighbor_numbers:
            neighbor = self.entity_lookup(neighbor_number)
            if neighbor is None:
                self.diagnostics.warning(
                    f"Ignoring stale neighbor {neighbor_number}",
                    stage="orientation",
                    entity_number=entity_number,
                )
                continue
            positions.append(neighbor.position)
        return positions

    def direction_for(
        self, entity_number: int, position: Any, neighbor_numbers: Iterable[int]
    ) -> int:
        points = self.live_neighbor_positions(entity_number, neighbor_numbers)
        return resolve_pole_direction(position, points)


__all__ = [
    "SECTOR_ANGLE",
    "angle_to_sector",
    "resolve_pole_direction",
    "PoleOrientationResolver",
]
