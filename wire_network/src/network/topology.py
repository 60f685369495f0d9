from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from wire_network.src.common.diagnostics import ProgramDiagnostics
from wire_network.src.common.entity_catalog import DEFAULT_CATALOG, EntityCatalog
from wire_network.src.geometry.kernel import (
    manhattan_distance,
    point_in_circle,
    triangulate,
)

"""Passive network synthesis: which poles get wired to which."""


def line_hash(entity_number_a: int, entity_number_b: int) -> str:
    """Canonical, order-independent key of the edge between two poles."""
    low, high = sorted((int(entity_number_a), int(entity_number_b)))
    return f"{low}-{high}"


def parse_line_hash(wire_hash: str) -> Tuple[int, int]:
    """Inverse of :func:`line_hash`."""
    low, high = wire_hash.split("-")
    return int(low), int(high)


@dataclass(frozen=True)
class Pole:
    """Snapshot of a pole taking part in synthesis."""

    entity_number: int
    name: str
    x: float
    y: float


@dataclass(frozen=True)
class Segment:
    """A candidate wire between two poles."""

    a: Pole
    b: Pole

    @property
    def hash(self) -> str:
        return line_hash(self.a.entity_number, self.b.entity_number)

    @property
    def entity_numbers(self) -> Tuple[int, int]:
        return parse_line_hash(self.hash)

    @property
    def manhattan_length(self) -> float:
        return manhattan_distance(self.a, self.b)

    @property
    def min_position(self) -> float:
        """Sum of the minimum coordinates, used to order equal-length segments."""
        return min(self.a.x, self.b.x) + min(self.a.y, self.b.y)

    def sort_key(self) -> Tuple[float, float, int, int]:
        # Shortest first; position then ids keep equal lengths deterministic
        low, high = self.entity_numbers
        return (self.manhattan_length, self.min_position, low, high)


@dataclass
class PassiveNetwork:
    """The synthesized edge set and the adjacency derived from it."""

    edges: Dict[str, Segment] = field(default_factory=dict)
    adjacency: Dict[int, List[int]] = field(default_factory=dict)

    @classmethod
    def from_segments(cls, segments: Iterable[Segment]) -> "PassiveNetwork":
        edges: Dict[str, Segment] = {}
        adjacency: Dict[int, List[int]] = {}
        for segment in segments:
            edges[segment.hash] = segment
            first, second = segment.a.entity_number, segment.b.entity_number
            for here, there in ((first, second), (second, first)):
                neighbors = adjacency.setdefault(here, [])
                if there not in neighbors:
                    neighbors.append(there)
        return cls(edges=edges, adjacency=adjacency)

    def hashes(self) -> Set[str]:
        return set(self.edges)

    def neighbors(self, entity_number: int) -> List[int]:
        return list(self.adjacency.get(entity_number, []))

    def __len__(self) -> int:
        return len(self.edges)

    def __contains__(self, wire_hash: str) -> bool:
        return wire_hash in self.edges


class TopologySynthesizer:
    """Decide the passive wire network for a set of poles.

    The network is a subset of the Delaunay triangulation of the pole
    positions: triangle sides longer than the shorter reach of their two poles
    are dropped, and of every triangle whose three sides survive, the side
    processed last (the longest) is pruned because its poles are already
    connected through the other two.

    Collinear layouts (including two poles) have no triangles; their
    triangulation degenerates into the chain of consecutive poles along the
    line, which is used instead.
    """

    def __init__(
        self,
        catalog: EntityCatalog = DEFAULT_CATALOG,
        diagnostics: Optional[ProgramDiagnostics] = None,
    ) -> None:
        self.catalog = catalog
        self.diagnostics = diagnostics or ProgramDiagnostics()

    def synthesize(self, poles: Iterable[Pole]) -> PassiveNetwork:
        """Compute the passive network for ``poles`` from scratch."""
        # Sorting makes the triangulation independent of insertion order
        ordered = sorted(poles, key=lambda p: (p.x, p.y, p.entity_number))
        if len(ordered) < 2:
            return PassiveNetwork()

        reach: Dict[str, float] = {}
        for pole in ordered:
            if pole.name not in reach:
                reach[pole.name] = self.catalog.max_wire_distance(pole.name)

        triangles = list(triangulate(ordered))
        triangle_segments = [self._triangle_segments(tri, reach) for tri in triangles]

        # Triangles whose three sides are all within reach
        redundant_candidates: Dict[str, List[Tuple[str, str, str]]] = defaultdict(list)
        for segments in triangle_segments:
            if len(segments) != 3:
                continue
            triangle = tuple(segment.hash for segment in segments)
            for wire_hash in triangle:
                redundant_candidates[wire_hash].append(triangle)

        # A collinear layout has no triangles, its poles form a plain chain
        segment_sets = triangle_segments or [self._chain_segments(ordered, reach)]

        candidates = sorted(
            (segment for segments in segment_sets for segment in segments),
            key=Segment.sort_key,
        )

        accepted: Dict[str, Segment] = {}
        for segment in candidates:
            wire_hash = segment.hash
            # Shared triangle sides show up once per triangle
            if wire_hash in accepted:
                continue
            if self._closes_triangle(wire_hash, redundant_candidates, accepted):
                continue
            accepted[wire_hash] = segment

        network = PassiveNetwork.from_segments(accepted.values())
        self.diagnostics.debug(
            f"Synthesized {len(network)} passive wire(s) for {len(ordered)} pole(s) "
            f"from {len(triangles)} triangle(s)",
            stage="synthesis",
        )
        return network

    @staticmethod
    def _in_reach(segment: Segment, reach: Dict[str, float]) -> bool:
        limit = min(reach[segment.a.name], reach[segment.b.name])
        return point_in_circle(segment.a, segment.b, limit)

    def _triangle_segments(
        self, triangle: Sequence[Pole], reach: Dict[str, float]
    ) -> List[Segment]:
        """The triangle's sides (consecutive vertices, wrapping) within reach."""
        sides = [
            Segment(triangle[i], triangle[(i + 1) % len(triangle)])
            for i in range(len(triangle))
        ]
        return [side for side in sides if self._in_reach(side, reach)]

    def _chain_segments(
        self, ordered: Sequence[Pole], reach: Dict[str, float]
    ) -> List[Segment]:
        links = [Segment(a, b) for a, b in zip(ordered, ordered[1:])]
        return [link for link in links if self._in_reach(link, reach)]

    @staticmethod
    def _closes_triangle(
        wire_hash: str,
        triangles: Dict[str, List[Tuple[str, str, str]]],
        accepted: Dict[str, Segment],
    ) -> bool:
        for triangle in triangles.get(wire_hash, ()):
            others = [other for other in triangle if other != wire_hash]
            if all(other in accepted for other in others):
                return True
        return False


__all__ = [
    "Pole",
    "Segment",
    "PassiveNetwork",
    "TopologySynthesizer",
    "line_hash",
    "parse_line_hash",
]
