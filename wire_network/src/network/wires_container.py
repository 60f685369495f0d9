from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Optional, Set

from wire_network.src.blueprint.blueprint import Blueprint
from wire_network.src.blueprint.entity import Entity, EntityChange
from wire_network.src.blueprint.wire_connections import WireConnection
from wire_network.src.common.constants import DEFAULT_CONFIG, WireNetworkConfig
from wire_network.src.common.diagnostics import ProgramDiagnostics
from wire_network.src.common.exceptions import WireNetworkError
from wire_network.src.geometry.kernel import Point
from wire_network.src.rendering.wire_curve import create_wire

from .cache import NetworkCache, RenderedWire
from .differ import NetworkDelta, diff_edges
from .orientation import PoleOrientationResolver
from .topology import Pole, TopologySynthesizer, line_hash, parse_line_hash

"""Keeps the rendered wires of a blueprint in sync with its entities."""


RedrawListener = Callable[[int, int], None]


class WiresContainer:
    """Owner of every rendered wire of one blueprint.

    Passive (copper) wires between poles are synthesized from the pole
    layout; explicit wires come from the blueprint's connection ledger. The
    container subscribes to both, so blueprint edits keep the rendering
    current. ``add_redraw_listener`` lets a render layer redraw pole sprites
    whose facing direction may have changed.
    """

    def __init__(
        self,
        blueprint: Blueprint,
        config: WireNetworkConfig = DEFAULT_CONFIG,
        diagnostics: Optional[ProgramDiagnostics] = None,
        subscribe: bool = True,
    ) -> None:
        self.bp = blueprint
        self.config = config
        self.diagnostics = diagnostics or ProgramDiagnostics()
        self.catalog = blueprint.catalog
        self.cache = NetworkCache(self.diagnostics)
        self.synthesizer = TopologySynthesizer(self.catalog, self.diagnostics)
        self.resolver = PoleOrientationResolver(blueprint.get_entity, self.diagnostics)
        self._redraw_listeners: List[RedrawListener] = []
        self._subscribed = False
        if subscribe:
            self._subscribe()

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def _subscribe(self) -> None:
        self.bp.add_listener(self._on_entities_changed)
        self.bp.wire_connections.subscribe(self.add, self._on_connection_removed)
        self._subscribed = True

    def _unsubscribe(self) -> None:
        if not self._subscribed:
            return
        self.bp.remove_listener(self._on_entities_changed)
        self.bp.wire_connections.unsubscribe(self.add, self._on_connection_removed)
        self._subscribed = False

    def add_redraw_listener(self, listener: RedrawListener) -> None:
        """``listener(entity_number, direction)`` runs when a pole may have turned."""
        self._redraw_listeners.append(listener)

    def _on_connection_removed(self, wire_hash: str, connection: WireConnection) -> None:
        self.remove(wire_hash)

    def _on_entities_changed(self, changes: List[EntityChange]) -> None:
        redrawn: Set[int] = set()
        with self.cache.writer():
            pole_changes = [c for c in changes if c.is_pole]
            if pole_changes:
                moved = [
                    c.entity_number
                    for c in pole_changes
                    if c.kind in ("move", "rotate")
                    and c.entity_number in self.bp.entities
                ]
                self._update_passive_wires(redrawn, moved)

            for change in changes:
                if change.kind == "remove":
                    continue
                self._redraw_entity_connections(change.entity_number, redrawn)

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    def add(self, wire_hash: str, connection: WireConnection) -> None:
        """Render an explicit connection."""
        with self.cache.writer():
            self._add_explicit(wire_hash, connection)

    def remove(self, wire_hash: str) -> None:
        """Drop an explicit connection's wire if it is rendered."""
        with self.cache.writer():
            self.cache.release_if_present(wire_hash, passive=False)

    def update(self, entity: Entity) -> None:
        """Refresh the wires of an entity that was moved or rotated."""
        redrawn: Set[int] = set()
        with self.cache.writer():
            if entity.is_pole:
                self._update_passive_wires(redrawn, [entity.entity_number])
            self._redraw_entity_connections(entity.entity_number, redrawn)

    def update_passive_wires(self) -> NetworkDelta:
        """Resynthesize the passive network and render the difference."""
        with self.cache.writer():
            return self._update_passive_wires(set())

    def get_pole_direction(self, entity: Entity) -> int:
        """Direction a pole faces given the poles it is wired to."""
        neighbors = self.cache.neighbors(entity.entity_number)
        if not neighbors:
            return 0
        return self.resolver.direction_for(
            entity.entity_number, entity.position, neighbors
        )

    def pole_directions(self) -> Dict[int, int]:
        return {pole.entity_number: self.get_pole_direction(pole) for pole in self.bp.poles()}

    def wire_position(self, entity_number: int, color: str, side: int) -> Point:
        """World position (pixels) where a wire of ``color`` meets an entity."""
        entity = self.bp.get_entity(entity_number)
        if entity is None:
            raise WireNetworkError("Wire endpoint does not exist", entity_number)
        direction = (
            self.get_pole_direction(entity) if entity.is_pole else entity.direction
        )
        offset_x, offset_y = self.catalog.wire_connection_point(
            entity.name, color, side, direction
        )
        tile = self.config.tile_size
        return Point(
            (entity.position.x + offset_x) * tile,
            (entity.position.y + offset_y) * tile,
        )

    @property
    def passive_wires(self) -> Dict[str, RenderedWire]:
        return {w.wire_hash: w for w in self.cache.passive_wires()}

    @property
    def explicit_wires(self) -> Dict[str, RenderedWire]:
        return {w.wire_hash: w for w in self.cache.explicit_wires()}

    def render_existing(self) -> NetworkDelta:
        """Render every ledger connection and the passive network."""
        with self.cache.writer():
            # Passive first: explicit wires on poles hang from their direction
            delta = self._update_passive_wires(set())
            for connection in self.bp.wire_connections:
                if not self.cache.has(connection.hash, passive=False):
                    self._add_explicit(connection.hash, connection)
            return delta

    def destroy(self) -> int:
        """Release all wires and stop following the blueprint."""
        self._unsubscribe()
        with self.cache.writer():
            return self.cache.clear()

    # ------------------------------------------------------------------
    # Internals (callers hold the cache writer)
    # ------------------------------------------------------------------

    def _render(self, wire_hash: str, connection: WireConnection) -> RenderedWire:
        curve = create_wire(
            self.wire_position(
                connection.entity_number_1, connection.color, connection.entity_side_1
            ),
            self.wire_position(
                connection.entity_number_2, connection.color, connection.entity_side_2
            ),
            connection.color,
            self.config,
        )
        return RenderedWire(wire_hash=wire_hash, curve=curve, connection=connection)

    def _add_explicit(self, wire_hash: str, connection: WireConnection) -> None:
        self.cache.store(self._render(wire_hash, connection), passive=False)

    def _passive_connection(self, wire_hash: str) -> WireConnection:
        first, second = parse_line_hash(wire_hash)
        side = self.config.passive_wire_side
        return WireConnection(
            color=self.config.passive_wire_color,
            entity_number_1=first,
            entity_number_2=second,
            entity_side_1=side,
            entity_side_2=side,
        )

    def _add_passive(self, wire_hash: str) -> None:
        self.cache.store(self._render(wire_hash, self._passive_connection(wire_hash)))

    def _redraw_entity_connections(self, entity_number: int, redrawn: Set[int]) -> None:
        """Re-render explicit wires of an entity whose geometry changed."""
        if entity_number in redrawn:
            return
        redrawn.add(entity_number)
        for wire_hash in self.bp.wire_connections.get_entity_connection_hashes(
            entity_number
        ):
            connection = self.bp.wire_connections.get(wire_hash)
            self.cache.release_if_present(wire_hash, passive=False)
            self._add_explicit(wire_hash, connection)

    def _current_poles(self) -> List[Pole]:
        return [
            Pole(
                entity_number=e.entity_number,
                name=e.name,
                x=e.position.x,
                y=e.position.y,
            )
            for e in self.bp.poles()
        ]

    def _update_passive_wires(
        self, redrawn: Set[int], moved: Iterable[int] = ()
    ) -> NetworkDelta:
        """Synthesize, diff against the cache and render the difference.

        ``moved`` poles keep their wire hashes, so the diff alone would not
        touch them; they and their neighbors are reconsidered as well.
        """
        network = self.synthesizer.synthesize(self._current_poles())
        self.cache.set_adjacency(network.adjacency)

        delta = diff_edges(network.hashes(), self.cache.passive_hashes())
        for wire_hash in delta.to_remove:
            self.cache.release(wire_hash)
        for wire_hash in delta.to_add:
            self._add_passive(wire_hash)

        reconsider = set(delta.to_reconsider)
        for entity_number in moved:
            reconsider.add(entity_number)
            reconsider.update(network.neighbors(entity_number))

        # Poles at either end of a changed wire may face another way now;
        # their remaining wires hang from the old hooks
        rerendered: Set[str] = set(delta.to_add)
        for entity_number in sorted(reconsider):
            entity = self.bp.get_entity(entity_number)
            if entity is None:
                continue
            direction = self.get_pole_direction(entity)
            for listener in self._redraw_listeners:
                listener(entity_number, direction)

            self._redraw_entity_connections(entity_number, redrawn)
            self._rerender_pole_wires(entity_number, network.neighbors(entity_number), rerendered)

        if reconsider:
            self.diagnostics.info(
                f"Passive wires: +{len(delta.to_add)} -{len(delta.to_remove)}, "
                f"{len(reconsider)} pole(s) reconsidered",
                stage="render",
            )
        return delta

    def _rerender_pole_wires(
        self, entity_number: int, neighbors: Iterable[int], rerendered: Set[str]
    ) -> None:
        for neighbor in neighbors:
            wire_hash = line_hash(entity_number, neighbor)
            if wire_hash in rerendered or not self.cache.has(wire_hash):
                continue
            rerendered.add(wire_hash)
            self.cache.release(wire_hash)
            self._add_passive(wire_hash)


__all__ = ["WiresContainer"]
