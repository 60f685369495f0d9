from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Set

from wire_network.src.common.diagnostics import ProgramDiagnostics
from wire_network.src.common.exceptions import (
    CacheConsistencyError,
    ReentrantUpdateError,
)
from wire_network.src.rendering.wire_curve import WireCurve

"""Owned state of the wiring subsystem: rendered wires and adjacency."""


@dataclass(eq=False)
class RenderedWire:
    """Handle to a drawn wire. Must be destroyed exactly once."""

    wire_hash: str
    curve: WireCurve
    connection: Optional[Any] = None
    destroyed: bool = field(default=False, init=False)

    def destroy(self) -> None:
        if self.destroyed:
            raise CacheConsistencyError("Wire destroyed twice", self.wire_hash)
        self.destroyed = True


class _WireTable:
    """hash -> handle mapping for one kind of wire."""

    def __init__(self, kind: str) -> None:
        self.kind = kind
        self._handles: Dict[str, RenderedWire] = {}

    def __contains__(self, wire_hash: str) -> bool:
        return wire_hash in self._handles

    def __len__(self) -> int:
        return len(self._handles)

    def keys(self) -> Set[str]:
        return set(self._handles)

    def get(self, wire_hash: str) -> Optional[RenderedWire]:
        return self._handles.get(wire_hash)

    def store(self, handle: RenderedWire) -> None:
        if handle.wire_hash in self._handles:
            raise CacheConsistencyError(
                f"{self.kind.capitalize()} wire rendered twice", handle.wire_hash
            )
        self._handles[handle.wire_hash] = handle

    def release(self, wire_hash: str) -> RenderedWire:
        handle = self._handles.pop(wire_hash, None)
        if handle is None:
            raise CacheConsistencyError(
                f"Releasing {self.kind} wire that was never rendered", wire_hash
            )
        handle.destroy()
        return handle

    def handles(self) -> List[RenderedWire]:
        return list(self._handles.values())


class NetworkCache:
    """Rendered passive and explicit wires plus the current pole adjacency.

    All mutation happens inside :meth:`writer`; only one writer may be
    active at a time.
    """

    def __init__(self, diagnostics: Optional[ProgramDiagnostics] = None) -> None:
        self.diagnostics = diagnostics or ProgramDiagnostics()
        self._passive = _WireTable("passive")
        self._explicit = _WireTable("explicit")
        self._adjacency: Dict[int, List[int]] = {}
        self._writing = False

    # ------------------------------------------------------------------
    # Writer discipline
    # ------------------------------------------------------------------

    @contextmanager
    def writer(self) -> Iterator["NetworkCache"]:
        if self._writing:
            raise ReentrantUpdateError("Wire cache is already being updated")
        self._writing = True
        try:
            yield self
        finally:
            self._writing = False

    @property
    def is_writing(self) -> bool:
        return self._writing

    def _require_writer(self) -> None:
        if not self._writing:
            raise CacheConsistencyError("Wire cache mutated outside of a writer")

    def _table(self, passive: bool) -> _WireTable:
        return self._passive if passive else self._explicit

    # ------------------------------------------------------------------
    # Handles
    # ------------------------------------------------------------------

    def store(self, handle: RenderedWire, passive: bool = True) -> None:
        self._require_writer()
        self._table(passive).store(handle)

    def release(self, wire_hash: str, passive: bool = True) -> RenderedWire:
        """Destroy and forget a rendered wire; unknown hashes are an error."""
        self._require_writer()
        return self._table(passive).release(wire_hash)

    def release_if_present(self, wire_hash: str, passive: bool = False) -> bool:
        self._require_writer()
        table = self._table(passive)
        if wire_hash not in table:
            return False
        table.release(wire_hash)
        return True

    def get(self, wire_hash: str, passive: bool = True) -> Optional[RenderedWire]:
        return self._table(passive).get(wire_hash)

    def has(self, wire_hash: str, passive: bool = True) -> bool:
        return wire_hash in self._table(passive)

    def passive_hashes(self) -> Set[str]:
        return self._passive.keys()

    def explicit_hashes(self) -> Set[str]:
        return self._explicit.keys()

    def passive_wires(self) -> List[RenderedWire]:
        return self._passive.handles()

    def explicit_wires(self) -> List[RenderedWire]:
        return self._explicit.handles()

    # ------------------------------------------------------------------
    # Adjacency
    # ------------------------------------------------------------------

    def set_adjacency(self, adjacency: Dict[int, List[int]]) -> None:
        self._require_writer()
        self._adjacency = {key: list(value) for key, value in adjacency.items()}

    def neighbors(self, entity_number: int) -> Optional[List[int]]:
        """Neighbor ids of a pole, or ``None`` if it has no passive wires."""
        neighbors = self._adjacency.get(entity_number)
        return list(neighbors) if neighbors is not None else None

    @property
    def adjacency(self) -> Dict[int, List[int]]:
        return {key: list(value) for key, value in self._adjacency.items()}

    def clear(self) -> int:
        """Release every handle; returns how many were released."""
        self._require_writer()
        released = 0
        for table in (self._passive, self._explicit):
            for wire_hash in sorted(table.keys()):
                table.release(wire_hash)
                released += 1
        self._adjacency = {}
        return released


__all__ = ["NetworkCache", "RenderedWire"]
