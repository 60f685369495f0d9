from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Set

from .topology import parse_line_hash

"""Set-difference between the synthesized and the rendered passive wires."""


@dataclass(frozen=True)
class NetworkDelta:
    """Changes needed to bring the rendered wires in line with the network.

    ``to_reconsider`` lists every pole at either end of an added or removed
    wire; those poles may face a different way now.
    """

    to_add: List[str] = field(default_factory=list)
    to_remove: List[str] = field(default_factory=list)
    to_reconsider: List[int] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.to_add and not self.to_remove

    def apply(self, previous: Iterable[str]) -> Set[str]:
        """Return ``(previous - to_remove) | to_add``."""
        return (set(previous) - set(self.to_remove)) | set(self.to_add)


def diff_edges(current: Iterable[str], cached: Iterable[str]) -> NetworkDelta:
    """Diff the current edge hashes against the cached ones.

    Only set difference is used: wires present in both sets are left alone.
    Outputs are sorted so rendering order is reproducible.
    """
    current_set = set(current)
    cached_set = set(cached)

    to_add = sorted(current_set - cached_set, key=parse_line_hash)
    to_remove = sorted(cached_set - current_set, key=parse_line_hash)

    touched: Set[int] = set()
    for wire_hash in (*to_add, *to_remove):
        touched.update(parse_line_hash(wire_hash))

    return NetworkDelta(
        to_add=to_add, to_remove=to_remove, to_reconsider=sorted(touched)
    )


__all__ = ["NetworkDelta", "diff_edges"]
