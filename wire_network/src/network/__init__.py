"""Passive network synthesis, diffing and the wires container
==============================================================

This package keeps the wires of a blueprint in sync with its entities:

1. Topology synthesis – deciding which poles are wired to which.
2. Incremental diffing – comparing the new edge set with what is rendered.
3. Pole orientation – turning each pole towards the poles it is wired to.
4. The wires container – owning the rendered wires and reacting to edits.
"""

from .cache import NetworkCache, RenderedWire
from .differ import NetworkDelta, diff_edges
from .orientation import PoleOrientationResolver, angle_to_sector, resolve_pole_direction
from .topology import (
    PassiveNetwork,
    Pole,
    Segment,
    TopologySynthesizer,
    line_hash,
    parse_line_hash,
)
from .wires_container import WiresContainer

__all__ = [
    # Synthesis
    "Pole",
    "Segment",
    "PassiveNetwork",
    "TopologySynthesizer",
    "line_hash",
    "parse_line_hash",
    # Diffing
    "NetworkDelta",
    "diff_edges",
    # Orientation
    "PoleOrientationResolver",
    "angle_to_sector",
    "resolve_pole_direction",
    # State
    "NetworkCache",
    "RenderedWire",
    "WiresContainer",
]
