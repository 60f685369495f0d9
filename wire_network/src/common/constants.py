"""Shared constants across the wiring subsystem."""

from dataclasses import dataclass
from typing import Dict

# Rendering scale
TILE_SIZE = 32

# Wire colors
WIRE_COLOR_PALETTE: Dict[str, int] = {
    "copper": 0xCF7C00,
    "red": 0xC83718,
    "green": 0x588C38,
}
CIRCUIT_WIRE_COLORS = ("red", "green")
PASSIVE_WIRE_COLOR = "copper"

# Pole directions (8-way compass, poles only use the even values)
DIRECTION_COUNT = 8
POLE_SECTOR_COUNT = 4

# Entity type tag for entities taking part in the passive network
ELECTRIC_POLE_TYPE = "electric_pole"


@dataclass(frozen=True)
class WireNetworkConfig:
    """Tunable settings for synthesis and wire rendering."""

    tile_size: int = TILE_SIZE
    wire_line_width: float = 1.5
    sag_height: float = 30.0
    # Spans longer than this many tiles get the full sag
    sag_span_tiles: float = 3.0
    passive_wire_color: str = PASSIVE_WIRE_COLOR
    passive_wire_side: int = 1
    default_log_level: str = "warning"

    @property
    def sag_span(self) -> float:
        """Span in pixels at which the sag reaches ``sag_height``."""
        return self.tile_size * self.sag_span_tiles


DEFAULT_CONFIG = WireNetworkConfig()
