from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Optional, Tuple

import numpy as np

from wire_network.src.common.constants import (
    DEFAULT_CONFIG,
    WIRE_COLOR_PALETTE,
    WireNetworkConfig,
)
from wire_network.src.common.exceptions import InvalidWireColorError
from wire_network.src.geometry.kernel import xy

"""Drawable description of a wire between two world points."""


Vec = Tuple[float, float]


def wire_color_value(color: str) -> int:
    """Palette value of a wire color; unknown colors are a caller error."""
    try:
        return WIRE_COLOR_PALETTE[color]
    except KeyError:
        raise InvalidWireColorError(color) from None


@dataclass(frozen=True)
class WireCurve:
    """A wire in local coordinates plus the transform placing it in the world.

    The local path starts at ``(0, 0)`` and ends at ``end``. World
    coordinates are ``position + scale * (local - pivot)`` with
    ``scale = (scale_x, 1)``.
    """

    color_name: str
    color: int
    line_width: float
    kind: str  # "line" or "bezier"
    end: Vec
    position: Vec
    pivot: Vec
    scale_x: float = 1.0
    controls: Optional[Tuple[Vec, Vec]] = None
    sag: float = 0.0

    @property
    def mirrored(self) -> bool:
        return self.scale_x < 0

    def to_world(self, local: np.ndarray) -> np.ndarray:
        """Map an (N, 2) array of local points into world space."""
        scale = np.array([self.scale_x, 1.0])
        return np.asarray(self.position) + scale * (local - np.asarray(self.pivot))

    def local_points(self, samples: int = 16) -> np.ndarray:
        t = np.linspace(0.0, 1.0, max(2, samples))[:, None]
        start = np.zeros(2)
        end = np.asarray(self.end, dtype=float)
        if self.kind == "line" or self.controls is None:
            return start + t * (end - start)

        c1 = np.asarray(self.controls[0], dtype=float)
        c2 = np.asarray(self.controls[1], dtype=float)
        return (
            (1 - t) ** 3 * start
            + 3 * (1 - t) ** 2 * t * c1
            + 3 * (1 - t) * t**2 * c2
            + t**3 * end
        )

    def sample(self, samples: int = 16) -> np.ndarray:
        """World-space polyline approximating the wire."""
        return self.to_world(self.local_points(samples))

    def endpoints(self) -> Tuple[Vec, Vec]:
        """World positions of the local start and end of the path."""
        start, end = self.to_world(np.array([[0.0, 0.0], self.end], dtype=float))
        return (float(start[0]), float(start[1])), (float(end[0]), float(end[1]))


def create_wire(
    p1: Any, p2: Any, color: str, config: WireNetworkConfig = DEFAULT_CONFIG
) -> WireCurve:
    """Describe the wire hanging between world points ``p1`` and ``p2``.

    Wires sharing an X coordinate are straight. Others are cubic beziers whose
    control points sit at 1/5 and 4/5 of the span, pushed perpendicular to it
    by the sag; the sag grows with the span up to ``config.sag_span`` and
    vanishes as the wire approaches vertical.
    """
    color_value = wire_color_value(color)

    x1, y1 = xy(p1)
    x2, y2 = xy(p2)
    min_x, min_y = min(x1, x2), min(y1, y2)
    max_x, max_y = max(x1, x2), max(y1, y2)
    d_x = max_x - min_x
    d_y = max_y - min_y

    kind = "line"
    controls = None
    sag = 0.0
    if x1 != x2:
        length = math.sqrt(d_x * d_x + d_y * d_y)
        angle = math.atan2(d_x, -d_y)
        sag = math.sin(angle) * min(1.0, length / config.sag_span) * config.sag_height

        slope = d_y / d_x
        u_x = -d_y / length
        u_y = d_x / length

        near_x = d_x / 5
        far_x = d_x / 5 * 4
        controls = (
            (near_x + sag * u_x, slope * near_x + sag * u_y),
            (far_x + sag * u_x, slope * far_x + sag * u_y),
        )
        kind = "bezier"

    # Rising-together diagonals keep their orientation, everything else flips
    same_quadrant = (x1 < x2 and y1 < y2) or (x2 < x1 and y2 < y1)

    return WireCurve(
        color_name=color,
        color=color_value,
        line_width=config.wire_line_width,
        kind=kind,
        end=(d_x, d_y),
        position=(min_x + d_x / 2, min_y + d_y / 2),
        pivot=(d_x / 2, d_y / 2),
        scale_x=1.0 if same_quadrant else -1.0,
        controls=controls,
        sag=sag,
    )


__all__ = ["WireCurve", "create_wire", "wire_color_value"]
