"""Planar geometry primitives used by the passive network synthesis.

Everything here is pure: functions take points and return numbers or new
sequences, nothing is cached. A "point" is anything with ``x``/``y``
attributes (``Point``, poles, entities) or a plain ``(x, y)`` pair.
"""

from __future__ import annotations

import math
from typing import Any, Iterator, NamedTuple, Sequence, Tuple

import numpy as np
from scipy.spatial import Delaunay, QhullError


class Point(NamedTuple):
    x: float
    y: float


def xy(point: Any) -> Tuple[float, float]:
    """Coordinates of ``point`` as a float pair."""
    if hasattr(point, "x") and hasattr(point, "y"):
        return float(point.x), float(point.y)
    return float(point[0]), float(point[1])


def angle_degrees(cx: float, cy: float, x: float, y: float) -> float:
    """Angle of the vector (x - cx, y - cy) in degrees, within [0, 360).

    Measured counter-clockwise from the positive X axis.
    """
    theta = math.degrees(math.atan2(y - cy, x - cx)) % 360.0
    # Tiny negative angles fold onto 360.0 itself
    return 0.0 if theta >= 360.0 else theta


def euclidean_distance(p1: Any, p2: Any) -> float:
    x1, y1 = xy(p1)
    x2, y2 = xy(p2)
    return math.hypot(x2 - x1, y2 - y1)


def point_in_circle(p1: Any, p2: Any, radius: float) -> bool:
    """True if ``p2`` lies within ``radius`` of ``p1`` (boundary included)."""
    x1, y1 = xy(p1)
    x2, y2 = xy(p2)
    return (x2 - x1) ** 2 + (y2 - y1) ** 2 <= radius**2


def manhattan_distance(p1: Any, p2: Any) -> float:
    x1, y1 = xy(p1)
    x2, y2 = xy(p2)
    return abs(x2 - x1) + abs(y2 - y1)


def _is_degenerate(coords: np.ndarray) -> bool:
    """Fewer than three distinct points, or all of them on one line."""
    if len(coords) < 3:
        return True
    centered = coords - coords.mean(axis=0)
    return np.linalg.matrix_rank(centered) < 2


def triangulate(points: Sequence[Any]) -> Iterator[Tuple[Any, Any, Any]]:
    """Lazily yield the triangles of the Delaunay triangulation of ``points``.

    Each triangle is a triple of the input objects. Degenerate inputs
    (fewer than 3 points, all collinear) yield nothing. Duplicate positions
    are merged by Qhull, so only one of the coincident points appears.
    """
    if len(points) < 3:
        return

    coords = np.array([xy(p) for p in points], dtype=float)
    if _is_degenerate(coords):
        return

    try:
        tri = Delaunay(coords)
    except QhullError:
        # Nearly collinear inputs that slip past the rank check
        return

    for a, b, c in tri.simplices:
        yield points[int(a)], points[int(b)], points[int(c)]
