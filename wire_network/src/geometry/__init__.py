"""Geometry kernel: angles, distances and triangulation over 2-D points."""

from .kernel import (
    Point,
    angle_degrees,
    euclidean_distance,
    manhattan_distance,
    point_in_circle,
    triangulate,
    xy,
)

__all__ = [
    "Point",
    "xy",
    "angle_degrees",
    "euclidean_distance",
    "manhattan_distance",
    "point_in_circle",
    "triangulate",
]
