"""Wire curve rendering."""

from .wire_curve import WireCurve, create_wire, wire_color_value

__all__ = ["WireCurve", "create_wire", "wire_color_value"]
