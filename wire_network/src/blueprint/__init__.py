"""Blueprint model consumed by the wiring subsystem."""

from .blueprint import Blueprint
from .blueprint_io import (
    blueprint_from_dict,
    decode_blueprint_string,
    encode_blueprint_string,
    load_blueprint,
)
from .entity import Entity, EntityChange
from .wire_connections import (
    WireConnection,
    WireConnections,
    connection_hash,
    remap_connections,
    select_connections,
)

__all__ = [
    "Blueprint",
    "Entity",
    "EntityChange",
    "WireConnection",
    "WireConnections",
    "connection_hash",
    "remap_connections",
    "select_connections",
    "blueprint_from_dict",
    "decode_blueprint_string",
    "encode_blueprint_string",
    "load_blueprint",
]
