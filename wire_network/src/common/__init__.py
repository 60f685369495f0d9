"""Common utilities shared across the wiring subsystem."""

from .diagnostics import ProgramDiagnostics, DiagnosticSeverity
from .entity_catalog import DEFAULT_CATALOG, ENTITY_CONFIG, EntityCatalog
from .exceptions import (
    BlueprintFormatError,
    CacheConsistencyError,
    InvalidWireColorError,
    ReentrantUpdateError,
    UnknownEntityError,
    WireNetworkError,
)
from .constants import *

__all__ = [
    "ProgramDiagnostics",
    "DiagnosticSeverity",
    "EntityCatalog",
    "ENTITY_CONFIG",
    "DEFAULT_CATALOG",
    # Exceptions
    "WireNetworkError",
    "InvalidWireColorError",
    "UnknownEntityError",
    "CacheConsistencyError",
    "ReentrantUpdateError",
    "BlueprintFormatError",
    # Constants
    "TILE_SIZE",
    "WIRE_COLOR_PALETTE",
    "PASSIVE_WIRE_COLOR",
    "ELECTRIC_POLE_TYPE",
    "WireNetworkConfig",
    "DEFAULT_CONFIG",
]
