from typing import Optional

"""Exceptions raised by the wiring subsystem."""


class WireNetworkError(Exception):
    """Base class for all wiring errors."""

    def __init__(self, message: str, entity_number: Optional[int] = None) -> None:
        self.message = message
        self.entity_number = entity_number
        location = f" (entity {entity_number})" if entity_number is not None else ""
        super().__init__(f"{message}{location}")


class InvalidWireColorError(WireNetworkError):
    """A connection uses a color outside the fixed palette."""

    def __init__(self, color: str) -> None:
        self.color = color
        super().__init__(f"Unknown wire color '{color}'")


class UnknownEntityError(WireNetworkError):
    """An entity name has no entry in the entity catalog."""

    def __init__(self, name: str, entity_number: Optional[int] = None) -> None:
        self.name = name
        super().__init__(f"Unknown entity '{name}'", entity_number)


class CacheConsistencyError(WireNetworkError):
    """The rendered-wire cache disagrees with the diff that drives it."""

    def __init__(self, message: str, wire_hash: Optional[str] = None) -> None:
        self.wire_hash = wire_hash
        suffix = f": {wire_hash}" if wire_hash is not None else ""
        super().__init__(f"{message}{suffix}")


class ReentrantUpdateError(WireNetworkError):
    """A wire update was triggered while another one was still running."""


class BlueprintFormatError(WireNetworkError):
    """Blueprint data could not be decoded."""
