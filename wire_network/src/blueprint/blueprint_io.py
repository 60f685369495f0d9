"""Reading and writing blueprints as JSON or blueprint strings.

A blueprint string is a version byte (``"0"``) followed by the base64 of the
zlib-compressed blueprint JSON. The codec is draftsman's; the decoded JSON is
kept in the layout the editor works on rather than restructured into
draftsman's entity model.
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

from draftsman.error import MalformedBlueprintStringError
from draftsman.utils import JSON_to_string, string_to_JSON

from wire_network.src.common.diagnostics import ProgramDiagnostics
from wire_network.src.common.entity_catalog import DEFAULT_CATALOG, EntityCatalog
from wire_network.src.common.exceptions import BlueprintFormatError

from .blueprint import Blueprint
from .wire_connections import WireConnections

BLUEPRINT_STRING_VERSION = "0"


def decode_blueprint_string(text: str) -> Dict[str, Any]:
    text = text.strip()
    if not text.startswith(BLUEPRINT_STRING_VERSION):
        raise BlueprintFormatError(
            f"Unsupported blueprint string version '{text[:1]}'"
        )
    try:
        data = string_to_JSON(text)
    except MalformedBlueprintStringError as e:
        raise BlueprintFormatError(f"Malformed blueprint string: {e}") from e
    if not isinstance(data, dict):
        raise BlueprintFormatError("Blueprint string does not hold a JSON object")
    return data


def encode_blueprint_string(data: Dict[str, Any]) -> str:
    return JSON_to_string(data)


def blueprint_from_dict(
    data: Dict[str, Any],
    catalog: EntityCatalog = DEFAULT_CATALOG,
    diagnostics: Optional[ProgramDiagnostics] = None,
) -> Blueprint:
    """Build a :class:`Blueprint` from blueprint JSON.

    Entities unknown to the catalog are skipped with a warning, along with
    any connection that references them.
    """
    diagnostics = diagnostics or ProgramDiagnostics()
    body = data.get("blueprint", data)
    if not isinstance(body, dict) or "entities" not in body:
        raise BlueprintFormatError("Blueprint data has no 'entities' list")

    bp = Blueprint(catalog)
    bp.label = body.get("label", bp.label)

    raw_entities = body.get("entities") or []
    with bp.transaction("Load Blueprint"):
        for raw in raw_entities:
            name = raw.get("name")
            if name not in catalog:
                diagnostics.warning(
                    f"Skipping entity '{name}' without wire data",
                    stage="blueprint",
                    entity_number=raw.get("entity_number"),
                )
                continue
            position = raw.get("position", {})
            bp.create_entity(
                name,
                (float(position.get("x", 0)), float(position.get("y", 0))),
                direction=int(raw.get("direction", 0)),
                entity_number=int(raw["entity_number"]),
            )

        for raw in raw_entities:
            number = raw.get("entity_number")
            if number not in bp.entities:
                continue
            for connection in WireConnections.deserialize(
                number, raw.get("connections", {})
            ):
                if (
                    connection.entity_number_1 not in bp.entities
                    or connection.entity_number_2 not in bp.entities
                ):
                    diagnostics.warning(
                        "Dropping connection to a missing entity",
                        stage="blueprint",
                        entity_number=number,
                    )
                    continue
                bp.wire_connections.create(connection)

    diagnostics.info(
        f"Loaded {len(bp.entities)} entities, {len(bp.poles())} poles, "
        f"{len(bp.wire_connections)} explicit connections",
        stage="blueprint",
    )
    return bp


def load_blueprint(
    source: Union[str, Path],
    catalog: EntityCatalog = DEFAULT_CATALOG,
    diagnostics: Optional[ProgramDiagnostics] = None,
) -> Blueprint:
    """Load a blueprint from a file holding JSON or a blueprint string."""
    text = Path(source).read_text(encoding="utf-8").strip()
    if text.startswith("{"):
        try:
            data = json.loads(text)
        except ValueError as e:
            raise BlueprintFormatError(f"Malformed blueprint JSON: {e}") from e
    else:
        data = decode_blueprint_string(text)
    return blueprint_from_dict(data, catalog, diagnostics)


__all__ = [
    "decode_blueprint_string",
    "encode_blueprint_string",
    "blueprint_from_dict",
    "load_blueprint",
]
