#!/usr/bin/env python3
"""
Wirenet CLI - Command-line interface for the passive wire network.

This module provides the entry point for the 'wirenet' command installed via pip.

Usage:
    wirenet blueprint.json                   # Summarize the wire network
    wirenet blueprint.txt --json             # Blueprint string in, JSON report out
    wirenet blueprint.json -o report.json    # Save the report to a file
    wirenet blueprint.json --plot net.png    # Draw the network (needs matplotlib)
"""

import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, Optional

import click

from wire_network.src.blueprint.blueprint_io import load_blueprint
from wire_network.src.common.constants import DEFAULT_CONFIG, WireNetworkConfig
from wire_network.src.common.diagnostics import ProgramDiagnostics
from wire_network.src.common.exceptions import WireNetworkError
from wire_network.src.network.wires_container import WiresContainer


def build_report(container: WiresContainer) -> Dict[str, Any]:
    """Plain-data description of a container's poles and wires."""
    directions = container.pole_directions()

    def describe(wire) -> Dict[str, Any]:
        curve = wire.curve
        connection = wire.connection
        return {
            "hash": wire.wire_hash,
            "color": curve.color_name,
            "entities": [connection.entity_number_1, connection.entity_number_2],
            "kind": curve.kind,
            "position": list(curve.position),
            "pivot": list(curve.pivot),
            "scale_x": curve.scale_x,
            "sag": round(curve.sag, 4),
        }

    return {
        "label": container.bp.label,
        "poles": [
            {
                "entity_number": pole.entity_number,
                "name": pole.name,
                "direction": directions[pole.entity_number],
                "neighbors": sorted(container.cache.neighbors(pole.entity_number) or []),
            }
            for pole in sorted(container.bp.poles(), key=lambda p: p.entity_number)
        ],
        "passive_wires": [
            describe(w) for _, w in sorted(container.passive_wires.items())
        ],
        "explicit_wires": [
            describe(w) for _, w in sorted(container.explicit_wires.items())
        ],
    }


def format_report(report: Dict[str, Any]) -> str:
    lines = [f"{report['label']}"]
    lines.append(f"Poles ({len(report['poles'])}):")
    for pole in report["poles"]:
        neighbors = ", ".join(str(n) for n in pole["neighbors"]) or "-"
        lines.append(
            f"  #{pole['entity_number']} {pole['name']} "
            f"direction={pole['direction']} neighbors=[{neighbors}]"
        )
    lines.append(f"Passive wires ({len(report['passive_wires'])}):")
    for wire in report["passive_wires"]:
        lines.append(f"  {wire['hash']} {wire['kind']} sag={wire['sag']}")
    lines.append(f"Explicit wires ({len(report['explicit_wires'])}):")
    for wire in report["explicit_wires"]:
        lines.append(f"  {wire['hash']} {wire['kind']} sag={wire['sag']}")
    return "\n".join(lines)


def analyze_blueprint_file(
    source: Path,
    log_level: str = "warning",
    use_json: bool = False,
    plot: Optional[Path] = None,
    config: WireNetworkConfig = DEFAULT_CONFIG,
) -> tuple[bool, str, list]:
    """
    Load a blueprint and render its wire network.

    Args:
        source: File holding blueprint JSON or a blueprint string
        log_level: Logging verbosity level
        use_json: If True, return a JSON report instead of text
        plot: Optional image path for a debug drawing of the network
        config: Rendering configuration

    Returns:
        (success: bool, result: str, diagnostics: list)
    """
    diagnostics = ProgramDiagnostics(log_level=log_level)

    try:
        blueprint = load_blueprint(source, diagnostics=diagnostics)
        container = WiresContainer(blueprint, config=config, diagnostics=diagnostics)
        container.render_existing()
    except WireNetworkError as e:
        diagnostics.error(str(e), stage="blueprint")
        return False, str(e), diagnostics.get_messages()

    if plot is not None:
        from wire_network.src.rendering.network_debug_viz import NetworkVisualizer

        NetworkVisualizer(container).render(plot)
        diagnostics.info(f"Network drawing saved to {plot}", stage="render")

    report = build_report(container)
    result = json.dumps(report, indent=2) if use_json else format_report(report)
    return True, result, diagnostics.get_messages()


def setup_logging(level: str) -> None:
    """Setup logging configuration."""
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")
    logging.basicConfig(level=numeric_level, format="%(levelname)s: %(message)s")


@click.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "-o",
    "--output",
    type=click.Path(path_type=Path),
    help="Output file for the report (default: stdout)",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=DEFAULT_CONFIG.default_log_level,
    help="Set the logging level",
)
@click.option("--json", "use_json", is_flag=True, help="Output the report as JSON")
@click.option(
    "--plot",
    type=click.Path(path_type=Path),
    help="Draw the wire network to an image file (requires matplotlib)",
)
@click.option(
    "--tile-size",
    type=int,
    default=DEFAULT_CONFIG.tile_size,
    help=f"Pixels per tile (default: {DEFAULT_CONFIG.tile_size})",
)
def main(input_file, output, log_level, use_json, plot, tile_size):
    """Synthesize and render the wire network of a Factorio blueprint."""
    setup_logging(log_level)
    verbose = log_level in ["debug", "info"]

    if tile_size <= 0:
        click.echo("Error: --tile-size must be positive", err=True)
        sys.exit(1)
    config = replace(DEFAULT_CONFIG, tile_size=tile_size)

    if verbose:
        click.echo(f"Analyzing {input_file}...", err=True)

    success, result, diagnostic_messages = analyze_blueprint_file(
        input_file,
        log_level=log_level,
        use_json=use_json,
        plot=plot,
        config=config,
    )

    if not success:
        click.echo(f"Analysis failed: {result}", err=True)
        sys.exit(1)

    if output:
        try:
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_text(result, encoding="utf-8")
            if verbose:
                click.echo(f"Report saved to {output}", err=True)
        except OSError as e:
            click.echo(f"Failed to write output file: {e}", err=True)
            sys.exit(1)
    else:
        click.echo(result)

    if verbose:
        msg_count = len(diagnostic_messages) if diagnostic_messages else 0
        msg = (
            f"Analysis completed with {msg_count} diagnostic(s)."
            if msg_count
            else "Analysis completed successfully."
        )
        click.echo(msg, err=True)


if __name__ == "__main__":
    main()
