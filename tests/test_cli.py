"""
Tests for the CLI module (wire_network/cli.py).

These tests cover the command-line interface and analyze_blueprint_file function.
"""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from wire_network.cli import analyze_blueprint_file, main, setup_logging
from wire_network.src.common.entity_catalog import DEFAULT_CATALOG

SAMPLES = Path(__file__).parent / "sample_blueprints"
LAMP_ROW = SAMPLES / "lamp_row.json"
MIXED_POLES = SAMPLES / "mixed_poles.json"


class TestAnalyzeBlueprintFile:
    """Tests for the analyze_blueprint_file function."""

    def test_text_report(self):
        """Text report lists poles and both kinds of wires."""
        success, result, messages = analyze_blueprint_file(LAMP_ROW)
        assert success is True
        assert result.startswith("Lamp row")
        assert "Poles (3):" in result
        assert "Passive wires (2):" in result
        assert "Explicit wires (2):" in result
        assert messages == []

    def test_json_report(self):
        """JSON output is valid JSON."""
        success, result, _ = analyze_blueprint_file(LAMP_ROW, use_json=True)
        assert success is True
        report = json.loads(result)
        assert [w["hash"] for w in report["passive_wires"]] == ["1-3", "3-5"]
        assert [w["hash"] for w in report["explicit_wires"]] == [
            "green-2-1-4-1",
            "red-1-1-2-1",
        ]
        assert all(w["color"] == "copper" for w in report["passive_wires"])

    def test_pole_directions_in_report(self):
        success, result, _ = analyze_blueprint_file(LAMP_ROW, use_json=True)
        poles = json.loads(result)["poles"]
        assert [(p["entity_number"], p["direction"]) for p in poles] == [
            (1, 4),
            (3, 4),
            (5, 4),
        ]
        assert poles[1]["neighbors"] == [1, 5]

    def test_mixed_pole_reach(self):
        """Each wire is limited by the shorter reach of its two poles."""
        success, result, messages = analyze_blueprint_file(MIXED_POLES, use_json=True)
        assert success is True
        report = json.loads(result)
        assert [w["hash"] for w in report["passive_wires"]] == ["1-3", "1-4"]
        big_pole = [p for p in report["poles"] if p["entity_number"] == 2][0]
        assert big_pole["neighbors"] == []

    def test_warnings_are_reported(self):
        """Unknown entities and dangling connections produce warnings."""
        _, _, messages = analyze_blueprint_file(MIXED_POLES)
        assert len(messages) == 2
        assert any("iron-chest" in m for m in messages)

    def test_bad_blueprint(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text('{"blueprint": {"label": "nothing"}}')
        success, result, messages = analyze_blueprint_file(path)
        assert success is False
        assert "entities" in result
        assert messages


class TestMain:
    """Tests for the click command."""

    def test_prints_report(self):
        result = CliRunner().invoke(main, [str(LAMP_ROW)])
        assert result.exit_code == 0
        assert "Passive wires (2):" in result.output

    def test_writes_output_file(self, tmp_path):
        output = tmp_path / "out" / "report.json"
        result = CliRunner().invoke(main, [str(LAMP_ROW), "--json", "-o", str(output)])
        assert result.exit_code == 0
        assert json.loads(output.read_text())["label"] == "Lamp row"

    def test_tile_size(self):
        result = CliRunner().invoke(main, [str(LAMP_ROW), "--json", "--tile-size", "64"])
        assert result.exit_code == 0
        report = json.loads(result.stdout)
        # Poles 1 and 3 sit at x=0.5 and x=6.5 tiles, both facing south
        hook_x, _ = DEFAULT_CATALOG.wire_connection_point(
            "small-electric-pole", "copper", 1, 4
        )
        wire = report["passive_wires"][0]
        assert wire["position"][0] == pytest.approx(((0.5 + 6.5) / 2 + hook_x) * 64)

    def test_invalid_tile_size(self):
        result = CliRunner().invoke(main, [str(LAMP_ROW), "--tile-size", "0"])
        assert result.exit_code == 1

    def test_missing_file(self):
        result = CliRunner().invoke(main, ["does-not-exist.json"])
        assert result.exit_code != 0

    def test_analysis_failure(self, tmp_path):
        path = tmp_path / "broken.txt"
        path.write_text("9garbage")
        result = CliRunner().invoke(main, [str(path)])
        assert result.exit_code == 1

    def test_plot(self, tmp_path):
        pytest.importorskip("matplotlib")
        image = tmp_path / "network.png"
        result = CliRunner().invoke(main, [str(LAMP_ROW), "--plot", str(image)])
        assert result.exit_code == 0
        assert image.exists()


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_invalid_level(self):
        with pytest.raises(ValueError):
            setup_logging("loud")

    def test_valid_level(self):
        setup_logging("debug")
