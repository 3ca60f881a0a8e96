"""Tests for CLI module."""

import xml.etree.ElementTree as ET

from typer.testing import CliRunner

from ladderkit import __version__
from ladderkit.cli import app

runner = CliRunner()


def build_args(panels, bins, channel_map, output):
    return [
        "build",
        "--panels",
        str(panels),
        "--bins",
        str(bins),
        "--channel-map",
        str(channel_map),
        "--output",
        str(output),
        "--ils",
        "ILS600",
        "--ils",
        "ILS500",
        "--ils-channel",
        "3",
        "--suffix",
        "TK",
    ]


def test_cli_version():
    """Test version command."""
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert "py-ladderkit" in result.stdout
    assert __version__ in result.stdout


def test_cli_help():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "build" in result.stdout
    assert "copy" in result.stdout


def test_cli_build(sample_panels, sample_bins, sample_channel_map, temp_dir):
    output = temp_dir / "kit.xml"
    result = runner.invoke(app, build_args(sample_panels, sample_bins, sample_channel_map, output))

    assert result.exit_code == 0, result.stdout
    root = ET.parse(output).getroot()
    assert [e.text for e in root.findall("Kits/Set/LS/LSName")] == ["ILS600", "ILS500"]
    assert root.findtext("Kits/Set/Name") == "TestKit"


def test_cli_build_missing_bins(sample_panels, sample_channel_map, temp_dir):
    output = temp_dir / "kit.xml"
    result = runner.invoke(
        app, build_args(sample_panels, temp_dir / "nonexistent.txt", sample_channel_map, output)
    )
    assert result.exit_code != 0
    assert not output.exists()


def test_cli_build_malformed_panels(sample_bins, sample_channel_map, temp_dir):
    panels = temp_dir / "bad_panels.txt"
    panels.write_text("Panel\tX\nD3S1358\tblue\tlow\t110\t15\t4\n")

    result = runner.invoke(
        app, build_args(panels, sample_bins, sample_channel_map, temp_dir / "kit.xml")
    )
    assert result.exit_code == 1


def test_cli_missing_required_args():
    result = runner.invoke(app, ["build"])
    assert result.exit_code != 0


def test_cli_copy(temp_dir):
    source = temp_dir / "default.vol"
    source.write_text("volume data\n")
    destination = temp_dir / "kit.vol"

    result = runner.invoke(app, ["copy", str(source), str(destination)])

    assert result.exit_code == 0
    assert destination.read_text() == "volume data\n"


def test_cli_copy_missing_source(temp_dir):
    result = runner.invoke(app, ["copy", str(temp_dir / "nope.vol"), str(temp_dir / "kit.vol")])
    assert result.exit_code == 1


def test_cli_build_log_file(sample_panels, sample_bins, sample_channel_map, temp_dir):
    log_file = temp_dir / "build.log"
    args = build_args(sample_panels, sample_bins, sample_channel_map, temp_dir / "kit.xml")
    result = runner.invoke(app, args + ["--verbose", "--log-file", str(log_file)])

    assert result.exit_code == 0
    text = log_file.read_text()
    assert "Completed: Merging ladders" in text
    assert "DEBUG" in text


def test_cli_build_nested_windows(sample_bins, sample_channel_map, temp_dir):
    panels = temp_dir / "nested_panels.txt"
    panels.write_text(
        "Panel\tTestKit\n"
        "D3S1358\tblue\t100\t130\t10\t4\n"
        "TH01\tblue\t105\t110\t9.3\t4\n"
    )

    result = runner.invoke(
        app, build_args(panels, sample_bins, sample_channel_map, temp_dir / "kit.xml")
    )
    assert result.exit_code == 1
