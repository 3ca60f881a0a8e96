"""Pytest configuration and fixtures."""

import json
import sys
import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest

# Add src directory to path so tests use local code, not installed package
project_root = Path(__file__).parent.parent
src_dir = project_root / "src"
if str(src_dir) not in sys.path:
    sys.path.insert(0, str(src_dir))


PANELS_TEXT = (
    "Version\tGMID-X v1.0\n"
    "# marker\tdye\tmin\tmax\tcontrol\trepeat\tfirst ext\tlast ext\n"
    "Panel\tTestKit\n"
    "D3S1358\tblue\t100\t110\t10,11\t4\n"
    "TH01\tblue\t109\t120\t9.3\t4\t3\t13.3\n"
    "PentaE\tgreen\t200\t260\t5,6\t5\n"
)

BINS_TEXT = (
    "Panel Name\tTestKit\n"
    "Marker Name\tD3S1358\n"
    "9\t100\t0.5\t0.5\n"
    "10\t104\t0.5\t0.5\n"
    "11\t108\t0.5\t0.5\tvirtual\n"
    "Marker Name\tTH01\n"
    "4\t150\t0.5\t0.5\n"
    "9.3\t173\t0.5\t0.5\tH\n"
    "10\t174\t0.5\t0.5\n"
    "Marker Name\tPentaE\n"
    "5\t210\t0.5\t0.5\n"
    "6\t215\t0.5\t0.5\n"
)

CHANNEL_MAP = {
    "channels": [
        {"kit_channel": 1, "fsa_channel": 1, "color": "blue", "dye": "FL"},
        {"kit_channel": 2, "fsa_channel": 2, "color": "green", "dye": "JOE"},
        {"kit_channel": 3, "fsa_channel": 4, "color": "orange", "dye": "CXR"},
    ]
}


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_panels(temp_dir: Path) -> Path:
    """Create a sample panels file."""
    path = temp_dir / "panels.txt"
    path.write_text(PANELS_TEXT)
    return path


@pytest.fixture
def sample_bins(temp_dir: Path) -> Path:
    """Create a sample bins file."""
    path = temp_dir / "bins.txt"
    path.write_text(BINS_TEXT)
    return path


@pytest.fixture
def sample_channel_map(temp_dir: Path) -> Path:
    """Create a sample channel map file."""
    path = temp_dir / "channels.json"
    path.write_text(json.dumps(CHANNEL_MAP))
    return path
