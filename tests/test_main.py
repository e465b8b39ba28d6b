"""Tests for the command line entry point."""

import json
import sys
from pathlib import Path

import pytest
from loguru import logger

from main import main


@pytest.fixture(autouse=True)
def _restore_logger():
    """Reset loguru sinks replaced by ``main``."""
    yield
    logger.remove()
    logger.add(sys.stderr)


def test_new_writes_empty_map(tmp_path: Path) -> None:
    """``new`` should write a fresh map without base path."""
    target = tmp_path / "survey.map.json"

    assert main(["new", "survey", "--output", str(target)]) == 0

    data = json.loads(target.read_text(encoding="utf-8"))
    assert data["name"] == "survey"
    assert data["layers"] == {}


def test_load_prints_normalized_map(tmp_path: Path, capsys) -> None:
    """``load`` should print the canonical configuration."""
    map_path = tmp_path / "m.json"
    map_path.write_text(
        json.dumps({"type": "atlas", "tilesLayers": {"a": {"type": "tilesLayer"}}}),
        encoding="utf-8",
    )

    assert main(["load", str(map_path), "--force-type"]) == 0

    printed = json.loads(capsys.readouterr().out)
    assert printed["type"] == "map"
    assert printed["layers"]["a"]["type"] == "tileLayer"


def test_load_missing_file_fails(tmp_path: Path) -> None:
    """Missing input should give a non-zero exit code."""
    assert main(["load", str(tmp_path / "missing.json")]) == 1
