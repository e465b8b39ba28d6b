"""Pytest bootstrap helpers and shared map fixtures."""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


def _append_repo_root() -> None:
    """Ensure repository root is present in import path."""
    repo_root = Path(__file__).resolve().parents[1]
    repo_root_text = str(repo_root)
    if repo_root_text in sys.path:
        return
    sys.path.insert(0, repo_root_text)


_append_repo_root()


def _write_json(path: Path, data: object) -> Path:
    """Write ``data`` as JSON, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.fixture
def map_dir(tmp_path: Path) -> Path:
    """Map directory with one layer referenced by folder name.

    Layout::

        maps/
            demo.map.json
            dapi/dapi.layerconfig
            dapi/notes.json
    """
    root = tmp_path / "maps"
    _write_json(
        root / "dapi" / "dapi.layerconfig",
        {"type": "tilesLayer", "tilesUrlTemplate": "tiles/{z}/{x}/{y}.png"},
    )
    _write_json(root / "dapi" / "notes.json", {"type": "pointsLayer"})
    _write_json(
        root / "demo.map.json",
        {
            "type": "map",
            "name": "demo",
            "author": "someone",
            "tilesLayers": {"dapi": "dapi"},
            "pointsLayers": {
                "cells": {"type": "pointsLayer", "pointsUrlTemplate": "points/{x}.csv"}
            },
        },
    )
    return root
