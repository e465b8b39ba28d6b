"""Lookup of layer configuration files referenced by name."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from loguru import logger

from mapconfig.core.errors import ConfigNotFoundError, ConfigParseError, MapIoError

# Checked in this order for every directory entry.
LAYER_CONFIG_SUFFIXES: tuple[str, ...] = (".layerconfig", ".json", ".config")


def read_json_file(file_path: str | Path) -> Any:
    """Read a UTF-8 JSON file.

    Raises
    ------
    MapIoError
        If the file cannot be read.
    ConfigParseError
        If the content is not valid JSON.
    """
    path = Path(file_path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise MapIoError(path, str(exc)) from exc
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigParseError(path, str(exc)) from exc


def find_layer_config(directory: str | Path, name: str) -> dict[str, Any]:
    """Find and parse the configuration file describing layer ``name``.

    Parameters
    ----------
    directory : str | Path
        Directory expected to hold the layer configuration.
    name : str
        Name hint; the first candidate whose filename contains it wins.

    Returns
    -------
    dict[str, Any]
        Parsed configuration. Falls back to the first candidate file when
        no filename contains ``name`` and to ``{}`` when the directory
        holds no candidate at all.

    Raises
    ------
    ConfigNotFoundError
        If ``directory`` cannot be listed.
    ConfigParseError
        If the chosen file is not valid JSON.

    Examples
    --------
    >>> find_layer_config("/maps/tiles", "tiles")  # doctest: +SKIP
    {'type': 'tileLayer', 'url': 'tiles/{z}/{x}/{y}.png'}
    """
    dir_path = Path(directory)
    try:
        entries = sorted(os.listdir(dir_path))
    except OSError as exc:
        raise ConfigNotFoundError(dir_path, name, str(exc)) from exc

    fallback: str | None = None
    for entry in entries:
        for suffix in LAYER_CONFIG_SUFFIXES:
            if not entry.endswith(suffix):
                continue
            if name in entry:
                logger.debug(f"Layer '{name}' matched {dir_path / entry}")
                return _read_layer_file(dir_path / entry)
            if fallback is None:
                fallback = entry

    if fallback is None:
        logger.debug(f"No layer configuration files in {dir_path}")
        return {}
    logger.debug(f"Layer '{name}' falls back to {dir_path / fallback}")
    return _read_layer_file(dir_path / fallback)


def _read_layer_file(file_path: Path) -> dict[str, Any]:
    """Read a layer file; non-object content counts as a parse error."""
    data = read_json_file(file_path)
    if not isinstance(data, dict):
        raise ConfigParseError(file_path, "layer configuration must be an object")
    return data
