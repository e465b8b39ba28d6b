"""Builders for new layer configurations."""

from __future__ import annotations

from typing import Any

from mapconfig.core.layer_types import LayerKind

DEFAULT_TILE_SIZE = 256
DEFAULT_BOUNDS: list[list[int]] = [[-256, 0], [0, 256]]

_OSM_ATTRIBUTION = '&copy<a href="http://www.openstreetmap.org/copyright">OpenStreetMap</a>'

# name -> (url template, attribution, base layer)
TILE_PRESETS: dict[str, tuple[str, str | None, bool]] = {
    "Wikimedia Maps": (
        "https://maps.wikimedia.org/osm-intl/{z}/{x}/{y}.png",
        f"Wikimedia maps | {_OSM_ATTRIBUTION}",
        True,
    ),
    "OpenStreetMap Standard": (
        "http://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png",
        _OSM_ATTRIBUTION,
        True,
    ),
    "OpenSkyMap": (
        "http://tiles.skimap.org/openskimap/{z}/{x}/{y}.png",
        None,
        False,
    ),
}


def tile_layer_config(
    name: str,
    url: str,
    tile_size: int = DEFAULT_TILE_SIZE,
    min_zoom: int = 0,
    max_zoom: int = 10,
    min_level: int = 0,
    max_level: int = 0,
    base_layer: bool = True,
    attribution: str | None = None,
) -> dict[str, Any]:
    """Build a ``tileLayer`` configuration.

    Parameters
    ----------
    name : str
        Layer name.
    url : str
        Tile URL template. A ``{level}`` placeholder marks a multi-level
        layer.
    tile_size : int
        Tile edge in pixels.
    min_zoom, max_zoom : int
        Zoom range, also used as native zoom range.
    min_level, max_level : int
        Level range for multi-level templates.
    base_layer : bool
        False for overlays.
    attribution : str | None
        Attribution HTML.

    Returns
    -------
    dict[str, Any]
        Layer configuration.

    Examples
    --------
    >>> tile_layer_config("dem", "tiles/{level}/{z}/{x}/{y}.png")["multiLevel"]
    True
    """
    return {
        "name": name,
        "type": LayerKind.TILE.value,
        "url": url,
        "baseLayer": base_layer,
        "multiLevel": "{level}" in url,
        "options": {
            "tileSize": tile_size or DEFAULT_TILE_SIZE,
            "minNativeZoom": min_zoom,
            "maxNativeZoom": max_zoom,
            "minZoom": min_zoom,
            "maxZoom": max_zoom,
            "minLevel": min_level,
            "maxLevel": max_level,
            "attribution": attribution,
        },
    }


def preset_tile_layer(preset: str, name: str | None = None) -> dict[str, Any]:
    """Build a tile layer from one of ``TILE_PRESETS``.

    Raises
    ------
    KeyError
        If ``preset`` is unknown.
    """
    url, attribution, base_layer = TILE_PRESETS[preset]
    return tile_layer_config(
        name or preset,
        url,
        base_layer=base_layer,
        attribution=attribution,
    )


def csv_tiles_config(
    name: str,
    url: str,
    tile_size: int = DEFAULT_TILE_SIZE,
    size: int = DEFAULT_TILE_SIZE,
    bounds: list[list[float]] | None = None,
    min_zoom: int = 0,
    max_zoom: int = 10,
    local_rs: bool = True,
    grid: bool = True,
    columns: dict[str, int | None] | None = None,
) -> dict[str, Any]:
    """Build a ``csvTiles`` configuration.

    ``columns`` maps the ``x``, ``y`` and optional ``z`` coordinates to CSV
    column indices and defaults to ``x=0, y=1``.
    """
    column_map: dict[str, int | None] = {"x": 0, "y": 1, "z": None}
    if columns:
        column_map.update(columns)
    return {
        "name": name,
        "type": LayerKind.CSV_TILES.value,
        "url": url,
        "options": {
            "tileSize": tile_size or DEFAULT_TILE_SIZE,
            "size": size or DEFAULT_TILE_SIZE,
            "bounds": bounds if bounds is not None else [list(b) for b in DEFAULT_BOUNDS],
            "minZoom": min_zoom,
            "maxZoom": max_zoom,
            "localRS": local_rs,
            "grid": grid,
            "columns": column_map,
        },
    }


def guide_layer_config(
    name: str = "guide",
    size: int = DEFAULT_TILE_SIZE,
    tile_size: int = DEFAULT_TILE_SIZE,
) -> dict[str, Any]:
    """Build a ``guideLayer`` configuration."""
    return {
        "name": name or "guide",
        "type": LayerKind.GUIDE.value,
        "size": size or DEFAULT_TILE_SIZE,
        "tileSize": tile_size or DEFAULT_TILE_SIZE,
    }
