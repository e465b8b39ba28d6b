"""Canonical layer type definitions and normalization utilities."""

from enum import StrEnum


class LayerKind(StrEnum):
    """Layer categories understood by the map editor."""

    TILE = "tileLayer"
    POINTS = "pointsLayer"
    CSV_TILES = "csvTiles"
    PIXELS = "pixelsLayer"
    GUIDE = "guideLayer"
    GRID = "gridLayer"
    IMAGE = "imageLayer"
    FEATURE_GROUP = "featureGroup"


class ShapeKind(StrEnum):
    """Child shape categories inside a feature group."""

    POLYGON = "polygon"
    MARKER = "marker"


_LAYER_TYPE_ALIASES: dict[str, LayerKind] = {
    "tilesLayer": LayerKind.TILE,
    LayerKind.TILE.value: LayerKind.TILE,
}

# Layer kinds whose ``url`` points inside the map directory and is made
# relative again on export.
URL_BEARING_KINDS: frozenset[str] = frozenset(
    {
        LayerKind.TILE.value,
        LayerKind.POINTS.value,
        LayerKind.PIXELS.value,
        LayerKind.IMAGE.value,
    }
)


def normalize_layer_type(raw_layer_type: str) -> str:
    """Collapse legacy layer type synonyms into canonical labels.

    Parameters
    ----------
    raw_layer_type : str
        Type label as found in a configuration file.

    Returns
    -------
    str
        Canonical label. Unknown labels are returned unchanged.

    Examples
    --------
    >>> normalize_layer_type("tilesLayer")
    'tileLayer'
    >>> normalize_layer_type("pointsLayer")
    'pointsLayer'
    """
    alias = _LAYER_TYPE_ALIASES.get(raw_layer_type)
    if alias is not None:
        return alias.value
    return raw_layer_type


def is_polygon_group(layer_type: str) -> bool:
    """Return True for legacy polygon collection types."""
    return "drawnPolygons" in layer_type or "polygons" in layer_type


def is_marker_group(layer_type: str) -> bool:
    """Return True for legacy marker collection types."""
    return "drawnMarkers" in layer_type
