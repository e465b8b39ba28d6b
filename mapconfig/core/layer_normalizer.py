"""Normalization of a single raw layer configuration."""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any

from loguru import logger

from mapconfig.core.errors import MalformedLayerError
from mapconfig.core.layer_types import (
    LayerKind,
    ShapeKind,
    is_marker_group,
    is_polygon_group,
    normalize_layer_type,
)
from mapconfig.core.paths import resolve_url

# Looked up in this order; the first present value becomes ``url``.
URL_FIELDS: tuple[str, ...] = (
    "url",
    "urlTemplate",
    "tilesUrlTemplate",
    "tileUrlTemplate",
    "pointsUrlTemplate",
    "imageUrl",
)


def require_layer_type(raw: Any, layer_key: str | None = None) -> str:
    """Return the ``type`` of a raw layer or raise ``MalformedLayerError``."""
    if not isinstance(raw, Mapping):
        raise MalformedLayerError(
            layer_key, f"expected an object, got {type(raw).__name__}"
        )
    layer_type = raw.get("type")
    if not isinstance(layer_type, str):
        raise MalformedLayerError(layer_key, "missing or non-string 'type'")
    return layer_type


def _pop_url(layer: dict[str, Any], layer_key: str | None) -> str | None:
    """Remove every URL alias from ``layer`` and return the first set one."""
    url = None
    for field in URL_FIELDS:
        value = layer.pop(field, None)
        if url is None and value:
            if not isinstance(value, str):
                raise MalformedLayerError(layer_key, f"'{field}' must be a string")
            url = value
    return url


def _shape_children(
    shapes: Any, default_type: ShapeKind, layer_key: str | None
) -> dict[str, Any]:
    """Copy a shape mapping, defaulting each child's ``type``."""
    if shapes is None:
        return {}
    if not isinstance(shapes, Mapping):
        raise MalformedLayerError(
            layer_key, f"'{default_type.value}' shapes must be an object"
        )
    children: dict[str, Any] = {}
    for shape_key, shape in shapes.items():
        if not isinstance(shape, Mapping):
            raise MalformedLayerError(
                layer_key, f"shape '{shape_key}' must be an object"
            )
        child = dict(shape)
        child.setdefault("type", default_type.value)
        children[shape_key] = child
    return children


def normalize_layer(
    raw: Mapping[str, Any],
    base_path: str = "",
    layer_key: str | None = None,
) -> dict[str, Any]:
    """Build the canonical form of one layer configuration.

    Parameters
    ----------
    raw : Mapping[str, Any]
        Layer configuration with arbitrary legacy keys. Not modified.
    base_path : str
        Directory or URL prefix that relative URLs are resolved against.
    layer_key : str | None
        Key of the layer in its map, used in error messages.

    Returns
    -------
    dict[str, Any]
        New layer configuration with a single resolved ``url``, a
        canonical ``type`` and, for feature groups, a nested ``layers``
        mapping of child shapes.

    Raises
    ------
    MalformedLayerError
        If ``raw`` is not an object, has no string ``type`` or a URL
        field holds a non-string value.

    Examples
    --------
    >>> normalize_layer({"type": "tilesLayer", "tilesUrlTemplate": "t/{z}.png"}, "/m/")
    {'type': 'tileLayer', 'url': '/m/t/{z}.png'}
    """
    layer_type = require_layer_type(raw, layer_key)
    layer = copy.deepcopy(dict(raw))

    url = _pop_url(layer, layer_key)
    if url:
        layer["url"] = resolve_url(base_path, url)

    layer["type"] = normalize_layer_type(layer_type)

    if is_polygon_group(layer_type):
        layer["type"] = LayerKind.FEATURE_GROUP.value
        layer["layers"] = _shape_children(
            layer.pop("polygons", None), ShapeKind.POLYGON, layer_key
        )
    if is_marker_group(layer_type):
        layer["type"] = LayerKind.FEATURE_GROUP.value
        layer["layers"] = _shape_children(
            layer.pop("markers", None), ShapeKind.MARKER, layer_key
        )

    layer.pop("basePath", None)
    if layer["type"] != layer_type:
        logger.debug(f"Layer '{layer_key}': type '{layer_type}' -> '{layer['type']}'")
    return layer
